from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Tuple

from .errors import ManifestReadError
from .types import DeepMode, DependencyMode

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
PACKAGES_DIR = "node_modules"
HIDDEN_PREFIX = "."
SCOPE_PREFIX = "@"


def list_entries(folder: Path) -> List[str]:
    """Return the sorted names directly under ``folder``; empty when it cannot be listed."""

    try:
        return sorted(entry.name for entry in folder.iterdir())
    except OSError:
        logger.debug("Cannot list %s; treating as empty", folder)
        return []


def read_manifest_dependencies(project_dir: Path) -> Tuple[List[str], List[str]]:
    """Return the (production, development) dependency names declared in package.json."""

    path = project_dir / MANIFEST_FILE
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestReadError(path, str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise ManifestReadError(path, f"invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise ManifestReadError(path, "expected a JSON object at the top level")

    def _names(block: object) -> List[str]:
        return list(block) if isinstance(block, dict) else []

    return _names(data.get("dependencies")), _names(data.get("devDependencies"))


def list_installed_packages(project_dir: Path) -> List[str]:
    """List every installed package, expanding ``@scope`` directories to ``@scope/name``."""

    root = project_dir / PACKAGES_DIR
    top_level = list_entries(root)

    packages = [
        name
        for name in top_level
        if not name.startswith(HIDDEN_PREFIX) and not name.startswith(SCOPE_PREFIX)
    ]
    for scope in (name for name in top_level if name.startswith(SCOPE_PREFIX)):
        packages.extend(
            f"{scope}/{name}"
            for name in list_entries(root / scope)
            if not name.startswith(HIDDEN_PREFIX)
        )
    return packages


def enumerate_packages(project_dir: Path, mode: DependencyMode) -> List[str]:
    if isinstance(mode, DeepMode):
        packages = list_installed_packages(project_dir)
        logger.info("Found %d installed packages under %s", len(packages), project_dir / PACKAGES_DIR)
        return packages

    prod, dev = read_manifest_dependencies(project_dir)
    packages = prod + dev if mode.include_dev else prod
    logger.info(
        "Found %d declared dependencies (%d production, %d development)",
        len(packages),
        len(prod),
        len(dev),
    )
    return packages
