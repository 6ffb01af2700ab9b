from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .types_dependencies import DependencyMode, ShallowMode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "allowed-licenses.json"
DEFAULT_MAX_WORKERS = 16
DEFAULT_READ_TIMEOUT = 10.0

WORKERS_ENV = "LICENSE_AUDITOR_WORKERS"
READ_TIMEOUT_ENV = "LICENSE_AUDITOR_READ_TIMEOUT"


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r; expected an integer", name, raw)
        return default
    return value if value > 0 else default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r; expected a number", name, raw)
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class AuditSettings:
    """Immutable run configuration built once from the command line."""

    project_dir: Path = field(default_factory=lambda: Path("."))
    config_path: Path = field(default_factory=lambda: Path(DEFAULT_CONFIG_FILE))
    mode: DependencyMode = field(default_factory=ShallowMode)
    count_only: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS
    read_timeout: float = DEFAULT_READ_TIMEOUT

    @classmethod
    def build(
        cls,
        project_dir: Path,
        mode: DependencyMode,
        config: Optional[str] = None,
        count_only: bool = False,
        max_workers: Optional[int] = None,
        read_timeout: Optional[float] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "AuditSettings":
        """Merge CLI values over environment values over defaults."""

        env = os.environ if env is None else env
        return cls(
            project_dir=project_dir,
            config_path=resolve_config_path(project_dir, config),
            mode=mode,
            count_only=count_only,
            max_workers=max_workers or _env_int(env, WORKERS_ENV, DEFAULT_MAX_WORKERS),
            read_timeout=read_timeout or _env_float(env, READ_TIMEOUT_ENV, DEFAULT_READ_TIMEOUT),
        )


def resolve_config_path(project_dir: Path, candidate: Optional[str]) -> Path:
    """Return the policy path, falling back to the default unless ``candidate`` ends in .json."""

    if candidate and candidate.endswith(".json"):
        path = Path(candidate)
    else:
        if candidate:
            logger.warning(
                "Ignoring --config %s (not a .json file); using %s", candidate, DEFAULT_CONFIG_FILE
            )
        path = Path(DEFAULT_CONFIG_FILE)
    return path if path.is_absolute() else project_dir / path
