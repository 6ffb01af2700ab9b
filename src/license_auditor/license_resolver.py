from __future__ import annotations

import json
import logging
import queue
import threading
from pathlib import Path
from typing import Any, Iterable, List, Optional

from .dependency_scanner import MANIFEST_FILE, PACKAGES_DIR
from .types import NO_LICENSE, PackageLicense
from .types_settings import DEFAULT_MAX_WORKERS, DEFAULT_READ_TIMEOUT

logger = logging.getLogger(__name__)


def _declared_license(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value or None
    # Legacy npm manifests use {"type": "MIT", "url": "..."}
    if isinstance(value, dict) and isinstance(value.get("type"), str):
        return value["type"] or None
    return None


def package_manifest_path(project_dir: Path, package: str) -> Path:
    return project_dir / PACKAGES_DIR / package / MANIFEST_FILE


def read_package_license(project_dir: Path, package: str) -> PackageLicense:
    path = package_manifest_path(project_dir, package)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.debug("No readable manifest for %s at %s: %s", package, path, exc)
        return PackageLicense(package=package, license=NO_LICENSE)

    license_name = _declared_license(data.get("license")) if isinstance(data, dict) else None
    if license_name is None:
        logger.debug("%s declares no license", package)
        return PackageLicense(package=package, license=NO_LICENSE)
    return PackageLicense(package=package, license=license_name)


def resolve_licenses(
    project_dir: Path,
    packages: Iterable[str],
    max_workers: int = DEFAULT_MAX_WORKERS,
    read_timeout: float = DEFAULT_READ_TIMEOUT,
) -> List[PackageLicense]:
    """Resolve every package's declared license on a bounded pool of daemon threads.

    Results keep the order of ``packages``. The run gives up once no read
    has finished for ``read_timeout`` seconds; every package still pending
    then resolves to the missing-license sentinel. Workers are daemon
    threads, so a read stuck in the kernel never keeps the process alive.
    """

    names = list(packages)
    if not names:
        return []

    pending: "queue.Queue[int]" = queue.Queue()
    for index in range(len(names)):
        pending.put(index)

    results: List[Optional[PackageLicense]] = [None] * len(names)
    finished = threading.Condition()
    completed = 0

    def _work() -> None:
        nonlocal completed
        while True:
            try:
                index = pending.get_nowait()
            except queue.Empty:
                return
            resolved = read_package_license(project_dir, names[index])
            with finished:
                results[index] = resolved
                completed += 1
                finished.notify_all()

    for number in range(max(1, min(max_workers, len(names)))):
        threading.Thread(target=_work, name=f"license-reader-{number}", daemon=True).start()

    with finished:
        while completed < len(names):
            seen = completed
            if not finished.wait_for(lambda: completed > seen, timeout=read_timeout):
                break
        snapshot = list(results)

    # Stop idle workers from picking up reads nobody will wait for.
    while True:
        try:
            pending.get_nowait()
        except queue.Empty:
            break

    resolved_all: List[PackageLicense] = []
    for name, result in zip(names, snapshot):
        if result is None:
            logger.warning("Timed out reading the manifest of %s after %.1fs", name, read_timeout)
            result = PackageLicense(package=name, license=NO_LICENSE)
        resolved_all.append(result)
    return resolved_all
