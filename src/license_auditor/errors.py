from __future__ import annotations

from pathlib import Path


class LicenseAuditorError(Exception):
    """A required input could not be read; the audit cannot continue."""

    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


class ConfigReadError(LicenseAuditorError):
    def __init__(self, path: Path, detail: str = ""):
        message = f"Could not read config from {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, path)


class ManifestReadError(LicenseAuditorError):
    def __init__(self, path: Path, detail: str = ""):
        message = f"Could not read {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, path)
