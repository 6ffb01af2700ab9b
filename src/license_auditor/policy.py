from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from .errors import ConfigReadError
from .types import Policy, PolicyException

logger = logging.getLogger(__name__)


def _load_json(path: Path) -> dict:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigReadError(path, str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise ConfigReadError(path, f"invalid JSON ({exc})") from exc
    if not isinstance(raw, dict):
        raise ConfigReadError(path, "expected a JSON object at the top level")
    return raw


def _non_empty_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def parse_whitelist(value: Any) -> frozenset[str]:
    """Absent or non-list values mean an empty whitelist; non-string members are skipped."""

    if not isinstance(value, list):
        return frozenset()
    return frozenset(entry for entry in value if isinstance(entry, str))


def parse_exception(entry: Any) -> Optional[PolicyException]:
    """Return the exception described by ``entry`` or ``None`` when it is malformed."""

    if not isinstance(entry, dict):
        return None
    package = _non_empty_str(entry.get("package"))
    license_name = _non_empty_str(entry.get("license"))
    if package is None or license_name is None:
        return None
    reason = entry.get("reason")
    return PolicyException(
        package=package,
        license=license_name,
        reason=reason if isinstance(reason, str) else "",
    )


def parse_exceptions(value: Any) -> tuple[PolicyException, ...]:
    if not isinstance(value, list):
        return ()
    exceptions: List[PolicyException] = []
    for entry in value:
        parsed = parse_exception(entry)
        if parsed is None:
            logger.debug("Dropping malformed exception entry: %r", entry)
            continue
        exceptions.append(parsed)
    return tuple(exceptions)


def load_policy(path: Path) -> Policy:
    raw = _load_json(path)
    policy = Policy(
        whitelist=parse_whitelist(raw.get("whitelist")),
        exceptions=parse_exceptions(raw.get("exceptions")),
    )
    logger.info(
        "Loaded policy from %s: %d whitelisted licenses, %d exceptions",
        path,
        len(policy.whitelist),
        len(policy.exceptions),
    )
    return policy
