from __future__ import annotations

"""Shared data structures for license auditing.

The definitions live in domain-focused modules (dependencies, policy,
report, settings); this module re-exports them so callers have one stable
import path.
"""

from .types_dependencies import NO_LICENSE, DeepMode, DependencyMode, PackageLicense, ShallowMode
from .types_policy import Policy, PolicyException
from .types_report import ComplianceReport
from .types_settings import DEFAULT_CONFIG_FILE, AuditSettings

__all__ = [
    "AuditSettings",
    "ComplianceReport",
    "DEFAULT_CONFIG_FILE",
    "DeepMode",
    "DependencyMode",
    "NO_LICENSE",
    "PackageLicense",
    "Policy",
    "PolicyException",
    "ShallowMode",
]
