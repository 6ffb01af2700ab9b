from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .types_dependencies import PackageLicense
from .types_policy import PolicyException


@dataclass(frozen=True)
class ComplianceReport:
    license_counts: dict[str, int]
    violations: tuple[PackageLicense, ...]
    packages: tuple[PackageLicense, ...] = ()
    used_exceptions: tuple[PolicyException, ...] = ()
    unused_exceptions: tuple[PolicyException, ...] = ()
    generated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), compare=False
    )

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def total_packages(self) -> int:
        return sum(self.license_counts.values())

    def as_dict(self) -> dict:
        return {
            "generated_at": self.generated_at.isoformat(),
            "passed": self.passed,
            "total_packages": self.total_packages,
            "license_counts": dict(self.license_counts),
            "violations": [pkg.as_dict() for pkg in self.violations],
            "packages": [pkg.as_dict() for pkg in self.packages],
            "used_exceptions": [exc.as_dict() for exc in self.used_exceptions],
            "unused_exceptions": [exc.as_dict() for exc in self.unused_exceptions],
        }
