from __future__ import annotations

from dataclasses import dataclass, field

from .types_dependencies import PackageLicense


@dataclass(frozen=True)
class PolicyException:
    package: str
    license: str
    reason: str = ""

    def covers(self, pkg: PackageLicense) -> bool:
        return self.package == pkg.package and self.license == pkg.license

    def as_dict(self) -> dict:
        return {"package": self.package, "license": self.license, "reason": self.reason}


@dataclass(frozen=True)
class Policy:
    whitelist: frozenset[str] = field(default_factory=frozenset)
    exceptions: tuple[PolicyException, ...] = ()

    def allows(self, license_name: str) -> bool:
        return license_name in self.whitelist

    def exception_for(self, pkg: PackageLicense) -> PolicyException | None:
        for exc in self.exceptions:
            if exc.covers(pkg):
                return exc
        return None
