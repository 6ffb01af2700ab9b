from __future__ import annotations

from typing import Dict, List, Sequence

from .types import ComplianceReport, PackageLicense, Policy, PolicyException


def count_licenses(packages: Sequence[PackageLicense]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for pkg in packages:
        counts[pkg.license] = counts.get(pkg.license, 0) + 1
    return counts


def evaluate_compliance(packages: Sequence[PackageLicense], policy: Policy) -> ComplianceReport:
    """Classify every package as whitelisted, excepted, or a violation.

    Exceptions only cover the exact (package, license) pair they name.
    Violations keep the input order.
    """

    violations: List[PackageLicense] = []
    used: List[PolicyException] = []

    for pkg in packages:
        if policy.allows(pkg.license):
            continue
        matched = policy.exception_for(pkg)
        if matched is None:
            violations.append(pkg)
        elif matched not in used:
            used.append(matched)

    return ComplianceReport(
        license_counts=count_licenses(packages),
        violations=tuple(violations),
        packages=tuple(packages),
        used_exceptions=tuple(exc for exc in policy.exceptions if exc in used),
        unused_exceptions=tuple(exc for exc in policy.exceptions if exc not in used),
    )
