from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, select_autoescape

from .types import ComplianceReport

EXIT_OK = 0
EXIT_VIOLATIONS = 1

env = Environment(autoescape=select_autoescape(["html", "xml"]))


def render_counts(report: ComplianceReport) -> str:
    return "\n".join(["License count:", json.dumps(report.license_counts, indent=2)])


def render_violations(report: ComplianceReport) -> str:
    return "\n".join(
        [
            "Not allowed licenses:",
            json.dumps([pkg.as_dict() for pkg in report.violations], indent=2),
        ]
    )


def exit_status(report: ComplianceReport, count_only: bool) -> int:
    """Counting never fails the run; otherwise any violation does."""

    if count_only or report.passed:
        return EXIT_OK
    return EXIT_VIOLATIONS


def _package_rows(report: ComplianceReport) -> Iterable[dict]:
    violations = set(report.violations)
    for pkg in report.packages:
        if pkg in violations:
            status = "violation"
        elif any(exc.covers(pkg) for exc in report.used_exceptions):
            status = "excepted"
        else:
            status = "allowed"
        yield {"package": pkg.package, "license": pkg.license, "status": status}


def render_json(report: ComplianceReport) -> str:
    payload = report.as_dict()
    payload["packages"] = list(_package_rows(report))
    return json.dumps(payload, indent=2)


def render_markdown(report: ComplianceReport) -> str:
    lines = [
        "# License Audit Report",
        "",
        f"Generated at: {report.generated_at.isoformat()}",
        f"Result: {'PASS' if report.passed else 'FAIL'}",
        f"Packages audited: {report.total_packages}",
    ]

    lines.append("\n## License counts\n")
    lines.append("| License | Packages |")
    lines.append("| --- | --- |")
    for license_name, count in report.license_counts.items():
        lines.append(f"| {license_name} | {count} |")

    lines.append("\n## Violations\n")
    if report.violations:
        lines.append("| Package | License |")
        lines.append("| --- | --- |")
        for pkg in report.violations:
            lines.append(f"| {pkg.package} | {pkg.license} |")
    else:
        lines.append("None")

    if report.used_exceptions or report.unused_exceptions:
        lines.append("\n## Exceptions\n")
        lines.append("| Package | License | Reason | Used |")
        lines.append("| --- | --- | --- | --- |")
        for exc in report.used_exceptions:
            lines.append(f"| {exc.package} | {exc.license} | {exc.reason or 'None'} | yes |")
        for exc in report.unused_exceptions:
            lines.append(f"| {exc.package} | {exc.license} | {exc.reason or 'None'} | no |")

    return "\n".join(lines)


def render_html(report: ComplianceReport) -> str:
    template = env.from_string(
        """
<!doctype html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <title>License Audit Report</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 2rem; }
    h1, h2 { color: #1f2937; }
    table { border-collapse: collapse; width: 100%; margin-bottom: 1.5rem; }
    th, td { border: 1px solid #d1d5db; padding: 0.5rem; }
    th { background: #f3f4f6; text-align: left; }
    .badge { display: inline-block; padding: 0.35rem 0.6rem; border-radius: 0.4rem; font-weight: 600; color: #111827; }
    .badge.allowed, .badge.good { background: #d1fae5; color: #065f46; }
    .badge.excepted { background: #fef3c7; color: #92400e; }
    .badge.violation, .badge.bad { background: #fee2e2; color: #991b1b; }
  </style>
</head>
<body>
  <h1>License Audit Report</h1>
  <p>Generated at: {{ generated_at }}</p>
  <p>Result: <span class=\"badge {{ 'good' if passed else 'bad' }}\">{{ 'PASS' if passed else 'FAIL' }}</span></p>
  <section>
    <h2>License counts</h2>
    <table>
      <thead><tr><th>License</th><th>Packages</th></tr></thead>
      <tbody>
        {% for license_name, count in license_counts.items() %}
        <tr><td>{{ license_name }}</td><td>{{ count }}</td></tr>
        {% endfor %}
      </tbody>
    </table>
  </section>
  <section>
    <h2>Packages</h2>
    <table>
      <thead><tr><th>Package</th><th>License</th><th>Status</th></tr></thead>
      <tbody>
        {% for row in packages %}
        <tr>
          <td>{{ row.package }}</td>
          <td>{{ row.license }}</td>
          <td><span class=\"badge {{ row.status }}\">{{ row.status.title() }}</span></td>
        </tr>
        {% endfor %}
      </tbody>
    </table>
  </section>
</body>
</html>
"""
    )
    return template.render(
        generated_at=report.generated_at.isoformat(),
        passed=report.passed,
        license_counts=report.license_counts,
        packages=list(_package_rows(report)),
    )


def render_report(report: ComplianceReport, fmt: str) -> str:
    fmt = fmt.lower()
    if fmt == "json":
        return render_json(report)
    if fmt in {"md", "markdown"}:
        return render_markdown(report)
    if fmt == "html":
        return render_html(report)
    raise ValueError(f"Unknown report format: {fmt}")


def write_report(report: ComplianceReport, fmt: str, destination: Path | None) -> str:
    output = render_report(report, fmt)
    if destination:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(output, encoding="utf-8")
    return output


def write_github_check(path: Path, report: ComplianceReport, count_only: bool = False) -> None:
    if report.passed:
        summary = f"All {report.total_packages} packages use allowed licenses."
    else:
        summary = "; ".join(f"{pkg.package}: {pkg.license} not allowed" for pkg in report.violations)

    payload = {
        "conclusion": "success" if exit_status(report, count_only) == EXIT_OK else "failure",
        "summary": summary,
        "warnings": [
            f"Exception for {exc.package} ({exc.license}) matched no installed package"
            for exc in report.unused_exceptions
        ],
        "details": report.as_dict(),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
