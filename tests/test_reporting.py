import json
from pathlib import Path

from license_auditor.compliance import evaluate_compliance
from license_auditor.reporting import (
    EXIT_OK,
    EXIT_VIOLATIONS,
    exit_status,
    render_counts,
    render_html,
    render_json,
    render_markdown,
    render_violations,
    write_github_check,
    write_report,
)
from license_auditor.types import PackageLicense, Policy, PolicyException


def _report():
    policy = Policy(
        whitelist=frozenset({"MIT"}),
        exceptions=(PolicyException("foo", "GPL-3.0", "vendored"), PolicyException("gone", "WTFPL")),
    )
    packages = [
        PackageLicense("foo", "GPL-3.0"),
        PackageLicense("bar", "GPL-3.0"),
        PackageLicense("baz", "MIT"),
    ]
    return evaluate_compliance(packages, policy)


def test_render_counts_uses_two_space_json():
    rendered = render_counts(_report())
    header, body = rendered.split("\n", 1)
    assert header == "License count:"
    assert json.loads(body) == {"GPL-3.0": 2, "MIT": 1}
    assert '\n  "GPL-3.0": 2' in body


def test_render_violations_lists_package_and_license():
    rendered = render_violations(_report())
    header, body = rendered.split("\n", 1)
    assert header == "Not allowed licenses:"
    assert json.loads(body) == [{"package": "bar", "license": "GPL-3.0"}]


def test_exit_status_honors_count_only():
    report = _report()
    assert exit_status(report, count_only=False) == EXIT_VIOLATIONS
    assert exit_status(report, count_only=True) == EXIT_OK


def test_render_json_marks_package_status():
    payload = json.loads(render_json(_report()))
    statuses = {row["package"]: row["status"] for row in payload["packages"]}
    assert statuses == {"foo": "excepted", "bar": "violation", "baz": "allowed"}
    assert payload["passed"] is False
    assert payload["unused_exceptions"][0]["package"] == "gone"


def test_markdown_and_html_include_violations():
    markdown = render_markdown(_report())
    assert "Result: FAIL" in markdown
    assert "| bar | GPL-3.0 |" in markdown

    html = render_html(_report())
    assert "License Audit Report" in html
    assert "Violation" in html


def test_write_report_creates_parent_directories(tmp_path: Path):
    destination = tmp_path / "out" / "report.md"
    rendered = write_report(_report(), "md", destination)
    assert destination.read_text() == rendered


def test_github_check_lists_unused_exceptions(tmp_path: Path):
    path = tmp_path / "check.json"
    write_github_check(path, _report())

    payload = json.loads(path.read_text())
    assert payload["conclusion"] == "failure"
    assert "bar: GPL-3.0 not allowed" in payload["summary"]
    assert any("gone" in warning for warning in payload["warnings"])

    write_github_check(path, _report(), count_only=True)
    assert json.loads(path.read_text())["conclusion"] == "success"


def test_report_files_are_utf8(tmp_path: Path):
    report = evaluate_compliance(
        [PackageLicense("café-utils", "Licença-Livre")], Policy(whitelist=frozenset({"MIT"}))
    )
    destination = tmp_path / "report.md"
    write_report(report, "markdown", destination)

    assert "| café-utils | Licença-Livre |" in destination.read_bytes().decode("utf-8")
