from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from license_auditor.cli import EXIT_INPUT_ERROR, main


def _json_after(output: str, header: str):
    start = output.index(header) + len(header)
    payload, _ = json.JSONDecoder().raw_decode(output[start:].lstrip())
    return payload


def _project(policy: dict | None = None) -> None:
    Path("package.json").write_text(
        json.dumps(
            {
                "dependencies": {"foo": "1.0.0", "baz": "2.0.0"},
                "devDependencies": {"bar": "3.0.0"},
            }
        )
    )
    for name, license_name in [("foo", "GPL-3.0"), ("bar", "GPL-3.0"), ("baz", "MIT")]:
        pkg_dir = Path("node_modules") / name
        pkg_dir.mkdir(parents=True)
        (pkg_dir / "package.json").write_text(json.dumps({"name": name, "license": license_name}))
    Path("allowed-licenses.json").write_text(
        json.dumps(
            policy
            if policy is not None
            else {"whitelist": ["MIT"], "exceptions": [{"package": "foo", "license": "GPL-3.0"}]}
        )
    )


def test_violations_fail_the_run():
    runner = CliRunner()
    with runner.isolated_filesystem():
        _project()
        result = runner.invoke(main, [])

    assert result.exit_code == 1
    assert _json_after(result.output, "License count:") == {"GPL-3.0": 2, "MIT": 1}
    assert _json_after(result.output, "Not allowed licenses:") == [
        {"package": "bar", "license": "GPL-3.0"}
    ]


def test_only_prod_skips_dev_dependencies():
    runner = CliRunner()
    with runner.isolated_filesystem():
        _project()
        result = runner.invoke(main, ["--only-prod"])

    assert result.exit_code == 0
    assert _json_after(result.output, "License count:") == {"GPL-3.0": 1, "MIT": 1}
    assert "Not allowed licenses:" not in result.output


def test_count_mode_always_succeeds():
    runner = CliRunner()
    with runner.isolated_filesystem():
        _project()
        result = runner.invoke(main, ["--count"])

    assert result.exit_code == 0
    assert _json_after(result.output, "License count:") == {"GPL-3.0": 2, "MIT": 1}
    assert "Not allowed licenses:" not in result.output


def test_deep_mode_audits_installed_packages():
    runner = CliRunner()
    with runner.isolated_filesystem():
        _project({"whitelist": ["MIT", "GPL-3.0"]})
        (Path("node_modules") / ".bin").mkdir()
        scoped = Path("node_modules") / "@types" / "node"
        scoped.mkdir(parents=True)
        (scoped / "package.json").write_text(json.dumps({"name": "@types/node"}))

        result = runner.invoke(main, ["--deep"])

    assert result.exit_code == 1
    assert _json_after(result.output, "License count:") == {
        "GPL-3.0": 2,
        "MIT": 1,
        "No license declared": 1,
    }
    assert _json_after(result.output, "Not allowed licenses:") == [
        {"package": "@types/node", "license": "No license declared"}
    ]


def test_config_override_and_non_json_fallback():
    runner = CliRunner()
    with runner.isolated_filesystem():
        _project()
        Path("strict.json").write_text(json.dumps({"whitelist": []}))
        Path("ignored.yml").write_text("whitelist: []")

        strict = runner.invoke(main, ["--config", "strict.json"])
        fallback = runner.invoke(main, ["--config", "ignored.yml", "--only-prod"])

    assert strict.exit_code == 1
    assert len(_json_after(strict.output, "Not allowed licenses:")) == 3
    assert fallback.exit_code == 0


def test_missing_config_exits_with_input_error():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("package.json").write_text(json.dumps({"dependencies": {}}))
        result = runner.invoke(main, [])

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "Could not read config from" in result.output
    assert "License count:" not in result.output


def test_missing_manifest_exits_with_input_error():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("allowed-licenses.json").write_text(json.dumps({"whitelist": ["MIT"]}))
        result = runner.invoke(main, [])

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "package.json" in result.output


def test_project_dir_and_report_outputs(tmp_path: Path):
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path) as workdir:
        _project()
        result = runner.invoke(
            main,
            [
                "--project-dir",
                workdir,
                "--output",
                "reports/licenses.md",
                "--format",
                "markdown",
                "--github-check-output",
                "check.json",
                "--workers",
                "2",
            ],
        )

        assert result.exit_code == 1
        assert "| bar | GPL-3.0 |" in Path("reports/licenses.md").read_text()
        check = json.loads(Path("check.json").read_text())
        assert check["conclusion"] == "failure"
