"""Tests for the diag-runner CLI (diag_runner.__main__)."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from conftest import PLUGINS, SHOP
from diag_runner.__main__ import main
from diag_runner.utils.exit_codes import ExitCode

SAMPLE = str(PLUGINS / "sample_checks.py")
REPO_ROOT = Path(__file__).resolve().parent.parent


class TestValidation:
    """Invalid input exits with ExitCode.ERROR before any analysis."""

    def test_analyzer_must_be_python_module(self, capsys: pytest.CaptureFixture[str]) -> None:
        rc = main(["-a", "checks.dll", "-s", str(SHOP)])
        assert rc == ExitCode.ERROR
        err = capsys.readouterr().err
        assert "is not a Python module" in err
        assert "Running the analysis" not in err

    def test_missing_analyzer(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        rc = main(["-a", str(tmp_path / "nope.py"), "-s", str(SHOP)])
        assert rc == ExitCode.ERROR
        assert "does not exist" in capsys.readouterr().err

    def test_invalid_solution(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        rc = main(["-a", SAMPLE, "-s", str(tmp_path / "shop.sln")])
        assert rc == ExitCode.ERROR
        assert "is not a valid solution file" in capsys.readouterr().err

    def test_plugin_constructor_error_is_root_cause(self, capsys: pytest.CaptureFixture[str]) -> None:
        rc = main(["-a", str(PLUGINS / "broken_ctor.py"), "-s", str(SHOP)])
        assert rc == ExitCode.ERROR
        err = capsys.readouterr().err
        assert "PluginConfigError" in err
        assert "missing rule configuration" in err

    def test_plugin_import_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        rc = main(["-a", str(PLUGINS / "import_error.py"), "-s", str(SHOP)])
        assert rc == ExitCode.ERROR
        assert "Failed to import plugin" in capsys.readouterr().err

    def test_required_flags(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["-s", str(SHOP)])
        assert exc.value.code == 2

    def test_bad_max_workers(self) -> None:
        with pytest.raises(SystemExit):
            main(["-a", SAMPLE, "-s", str(SHOP), "--max-workers", "0"])


class TestRun:
    """Successful runs print reports, summary and timing."""

    def test_console_report_and_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        rc = main(["-a", SAMPLE, "-s", str(SHOP / "shop.toml")])
        assert rc == ExitCode.SUCCESS

        captured = capsys.readouterr()
        assert "Found 4 diagnostic in project 'api'" in captured.out
        assert "Found 0 diagnostic in project 'common'" in captured.out
        assert "app.py(10,12): error SEC001: eval() executes arbitrary code" in captured.out
        assert "with '2' projects and '4' documents" in captured.err
        assert "Found 4 diagnostics in" in captured.err

    def test_no_output_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        rc = main(["-a", SAMPLE, "-s", str(SHOP / "shop.toml"), "--no-output"])
        assert rc == ExitCode.SUCCESS
        captured = capsys.readouterr()
        assert "Found 4 diagnostic in project" not in captured.out
        assert "Found 4 diagnostics in" in captured.err

    def test_log_file_is_appended_not_truncated(self, tmp_path: Path) -> None:
        log = tmp_path / "diag.log"
        log.write_text("keep me\n", encoding="utf-8")
        argv = ["-a", SAMPLE, "-s", str(SHOP / "shop.toml"), "--no-output", "-l", str(log)]

        assert main(argv) == ExitCode.SUCCESS
        assert main(argv) == ExitCode.SUCCESS

        text = log.read_text(encoding="utf-8")
        assert text.startswith("keep me\n")
        assert text.count("Found 4 diagnostic in project 'api'") == 2
        assert text.count("Found 0 diagnostic in project 'common'") == 2

    def test_json_report(self, tmp_path: Path) -> None:
        out = tmp_path / "reports" / "run.json"
        rc = main(["-a", SAMPLE, "-s", str(SHOP), "--no-output", "--json", str(out)])
        assert rc == ExitCode.SUCCESS

        report = json.loads(out.read_text(encoding="utf-8"))
        assert report["schema_version"] == "run_report_v1"
        assert [p["project"] for p in report["projects"]] == ["common", "shop-api"]
        assert out.read_text(encoding="utf-8").endswith("}\n")

    def test_failed_project_sets_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        for name in ("fragile", "sturdy"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "m.py").write_text("x = 1\n")
        manifest = tmp_path / "sln.toml"
        manifest.write_text(
            "[[projects]]\npath = 'fragile'\n\n[[projects]]\npath = 'sturdy'\n"
        )

        rc = main(["-a", str(PLUGINS / "crashing.py"), "-s", str(manifest)])

        assert rc == ExitCode.ERROR
        captured = capsys.readouterr()
        assert "Found 1 diagnostic in project 'sturdy'" in captured.out
        assert "1 project(s) could not be analyzed: fragile" in captured.err

    def test_fail_fast_aborts(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "fragile").mkdir()
        (tmp_path / "fragile" / "m.py").write_text("x = 1\n")
        manifest = tmp_path / "sln.yaml"
        manifest.write_text("projects:\n  - path: fragile\n")

        rc = main(["-a", str(PLUGINS / "crashing.py"), "-s", str(manifest), "--fail-fast"])

        assert rc == ExitCode.ERROR
        assert "analysis aborted" in capsys.readouterr().err


class TestModuleEntryPoint:
    def test_python_dash_m(self, tmp_path: Path) -> None:
        env = {**os.environ}
        env["PYTHONPATH"] = str(REPO_ROOT / "src") + (
            os.pathsep + env["PYTHONPATH"] if env.get("PYTHONPATH") else ""
        )
        proc = subprocess.run(
            [sys.executable, "-m", "diag_runner", "-a", SAMPLE, "-s", str(SHOP / "shop.toml"), "--no-output"],
            capture_output=True,
            text=True,
            env=env,
            cwd=tmp_path,
            check=False,
        )
        assert proc.returncode == 0, proc.stderr
        assert "Found 4 diagnostics in" in proc.stderr
