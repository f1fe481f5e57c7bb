"""End-to-end tests for the doctrine-check CLI."""

import json
import os
import re
import sys
import warnings
from pathlib import Path

import pytest
from click.testing import CliRunner

from doctrine_check import __version__
from doctrine_check.cli import cli, main
from repo_builders import agents_text, write

LINE_PATTERN = re.compile(r"^\s+(PASS|FAIL|WARN|SKIP)\s+(R\d+)\s")


def _invoke(*args: str):
    return CliRunner().invoke(cli, list(args))


def _json_results(root: Path) -> dict[str, str]:
    result = _invoke(str(root), "--format", "json")
    return {item["rule_id"]: item["status"] for item in json.loads(result.stdout)}


def test_scenario_a_empty_directory(repo: Path):
    result = _invoke(str(repo), "--format", "json")
    statuses = {item["rule_id"]: item["status"] for item in json.loads(result.stdout)}

    assert result.exit_code == 1
    assert statuses["R1"] == "FAIL"
    assert statuses["R2"] == "SKIP"


def test_scenario_b_agents_only(repo: Path):
    write(repo / "AGENTS.md", agents_text(10))

    result = _invoke(str(repo))

    assert result.exit_code == 0
    statuses = _json_results(repo)
    assert statuses["R1"] == "PASS"
    assert statuses["R4"] == "PASS"
    assert statuses["R5"] == "WARN"


def test_scenario_c_secret_in_agents(repo: Path):
    write(repo / "AGENTS.md", agents_text(10, body="Use sk_live_" + "abcdefghij0123456789XYZ" + " for payments."))

    result = _invoke(str(repo))

    assert result.exit_code == 1
    assert _json_results(repo)["R4"] == "FAIL"


def test_scenario_d_json_output(repo: Path):
    write(repo / "AGENTS.md", agents_text(10))

    result = _invoke(str(repo), "--format", "json")
    data = json.loads(result.stdout)

    assert result.exit_code == 0
    assert isinstance(data, list)
    assert any(item["rule_id"] == "R5" and item["status"] == "WARN" for item in data)


def test_claude_regular_file_exits_1(repo: Path):
    write(repo / "AGENTS.md", agents_text(10))
    write(repo / "CLAUDE.md", agents_text(10))

    result = _invoke(str(repo))

    assert result.exit_code == 1
    assert _json_results(repo)["R2"] == "FAIL"


def test_conforming_repo_exits_0(conforming_repo: Path):
    result = _invoke(str(conforming_repo))

    assert result.exit_code == 0
    assert "7 rule(s): 7 passed, 0 failed, 0 warning(s), 0 skipped" in result.stdout


def test_json_output_is_idempotent(conforming_repo: Path):
    first = _invoke(str(conforming_repo), "--format", "json")
    second = _invoke(str(conforming_repo), "--format", "json")

    assert first.stdout_bytes == second.stdout_bytes


def test_text_and_json_report_same_pairs(repo: Path):
    write(repo / "AGENTS.md", agents_text(600))
    write(repo / "CLAUDE.md", "# copy\n")

    text = _invoke(str(repo))
    data = json.loads(_invoke(str(repo), "--format", "json").stdout)

    text_pairs = {
        (m.group(2), m.group(1)) for m in map(LINE_PATTERN.match, text.stdout.splitlines()) if m is not None
    }
    assert text_pairs == {(item["rule_id"], item["status"]) for item in data}
    assert len(text_pairs) == 7


def test_default_path_is_current_directory(repo: Path, monkeypatch: pytest.MonkeyPatch):
    write(repo / "AGENTS.md", agents_text(10))
    monkeypatch.chdir(repo)

    result = _invoke("--format", "json")

    assert result.exit_code == 0
    assert {item["rule_id"]: item["status"] for item in json.loads(result.stdout)}["R1"] == "PASS"


def test_missing_path_exits_2(tmp_path: Path):
    result = _invoke(str(tmp_path / "nope"))

    assert result.exit_code == 2
    assert "does not exist" in result.output
    assert "Traceback" not in result.output


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
def test_unreadable_path_exits_2(repo: Path):
    repo.chmod(0)
    try:
        result = _invoke(str(repo))
    finally:
        repo.chmod(0o755)

    assert result.exit_code == 2
    assert "Permission denied" in result.output


def test_config_disables_rules(repo: Path, tmp_path: Path):
    config = write(tmp_path / "doctrine.toml", '[doctrine-check]\ndisable = ["R1"]\n')

    result = _invoke(str(repo), "--format", "json", "--config", str(config))
    statuses = {item["rule_id"]: item["status"] for item in json.loads(result.stdout)}

    assert result.exit_code == 0
    assert statuses["R1"] == "SKIP"


def test_invalid_config_exits_2(repo: Path, tmp_path: Path):
    config = write(tmp_path / "doctrine.toml", "[doctrine-check]\nline_warn = -1\n")

    result = _invoke(str(repo), "--config", str(config))

    assert result.exit_code == 2
    assert "line_warn" in result.output


def test_explain_rule():
    result = _invoke("--explain", "r2")

    assert result.exit_code == 0
    assert "R2 [MUST]" in result.stdout
    assert "ln -s AGENTS.md CLAUDE.md" in result.stdout


def test_explain_unknown_rule_exits_2():
    result = _invoke("--explain", "R42")

    assert result.exit_code == 2
    assert "Unknown rule: R42" in result.output


def test_list_rules():
    result = _invoke("--list-rules")

    assert result.exit_code == 0
    for rule_id in ("R1", "R4", "R7"):
        assert rule_id in result.stdout


def test_version():
    result = _invoke("--version")

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_main_maps_unexpected_errors_to_exit_2(
    repo: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
):
    def explode(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr("doctrine_check.commands.check.run_check", explode)
    monkeypatch.setattr(sys, "argv", ["doctrine-check", str(repo)])

    with pytest.raises(SystemExit) as excinfo:
        main()

    err = capsys.readouterr().err
    assert excinfo.value.code == 2
    assert "internal error: RuntimeError: unexpected" in err
    assert "Traceback" not in err
    assert len(err.strip().splitlines()) == 1


def test_main_interrupt_prints_no_report(repo: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture):
    def interrupt(*args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr("doctrine_check.commands.check.run_check", interrupt)
    monkeypatch.setattr(sys, "argv", ["doctrine-check", str(repo)])

    with pytest.raises(SystemExit) as excinfo:
        main()

    captured = capsys.readouterr()
    assert excinfo.value.code == 130
    assert captured.out == ""
    assert "Interrupted." in captured.err


def test_main_exit_code_for_failures(repo: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture):
    monkeypatch.setattr(sys, "argv", ["doctrine-check", str(repo), "--format", "json"])

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    assert json.loads(capsys.readouterr().out)[0]["rule_id"] == "R1"


def test_unreadable_path_exits_2_with_one_line(repo: Path, monkeypatch: pytest.MonkeyPatch):
    real_access = os.access

    def access(path, mode, **kwargs):
        return False if Path(path) == repo else real_access(path, mode, **kwargs)

    monkeypatch.setattr(os, "access", access)

    result = _invoke(str(repo))

    assert result.exit_code == 2
    assert "Permission denied" in result.output
    assert "Traceback" not in result.output
    assert len(result.output.strip().splitlines()) == 1


def test_explain_uses_configured_thresholds(tmp_path: Path):
    config = write(tmp_path / "doctrine.toml", "[doctrine-check]\nline_warn = 300\nline_max = 600\n")

    result = _invoke("--explain", "R3", "--config", str(config))

    assert result.exit_code == 0
    assert "at most 600 lines (warn above 300)" in result.stdout


def test_explain_with_invalid_config_exits_2(tmp_path: Path):
    config = write(tmp_path / "doctrine.toml", "[doctrine-check]\nline_max = 0\n")

    result = _invoke("--explain", "R3", "--config", str(config))

    assert result.exit_code == 2
    assert "line_max" in result.output


def test_json_output_raises_no_deprecation_warnings(repo: Path):
    write(repo / "AGENTS.md", agents_text(10))

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        result = _invoke(str(repo), "--format", "json")

    assert result.exit_code == 0
    assert json.loads(result.stdout)
    assert not [w for w in caught if issubclass(w.category, DeprecationWarning)]
