import json
import types
from pathlib import Path
import textwrap

from click.testing import CliRunner

from pageprobe.cli import cli


def write_multi_doc_yaml(tmp_path: Path) -> Path:
    y = textwrap.dedent(
        """
        version: "1"
        name: alpha
        url: "https://demo.app/alpha"
        checks:
          - predicate: has_css
            value: "h1"
        ---
        version: "1"
        name: beta
        url: "https://demo.app/beta"
        checks:
          - predicate: has_no_text
            value: "Oops"
          - predicate: has_button
            value: "Save"
        """
    )
    p = tmp_path / "demo.yaml"
    p.write_text(y, encoding="utf-8")
    return p


def test_cli_list_with_multi_doc(tmp_path: Path):
    write_multi_doc_yaml(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["list", "--dir", str(tmp_path), "--no-recursive"])
    assert result.exit_code == 0
    assert "Found 2 suite(s)" in result.output


def test_cli_validate_with_dir(tmp_path: Path):
    write_multi_doc_yaml(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", "--dir", str(tmp_path), "--no-recursive"])
    assert result.exit_code == 0
    assert result.output.count("OK  ") == 2


def test_cli_validate_reports_bad_file(tmp_path: Path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("name: x\nurl: https://x.test\nchecks: [{predicate: has_selector, value: div}]\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["validate", str(bad)])
    assert result.exit_code == 1
    assert "ERR" in result.output and "requires 'strategy'" in result.output


def test_cli_validate_without_targets():
    result = CliRunner().invoke(cli, ["validate"])
    assert result.exit_code == 2


def test_cli_config_prints_retry_settings():
    result = CliRunner().invoke(cli, ["config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert "RETRY_INTERVAL_MS" in data and "RETRY_TIMEOUT_MS" in data


def _fake_runner_module(outcomes):
    fake = types.ModuleType("pageprobe.core.runner")
    seen = []

    class FakeRunner:
        def __init__(self, settings=None, client=None):
            self.settings = settings

        def run_suite(self, suite, timeout_ms=None):
            seen.append((suite.name, timeout_ms))
            ok = outcomes.get(suite.name, True)
            return {
                "ok": ok,
                "suite": suite.name,
                "passed": 1 if ok else 0,
                "results": [{"predicate": "has_css", "value": "h1", "name": None, "ok": ok}],
            }

    fake.Runner = FakeRunner
    return fake, seen


def test_cli_run_monkeypatch_runner(tmp_path: Path, monkeypatch):
    wf = write_multi_doc_yaml(tmp_path)
    fake, seen = _fake_runner_module({})
    monkeypatch.setitem(__import__("sys").modules, "pageprobe.core.runner", fake)

    out = tmp_path / "out" / "summary.json"
    result = CliRunner().invoke(cli, ["run", str(wf), "--no-parallel", "--timeout-ms", "250", "--json-out", str(out)])
    assert result.exit_code == 0
    assert result.output.count("OK   ") == 2
    assert seen == [("alpha", 250), ("beta", 250)]
    assert len(json.loads(out.read_text(encoding="utf-8"))["results"]) == 2


def test_cli_run_failing_suite_exits_nonzero(tmp_path: Path, monkeypatch):
    wf = write_multi_doc_yaml(tmp_path)
    fake, _ = _fake_runner_module({"beta": False})
    monkeypatch.setitem(__import__("sys").modules, "pageprobe.core.runner", fake)

    result = CliRunner().invoke(cli, ["run", str(wf), "--parallel", "--max-workers", "2"])
    assert result.exit_code == 1
    assert "FAIL beta -> has_css 'h1'" in result.output
    assert "OK=1  FAIL=1" in result.output
