"""CLI contract tests: request channel, subcommands and exit codes.

Code  Meaning
----  -------
  0   Success: green score, valid instance, request answered
  1   Violation: yellow score, schema violation
  2   Error: red score, malformed request, unreadable file
"""

from __future__ import annotations

import io
import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from contract_audit.__main__ import main

REPO_ROOT = Path(__file__).resolve().parents[1]

BANK = (
    "contract Bank {\n"
    "    mapping(address => uint) balances;\n"
    "    function withdraw(uint amount) public {\n"
    "        msg.sender.transfer(amount);\n"
    "        balances[msg.sender] -= amount;\n"
    "    }\n"
    "}\n"
)

TWO_HIGHS = "selfdestruct(x);\nrequire(tx.origin == o);\n"


@pytest.fixture
def stdin(monkeypatch):
    def _feed(text: str) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO(text))
    return _feed


@pytest.fixture
def contract(tmp_path: Path):
    def _write(text: str, name: str = "Contract.sol") -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p
    return _write


# ── request channel ─────────────────────────────────────────────────


class TestRequestChannel:
    """No command: one JSON request in, one JSON response out."""

    def test_no_args_reads_stdin(self, stdin, capsys) -> None:
        stdin('{"code": ""}')
        assert main([]) == 0
        out = capsys.readouterr().out
        assert json.loads(out) == {
            "score": 100,
            "metrics": {
                "performance": 100,
                "security": 100,
                "gas_efficiency": 100,
                "code_quality": 100,
            },
            "issues": [],
        }
        assert out.endswith("\n")

    def test_dash_reads_stdin(self, stdin, capsys) -> None:
        stdin(json.dumps({"code": BANK, "config": {"enabled_rules": ["reentrancy"]}}))
        assert main(["-"]) == 0
        assert json.loads(capsys.readouterr().out)["score"] == 89

    @pytest.mark.parametrize(
        "text",
        ["not json", "{}", '{"code": 5}', '{"code": "", "config": {"custom_weights": {"security": NaN}}}'],
    )
    def test_bad_request_exit_2(self, stdin, capsys, text: str) -> None:
        stdin(text)
        assert main([]) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error: Failed to parse request" in captured.err

    def test_subprocess_round_trip(self) -> None:
        env = {**os.environ}
        env["PYTHONPATH"] = str(REPO_ROOT / "src") + (
            os.pathsep + env["PYTHONPATH"] if env.get("PYTHONPATH") else ""
        )
        r = subprocess.run(
            [sys.executable, "-m", "contract_audit"],
            input='{"code": "pragma solidity ^0.8.0;"}',
            capture_output=True,
            text=True,
            env=env,
        )
        assert r.returncode == 0, r.stderr
        resp = json.loads(r.stdout)
        assert resp["issues"][0]["message"] == "Floating pragma version"


# ── analyze subcommand ──────────────────────────────────────────────


class TestAnalyze:

    def test_json_output(self, contract, capsys) -> None:
        path = contract(BANK)
        rc = main(["analyze", str(path), "--rules", "reentrancy", "--json"])
        captured = capsys.readouterr()
        assert rc == 0
        assert json.loads(captured.out)["score"] == 89
        assert "89/100" in captured.err
        assert "GREEN" in captured.err

    def test_human_only_without_json(self, contract, capsys) -> None:
        main(["analyze", str(contract(BANK))])
        assert capsys.readouterr().out == ""

    def test_yellow_exit_1(self, contract) -> None:
        path = contract(TWO_HIGHS)
        rc = main([
            "analyze", str(path),
            "--rules", "unprotected_selfdestruct,tx_origin_auth",
            "--weight", "security=0.2",
        ])
        assert rc == 1

    def test_red_exit_2(self, contract) -> None:
        path = contract(TWO_HIGHS)
        rc = main([
            "analyze", str(path),
            "--rules", "unprotected_selfdestruct,tx_origin_auth",
            "--weight", "security=0",
        ])
        assert rc == 2

    def test_config_file(self, contract, tmp_path: Path, capsys) -> None:
        cfg = tmp_path / "cfg.json"
        cfg.write_text(json.dumps({"enabled_rules": ["floating_pragma"]}), encoding="utf-8")
        path = contract("pragma solidity ^0.8.0;\n" + BANK)
        assert main(["analyze", str(path), "--config", str(cfg), "--json"]) == 0
        issues = json.loads(capsys.readouterr().out)["issues"]
        assert [i["message"] for i in issues] == ["Floating pragma version"]

    def test_rules_flag_overrides_config_file(self, contract, tmp_path: Path, capsys) -> None:
        cfg = tmp_path / "cfg.json"
        cfg.write_text(json.dumps({"enabled_rules": ["floating_pragma"]}), encoding="utf-8")
        path = contract(BANK)
        main(["analyze", str(path), "--config", str(cfg), "--rules", "reentrancy", "--json"])
        assert json.loads(capsys.readouterr().out)["score"] == 89

    def test_stdin_source(self, stdin, capsys) -> None:
        stdin(BANK)
        assert main(["analyze", "-", "--rules", "reentrancy", "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["score"] == 89

    def test_workers_flag(self, contract, capsys) -> None:
        path = contract(BANK)
        main(["analyze", str(path), "--json"])
        inline = capsys.readouterr().out
        main(["analyze", str(path), "--json", "--workers", "4"])
        assert capsys.readouterr().out == inline

    def test_missing_file_exit_2(self, tmp_path: Path, capsys) -> None:
        assert main(["analyze", str(tmp_path / "missing.sol")]) == 2
        assert "error:" in capsys.readouterr().err

    @pytest.mark.parametrize("weight", ["security", "security=high", "=1"])
    def test_bad_weight_exit_2(self, contract, capsys, weight: str) -> None:
        assert main(["analyze", str(contract(BANK)), "--weight", weight]) == 2
        assert "--weight" in capsys.readouterr().err

    def test_verbose_logs_rule_selection(self, contract, capsys, caplog) -> None:
        caplog.set_level("DEBUG", logger="contract_audit")
        main(["-v", "analyze", str(contract(BANK)), "--rules", "reentrancy"])
        assert "analyzer ready with 1 rule(s)" in caplog.text


# ── rules subcommand ────────────────────────────────────────────────


class TestRules:

    def test_lists_public_catalog(self, capsys) -> None:
        assert main(["rules"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 21
        assert lines[0].startswith("reentrancy")

    def test_all_includes_experimental(self, capsys) -> None:
        main(["rules", "--all"])
        out = capsys.readouterr().out
        assert "gas_analysis" in out
        assert "experimental" in out

    def test_json(self, capsys) -> None:
        main(["rules", "--json"])
        rules = json.loads(capsys.readouterr().out)
        assert {r["id"] for r in rules} >= {"reentrancy", "weak_randomness"}


# ── validate subcommand ─────────────────────────────────────────────


class TestValidate:
    """validate: 0 = valid, 1 = schema violation, 2 = runtime error."""

    def _write(self, tmp_path: Path, obj) -> Path:
        p = tmp_path / "instance.json"
        p.write_text(json.dumps(obj), encoding="utf-8")
        return p

    def test_valid_result_exit_0(self, tmp_path: Path, capsys) -> None:
        p = self._write(tmp_path, {
            "score": 100,
            "metrics": {"performance": 100, "security": 100, "gas_efficiency": 100, "code_quality": 100},
            "issues": [],
        })
        assert main(["validate", str(p), "analysis_result.schema.json"]) == 0
        assert capsys.readouterr().out.strip() == "OK"

    def test_violation_exit_1(self, tmp_path: Path, capsys) -> None:
        p = self._write(tmp_path, {"score": 101, "metrics": {}, "issues": []})
        assert main(["validate", str(p), "analysis_result.schema.json"]) == 1
        assert "FAIL" in capsys.readouterr().err

    def test_valid_request_exit_0(self, tmp_path: Path) -> None:
        p = self._write(tmp_path, {"code": "x"})
        assert main(["validate", str(p), "analysis_request.schema.json"]) == 0

    def test_unknown_schema_exit_2(self, tmp_path: Path) -> None:
        p = self._write(tmp_path, {"code": "x"})
        assert main(["validate", str(p), "nope.schema.json"]) == 2

    def test_missing_instance_exit_2(self, tmp_path: Path) -> None:
        assert main(["validate", str(tmp_path / "x.json"), "analysis_request.schema.json"]) == 2

    def test_malformed_instance_exit_2(self, tmp_path: Path) -> None:
        p = tmp_path / "bad.json"
        p.write_text("{", encoding="utf-8")
        assert main(["validate", str(p), "analysis_request.schema.json"]) == 2
