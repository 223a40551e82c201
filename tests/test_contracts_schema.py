"""Bundled JSON schemas load and accept/reject the documented shapes."""

from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from contract_audit.contracts.load import (
    REQUEST_SCHEMA,
    RESULT_SCHEMA,
    load_schema,
    validate_file,
    validate_instance,
)
from contract_audit.model import Severity
from contract_audit.model.analysis_result import AnalysisResults, Metrics
from contract_audit.model.issue import Issue


class TestLoadSchema:

    @pytest.mark.parametrize("name", [REQUEST_SCHEMA, RESULT_SCHEMA])
    def test_bundled_schemas_are_valid(self, name: str) -> None:
        schema = load_schema(name)
        jsonschema.Draft7Validator.check_schema(schema)

    def test_unknown_schema(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_schema("nope.schema.json")


class TestRequestSchema:

    @pytest.mark.parametrize(
        "instance",
        [
            {"code": ""},
            {"code": "x", "config": None},
            {"code": "x", "config": {"enabled_rules": ["all"]}},
            {"code": "x", "config": {"custom_weights": {"security": 1}}},
        ],
    )
    def test_accepts(self, instance) -> None:
        validate_instance(instance, REQUEST_SCHEMA)

    @pytest.mark.parametrize(
        "instance",
        [
            {},
            {"code": None},
            {"code": "x", "config": {"rules": []}},
            {"code": "x", "config": {"enabled_rules": [1]}},
        ],
    )
    def test_rejects(self, instance) -> None:
        with pytest.raises(jsonschema.ValidationError):
            validate_instance(instance, REQUEST_SCHEMA)


class TestResultSchema:

    def test_model_output_validates(self) -> None:
        result = AnalysisResults(
            score=88,
            metrics=Metrics(security=85),
            issues=(
                Issue(severity=Severity.HIGH, message="m", line=2, recommendation="r"),
                Issue(severity=Severity.LOW, message="n"),
            ),
        )
        validate_instance(result.to_dict(), RESULT_SCHEMA)

    @pytest.mark.parametrize(
        "patch",
        [
            {"score": 101},
            {"score": -1},
            {"issues": [{"severity": "critical", "message": "m"}]},
            {"issues": [{"severity": "low", "message": "m", "line": 0}]},
        ],
    )
    def test_rejects_out_of_range(self, patch) -> None:
        instance = {**AnalysisResults(score=100, metrics=Metrics()).to_dict(), **patch}
        with pytest.raises(jsonschema.ValidationError):
            validate_instance(instance, RESULT_SCHEMA)

    def test_validate_file(self, tmp_path: Path) -> None:
        path = tmp_path / "result.json"
        path.write_text(json.dumps(AnalysisResults(score=1, metrics=Metrics()).to_dict()))
        validate_file(path, RESULT_SCHEMA)
