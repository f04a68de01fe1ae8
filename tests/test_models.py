"""Tests for model serialization."""

import dataclasses

import pytest

from spockscan.models import (
    BlockSpan,
    DataIteration,
    ErrorInfo,
    ErrorLocation,
    SourceRange,
    TestIterationResult,
    TestMethod,
)


class TestSourceRange:
    def test_for_line(self):
        assert SourceRange.for_line(3, "abc") == SourceRange(3, 0, 3, 3)

    def test_to_dict(self):
        assert SourceRange(1, 2, 3, 4).to_dict() == {
            "startLine": 1,
            "startColumn": 2,
            "endLine": 3,
            "endColumn": 4,
        }

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            SourceRange(0, 0, 0, 0).start_line = 1


class TestBlockSpan:
    def test_body(self):
        assert list(BlockSpan(2, 5).body()) == [3, 4]


class TestTestMethod:
    """Tests for TestMethod.to_dict."""

    def test_plain_method_omits_data_keys(self):
        data = TestMethod("works", 4, SourceRange.for_line(4, "x")).to_dict()

        assert data["isDataDriven"] is False
        assert "dataIterations" not in data
        assert "whereBlockRange" not in data

    def test_data_driven_method(self):
        iteration = DataIteration(0, {"a": 1}, "f [a: 1]", SourceRange.for_line(8, "1"), "f")
        method = TestMethod(
            "f",
            4,
            SourceRange.for_line(4, "x"),
            is_data_driven=True,
            data_iterations=(iteration,),
            where_block_range=SourceRange(7, 0, 9, 1),
        )

        data = method.to_dict()

        assert data["dataIterations"][0]["displayName"] == "f [a: 1]"
        assert data["dataIterations"][0]["originalMethodName"] == "f"
        assert data["whereBlockRange"]["endLine"] == 9


class TestIterationResultSerialization:
    def test_success(self):
        data = TestIterationResult(0, "f [a: 1, #0]", {"a": 1}).to_dict()

        assert data["success"] is True
        assert data["errorInfo"] is None

    def test_failure_with_location(self):
        error = ErrorInfo("boom", ErrorLocation("FooSpec.groovy", 9))
        data = TestIterationResult(1, "f [a: 2, #1]", success=False, error_info=error).to_dict()

        assert data["errorInfo"] == {
            "error": "boom",
            "location": {"file": "FooSpec.groovy", "line": 9},
        }


class TestMappingFields:
    """Mapping fields cannot be changed after construction."""

    def test_data_values_read_only(self):
        values = {"a": 1}
        iteration = DataIteration(0, values, "f [a: 1]", SourceRange.for_line(0, "x"), "f")

        with pytest.raises(TypeError):
            iteration.data_values["a"] = 2
        values["a"] = 3
        assert iteration.data_values == {"a": 1}

    def test_parameters_read_only(self):
        result = TestIterationResult(0, "f [a: 1, #0]", {"a": 1})

        with pytest.raises(TypeError):
            result.parameters["b"] = 2

    def test_models_with_mappings_unhashable(self):
        """Models holding mappings raise TypeError on hash()."""
        iteration = DataIteration(0, {}, "f", SourceRange.for_line(0, "x"), "f")

        with pytest.raises(TypeError):
            hash(iteration)
        with pytest.raises(TypeError):
            hash(TestIterationResult(0, "f [a: 1, #0]"))

    def test_equality_with_plain_dicts(self):
        """Read-only mappings still compare equal to dicts."""
        assert TestIterationResult(0, "f", {"a": 1}) == TestIterationResult(0, "f", {"a": 1})
        assert TestIterationResult(0, "f", {"a": 1}).parameters == {"a": 1}
