"""Tests for converting evaluation results to static types."""

import math

import pytest

from fieldexpr.errors import ConversionError, EvalError
from fieldexpr.template.coercion import ValueKind, classify, convert, to_bool, to_float, to_int, to_string


class TestClassify:
    """Test classifying results into value kinds."""

    @pytest.mark.parametrize("value, kind", [
        ("text", ValueKind.STRING),
        (3, ValueKind.INT),
        (2.5, ValueKind.FLOAT),
        (True, ValueKind.BOOL),
        (False, ValueKind.BOOL),
        (None, ValueKind.OPAQUE),
        ([1, 2], ValueKind.OPAQUE),
        (b"raw", ValueKind.OPAQUE),
    ])
    def test_kinds(self, value, kind):
        assert classify(value) is kind


class TestToInt:
    """Test conversion to int."""

    def test_integer_identity(self):
        assert to_int(42) == 42

    def test_float_truncates_toward_zero(self):
        assert to_int(3.9) == 3
        assert to_int(-3.9) == -3

    def test_string_is_parsed(self):
        assert to_int("42") == 42
        assert to_int("-7") == -7

    def test_bool(self):
        assert to_int(True) == 1
        assert to_int(False) == 0

    def test_unparsable_string(self):
        with pytest.raises(ConversionError) as excinfo:
            to_int("abc")
        assert "cannot convert str 'abc' to int" in str(excinfo.value)

    def test_float_string_is_not_an_integer(self):
        with pytest.raises(ConversionError):
            to_int("1.5")

    @pytest.mark.parametrize("text", [" 7 ", "7\n", "1_000", "\u0661\u0662", "0x1f", "+", ""])
    def test_only_plain_ascii_literals(self, text):
        with pytest.raises(ConversionError) as excinfo:
            to_int(text)
        assert excinfo.value.target == "int"

    def test_opaque_value(self):
        with pytest.raises(ConversionError) as excinfo:
            to_int(None)
        assert "NoneType" in str(excinfo.value)
        assert excinfo.value.target == "int"

    def test_infinity(self):
        with pytest.raises(ConversionError):
            to_int(float("inf"))


class TestToBool:
    """Test conversion to bool."""

    def test_bool_identity(self):
        assert to_bool(True) is True
        assert to_bool(False) is False

    def test_numbers(self):
        assert to_bool(2) is True
        assert to_bool(0) is False
        assert to_bool(0.0) is False
        assert to_bool(-0.5) is True

    @pytest.mark.parametrize("text", ["true", "TRUE", "1", "yes", "On"])
    def test_true_strings(self, text):
        assert to_bool(text) is True

    @pytest.mark.parametrize("text", ["false", "False", "0", "no", "OFF", ""])
    def test_false_strings(self, text):
        assert to_bool(text) is False

    def test_other_strings(self):
        with pytest.raises(ConversionError) as excinfo:
            to_bool("maybe")
        assert "cannot convert str 'maybe' to bool" in str(excinfo.value)

    def test_opaque_value(self):
        with pytest.raises(ConversionError):
            to_bool(["x"])


class TestToFloat:
    """Test conversion to float."""

    def test_numbers_widen(self):
        result = to_float(3)
        assert result == 3.0
        assert isinstance(result, float)
        assert to_float(1.5) == 1.5

    def test_string_is_parsed(self):
        assert to_float("2.5") == 2.5
        assert to_float("-1e3") == -1000.0
        assert to_float(".5") == 0.5
        assert to_float("7") == 7.0

    def test_non_finite_strings(self):
        assert math.isinf(to_float("Inf"))
        assert math.isinf(to_float("-infinity"))
        assert math.isnan(to_float("NaN"))

    @pytest.mark.parametrize("text", [" 2.5", "2.5 ", "1_000.5", "\u0661.5", "1e", "."])
    def test_only_plain_ascii_literals(self, text):
        with pytest.raises(ConversionError):
            to_float(text)

    def test_bool(self):
        assert to_float(True) == 1.0
        assert to_float(False) == 0.0

    def test_unparsable_string(self):
        with pytest.raises(ConversionError) as excinfo:
            to_float("n/a")
        assert "to float" in str(excinfo.value)

    def test_opaque_value(self):
        with pytest.raises(ConversionError):
            to_float({"a": 1})


class TestToString:
    """Test default textual rendering."""

    @pytest.mark.parametrize("value, expected", [
        ("text", "text"),
        (3, "3"),
        (1.5, "1.5"),
        (3.0, "3"),
        (-2.0, "-2"),
        (1e20, "1e+20"),
        (float("inf"), "inf"),
        (True, "true"),
        (False, "false"),
        (None, ""),
        (b"raw", "raw"),
    ])
    def test_rendering(self, value, expected):
        assert to_string(value) == expected


class TestConvert:
    """Test dispatching conversions by target name."""

    def test_dispatches_by_name(self):
        assert convert("7", "int") == 7
        assert convert("on", "bool") is True
        assert convert(1, "float") == 1.0
        assert convert(False, "string") == "false"

    def test_unknown_target(self):
        with pytest.raises(ValueError):
            convert(1, "decimal")

    def test_conversion_error_is_an_eval_error(self):
        with pytest.raises(EvalError):
            convert("x", "int")
