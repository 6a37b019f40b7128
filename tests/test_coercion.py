"""Tests for stored-string coercion and leaf serialization."""
import math

import pytest

from hydraconf import InvalidLeafTypeError, coerce_leaf, serialize_leaf


class TestCoerceLeaf:
    """Test coerce_leaf()."""

    def test_integer_default(self):
        value = coerce_leaf('42', 14)
        assert value == 42
        assert isinstance(value, int)

    def test_integer_default_with_fractional_text(self):
        assert coerce_leaf('14.5', 14) == 14.5

    def test_float_default(self):
        assert coerce_leaf('0.25', 0.5) == 0.25
        assert coerce_leaf('3', 0.5) == 3.0

    def test_blank_number_reads_as_zero(self):
        assert coerce_leaf('', 14) == 0
        assert coerce_leaf('  ', 0.5) == 0.0

    def test_unparseable_number_is_nan(self, caplog):
        assert math.isnan(coerce_leaf('wide', 14))
        assert 'not numeric' in caplog.text

    @pytest.mark.parametrize('raw', ['1_000', 'inf', '-inf', 'nan', 'infinity', '1e', '0x', '--1', '١٢'])
    def test_only_number_literal_syntax_parses(self, raw, caplog):
        """Python-only spellings are not numbers in a stored record."""
        assert math.isnan(coerce_leaf(raw, 14))
        assert math.isnan(coerce_leaf(raw, 0.5))
        assert 'not numeric' in caplog.text

    def test_number_literal_forms(self):
        assert coerce_leaf(' 42 ', 14) == 42
        assert coerce_leaf('+7', 14) == 7
        assert coerce_leaf('.5', 14) == 0.5
        assert coerce_leaf('5.', 0.5) == 5.0
        assert coerce_leaf('1e3', 14) == 1000.0
        assert coerce_leaf('0x1F', 14) == 31
        assert coerce_leaf('0b101', 0.5) == 5

    def test_non_finite_text(self, caplog):
        assert coerce_leaf('Infinity', 14) == math.inf
        assert coerce_leaf('-Infinity', 0.5) == -math.inf
        assert math.isnan(coerce_leaf('NaN', 14))
        assert 'not numeric' not in caplog.text

    @pytest.mark.parametrize('raw', ['yes', 'false', '', 'True', 'TRUE', '1'])
    def test_boolean_only_exact_true(self, raw):
        assert coerce_leaf(raw, True) is False

    def test_boolean_true(self):
        assert coerce_leaf('true', False) is True

    def test_string_passthrough(self):
        assert coerce_leaf('14', 'dark') == '14'

    def test_non_primitive_default(self):
        with pytest.raises(InvalidLeafTypeError):
            coerce_leaf('x', None)


class TestSerializeLeaf:
    """Test serialize_leaf()."""

    def test_canonical_forms(self):
        assert serialize_leaf(True) == 'true'
        assert serialize_leaf(False) == 'false'
        assert serialize_leaf(16) == '16'
        assert serialize_leaf(16.0) == '16'
        assert serialize_leaf(0.1) == '0.1'
        assert serialize_leaf('dark') == 'dark'

    def test_non_finite_numbers(self):
        assert serialize_leaf(math.nan) == 'NaN'
        assert serialize_leaf(math.inf) == 'Infinity'
        assert serialize_leaf(-math.inf) == '-Infinity'

    def test_serialized_values_coerce_back(self):
        for value in (True, False, 7, 2.5, 'text'):
            assert coerce_leaf(serialize_leaf(value), value) == value

    def test_containers_rejected(self):
        with pytest.raises(InvalidLeafTypeError):
            serialize_leaf({'a': 1})
