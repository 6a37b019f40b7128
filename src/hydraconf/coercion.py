"""
Conversion between typed leaf values and the strings a store holds.

The store has no type system, so the default leaf decides how a stored string
is read back. Coercion is lenient: a boolean is True only for the exact text
'true', and numeric text that is not a JavaScript-style number literal (no
underscores, no 'inf' or 'nan' spellings) becomes NaN with a warning.
"""
import logging
import math
import re
from typing import Any, Union

from hydraconf.errors import InvalidLeafTypeError
from hydraconf.schema import KIND_BOOLEAN, KIND_NUMBER, KIND_STRING, value_kind

logger = logging.getLogger(__name__)

Leaf = Union[str, int, float, bool]

TRUE_TEXT = 'true'
FALSE_TEXT = 'false'


# Numeric literal forms a stored record may use (JavaScript Number() syntax)
_DECIMAL_RE = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?', re.ASCII)
_INTEGER_RE = re.compile(r'[+-]?\d+', re.ASCII)
_PREFIXED_RE = re.compile(r'0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+')
_SPECIAL_NUMBERS = {
    'Infinity': math.inf,
    '+Infinity': math.inf,
    '-Infinity': -math.inf,
    'NaN': math.nan,
}


def _parse_number(raw: str, default: Union[int, float]) -> Union[int, float]:
    text = raw.strip()
    if not text:
        # Blank numeric text reads as zero
        return type(default)(0)
    if text in _SPECIAL_NUMBERS:
        return _SPECIAL_NUMBERS[text]
    if _PREFIXED_RE.fullmatch(text):
        return int(text, 0)
    if _DECIMAL_RE.fullmatch(text):
        if isinstance(default, int) and _INTEGER_RE.fullmatch(text):
            return int(text)
        return float(text)
    logger.warning(f"Stored value {raw!r} is not numeric, reading it as NaN")
    return math.nan


def coerce_leaf(raw: str, default: Leaf) -> Leaf:
    """Read a stored string back as the default leaf's type.

    Args:
        raw: Text from the store
        default: Default value for the same path (type oracle)

    Returns:
        Number for a numeric default, bool for a boolean default, raw text otherwise
    """
    kind = value_kind(default)
    if kind == KIND_BOOLEAN:
        return raw == TRUE_TEXT
    if kind == KIND_NUMBER:
        return _parse_number(raw, default)
    if kind == KIND_STRING:
        return raw
    raise InvalidLeafTypeError(f"Cannot coerce into {type(default).__name__} default {default!r}")


def serialize_leaf(value: Any) -> str:
    """Canonical string form of a leaf, the inverse of coerce_leaf().

    >>> serialize_leaf(True), serialize_leaf(16.0), serialize_leaf(0.5)
    ('true', '16', '0.5')
    """
    kind = value_kind(value)
    if kind == KIND_BOOLEAN:
        return TRUE_TEXT if value else FALSE_TEXT
    if kind == KIND_STRING:
        return value
    if kind == KIND_NUMBER:
        if isinstance(value, int):
            return str(value)
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer():
            return str(int(value))
        return repr(value)
    raise InvalidLeafTypeError(f"Cannot serialize {type(value).__name__} value {value!r}")
