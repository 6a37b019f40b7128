"""
Error taxonomy for hydraconf.

All errors are programmer or schema errors: none of them are retried, and all
of them propagate synchronously to the caller of the triggering operation.
Each class also derives from the builtin exception a Python caller would
naturally catch for the same condition.
"""

__all__ = [
    'HydraConfError',
    'MalformedPathError',
    'PathNotFoundError',
    'ShapeMismatchError',
    'UnknownMemberError',
    'TypeMismatchError',
    'InvalidLeafTypeError',
]


class HydraConfError(Exception):
    """Base class for every error raised by hydraconf."""
    pass


class MalformedPathError(HydraConfError, ValueError):
    """Dot path is syntactically invalid (empty segment, non-integer array index)."""
    pass


class PathNotFoundError(HydraConfError, LookupError):
    """Dot path descends through a primitive or addresses an absent member."""
    pass


class ShapeMismatchError(HydraConfError, TypeError):
    """Container and shape oracle disagree on array vs. map."""
    pass


class UnknownMemberError(HydraConfError, AttributeError):
    """Write to a member that the default tree does not define."""
    pass


class TypeMismatchError(HydraConfError, TypeError):
    """Written value's primitive kind differs from the existing member's."""
    pass


class InvalidLeafTypeError(HydraConfError, TypeError):
    """Leaf value is not a string, number or boolean."""
    pass
