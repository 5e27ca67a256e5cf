"""rangecard exception types.

Only inputs that cannot be safely clamped are reported to the caller.
Numerical edge cases inside the solver (a degenerate ballistic coefficient,
a stalled projectile, subsonic decay) are absorbed by clamping or by ending
the trajectory early, and never raise.

Exception hierarchy::

    ValueError
    └── BallisticInputError
        ├── InvalidRangeError
        ├── InvalidVelocityError
        ├── InvalidClickSizeError
        └── InvalidAtmosphereError
"""

__all__ = (
    'BallisticInputError',
    'InvalidRangeError',
    'InvalidVelocityError',
    'InvalidClickSizeError',
    'InvalidAtmosphereError',
)


class BallisticInputError(ValueError):
    """Base class for rejected ``BallisticInput`` values."""

    def __init__(self, field: str, value, message: str):
        self.field = field
        self.value = value
        super().__init__(f"{field}={value!r}: {message}")


class InvalidRangeError(BallisticInputError):
    """Zero range is non-positive, non-finite or beyond the supported limit."""


class InvalidVelocityError(BallisticInputError):
    """Muzzle velocity is non-finite or outside the supported band."""


class InvalidClickSizeError(BallisticInputError):
    """Click size is non-positive or non-finite."""


class InvalidAtmosphereError(BallisticInputError):
    """Temperature at or below absolute zero, or a non-physical pressure or density altitude."""
