"""Validation errors raised by the scheduling core."""


class SchedulingError(ValueError):
    """Base class: the caller passed input outside the scheduler's contract."""


class InvalidQualityError(SchedulingError):
    """Quality rating is not an integer in 0..5."""

    def __init__(self, quality):
        self.quality = quality
        super().__init__(f"Quality must be an integer 0-5, got {quality!r}")


class InvalidTimestampError(SchedulingError):
    """A timestamp is missing where required, or cannot be parsed."""

    def __init__(self, value, field: str = 'timestamp'):
        self.value = value
        self.field = field
        super().__init__(f"Invalid {field}: {value!r}")


class InvalidStateError(SchedulingError):
    """A scheduling state field is outside its domain."""
