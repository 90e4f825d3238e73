"""Error types for productivity-tracker."""


class InvalidArgument(ValueError):
    """Raised for malformed windows, dates, day counts or record payloads."""
