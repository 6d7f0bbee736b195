"""Error taxonomy of the numerology engine.

Every error aborts the whole computation. ``code`` is the stable identifier
returned to API clients next to the human-readable message.
"""
from __future__ import annotations


class NumerologyError(Exception):
    code = "NUMEROLOGY_ERROR"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class NumerologyInputError(NumerologyError, ValueError):
    """The caller supplied civil-state data the engine cannot work with."""


class MissingRequiredFieldsError(NumerologyInputError):
    code = "MISSING_REQUIRED_FIELDS"


class InvalidDateFormatError(NumerologyInputError):
    code = "INVALID_DATE_FORMAT"


class InvalidDateValueError(NumerologyInputError):
    code = "INVALID_DATE_VALUE"


class NumerologyInvariantError(NumerologyError, RuntimeError):
    """Reduction or table lookup produced something it never should."""


class UnsupportedLifePathError(NumerologyInvariantError):
    code = "UNSUPPORTED_LIFE_PATH"


class RecapLookupFailedError(NumerologyInvariantError):
    code = "RECAP_LOOKUP_FAILED"


class InvalidTargetYearError(NumerologyInputError):
    code = "INVALID_TARGET_YEAR"
