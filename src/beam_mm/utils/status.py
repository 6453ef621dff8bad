"""
Exit status codes for the command line.
Using simple numeric constants for language-independent logic.
"""

from beam_mm.core.errors import (
    BeamMMError,
    DuplicateNameError,
    InvalidNameError,
    NotFoundError,
    ParseError,
    StorageError,
    VersionError,
)


class Status:
    """Process exit codes"""

    SUCCESS = 0
    FAILED = 1
    USAGE_ERROR = 2
    NOT_FOUND = 3
    ALREADY_EXISTS = 4
    INVALID_DATA = 5
    STORAGE_ERROR = 6

    _ERROR_CODES = (
        (NotFoundError, NOT_FOUND),
        (DuplicateNameError, ALREADY_EXISTS),
        (InvalidNameError, USAGE_ERROR),
        (ParseError, INVALID_DATA),
        (VersionError, INVALID_DATA),
        (StorageError, STORAGE_ERROR),
    )

    @classmethod
    def get_name(cls, code: int) -> str:
        """Get status name for debugging"""
        for name, value in cls.__dict__.items():
            if not name.startswith("_") and value == code:
                return name
        return "UNKNOWN"

    @classmethod
    def is_success(cls, code: int) -> bool:
        """Check if status code indicates success"""
        return code == cls.SUCCESS

    @classmethod
    def for_error(cls, error: BeamMMError) -> int:
        """Map an error to the exit code the CLI reports for it"""
        for error_type, code in cls._ERROR_CODES:
            if isinstance(error, error_type):
                return code
        return cls.FAILED
