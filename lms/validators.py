from enum import Enum
from typing import Any, Optional

MIN_PATRON_ID = 1_000_000
MAX_PATRON_ID = 9_999_999
MIN_FINE = 0.0
MAX_FINE = 250.0
FIELD_DELIMITER = ","


def sanitize_text(text: str) -> str:
    """Replace the field delimiter and line breaks with a space, then strip."""
    return text.replace(FIELD_DELIMITER, " ").replace("\n", " ").replace("\r", " ").strip()


class ValidationErrorKind(Enum):
    INVALID_ID = "invalid_id"
    EMPTY_NAME = "empty_name"
    EMPTY_ADDRESS = "empty_address"
    INVALID_FINE = "invalid_fine"


ERROR_MESSAGES = {
    ValidationErrorKind.INVALID_ID: "Patron ID must be exactly 7 digits.",
    ValidationErrorKind.EMPTY_NAME: "Name cannot be empty.",
    ValidationErrorKind.EMPTY_ADDRESS: "Address cannot be empty.",
    ValidationErrorKind.INVALID_FINE: "Overdue fine must be between 0 and 250.",
}


class PatronValidationError(ValueError):
    """Raised when a patron field violates its constraint."""

    def __init__(self, kind: ValidationErrorKind, message: Optional[str] = None) -> None:
        self.kind = kind
        super().__init__(message or ERROR_MESSAGES[kind])


class PatronValidator:
    """Field rules shared by the Patron model, the data file loader and the CLI prompts."""

    @staticmethod
    def is_valid_patron_id(patron_id: Any) -> bool:
        # bool is an int subclass; True must not pass as an id
        if isinstance(patron_id, bool) or not isinstance(patron_id, int):
            return False
        return MIN_PATRON_ID <= patron_id <= MAX_PATRON_ID

    @staticmethod
    def is_valid_fine(fine: Any) -> bool:
        if isinstance(fine, bool) or not isinstance(fine, (int, float)):
            return False
        # NaN fails both comparisons
        return MIN_FINE <= fine <= MAX_FINE

    @staticmethod
    def is_non_empty_text(text: Optional[str]) -> bool:
        """True when something is left once the text is made safe for the data file."""
        if text is None or not isinstance(text, str):
            return False
        return bool(sanitize_text(text))

    @staticmethod
    def validate(patron_id: Any, name: Optional[str], address: Optional[str], fine: Any) -> Optional[ValidationErrorKind]:
        """Return the first violated rule, or None when all four fields are valid."""
        if not PatronValidator.is_valid_patron_id(patron_id):
            return ValidationErrorKind.INVALID_ID
        if not PatronValidator.is_non_empty_text(name):
            return ValidationErrorKind.EMPTY_NAME
        if not PatronValidator.is_non_empty_text(address):
            return ValidationErrorKind.EMPTY_ADDRESS
        if not PatronValidator.is_valid_fine(fine):
            return ValidationErrorKind.INVALID_FINE
        return None
