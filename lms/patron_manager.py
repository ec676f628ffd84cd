import logging
from typing import Iterator, List, Optional

from lms.patron import Patron
from lms.validators import PatronValidationError, PatronValidator, ValidationErrorKind

logger = logging.getLogger(__name__)


class PatronManager:
    """Keeps the patrons currently loaded in memory. Never touches the data file."""

    def __init__(self) -> None:
        self.patrons: List[Patron] = []

    # ------------------------- Core operations ------------------------- #
    def add_patron(self, patron: Optional[Patron]) -> bool:
        """Add a pre-constructed Patron. Rejects None and duplicate ids."""
        if patron is None:
            return False
        if self.is_duplicate_id(patron.patron_id):
            logger.debug(f"Rejected duplicate patron id {patron.patron_id}")
            return False

        self.patrons.append(patron)
        logger.debug(f"Added patron {patron.patron_id}")
        return True

    def remove_patron(self, patron_id: int) -> bool:
        patron = self.find_patron(patron_id)
        if not patron:
            return False

        self.patrons = [p for p in self.patrons if p.patron_id != patron_id]
        logger.debug(f"Removed patron {patron_id}")
        return True

    def find_patron(self, patron_id: int) -> Optional[Patron]:
        for patron in self.patrons:
            if patron.patron_id == patron_id:
                return patron
        return None

    def is_duplicate_id(self, patron_id: int) -> bool:
        return self.find_patron(patron_id) is not None

    def list_patrons(self) -> List[Patron]:
        return list(self.patrons)

    def update_patron(self, patron_id: int, *, name: Optional[str] = None, address: Optional[str] = None,
                      overdue_fine: Optional[float] = None) -> Optional[Patron]:
        """Update name, address and/or fine of a patron. Returns the patron or None if not found.

        Every supplied value is checked before any is applied, so a rejected
        update leaves the patron exactly as it was.
        """
        if name is None and address is None and overdue_fine is None:
            raise ValueError("Nothing to update. Provide name, address and/or overdue fine.")

        patron = self.find_patron(patron_id)
        if not patron:
            return None

        if name is not None and not PatronValidator.is_non_empty_text(name):
            raise PatronValidationError(ValidationErrorKind.EMPTY_NAME)
        if address is not None and not PatronValidator.is_non_empty_text(address):
            raise PatronValidationError(ValidationErrorKind.EMPTY_ADDRESS)
        if overdue_fine is not None and not PatronValidator.is_valid_fine(overdue_fine):
            raise PatronValidationError(ValidationErrorKind.INVALID_FINE)

        if name is not None:
            patron.name = name
        if address is not None:
            patron.address = address
        if overdue_fine is not None:
            patron.overdue_fine = overdue_fine
        logger.debug(f"Updated patron {patron_id}")
        return patron

    def __len__(self) -> int:
        return len(self.patrons)

    def __iter__(self) -> Iterator[Patron]:
        return iter(list(self.patrons))

    def __contains__(self, patron_id: object) -> bool:
        return any(p.patron_id == patron_id for p in self.patrons)
