from __future__ import annotations

from lms.validators import PatronValidationError, PatronValidator, ValidationErrorKind


class Patron:
    """A single library patron: identifying details plus the overdue fine owed.

    The id is fixed at construction. Name, address and fine can be changed
    through their setters, which apply the same rules as the constructor and
    leave the record untouched when the new value is rejected.
    """

    def __init__(self, patron_id: int, name: str, address: str, overdue_fine: float) -> None:
        kind = PatronValidator.validate(patron_id, name, address, overdue_fine)
        if kind is not None:
            raise PatronValidationError(kind)

        self._patron_id = patron_id
        self._name = name.strip()
        self._address = address.strip()
        self._overdue_fine = float(overdue_fine)

    @property
    def patron_id(self) -> int:
        return self._patron_id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if not PatronValidator.is_non_empty_text(value):
            raise PatronValidationError(ValidationErrorKind.EMPTY_NAME)
        self._name = value.strip()

    @property
    def address(self) -> str:
        return self._address

    @address.setter
    def address(self, value: str) -> None:
        if not PatronValidator.is_non_empty_text(value):
            raise PatronValidationError(ValidationErrorKind.EMPTY_ADDRESS)
        self._address = value.strip()

    @property
    def overdue_fine(self) -> float:
        return self._overdue_fine

    @overdue_fine.setter
    def overdue_fine(self, value: float) -> None:
        if not PatronValidator.is_valid_fine(value):
            raise PatronValidationError(ValidationErrorKind.INVALID_FINE)
        self._overdue_fine = float(value)

    def __str__(self) -> str:
        return (f"Patron ID: {self._patron_id}, Name: {self._name}, "
                f"Address: {self._address}, Overdue Fine: ${self._overdue_fine:.2f}")

    def __repr__(self) -> str:
        return f"Patron({self._patron_id!r}, {self._name!r}, {self._address!r}, {self._overdue_fine!r})"

    def to_dict(self) -> dict:
        return {
            "patron_id": self._patron_id,
            "name": self._name,
            "address": self._address,
            "overdue_fine": self._overdue_fine,
        }

    @staticmethod
    def from_dict(data: dict) -> "Patron":
        return Patron(
            patron_id=data["patron_id"],
            name=data["name"],
            address=data["address"],
            overdue_fine=data.get("overdue_fine", 0.0),
        )
