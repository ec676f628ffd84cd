import math

import pytest

from lms.patron import Patron
from lms.validators import PatronValidationError, PatronValidator, ValidationErrorKind


def test_valid_patron_trims_text_fields():
    patron = Patron(1234567, "  Jane Doe ", "\t123 Main St  ", 12.5)
    assert patron.patron_id == 1234567
    assert patron.name == "Jane Doe"
    assert patron.address == "123 Main St"
    assert patron.overdue_fine == 12.5


@pytest.mark.parametrize("patron_id", [1000000, 9999999])
def test_id_bounds_are_inclusive(patron_id):
    assert Patron(patron_id, "A", "B", 0).patron_id == patron_id


@pytest.mark.parametrize("fine", [0, 0.0, 250, 250.0])
def test_fine_bounds_are_inclusive(fine):
    assert Patron(1234567, "A", "B", fine).overdue_fine == float(fine)


@pytest.mark.parametrize("patron_id", [999999, 10000000, 0, -1234567, True])
def test_invalid_id_rejected(patron_id):
    with pytest.raises(PatronValidationError) as exc:
        Patron(patron_id, "A", "B", 1.0)
    assert exc.value.kind is ValidationErrorKind.INVALID_ID
    assert str(exc.value) == "Patron ID must be exactly 7 digits."


@pytest.mark.parametrize("fine", [-0.01, 250.01, math.nan, math.inf])
def test_invalid_fine_rejected(fine):
    with pytest.raises(PatronValidationError) as exc:
        Patron(1234567, "A", "B", fine)
    assert exc.value.kind is ValidationErrorKind.INVALID_FINE


@pytest.mark.parametrize("name", ["", "   ", None, ",", " , \n\r,"])
def test_empty_name_rejected(name):
    with pytest.raises(PatronValidationError) as exc:
        Patron(1234567, name, "B", 1.0)
    assert exc.value.kind is ValidationErrorKind.EMPTY_NAME


def test_empty_address_rejected():
    with pytest.raises(PatronValidationError) as exc:
        Patron(1234567, "A", " ", 1.0)
    assert exc.value.kind is ValidationErrorKind.EMPTY_ADDRESS


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        Patron(1, "A", "B", 1.0)


def test_setters_revalidate_and_do_not_partially_apply():
    patron = Patron(1234567, "Jane", "1 Main St", 10.0)

    with pytest.raises(PatronValidationError):
        patron.name = "  "
    with pytest.raises(PatronValidationError):
        patron.address = ""
    with pytest.raises(PatronValidationError):
        patron.overdue_fine = 300

    assert patron.to_dict() == {
        "patron_id": 1234567,
        "name": "Jane",
        "address": "1 Main St",
        "overdue_fine": 10.0,
    }

    patron.name = " Janet "
    patron.address = "2 Oak St"
    patron.overdue_fine = 0
    assert (patron.name, patron.address, patron.overdue_fine) == ("Janet", "2 Oak St", 0.0)


def test_patron_id_is_read_only():
    patron = Patron(1234567, "Jane", "1 Main St", 10.0)
    with pytest.raises(AttributeError):
        patron.patron_id = 7654321


def test_str_and_from_dict():
    patron = Patron.from_dict({"patron_id": 1234567, "name": "Jane", "address": "1 Main St", "overdue_fine": 12.5})
    assert str(patron) == "Patron ID: 1234567, Name: Jane, Address: 1 Main St, Overdue Fine: $12.50"


def test_validator_reports_first_violation():
    assert PatronValidator.validate(1234567, "A", "B", 1.0) is None
    assert PatronValidator.validate(12, "", "", 999) is ValidationErrorKind.INVALID_ID
    assert PatronValidator.validate(1234567, "A", "", 999) is ValidationErrorKind.EMPTY_ADDRESS
    assert PatronValidator.validate(1234567, "A", "B", "5") is ValidationErrorKind.INVALID_FINE


def test_setter_rejects_text_made_only_of_delimiters():
    patron = Patron(1234567, "Jane", "1 Main St", 10.0)
    with pytest.raises(PatronValidationError):
        patron.address = ",\n"
    assert patron.address == "1 Main St"
