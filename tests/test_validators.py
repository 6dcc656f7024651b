# tests/test_validators.py

import pytest

from errors import (
    DateFormatError, InvalidSemesterError, MarksFormatError, MissingFieldError,
    WeakPasswordError
)
from validators import (
    normalize_date, parse_marks, validate_password_strength, validate_required_fields,
    validate_semester
)


def test_required_fields_pass_when_all_present():
    validate_required_fields({"regNo": "21CS001", "dob": "2003-04-15"})


def test_required_fields_report_blank_and_missing_names():
    with pytest.raises(MissingFieldError) as exc_info:
        validate_required_fields({"regNo": "   ", "dob": None, "department": "CSE"})

    assert exc_info.value.fields == ["regNo", "dob"]
    assert exc_info.value.message == "All fields are required"


def test_required_fields_custom_message():
    with pytest.raises(MissingFieldError) as exc_info:
        validate_required_fields({"adminId": ""}, "Admin ID and password are required")

    assert exc_info.value.message == "Admin ID and password are required"


@pytest.mark.parametrize(
    "raw",
    ["2003-04-15", "2003/04/15", "April 15, 2003", "15 Apr 2003", "2003-04-15T10:30:00"],
)
def test_normalize_date_accepts_common_formats(raw):
    assert normalize_date(raw) == "2003-04-15"


def test_normalize_date_converts_offsets_to_utc():
    assert normalize_date("2003-04-15T23:00:00-05:00") == "2003-04-16"


@pytest.mark.parametrize("raw", ["not a date", "2003-13-45", "", "now", "today", "Today "])
def test_normalize_date_rejects_garbage(raw):
    with pytest.raises(DateFormatError):
        normalize_date(raw)


def test_validate_semester():
    assert validate_semester("sem3") == "sem3"
    assert validate_semester(" sem6 ") == "sem6"

    with pytest.raises(InvalidSemesterError):
        validate_semester("sem7")
    with pytest.raises(InvalidSemesterError):
        validate_semester("Sem1")
    with pytest.raises(InvalidSemesterError):
        validate_semester(3)
    with pytest.raises(InvalidSemesterError):
        validate_semester(None)


def test_parse_marks():
    assert parse_marks("70,85,90") == [70, 85, 90]
    assert parse_marks(" 0 , 100 ") == [0, 100]
    assert parse_marks("55") == [55]


def test_parse_marks_rejects_non_numeric_token():
    with pytest.raises(MarksFormatError) as exc_info:
        parse_marks("70,abc")

    assert exc_info.value.index == 1
    assert exc_info.value.token == "abc"


def test_parse_marks_rejects_out_of_range():
    with pytest.raises(MarksFormatError) as exc_info:
        parse_marks("70,150")

    assert exc_info.value.index == 1


@pytest.mark.parametrize("raw", ["-5", "70,,80", "7.5", "1_0", "70,", "\u0667\u0660,80"])
def test_parse_marks_rejects_malformed_tokens(raw):
    with pytest.raises(MarksFormatError):
        parse_marks(raw)


def test_password_strength_boundary():
    with pytest.raises(WeakPasswordError):
        validate_password_strength("12345")

    validate_password_strength("123456")
