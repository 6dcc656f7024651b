from typing import Dict, List, Optional

import pandas as pd

from errors import (
    DateFormatError, InvalidSemesterError, MarksFormatError, MissingFieldError,
    WeakPasswordError
)

SEMESTERS = ('sem1', 'sem2', 'sem3', 'sem4', 'sem5', 'sem6')
MIN_MARK = 0
MAX_MARK = 100
MIN_PASSWORD_LENGTH = 6


def validate_required_fields(fields: Dict[str, Optional[str]], message: Optional[str] = None) -> None:
    """Raise MissingFieldError naming every field that is absent or blank."""
    missing = [name for name, value in fields.items()
               if value is None or not str(value).strip()]
    if missing:
        raise MissingFieldError(missing, message)


def normalize_date(raw: str) -> str:
    """
    Reduce any date representation pandas understands to YYYY-MM-DD.
    Timezone-aware values are converted to UTC first. Input without any
    digits is refused, so relative words like "now" or "today" never pass.
    """
    text = str(raw).strip()
    if not any(ch.isdigit() for ch in text):
        raise DateFormatError()
    try:
        timestamp = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError):
        raise DateFormatError()

    if pd.isna(timestamp):
        raise DateFormatError()
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert('UTC')
    return timestamp.strftime('%Y-%m-%d')


def validate_semester(name: str) -> str:
    semester = str(name).strip() if name is not None else ''
    if semester not in SEMESTERS:
        raise InvalidSemesterError()
    return semester


def parse_marks(raw: str) -> List[int]:
    """
    Parse comma separated marks such as "70, 85,90".

    Every token is checked before anything is returned, so a bad token
    anywhere means no marks at all. The error carries the position of
    the first offending token.
    """
    marks = []
    for index, token in enumerate(str(raw).split(',')):
        token = token.strip()
        if not (token.isascii() and token.isdigit()):
            raise MarksFormatError(index, token)
        mark = int(token)
        if mark < MIN_MARK or mark > MAX_MARK:
            raise MarksFormatError(index, token)
        marks.append(mark)
    return marks


def validate_password_strength(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError()
