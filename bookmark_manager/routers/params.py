from fastapi import HTTPException, status

from ..schemas import MAX_ID


def _invalid(entity: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {entity} ID")


def parse_id(raw: str, entity: str) -> int:
    """Parse a path id: a positive integer that fits a 64-bit column.

    Anything else is rejected with ``400 Invalid <entity> ID``.
    """
    text = (raw or "").strip()
    if not (text.isascii() and text.isdigit()):
        raise _invalid(entity)
    value = int(text)
    if not 1 <= value <= MAX_ID:
        raise _invalid(entity)
    return value


def parse_filter_id(raw: str, entity: str) -> int:
    """Parse an id used as a query filter.

    Any signed integer is accepted; ids that can never exist (zero,
    negatives) simply match nothing. Values outside the 64-bit range are
    rejected like malformed ones.
    """
    text = (raw or "").strip()
    digits = text[1:] if text[:1] in ("-", "+") else text
    if not (digits.isascii() and digits.isdigit()):
        raise _invalid(entity)
    value = int(text)
    if not -MAX_ID - 1 <= value <= MAX_ID:
        raise _invalid(entity)
    return value
