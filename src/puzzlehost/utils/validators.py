"""Data validation helpers.

ID conventions:
- puzzle and answer ids are positive decimal integers ("42")
- anything else ("abcd", "-1", "4.2", or past 2**63 - 1) cannot name a stored entity

Functions:
- parse_entity_id(raw) -> int: Parse a path/query/body id
- split_answer_path(path) -> list[str]: Split "a/b/c" query segments
"""

# SQLite INTEGER is a signed 64-bit value
MAX_ID = 2**63 - 1


class InvalidIdError(Exception):
    """Raised when a value cannot be an entity id."""

    def __init__(self, raw: object):
        self.raw = raw
        super().__init__(f"'{raw}' is not a valid id")


def parse_entity_id(raw: str | int | None) -> int:
    """Parse an entity id.

    Args:
        raw: Id as received from a path segment, query string or body

    Returns:
        The id as an int

    Raises:
        InvalidIdError: If raw is not a positive decimal integer up to MAX_ID
    """
    if isinstance(raw, bool) or raw is None:
        raise InvalidIdError(raw)

    if isinstance(raw, int):
        if raw <= 0 or raw > MAX_ID:
            raise InvalidIdError(raw)
        return raw

    text = raw.strip()
    if not text.isascii() or not text.isdigit():
        raise InvalidIdError(raw)

    value = int(text)
    if value <= 0 or value > MAX_ID:
        raise InvalidIdError(raw)

    return value


def split_answer_path(path: str) -> list[str]:
    """Split the trailing answers of a query URL into ordered values.

    Examples:
        "5/8/10" -> ["5", "8", "10"]
        "" -> []
    """
    if not path:
        return []
    return path.split("/")
