from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def excerpt(text: str, length: int = 100) -> str:
    """Cut text to `length` characters, marking the cut with an ellipsis."""
    if len(text) <= length:
        return text
    return text[:length] + "..."
