from taskboard.errors import ValidationError


def validate_comment_content(content: str | None) -> str:
    """Return the trimmed comment text.

    Raises:
        ValidationError: If nothing is left after trimming
    """
    trimmed = (content or "").strip()
    if not trimmed:
        raise ValidationError("Comment content is required")
    return trimmed
