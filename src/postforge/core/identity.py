"""Identity and naming utilities.

- new_id: random identifier for every stored row
- utcnow: timezone-aware timestamp used for created/updated stamps
- generate_title: display title derived from a raw idea
"""

import uuid
from datetime import datetime, timezone

TITLE_MAX_LENGTH = 50
REMIX_PREFIX = "Remix: "


def new_id() -> str:
    """Return a new random identifier (UUID4 string)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


def truncate(text: str, max_length: int) -> str:
    """Truncate text to max_length characters, appending an ellipsis.

    Args:
        text: Text to truncate.
        max_length: Maximum number of characters kept before the ellipsis.

    Returns:
        Original text if short enough, else the trimmed prefix plus "...".

    Examples:
        >>> truncate("short", 10)
        'short'
        >>> truncate("a fairly long sentence", 8)
        'a fairly...'
    """
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def generate_title(idea: str, *, remix: bool = False) -> str:
    """Derive a session title from the first ~50 characters of an idea.

    Newlines are flattened to spaces. Remixed sessions get a "Remix: " prefix.

    Args:
        idea: Raw idea text.
        remix: Whether the session is a remix of another session.

    Returns:
        Display title.
    """
    cleaned = idea.strip().replace("\n", " ")
    title = truncate(cleaned, TITLE_MAX_LENGTH)
    return f"{REMIX_PREFIX}{title}" if remix else title
