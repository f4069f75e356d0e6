"""Free-text cleanup for user-supplied notes and messages."""
import html
from typing import Optional

from registrar.config import settings
from registrar.errors import invalid_input


def sanitize_text(text: Optional[str], field: str = "text") -> Optional[str]:
    """Trim and HTML-escape ``text``; empty input becomes ``None``."""
    if text is None:
        return None
    cleaned = text.strip()
    if not cleaned:
        return None
    if len(cleaned) > settings.MAX_MESSAGE_LENGTH:
        raise invalid_input(f"{field} must be at most {settings.MAX_MESSAGE_LENGTH} characters")
    return html.escape(cleaned, quote=True)


def validate_guest_count(guest_count: Optional[int]) -> int:
    if guest_count is None:
        return 0
    if guest_count < 0:
        raise invalid_input("Guest count cannot be negative")
    if guest_count > settings.MAX_GUEST_COUNT:
        raise invalid_input(f"Guest count cannot exceed {settings.MAX_GUEST_COUNT}")
    return guest_count
