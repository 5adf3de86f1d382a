"""Input sanitization utilities.

Cleans raw user input before it reaches the board store: strips control
characters and markup, folds newlines, bounds lengths and numbers, and
reduces task/column/label payloads to the fields that passed. Each
``sanitize_*_data`` helper returns only the keys it accepted; a missing key
means "use the default / leave unchanged", never "clear".

The store re-validates structure on its own, so these helpers are about
cleaning content rather than enforcing invariants.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from kanban_board.models.core import (
    COLUMN_TITLE_MAX_LENGTH,
    HEX_COLOR_PATTERN,
    LABEL_NAME_MAX_LENGTH,
    PRIORITIES,
    TASK_DETAILS_MAX_LENGTH,
    TASK_STATUSES,
    TASK_TITLE_MAX_LENGTH,
)

DEFAULT_MAX_LENGTH = 1000
MAX_TASK_LABELS = 10
MAX_COLUMN_ORDER = 1000
MAX_FILENAME_LENGTH = 255
MAX_KEY_LENGTH = 100

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_HTML_TAG = re.compile(r"<[^>]*>")
_DANGEROUS_CHARS = re.compile(r"[<>\"']")
_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)
_NEWLINES = re.compile(r"[\r\n]")

_EMAIL_DISALLOWED = re.compile(r"[^a-z0-9@.\-_+]")
_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

_FILENAME_DISALLOWED = re.compile(r"[/\\:*?\"<>|]")
_REPEATED_DOTS = re.compile(r"\.{2,}")
_LEADING_DOTS = re.compile(r"^\.+")

# Leading numeric prefix, the way a lenient float parser reads "8.5 stars".
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

_HEX_COLOR = re.compile(HEX_COLOR_PATTERN)


def sanitize_input(
    value: Any,
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    allow_html: bool = False,
    preserve_newlines: bool = True,
) -> str:
    """Clean a free-text value.

    Non-strings become ``""``. Control characters (except tab/newline) are
    removed; unless *allow_html*, tags, ``<>"'``, ``javascript:`` and inline
    ``on*=`` handlers are stripped. The result is trimmed, then truncated.

    Example:
        >>> sanitize_input('<script>alert("xss")</script>Hello World')
        'alert(xss)Hello World'
    """
    if not isinstance(value, str):
        return ""

    cleaned = _CONTROL_CHARS.sub("", value)

    if not allow_html:
        cleaned = _HTML_TAG.sub("", cleaned)
        cleaned = _DANGEROUS_CHARS.sub("", cleaned)
        cleaned = _JS_PROTOCOL.sub("", cleaned)
        cleaned = _EVENT_HANDLER.sub("", cleaned)

    if not preserve_newlines:
        cleaned = _NEWLINES.sub(" ", cleaned)

    cleaned = cleaned.strip()
    return cleaned[:max_length]


def sanitize_email(value: Any) -> str:
    """Lower-case and filter an email address; ``""`` when it is not well formed."""
    if not isinstance(value, str):
        return ""
    cleaned = _EMAIL_DISALLOWED.sub("", value.lower()).strip()
    return cleaned if _EMAIL_PATTERN.match(cleaned) else ""


def sanitize_url(value: Any, allowed_protocols: tuple[str, ...] = ("http", "https")) -> str:
    """Return the URL when its scheme is allowed and it has a host, else ``""``."""
    if not isinstance(value, str):
        return ""
    candidate = value.strip()
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return ""
    if parts.scheme.lower() not in allowed_protocols or not parts.netloc:
        return ""
    return _DANGEROUS_CHARS.sub("", parts.geturl())


def sanitize_filename(value: Any, max_length: int = MAX_FILENAME_LENGTH) -> str:
    """Make a string safe to use as a file name (never empty)."""
    if not isinstance(value, str):
        return ""
    cleaned = _FILENAME_DISALLOWED.sub("_", value)
    cleaned = _REPEATED_DOTS.sub(".", cleaned)
    cleaned = _LEADING_DOTS.sub("", cleaned).strip()
    return cleaned[:max_length] or "untitled"


def sanitize_number(
    value: Any,
    *,
    minimum: float = -math.inf,
    maximum: float = math.inf,
    default: float = 0,
    allow_float: bool = True,
) -> float:
    """Parse and clamp a number; unparsable or non-finite input yields *default*."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_PREFIX.match(value)
        if not match:
            return default
        number = float(match.group(0))
    else:
        return default

    if math.isnan(number) or math.isinf(number):
        return default
    if not allow_float:
        number = math.floor(number)
    return max(minimum, min(maximum, number))


def deep_sanitize(value: Any, **options: Any) -> Any:
    """Recursively sanitize every string in nested dicts and lists.

    Dict keys are cleaned too (at most 100 characters); entries whose key
    cleans down to nothing are dropped. Other scalars pass through.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return sanitize_input(value, **options)
    if isinstance(value, (list, tuple)):
        return [deep_sanitize(item, **options) for item in value]
    if isinstance(value, Mapping):
        cleaned: dict[str, Any] = {}
        for key, item in value.items():
            clean_key = sanitize_input(str(key), max_length=MAX_KEY_LENGTH)
            if clean_key:
                cleaned[clean_key] = deep_sanitize(item, **options)
        return cleaned
    return value


def sanitize_task_data(data: Any) -> dict[str, Any]:
    """Reduce raw task input to clean ``title``, ``details``, ``priority``,
    ``rating``, ``labels``, ``status``, ``starred`` and ``dueDate`` fields."""
    if not isinstance(data, Mapping):
        return {}

    sanitized: dict[str, Any] = {}

    if data.get("title"):
        sanitized["title"] = sanitize_input(
            data["title"], max_length=TASK_TITLE_MAX_LENGTH, preserve_newlines=False
        )

    if data.get("details"):
        sanitized["details"] = sanitize_input(
            data["details"], max_length=TASK_DETAILS_MAX_LENGTH, preserve_newlines=True
        )

    if data.get("priority") in PRIORITIES:
        sanitized["priority"] = data["priority"]

    if "rating" in data:
        sanitized["rating"] = sanitize_number(data["rating"], minimum=0, maximum=10, default=0)

    if isinstance(data.get("labels"), (list, tuple)):
        labels = [
            sanitize_input(label, max_length=LABEL_NAME_MAX_LENGTH) for label in data["labels"]
        ]
        sanitized["labels"] = [label for label in labels if label][:MAX_TASK_LABELS]

    if data.get("status") and data["status"] in TASK_STATUSES:
        sanitized["status"] = data["status"]

    if isinstance(data.get("starred"), bool):
        sanitized["starred"] = data["starred"]

    due_date = data.get("dueDate", data.get("due_date"))
    if isinstance(due_date, str):
        sanitized["dueDate"] = sanitize_input(due_date, max_length=40, preserve_newlines=False)

    return sanitized


def sanitize_column_data(data: Any) -> dict[str, Any]:
    """Reduce raw column input to a clean ``title`` and integer ``order``."""
    if not isinstance(data, Mapping):
        return {}

    sanitized: dict[str, Any] = {}

    if data.get("title"):
        sanitized["title"] = sanitize_input(
            data["title"], max_length=COLUMN_TITLE_MAX_LENGTH, preserve_newlines=False
        )

    if "order" in data:
        sanitized["order"] = int(
            sanitize_number(
                data["order"], minimum=0, maximum=MAX_COLUMN_ORDER, default=0, allow_float=False
            )
        )

    return sanitized


def sanitize_label_data(data: Any) -> dict[str, Any]:
    """Reduce raw label input to a clean ``name`` and a valid hex ``color``."""
    if not isinstance(data, Mapping):
        return {}

    sanitized: dict[str, Any] = {}

    if data.get("name"):
        sanitized["name"] = sanitize_input(
            data["name"], max_length=LABEL_NAME_MAX_LENGTH, preserve_newlines=False
        )

    if data.get("color"):
        color = sanitize_input(data["color"], max_length=7)
        if _HEX_COLOR.match(color):
            sanitized["color"] = color

    return sanitized
