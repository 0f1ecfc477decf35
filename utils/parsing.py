"""Safe parsing helpers for request arguments and stored values."""

import re


def parse_list(value):
    """Parse a list or comma-separated string into stripped, non-empty items."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [v.strip() for v in str(value).split(",") if v.strip()]


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def parse_int(value, default=None):
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return int(value)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_float(value, default=None):
    if value is None or value == "":
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if result != result:  # NaN
        return default
    return result


def parse_page(page, limit, default_limit=20, max_limit=100):
    """Clamp page/limit query values into a usable (page, limit, offset)."""
    page = max(parse_int(page, 1) or 1, 1)
    limit = parse_int(limit, default_limit) or default_limit
    limit = max(1, min(limit, max_limit))
    return page, limit, (page - 1) * limit


def first_number(value):
    """Extract the first integer from free text like "12 x 24 min"."""
    if value is None:
        return None
    match = re.search(r"\d+", str(value))
    return int(match.group(0)) if match else None
