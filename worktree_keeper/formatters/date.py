"""Date and time formatting utilities."""

_UNITS = [
    (2592000, "month"),
    (604800, "week"),
    (86400, "day"),
    (3600, "hour"),
    (60, "minute"),
]


def format_time_ago(seconds: int) -> str:
    """
    Format an age in seconds as "3 days ago" style text.

    Args:
        seconds: Age in seconds; negative values count as zero

    Returns:
        Human readable age, "just now" below one minute
    """
    seconds = max(0, int(seconds))
    for size, unit in _UNITS:
        count = seconds // size
        if count > 0:
            return f"1 {unit} ago" if count == 1 else f"{count} {unit}s ago"
    return "just now"
