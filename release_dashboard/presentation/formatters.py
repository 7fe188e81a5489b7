"""Human-readable formatting helpers for dashboard output."""
from datetime import datetime
from typing import Union


def format_days_ago(days: int) -> str:
    """Format a number of days, e.g. "today", "1 day ago", "3 months ago"."""
    if days == 0:
        return "today"
    if days == 1:
        return "1 day ago"
    if days < 30:
        return f"{days} days ago"
    if days < 60:
        return "1 month ago"
    if days < 365:
        return f"{days // 30} months ago"

    years = days // 365
    return "1 year ago" if years == 1 else f"{years} years ago"


def format_date(date: Union[datetime, str]) -> str:
    """Format a date (or ISO string) as "Jan 15, 2024"."""
    if isinstance(date, str):
        date = datetime.fromisoformat(date.replace("Z", "+00:00"))
    return f"{date.strftime('%b')} {date.day}, {date.year}"


def format_percentage(value: float, decimals: int = 0) -> str:
    return f"{value:.{decimals}f}%"


def format_number(num: int) -> str:
    """Abbreviate large numbers: 999, 1.2K, 3.4M."""
    if num < 1000:
        return str(num)
    if num < 1000000:
        return f"{num / 1000:.1f}K"
    return f"{num / 1000000:.1f}M"
