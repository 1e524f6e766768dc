"""Date manipulation utilities"""

from datetime import date, timedelta


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is before start)"""
    return (end - start).days


def days_from(start: date, days: int) -> date:
    """Date that lies the given number of days after start"""
    return start + timedelta(days=days)
