from datetime import date, timedelta


def add_days(start: date, days: int) -> date:
    return start + timedelta(days=days)


def current_month_year(today: date | None = None) -> tuple[int, int]:
    today = today or date.today()
    return today.month, today.year


def is_due_within(due: date | None, days: int, today: date | None = None) -> bool:
    if due is None:
        return False
    today = today or date.today()
    return today <= due <= today + timedelta(days=days)
