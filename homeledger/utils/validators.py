import re
from datetime import date

MIN_AGE = 18
MAX_AGE = 120
POSTAL_CODE_RE = re.compile(r"^\d{5}$")


def check_password_strength(password: str) -> str:
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")
    if not re.search(r"[A-Z]", password):
        raise ValueError("Password must contain an upper-case letter")
    if not re.search(r"[a-z]", password):
        raise ValueError("Password must contain a lower-case letter")
    if not re.search(r"[0-9]", password):
        raise ValueError("Password must contain a digit")
    return password


def age_in_years(birth_date: date, today: date | None = None) -> int:
    # calendar-year difference, birthdays are not taken into account
    today = today or date.today()
    return today.year - birth_date.year


def check_adult(birth_date: date) -> date:
    age = age_in_years(birth_date)
    if age < MIN_AGE or age > MAX_AGE:
        raise ValueError(f"You must be at least {MIN_AGE} years old to register")
    return birth_date


def check_postal_code(value: str) -> str:
    if not POSTAL_CODE_RE.match(value):
        raise ValueError("Postal code must be 5 digits")
    return value
