"""Swedish organisation numbers (organisationsnummer).

An organisation number has ten digits. The last digit is a Luhn check digit
over the first nine, and the third digit is always 2 or higher, which keeps
organisation numbers apart from personal identity numbers.
"""

import re

_ORG_NUMBER_RE = re.compile(r"\d{6}-?\d{4}")


def normalize(number: str) -> str:
    """Drop the optional dash between the sixth and seventh digit."""
    return number.replace("-", "").strip()


def luhn_check_digit(digits: str) -> int:
    total = 0
    for i, ch in enumerate(digits):
        value = int(ch) * (2 if i % 2 == 0 else 1)
        total += value - 9 if value > 9 else value
    return (10 - total % 10) % 10


def is_valid(number: str | None) -> bool:
    if not number or not _ORG_NUMBER_RE.fullmatch(number.strip()):
        return False
    digits = normalize(number)
    if int(digits[2]) < 2:
        return False
    return luhn_check_digit(digits[:9]) == int(digits[9])
