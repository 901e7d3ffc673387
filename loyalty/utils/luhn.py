"""Luhn (mod 10) checksum used as the order-number format guard."""

from typing import Union


def luhn_checksum(digits: str) -> int:
    """Return the mod-10 remainder of the Luhn sum over ``digits``.

    Every second digit counting from the rightmost is doubled, and 9 is
    subtracted from doubled values above 9.
    """
    total = 0
    for index, char in enumerate(reversed(digits)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10


def is_ascii_digits(value: str) -> bool:
    """True for a non-empty string of ASCII 0-9 only (no Unicode digits)."""
    return value.isascii() and value.isdigit()


def is_valid_luhn(number: Union[int, str]) -> bool:
    """Check that ``number`` is a positive decimal integer passing Luhn."""
    digits = str(number).strip()
    if not is_ascii_digits(digits) or int(digits) <= 0:
        return False
    return luhn_checksum(digits) == 0


def luhn_check_digit(payload: Union[int, str]) -> int:
    """Digit that makes ``payload`` followed by it pass the checksum."""
    return (10 - luhn_checksum(f"{payload}0")) % 10
