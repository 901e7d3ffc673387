import pytest

from loyalty.utils.luhn import (
    is_ascii_digits,
    is_valid_luhn,
    luhn_check_digit,
    luhn_checksum,
)


class TestLuhn:
    @pytest.mark.parametrize("number", ["7703824164", "7324401889", "79927398713", "18"])
    def test_valid_numbers(self, number):
        assert is_valid_luhn(number)

    @pytest.mark.parametrize("number", ["7703824165", "1111", "79927398710", "12"])
    def test_invalid_numbers(self, number):
        assert not is_valid_luhn(number)

    @pytest.mark.parametrize("number", ["", "   ", "abc", "12a4", "-18", "0", "00"])
    def test_rejects_non_positive_or_non_numeric(self, number):
        assert not is_valid_luhn(number)

    def test_accepts_int_input(self):
        assert is_valid_luhn(7703824164)
        assert not is_valid_luhn(7703824165)

    def test_surrounding_whitespace_is_ignored(self):
        assert is_valid_luhn(" 7703824164\n")

    @pytest.mark.parametrize("payload", ["1", "770382416", "12345", "99999999999"])
    def test_check_digit_completes_valid_number(self, payload):
        number = f"{payload}{luhn_check_digit(payload)}"
        assert is_valid_luhn(number)
        assert luhn_checksum(number) == 0

    def test_every_other_check_digit_is_invalid(self):
        payload = "770382416"
        good = luhn_check_digit(payload)
        for digit in range(10):
            if digit == good:
                continue
            assert not is_valid_luhn(f"{payload}{digit}")

    @pytest.mark.parametrize("number", ["²", "١٨", "１８", "7703824164²"])
    def test_rejects_non_ascii_digits(self, number):
        assert not is_valid_luhn(number)

    def test_is_ascii_digits(self):
        assert is_ascii_digits("7703824164")
        assert not is_ascii_digits("")
        assert not is_ascii_digits("²")
        assert not is_ascii_digits("١٨")
