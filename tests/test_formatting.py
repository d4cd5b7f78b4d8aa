from decimal import Decimal

import pytest

from utils.formatting import amount_to_words, format_indian_currency, round_rupees


@pytest.mark.parametrize("amount, words", [
    (0, "Zero"),
    (5, "Five"),
    (19, "Nineteen"),
    (20, "Twenty"),
    (45, "Forty Five"),
    (100, "One Hundred"),
    (105, "One Hundred Five"),
    (1050, "One Thousand Fifty"),
    (100000, "One Lakh"),
    (250000, "Two Lakh Fifty Thousand"),
    (10000000, "One Crore"),
    (12345678, "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight"),
    (1000000000, "One Hundred Crore"),
])
def test_amount_to_words(amount, words):
    assert amount_to_words(amount) == words


def test_amount_to_words_has_no_stray_spaces():
    words = amount_to_words(10101010)
    assert words == "One Crore One Lakh One Thousand Ten"
    assert "  " not in words
    assert words == words.strip()


def test_amount_to_words_rejects_fractions_and_negatives():
    with pytest.raises(ValueError):
        amount_to_words(10.5)
    with pytest.raises(ValueError):
        amount_to_words(-1)


def test_round_rupees_rounds_half_up():
    assert round_rupees(Decimal("1049.50")) == 1050
    assert round_rupees(Decimal("1049.49")) == 1049
    assert round_rupees(None) == 0


@pytest.mark.parametrize("amount, display", [
    (0, "₹ 0.00"),
    (None, "₹ 0.00"),
    (999, "₹ 999.00"),
    (1050, "₹ 1,050.00"),
    (1234567, "₹ 12,34,567.00"),
    (Decimal("123456789.5"), "₹ 12,34,56,789.50"),
    (-2500, "-₹ 2,500.00"),
])
def test_format_indian_currency(amount, display):
    assert format_indian_currency(amount) == display
