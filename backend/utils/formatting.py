from decimal import Decimal, ROUND_HALF_UP

UNITS = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten", "Eleven", "Twelve",
         "Thirteen", "Fourteen", "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen"]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]


def format_indian_currency(amount) -> str:
    if amount is None:
        return "₹ 0.00"
    amount = Decimal(str(amount))
    sign = "-" if amount < 0 else ""
    amount_str = f"{abs(amount):.2f}"
    integer_part, decimal_part = amount_str.split(".")

    if len(integer_part) <= 3:
        return f"{sign}₹ {integer_part}.{decimal_part}"

    last_three = integer_part[-3:]
    remaining = integer_part[:-3]

    formatted_remaining = ""
    while len(remaining) > 2:
        formatted_remaining = "," + remaining[-2:] + formatted_remaining
        remaining = remaining[:-2]

    formatted_remaining = remaining + formatted_remaining

    return f"{sign}₹ {formatted_remaining},{last_three}.{decimal_part}"


def round_rupees(amount) -> int:
    """Round a rupee amount to the nearest whole rupee, halves going up."""
    return int(Decimal(str(amount or 0)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def amount_to_words(n: int) -> str:
    """
    Whole rupees in words using lakh/crore grouping, e.g. 12345678 ->
    "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight".
    The caller rounds paise away and appends the currency.
    """
    if isinstance(n, bool) or int(n) != n:
        raise ValueError(f"amount_to_words expects a whole number, got {n!r}")
    n = int(n)
    if n < 0:
        raise ValueError(f"amount_to_words expects a non-negative amount, got {n}")
    if n == 0:
        return "Zero"

    def convert(num: int) -> str:
        if num < 20:
            return UNITS[num]
        elif num < 100:
            return TENS[num // 10] + (" " + UNITS[num % 10] if num % 10 != 0 else "")
        elif num < 1000:
            return UNITS[num // 100] + " Hundred" + (" " + convert(num % 100) if num % 100 != 0 else "")
        elif num < 100000:
            return convert(num // 1000) + " Thousand" + (" " + convert(num % 1000) if num % 1000 != 0 else "")
        elif num < 10000000:
            return convert(num // 100000) + " Lakh" + (" " + convert(num % 100000) if num % 100000 != 0 else "")
        else:
            return convert(num // 10000000) + " Crore" + (" " + convert(num % 10000000) if num % 10000000 != 0 else "")

    return convert(n)
