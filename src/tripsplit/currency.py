"""Currency formatting and conversion with static exchange rates."""

from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "INR": "₹",
}

CURRENCY_NAMES = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "INR": "Indian Rupee",
}

# Units of each currency per US dollar
EXCHANGE_RATES = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.85"),
    "GBP": Decimal("0.73"),
    "JPY": Decimal("110"),
    "CAD": Decimal("1.25"),
    "AUD": Decimal("1.35"),
    "INR": Decimal("83"),
}


def _check_currency(currency: str) -> str:
    code = currency.upper()
    if code not in CURRENCY_SYMBOLS:
        raise ValueError(
            f"Unsupported currency {currency!r}. "
            f"Supported: {', '.join(CURRENCY_SYMBOLS)}"
        )
    return code


def _group_indian(digits: str) -> str:
    """Group an integer string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def _format_number(amount: Decimal, places: int, indian: bool = False) -> str:
    """Format a non-negative amount with up to `places` decimals and grouping."""
    quantum = Decimal(1).scaleb(-places)
    rounded = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    whole, _, fraction = f"{rounded:f}".partition(".")
    fraction = fraction.rstrip("0")

    grouped = _group_indian(whole) if indian else f"{int(whole):,}"
    return f"{grouped}.{fraction}" if fraction else grouped


def format_currency(amount: Decimal | float | int, currency: str) -> str:
    """
    Format an amount for display, e.g. "$1,234.5" or "¥1,235".

    Yen is shown without decimals; other currencies show up to two decimals
    and drop trailing zeros. Rupees use Indian digit grouping.
    """
    code = _check_currency(currency)
    symbol = CURRENCY_SYMBOLS[code]
    value = Decimal(str(amount))

    if value.is_nan():
        return f"{symbol}0"

    sign = "-" if value < 0 else ""
    places = 0 if code == "JPY" else 2
    number = _format_number(abs(value), places, indian=code == "INR")

    if number.strip("0,.") == "":
        sign = ""
    return f"{sign}{symbol}{number}"


def convert_currency(
    amount: Decimal | float | int, from_currency: str, to_currency: str
) -> Decimal:
    """Convert between currencies through USD, rounded to two decimals."""
    source = _check_currency(from_currency)
    target = _check_currency(to_currency)
    value = Decimal(str(amount))

    if source == target:
        return value

    usd_amount = value / EXCHANGE_RATES[source]
    converted = usd_amount * EXCHANGE_RATES[target]
    return converted.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def get_currency_symbol(currency: str) -> str:
    return CURRENCY_SYMBOLS[_check_currency(currency)]


def get_currency_name(currency: str) -> str:
    return CURRENCY_NAMES[_check_currency(currency)]
