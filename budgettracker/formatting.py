from datetime import datetime

CURRENCY_SYMBOL = "$"


def format_currency(amount: float, symbol: str = CURRENCY_SYMBOL) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_short_date(d: datetime) -> str:
    return d.strftime("%m/%d/%y")


def format_medium_date(d: datetime) -> str:
    return d.strftime("%b %d, %Y %H:%M")


def format_month(d: datetime) -> str:
    return d.strftime("%B %Y")


def format_percent(ratio: float) -> str:
    return f"{int(ratio * 100)}%"
