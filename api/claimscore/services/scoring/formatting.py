def money(value: float) -> str:
    """Thousands-separated amount with up to 3 decimals: 15000 -> "15,000", 1234.5 -> "1,234.5"."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def number(value: float) -> str:
    """Plain number without a trailing ".0" for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
