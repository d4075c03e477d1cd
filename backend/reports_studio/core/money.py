from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")

_THAI_DIGITS = ["ศูนย์", "หนึ่ง", "สอง", "สาม", "สี่", "ห้า", "หก", "เจ็ด", "แปด", "เก้า"]
_THAI_POSITIONS = ["", "สิบ", "ร้อย", "พัน", "หมื่น", "แสน"]

CURRENCY_SYMBOLS = {"THB": "฿"}


def to_decimal(value: float) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def round_money(value: float) -> float:
    """Round to satang/cents, half up (``1500 * 0.07`` -> ``105.0``)."""
    return float(to_decimal(value))


def format_money(value: Optional[float], currency: Optional[str] = "THB") -> str:
    if value is None:
        return "-"
    amount = to_decimal(value)
    currency = (currency or "THB").upper()
    sign = "-" if amount < 0 else ""
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{sign}{symbol}{abs(amount):,.2f}"
    return f"{sign}{abs(amount):,.2f} {currency}"


def _read_below_million(number: int, has_prefix: bool) -> str:
    digits = str(number)
    length = len(digits)
    words = []
    for index, char in enumerate(digits):
        digit = int(char)
        position = length - index - 1
        if digit == 0:
            continue
        if position == 1 and digit == 1:
            words.append("สิบ")
        elif position == 1 and digit == 2:
            words.append("ยี่สิบ")
        elif position == 0 and digit == 1 and (length > 1 or has_prefix):
            words.append("เอ็ด")
        else:
            words.append(_THAI_DIGITS[digit] + _THAI_POSITIONS[position])
    return "".join(words)


def _read_number(number: int, has_prefix: bool = False) -> str:
    if number >= 1_000_000:
        millions, rest = divmod(number, 1_000_000)
        head = _read_number(millions, has_prefix) + "ล้าน"
        return head + (_read_below_million(rest, True) if rest else "")
    return _read_below_million(number, has_prefix)


def thai_baht_text(amount: float) -> str:
    """Thai amount-in-words, e.g. ``1605`` -> ``หนึ่งพันหกร้อยห้าบาทถ้วน``."""
    value = to_decimal(amount)
    prefix = "ลบ" if value < 0 else ""
    satang_total = int(abs(value) * 100)
    baht, satang = divmod(satang_total, 100)

    if baht == 0 and satang == 0:
        return "ศูนย์บาทถ้วน"

    text = prefix
    if baht:
        text += _read_number(baht) + "บาท"
    if satang:
        text += _read_number(satang) + "สตางค์"
    else:
        text += "ถ้วน"
    return text
