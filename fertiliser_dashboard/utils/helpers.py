# utils/helpers.py
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
import logging
from typing import Union, Optional

from ..constants import CURRENCY_SYMBOL

NumberLike = Union[Decimal, float, int, str]

_log = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def to_money(v: NumberLike | None) -> Decimal:
    """
    Convert a stored/entered amount to a two-place Decimal (ROUND_HALF_UP).

    SQLite hands NUMERIC columns back as int/float; going through str()
    keeps 12.3 as Decimal('12.30') instead of the binary expansion.
    """
    if v is None or v == "":
        return Decimal("0.00")
    if isinstance(v, Decimal):
        d = v
    else:
        d = Decimal(str(v).replace(",", "").replace(CURRENCY_SYMBOL, "").strip())
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)


def fmt_money(
    v: NumberLike | None,
    places: int = 2,
    *,
    symbol: bool = False,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.

    `symbol=True` prefixes the rupee sign, as on printed documents.
    """
    try:
        x = Decimal(str(v).replace(",", "")) if not isinstance(v, Decimal) else v
        x = x.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as e:
        # Log at debug level to aid troubleshooting without spamming user logs.
        _log.debug("fmt_money: failed to parse %r as a number: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    text = f"{x:,.{places}f}"
    return f"{CURRENCY_SYMBOL}{text}" if symbol else text


def fmt_date(iso: str | None) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY (the en-IN short form); other input is returned unchanged."""
    if not iso:
        return ""
    try:
        d = date.fromisoformat(str(iso)[:10])
    except ValueError:
        return str(iso)
    return d.strftime("%d/%m/%Y")
