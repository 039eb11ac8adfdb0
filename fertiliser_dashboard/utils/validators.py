# utils/validators.py
"""
Input parsing for forms.

Forms collect raw widget text, run it through these helpers and build a
typed payload. Problems are gathered into a FormResult instead of being
raised, so the dialog can show every issue at once and keep its values.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ValidationError(ValueError):
    """A single user-input problem, tied to the form field that caused it."""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field = field_name
        self.message = message


@dataclass
class FormResult(Generic[T]):
    value: Optional[T] = None
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and self.value is not None

    def first_error(self) -> ValidationError | None:
        return self.errors[0] if self.errors else None

    def messages(self) -> list[str]:
        return [e.message for e in self.errors]


def non_empty(text: str) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


def clean_optional(text: str | None) -> str | None:
    """Trimmed text, or None when blank."""
    if text is None:
        return None
    s = str(text).strip()
    return s or None


# ---- Numeric parsing & validators ----

def try_parse_decimal(x):
    """
    Best-effort parse to Decimal (thousands separators and the currency
    symbol are ignored).

    Returns:
        (ok: bool, value: Decimal|None)
    """
    if x is None:
        return False, None
    s = str(x).replace(",", "").replace("₹", "").strip()
    if not s:
        return False, None
    try:
        val = Decimal(s)
    except InvalidOperation:
        return False, None
    if not val.is_finite():
        return False, None
    return True, val


def try_parse_int(x):
    """(ok, int|None); rejects fractional values such as '2.5'."""
    ok, val = try_parse_decimal(x)
    if not ok or val != val.to_integral_value():
        return False, None
    return True, int(val)


# ---- Field-level collectors used by forms ----

def require_text(errors: list[ValidationError], field_name: str, label: str, text: str | None) -> str:
    if not non_empty(text):
        errors.append(ValidationError(field_name, f"{label} is required."))
        return ""
    return str(text).strip()


def require_decimal(
    errors: list[ValidationError],
    field_name: str,
    label: str,
    text,
    *,
    minimum: Decimal | None = Decimal("0"),
    allow_blank: bool = False,
) -> Decimal | None:
    if allow_blank and not non_empty(text):
        return None
    ok, val = try_parse_decimal(text)
    if not ok:
        errors.append(ValidationError(field_name, f"{label} must be a number."))
        return None
    if minimum is not None and val < minimum:
        errors.append(ValidationError(field_name, f"{label} cannot be less than {minimum}."))
        return None
    return val


def require_int(
    errors: list[ValidationError],
    field_name: str,
    label: str,
    text,
    *,
    minimum: int = 1,
) -> int | None:
    ok, val = try_parse_int(text)
    if not ok:
        errors.append(ValidationError(field_name, f"{label} must be a whole number."))
        return None
    if val < minimum:
        errors.append(ValidationError(field_name, f"{label} must be at least {minimum}."))
        return None
    return val
