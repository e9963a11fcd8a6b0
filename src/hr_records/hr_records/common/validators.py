from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import ValidationError
from .datetime_utils import parse_hhmm, parse_iso_date

E = TypeVar("E", bound=Enum)


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        message = f"{field_name} must be at least {min_len} characters"
        raise ValidationError(message, [{"field": field_name, "message": message}])
    return value


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class FieldErrors:
    """Collects per-field validation errors so every failing field is reported.

    Each check returns the coerced value, or ``None`` when the value is
    missing/invalid (the error is recorded instead of raised).
    """

    def __init__(self):
        self._errors: list[dict] = []

    def add(self, field: str, message: str) -> None:
        self._errors.append({"field": field, "message": message})

    @property
    def errors(self) -> list[dict]:
        return list(self._errors)

    def raise_if_any(self) -> None:
        if self._errors:
            raise ValidationError("Validation failed", self._errors)

    def text(self, value: Any, field: str, *, required: bool = True, message: Optional[str] = None) -> Optional[str]:
        if _is_blank(value):
            if required:
                self.add(field, message or f"{field} is required")
            return None
        if not isinstance(value, str):
            self.add(field, message or f"{field} must be a string")
            return None
        return value.strip()

    def number(
        self,
        value: Any,
        field: str,
        *,
        required: bool = True,
        minimum: Optional[float] = 0,
        message: Optional[str] = None,
    ) -> Optional[float]:
        if _is_blank(value):
            if required:
                self.add(field, message or f"{field} is required")
            return None
        if isinstance(value, bool):
            self.add(field, message or f"{field} must be a number")
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            self.add(field, message or f"{field} must be a number")
            return None
        if not math.isfinite(number):
            self.add(field, message or f"{field} must be a number")
            return None
        if minimum is not None and number < minimum:
            self.add(field, message or f"{field} must be a positive number")
            return None
        return number

    def identifier(self, value: Any, field: str, *, required: bool = True, message: Optional[str] = None) -> Optional[int]:
        if _is_blank(value):
            if required:
                self.add(field, message or f"{field} is required")
            return None
        if isinstance(value, bool):
            self.add(field, f"{field} is not a valid id")
            return None
        if isinstance(value, float) and not value.is_integer():
            self.add(field, f"{field} is not a valid id")
            return None
        try:
            ident = int(value)
        except (TypeError, ValueError):
            self.add(field, f"{field} is not a valid id")
            return None
        if ident <= 0:
            self.add(field, f"{field} is not a valid id")
            return None
        return ident

    def choice(
        self,
        value: Any,
        field: str,
        enum_cls: Type[E],
        *,
        required: bool = True,
        message: Optional[str] = None,
    ) -> Optional[E]:
        if _is_blank(value):
            if required:
                self.add(field, message or f"{field} is required")
            return None
        try:
            return enum_cls(value)
        except ValueError:
            self.add(field, message or f"Invalid {field}")
            return None

    def date(self, value: Any, field: str, *, required: bool = True, message: Optional[str] = None) -> Optional[date]:
        if _is_blank(value):
            if required:
                self.add(field, message or f"{field} is required")
            return None
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(str(value))
        except ValueError:
            self.add(field, f"{field} must be a date (YYYY-MM-DD)")
            return None

    def time_of_day(self, value: Any, field: str) -> Optional[str]:
        """Optional ``HH:MM``; blank means no time recorded."""
        if _is_blank(value):
            return None
        try:
            minutes = parse_hhmm(str(value))
        except ValueError:
            self.add(field, f"{field} must be a time (HH:MM)")
            return None
        return f"{minutes // 60:02d}:{minutes % 60:02d}"
