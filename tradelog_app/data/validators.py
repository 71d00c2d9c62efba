"""
Numeric field validation for trade-entry input.

Validation is exhaustive: every field is checked and all problems are
reported together, in field order, so the user can fix them in one pass.
"""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Optional

from ..errors import InputError, NumericFieldError, RequiredFieldError
from .models import NUMERIC_FIELDS, ValidationResult

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_finite_number(raw: Optional[str]) -> Optional[float]:
    """
    Parse a user-entered number.

    Args:
        raw: Field text, possibly empty or None

    Returns:
        The float value, or None when the field is empty

    Raises:
        NumericFieldError: If the text is not a finite decimal number
    """
    if raw is None:
        return None

    text = str(raw).strip()
    if not text:
        return None

    if not _NUMBER_RE.match(text):
        raise NumericFieldError(f"'{text}' is not a number", raw_value=text)

    value = float(text)
    if not math.isfinite(value):
        raise NumericFieldError(f"'{text}' is not a finite number", raw_value=text)

    return value


def parse_number_or_none(raw: Optional[str]) -> Optional[float]:
    """Lenient parse used for display values: bad input becomes None."""
    try:
        return parse_finite_number(raw)
    except NumericFieldError:
        return None


class NumericValidator:
    """Validates the numeric fields of a trade draft."""

    def __init__(self, fields: Iterable[str] = NUMERIC_FIELDS):
        self.fields = tuple(fields)

    def validate(
        self,
        values: Mapping[str, Optional[str]],
        required: Iterable[str] = ()
    ) -> ValidationResult:
        """
        Validate and normalize numeric field strings.

        Args:
            values: Field name to raw string
            required: Fields that may not be empty

        Returns:
            ValidationResult with all errors and normalized numbers
        """
        required_fields = set(required)
        errors: list[str] = []
        data: dict[str, Optional[float]] = {}

        for name in self.fields:
            try:
                data[name] = self._validate_field(name, values.get(name), name in required_fields)
            except InputError as e:
                errors.append(str(e))
                data[name] = None

        return ValidationResult(is_valid=not errors, errors=errors, data=data)

    def _validate_field(self, name: str, raw: Optional[str], required: bool) -> Optional[float]:
        try:
            value = parse_finite_number(raw)
        except NumericFieldError as e:
            raise NumericFieldError(
                f"{name} must be a valid number (got '{e.raw_value}')",
                raw_value=e.raw_value,
                field=name,
            ) from e

        if value is None and required:
            raise RequiredFieldError(f"{name} is required", field=name)

        return value


def validate_trade_numeric_fields(
    values: Mapping[str, Optional[str]],
    required: Iterable[str] = ()
) -> ValidationResult:
    """Validate quantity, entry_price, exit_price and pnl strings."""
    return NumericValidator().validate(values, required)


def validate_symbol(symbol: Optional[str]) -> list[str]:
    """Symbol must be non-empty once surrounding whitespace is removed."""
    if not symbol or not symbol.strip():
        return ["symbol is required"]
    return []
