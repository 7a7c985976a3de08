"""Shared JSON form validation helpers."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, ClassVar, Optional

from flask import request

from ..errors import ValidationError

# Distinguishes "key absent" from an explicit JSON null.
MISSING = object()


def request_payload() -> Mapping[str, Any]:
    """Return the JSON body as a mapping or fail with a validation error."""

    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_date(raw: Any) -> date | datetime:
    """Accept ``YYYY-MM-DD`` (a whole day) or a full ISO timestamp.

    Timestamps with an offset are converted to naive UTC to match ``created_at``.
    """

    text = str(raw).strip()
    if len(text) == 10:
        return datetime.strptime(text, "%Y-%m-%d").date()
    value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass(slots=True)
class JsonForm:
    """Represents API input prior to validation."""

    FIELDS: ClassVar[tuple[str, ...]] = ()

    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, Any] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]):
        """Create a form populated from request data."""

        form = cls()
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data to the form state."""

        self.raw_data = {key: data[key] for key in self.FIELDS if key in data}

    def provided(self, key: str) -> bool:
        return key in self.raw_data

    def validate(self) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    def validate_or_raise(self) -> None:
        if not self.validate():
            raise ValidationError("Please check the provided details", errors=self.errors)

    def _add_error(self, field: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field, []).append(message)

    def _text(self, key: str, *, required: bool = False, max_length: int | None = None) -> Optional[str]:
        raw = self.raw_data.get(key)
        value = "" if raw is None else str(raw).strip()
        if not value:
            if required:
                self._add_error(key, "This field is required.")
            return None
        if max_length is not None and len(value) > max_length:
            self._add_error(key, f"Must be {max_length} characters or fewer.")
            return None
        return value

    def _number(self, key: str, *, required: bool = False, positive: bool = False) -> Optional[float]:
        raw = self.raw_data.get(key)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            if required:
                self._add_error(key, "This field is required.")
            return None
        if isinstance(raw, bool):
            self._add_error(key, "Enter a valid number.")
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            self._add_error(key, "Enter a valid number.")
            return None
        if not math.isfinite(value):
            self._add_error(key, "Enter a valid number.")
            return None
        if positive and value <= 0:
            self._add_error(key, "Must be greater than zero.")
            return None
        return value

    def _identifier(self, key: str, *, required: bool = False) -> Optional[int]:
        raw = self.raw_data.get(key)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            if required:
                self._add_error(key, "This field is required.")
            return None
        if isinstance(raw, bool):
            self._add_error(key, "Must be a whole number.")
            return None
        try:
            value = int(raw)
        except (TypeError, ValueError):
            self._add_error(key, "Must be a whole number.")
            return None
        if value <= 0:
            self._add_error(key, "Must be greater than zero.")
            return None
        return value

    def _choice(self, key: str, choices: tuple[str, ...], *, required: bool = False) -> Optional[str]:
        value = self._text(key, required=required)
        if value is None:
            return None
        if value not in choices:
            self._add_error(key, f"Choose one of: {', '.join(choices)}.")
            return None
        return value
