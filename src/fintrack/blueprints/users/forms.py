"""User registration and login forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from ...models.enums import Role
from ..forms import JsonForm


@dataclass(slots=True)
class RegisterForm(JsonForm):
    FIELDS: ClassVar[tuple[str, ...]] = (
        "firstname", "lastname", "email", "password", "role", "imageUrl",
    )

    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: str = Role.USER.value
    image_url: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.firstname = self._text("firstname", required=True, max_length=64)
        self.lastname = self._text("lastname", required=True, max_length=64)
        self.email = self._text("email", required=True, max_length=255)
        if self.email and "@" not in self.email:
            self._add_error("email", "Enter a valid email address.")
        password = self.raw_data.get("password")
        if not isinstance(password, str) or not password:
            self._add_error("password", "This field is required.")
        else:
            self.password = password
        self.role = self._choice("role", Role.values()) or Role.USER.value
        self.image_url = self._text("imageUrl", max_length=512)
        return not self.errors


@dataclass(slots=True)
class LoginForm(JsonForm):
    FIELDS: ClassVar[tuple[str, ...]] = ("email", "password")

    email: Optional[str] = None
    password: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.email = self._text("email", required=True)
        password = self.raw_data.get("password")
        if not isinstance(password, str) or not password:
            self._add_error("password", "This field is required.")
        else:
            self.password = password
        return not self.errors
