"""Ownership checks shared by the service modules."""

from __future__ import annotations

from typing import Optional, Protocol, TypeVar

from ..errors import Forbidden, NotFound


class _Owned(Protocol):
    user_id: int


T = TypeVar("T", bound=_Owned)


def ensure_owner(entity: Optional[T], *, user_id: int, label: str) -> T:
    """Return ``entity`` when the caller owns it.

    Missing rows raise ``NotFound``; rows owned by someone else raise
    ``Forbidden``. Used for mutations, where the caller named a real id.
    """

    if entity is None:
        raise NotFound(f"{label} not found")
    if entity.user_id != user_id:
        raise Forbidden(f"You are not authorized to modify this {label.lower()}")
    return entity


def ensure_visible(entity: Optional[T], *, user_id: int, label: str) -> T:
    """Return ``entity`` for reads; foreign rows are indistinguishable from missing ones."""

    if entity is None or entity.user_id != user_id:
        raise NotFound(f"{label} not found")
    return entity
