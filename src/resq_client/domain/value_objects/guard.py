"""Guard assignment and priority value objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from resq_client.core.exceptions.domain import InvalidValueObjectError


@dataclass(frozen=True)
class GuardAssignment:
    """The responder assigned to an incident."""

    name: str
    contact_phone: str | None = None
    contact_channel: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidValueObjectError("Guard name cannot be empty")

    @property
    def dial_uri(self) -> str | None:
        """``tel:`` URI for calling the guard, if a phone number is known."""
        if not self.contact_phone:
            return None
        return "tel:" + "".join(ch for ch in self.contact_phone if ch.isdigit() or ch == "+")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "contact_phone": self.contact_phone,
            "contact_channel": self.contact_channel,
        }


@dataclass(frozen=True)
class Priority:
    """Advisory priority as computed by the server."""

    level: float
    label: str | None = None

    def __str__(self) -> str:
        return self.label or str(self.level)
