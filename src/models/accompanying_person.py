"""Accompanying person data model."""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AccompanyingPerson:
    """Family member, teacher or professor travelling with the team."""

    name: str = ""
    email: str = ""
    phone: str = ""
    id: Optional[str] = None  # assigned by the server once persisted

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
        }
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AccompanyingPerson":
        data = data or {}
        return cls(
            name=data.get("name") or "",
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            id=data.get("id"),
        )
