"""Exhibitor data model."""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Exhibitor:
    """Visitor registered for the exhibition only."""

    name: str = ""
    email: str = ""
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "email": self.email}
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Exhibitor":
        data = data or {}
        return cls(
            name=data.get("name") or "",
            email=data.get("email") or "",
            id=data.get("id"),
        )
