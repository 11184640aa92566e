"""Emergency contact data model."""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class EmergencyContact:
    """Person to call for a team member; the first one is the guardian."""

    name: str = ""
    relationship: str = ""
    phone: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "relationship": self.relationship,
            "phone": self.phone,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EmergencyContact":
        data = data or {}
        return cls(
            name=data.get("name") or "",
            relationship=data.get("relationship") or "",
            phone=data.get("phone") or "",
        )
