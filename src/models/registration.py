"""Team registration record data model."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.models.accompanying_person import AccompanyingPerson
from src.models.exhibitor import Exhibitor
from src.models.team_member import TeamMember


@dataclass
class RegistrationRecord:
    """Everything a team submits: team info plus the three sub-lists."""

    team_name: str = ""
    team_size: str = ""
    team_members: List[TeamMember] = field(default_factory=list)
    accompanying_persons: List[AccompanyingPerson] = field(default_factory=list)
    exhibitors: List[Exhibitor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "teamName": self.team_name,
            "teamSize": self.team_size,
            "teamMembers": [member.to_dict() for member in self.team_members],
            "accompanyingPersons": [person.to_dict() for person in self.accompanying_persons],
            "exhibitors": [exhibitor.to_dict() for exhibitor in self.exhibitors],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RegistrationRecord":
        """
        Build a record from wire data.

        Missing or null lists become empty lists; teamSize may be absent
        (the edit endpoint doesn't send it).
        """
        data = data or {}
        team_size = data.get("teamSize")
        return cls(
            team_name=data.get("teamName") or "",
            team_size="" if team_size is None else str(team_size),
            team_members=[TeamMember.from_dict(m) for m in data.get("teamMembers") or []],
            accompanying_persons=[
                AccompanyingPerson.from_dict(p) for p in data.get("accompanyingPersons") or []
            ],
            exhibitors=[Exhibitor.from_dict(e) for e in data.get("exhibitors") or []],
        )

    def member_count(self) -> int:
        return len(self.team_members)


def empty_record_values() -> Dict[str, Any]:
    """Wire-shaped values of a blank record, as the create flow starts with."""
    return RegistrationRecord().to_dict()
