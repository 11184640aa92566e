"""Team member data model."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from src.models.attachment import Attachment
from src.models.emergency_contact import EmergencyContact

AttachmentValue = Union[Attachment, str, None]

ATTACHMENT_FIELDS = ("idCardFront", "idCardBack")


@dataclass
class TeamMember:
    """
    Participant in a team.

    Enum fields start empty so a new member has to pick gender, grade and
    T-shirt size explicitly. ``id_card_front``/``id_card_back`` stay None unless
    the attachment variant is enabled; they hold either a raw ``Attachment``
    or its already-encoded text.
    """

    name: str = ""
    gender: str = ""
    school: str = ""
    grade: str = ""
    identity_number: str = ""
    birthday: str = ""
    email: str = ""
    phone: str = ""
    emergency_contacts: List[EmergencyContact] = field(default_factory=lambda: [EmergencyContact()])
    allergies: str = ""
    special_diseases: str = ""
    remarks: str = ""
    t_shirt_size: str = ""
    is_representative: bool = False
    id_card_front: AttachmentValue = None
    id_card_back: AttachmentValue = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "isRepresentative": self.is_representative,
            "name": self.name,
            "gender": self.gender,
            "school": self.school,
            "grade": self.grade,
            "identityNumber": self.identity_number,
            "birthday": self.birthday,
            "email": self.email,
            "phone": self.phone,
            "emergencyContacts": [contact.to_dict() for contact in self.emergency_contacts],
            "allergies": self.allergies,
            "specialDiseases": self.special_diseases,
            "remarks": self.remarks,
            "tShirtSize": self.t_shirt_size,
        }
        if self.id_card_front is not None:
            data["idCardFront"] = self.id_card_front
        if self.id_card_back is not None:
            data["idCardBack"] = self.id_card_back
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TeamMember":
        data = data or {}
        return cls(
            name=data.get("name") or "",
            gender=data.get("gender") or "",
            school=data.get("school") or "",
            grade=data.get("grade") or "",
            identity_number=data.get("identityNumber") or "",
            birthday=data.get("birthday") or "",
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            emergency_contacts=[
                EmergencyContact.from_dict(contact)
                for contact in data.get("emergencyContacts") or []
            ],
            allergies=data.get("allergies") or "",
            special_diseases=data.get("specialDiseases") or "",
            remarks=data.get("remarks") or "",
            t_shirt_size=data.get("tShirtSize") or "",
            is_representative=bool(data.get("isRepresentative", False)),
            id_card_front=data.get("idCardFront"),
            id_card_back=data.get("idCardBack"),
        )

    def role_label(self, index: int) -> str:
        """Heading shown above the member's fields."""
        if index == 0 or self.is_representative:
            return "隊長/團隊代表人"
        return f"團隊成員{index}"


def new_team_member(index: int = 0, with_attachments: bool = False) -> TeamMember:
    """
    Build a blank member as appended when the team grows.

    Args:
        index: Position the member will take; index 0 is the representative
        with_attachments: Whether the ID card fields are part of the form

    Returns:
        TeamMember with one blank emergency contact
    """
    member = TeamMember(is_representative=index == 0)
    if with_attachments:
        member.id_card_front = ""
        member.id_card_back = ""
    return member
