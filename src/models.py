"""Data classes for relationship-graph entities."""

import uuid
from dataclasses import dataclass, field
from typing import Any


GENDERS = ("male", "female", "other", "unknown")
RELATION_TYPES = ("partner", "parent-child", "friend")
PARTNER_SUBTYPES = ("married", "divorced", "partner")
PARENT_CHILD_SUBTYPES = ("biological", "adopted", "foster", "step")
FRIEND_SUBTYPES = (
    "university",
    "highSchool",
    "middleSchool",
    "elementary",
    "summerCityFriend",
    "sport",
    "romantic",
    "flirt",
    "workColleague",
    "neighbor",
    "acquaintance",
)
SUBTYPES_BY_TYPE = {
    "partner": PARTNER_SUBTYPES,
    "parent-child": PARENT_CHILD_SUBTYPES,
    "friend": FRIEND_SUBTYPES,
}
PROJECT_TYPES = ("familyTree", "friendCluster")
ORIENTATIONS = ("vertical", "horizontal")


def generate_id(prefix: str = "id") -> str:
    """Return a fresh opaque id like 'p_3f2a9c1b0d4e'."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


@dataclass
class Person:
    id: str
    first_name: str = ""
    last_name: str = ""
    gender: str = "unknown"
    birth_date: str | None = None  # partial date: YYYY, YYYY-MM or YYYY-MM-DD
    birth_place: str | None = None
    death_date: str | None = None
    death_place: str | None = None
    photo: str | None = None
    notes: str = ""
    custom_fields: dict[str, str] = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "gender": self.gender,
            "birthDate": self.birth_date,
            "birthPlace": self.birth_place,
            "deathDate": self.death_date,
            "deathPlace": self.death_place,
            "photo": self.photo,
            "notes": self.notes,
            "customFields": dict(self.custom_fields),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Person":
        return cls(
            id=data["id"],
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            gender=data.get("gender", "unknown"),
            birth_date=data.get("birthDate"),
            birth_place=data.get("birthPlace"),
            death_date=data.get("deathDate"),
            death_place=data.get("deathPlace"),
            photo=data.get("photo"),
            notes=data.get("notes", ""),
            custom_fields=dict(data.get("customFields") or {}),
        )


@dataclass
class Relationship:
    id: str
    type: str  # partner, parent-child, friend
    from_id: str  # parent for parent-child
    to_id: str  # child for parent-child
    subtype: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    location: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "from": self.from_id,
            "to": self.to_id,
            "subtype": self.subtype,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "location": self.location,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Relationship":
        return cls(
            id=data["id"],
            type=data["type"],
            from_id=data["from"],
            to_id=data["to"],
            subtype=data.get("subtype"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            location=data.get("location"),
        )


@dataclass
class Position:
    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class LayoutResult:
    node_positions: dict[str, Position] = field(default_factory=dict)

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {pid: pos.to_dict() for pid, pos in self.node_positions.items()}
