"""JSON project file import and export."""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from models import Person, Relationship


logger = logging.getLogger(__name__)

PROJECT_VERSION = "1.0.0"

Gender = Literal["male", "female", "other", "unknown"]
RelationType = Literal["partner", "parent-child", "friend"]
Subtype = Literal[
    "married",
    "divorced",
    "partner",
    "biological",
    "adopted",
    "foster",
    "step",
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
]


class ProjectValidationError(ValueError):
    """Raised when a project document does not match the project schema."""

    def __init__(self, error: ValidationError):
        super().__init__(f"Invalid project file: {error.error_count()} error(s)\n{error}")
        self.errors = error.errors()


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PersonSchema(_Schema):
    id: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    gender: Gender
    birth_date: str | None = Field(alias="birthDate")
    birth_place: str | None = Field(alias="birthPlace")
    death_date: str | None = Field(alias="deathDate")
    death_place: str | None = Field(alias="deathPlace")
    photo: str | None
    notes: str
    custom_fields: dict[str, str] = Field(alias="customFields")


class RelationshipSchema(_Schema):
    id: str
    type: RelationType
    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    subtype: Subtype | None
    start_date: str | None = Field(alias="startDate")
    end_date: str | None = Field(alias="endDate")
    location: str | None = None


class MetaSchema(_Schema):
    name: str
    description: str
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")
    author: str
    project_type: Literal["familyTree", "friendCluster"] = Field("familyTree", alias="projectType")


class PositionSchema(_Schema):
    x: float
    y: float


class HandlePositionSchema(_Schema):
    side: Literal["top", "bottom", "left", "right"]
    offset: float


class LayoutSchema(_Schema):
    orientation: Literal["vertical", "horizontal"]
    root_person_id: str | None = Field(alias="rootPersonId")
    node_positions: dict[str, PositionSchema] = Field(alias="nodePositions")
    handle_positions: dict[str, dict[str, HandlePositionSchema]] | None = Field(None, alias="handlePositions")


class SettingsSchema(_Schema):
    theme: Literal["light", "dark", "system"]
    locale: Literal["it", "en"]


class Project(_Schema):
    version: str
    meta: MetaSchema
    persons: list[PersonSchema]
    relationships: list[RelationshipSchema]
    layout: LayoutSchema
    settings: SettingsSchema

    def to_domain(self) -> tuple[list[Person], list[Relationship]]:
        """Return the project's persons and relationships as data classes."""
        persons = [Person(**p.model_dump()) for p in self.persons]
        relationships = [Relationship(**r.model_dump()) for r in self.relationships]
        return persons, relationships


def import_project(data: Any) -> Project:
    """
    Validate a decoded JSON document and load it as a Project.

    Raises:
        ProjectValidationError: If the document does not match the schema
    """
    try:
        return Project.model_validate(data)
    except ValidationError as e:
        raise ProjectValidationError(e) from e


def export_project(
    persons: list[Person],
    relationships: list[Relationship],
    meta: dict[str, Any],
    layout: dict[str, Any],
    settings: dict[str, Any],
) -> dict[str, Any]:
    """Build a project document, stamping meta.updatedAt with the current time."""
    return {
        "version": PROJECT_VERSION,
        "meta": {**meta, "updatedAt": datetime.now(timezone.utc).isoformat()},
        "persons": [p.to_dict() for p in persons],
        "relationships": [r.to_dict() for r in relationships],
        "layout": layout,
        "settings": settings,
    }


def new_project_meta(name: str, project_type: str = "familyTree", author: str = "", description: str = "") -> dict[str, Any]:
    now = datetime.now(timezone.utc).isoformat()
    return {
        "name": name,
        "description": description,
        "createdAt": now,
        "updatedAt": now,
        "author": author,
        "projectType": project_type,
    }


def project_file_name(name: str) -> str:
    """File name used when saving a project, e.g. 'My Family' -> 'My_Family.json'."""
    return re.sub(r"\s+", "_", name) + ".json"


def read_project_file(filepath: Path) -> Project:
    """Read and validate a JSON project file."""
    with open(filepath, encoding="utf-8") as f:
        data = json.load(f)
    project = import_project(data)
    logger.info(
        "Loaded project %r: %d persons, %d relationships",
        project.meta.name,
        len(project.persons),
        len(project.relationships),
    )
    return project


def write_project_file(filepath: Path, project: dict[str, Any]) -> None:
    """Write a project document as indented JSON."""
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(project, f, indent=2, ensure_ascii=False)
        f.write("\n")
