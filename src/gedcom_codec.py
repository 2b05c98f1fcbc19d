"""GEDCOM parsing and serialization.

Supports the practical subset needed for family-tree interchange:
HEAD, INDI, FAM, NAME, SEX, BIRT, DEAT, DATE, PLAC, NOTE, CONT, CONC,
HUSB, WIFE, CHIL, MARR, DIV, TRLR. Everything else is ignored.
"""

import enum
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from dates import parse_gedcom_date, to_gedcom_date
from models import Person, Relationship, generate_id


logger = logging.getLogger(__name__)

LINE_RE = re.compile(r"^(\d+)\s+(@\S+@\s+)?(.*)$")
TAG_RE = re.compile(r"^(\S+)\s*(.*)$")

SEX_TO_GENDER = {"M": "male", "F": "female"}
GENDER_TO_SEX = {"male": "M", "female": "F", "other": "U", "unknown": "U"}


class ParseContext(enum.Enum):
    """Which level-1 structure the following level-2 lines belong to."""

    NONE = "none"
    IN_BIRTH = "birth"
    IN_DEATH = "death"
    IN_NOTE = "note"


@dataclass
class FamilyRecord:
    id: str
    husb: str | None = None
    wife: str | None = None
    children: list[str] = field(default_factory=list)
    married: bool = False
    divorced: bool = False


# ============================================================================
# Parsing
# ============================================================================


def split_name(value: str) -> tuple[str, str]:
    """Split a GEDCOM name like 'Mario /Rossi/' into (first, last)."""
    parts = [part.strip() for part in value.split("/")]
    first_name = parts[0] if parts else ""
    last_name = parts[1] if len(parts) > 1 else ""
    return first_name, last_name


def _apply_individual_line(person: Person, level: int, tag: str, value: str, context: ParseContext) -> ParseContext:
    """Apply one line inside an INDI record and return the new sub-context."""
    if level == 1:
        if tag == "NAME":
            person.first_name, person.last_name = split_name(value)
        elif tag == "SEX":
            person.gender = SEX_TO_GENDER.get(value, "unknown")
        elif tag == "NOTE":
            person.notes = value
            return ParseContext.IN_NOTE
        elif tag == "BIRT":
            return ParseContext.IN_BIRTH
        elif tag == "DEAT":
            return ParseContext.IN_DEATH
        return ParseContext.NONE

    if level == 2:
        if context is ParseContext.IN_BIRTH:
            if tag == "DATE":
                person.birth_date = parse_gedcom_date(value)
            elif tag == "PLAC":
                person.birth_place = value
        elif context is ParseContext.IN_DEATH:
            if tag == "DATE":
                person.death_date = parse_gedcom_date(value)
            elif tag == "PLAC":
                person.death_place = value
        elif context is ParseContext.IN_NOTE:
            if tag == "CONT":
                person.notes += "\n" + value
            elif tag == "CONC":
                person.notes += value

    return context


def _apply_family_line(family: FamilyRecord, level: int, tag: str, value: str) -> None:
    """Apply one line inside a FAM record."""
    if level != 1:
        return
    if tag == "HUSB":
        family.husb = value
    elif tag == "WIFE":
        family.wife = value
    elif tag == "CHIL":
        family.children.append(value)
    elif tag == "MARR":
        family.married = True
    elif tag == "DIV":
        family.divorced = True


def family_relationships(families: list[FamilyRecord]) -> list[Relationship]:
    """Derive partner and parent-child relationships from family records."""
    relationships: list[Relationship] = []

    for fam in families:
        if fam.husb and fam.wife:
            if fam.divorced:
                subtype = "divorced"
            elif fam.married:
                subtype = "married"
            else:
                subtype = "partner"
            relationships.append(
                Relationship(
                    id=generate_id("r"),
                    type="partner",
                    from_id=fam.husb,
                    to_id=fam.wife,
                    subtype=subtype,
                )
            )

        parents = [p for p in (fam.husb, fam.wife) if p]
        for child_id in fam.children:
            for parent_id in parents:
                relationships.append(
                    Relationship(
                        id=generate_id("r"),
                        type="parent-child",
                        from_id=parent_id,
                        to_id=child_id,
                        subtype="biological",
                    )
                )

    return relationships


def parse_gedcom(text: str) -> tuple[list[Person], list[Relationship]]:
    """
    Parse GEDCOM text into persons and relationships.

    The parser is tolerant: lines that do not look like
    "LEVEL [@XREF@] TAG [VALUE]" and tags it does not know are skipped.
    Relationships are derived from FAM records once all lines are read.
    """
    persons: list[Person] = []
    families: list[FamilyRecord] = []

    current_indi: Person | None = None
    current_fam: FamilyRecord | None = None
    context = ParseContext.NONE

    for line_no, raw_line in enumerate(re.split(r"\r?\n", text), start=1):
        line = raw_line.strip().lstrip("\ufeff")
        if not line:
            continue

        match = LINE_RE.match(line)
        if not match:
            logger.debug("Skipping malformed GEDCOM line %d: %r", line_no, line)
            continue

        level = int(match.group(1))
        xref = (match.group(2) or "").strip().replace("@", "")
        rest = match.group(3)

        if level == 0:
            current_indi = None
            current_fam = None
            context = ParseContext.NONE

            record_tag = rest.split()[0] if rest.split() else ""
            if record_tag == "INDI":
                current_indi = Person(id=xref or generate_id("p"))
                persons.append(current_indi)
            elif record_tag == "FAM":
                current_fam = FamilyRecord(id=xref or generate_id("f"))
                families.append(current_fam)
            continue

        tag_match = TAG_RE.match(rest)
        if not tag_match:
            continue
        tag = tag_match.group(1)
        value = tag_match.group(2).strip().replace("@", "")

        if current_indi is not None:
            context = _apply_individual_line(current_indi, level, tag, value, context)
        elif current_fam is not None:
            _apply_family_line(current_fam, level, tag, value)

    relationships = family_relationships(families)
    logger.debug(
        "Parsed %d persons, %d families, %d relationships",
        len(persons),
        len(families),
        len(relationships),
    )
    return persons, relationships


def read_gedcom_file(filepath: Path) -> tuple[list[Person], list[Relationship]]:
    """Read and parse a UTF-8 GEDCOM file."""
    text = Path(filepath).read_text(encoding="utf-8-sig")
    return parse_gedcom(text)


# ============================================================================
# Serialization
# ============================================================================


def _individual_lines(p: Person) -> list[str]:
    lines = [
        f"0 @{p.id}@ INDI",
        f"1 NAME {p.first_name} /{p.last_name}/",
        f"1 SEX {GENDER_TO_SEX.get(p.gender, 'U')}",
    ]

    for tag, date, place in (
        ("BIRT", p.birth_date, p.birth_place),
        ("DEAT", p.death_date, p.death_place),
    ):
        if date or place:
            lines.append(f"1 {tag}")
            if date:
                lines.append(f"2 DATE {to_gedcom_date(date)}")
            if place:
                lines.append(f"2 PLAC {place}")

    if p.notes:
        first, *rest = p.notes.split("\n")
        lines.append(f"1 NOTE {first}")
        lines.extend(f"2 CONT {cont}" for cont in rest)

    return lines


def serialize_gedcom(persons: list[Person], relationships: list[Relationship]) -> str:
    """
    Serialize persons and relationships to a GEDCOM 5.5.1 document.

    One FAM record is written per partner relationship. The husband is the
    `to` person when the `from` person is female, otherwise the `from`
    person; same-gender and unknown-gender couples are therefore assigned
    by position alone. A child is listed under a family only when it has a
    parent-child relationship from one of the two partners.
    """
    lines = [
        "0 HEAD",
        "1 SOUR FamilyTree",
        "1 GEDC",
        "2 VERS 5.5.1",
        "2 FORM LINEAGE-LINKED",
        "1 CHAR UTF-8",
    ]

    for p in persons:
        lines.extend(_individual_lines(p))

    persons_by_id = {p.id: p for p in persons}
    partner_rels = [r for r in relationships if r.type == "partner"]
    parent_child_rels = [r for r in relationships if r.type == "parent-child"]

    for fam_idx, rel in enumerate(partner_rels, start=1):
        p1 = persons_by_id.get(rel.from_id)
        p2 = persons_by_id.get(rel.to_id)
        if p1 is None or p2 is None:
            logger.debug("Skipping partner relationship %s with missing endpoint", rel.id)
            continue

        husb, wife = (p2, p1) if p1.gender == "female" else (p1, p2)

        lines.append(f"0 @F{fam_idx}@ FAM")
        lines.append(f"1 HUSB @{husb.id}@")
        lines.append(f"1 WIFE @{wife.id}@")
        if rel.subtype == "married":
            lines.append("1 MARR")
        elif rel.subtype == "divorced":
            lines.append("1 MARR")
            lines.append("1 DIV")

        couple = {rel.from_id, rel.to_id}
        child_ids = list(dict.fromkeys(r.to_id for r in parent_child_rels if r.from_id in couple))
        for child_id in child_ids:
            has_parent_in_couple = any(r.to_id == child_id and r.from_id in couple for r in parent_child_rels)
            if has_parent_in_couple:
                lines.append(f"1 CHIL @{child_id}@")

    lines.append("0 TRLR")
    return "\n".join(lines)


def write_gedcom_file(filepath: Path, persons: list[Person], relationships: list[Relationship]) -> None:
    """Serialize and write a GEDCOM file as UTF-8."""
    Path(filepath).write_text(serialize_gedcom(persons, relationships) + "\n", encoding="utf-8")
