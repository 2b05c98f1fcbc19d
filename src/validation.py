"""Graph validation for relationship data."""

import networkx as nx

from dates import extract_year, is_partial_date
from graph import build_graph, parent_child_graph
from models import GENDERS, RELATION_TYPES, SUBTYPES_BY_TYPE, Person, Relationship


def validate_graph(persons: list[Person], relationships: list[Relationship]) -> list[str]:
    """
    Validate relationship data for:
    - Relationships pointing at unknown persons
    - Self-relationships
    - Unknown genders, relationship types and subtypes
    - Birth and death dates that are not YYYY, YYYY-MM or YYYY-MM-DD
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent)
    - Date ordering issues

    Returns a list of warning messages. Never raises.
    """
    warnings: list[str] = []
    person_ids = {p.id for p in persons}

    for rel in relationships:
        missing = [pid for pid in (rel.from_id, rel.to_id) if pid not in person_ids]
        if missing:
            warnings.append(f"Relationship {rel.id} references unknown person(s): {missing}")
        elif rel.from_id == rel.to_id:
            warnings.append(f"Relationship {rel.id} links {rel.from_id} to themselves")

        if rel.type not in RELATION_TYPES:
            warnings.append(f"Relationship {rel.id} has unknown type {rel.type!r}")
        elif rel.subtype is not None and rel.subtype not in SUBTYPES_BY_TYPE[rel.type]:
            warnings.append(f"Relationship {rel.id} has subtype {rel.subtype!r} not valid for {rel.type}")

    for p in persons:
        if p.gender not in GENDERS:
            warnings.append(f"Person {p.id} has unknown gender {p.gender!r}")
        for label, value in (("birth", p.birth_date), ("death", p.death_date)):
            if value and not is_partial_date(value):
                warnings.append(f"Person {p.id} has malformed {label} date {value!r}")

    # Check for cycles
    try:
        cycle = nx.find_cycle(parent_child_graph(persons, relationships), orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass  # No cycle found, which is good

    G = build_graph(persons, relationships)

    # Check for impossible ages (child born before parent)
    for parent, child, data in G.edges(data=True):
        if data.get("relationship_type") != "parent-child":
            continue

        parent_data = G.nodes[parent]
        child_data = G.nodes[child]

        parent_birth = parent_data.get("birth_date")
        child_birth = child_data.get("birth_date")

        if parent_birth and child_birth:
            if _before(child_birth, parent_birth):
                warnings.append(
                    f"Impossible: {child_data.get('person_name')} born before parent "
                    f"{parent_data.get('person_name')}"
                )
            else:
                # Check if parent was too young (< 12 years old)
                try:
                    if int(extract_year(child_birth)) - int(extract_year(parent_birth)) < 12:
                        warnings.append(
                            f"Suspicious: {parent_data.get('person_name')} was less than 12 years "
                            f"old when {child_data.get('person_name')} was born"
                        )
                except ValueError:
                    pass

    # Check death before birth
    for _, data in G.nodes(data=True):
        birth = data.get("birth_date")
        death = data.get("death_date")

        if birth and death and _before(death, birth):
            warnings.append(f"Impossible: {data.get('person_name')} died before being born")

    return warnings


def _before(a: str, b: str) -> bool:
    precision = min(len(a), len(b))
    return a[:precision] < b[:precision]
