"""NetworkX graph building for relationship graphs."""

import logging

import networkx as nx

from models import Person, Relationship


logger = logging.getLogger(__name__)


def build_graph(persons: list[Person], relationships: list[Relationship]) -> nx.MultiDiGraph:
    """
    Build a NetworkX multigraph holding every person and every relationship.

    Edges keep the relationship direction (parent -> child for parent-child)
    and carry the relationship id, type and subtype. Relationships whose
    endpoints are not in `persons` are skipped.
    """
    G = nx.MultiDiGraph()

    # Note: use 'person_name' instead of 'name' to avoid conflict with pydot
    for p in persons:
        G.add_node(
            p.id,
            person_name=p.full_name,
            gender=p.gender,
            birth_date=p.birth_date,
            death_date=p.death_date,
            first_name=p.first_name,
            last_name=p.last_name,
        )

    for rel in relationships:
        if rel.from_id not in G or rel.to_id not in G:
            logger.debug("Skipping relationship %s with missing endpoint", rel.id)
            continue
        G.add_edge(
            rel.from_id,
            rel.to_id,
            key=rel.id,
            relationship_type=rel.type,
            subtype=rel.subtype,
        )

    return G


def ranking_edges(
    persons: list[Person], relationships: list[Relationship], project_type: str
) -> list[tuple[str, str]]:
    """
    Select the relationships that drive rank assignment.

    Family trees rank on parent-child edges only; friend clusters rank on
    every relationship. Edges with a missing endpoint are dropped.
    """
    person_ids = {p.id for p in persons}
    edges: list[tuple[str, str]] = []

    for rel in relationships:
        if rel.from_id not in person_ids or rel.to_id not in person_ids:
            logger.debug("Dropping layout edge %s: endpoint not in person set", rel.id)
            continue
        if project_type == "friendCluster" or rel.type == "parent-child":
            edges.append((rel.from_id, rel.to_id))

    return edges


def build_layout_graph(
    persons: list[Person], relationships: list[Relationship], project_type: str
) -> nx.DiGraph:
    """
    Build the directed graph used for layered layout.

    Node insertion order follows `persons` and edge insertion order follows
    `relationships`, which keeps the layout deterministic. Self-loops are
    not added since they carry no ranking information.
    """
    H = nx.DiGraph()
    for p in persons:
        H.add_node(p.id)

    for src, tgt in ranking_edges(persons, relationships, project_type):
        if src == tgt:
            continue
        H.add_edge(src, tgt)

    return H


def parent_child_graph(persons: list[Person], relationships: list[Relationship]) -> nx.DiGraph:
    """Directed parent -> child graph restricted to known persons."""
    return build_layout_graph(
        persons, [r for r in relationships if r.type == "parent-child"], "familyTree"
    )
