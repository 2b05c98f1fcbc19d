"""Graphviz DOT export for relationship graphs."""

from pathlib import Path

import pydot

from dates import format_date_range
from layout import DEFAULT_CONFIG, LayoutConfig
from models import Person, Relationship


GENDER_COLORS = {
    "male": "lightblue",
    "female": "lightpink",
}

# Graphviz works in inches at 72 points per inch
POINTS_PER_INCH = 72.0


def build_dot(
    persons: list[Person],
    relationships: list[Relationship],
    orientation: str = "vertical",
    project_type: str = "familyTree",
    config: LayoutConfig | None = None,
) -> pydot.Dot:
    """
    Build a Graphviz graph mirroring the layout engine's settings.

    - Ancestors first (top for vertical, left for horizontal/friend clusters)
    - Parent-child edges are the only ones constraining ranks in family trees
    - Partners share a rank via rank=same subgraphs in family trees

    Args:
        persons: People to draw
        relationships: Relationships; edges with unknown endpoints are skipped
        orientation: "vertical" or "horizontal"
        project_type: "familyTree" or "friendCluster"
        config: Node size and spacing, shared with compute_layout

    Returns:
        A pydot.Dot graph
    """
    config = config or DEFAULT_CONFIG
    family_tree = project_type == "familyTree"
    left_to_right = not family_tree or orientation == "horizontal"

    P = pydot.Dot(graph_type="digraph")
    P.set("rankdir", "LR" if left_to_right else "TB")
    P.set("nodesep", str(config.node_sep / POINTS_PER_INCH))
    P.set("ranksep", str(config.rank_sep / POINTS_PER_INCH))

    person_ids = set()
    for p in persons:
        person_ids.add(p.id)
        label = "\n".join(part for part in (p.first_name, p.last_name, format_date_range(p.birth_date, p.death_date)) if part)
        P.add_node(
            pydot.Node(
                _quote(p.id),
                label=_quote(label),
                shape="box",
                style="rounded,filled",
                fillcolor=GENDER_COLORS.get(p.gender, "lightgray"),
                width=str(config.node_width / POINTS_PER_INCH),
                height=str(config.node_height / POINTS_PER_INCH),
                fixedsize="true",
            )
        )

    partner_pairs: list[tuple[str, str]] = []
    for rel in relationships:
        if rel.from_id not in person_ids or rel.to_id not in person_ids:
            continue

        if rel.type == "parent-child":
            P.add_edge(pydot.Edge(_quote(rel.from_id), _quote(rel.to_id), color="darkgray"))
        elif family_tree:
            # Partner and friend edges should not push people onto new ranks
            P.add_edge(
                pydot.Edge(
                    _quote(rel.from_id),
                    _quote(rel.to_id),
                    dir="none",
                    constraint="false",
                    style="dashed" if rel.type == "friend" else "solid",
                )
            )
            if rel.type == "partner":
                partner_pairs.append((rel.from_id, rel.to_id))
        else:
            P.add_edge(pydot.Edge(_quote(rel.from_id), _quote(rel.to_id), dir="none"))

    for i, (a, b) in enumerate(partner_pairs):
        sg = pydot.Subgraph(f"couple_{i}", rank="same")
        sg.add_node(pydot.Node(_quote(a)))
        sg.add_node(pydot.Node(_quote(b)))
        P.add_subgraph(sg)

    return P


def write_dot(
    output_path: Path,
    persons: list[Person],
    relationships: list[Relationship],
    orientation: str = "vertical",
    project_type: str = "familyTree",
) -> None:
    """Write the DOT source for the graph; no Graphviz installation needed."""
    P = build_dot(persons, relationships, orientation, project_type)
    Path(output_path).write_text(P.to_string(), encoding="utf-8")


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'
