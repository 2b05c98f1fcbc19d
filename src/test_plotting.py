"""Tests for Graphviz DOT export."""

import pytest

from models import Person, Relationship
from plotting import build_dot, write_dot


@pytest.fixture
def family():
    persons = [
        Person(id="p1", first_name="Mario", last_name="Rossi", gender="male", birth_date="1950"),
        Person(id="p2", first_name="Anna", last_name="Bianchi", gender="female"),
        Person(id="p3", first_name="Luca", last_name="Rossi", gender="other"),
    ]
    relationships = [
        Relationship(id="r1", type="partner", from_id="p1", to_id="p2", subtype="married"),
        Relationship(id="r2", type="parent-child", from_id="p1", to_id="p3"),
        Relationship(id="r3", type="parent-child", from_id="p2", to_id="p3"),
        Relationship(id="r4", type="parent-child", from_id="p2", to_id="ghost"),
    ]
    return persons, relationships


class TestBuildDot:
    def test_family_tree_top_to_bottom(self, family):
        text = build_dot(*family).to_string()
        assert "rankdir=TB" in text
        assert "rank=same" in text
        assert "lightblue" in text and "lightpink" in text and "lightgray" in text

    def test_horizontal_orientation(self, family):
        assert "rankdir=LR" in build_dot(*family, orientation="horizontal").to_string()

    def test_friend_cluster_is_left_to_right_without_partner_ranks(self, family):
        text = build_dot(*family, orientation="vertical", project_type="friendCluster").to_string()
        assert "rankdir=LR" in text
        assert "rank=same" not in text

    def test_dangling_edges_are_skipped(self, family):
        P = build_dot(*family)
        assert len(P.get_edges()) == 3
        assert "ghost" not in P.to_string()

    def test_partner_edge_does_not_constrain_ranks(self, family):
        P = build_dot(*family)
        partner_edges = [e for e in P.get_edges() if e.get("dir") == "none"]
        assert len(partner_edges) == 1
        assert partner_edges[0].get("constraint") == "false"

    def test_label_includes_lifespan(self, family):
        assert "1950" in build_dot(*family).to_string()

    def test_write_dot(self, tmp_path, family):
        path = tmp_path / "tree.dot"
        write_dot(path, *family)
        text = path.read_text(encoding="utf-8")
        assert text.lstrip().startswith("digraph")
