"""Tests for relationship graph validation."""

from graph import build_graph
from models import Person, Relationship
from validation import validate_graph


def person(pid, birth=None, death=None):
    return Person(id=pid, first_name=pid.title(), birth_date=birth, death_date=death)


def parent_of(rid, parent, child):
    return Relationship(id=rid, type="parent-child", from_id=parent, to_id=child)


class TestValidateGraph:
    def test_clean_graph(self):
        persons = [person("mom", "1950"), person("kid", "1980-05-02")]
        assert validate_graph(persons, [parent_of("r1", "mom", "kid")]) == []

    def test_dangling_reference(self):
        warnings = validate_graph([person("a")], [parent_of("r1", "a", "ghost")])
        assert len(warnings) == 1
        assert "r1" in warnings[0] and "ghost" in warnings[0]

    def test_self_relationship(self):
        rel = Relationship(id="r1", type="friend", from_id="a", to_id="a")
        warnings = validate_graph([person("a")], [rel])
        assert warnings == ["Relationship r1 links a to themselves"]

    def test_parent_child_cycle(self):
        persons = [person("a"), person("b")]
        warnings = validate_graph(persons, [parent_of("r1", "a", "b"), parent_of("r2", "b", "a")])
        assert any(w.startswith("Cycle detected") for w in warnings)

    def test_child_born_before_parent(self):
        persons = [person("mom", "1980"), person("kid", "1975-03")]
        warnings = validate_graph(persons, [parent_of("r1", "mom", "kid")])
        assert warnings == ["Impossible: Kid born before parent Mom"]

    def test_young_parent(self):
        persons = [person("mom", "1970-01-01"), person("kid", "1979-06")]
        warnings = validate_graph(persons, [parent_of("r1", "mom", "kid")])
        assert len(warnings) == 1
        assert warnings[0].startswith("Suspicious: Mom")

    def test_same_year_different_precision_is_not_impossible(self):
        persons = [person("mom", "1950-06-01"), person("kid", "1950")]
        warnings = validate_graph(persons, [parent_of("r1", "mom", "kid")])
        assert not any(w.startswith("Impossible") for w in warnings)

    def test_death_before_birth(self):
        warnings = validate_graph([person("a", "1900-05-01", "1899")], [])
        assert warnings == ["Impossible: A died before being born"]

    def test_subtype_must_match_type(self):
        persons = [person("a"), person("b")]
        rel = Relationship(id="r1", type="partner", from_id="a", to_id="b", subtype="adopted")
        assert validate_graph(persons, [rel]) == ["Relationship r1 has subtype 'adopted' not valid for partner"]

    def test_unknown_type_and_gender(self):
        persons = [person("a"), Person(id="b", gender="robot")]
        rel = Relationship(id="r1", type="rival", from_id="a", to_id="b")
        assert validate_graph(persons, [rel]) == [
            "Relationship r1 has unknown type 'rival'",
            "Person b has unknown gender 'robot'",
        ]

    def test_malformed_dates(self):
        persons = [person("a", "1980-13"), person("b", "1980-02", "1999-00")]
        assert validate_graph(persons, []) == [
            "Person a has malformed birth date '1980-13'",
            "Person b has malformed death date '1999-00'",
        ]

    def test_partner_relationships_ignored_for_dates(self):
        persons = [person("a", "1990"), person("b", "1950")]
        rel = Relationship(id="r1", type="partner", from_id="a", to_id="b", subtype="married")
        assert validate_graph(persons, [rel]) == []


class TestBuildGraph:
    def test_keeps_typed_edges_and_skips_dangling(self):
        persons = [person("a"), person("b")]
        relationships = [
            parent_of("r1", "a", "b"),
            Relationship(id="r2", type="friend", from_id="a", to_id="b", subtype="sport"),
            parent_of("r3", "a", "ghost"),
        ]
        G = build_graph(persons, relationships)
        assert G.number_of_nodes() == 2
        assert G.number_of_edges() == 2
        assert G.edges["a", "b", "r2"]["relationship_type"] == "friend"
