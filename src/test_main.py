"""End-to-end tests for the command-line front end."""

import json

import pytest

from gedcom_codec import read_gedcom_file
from main import main


GEDCOM = """0 HEAD
0 @I1@ INDI
1 NAME Mario /Rossi/
1 SEX M
1 BIRT
2 DATE 1950
0 @I2@ INDI
1 NAME Anna /Bianchi/
1 SEX F
0 @I3@ INDI
1 NAME Luca /Rossi/
1 SEX M
1 BIRT
2 DATE 1940
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 MARR
1 CHIL @I3@
0 TRLR
"""


@pytest.fixture
def gedcom_path(tmp_path):
    path = tmp_path / "family.ged"
    path.write_text(GEDCOM, encoding="utf-8")
    return path


class TestCli:
    def test_import_and_export_gedcom(self, tmp_path, gedcom_path):
        project_path = tmp_path / "family.json"
        assert main(["import-gedcom", str(gedcom_path), str(project_path), "--locale", "en"]) == 0

        data = json.loads(project_path.read_text(encoding="utf-8"))
        assert data["meta"]["name"] == "family"
        assert data["settings"]["locale"] == "en"
        assert set(data["layout"]["nodePositions"]) == {"I1", "I2", "I3"}

        out_path = tmp_path / "out.ged"
        assert main(["export-gedcom", str(project_path), str(out_path)]) == 0
        persons, relationships = read_gedcom_file(out_path)
        assert [p.full_name for p in persons] == ["Mario Rossi", "Anna Bianchi", "Luca Rossi"]
        assert len(relationships) == 3

    def test_layout_prints_positions(self, gedcom_path, capsys):
        assert main(["layout", str(gedcom_path), "--orientation", "horizontal"]) == 0
        positions = json.loads(capsys.readouterr().out)
        assert positions["I1"]["x"] == positions["I2"]["x"]
        assert positions["I3"]["x"] > positions["I1"]["x"]

    def test_validate_reports_warnings(self, gedcom_path, capsys):
        assert main(["validate", str(gedcom_path)]) == 0
        out = capsys.readouterr().out
        assert "Luca Rossi born before parent Mario Rossi" in out

    def test_dot(self, tmp_path, gedcom_path):
        out_path = tmp_path / "family.dot"
        assert main(["dot", str(gedcom_path), str(out_path)]) == 0
        assert "rank=same" in out_path.read_text(encoding="utf-8")

    def test_invalid_project_file(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text('{"version": "1.0.0"}', encoding="utf-8")
        assert main(["export-gedcom", str(path), str(tmp_path / "out.ged")]) == 2
        assert "Invalid project file" in capsys.readouterr().err

    def test_export_with_malformed_date(self, tmp_path, gedcom_path):
        project_path = tmp_path / "family.json"
        assert main(["import-gedcom", str(gedcom_path), str(project_path)]) == 0
        data = json.loads(project_path.read_text(encoding="utf-8"))
        data["persons"][0]["birthDate"] = "1950-13"
        project_path.write_text(json.dumps(data), encoding="utf-8")

        out_path = tmp_path / "out.ged"
        assert main(["export-gedcom", str(project_path), str(out_path)]) == 0
        assert "2 DATE 1950-13" in out_path.read_text(encoding="utf-8").split("\n")

    def test_missing_file(self, tmp_path):
        assert main(["validate", str(tmp_path / "missing.ged")]) == 1
