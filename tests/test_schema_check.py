import json
import os

import pytest

from schema_check import check_schema, load_schema, schema_path

CLUB_SCHEMA = {
    "kind": "collectionType",
    "collectionName": "clubs",
    "info": {"singularName": "club", "pluralName": "clubs", "displayName": "Club"},
    "options": {"draftAndPublish": False, "mainField": "name"},
    "attributes": {"name": {"type": "string", "required": True}, "kurz_name": {"type": "string"}},
}


def _write(tmp_path, data):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_schema_path_layout():
    assert schema_path("club", root="cms") == os.path.join(
        "cms", "src", "api", "club", "content-types", "club", "schema.json"
    )


def test_correct_schema_has_no_problems(tmp_path):
    schema = load_schema(_write(tmp_path, CLUB_SCHEMA))
    assert check_schema(schema, "Club", "name") == []


def test_wrong_display_name_and_main_field(tmp_path):
    data = json.loads(json.dumps(CLUB_SCHEMA))
    data["info"]["displayName"] = "Verein"
    data["options"]["mainField"] = "kurz_name"

    problems = check_schema(load_schema(_write(tmp_path, data)), "Club", "name")

    assert problems == [
        "info.displayName is 'Verein', expected 'Club'",
        "options.mainField is 'kurz_name', expected 'name'",
    ]


def test_missing_main_field(tmp_path):
    data = json.loads(json.dumps(CLUB_SCHEMA))
    del data["options"]["mainField"]
    assert check_schema(load_schema(_write(tmp_path, data)), "Club", "name") == ["options.mainField is missing"]


def test_main_field_must_be_an_attribute(tmp_path):
    data = json.loads(json.dumps(CLUB_SCHEMA))
    data["options"]["mainField"] = "titel"
    problems = check_schema(load_schema(_write(tmp_path, data)), "Club", "titel")
    assert problems == ["mainField 'titel' is not an attribute of this content type"]


def test_load_schema_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_schema(str(tmp_path / "nope.json"))


def test_load_schema_invalid_json(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        load_schema(str(path))
