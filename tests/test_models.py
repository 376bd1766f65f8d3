import pytest
from pydantic import ValidationError

from models import ContentTypeSchema, MatchStatus, SpielData, TabellenEintragData


def _spiel(**overrides):
    data = {
        "datum": "2025-08-17T15:00:00Z",
        "heimclub": 1,
        "auswaertsclub": 2,
        "unser_team": 1,
        "liga": 1,
        "saison": 1,
        "ist_heimspiel": True,
    }
    data.update(overrides)
    return SpielData(**data)


def test_spiel_defaults_and_payload():
    spiel = _spiel()
    payload = spiel.to_payload()

    assert spiel.status == MatchStatus.GEPLANT
    assert payload["status"] == "geplant"
    assert payload["datum"].startswith("2025-08-17T15:00:00")
    assert payload["torschuetzen"] == []
    assert "tore_heim" not in payload


def test_spiel_rejects_same_club_twice():
    with pytest.raises(ValidationError, match="different clubs"):
        _spiel(auswaertsclub=1)


def test_finished_spiel_needs_scores():
    with pytest.raises(ValidationError, match="beendet"):
        _spiel(status="beendet", tore_heim=2)
    assert _spiel(status="beendet", tore_heim=2, tore_auswaerts=0).tore_auswaerts == 0


def test_spiel_field_bounds():
    with pytest.raises(ValidationError):
        _spiel(tore_heim=-1)
    with pytest.raises(ValidationError):
        _spiel(spieltag=0)
    with pytest.raises(ValidationError):
        _spiel(spielort="x" * 101)


def test_tabellen_eintrag_from_results_derives_totals():
    entry = TabellenEintragData.from_results(
        "SV Viktoria Wertheim", liga=1, platz=1, siege=5, unentschieden=2, niederlagen=1,
        tore_fuer=17, tore_gegen=9,
    )
    assert entry.spiele == 8
    assert entry.tordifferenz == 8
    assert entry.punkte == 17


def test_tabellen_eintrag_zeroed_at_season_start():
    entry = TabellenEintragData.from_results("VfR Gerlachsheim", liga=1, platz=2)
    assert entry.to_payload() == {
        "team_name": "VfR Gerlachsheim", "liga": 1, "platz": 2, "spiele": 0, "siege": 0,
        "unentschieden": 0, "niederlagen": 0, "tore_fuer": 0, "tore_gegen": 0,
        "tordifferenz": 0, "punkte": 0,
    }


def test_tabellen_eintrag_inconsistent_points_rejected():
    with pytest.raises(ValidationError, match="punkte"):
        TabellenEintragData(team_name="A", liga=1, platz=1, spiele=1, siege=1, punkte=1,
                            tore_fuer=1, tordifferenz=1)


def test_content_type_schema_aliases():
    schema = ContentTypeSchema.model_validate({
        "kind": "collectionType",
        "collectionName": "clubs",
        "info": {"displayName": "Club", "singularName": "club", "pluralName": "clubs"},
        "options": {"draftAndPublish": False, "mainField": "name"},
        "attributes": {"name": {"type": "string"}},
    })
    assert schema.collection_name == "clubs"
    assert schema.info.display_name == "Club"
    assert schema.options.main_field == "name"
    assert schema.options.draft_and_publish is False
