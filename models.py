"""Pydantic models for the records the scripts write and the files they read.

The CMS owns the real schema; these models only catch obviously broken
payloads before they are sent, and give typed access to schema.json files.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

RecordId = Union[int, str]


class MatchStatus(str, Enum):
    GEPLANT = "geplant"
    LAUFEND = "laufend"
    BEENDET = "beendet"
    ABGESAGT = "abgesagt"


class SpielData(BaseModel):
    """A match record (content type `spiel`)."""

    datum: datetime = Field(..., description="Kick-off time")
    heimclub: RecordId = Field(..., description="Home club id")
    auswaertsclub: RecordId = Field(..., description="Away club id")
    unser_team: RecordId = Field(..., description="Our team playing this match")
    liga: RecordId
    saison: RecordId
    ist_heimspiel: bool
    status: MatchStatus = MatchStatus.GEPLANT
    tore_heim: Optional[int] = Field(default=None, ge=0)
    tore_auswaerts: Optional[int] = Field(default=None, ge=0)
    spieltag: Optional[int] = Field(default=None, ge=1)
    spielort: Optional[str] = Field(default=None, max_length=100)
    schiedsrichter: Optional[str] = Field(default=None, max_length=100)
    zuschauer: Optional[int] = Field(default=None, ge=0)
    torschuetzen: List[Dict[str, Any]] = Field(default_factory=list)
    karten: List[Dict[str, Any]] = Field(default_factory=list)
    wechsel: List[Dict[str, Any]] = Field(default_factory=list)
    notizen: Optional[str] = None

    @model_validator(mode="after")
    def check_match(self):
        if self.heimclub == self.auswaertsclub:
            raise ValueError("heimclub and auswaertsclub must be different clubs")
        if self.status == MatchStatus.BEENDET and (self.tore_heim is None or self.tore_auswaerts is None):
            raise ValueError("a finished match (status 'beendet') needs tore_heim and tore_auswaerts")
        return self

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict for the CMS `data` body (ISO dates, no nulls)."""
        return self.model_dump(mode="json", exclude_none=True)


class TabellenEintragData(BaseModel):
    """A league table standing (content type `tabellen-eintrag`)."""

    team_name: str = Field(..., min_length=1, max_length=100)
    liga: RecordId
    club: Optional[RecordId] = None
    platz: int = Field(..., ge=1)
    spiele: int = Field(default=0, ge=0)
    siege: int = Field(default=0, ge=0)
    unentschieden: int = Field(default=0, ge=0)
    niederlagen: int = Field(default=0, ge=0)
    tore_fuer: int = Field(default=0, ge=0)
    tore_gegen: int = Field(default=0, ge=0)
    tordifferenz: int = 0
    punkte: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_totals(self):
        if self.spiele != self.siege + self.unentschieden + self.niederlagen:
            raise ValueError("spiele must equal siege + unentschieden + niederlagen")
        if self.tordifferenz != self.tore_fuer - self.tore_gegen:
            raise ValueError("tordifferenz must equal tore_fuer - tore_gegen")
        if self.punkte != 3 * self.siege + self.unentschieden:
            raise ValueError("punkte must equal 3 * siege + unentschieden")
        return self

    @classmethod
    def from_results(cls, team_name: str, liga: RecordId, platz: int, siege: int = 0,
                     unentschieden: int = 0, niederlagen: int = 0, tore_fuer: int = 0,
                     tore_gegen: int = 0, club: Optional[RecordId] = None) -> "TabellenEintragData":
        """Build an entry from raw results, deriving the computed columns."""
        return cls(
            team_name=team_name,
            liga=liga,
            club=club,
            platz=platz,
            spiele=siege + unentschieden + niederlagen,
            siege=siege,
            unentschieden=unentschieden,
            niederlagen=niederlagen,
            tore_fuer=tore_fuer,
            tore_gegen=tore_gegen,
            tordifferenz=tore_fuer - tore_gegen,
            punkte=3 * siege + unentschieden,
        )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ClubData(BaseModel):
    """Club input as submitted by admins; rules are checked by ClubService."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    kurz_name: Optional[str] = None
    club_typ: Optional[str] = None
    viktoria_team_mapping: Optional[str] = None
    liga_ids: List[int] = Field(default_factory=list)
    aktiv: Optional[bool] = None
    gruendungsjahr: Optional[int] = None
    vereinsfarben: Optional[str] = None
    heimstadion: Optional[str] = None
    adresse: Optional[str] = None
    website: Optional[str] = None


class ContentTypeInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    display_name: Optional[str] = Field(default=None, alias="displayName")
    singular_name: Optional[str] = Field(default=None, alias="singularName")
    plural_name: Optional[str] = Field(default=None, alias="pluralName")
    description: Optional[str] = None


class ContentTypeOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    draft_and_publish: Optional[bool] = Field(default=None, alias="draftAndPublish")
    main_field: Optional[str] = Field(default=None, alias="mainField")


class ContentTypeSchema(BaseModel):
    """A content type's `schema.json` as written by Strapi's type builder."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    kind: str = "collectionType"
    collection_name: Optional[str] = Field(default=None, alias="collectionName")
    info: ContentTypeInfo = Field(default_factory=ContentTypeInfo)
    options: ContentTypeOptions = Field(default_factory=ContentTypeOptions)
    attributes: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
