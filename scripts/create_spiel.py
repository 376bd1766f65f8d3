"""Create a single match (Spiel) record in the CMS.

Defaults point at the 1. Mannschaft's next home game in the Kreisliga;
override ids with flags. Exits non-zero if the record was not created.
"""
import argparse
import sys

from pydantic import ValidationError

from cms_client import CMSRequestError, StrapiClient
from logger import get_logger
from models import MatchStatus, SpielData

logger = get_logger(__name__)

# Ids from the local dev database
DEFAULT_SPIEL = {
    "datum": "2025-08-17T15:00:00Z",
    "heimclub": 1,        # SV Viktoria Wertheim
    "auswaertsclub": 2,   # VfR Gerlachsheim
    "unser_team": 1,      # 1. Mannschaft
    "liga": 1,            # Kreisliga Tauberbischofsheim
    "saison": 1,          # 2025/26
    "ist_heimspiel": True,
    "status": MatchStatus.GEPLANT.value,
    "spieltag": 1,
    "spielort": "Sportplatz Wertheim",
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create one Spiel record via the CMS API.")
    parser.add_argument("--datum", default=DEFAULT_SPIEL["datum"], help="Kick-off (ISO 8601)")
    parser.add_argument("--heimclub", type=int, default=DEFAULT_SPIEL["heimclub"])
    parser.add_argument("--auswaertsclub", type=int, default=DEFAULT_SPIEL["auswaertsclub"])
    parser.add_argument("--team", type=int, default=DEFAULT_SPIEL["unser_team"], help="unser_team id")
    parser.add_argument("--liga", type=int, default=DEFAULT_SPIEL["liga"])
    parser.add_argument("--saison", type=int, default=DEFAULT_SPIEL["saison"])
    parser.add_argument("--away", action="store_true", help="Mark as away game")
    parser.add_argument("--status", default=DEFAULT_SPIEL["status"],
                        choices=[s.value for s in MatchStatus])
    parser.add_argument("--tore-heim", type=int, default=None)
    parser.add_argument("--tore-auswaerts", type=int, default=None)
    parser.add_argument("--spieltag", type=int, default=DEFAULT_SPIEL["spieltag"])
    parser.add_argument("--spielort", default=DEFAULT_SPIEL["spielort"])
    return parser.parse_args(argv)


def build_spiel(args) -> SpielData:
    return SpielData(
        datum=args.datum,
        heimclub=args.heimclub,
        auswaertsclub=args.auswaertsclub,
        unser_team=args.team,
        liga=args.liga,
        saison=args.saison,
        ist_heimspiel=not args.away,
        status=args.status,
        tore_heim=args.tore_heim,
        tore_auswaerts=args.tore_auswaerts,
        spieltag=args.spieltag,
        spielort=args.spielort,
    )


def create_spiel(client: StrapiClient, spiel: SpielData) -> dict:
    payload = spiel.to_payload()
    print(f"📝 Creating Spiel: club {spiel.heimclub} vs club {spiel.auswaertsclub} on {payload['datum']}")
    record = client.create("spiele", payload)
    print(f"✅ Created Spiel id={record.get('id')} documentId={record.get('documentId')}")
    return record


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        spiel = build_spiel(args)
        with StrapiClient() as client:
            create_spiel(client, spiel)
    except ValidationError as e:
        logger.error(f"Invalid Spiel payload: {e}")
        return 1
    except CMSRequestError as e:
        logger.error(f"❌ Error creating Spiel: {e}", extra={"details": e.details})
        return 1
    except Exception as e:
        logger.error(f"❌ Error creating Spiel: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
