"""Seed league table standings (Tabellen-Einträge) at season start.

Looks up each liga by name, skips teams that already have an entry in that
liga and creates the rest with zeroed results. Failed entries are reported
and counted; the run continues.
"""
import argparse
import sys

from cms_client import StrapiClient
from logger import get_logger
from models import TabellenEintragData

logger = get_logger(__name__)

LIGA_TABELLEN = {
    "Kreisliga Tauberbischofsheim": [
        "SV Viktoria Wertheim", "VfR Gerlachsheim", "TSV Jahn Kreuzwertheim", "TSV Assamstadt",
        "FV Brehmbachtal", "FC Hundheim-Steinbach", "TuS Großrinderfeld", "Türk Gücü Wertheim",
        "SV Pülfringen", "VfB Reicholzheim", "FC Rauenberg", "SV Schönfeld",
        "TSG Impfingen II", "1. FC Umpfertal", "Kickers DHK Wertheim", "TSV Schwabhausen",
    ],
    "Kreisklasse A Tauberbischofsheim": [
        "TSV Unterschüpf", "SV Nassig II", "TSV Dittwar", "FV Oberlauda e.V.",
        "SV Viktoria Wertheim II", "FC Wertheim-Eichel", "TSV Assamstadt II", "FC Grünsfeld II",
        "TSV Gerchsheim", "SV Distelhausen II", "TSV Wenkheim", "SV Winzer Beckstein II",
        "SV Oberbalbach", "FSV Tauberhöhe II",
    ],
    "Kreisklasse B Tauberbischofsheim": [
        "FC Hundheim-Steinbach 2", "FC Wertheim-Eichel 2", "SG RaMBo 2", "SV Eintracht Nassig 3",
        "SpG Kickers DHK Wertheim 2/Urphar", "SpG Vikt. Wertheim 3/Grünenwort",
        "TSV Kreuzwertheim 2", "Turkgucu Wertheim 2", "VfB Reicholzheim 2",
    ],
}


def seed_liga(client: StrapiClient, liga_name: str, teams) -> dict:
    """Create missing entries for one liga. Returns created/skipped/failed counts."""
    stats = {"created": 0, "skipped": 0, "failed": 0}

    ligas = client.find_many("ligas", filters={"name": {"$eq": liga_name}})
    if not ligas:
        print(f"❌ Liga '{liga_name}' not found, skipping {len(teams)} teams.")
        stats["failed"] += len(teams)
        return stats
    liga_id = ligas[0]["id"]

    existing = client.find_many(
        "tabellen-eintraege", filters={"liga": {"id": {"$eq": liga_id}}}, page_size=100
    )
    existing_names = {e.get("team_name") for e in existing}

    print(f"\n🏆 {liga_name} (id={liga_id}): {len(existing)} existing entries")
    for platz, team_name in enumerate(teams, start=1):
        if team_name in existing_names:
            print(f"   ℹ️  {team_name} already in table")
            stats["skipped"] += 1
            continue
        try:
            entry = TabellenEintragData.from_results(team_name, liga=liga_id, platz=platz)
            client.create("tabellen-eintraege", entry.to_payload())
            print(f"   ✅ {platz:>2}. {team_name}")
            stats["created"] += 1
        except Exception as e:
            logger.error(f"Error creating entry for {team_name}: {e}",
                         extra={"details": getattr(e, "details", None)})
            stats["failed"] += 1
    return stats


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed Tabellen-Einträge for the club's leagues.")
    parser.add_argument("--liga", action="append", choices=sorted(LIGA_TABELLEN),
                        help="Only seed this liga (repeatable). Default: all.")
    args = parser.parse_args(argv)

    ligas = args.liga or list(LIGA_TABELLEN)
    totals = {"created": 0, "skipped": 0, "failed": 0}

    print("🚀 Seeding Liga-Tabellen...")
    try:
        with StrapiClient() as client:
            for liga_name in ligas:
                stats = seed_liga(client, liga_name, LIGA_TABELLEN[liga_name])
                for key in totals:
                    totals[key] += stats[key]
    except Exception as e:
        logger.error(f"❌ Seeding aborted: {e}", extra={"details": getattr(e, "details", None)})
        return 1

    print("\n📊 Summary:")
    print(f"- Created: {totals['created']}")
    print(f"- Skipped (existing): {totals['skipped']}")
    print(f"- Failed: {totals['failed']}")
    return 1 if totals["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
