"""Verify ClubService validation and caching.

The offline checks run against a stub client and need no server. With
--live, each Viktoria team mapping is also resolved against the running CMS.
"""
import argparse
import sys

import config
from club_service import ClubService
from cms_client import StrapiClient
from logger import get_logger
from models import ClubData

logger = get_logger(__name__)


class Clock:
    """Manually advanced clock for TTL checks."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class StubClient:
    """Stands in for StrapiClient; answers every list query with the same clubs."""

    def __init__(self, clubs=None):
        self.clubs = clubs or [{"id": 7, "name": "SV Viktoria Wertheim"}]
        self.calls = []

    def find_many(self, collection, **kwargs):
        self.calls.append((collection, kwargs))
        return self.clubs

    def find_one(self, collection, document_id, **kwargs):
        self.calls.append((collection, kwargs))
        return next((c for c in self.clubs if c["id"] == document_id), None)


def run_offline_checks():
    """Yield (name, passed) for the validation and cache checks."""
    clock = Clock()
    client = StubClient()
    service = ClubService(client, ttl_minutes=30, clock=clock)

    valid = service.validate_club_data(ClubData(
        name="SV Viktoria Wertheim", club_typ="viktoria_verein", viktoria_team_mapping="team_1"
    ))
    yield "valid Viktoria club accepted", valid.is_valid

    missing = service.validate_club_data(ClubData(name="SV Viktoria Wertheim", club_typ="viktoria_verein"))
    yield "Viktoria club without mapping rejected", (
        not missing.is_valid and "Viktoria clubs must have a team mapping" in missing.errors
    )

    bad = service.validate_club_data(ClubData(name="X", club_typ="verein", gruendungsjahr=1700))
    yield "short name, bad type and founding year reported", len(bad.errors) == 3

    service.find_clubs_by_liga(1)
    service.find_clubs_by_liga(1)
    yield "second liga lookup served from cache", len(client.calls) == 1

    clock.now += 31 * 60
    service.find_clubs_by_liga(1)
    yield "expired entry refetched", len(client.calls) == 2

    service.invalidate_cache("club:liga:")
    yield "pattern invalidation empties cache", service.cache_stats()["size"] == 0

    service.set_cache(service.cache_key("id", 7), {"id": 7})
    service.find_clubs_by_liga(2)
    service.handle_club_cache_invalidation(7, "delete")
    yield "club delete drops its own and liga entries", service.cache_stats()["size"] == 0

    duplicated = ClubService(StubClient([
        {"id": 1, "name": "SV Viktoria Wertheim", "viktoria_team_mapping": "team_1"},
        {"id": 2, "name": "Viktoria Wertheim II", "viktoria_team_mapping": "team_1"},
    ]), clock=clock)
    uniqueness = duplicated.validate_viktoria_team_mapping_uniqueness()
    yield "duplicate team mapping detected", not uniqueness.is_valid and len(uniqueness.errors) == 1


def run_live_checks(service: ClubService):
    for mapping in config.TEAM_MAPPINGS:
        try:
            club = service.find_viktoria_club_by_team(mapping, skip_cache=True)
            yield f"{mapping} resolves to a club ({club['name'] if club else 'none'})", club is not None
        except Exception as e:
            logger.error(f"Lookup for {mapping} failed: {e}")
            yield f"{mapping} lookup", False

    uniqueness = service.validate_viktoria_team_mapping_uniqueness()
    for error in uniqueness.errors:
        logger.error(error)
    yield "Viktoria team mappings are unique", uniqueness.is_valid


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Verify club validation and caching.")
    parser.add_argument("--live", action="store_true", help="Also query the running CMS")
    args = parser.parse_args(argv)

    results = list(run_offline_checks())
    if args.live:
        with StrapiClient() as client:
            results.extend(run_live_checks(ClubService(client)))

    for name, passed in results:
        print(f"{'✅ PASSED' if passed else '❌ FAILED'}: {name}")

    failed = sum(1 for _, passed in results if not passed)
    print(f"\n{len(results) - failed}/{len(results)} checks passed.")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
