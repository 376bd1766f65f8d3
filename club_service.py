"""Club lookups and validation with a small in-memory TTL cache.

Lookups go through the CMS REST API (see cms_client.StrapiClient). Results
are cached per key for `ttl_minutes`; expiry is checked on read.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import config
from cms_client import CMSRequestError, StrapiClient
from logger import get_logger
from models import ClubData

logger = get_logger(__name__)

CLUB_TYPES = ("viktoria_verein", "gegner_verein")
UPDATE_TYPES = ("create", "update", "delete")


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


class ClubService:
    """Club queries used by match forms and the verification script."""

    def __init__(self, client: StrapiClient, ttl_minutes: Optional[int] = None,
                 clock: Callable[[], float] = time.time):
        self.client = client
        self.ttl_minutes = ttl_minutes if ttl_minutes is not None else config.CLUB_CACHE_TTL_MINUTES
        self._clock = clock
        self._cache: Dict[str, tuple] = {}  # key -> (data, timestamp, ttl_seconds)
        self._stats = {"hits": 0, "misses": 0, "sets": 0, "invalidations": 0}

    # Cache
    @staticmethod
    def cache_key(kind: str, identifier: Any) -> str:
        return f"club:{kind}:{identifier}"

    def set_cache(self, key: str, data: Any, ttl_minutes: Optional[int] = None) -> None:
        ttl = (ttl_minutes if ttl_minutes is not None else self.ttl_minutes) * 60
        self._cache[key] = (data, self._clock(), ttl)
        self._stats["sets"] += 1
        logger.debug(f"Cache set: {key} (TTL: {ttl / 60:.0f}m)")

    def get_cache(self, key: str) -> Any:
        """Return cached data, or None if missing or expired."""
        entry = self._cache.get(key)
        if entry is None:
            self._stats["misses"] += 1
            return None

        data, timestamp, ttl = entry
        if self._clock() - timestamp > ttl:
            del self._cache[key]
            self._stats["misses"] += 1
            logger.debug(f"Cache expired: {key}")
            return None

        self._stats["hits"] += 1
        return data

    def invalidate_cache(self, pattern: Optional[str] = None) -> int:
        """Drop entries whose key contains `pattern` (everything if omitted)."""
        if pattern is None:
            removed = len(self._cache)
            self._cache.clear()
            self._stats["invalidations"] += 1
            logger.info("All club cache cleared")
            return removed

        keys = [k for k in self._cache if pattern in k]
        for key in keys:
            del self._cache[key]
            self._stats["invalidations"] += 1
        logger.debug(f"Cache invalidated for pattern: {pattern} ({len(keys)} entries)")
        return len(keys)

    def _drop(self, key: str) -> int:
        if self._cache.pop(key, None) is None:
            return 0
        self._stats["invalidations"] += 1
        return 1

    def handle_club_cache_invalidation(self, club_id, update_type: str) -> int:
        """Drop cache entries affected by a club create, update or delete.

        Per-club entries go first. If the club can still be read, only its
        own ligas and team mapping are dropped; otherwise every liga and
        Viktoria entry is.
        """
        if update_type not in UPDATE_TYPES:
            raise ValueError(f"update_type must be one of {', '.join(UPDATE_TYPES)}")

        removed = self._drop(self.cache_key("id", club_id)) + self._drop(self.cache_key("logo", club_id))

        club = None
        if update_type != "delete":
            try:
                club = self.client.find_one("clubs", club_id, populate=["ligas"])
            except CMSRequestError as e:
                logger.warning(f"Could not load club {club_id} for cache invalidation: {e}")

        if club:
            for liga in club.get("ligas") or []:
                removed += self._drop(self.cache_key("liga", liga.get("id")))
            mapping = club.get("viktoria_team_mapping")
            if club.get("club_typ") == "viktoria_verein" and mapping:
                removed += self._drop(self.cache_key("viktoria", mapping))
        else:
            removed += self.invalidate_cache("club:liga:")
            removed += self.invalidate_cache("club:viktoria:")

        logger.debug(f"Cache invalidated for club {club_id} ({update_type}): {removed} entries")
        return removed

    def cache_stats(self) -> Dict[str, Any]:
        total = self._stats["hits"] + self._stats["misses"]
        return {
            **self._stats,
            "hit_rate": (self._stats["hits"] / total) * 100 if total > 0 else 0.0,
            "size": len(self._cache),
        }

    # Validation
    def validate_club_data(self, club: ClubData) -> ValidationResult:
        errors = []

        if not club.name or len(club.name.strip()) < 2:
            errors.append("Club name must be at least 2 characters long")

        if club.club_typ not in CLUB_TYPES:
            errors.append("Valid club type is required (viktoria_verein or gegner_verein)")

        if club.club_typ == "viktoria_verein":
            if not club.viktoria_team_mapping:
                errors.append("Viktoria clubs must have a team mapping")
            elif club.viktoria_team_mapping not in config.TEAM_MAPPINGS:
                errors.append("Invalid team mapping for Viktoria club")

        if club.kurz_name and len(club.kurz_name) > 20:
            errors.append("Short name must be 20 characters or less")

        if club.gruendungsjahr is not None and not 1800 <= club.gruendungsjahr <= 2030:
            errors.append("Founding year must be between 1800 and 2030")

        if club.website and len(club.website) > 200:
            errors.append("Website URL must be 200 characters or less")

        return ValidationResult(is_valid=not errors, errors=errors)

    def validate_viktoria_team_mapping_uniqueness(self) -> ValidationResult:
        """Check that no two active Viktoria clubs share a team mapping."""
        try:
            clubs = self.client.find_many(
                "clubs",
                filters={"club_typ": {"$eq": "viktoria_verein"}, "aktiv": {"$eq": True}},
            )
        except CMSRequestError as e:
            logger.error(f"Error validating Viktoria team mapping uniqueness: {e}")
            return ValidationResult(is_valid=False, errors=[f"Validation error: {e}"])

        by_mapping: Dict[str, List[Dict[str, Any]]] = {}
        for club in clubs:
            mapping = club.get("viktoria_team_mapping")
            if mapping:
                by_mapping.setdefault(mapping, []).append(club)

        errors = [
            f"Team mapping {mapping} is used by multiple clubs: {', '.join(c.get('name', '?') for c in group)}"
            for mapping, group in by_mapping.items()
            if len(group) > 1
        ]
        return ValidationResult(is_valid=not errors, errors=errors)

    def validate_club_consistency(self, club_id) -> ValidationResult:
        """Check a stored club: unique mapping and name, at least one liga."""
        try:
            club = self.client.find_one("clubs", club_id, populate=["ligas"])
            if not club:
                return ValidationResult(is_valid=False, errors=[f"Club with ID {club_id} not found"])

            errors = []
            not_self = {"id": {"$ne": club.get("id", club_id)}}
            if club.get("club_typ") == "viktoria_verein":
                mapping = club.get("viktoria_team_mapping")
                if not mapping:
                    errors.append("Viktoria clubs must have a team mapping")
                else:
                    duplicates = self.client.find_many("clubs", filters={
                        "club_typ": {"$eq": "viktoria_verein"},
                        "viktoria_team_mapping": {"$eq": mapping},
                        **not_self,
                    })
                    if duplicates:
                        errors.append(
                            f"Team mapping {mapping} is already used by another Viktoria club: "
                            f"{duplicates[0].get('name')}"
                        )

            if not club.get("ligas"):
                errors.append("Club must be assigned to at least one liga")

            same_name = self.client.find_many("clubs", filters={"name": {"$eq": club.get("name")}, **not_self})
            if same_name:
                errors.append(f"Club name \"{club.get('name')}\" is already used by another club")
        except CMSRequestError as e:
            logger.error(f"Error validating club consistency: {e}")
            return ValidationResult(is_valid=False, errors=[f"Validation error: {e}"])

        logger.debug(f"Club consistency validation for {club.get('name')}: {len(errors)} error(s)")
        return ValidationResult(is_valid=not errors, errors=errors)

    # Lookups
    def find_clubs_by_liga(self, liga_id: int, skip_cache: bool = False) -> List[Dict[str, Any]]:
        if not isinstance(liga_id, int) or isinstance(liga_id, bool) or liga_id <= 0:
            raise ValueError("Valid liga ID is required")

        key = self.cache_key("liga", liga_id)
        if not skip_cache:
            cached = self.get_cache(key)
            if cached is not None:
                logger.debug(f"Found {len(cached)} clubs for liga {liga_id} (cached)")
                return cached

        clubs = self.client.find_many(
            "clubs",
            filters={"ligas": {"id": {"$eq": liga_id}}, "aktiv": {"$eq": True}},
            populate=["logo", "ligas"],
            sort="name:asc",
        )
        self.set_cache(key, clubs)
        logger.debug(f"Found {len(clubs)} clubs for liga {liga_id} (api)")
        return clubs

    def find_viktoria_club_by_team(self, team_mapping: str,
                                   skip_cache: bool = False) -> Optional[Dict[str, Any]]:
        if team_mapping not in config.TEAM_MAPPINGS:
            raise ValueError("Valid team mapping is required")

        key = self.cache_key("viktoria", team_mapping)
        if not skip_cache:
            cached = self.get_cache(key)
            if cached is not None:
                return cached

        clubs = self.client.find_many(
            "clubs",
            filters={
                "club_typ": {"$eq": "viktoria_verein"},
                "viktoria_team_mapping": {"$eq": team_mapping},
                "aktiv": {"$eq": True},
            },
            populate=["logo", "ligas"],
        )
        club = clubs[0] if clubs else None
        if club is not None:
            self.set_cache(key, club)
        logger.debug(f"Found Viktoria club for {team_mapping}: {club['name'] if club else 'none'}")
        return club

    def validate_club_in_liga(self, club_id, liga_id) -> bool:
        if not club_id or not liga_id:
            return False
        try:
            club = self.client.find_one("clubs", club_id, populate=["ligas"])
        except Exception as e:
            logger.error(f"Error validating club {club_id} in liga {liga_id}: {e}")
            return False

        if not club:
            logger.warning(f"Club {club_id} not found for liga validation")
            return False
        return any(liga.get("id") == liga_id for liga in club.get("ligas") or [])

    def get_club_with_logo(self, club_id, skip_cache: bool = False) -> Dict[str, Any]:
        if not club_id:
            raise ValueError("Valid club ID is required")

        key = self.cache_key("id", club_id)
        if not skip_cache:
            cached = self.get_cache(key)
            if cached is not None:
                return cached

        club = self.client.find_one("clubs", club_id, populate=["logo", "ligas"])
        if not club:
            raise LookupError(f"Club with ID {club_id} not found")
        self.set_cache(key, club)
        return club

    def create_club_if_not_exists(self, club: ClubData) -> Dict[str, Any]:
        if not club.name:
            raise ValueError("Club name is required")

        existing = self.client.find_many("clubs", filters={"name": {"$eq": club.name}})
        if existing:
            logger.debug(f"Club {club.name} already exists")
            return existing[0]

        validation = self.validate_club_data(club)
        if not validation.is_valid:
            raise ValueError(f"Invalid club data: {', '.join(validation.errors)}")

        data = club.model_dump(exclude_none=True, exclude={"liga_ids"})
        if club.liga_ids:
            data["ligas"] = club.liga_ids
        data.setdefault("aktiv", True)

        created = self.client.create("clubs", data)
        self.invalidate_cache("club:liga:")
        logger.info(f"Created new club: {club.name}")
        return created
