"""Minimal raw-SQL access to Strapi's Postgres database.

Creates a SQLAlchemy pool over pg8000 and exposes the few statements the
API-token permission setup needs. The tables belong to Strapi; this module
only reads and inserts rows.
"""

import uuid
from typing import Dict, Iterable, List

import pg8000
import sqlalchemy
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

import config
from logger import get_logger

logger = get_logger(__name__)

TOKENS_TABLE = "strapi_api_tokens"
PERMISSIONS_TABLE = "strapi_api_token_permissions"
PERMISSION_LINK_TABLE = "strapi_api_token_permissions_token_lnk"

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: DBAPIError) -> bool:
    """True if the wrapped DBAPI error is a Postgres unique violation."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    # pg8000 puts the server's error fields in args[0], SQLSTATE under 'C'
    if code is None and orig is not None and orig.args and isinstance(orig.args[0], dict):
        code = orig.args[0].get("C")
    return code == UNIQUE_VIOLATION


class StrapiDatabase:
    """Thin wrapper around a Postgres connection pool for Strapi's admin tables."""

    def __init__(self):
        self.pool = sqlalchemy.create_engine(
            "postgresql+pg8000://",
            creator=self._get_conn,
        )

    def _get_conn(self):
        """Return a fresh pg8000 connection.

        Raises a clear error if required credentials are missing to avoid
        ambiguous connection failures.
        """
        if not getattr(config, "DB_PASS", None):
            raise RuntimeError("DATABASE_PASSWORD environment variable is required but not set.")
        if not getattr(config, "DB_USER", None):
            raise RuntimeError("DATABASE_USERNAME environment variable is required but not set.")
        return pg8000.connect(
            user=config.DB_USER,
            password=config.DB_PASS,
            host=config.DB_HOST,
            port=config.DB_PORT,
            database=config.DB_NAME,
        )

    def find_api_token(self, name: str) -> Dict:
        """Look up an API token by its (unique) name."""
        with self.pool.connect() as conn:
            stmt = text(f"SELECT id, name, type FROM {TOKENS_TABLE} WHERE name = :name LIMIT 1")
            row = conn.execute(stmt, {"name": name}).fetchone()
        if row is None:
            raise LookupError(f"API token '{name}' not found in {TOKENS_TABLE}")
        return {"id": row[0], "name": row[1], "type": row[2]}

    def list_token_permissions(self, token_id: int) -> List[str]:
        """Return the action strings granted to a token, sorted."""
        with self.pool.connect() as conn:
            stmt = text(f"""
                SELECT p.action
                FROM {PERMISSIONS_TABLE} p
                JOIN {PERMISSION_LINK_TABLE} l ON l.api_token_permission_id = p.id
                WHERE l.api_token_id = :token_id
                ORDER BY p.action
            """)
            return [row[0] for row in conn.execute(stmt, {"token_id": token_id})]

    def grant_permission(self, token_id: int, action: str) -> bool:
        """Grant one action to a token. Returns False if it was already granted."""
        try:
            with self.pool.begin() as conn:
                existing = conn.execute(text(f"""
                    SELECT 1
                    FROM {PERMISSIONS_TABLE} p
                    JOIN {PERMISSION_LINK_TABLE} l ON l.api_token_permission_id = p.id
                    WHERE l.api_token_id = :token_id AND p.action = :action
                    LIMIT 1
                """), {"token_id": token_id, "action": action}).scalar()
                if existing is not None:
                    return False

                permission_id = conn.execute(text(f"""
                    INSERT INTO {PERMISSIONS_TABLE} (document_id, action, created_at, updated_at, published_at)
                    VALUES (:document_id, :action, NOW(), NOW(), NOW())
                    RETURNING id
                """), {"document_id": uuid.uuid4().hex[:24], "action": action}).scalar()

                order = conn.execute(text(f"""
                    SELECT COUNT(*) FROM {PERMISSION_LINK_TABLE} WHERE api_token_id = :token_id
                """), {"token_id": token_id}).scalar()

                conn.execute(text(f"""
                    INSERT INTO {PERMISSION_LINK_TABLE} (api_token_permission_id, api_token_id, api_token_permission_ord)
                    VALUES (:permission_id, :token_id, :ord)
                """), {"permission_id": permission_id, "token_id": token_id, "ord": (order or 0) + 1})
        except DBAPIError as e:
            if is_unique_violation(e):
                logger.info(f"Permission '{action}' already present (unique violation), skipping.")
                return False
            raise
        return True

    def grant_permissions(self, token_id: int, actions: Iterable[str]) -> Dict[str, List[str]]:
        """Grant several actions; duplicates are reported as skipped."""
        result = {"granted": [], "skipped": []}
        for action in actions:
            if self.grant_permission(token_id, action):
                result["granted"].append(action)
            else:
                result["skipped"].append(action)
        return result

    def dispose(self):
        self.pool.dispose()
