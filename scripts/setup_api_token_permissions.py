"""Grant read permissions to the website's API token directly in the database.

Strapi's admin UI is the normal way to do this; this script exists for
fresh dev databases. Actions the token already has are skipped, so it is
safe to re-run.
"""
import argparse
import sys

import config
from database import StrapiDatabase
from logger import get_logger

logger = get_logger(__name__)


def setup_permissions(db: StrapiDatabase, token_name: str, actions) -> dict:
    token = db.find_api_token(token_name)
    print(f"🔑 Token '{token['name']}' (id={token['id']}, type={token['type']})")

    # Duplicates are skipped inside grant_permissions; any other DB error propagates
    result = db.grant_permissions(token["id"], actions)
    for action in result["granted"]:
        print(f"   ✅ Granted {action}")
    for action in result["skipped"]:
        logger.info(f"{action} already granted, skipping")
    return result


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Grant API token permissions via SQL.")
    parser.add_argument("--token-name", default=config.API_TOKEN_NAME)
    parser.add_argument("--action", action="append", dest="actions",
                        help="Permission action (repeatable). Default: public read actions.")
    args = parser.parse_args(argv)
    actions = args.actions or config.PUBLIC_READ_ACTIONS

    print(f"🔌 Connecting to {config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}...")
    db = StrapiDatabase()
    try:
        result = setup_permissions(db, args.token_name, actions)
        token = db.find_api_token(args.token_name)
        permissions = db.list_token_permissions(token["id"])
    except Exception as e:
        logger.error(f"❌ Permission setup failed: {e}")
        return 1
    finally:
        db.dispose()

    print(f"\n📊 Granted {len(result['granted'])}, skipped {len(result['skipped'])}.")
    print(f"Token now has {len(permissions)} permission(s):")
    for action in permissions:
        print(f"   - {action}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
