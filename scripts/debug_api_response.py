"""Print a CMS list endpoint's JSON response for debugging.

Examples:
    python -m scripts.debug_api_response --endpoint tabellen-eintraege --populate liga
    python -m scripts.debug_api_response --endpoint spiele --populate "*" \
        --where unser_team.name="1. Mannschaft" --fields id datum status
"""
import argparse
import json
import sys

import config
from api_inspect import filter_records, parse_criteria, select_fields, summarize
from cms_client import StrapiClient, encode_query, unwrap
from logger import get_logger

logger = get_logger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Fetch and print a CMS API response.")
    parser.add_argument("--endpoint", default="spiele",
                        help=f"Collection endpoint, e.g. {', '.join(config.LIST_ENDPOINTS)}")
    parser.add_argument("--populate", default=None,
                        help="'*' or comma-separated relations to populate")
    parser.add_argument("--where", nargs="*", default=[],
                        help="In-memory filters as key=value (dotted keys allowed)")
    parser.add_argument("--fields", nargs="*", default=[], help="Only print these dotted fields")
    parser.add_argument("--page-size", type=int, default=None)
    parser.add_argument("--raw", action="store_true", help="Print the whole body, unfiltered")
    return parser.parse_args(argv)


def _populate_arg(value):
    if not value or value == "*":
        return value
    return [p.strip() for p in value.split(",") if p.strip()]


def inspect_endpoint(client: StrapiClient, args) -> dict:
    params = encode_query(populate=_populate_arg(args.populate), page_size=args.page_size)
    print(f"🔍 GET {client.base_url}/api/{args.endpoint}")
    body = client.get(args.endpoint, params=params)

    if args.raw:
        print(json.dumps(body, indent=2, ensure_ascii=False))
        return body

    data = unwrap(body)
    records = data if isinstance(data, list) else ([data] if data else [])
    records = filter_records(records, parse_criteria(args.where))
    records = select_fields(records, args.fields)

    print(json.dumps(records, indent=2, ensure_ascii=False))
    summary = summarize(body)
    print(f"\n📊 {len(records)} shown / {summary['count']} on page {summary['page']}"
          f" of {summary['pageCount']} ({summary['total']} total)")
    return body


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        with StrapiClient() as client:
            inspect_endpoint(client, args)
    except Exception as e:
        logger.error(f"❌ Request failed: {e}", extra={"details": getattr(e, "details", None)})
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
