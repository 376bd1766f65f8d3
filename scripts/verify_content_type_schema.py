"""Verify a content type's schema.json (display name and main field)."""
import argparse
import json
import sys

from logger import get_logger
from models import ContentTypeSchema
from schema_check import check_schema, read_schema_json, schema_path

logger = get_logger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Check display name and main field of a content type.")
    parser.add_argument("--content-type", default="club")
    parser.add_argument("--path", default=None, help="Explicit schema.json path")
    parser.add_argument("--display-name", default="Club")
    parser.add_argument("--main-field", default="name")
    args = parser.parse_args(argv)

    path = args.path or schema_path(args.content_type)
    print(f"📄 Reading {path}")
    try:
        raw = read_schema_json(path)
    except Exception as e:
        logger.error(f"❌ Could not load schema: {e}")
        return 1

    print(json.dumps(raw, indent=2, ensure_ascii=False))
    print()

    try:
        schema = ContentTypeSchema.model_validate(raw)
    except ValueError as e:
        logger.error(f"❌ Unexpected schema structure: {e}")
        return 1

    problems = check_schema(schema, args.display_name, args.main_field)
    if problems:
        for problem in problems:
            print(f"❌ {problem}")
        return 1

    print(f"✅ displayName = '{schema.info.display_name}'")
    print(f"✅ mainField = '{schema.options.main_field}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
