"""Load and check Strapi content-type schema.json files."""

import json
import os
from typing import Any, Dict, List, Optional

import config
from models import ContentTypeSchema


def schema_path(content_type: str, root: Optional[str] = None) -> str:
    root = root or config.CMS_ROOT
    return os.path.join(root, "src", "api", content_type, "content-types", content_type, "schema.json")


def read_schema_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_schema(path: str) -> ContentTypeSchema:
    """Read a schema.json file into a ContentTypeSchema."""
    return ContentTypeSchema.model_validate(read_schema_json(path))


def check_schema(schema: ContentTypeSchema, expected_display_name: str,
                 expected_main_field: str) -> List[str]:
    """Return a list of problems; empty means the schema is as expected."""
    problems = []

    display_name = schema.info.display_name
    if not display_name:
        problems.append("info.displayName is missing")
    elif display_name != expected_display_name:
        problems.append(
            f"info.displayName is '{display_name}', expected '{expected_display_name}'"
        )

    main_field = schema.options.main_field
    if not main_field:
        problems.append("options.mainField is missing")
    elif main_field != expected_main_field:
        problems.append(f"options.mainField is '{main_field}', expected '{expected_main_field}'")

    if main_field and main_field not in schema.attributes:
        problems.append(f"mainField '{main_field}' is not an attribute of this content type")

    return problems
