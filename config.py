"""Centralized configuration for the Viktoria Wertheim CMS tooling.

Loads environment variables (from the OS and optionally .env) and exposes
typed constants for use across the scripts. Secrets such as DB_PASS and the
API token are required at runtime and not given insecure defaults.
"""

import os
try:
    from dotenv import load_dotenv  # type: ignore
except ImportError:
    load_dotenv = None

# Load environment variables from a local .env if present
if load_dotenv:
    load_dotenv()

# Strapi REST API
STRAPI_URL = os.getenv("STRAPI_URL", "http://localhost:1337").rstrip("/")
STRAPI_API_TOKEN = os.getenv("STRAPI_API_TOKEN")  # Optional; anonymous if unset
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

# Database (Strapi's Postgres)
DB_HOST = os.getenv("DATABASE_HOST", "localhost")
DB_PORT = int(os.getenv("DATABASE_PORT", "5432"))
DB_NAME = os.getenv("DATABASE_NAME", "viktoria_wertheim")
DB_USER = os.getenv("DATABASE_USERNAME", "postgres")
DB_PASS = os.getenv("DATABASE_PASSWORD")  # Required; do not set a default here

# API token whose permissions the setup script manages
API_TOKEN_NAME = os.getenv("API_TOKEN_NAME", "frontend")

# Strapi project checkout (for schema.json verification)
CMS_ROOT = os.getenv("CMS_ROOT", os.path.join("..", "backend"))

# Collection endpoints known to the debug / smoke test scripts
LIST_ENDPOINTS = [
    "spiele",
    "tabellen-eintraege",
    "news-artikels",
    "saisons",
    "ligas",
    "clubs",
    "teams",
]

# Viktoria team mappings (1., 2. and 3. Mannschaft)
TEAM_MAPPINGS = ["team_1", "team_2", "team_3"]

# Actions granted to the website's read-only API token
PUBLIC_READ_ACTIONS = [
    "api::spiel.spiel.find",
    "api::spiel.spiel.findOne",
    "api::tabellen-eintrag.tabellen-eintrag.find",
    "api::tabellen-eintrag.tabellen-eintrag.findOne",
    "api::news-artikel.news-artikel.find",
    "api::news-artikel.news-artikel.findOne",
    "api::saison.saison.find",
    "api::liga.liga.find",
    "api::club.club.find",
    "api::club.club.findOne",
    "api::team.team.find",
]

# Club service
CLUB_CACHE_TTL_MINUTES = int(os.getenv("CLUB_CACHE_TTL_MINUTES", "30"))

# Logging
# Valid values: "HUMAN" (default), "JSON"
LOG_FORMAT = os.getenv("LOG_FORMAT", "HUMAN").upper()
