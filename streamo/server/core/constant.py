"""API-wide constants."""

PROJECT_NAME = "Streamo Back-Office"
API_V1_STR = "/api/v1"
API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
UPLOADS_URL_PREFIX = "/uploads"
