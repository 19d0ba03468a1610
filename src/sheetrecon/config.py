"""Configuration management for SheetRecon."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# Minimum similarity for a header pair to be accepted as a match
SIM_THRESHOLD = 0.3


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # Column matching
    similarity_threshold: float = float(os.getenv("SHEETRECON_SIMILARITY_THRESHOLD", str(SIM_THRESHOLD)))
    match_strategy: str = os.getenv("SHEETRECON_MATCH_STRATEGY", "greedy")  # 'greedy' or 'optimal'

    # Row matching
    key_separator: str = os.getenv("SHEETRECON_KEY_SEPARATOR", "|")
    duplicate_key_policy: str = os.getenv("SHEETRECON_DUPLICATE_KEY_POLICY", "last")  # 'last', 'first' or 'error'

    # File loading
    csv_encoding: str = os.getenv("SHEETRECON_CSV_ENCODING", "utf-8")

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE")


settings = Settings()
