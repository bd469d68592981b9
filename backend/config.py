import json
import os

from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """CORS_ORIGINS as a comma-separated list or a JSON array."""
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return None
    if raw.startswith("["):
        origins = json.loads(raw)
    else:
        origins = raw.split(",")
    return [str(o).strip() for o in origins if str(o).strip()] or None


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Scoring backend
    scoring_temperature: float = 0.3
    scoring_max_output_tokens: int = 8192
    scoring_timeout_seconds: float = 30.0
    scoring_max_retries: int = 1  # transport failures only, clamped to 0..1
    scoring_retry_wait_seconds: float = 1.0

    # Profile store: "memory" | "supabase"
    profile_store: str = "memory"
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    profile_seed_file: str = ""  # JSON list of profile rows for the memory store

    # Request / prompt bounds
    max_query_length: int = 500
    summary_text_limit: int = 600
    summary_max_skills: int = 15
    match_rate_limit: str = "20/minute"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
