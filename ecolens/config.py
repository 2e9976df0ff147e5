# ecolens/config.py — env-driven settings, built once at startup
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = (
    "https://ecohub-8c7zal6ra-aiswaryas-projects-5149c194.vercel.app",
    "https://ecohub-h8e8v0j9r-aiswaryas-projects-5149c194.vercel.app",
    "https://ecohub-qokgw3q1a-aiswaryas-projects-5149c194.vercel.app",
    "https://ecohub-nine.vercel.app",
    "https://ecohub.vercel.app",
    "http://localhost:3000",
)


def require_env(keys: list[str], env: Optional[Mapping[str, str]] = None) -> None:
    env = os.environ if env is None else env
    missing = [k for k in keys if not env.get(k)]
    if missing:
        raise RuntimeError(
            "Missing required env vars: " + ", ".join(missing) +
            ". Create a .env file in your project root with those keys."
        )


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    model: str = "gpt-4o-mini"
    vision_model: str = "gpt-4o-mini"
    ai_timeout: float = 30.0
    barcode_timeout: float = 5.0
    port: int = 5000
    cors_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    max_body_bytes: int = 50 * 1024 * 1024


def _origins(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment (after loading .env).

    OPENAI_API_KEY is required; everything else has a default.
    """
    if env is None:
        load_dotenv()  # load .env before reading anything
        env = os.environ
    require_env(["OPENAI_API_KEY"], env)
    return Settings(
        openai_api_key=env["OPENAI_API_KEY"],
        model=env.get("MODEL", "gpt-4o-mini"),
        vision_model=env.get("VISION_MODEL", "gpt-4o-mini"),
        ai_timeout=float(env.get("AI_TIMEOUT", 30)),
        barcode_timeout=float(env.get("BARCODE_TIMEOUT", 5)),
        port=int(env.get("PORT", 5000)),
        cors_origins=_origins(env.get("CORS_ORIGINS")),
        max_body_bytes=int(float(env.get("MAX_BODY_MB", 50)) * 1024 * 1024),
    )
