import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    bot_token: str
    database_url: str
    log_level: str
    log_path: str
    public_base_url: str
    web_host: str
    web_port: int
    max_attempts: int
    record_ttl_days: int
    create_schema: bool


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from None


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    bot_token = os.getenv("BOT_TOKEN")
    database_url = os.getenv("DATABASE_URL")

    if not bot_token:
        raise ValueError("BOT_TOKEN is required. Set it in the environment or .env file.")
    if not database_url:
        raise ValueError("DATABASE_URL is required. Set it in the environment or .env file.")

    max_attempts = _int_env("MAX_ATTEMPTS", 100)
    if max_attempts < 1:
        raise ValueError("MAX_ATTEMPTS must be at least 1.")

    return Settings(
        bot_token=bot_token,
        database_url=database_url,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_path=os.getenv("LOG_PATH", "logs/secret_santa.log"),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8080"),
        web_host=os.getenv("WEB_HOST", "0.0.0.0"),
        web_port=_int_env("WEB_PORT", 8080),
        max_attempts=max_attempts,
        record_ttl_days=_int_env("RECORD_TTL_DAYS", 60),
        create_schema=_bool_env("CREATE_SCHEMA", False),
    )
