import logging
import os

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"

DEFAULT_SEED_PATH = "data/seed.json"
DEFAULT_FETCH_TIMEOUT = 5.0
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_UPCOMING_DAYS = 30


def _number_env(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, using %r", name, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring negative %s=%r, using %r", name, raw, default)
        return default
    return value


def seed_path() -> str:
    return os.environ.get("FINALERTS_SEED_PATH") or DEFAULT_SEED_PATH


def fetch_timeout() -> float:
    return _number_env("FINALERTS_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT, float)


def upcoming_days() -> int:
    return _number_env("FINALERTS_UPCOMING_DAYS", DEFAULT_UPCOMING_DAYS, int)


def log_level() -> str:
    return (os.environ.get("FINALERTS_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()


def load_env(path: str | None = None) -> bool:
    """Pull FINALERTS_* settings from a .env file; real env vars win."""
    return load_dotenv(path or find_dotenv(usecwd=True))


def configure_logging(level: str | None = None) -> None:
    load_env()
    logging.basicConfig(level=level or log_level(), format=LOG_FORMAT)
