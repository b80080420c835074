import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "claude-sonnet-4-5"
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.0
DEFAULT_RUNS_DIR = "runs"
DEFAULT_LOG_LEVEL = "WARNING"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    runs_dir: str = DEFAULT_RUNS_DIR
    score_floor: Optional[float] = None
    log_level: str = DEFAULT_LOG_LEVEL


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from exc


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got '{raw}'") from exc


def load_settings(*, dotenv: bool = True) -> Settings:
    if dotenv:
        load_dotenv()
    return Settings(
        api_key=os.getenv("ANTHROPIC_API_KEY") or None,
        model=os.getenv("ASSESSCOPILOT_MODEL") or DEFAULT_MODEL,
        max_tokens=_env_int("ASSESSCOPILOT_MAX_TOKENS", DEFAULT_MAX_TOKENS),
        temperature=_env_float("ASSESSCOPILOT_TEMPERATURE", DEFAULT_TEMPERATURE),
        runs_dir=os.getenv("ASSESSCOPILOT_RUNS_DIR") or DEFAULT_RUNS_DIR,
        score_floor=_env_float("ASSESSCOPILOT_SCORE_FLOOR", None),
        log_level=(os.getenv("ASSESSCOPILOT_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
