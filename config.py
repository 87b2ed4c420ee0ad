from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: Env = Env.local
    html_dir: Path = Path("assets/html")
    db_url: str = "sqlite+aiosqlite:///fridgechef.db"
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    openai_api_key: str = ""
    core_model: str = "gpt-4o-mini"
    # Transport timeout of the completion client, in seconds.
    completion_timeout: float = 60 * 2
    log_level: str = "INFO"
