from pydantic_settings import BaseSettings
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "agentdesk"

    ROOT_DIR: Path = Path(__file__).resolve().parent.parent.parent

    DATABASE_URL: str = (
        f"sqlite+aiosqlite:///{Path(__file__).resolve().parent.parent.parent / 'agentdesk.db'}"
    )
    SQL_ECHO: bool = False

    FRONTEND_URL: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": str(Path(__file__).resolve().parent.parent.parent / ".env"),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
