from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_file: Path = Field(Path("db/gemstats.db"), alias="DB_FILE")

    # Logging
    logs_dir: Path = Field(Path("logs"), alias="LOGS_DIR")
    log_file: Path = Field(Path("app.log"), alias="LOG_FILE")  # relative to LOGS_DIR
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Web API
    host: str = Field("127.0.0.1", alias="HOST")
    port: int = Field(8000, alias="PORT")

    # Number of versions returned by /api/v1/downloads/top
    top_limit: int = Field(50, alias="TOP_LIMIT")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", case_sensitive=False)

    def model_post_init(self, __context):
        base_dir = Path(__file__).resolve().parent.parent  # project root
        def _to_abs(p: Path) -> Path:
            return p if p.is_absolute() else (base_dir / p).resolve()
        self.db_file = _to_abs(self.db_file)
        self.logs_dir = _to_abs(self.logs_dir)
        if not self.log_file.is_absolute():
            self.log_file = self.logs_dir / self.log_file

        if self.top_limit is None or self.top_limit <= 0:
            raise ValueError("TOP_LIMIT must be set to a positive integer")
        self.log_level = self.log_level.upper()


settings = Settings()
