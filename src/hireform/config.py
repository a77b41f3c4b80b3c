from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "HireForm"
    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = 8787
    log_level: str = "INFO"

    database_url: str = "sqlite:///./data/hireform.db"
    data_dir: Path = Path("./data")
    template_dir: Path = Path("./data/templates")
    mapping_dir: Path = PACKAGE_DIR / "assets" / "mappings"
    export_dir: Path = Path("./data/exports")

    pdf_font_name: str = "Helvetica"
    pdf_bold_font_name: str = "Helvetica-Bold"
    pdf_font_path: str = ""
    pdf_required_sections: str = ""

    cors_origins: str = "http://127.0.0.1:8787"

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def required_section_list(self) -> list[str]:
        return [name.strip() for name in self.pdf_required_sections.split(",") if name.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
