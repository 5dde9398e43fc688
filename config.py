import os
from dataclasses import dataclass, field
from pathlib import Path

from db import app_root_dir, resolve_db_path

DEFAULT_JWT_SECRET = "dev-secret-change-me"


def _split_origins(value: str) -> list[str]:
    origins = [o.strip() for o in value.split(",")]
    return [o for o in origins if o] or ["*"]


@dataclass
class AppConfig:
    database_url: str
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_expires_hours: int = 24
    log_level: str = "INFO"
    templates_dir: str = ""

    @classmethod
    def from_env(cls) -> "AppConfig":
        root_dir = app_root_dir()

        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            database_url = f"sqlite:///{resolve_db_path(root_dir).as_posix()}"

        templates_dir = os.getenv("TEMPLATES_DIR") or str(root_dir / "templates")

        return cls(
            database_url=database_url,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            cors_origins=_split_origins(os.getenv("CORS_ORIGIN", "*")),
            jwt_secret=os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET),
            jwt_expires_hours=int(os.getenv("JWT_EXPIRES_HOURS", "24")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            templates_dir=templates_dir,
        )

    def resolved_templates_dir(self) -> Path:
        if self.templates_dir:
            return Path(self.templates_dir)
        return app_root_dir() / "templates"
