import os
import urllib.parse
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORS_ORIGINS = [
    "http://13.203.228.93:8110",  # Login Server
    "http://13.203.228.93:3029",  # Employee Server
    "http://13.203.228.93:5500",  # Live Server (Default)
    "http://127.0.0.1:5500",  # Live Server (IP)
]


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    # Database configuration (env defaults)
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = ""
    db_name: str = "employee_db"
    database_url: Optional[str] = None
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # Server
    host: str = "0.0.0.0"
    port: int = 3029
    app_env: str = "production"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    # Uploads / validation
    upload_dir: str = "uploads"
    max_upload_size: int = 5 * 1024 * 1024
    email_domain: str = "astrolitetech.com"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            db_host=os.getenv("DB_HOST", "localhost"),
            db_port=int(os.getenv("DB_PORT", 3306)),
            db_user=os.getenv("DB_USER", "root"),
            db_password=os.getenv("DB_PASSWORD", ""),
            db_name=os.getenv("DB_NAME", "employee_db"),
            database_url=os.getenv("DATABASE_URL") or None,
            db_pool_size=int(os.getenv("DB_POOL_SIZE", 10)),
            db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", 20)),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("EMPLOYEE_PORT", 3029)),
            app_env=os.getenv("APP_ENV", "production").lower(),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
            upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
            max_upload_size=int(os.getenv("MAX_UPLOAD_SIZE", 5 * 1024 * 1024)),
            email_domain=os.getenv("EMAIL_DOMAIN", "astrolitetech.com"),
        )

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        password_enc = urllib.parse.quote_plus(self.db_password)
        return f"mysql+pymysql://{self.db_user}:{password_enc}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"
