"""Project settings."""

from dotenv import load_dotenv
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

# .env.example first (lowest priority), then .env overrides it, real environment variables win
load_dotenv(dotenv_path=Path(__file__).parent.parent.parent / '.env.example', override=False)
load_dotenv(dotenv_path=Path(__file__).parent.parent.parent / '.env', override=True)


class ServerConfig(BaseModel):
    """HTTP service configuration."""

    host: str = Field(default_factory=lambda: os.environ.get("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.environ.get("PORT", "3001")))
    allowed_origins: str = Field(default_factory=lambda: os.environ.get("ALLOWED_ORIGINS", "*"))  # comma separated
    max_upload_size: int = Field(default_factory=lambda: int(os.environ.get("MAX_UPLOAD_SIZE", str(20 * 1024 * 1024))))  # bytes

    def get_allowed_origins(self) -> List[str]:
        """Split ALLOWED_ORIGINS into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


class SessionConfig(BaseModel):
    """Fill session configuration."""

    ttl_seconds: int = Field(default_factory=lambda: int(os.environ.get("SESSION_TTL_SECONDS", "3600")))  # idle lifetime
    max_sessions: int = Field(default_factory=lambda: int(os.environ.get("SESSION_MAX_COUNT", "256")))  # LRU capacity


class DocumentConfig(BaseModel):
    """Document processing configuration."""

    upload_dir: Path = Field(default_factory=lambda: Path(os.environ.get("UPLOAD_DIR", str(Path(__file__).parent.parent.parent / "uploads"))))  # completed documents land here
    output_filename_prefix: str = Field(default_factory=lambda: os.environ.get("OUTPUT_FILENAME_PREFIX", "completed-document"))
    allowed_extensions: List[str] = Field(default_factory=lambda: [".docx"])
    allowed_content_types: List[str] = Field(default_factory=lambda: [
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/octet-stream",
        "application/zip",
    ])


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))
    # short format; use "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | ..." for timestamps
    format: str = Field(default_factory=lambda: os.environ.get("LOG_FORMAT", "<level>{level: <8}</level>| - <level>{message}</level>"))
    log_file: Optional[str] = Field(default_factory=lambda: os.environ.get("LOG_FILE", "docchat.log") or None)  # empty disables the file sink
    log_dir: Path = Field(default_factory=lambda: Path(os.environ.get("LOG_DIR", str(Path(__file__).parent.parent.parent / "logs"))))
    rotation: str = Field(default_factory=lambda: os.environ.get("LOG_ROTATION", "10 MB"))
    retention: str = Field(default_factory=lambda: os.environ.get("LOG_RETENTION", "1 week"))


class Settings(BaseModel):
    """Global project settings."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    document: DocumentConfig = Field(default_factory=DocumentConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    project_dir: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)


# singleton, avoid building it more than once
_settings = None
def get_settings():
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

settings = get_settings()

settings.document.upload_dir.mkdir(exist_ok=True, parents=True)
