import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: Optional[str] = None):
    return field(default_factory=lambda: os.getenv(name, default))


@dataclass
class Settings:
    # Application
    app_name: str = _env("APP_NAME", "Library Management System")
    app_version: str = _env("APP_VERSION", "1.0.0")

    # Data file used when a command is given no --file
    data_file: Optional[str] = _env("LMS_DATA_FILE")

    # Logging
    log_level: str = _env("LMS_LOG_LEVEL", "WARNING")

    # User preferences (config.json) location
    config_dir: Path = field(
        default_factory=lambda: Path(os.getenv("LMS_CONFIG_DIR") or Path.home() / ".lms-cli")
    )


settings = Settings()
