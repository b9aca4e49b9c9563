"""REST app configuration."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class AppConfig:
    """Configuration for the REST application."""

    title: str = "docservice"
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None
