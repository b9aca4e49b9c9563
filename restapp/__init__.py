"""REST host for document services."""

from restapp.app import create_app
from restapp.config import AppConfig

__all__ = ["create_app", "AppConfig"]
