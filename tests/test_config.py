"""Tests for configuration dataclasses."""

from pathlib import Path

from docservice.config import PaginateConfig, ServiceOptions, StoreConfig
from restapp.config import AppConfig


def test_store_config_defaults():
    config = StoreConfig()
    assert config.path is None
    assert config.database == "docservice"


def test_store_config_override():
    config = StoreConfig(path=Path("db-data"), database="tests")
    assert config.path == Path("db-data")
    assert config.database == "tests"


def test_paginate_config_defaults():
    config = PaginateConfig()
    assert config.default is None
    assert config.max is None


def test_service_options_defaults():
    options = ServiceOptions()
    assert options.model is None
    assert options.id_field == "_id"
    assert options.schema is None
    assert options.validator is None
    assert options.paginate is None
    assert options.events is None


def test_app_config_defaults():
    config = AppConfig()
    assert config.title == "docservice"
    assert config.debug is False
    assert config.log_level == "INFO"
    assert config.log_file is None
