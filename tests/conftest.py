"""Shared pytest fixtures and test helpers for request_validator tests."""

from __future__ import annotations

import os
from typing import Any, Dict, Iterator

import pytest

from request_validator.core import config as config_module
from request_validator.utils import logger as logger_module


@pytest.fixture(autouse=True)
def _isolated_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Fresh global config and restored logger registry for every test."""
    for key in list(os.environ):
        if key.startswith(config_module.ENV_PREFIX):
            monkeypatch.delenv(key)
    config_module.reset_config()

    handlers = list(logger_module._root_handlers)
    root_level = logger_module._root_level
    levels = {name: log.level for name, log in logger_module._loggers.items()}
    yield
    logger_module._root_handlers[:] = handlers
    logger_module._root_level = root_level
    for name, log in list(logger_module._loggers.items()):
        if name in levels:
            log.level = levels[name]
        else:
            del logger_module._loggers[name]
    config_module.reset_config()


@pytest.fixture
def name_settings() -> Dict[str, Any]:
    """Single required field with a length limit."""
    return {
        "name": {
            "rules": {
                "require": {"message": "Name is required"},
                "maxLength": {"option": 20, "message": "Name must be 20 characters or less"},
            },
        },
    }


@pytest.fixture
def children_settings() -> Dict[str, Any]:
    """Nested group: a list of child records."""
    return {
        "add_children": {
            "sex": {
                "rules": {
                    "require": {"message": "Child sex is required"},
                    "isInteger": {"message": "Child sex must be an integer"},
                },
            },
            "birthday": {
                "rules": {
                    "require": {"message": "Child birthday is required"},
                },
            },
        },
    }
