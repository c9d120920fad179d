"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests, and clears notifier variables inherited from the shell.
Tests control config exclusively through monkeypatch.setenv().
"""

import os

import pytest


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture(autouse=True)
def clear_notifier_env(monkeypatch):
    for var in list(os.environ):
        if var.startswith("WECOM_ROBOT_"):
            monkeypatch.delenv(var, raising=False)
