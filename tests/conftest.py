"""
Shared fixtures for the csv2geojson tests.
"""

import os

import pytest

from csv2geojson.config import ENV_PREFIX


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CSV2GEOJSON_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
