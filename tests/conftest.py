"""Shared fixtures: keep LEVELSINK_* environment out of tests."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("LEVELSINK_"):
            monkeypatch.delenv(key)
