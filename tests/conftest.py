"""Root test configuration: isolate tests from FREEDOCS_* env vars and local config.yaml"""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run every test from an empty tmp directory with no FREEDOCS_* variables set."""
    for name in list(os.environ):
        if name.startswith("FREEDOCS_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
