"""Test configuration for package imports and shared fixtures."""

import os
import sys

import pytest

# Add the repository root (the directory containing this file) to ``sys.path``
# so the tests import the working tree even when it is not installed.
ROOT_DIR = os.path.abspath(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from improv_agenda.data.store import AgendaStore  # noqa: E402


@pytest.fixture
def store(tmp_path):
    return AgendaStore(path=str(tmp_path / "agenda.json"))


@pytest.fixture
def alice(store):
    return store.create_user("alice")
