"""Shared pytest fixtures for EQ Designer tests."""

import os

import numpy as np
import pytest


# Widgets and the simulation timer run headless.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Provide a single QApplication instance for all Qt tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
    app.processEvents()


@pytest.fixture
def rng():
    """Seeded generator for analyzer jitter."""
    return np.random.default_rng(1234)


@pytest.fixture
def preset_store(tmp_path):
    """Preset store writing into a per-test directory."""
    from eq_designer.config import PresetStore
    return PresetStore(tmp_path)
