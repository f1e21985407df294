"""Shared fixtures for picodsl tests."""
import logging

import pytest

from picodsl import PipelineConfig, load_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep a developer's PICODSL_SETTINGS out of the test run."""
    monkeypatch.delenv("PICODSL_SETTINGS", raising=False)


@pytest.fixture
def settings():
    return load_settings()


@pytest.fixture
def config(settings) -> PipelineConfig:
    return PipelineConfig(settings)


@pytest.fixture
def staged():
    """Declaration block giving a pipeline a single stage."""
    def declare(pipeline):
        pipeline.stage("s")
    return declare


@pytest.fixture
def picodsl_caplog(caplog):
    caplog.set_level(logging.DEBUG, logger="picodsl")
    return caplog
