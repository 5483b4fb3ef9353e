"""Tests for LangSmith environment wiring."""

from __future__ import annotations

import os

import pytest

from conftest import make_config
from skychat.telemetry import enable_langsmith


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ["LANGSMITH_API_KEY", "LANGSMITH_PROJECT", "LANGCHAIN_TRACING_V2"]:
        monkeypatch.setenv(name, "")
    monkeypatch.delenv("LANGCHAIN_RUN_TAGS", raising=False)


def test_tracing_needs_a_key() -> None:
    assert enable_langsmith(make_config(langchain_tracing_v2=True)) is False
    assert os.environ["LANGCHAIN_TRACING_V2"] == "false"


def test_tracing_enabled_with_key_and_flag() -> None:
    cfg = make_config(langsmith_api_key="ls-key", langsmith_project="SkyChat", langchain_tracing_v2=True)

    assert enable_langsmith(cfg) is True
    assert os.environ["LANGSMITH_API_KEY"] == "ls-key"
    assert os.environ["LANGSMITH_PROJECT"] == "SkyChat"
    assert os.environ["LANGCHAIN_TRACING_V2"] == "true"
    # Tags go with each graph run, not through the environment
    assert "LANGCHAIN_RUN_TAGS" not in os.environ
