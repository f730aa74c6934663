"""Shared pytest fixtures for envtag tests."""

from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

SAMPLE_MODULE = "envtag_sample_records"

SAMPLE_SOURCE = textwrap.dedent(
    '''
    from dataclasses import dataclass, field
    from typing import Annotated

    from envtag import Duration, Env, UInt16


    @dataclass
    class Database:
        url: Annotated[str, Env("SAMPLE_DB_URL,defVal:sqlite://")] = ""
        pool: Annotated[int, Env("SAMPLE_DB_POOL,defVal:5,min:1,max:50")] = 0


    @dataclass
    class Settings:
        name: Annotated[str, Env("SAMPLE_NAME,required")] = ""
        port: Annotated[UInt16, Env("SAMPLE_PORT,defVal:8080")] = 0
        timeout: Annotated[Duration, Env("SAMPLE_TIMEOUT,defVal:30s")] = Duration(0)
        hosts: Annotated[list[str], Env("SAMPLE_HOSTS")] = field(default_factory=list)
        db: Database = field(default_factory=Database)


    settings = Settings()
    not_a_record = 42
    '''
)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Importable module defining sample records; returns its name."""
    (tmp_path / f"{SAMPLE_MODULE}.py").write_text(SAMPLE_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, SAMPLE_MODULE, raising=False)
    for name in ("SAMPLE_NAME", "SAMPLE_PORT", "SAMPLE_TIMEOUT", "SAMPLE_HOSTS", "SAMPLE_DB_POOL"):
        monkeypatch.delenv(name, raising=False)
    return SAMPLE_MODULE


@pytest.fixture(autouse=True)
def _clean_envtag_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ENVTAG_* CLI settings from leaking in from the outer shell."""
    for name in ("ENVTAG_JSON_OUTPUT", "ENVTAG_VERBOSE", "ENVTAG_LOG_JSON", "ENVTAG_FAIL_FAST"):
        monkeypatch.delenv(name, raising=False)
