"""Tests for BindReport construction and serialisation."""

import json
from dataclasses import dataclass, field
from typing import Annotated

from envtag.domain.duration import Duration
from envtag.domain.policy import Env
from envtag.services.binder import bind
from envtag.services.report import BindReport, ErrorEntry, build_report, snapshot


@dataclass
class Database:
    url: Annotated[str, Env("DB_URL,defVal:sqlite://")] = ""
    pool: Annotated[int, Env("DB_POOL,min:1")] = 5


@dataclass
class App:
    name: Annotated[str, Env("APP_NAME,required")] = ""
    timeout: Annotated[Duration, Env("APP_TIMEOUT,defVal:90s")] = Duration(0)
    tags: Annotated[list[str], Env("APP_TAGS")] = field(default_factory=list)
    db: Database = field(default_factory=Database)
    internal: int = 0


class TestSnapshot:
    def test_lists_annotated_leaves_with_paths(self) -> None:
        app = App()
        bind(app, environ={"APP_NAME": "svc", "APP_TAGS": "a,b"})
        entries = {e.path: e for e in snapshot(app)}
        assert set(entries) == {"name", "timeout", "tags", "db.url", "db.pool"}
        assert entries["timeout"].value == "1m30s"
        assert entries["tags"].value == ["a", "b"]
        assert entries["db.url"].key == "DB_URL"


class TestBuildReport:
    def test_ok_report(self) -> None:
        app = App()
        report = build_report(app, bind(app, environ={"APP_NAME": "svc"}))
        assert report.ok is True
        assert report.record == "App"
        assert report.policy == "collect-all"
        assert report.errors == []

    def test_error_report(self) -> None:
        app = App()
        report = build_report(app, bind(app, environ={"DB_POOL": "0"}))
        assert report.ok is False
        codes = [e.code for e in report.errors]
        assert codes == ["MISSING_REQUIRED", "OUT_OF_RANGE"]
        assert report.errors[1].detail["field"] == "db.pool"

    def test_json_round_trip(self) -> None:
        app = App()
        report = build_report(app, bind(app, environ={}, fail_fast=True))
        data = json.loads(report.model_dump_json())
        assert data["policy"] == "fail-fast"
        assert data["errors"][0]["code"] == "MISSING_REQUIRED"
        assert BindReport.model_validate(data) == report

    def test_error_entry_from_error(self) -> None:
        from envtag.domain.errors import MissingRequiredError

        entry = ErrorEntry.from_error(MissingRequiredError("K", field="f"))
        assert entry.message == "Required env parameter K not filled"
        assert entry.detail == {"field": "f", "key": "K"}
