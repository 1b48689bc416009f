"""Unit tests for the migration engine."""

import logging

import pytest

from notion_migrate.errors import RemoteError
from notion_migrate.models.migration import MigrationStatus
from notion_migrate.orchestrator import MigrationEngine

from conftest import FakeCollectionClient, make_page, make_schema, title


def make_pages(count):
    return [make_page(f"page-{i}", Name=title(f"Task {i}")) for i in range(count)]


class TestEndToEnd:
    """Full runs against an in-memory client."""

    def test_live_run_creates_page_with_checkbox_default(self, task_page, task_schema, sleep):
        client = FakeCollectionClient(records=[task_page], schema=task_schema)
        engine = MigrationEngine(client, sleep=sleep)

        result = engine.run("source-db", "target-db", dry_run=False, batch_size=10)

        assert len(client.created) == 1
        created = client.created[0]
        assert created["collection_id"] == "target-db"
        assert created["properties"] == {
            "Name": {"title": task_page.properties["Name"]["title"]},
            "Score": {"number": 5},
            "Done": {"checkbox": False},
        }
        assert (result.attempted, result.succeeded, result.failed) == (1, 1, 0)
        assert result.status == MigrationStatus.COMPLETED

    def test_failing_create_is_counted_not_raised(self, task_page, task_schema, sleep):
        client = FakeCollectionClient(records=[task_page], schema=task_schema, fail_all_creates=True)
        engine = MigrationEngine(client, sleep=sleep)

        result = engine.run("source-db", "target-db", dry_run=False, batch_size=10)

        assert (result.attempted, result.succeeded, result.failed) == (1, 0, 1)
        assert result.failed_ids == ["page-a"]
        assert "body failed validation" in result.errors[0]["error"]

    def test_per_page_results_in_report(self, task_page, task_schema, sleep, caplog):
        client = FakeCollectionClient(records=[task_page], schema=task_schema)
        engine = MigrationEngine(client, sleep=sleep)

        with caplog.at_level(logging.INFO):
            result = engine.run("source-db", "target-db", dry_run=False, batch_size=10)

        entry = result.to_dict()["results"][0]
        assert entry["record_id"] == "page-a"
        assert entry["target_id"] == "new-1"
        assert entry["success"] is True
        assert entry["properties"] == ["Name", "Score", "Done"]
        assert "Pages migrated successfully: 1" in caplog.text


class TestDryRun:
    """Dry runs map and pace but never create."""

    def test_no_creates(self, sleep):
        client = FakeCollectionClient(records=make_pages(5), schema=make_schema(Name="title"))
        engine = MigrationEngine(client, sleep=sleep)

        result = engine.run("src", "dst", dry_run=True, batch_size=2)

        assert "create_record" not in client.calls
        assert client.created == []
        assert result.attempted == 5
        assert result.succeeded + result.failed == result.attempted
        assert result.dry_run is True

    def test_summary_reports_simulated_pages(self, sleep, caplog):
        client = FakeCollectionClient(records=make_pages(3), schema=make_schema(Name="title"))
        engine = MigrationEngine(client, sleep=sleep)

        with caplog.at_level(logging.INFO):
            engine.run("src", "dst", dry_run=True, batch_size=2)

        assert "Pages simulated (nothing created): 3" in caplog.text
        assert "migrated successfully" not in caplog.text

    def test_results_are_marked_dry_run(self, sleep):
        client = FakeCollectionClient(records=make_pages(2), schema=make_schema(Name="title"))
        engine = MigrationEngine(client, sleep=sleep)

        result = engine.run("src", "dst", dry_run=True, batch_size=2)

        assert [r.record_id for r in result.results] == ["page-0", "page-1"]
        assert all(r.dry_run and r.target_id is None for r in result.results)

    def test_same_pacing_as_live_run(self):
        live_sleep, dry_sleep = [], []
        records = make_pages(7)

        MigrationEngine(
            FakeCollectionClient(records=records, schema=make_schema(Name="title")),
            sleep=live_sleep.append,
        ).run("src", "dst", dry_run=False, batch_size=3)
        MigrationEngine(
            FakeCollectionClient(records=records, schema=make_schema(Name="title")),
            sleep=dry_sleep.append,
        ).run("src", "dst", dry_run=True, batch_size=3)

        assert live_sleep == dry_sleep == [0.1] * 7


class TestFailureIsolation:
    """One failing page never stops the run."""

    def test_later_pages_still_attempted(self, sleep):
        client = FakeCollectionClient(
            records=make_pages(6),
            schema=make_schema(Name="title"),
            fail_create_for={"Task 1", "Task 4"},
        )
        engine = MigrationEngine(client, sleep=sleep)

        result = engine.run("src", "dst", batch_size=3)

        assert client.calls.count("create_record") == 6
        assert result.failed == 2
        assert result.succeeded == 4
        assert result.attempted == 6
        assert result.failed_ids == ["page-1", "page-4"]
        assert len(sleep.delays) == 6

    def test_progress_callback_sees_every_page(self, sleep):
        seen = []
        client = FakeCollectionClient(
            records=make_pages(3),
            schema=make_schema(Name="title"),
            fail_create_for={"Task 0"},
        )
        engine = MigrationEngine(client, sleep=sleep, progress=seen.append)

        engine.run("src", "dst", batch_size=2)

        assert [r.record_id for r in seen] == ["page-0", "page-1", "page-2"]
        assert [r.success for r in seen] == [False, True, True]
        assert seen[1].target_id == "new-1"

    def test_target_schema_logged_at_debug(self, task_page, task_schema, sleep, caplog):
        engine = MigrationEngine(FakeCollectionClient(records=[task_page], schema=task_schema), sleep=sleep)

        with caplog.at_level(logging.DEBUG, logger="notion_migrate.orchestrator"):
            engine.run("source-db", "target-db", batch_size=10)

        assert "Target schema:" in caplog.text
        assert "'type': 'checkbox'" in caplog.text


class TestPagination:
    """The whole source is read before writing."""

    def test_exhaustive_paging(self, sleep):
        client = FakeCollectionClient(records=make_pages(250), schema=make_schema(Name="title"))
        engine = MigrationEngine(client, sleep=sleep)

        result = engine.run("src", "dst", dry_run=True, batch_size=10)

        assert len(client.fetch_calls) == 3
        assert client.fetch_calls == [None, "100", "200"]
        assert result.records_fetched == 250
        assert result.attempted == 250
        assert result.batches_total == 25

    def test_reads_complete_before_writes(self, sleep):
        client = FakeCollectionClient(records=make_pages(150), schema=make_schema(Name="title"))
        MigrationEngine(client, sleep=sleep).run("src", "dst", batch_size=50)

        first_create = client.calls.index("create_record")
        assert client.calls[:first_create] == ["fetch_page", "fetch_page", "fetch_schema"]
        assert client.schema_calls == ["dst"]

    def test_last_batch_may_be_short(self, sleep):
        client = FakeCollectionClient(records=make_pages(5), schema=make_schema(Name="title"))
        result = MigrationEngine(client, sleep=sleep).run("src", "dst", batch_size=2)

        assert result.batches_total == 3
        assert result.current_batch == 3


class FailingFetchClient(FakeCollectionClient):

    def __init__(self, fail_on, **kwargs):
        super().__init__(**kwargs)
        self.fail_on = fail_on

    def fetch_page(self, collection_id, cursor=None):
        if self.fail_on == "page":
            raise RemoteError("Could not find database", status_code=404)
        return super().fetch_page(collection_id, cursor)

    def fetch_schema(self, collection_id):
        if self.fail_on == "schema":
            raise RemoteError("Unauthorized", status_code=401)
        return super().fetch_schema(collection_id)


class TestFetchErrors:
    """Fetch errors abort the run before any page is created."""

    @pytest.mark.parametrize("fail_on", ["page", "schema"])
    def test_fetch_error_propagates(self, fail_on, sleep):
        client = FailingFetchClient(fail_on, records=make_pages(3), schema=make_schema(Name="title"))
        engine = MigrationEngine(client, sleep=sleep)

        with pytest.raises(RemoteError):
            engine.run("src", "dst", batch_size=2)

        assert client.created == []
        assert sleep.delays == []

    def test_invalid_batch_size(self, sleep):
        client = FakeCollectionClient()
        with pytest.raises(ValueError):
            MigrationEngine(client, sleep=sleep).run("src", "dst", batch_size=0)
        assert client.calls == []
