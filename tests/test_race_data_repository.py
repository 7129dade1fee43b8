from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from cja_picks.persistence import DataFetchError, RaceDataRepository
from cja_picks.utils.config_schema import TablesConfig
from cja_picks.utils.prediction_lock import PredictionLockedError

BEFORE_DEADLINES = datetime(2026, 2, 20, tzinfo=timezone.utc)
BETWEEN_DEADLINES = datetime(2026, 3, 4, tzinfo=timezone.utc)


def _client(*pages):
    """Supabase client mock whose query chain returns the given pages in order."""
    query = MagicMock()
    for method in ("select", "eq", "in_", "order", "limit", "range", "upsert", "delete"):
        getattr(query, method).return_value = query
    query.execute.side_effect = [SimpleNamespace(data=page) for page in pages]

    client = MagicMock()
    client.table.return_value = query
    return client, query


@pytest.fixture
def schedule():
    return {"id": "sched-1", "season_id": "season-7", "week": 1}


def test_fetch_schedules_flattens_track_name():
    client, query = _client(
        [
            {"id": "sched-1", "season_id": "season-7", "week": 1, "race_date": "2026-03-01", "track": {"name": "Spa"}},
            {"id": "sched-2", "season_id": "season-7", "week": 2, "race_date": None, "track": None},
        ]
    )
    repo = RaceDataRepository(client=client)

    schedules = repo.fetch_schedules("season-7")

    assert schedules == [
        {"id": "sched-1", "season_id": "season-7", "week": 1, "race_date": "2026-03-01", "track_name": "Spa"},
        {"id": "sched-2", "season_id": "season-7", "week": 2, "race_date": None, "track_name": "Unknown"},
    ]
    client.table.assert_called_with("schedule")
    query.eq.assert_called_with("season_id", "season-7")
    query.order.assert_called_with("week")


def test_fetch_all_pages_until_short_page():
    client, query = _client(
        [{"id": "p-1"}, {"id": "p-2"}],
        [{"id": "p-3"}, {"id": "p-4"}],
        [{"id": "p-5"}],
    )
    repo = RaceDataRepository(client=client, page_size=2)

    rows = repo.fetch_predictions("season-7", ["sched-1"])

    assert [r["id"] for r in rows] == ["p-1", "p-2", "p-3", "p-4", "p-5"]
    assert [c.args for c in query.range.call_args_list] == [(0, 1), (2, 3), (4, 5)]


def test_fetch_all_stops_after_empty_page():
    client, query = _client([{"id": "p-1"}, {"id": "p-2"}], [])
    repo = RaceDataRepository(client=client, page_size=2)

    rows = repo.fetch_predictions("season-7", ["sched-1"])

    assert len(rows) == 2
    assert query.execute.call_count == 2


def test_fetch_predictions_for_one_user():
    client, query = _client([{"id": "p-1", "user_id": "alice"}])
    repo = RaceDataRepository(client=client)

    repo.fetch_predictions("season-7", ["sched-1", "sched-2"], user_id="alice")

    client.table.assert_called_with("predictions")
    query.in_.assert_called_with("schedule_id", ["sched-1", "sched-2"])
    query.eq.assert_called_with("user_id", "alice")


def test_fetch_without_schedules_skips_query():
    client, _ = _client()
    repo = RaceDataRepository(client=client)

    assert repo.fetch_predictions("season-7", []) == []
    assert repo.fetch_results([]) == []
    client.table.assert_not_called()


def test_fetch_results_uses_configured_table():
    client, _ = _client([{"schedule_id": "sched-1", "division": 1, "split": "Gold", "driver_id": "drv-1", "split_position": 1}])
    repo = RaceDataRepository(client=client, tables=TablesConfig(results="race_results"))

    rows = repo.fetch_results(["sched-1"])

    assert len(rows) == 1
    client.table.assert_called_with("race_results")


def test_read_failure_raises_data_fetch_error():
    client, query = _client()
    query.execute.side_effect = RuntimeError("network down")
    repo = RaceDataRepository(client=client)

    with pytest.raises(DataFetchError, match="network down"):
        repo.fetch_results(["sched-1"])

    with pytest.raises(DataFetchError, match="schedules for season season-7"):
        repo.fetch_schedules("season-7")


def test_data_fetch_error_is_runtime_error():
    assert issubclass(DataFetchError, RuntimeError)


def test_fetch_season_and_latest_season():
    client, query = _client([{"id": "season-7", "season_number": 7}], [])
    repo = RaceDataRepository(client=client)

    assert repo.fetch_latest_season()["id"] == "season-7"
    query.order.assert_called_with("season_number", desc=True)
    assert repo.fetch_season("season-404") is None


def test_fetch_display_names_skips_blank_names():
    client, query = _client(
        [{"user_id": "alice", "display_name": "Alice"}, {"user_id": "bob", "display_name": None}]
    )
    repo = RaceDataRepository(client=client)

    names = repo.fetch_display_names(["bob", "alice", "alice"])

    assert names == {"alice": "Alice"}
    client.table.assert_called_with("user_profiles_public")
    query.in_.assert_called_with("user_id", ["alice", "bob"])


def test_fetch_display_names_failure_falls_back_to_empty():
    client, query = _client()
    query.execute.side_effect = RuntimeError("permission denied")
    repo = RaceDataRepository(client=client)

    assert repo.fetch_display_names(["alice"]) == {}
    assert repo.fetch_display_name("alice") is None


def test_save_prediction_upserts_on_slot(season, schedule):
    client, query = _client([{"id": "p-1", "driver_id": "drv-1"}])
    repo = RaceDataRepository(client=client)

    saved = repo.save_prediction("alice", season, schedule, 1, "Gold", "drv-1", now=BEFORE_DEADLINES)

    assert saved["id"] == "p-1"
    row = query.upsert.call_args.args[0]
    assert row == {
        "user_id": "alice",
        "schedule_id": "sched-1",
        "division": 1,
        "split": "Gold",
        "driver_id": "drv-1",
        "updated_at": "2026-02-20T00:00:00+00:00",
    }
    assert query.upsert.call_args.kwargs == {"on_conflict": "user_id,schedule_id,division,split"}


def test_save_prediction_blocked_after_week_1_deadline(season, schedule):
    client, query = _client([{"id": "p-1"}])
    repo = RaceDataRepository(client=client)

    with pytest.raises(PredictionLockedError, match="Week 1"):
        repo.save_prediction("alice", season, schedule, 1, "Gold", "drv-1", now=BETWEEN_DEADLINES)

    query.upsert.assert_not_called()


def test_save_prediction_later_week_open_between_deadlines(season):
    client, query = _client([{"id": "p-2"}])
    repo = RaceDataRepository(client=client)
    week_2 = {"id": "sched-2", "season_id": "season-7", "week": 2}

    saved = repo.save_prediction("alice", season, week_2, 3, "Silver", "drv-4", now=BETWEEN_DEADLINES)

    assert saved["id"] == "p-2"


@pytest.mark.parametrize(
    "division, split, message",
    [(0, "Gold", "Invalid division"), (7, "Gold", "Invalid division"), (1, "Bronze", "Invalid split")],
)
def test_save_prediction_rejects_invalid_slot(season, schedule, division, split, message):
    client, query = _client()
    repo = RaceDataRepository(client=client)

    with pytest.raises(ValueError, match=message):
        repo.save_prediction("alice", season, schedule, division, split, "drv-1", now=BEFORE_DEADLINES)

    query.upsert.assert_not_called()


def test_save_prediction_rejects_schedule_from_other_season(season):
    client, _ = _client()
    repo = RaceDataRepository(client=client)
    other = {"id": "sched-9", "season_id": "season-6", "week": 3}

    with pytest.raises(ValueError, match="belongs to season season-6"):
        repo.save_prediction("alice", season, other, 1, "Gold", "drv-1", now=BEFORE_DEADLINES)


def test_save_prediction_wraps_write_errors(season, schedule):
    client, query = _client()
    query.execute.side_effect = RuntimeError("conflict")
    repo = RaceDataRepository(client=client)

    with pytest.raises(RuntimeError, match="Failed to save prediction"):
        repo.save_prediction("alice", season, schedule, 1, "Gold", "drv-1", now=BEFORE_DEADLINES)


def test_save_prediction_without_returned_row_raises(season, schedule):
    client, _ = _client([])
    repo = RaceDataRepository(client=client)

    with pytest.raises(RuntimeError, match="returned no data"):
        repo.save_prediction("alice", season, schedule, 1, "Gold", "drv-1", now=BEFORE_DEADLINES)


def test_delete_prediction_filters_on_slot(season, schedule):
    client, query = _client([{"id": "p-1"}])
    repo = RaceDataRepository(client=client)

    repo.delete_prediction("alice", season, schedule, 2, "Silver", now=BEFORE_DEADLINES)

    query.delete.assert_called_once()
    assert [c.args for c in query.eq.call_args_list] == [
        ("user_id", "alice"),
        ("schedule_id", "sched-1"),
        ("division", 2),
        ("split", "Silver"),
    ]


def test_delete_missing_prediction_raises(season, schedule):
    client, _ = _client([])
    repo = RaceDataRepository(client=client)

    with pytest.raises(ValueError, match="No prediction found to delete"):
        repo.delete_prediction("alice", season, schedule, 1, "Gold", now=BEFORE_DEADLINES)


def test_delete_blocked_after_deadline(season, schedule):
    client, query = _client([{"id": "p-1"}])
    repo = RaceDataRepository(client=client)

    with pytest.raises(PredictionLockedError):
        repo.delete_prediction("alice", season, schedule, 1, "Gold", now=BETWEEN_DEADLINES)

    query.delete.assert_not_called()


def test_client_created_lazily(monkeypatch):
    import cja_picks.persistence.race_data as race_data_module

    client, _ = _client()
    factory = MagicMock(return_value=client)
    monkeypatch.setattr(race_data_module, "get_supabase_client", factory)

    repo = RaceDataRepository()
    factory.assert_not_called()

    assert repo.client is client
    assert repo.client is client
    factory.assert_called_once()
