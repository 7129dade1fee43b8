"""
Shared test fixtures and configuration.
"""

import pytest

from cja_picks.utils.config_schema import AppConfig


@pytest.fixture
def app_config():
    """Default configuration without touching the filesystem."""
    return AppConfig()


@pytest.fixture
def season():
    """Season with a week 1 deadline a week before the general deadline."""
    return {
        "id": "season-7",
        "season_number": 7,
        "name": "Season 7",
        "week_1_prediction_deadline": "2026-03-01T12:00:00+00:00",
        "prediction_deadline": "2026-03-08T12:00:00+00:00",
    }


@pytest.fixture
def schedules():
    """Two race weeks."""
    return [
        {
            "id": "sched-1",
            "season_id": "season-7",
            "week": 1,
            "track_name": "Spa-Francorchamps",
            "race_date": "2026-03-01T19:00:00+00:00",
        },
        {
            "id": "sched-2",
            "season_id": "season-7",
            "week": 2,
            "track_name": "Monza",
            "race_date": "2026-03-08T19:00:00+00:00",
        },
    ]


@pytest.fixture
def week_1_results():
    """Division 1 Gold of week 1: three finishers."""
    return [
        {"schedule_id": "sched-1", "division": 1, "split": "Gold", "driver_id": "drv-1", "split_position": 1},
        {"schedule_id": "sched-1", "division": 1, "split": "Gold", "driver_id": "drv-2", "split_position": 2},
        {"schedule_id": "sched-1", "division": 1, "split": "Gold", "driver_id": "drv-3", "split_position": 3},
    ]


@pytest.fixture
def week_2_results():
    """Division 1 Gold of week 2: four finishers."""
    return [
        {"schedule_id": "sched-2", "division": 1, "split": "Gold", "driver_id": "drv-4", "split_position": 1},
        {"schedule_id": "sched-2", "division": 1, "split": "Gold", "driver_id": "drv-1", "split_position": 2},
        {"schedule_id": "sched-2", "division": 1, "split": "Gold", "driver_id": "drv-5", "split_position": 3},
        {"schedule_id": "sched-2", "division": 1, "split": "Gold", "driver_id": "drv-3", "split_position": 4},
    ]


@pytest.fixture
def predictions():
    """
    Week 1 picks for three players.

    alice picks the winner, bob picks third place, carol skips division 1 Gold
    (her only pick is in a division without results).
    """
    return [
        {"id": "p-1", "user_id": "alice", "schedule_id": "sched-1", "division": 1, "split": "Gold", "driver_id": "drv-1"},
        {"id": "p-2", "user_id": "bob", "schedule_id": "sched-1", "division": 1, "split": "Gold", "driver_id": "drv-3"},
        {"id": "p-3", "user_id": "carol", "schedule_id": "sched-1", "division": 2, "split": "Gold", "driver_id": "drv-9"},
    ]


@pytest.fixture
def week_2_predictions():
    """Week 2 picks: alice picks the runner-up, bob picks fourth, carol skips."""
    return [
        {"id": "p-4", "user_id": "alice", "schedule_id": "sched-2", "division": 1, "split": "Gold", "driver_id": "drv-1"},
        {"id": "p-5", "user_id": "bob", "schedule_id": "sched-2", "division": 1, "split": "Gold", "driver_id": "drv-3"},
    ]


@pytest.fixture
def drivers():
    """Public driver roster."""
    return [
        {"id": "drv-1", "first_name": "Max", "last_name": "Rossi", "short_name": "ROS", "driver_number": 11},
        {"id": "drv-2", "first_name": None, "last_name": None, "short_name": "KIM", "driver_number": None},
        {"id": "drv-3", "first_name": "Lena", "last_name": "Vogt", "short_name": "VOG", "driver_number": 3},
        {"id": "drv-4", "first_name": "Ana", "last_name": "Silva", "short_name": "SIL", "driver_number": 7},
        {"id": "drv-5", "first_name": "Tom", "last_name": "Berg", "short_name": "BER", "driver_number": 21},
        {"id": "drv-9", "first_name": "Ivo", "last_name": "Hart", "short_name": "HAR", "driver_number": 99},
    ]
