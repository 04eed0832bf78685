"""
Pytest fixtures and configuration for all tests.
"""

import os

# Settings requires a MongoDB URI; tests never connect to it
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_DB_NAME", "paddock_picks_test")

import pytest
from datetime import datetime, timezone
from mongomock_motor import AsyncMongoMockClient

from paddock_picks.models.scoring_rule import TrackOrderRules, WinnerPickRules

TEST_DB_NAME = "paddock_picks_test"


@pytest.fixture(scope="function")
async def test_db():
    """
    Provide a clean in-memory test database for each test.
    """
    client = AsyncMongoMockClient()
    db = client[TEST_DB_NAME]

    yield db

    # Cleanup: drop all collections after test
    collection_names = await db.list_collection_names()
    for collection_name in collection_names:
        await db[collection_name].drop()


@pytest.fixture
def track_rules():
    return TrackOrderRules()


@pytest.fixture
def winner_rules():
    return WinnerPickRules()


@pytest.fixture
def sample_season_data():
    """Sample season with a week-1 deadline."""
    return {
        "id": "s12",
        "season_number": 12,
        "name": "Season 12",
        "prediction_deadline": datetime(2026, 1, 10, tzinfo=timezone.utc),
        "week_1_prediction_deadline": datetime(2026, 1, 3, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_schedule_data():
    """Eight-week schedule for season s12."""
    tracks = [
        "daytona", "sebring", "spa", "monza",
        "suzuka", "road-atlanta", "watkins-glen", "le-mans",
    ]
    return [
        {"id": f"s12-w{week}", "season_id": "s12", "week": week, "track_id": track}
        for week, track in enumerate(tracks, start=1)
    ]


@pytest.fixture
def sample_scoring_rules_data():
    """IMSA scoring rules as stored in imsa_scoring_rules."""
    podium = {1: (25, 10, 5), 2: (20, 10, 5), 3: (15, 10, 5)}
    rules = []
    for position, (exact, on_podium, top_5) in podium.items():
        rules += [
            {"category": "podium", "prediction_position": position, "result_type": "exact", "points": exact},
            {"category": "podium", "prediction_position": position, "result_type": "on_podium", "points": on_podium},
            {"category": "podium", "prediction_position": position, "result_type": "top_5", "points": top_5},
        ]
    rules += [
        {"category": "manufacturer", "prediction_position": None, "result_type": "exact", "points": 10},
        {"category": "manufacturer", "prediction_position": None, "result_type": "off_1", "points": 5},
        {"category": "manufacturer", "prediction_position": None, "result_type": "off_2", "points": 2},
    ]
    return rules


@pytest.fixture
def sample_event_data():
    return {"id": "daytona-24", "name": "Rolex 24 at Daytona", "year": 2026, "status": "completed"}


@pytest.fixture
def sample_classes_data():
    return [
        {"id": "gtp", "event_id": "daytona-24", "name": "GTP", "has_manufacturer_prediction": True},
        {"id": "lmp2", "event_id": "daytona-24", "name": "LMP2", "has_manufacturer_prediction": False},
    ]


@pytest.fixture
def sample_entry_results_data():
    """GTP: porsche 1st/4th, cadillac 2nd/3rd, bmw 5th; LMP2: oreca 1st."""
    return [
        {"event_id": "daytona-24", "entry_id": "gtp-7", "class_id": "gtp", "manufacturer_id": "porsche",
         "finish_position": 1, "status": "finished"},
        {"event_id": "daytona-24", "entry_id": "gtp-31", "class_id": "gtp", "manufacturer_id": "cadillac",
         "finish_position": 2, "status": "finished"},
        {"event_id": "daytona-24", "entry_id": "gtp-01", "class_id": "gtp", "manufacturer_id": "cadillac",
         "finish_position": 3, "status": "finished"},
        {"event_id": "daytona-24", "entry_id": "gtp-6", "class_id": "gtp", "manufacturer_id": "porsche",
         "finish_position": 4, "status": "finished"},
        {"event_id": "daytona-24", "entry_id": "gtp-25", "class_id": "gtp", "manufacturer_id": "bmw",
         "finish_position": 5, "status": "finished"},
        {"event_id": "daytona-24", "entry_id": "gtp-24", "class_id": "gtp", "manufacturer_id": "bmw",
         "finish_position": None, "status": "DNF"},
        {"event_id": "daytona-24", "entry_id": "lmp2-52", "class_id": "lmp2", "manufacturer_id": "oreca",
         "finish_position": 1, "status": "finished"},
    ]
