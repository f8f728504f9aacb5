from datetime import date

import pytest

from techpoints.schemas.dashboard import ScoreData
from techpoints.schemas.services import Service, User
from techpoints.services.dashboard_service import (
    DATE_PRESETS,
    daily_points,
    dashboard_stats,
    date_preset,
    filter_services,
    points_by_service_type,
    score_breakdown,
    services_by_type_per_technician,
    technician_ranking,
)

from conftest import SERVICES, USERS

TODAY = date(2024, 3, 15)


@pytest.fixture
def services():
    return [Service.model_validate(s) for s in SERVICES]


@pytest.fixture
def users():
    return [User.model_validate(u) for u in USERS]


# ---------------------------------------------------------------------------
# Date presets
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("preset,start", [
    ("today", date(2024, 3, 15)),
    ("week", date(2024, 3, 8)),
    ("month", date(2024, 2, 14)),
    ("year", date(2023, 3, 15)),
    ("all", date(2020, 1, 1)),
])
def test_date_presets(preset, start):
    assert date_preset(preset, today=TODAY) == (start, TODAY)


def test_every_preset_has_a_label():
    for key in DATE_PRESETS:
        date_preset(key, today=TODAY)


def test_year_preset_on_leap_day():
    assert date_preset("year", today=date(2024, 2, 29))[0] == date(2023, 2, 28)


def test_unknown_preset_raises():
    with pytest.raises(ValueError):
        date_preset("decade", today=TODAY)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def test_filter_services(services):
    assert [s.id for s in filter_services(services, {"u1"}, {1, 2})] == [1, 2]
    assert [s.id for s in filter_services(services, {"u1", "u2"}, {2})] == [2, 3]
    assert filter_services(services, set(), {1, 2}) == []


def test_dashboard_stats(services):
    stats = dashboard_stats(services)
    assert stats.total_points == 18
    assert stats.technician_count == 2
    assert stats.average_points == 9
    assert stats.service_count == 3


def test_dashboard_stats_empty():
    stats = dashboard_stats([])
    assert stats.total_points == 0
    assert stats.average_points == 0


def test_ranking_matches_total_points(services, users):
    ranking = technician_ranking(services, users)
    assert [r.name for r in ranking] == ["Ana Souza", "Bruno Lima"]
    assert sum(r.points for r in ranking) == dashboard_stats(services).total_points
    assert ranking[0].services == 2


def test_ranking_limit_and_unknown_user(services):
    ranking = technician_ranking(services, users=[], limit=1)
    assert len(ranking) == 1
    assert ranking[0].name == "Unknown"


def test_daily_points_sorted_by_day(services):
    assert daily_points(reversed(services)) == {
        date(2024, 3, 1): 14,
        date(2024, 3, 2): 4,
    }
    assert list(daily_points(reversed(services))) == [date(2024, 3, 1), date(2024, 3, 2)]


def test_services_by_type_per_technician(services):
    assert services_by_type_per_technician(services) == {
        "u1": {1: 1, 2: 1},
        "u2": {2: 1},
    }


def test_points_by_service_type(services):
    assert points_by_service_type(services) == {"Installation": 10, "Repair": 8}


def test_score_breakdown():
    score = ScoreData.model_validate({
        "user": USERS[0],
        "totalScore": 18,
        "detail": {"Installation": {"count": 1, "points": 10},
                   "Repair": {"count": 2, "points": 4}},
    })
    assert score_breakdown(score) == {"Installation": 10, "Repair": 8}
