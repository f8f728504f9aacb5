"""Client-side aggregation of service records for the dashboard and charts."""
from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from techpoints.schemas.dashboard import ScoreData
from techpoints.schemas.services import Service, User

DATE_PRESETS = {
    "today": "Today",
    "week": "7 days",
    "month": "30 days",
    "year": "1 year",
    "all": "All",
}

_ALL_TIME_START = date(2020, 1, 1)


def date_preset(preset: str, today: date | None = None) -> tuple[date, date]:
    today = today or date.today()
    if preset == "today":
        start = today
    elif preset == "week":
        start = today - timedelta(days=7)
    elif preset == "month":
        start = today - timedelta(days=30)
    elif preset == "year":
        try:
            start = today.replace(year=today.year - 1)
        except ValueError:  # 29 February
            start = today.replace(year=today.year - 1, day=28)
    elif preset == "all":
        start = _ALL_TIME_START
    else:
        raise ValueError(f"Unknown date preset: {preset!r}")
    return start, today


def filter_services(
    services: Iterable[Service], user_ids: set[str], type_ids: set[int],
) -> list[Service]:
    return [s for s in services if s.user_id in user_ids and s.service_type_id in type_ids]


@dataclass(frozen=True)
class DashboardStats:
    total_points: int
    technician_count: int
    average_points: int
    service_count: int


def dashboard_stats(services: Sequence[Service]) -> DashboardStats:
    total = sum(s.service_type.points for s in services)
    techs = len({s.user_id for s in services})
    return DashboardStats(
        total_points=total,
        technician_count=techs,
        average_points=round(total / techs) if techs else 0,
        service_count=len(services),
    )


@dataclass(frozen=True)
class RankingEntry:
    id: str
    name: str
    points: int
    services: int


def technician_ranking(
    services: Iterable[Service], users: Sequence[User], limit: int | None = None,
) -> list[RankingEntry]:
    """Points and service count per technician, most points first."""
    points: Counter[str] = Counter()
    counts: Counter[str] = Counter()
    for s in services:
        points[s.user_id] += s.service_type.points
        counts[s.user_id] += 1

    names = {u.id: u.name for u in users}
    ranking = [
        RankingEntry(id=uid, name=names.get(uid, "Unknown"), points=pts, services=counts[uid])
        for uid, pts in points.items()
    ]
    ranking.sort(key=lambda r: r.points, reverse=True)
    return ranking[:limit] if limit is not None else ranking


def daily_points(services: Iterable[Service]) -> dict[date, int]:
    """Points per calendar day, in chronological order."""
    by_day: Counter[date] = Counter()
    for s in services:
        by_day[s.performed_at.date()] += s.service_type.points
    return dict(sorted(by_day.items()))


def services_by_type_per_technician(services: Iterable[Service]) -> dict[str, dict[int, int]]:
    """``{user_id: {service_type_id: count}}`` for the stacked services chart."""
    grid: dict[str, dict[int, int]] = defaultdict(dict)
    for s in services:
        row = grid[s.user_id]
        row[s.service_type_id] = row.get(s.service_type_id, 0) + 1
    return dict(grid)


def points_by_service_type(services: Iterable[Service]) -> dict[str, int]:
    totals: Counter[str] = Counter()
    for s in services:
        totals[s.service_type.name] += s.service_type.points
    return dict(totals.most_common())


def score_breakdown(score: ScoreData) -> dict[str, int]:
    """Points earned per service type on the public score page."""
    return {label: d.count * d.points for label, d in score.detail.items()}
