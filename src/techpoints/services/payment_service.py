"""Payment rules and per-technician payment tables.

Pure functions over DTOs; no Streamlit, no HTTP. The backend applies the same
formula for performance and annual reports, the functions here cover the
screens that compute it client-side (payment calculator, configuration
preview, goal progress).
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence, TypeVar

from techpoints.schemas.payment import PaymentRules, CycleRules
from techpoints.schemas.services import Service


def calculate_payment(
    points: float, min_points: float, base_payment: float, point_rate: float,
) -> float:
    """Nothing below the minimum; base payment plus a per-point rate above it."""
    if points < min_points:
        return 0.0
    return base_payment + (points - min_points) * point_rate


def payment_for(points: float, rules: PaymentRules) -> float:
    return calculate_payment(points, rules.min_points, rules.base_payment, rules.point_rate)


def points_above_minimum(points: float, min_points: float) -> float:
    return max(0, points - min_points)


def goal_progress(points: float, min_points: float) -> float:
    """Percent of the minimum reached, capped at 100."""
    if min_points <= 0:
        return 100.0
    return min(points / min_points * 100, 100.0)


@dataclass(frozen=True)
class PaymentExample:
    points: int
    payment: float


def payment_examples(rules: PaymentRules) -> list[PaymentExample]:
    """Preview rows shown next to the payment configuration form."""
    return [
        PaymentExample(points=p, payment=payment_for(p, rules))
        for p in range(rules.min_points - 1, rules.min_points + 3)
    ]


def _clamped(year: int, month: int, day: int) -> date:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(max(day, 1), last))


def current_cycle(rules: CycleRules, today: date | None = None) -> tuple[date, date]:
    """Cycle containing ``today``'s month.

    Runs from ``cycle_start_day`` of the previous month to ``cycle_end_day``
    of the current month. January's cycle starts in December of the year
    before.
    """
    today = today or date.today()
    if today.month == 1:
        start_year, start_month = today.year - 1, 12
    else:
        start_year, start_month = today.year, today.month - 1
    start = _clamped(start_year, start_month, rules.cycle_start_day)
    end = _clamped(today.year, today.month, rules.cycle_end_day)
    return start, end


@dataclass(frozen=True)
class TechnicianPayment:
    id: str
    name: str
    total_points: int
    service_count: int
    payment: float
    points_above_min: int

    @property
    def qualified(self) -> bool:
        return self.payment > 0


def technician_payments(
    services: Iterable[Service], rules: PaymentRules,
) -> list[TechnicianPayment]:
    """Group services by technician and price each group, highest payment first."""
    grouped: dict[str, dict] = {}
    for s in services:
        entry = grouped.setdefault(
            s.user.id, {"name": s.user.name, "points": 0, "count": 0},
        )
        entry["points"] += s.service_type.points
        entry["count"] += 1

    rows: list[TechnicianPayment] = []
    for tech_id, entry in grouped.items():
        payment = payment_for(entry["points"], rules)
        rows.append(TechnicianPayment(
            id=tech_id,
            name=entry["name"],
            total_points=entry["points"],
            service_count=entry["count"],
            payment=payment,
            points_above_min=(
                entry["points"] - rules.min_points if entry["points"] >= rules.min_points else 0
            ),
        ))
    rows.sort(key=lambda r: r.payment, reverse=True)
    return rows


@dataclass(frozen=True)
class PaymentTotals:
    total_payment: float = 0.0
    total_points: int = 0
    total_services: int = 0
    qualified_count: int = 0


def payment_totals(rows: Iterable[TechnicianPayment]) -> PaymentTotals:
    totals = PaymentTotals()
    for r in rows:
        totals = PaymentTotals(
            total_payment=totals.total_payment + r.payment,
            total_points=totals.total_points + r.total_points,
            total_services=totals.total_services + r.service_count,
            qualified_count=totals.qualified_count + (1 if r.qualified else 0),
        )
    return totals


T = TypeVar("T")


def filter_by_name(rows: Sequence[T], term: str) -> list[T]:
    """Case-insensitive substring match on ``row.name``."""
    needle = term.strip().lower()
    if not needle:
        return list(rows)
    return [r for r in rows if needle in r.name.lower()]
