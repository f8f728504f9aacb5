"""Payment configuration, performance and annual report DTOs."""
from __future__ import annotations
from datetime import datetime
from pydantic import Field, field_validator
from techpoints.schemas.base import CamelModel


class PaymentRules(CamelModel):
    min_points: int
    base_payment: float
    point_rate: float


class CycleRules(PaymentRules):
    cycle_start_day: int
    cycle_end_day: int


class PaymentConfig(CycleRules):
    id: int
    updated_at: datetime | None = None


class PaymentConfigUpdate(CamelModel):
    """Partial update: only fields that are set are sent."""

    min_points: int | None = Field(default=None, ge=0)
    base_payment: float | None = Field(default=None, ge=0)
    point_rate: float | None = Field(default=None, ge=0)
    cycle_start_day: int | None = Field(default=None, ge=1, le=31)
    cycle_end_day: int | None = Field(default=None, ge=1, le=31)


class ServiceTypePointsUpdate(CamelModel):
    points: int

    @field_validator("points")
    @classmethod
    def points_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("points must be zero or positive")
        return v


class ServiceTypeTotals(CamelModel):
    count: int
    points: int
    total: int


class PerformedService(CamelModel):
    id: int
    type: str
    points: int
    performed_at: datetime


class PerformanceData(CamelModel):
    cycle_start: datetime
    cycle_end: datetime
    total_services: int
    total_points: int
    payment: float
    by_service_type: dict[str, ServiceTypeTotals]
    services: list[PerformedService]
    config: PaymentRules


class MonthSummary(CamelModel):
    month: int
    month_name: str
    period: str
    cycle_start: str
    cycle_end: str
    total_services: int
    total_points: int
    qualified_technicians: int
    total_technicians: int
    total_payment: float


class AnnualTotals(CamelModel):
    total_payment: float
    total_services: int
    total_points: int
    qualified_technicians: int


class AnnualSummary(CamelModel):
    year: int
    config: CycleRules
    months: list[MonthSummary]
    totals: AnnualTotals


class TechnicianAnnualPayment(CamelModel):
    id: str
    name: str
    monthly_payments: list[float]
    monthly_points: list[int]
    year_total: float


class TechniciansAnnualResponse(CamelModel):
    year: int
    config: CycleRules
    technicians: list[TechnicianAnnualPayment]
    monthly_totals: list[float]
    monthly_qualified: list[int]
    month_names: list[str]
    grand_total: float
