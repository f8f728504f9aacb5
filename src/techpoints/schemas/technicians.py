"""Technician management and report DTOs."""
from __future__ import annotations
from datetime import datetime
from techpoints.schemas.base import CamelModel


class Technician(CamelModel):
    id: str
    name: str
    created_at: datetime | None = None
    has_credentials: bool = False
    username: str | None = None
    last_login: datetime | None = None


class Credentials(CamelModel):
    username: str
    password: str
    message: str = ""


class TechnicianRef(CamelModel):
    id: str
    name: str


class ServiceTypeReport(CamelModel):
    name: str
    count: int
    points_each: int
    total_points: int


class TechnicianReport(CamelModel):
    technician: TechnicianRef
    start_date: str | None = None
    end_date: str | None = None
    total_points: int
    total_services: int
    by_service_type: list[ServiceTypeReport]
