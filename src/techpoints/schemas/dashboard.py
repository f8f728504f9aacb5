"""Dashboard, admin-panel and score DTOs."""
from __future__ import annotations
from techpoints.schemas.base import CamelModel
from techpoints.schemas.services import ImportHistory, Service, ServiceType, User, UserWithServices


class DashboardFilters(CamelModel):
    users: list[User]
    types: list[ServiceType]


class DashboardServices(CamelModel):
    services: list[Service]
    count: int


class AdminData(CamelModel):
    users: list[UserWithServices]
    history: list[ImportHistory]


class ScoreDetail(CamelModel):
    count: int
    points: int


class ScoreData(CamelModel):
    user: User
    total_score: int
    detail: dict[str, ScoreDetail]


class MessageResponse(CamelModel):
    message: str


class CleanupResult(MessageResponse):
    count: int
