"""Technician, service-type and service DTOs."""
from __future__ import annotations
from datetime import datetime
from enum import Enum
from techpoints.schemas.base import CamelModel


class User(CamelModel):
    id: str
    name: str
    created_at: datetime | None = None


class ServiceType(CamelModel):
    id: int
    name: str
    points: int


class Service(CamelModel):
    id: int
    performed_at: datetime
    user_id: str
    user: User
    service_type_id: int
    service_type: ServiceType
    import_id: str | None = None


class UserWithServices(User):
    services: list[Service] = []


class ImportStatus(str, Enum):
    COMPLETED = "CONCLUIDO"
    REVERTED = "REVERTIDO"
    PROCESSING = "PROCESSANDO"


class ImportHistory(CamelModel):
    id: str
    filename: str
    created_at: datetime
    # Kept as a plain string: the backend may add states this client
    # does not know about yet. Compare against ImportStatus members.
    status: str
    row_count: int = 0


class ImportEvent(CamelModel):
    """One line of the NDJSON stream returned by ``POST /api/import``."""

    type: str
    msg: str | None = None
    processed: int | None = None
    success: int | None = None
    total: int | None = None
    duplicados: int | None = None
    data_invalida: int | None = None
