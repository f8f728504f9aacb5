"""Display formatting in Brazilian conventions (R$, dd/mm/yyyy, dotted thousands)."""
from __future__ import annotations

from datetime import date, datetime

from techpoints.schemas.services import ImportStatus


def format_int(value: float) -> str:
    return f"{round(value):,}".replace(",", ".")


def format_currency(value: float, decimals: int = 2) -> str:
    """``1234.5`` -> ``R$ 1.234,50``."""
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.{decimals}f}"
    # swap separators: 1,234.50 -> 1.234,50
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def _as_datetime(value: datetime | date | str) -> datetime | date:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def format_date(value: datetime | date | str | None) -> str:
    if not value:
        return "-"
    return _as_datetime(value).strftime("%d/%m/%Y")


def format_datetime(value: datetime | str | None) -> str:
    if not value:
        return "-"
    return _as_datetime(value).strftime("%d/%m/%Y %H:%M")


_STATUS_LABELS = {
    ImportStatus.COMPLETED.value: "✅ Completed",
    ImportStatus.REVERTED.value: "↩️ Reverted",
    ImportStatus.PROCESSING.value: "⏳ Processing",
}


def status_label(status: str) -> str:
    return _STATUS_LABELS.get(status, status)
