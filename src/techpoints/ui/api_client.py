"""Typed HTTP client for Streamlit pages and the CLI.

Only imports from ``techpoints.schemas``. Instantiate via ``get_client()``
which caches per Streamlit session.
"""
from __future__ import annotations

from typing import Any, Iterator

import httpx
import streamlit as st

from techpoints.config import settings
from techpoints.domain.exceptions import TechPointsError
from techpoints.logging import logger
from techpoints.schemas.auth import (
    AdminUser, AdminUserCreate, LoginRequest, LoginResponse, PasswordReset,
    SessionUser, VerifyResponse,
)
from techpoints.schemas.dashboard import (
    AdminData, CleanupResult, DashboardFilters, DashboardServices,
    MessageResponse, ScoreData,
)
from techpoints.schemas.payment import (
    AnnualSummary, PaymentConfig, PaymentConfigUpdate, PerformanceData,
    ServiceTypePointsUpdate, TechniciansAnnualResponse,
)
from techpoints.schemas.services import ImportEvent, ImportHistory, ServiceType
from techpoints.schemas.technicians import Credentials, Technician, TechnicianReport
from techpoints.services.import_stream import iter_events


class APIError(TechPointsError):
    """Raised when the backend returns a 4xx/5xx response."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"[{status_code}] {detail}")


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _date_params(start_date: str | None, end_date: str | None) -> dict[str, str]:
    params: dict[str, str] = {}
    if start_date:
        params["startDate"] = start_date
    if end_date:
        params["endDate"] = end_date
    return params


class TechPointsClient:
    """One method per backend endpoint.  All return pure Pydantic DTOs.

    ``http`` lets tests hand in a pre-built ``httpx.Client`` (for example a
    FastAPI ``TestClient``) instead of opening a real connection.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self._client = http or httpx.Client(
            base_url=base_url or settings.API_URL,
            timeout=timeout or settings.REQUEST_TIMEOUT,
        )

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        detail = resp.text
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("error") or body.get("detail") or body.get("message") or detail
        logger.warning("%s %s failed: [%s] %s",
                       resp.request.method, resp.request.url.path, resp.status_code, detail)
        raise APIError(resp.status_code, str(detail))

    def _get(self, path: str, **kwargs: Any) -> Any:
        resp = self._client.get(path, **kwargs)
        self._raise_for_status(resp)
        return resp.json()

    # ------------------------------------------------------------------
    # Admin panel
    # ------------------------------------------------------------------

    def get_admin_data(self) -> AdminData:
        return AdminData.model_validate(self._get("/api/admin"))

    def run_cleanup(self) -> CleanupResult:
        resp = self._client.post("/api/cleanup")
        self._raise_for_status(resp)
        return CleanupResult.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Dashboard & score
    # ------------------------------------------------------------------

    def get_dashboard_filters(self) -> DashboardFilters:
        return DashboardFilters.model_validate(self._get("/api/dashboard"))

    def get_dashboard_data(
        self, start_date: str | None = None, end_date: str | None = None,
    ) -> DashboardServices:
        data = self._get("/api/dashboard-data", params=_date_params(start_date, end_date))
        return DashboardServices.model_validate(data)

    def get_score(self, user_id: str) -> ScoreData:
        return ScoreData.model_validate(self._get(f"/api/score/{user_id}"))

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def stream_import(
        self, filename: str, content: bytes, content_type: str,
    ) -> Iterator[ImportEvent]:
        """Upload a spreadsheet and yield progress events as they arrive.

        Transport failures mid-stream surface as ``APIError`` with status 0.
        """
        try:
            with self._client.stream(
                "POST",
                "/api/import",
                files={"planilha": (filename, content, content_type)},
                timeout=settings.IMPORT_TIMEOUT,
            ) as resp:
                if not resp.is_success:
                    resp.read()
                    self._raise_for_status(resp)
                logger.info("Import of %s started", filename)
                yield from iter_events(resp.iter_bytes())
        except httpx.TransportError as exc:
            logger.error("Import of %s lost its connection: %s", filename, exc)
            raise APIError(0, f"Connection error: {exc}") from exc

    def list_import_history(self) -> list[ImportHistory]:
        return [ImportHistory.model_validate(h) for h in self._get("/api/import-history")]

    def revert_import(self, import_id: str) -> MessageResponse:
        resp = self._client.post(f"/api/revert/{import_id}")
        self._raise_for_status(resp)
        logger.info("Reverted import %s", import_id)
        return MessageResponse.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Service types & payment configuration
    # ------------------------------------------------------------------

    def list_service_types(self) -> list[ServiceType]:
        return [ServiceType.model_validate(t) for t in self._get("/api/service-types")]

    def update_service_type_points(self, type_id: int, points: int) -> ServiceType:
        payload = ServiceTypePointsUpdate(points=points)
        resp = self._client.put(f"/api/service-types/{type_id}", json=payload.to_wire())
        self._raise_for_status(resp)
        return ServiceType.model_validate(resp.json())

    def get_payment_config(self) -> PaymentConfig:
        return PaymentConfig.model_validate(self._get("/api/payment-config"))

    def update_payment_config(self, payload: PaymentConfigUpdate) -> PaymentConfig:
        resp = self._client.put("/api/payment-config", json=payload.to_wire())
        self._raise_for_status(resp)
        return PaymentConfig.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Technicians
    # ------------------------------------------------------------------

    def list_technicians(self) -> list[Technician]:
        return [Technician.model_validate(t) for t in self._get("/api/technicians")]

    def generate_credentials(self, user_id: str) -> Credentials:
        resp = self._client.post(f"/api/technicians/{user_id}/generate-credentials")
        self._raise_for_status(resp)
        return Credentials.model_validate(resp.json())

    def get_technician_report(
        self, user_id: str, start_date: str | None = None, end_date: str | None = None,
    ) -> TechnicianReport:
        data = self._get(
            f"/api/technician-report/{user_id}", params=_date_params(start_date, end_date),
        )
        return TechnicianReport.model_validate(data)

    # ------------------------------------------------------------------
    # Technician area
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> LoginResponse:
        payload = LoginRequest(username=username, password=password)
        resp = self._client.post("/api/auth/login", json=payload.to_wire())
        self._raise_for_status(resp)
        return LoginResponse.model_validate(resp.json())

    def get_technician_performance(self, token: str) -> PerformanceData:
        data = self._get("/api/technician/performance", headers=_bearer(token))
        return PerformanceData.model_validate(data)

    def get_technician_me(self, token: str) -> SessionUser:
        return SessionUser.model_validate(self._get("/api/technician/me", headers=_bearer(token)))

    # ------------------------------------------------------------------
    # Admin authentication & users
    # ------------------------------------------------------------------

    def admin_login(self, username: str, password: str) -> LoginResponse:
        payload = LoginRequest(username=username, password=password)
        resp = self._client.post("/api/admin/login", json=payload.to_wire())
        self._raise_for_status(resp)
        return LoginResponse.model_validate(resp.json())

    def get_admin_me(self, token: str) -> SessionUser:
        return SessionUser.model_validate(self._get("/api/admin/me", headers=_bearer(token)))

    def verify_admin_token(self, token: str) -> VerifyResponse:
        """Never raises for HTTP errors: a rejected token is just ``valid=False``."""
        resp = self._client.get("/api/admin/verify", headers=_bearer(token))
        if not resp.is_success:
            return VerifyResponse(valid=False)
        return VerifyResponse.model_validate(resp.json())

    def list_admin_users(self, token: str) -> list[AdminUser]:
        data = self._get("/api/admin/users", headers=_bearer(token))
        return [AdminUser.model_validate(a) for a in data]

    def create_admin_user(self, token: str, payload: AdminUserCreate) -> AdminUser:
        resp = self._client.post("/api/admin/users", json=payload.to_wire(), headers=_bearer(token))
        self._raise_for_status(resp)
        return AdminUser.model_validate(resp.json())

    def delete_admin_user(self, token: str, admin_id: str) -> None:
        resp = self._client.delete(f"/api/admin/users/{admin_id}", headers=_bearer(token))
        self._raise_for_status(resp)

    def reset_admin_password(self, token: str, admin_id: str, password: str) -> None:
        payload = PasswordReset(password=password)
        resp = self._client.put(
            f"/api/admin/users/{admin_id}/password", json=payload.to_wire(), headers=_bearer(token),
        )
        self._raise_for_status(resp)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def get_annual_summary(self, year: int) -> AnnualSummary:
        return AnnualSummary.model_validate(self._get("/api/annual-summary", params={"year": year}))

    def get_technicians_annual_payments(self, year: int) -> TechniciansAnnualResponse:
        data = self._get("/api/technicians-annual-payments", params={"year": year})
        return TechniciansAnnualResponse.model_validate(data)


# ------------------------------------------------------------------
# Streamlit helper: one client per session
# ------------------------------------------------------------------

def get_client() -> TechPointsClient:
    """Return a cached ``TechPointsClient`` for the current Streamlit session."""
    if "techpoints_api_client" not in st.session_state:
        base_url = st.session_state.get("techpoints_api_url", settings.API_URL)
        st.session_state["techpoints_api_client"] = TechPointsClient(base_url=base_url)
    return st.session_state["techpoints_api_client"]
