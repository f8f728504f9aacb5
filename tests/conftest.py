"""Shared test fixtures.

backend  an in-process FastAPI stand-in for the REST API, with canned data
         and a log of every request it received.
client   TechPointsClient wired to ``backend`` through FastAPI's TestClient
         (an ``httpx.Client``), so no network is involved.
"""
import json

import pytest
from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse, StreamingResponse

ADMIN_TOKEN = "admin-token"
TECH_TOKEN = "tech-token"

USERS = [
    {"id": "u1", "name": "Ana Souza", "createdAt": "2024-01-10T12:00:00.000Z"},
    {"id": "u2", "name": "Bruno Lima", "createdAt": "2024-02-01T08:30:00.000Z"},
]
TYPES = [
    {"id": 1, "name": "Installation", "points": 10},
    {"id": 2, "name": "Repair", "points": 4},
]


def make_service(sid: int, user: dict, stype: dict, performed_at: str) -> dict:
    return {
        "id": sid,
        "performedAt": performed_at,
        "userId": user["id"],
        "user": user,
        "serviceTypeId": stype["id"],
        "serviceType": stype,
        "importId": "imp-1",
    }


SERVICES = [
    make_service(1, USERS[0], TYPES[0], "2024-03-01T09:00:00.000Z"),
    make_service(2, USERS[0], TYPES[1], "2024-03-01T15:00:00.000Z"),
    make_service(3, USERS[1], TYPES[1], "2024-03-02T10:00:00.000Z"),
]

PAYMENT_CONFIG = {
    "id": 1,
    "minPoints": 900,
    "basePayment": 100,
    "pointRate": 1,
    "cycleStartDay": 24,
    "cycleEndDay": 25,
    "updatedAt": "2024-03-01T00:00:00.000Z",
}

IMPORT_LINES = [
    {"type": "log", "msg": "Reading spreadsheet"},
    {"type": "progress", "processed": 100, "success": 98, "duplicados": 1, "dataInvalida": 1},
    {"type": "done", "total": 150, "success": 147, "duplicados": 2, "dataInvalida": 1},
]


class FakeBackend:
    def __init__(self) -> None:
        self.requests: list[Request] = []
        self.bodies: list[dict] = []
        self.history = [
            {"id": "imp-1", "filename": "march.xlsx", "createdAt": "2024-03-03T10:00:00.000Z",
             "status": "CONCLUIDO", "rowCount": 3},
        ]
        self.import_lines: list[dict] = list(IMPORT_LINES)
        self.payment_config = dict(PAYMENT_CONFIG)
        self.types = [dict(t) for t in TYPES]
        self.admins = [
            {"id": "a1", "name": "Root", "username": "root",
             "createdAt": "2024-01-01T00:00:00.000Z", "lastLogin": None},
        ]
        self.app = self._build_app()

    def _auth(self, authorization: str | None, token: str) -> JSONResponse | None:
        if authorization != f"Bearer {token}":
            return JSONResponse(status_code=401, content={"error": "Token inválido"})
        return None

    def _build_app(self) -> FastAPI:
        app = FastAPI()
        backend = self

        @app.middleware("http")
        async def record(request: Request, call_next):
            backend.requests.append(request)
            return await call_next(request)

        @app.get("/api/dashboard")
        def dashboard():
            return {"users": USERS, "types": backend.types}

        @app.get("/api/dashboard-data")
        def dashboard_data():
            return {"services": SERVICES, "count": len(SERVICES)}

        @app.get("/api/admin")
        def admin_data():
            users = [dict(u, services=[s for s in SERVICES if s["userId"] == u["id"]]) for u in USERS]
            return {"users": users, "history": backend.history}

        @app.get("/api/score/{user_id}")
        def score(user_id: str):
            if user_id != "u1":
                return JSONResponse(status_code=404, content={"error": "Usuário não encontrado"})
            return {
                "user": USERS[0],
                "totalScore": 14,
                "detail": {"Installation": {"count": 1, "points": 10},
                           "Repair": {"count": 1, "points": 4}},
            }

        @app.post("/api/cleanup")
        def cleanup():
            return {"message": "ok", "count": 2}

        @app.post("/api/revert/{import_id}")
        def revert(import_id: str):
            for h in backend.history:
                if h["id"] == import_id:
                    h["status"] = "REVERTIDO"
                    return {"message": "Importação revertida"}
            return JSONResponse(status_code=404, content={"error": "Importação não encontrada"})

        @app.post("/api/import")
        async def do_import(request: Request):
            body = await request.body()
            if b'name="planilha"' not in body:
                return JSONResponse(status_code=400, content={"error": "Nenhum arquivo enviado"})

            def lines():
                for obj in backend.import_lines:
                    yield (json.dumps(obj) + "\n").encode()

            return StreamingResponse(lines(), media_type="application/x-ndjson")

        @app.get("/api/import-history")
        def import_history():
            return backend.history

        @app.get("/api/service-types")
        def service_types():
            return backend.types

        @app.put("/api/service-types/{type_id}")
        def update_type(type_id: int, body: dict):
            backend.bodies.append(body)
            for t in backend.types:
                if t["id"] == type_id:
                    t["points"] = body["points"]
                    return t
            return JSONResponse(status_code=404, content={"error": "Tipo não encontrado"})

        @app.get("/api/payment-config")
        def get_config():
            return backend.payment_config

        @app.put("/api/payment-config")
        def put_config(body: dict):
            backend.bodies.append(body)
            backend.payment_config.update(body)
            return backend.payment_config

        @app.get("/api/technicians")
        def technicians():
            return [
                {"id": "u1", "name": "Ana Souza", "createdAt": "2024-01-10T12:00:00.000Z",
                 "hasCredentials": True, "username": "ana.souza",
                 "lastLogin": "2024-03-05T18:00:00.000Z"},
                {"id": "u2", "name": "Bruno Lima", "createdAt": "2024-02-01T08:30:00.000Z",
                 "hasCredentials": False, "username": None, "lastLogin": None},
            ]

        @app.post("/api/technicians/{user_id}/generate-credentials")
        def generate(user_id: str):
            return {"username": f"tech.{user_id}", "password": "s3cret!", "message": "Credenciais geradas"}

        @app.post("/api/auth/login")
        def tech_login(body: dict):
            if body.get("password") != "right":
                return JSONResponse(status_code=401, content={"error": "Usuário ou senha inválidos"})
            return {"token": TECH_TOKEN, "user": {"id": "u1", "name": "Ana Souza", "username": "ana.souza"}}

        @app.get("/api/technician/performance")
        def performance(authorization: str | None = Header(None)):
            denied = backend._auth(authorization, TECH_TOKEN)
            if denied:
                return denied
            return {
                "cycleStart": "2024-02-24T03:00:00.000Z",
                "cycleEnd": "2024-03-25T03:00:00.000Z",
                "totalServices": 2,
                "totalPoints": 950,
                "payment": 150,
                "byServiceType": {"Installation": {"count": 1, "points": 10, "total": 10}},
                "services": [{"id": 1, "type": "Installation", "points": 10,
                              "performedAt": "2024-03-01T09:00:00.000Z"}],
                "config": {"minPoints": 900, "basePayment": 100, "pointRate": 1},
            }

        @app.get("/api/technician/me")
        def tech_me(authorization: str | None = Header(None)):
            denied = backend._auth(authorization, TECH_TOKEN)
            if denied:
                return denied
            return {"id": "u1", "name": "Ana Souza", "username": "ana.souza"}

        @app.post("/api/admin/login")
        def admin_login(body: dict):
            if body.get("password") != "right":
                return JSONResponse(status_code=401, content={"error": "Credenciais inválidas"})
            return {"token": ADMIN_TOKEN, "user": {"id": "a1", "name": "Root", "username": "root"}}

        @app.get("/api/admin/verify")
        def verify(authorization: str | None = Header(None)):
            denied = backend._auth(authorization, ADMIN_TOKEN)
            if denied:
                return denied
            return {"valid": True, "user": {"id": "a1", "name": "Root"}}

        @app.get("/api/admin/me")
        def admin_me(authorization: str | None = Header(None)):
            denied = backend._auth(authorization, ADMIN_TOKEN)
            if denied:
                return denied
            return {"id": "a1", "name": "Root", "username": "root"}

        @app.get("/api/admin/users")
        def list_admins(authorization: str | None = Header(None)):
            denied = backend._auth(authorization, ADMIN_TOKEN)
            if denied:
                return denied
            return backend.admins

        @app.post("/api/admin/users")
        def create_admin(body: dict, authorization: str | None = Header(None)):
            denied = backend._auth(authorization, ADMIN_TOKEN)
            if denied:
                return denied
            backend.bodies.append(body)
            if any(a["username"] == body["username"] for a in backend.admins):
                return JSONResponse(status_code=409, content={"error": "Usuário já existe"})
            admin = {"id": f"a{len(backend.admins) + 1}", "name": body["name"],
                     "username": body["username"], "createdAt": "2024-03-10T00:00:00.000Z",
                     "lastLogin": None}
            backend.admins.append(admin)
            return admin

        @app.delete("/api/admin/users/{admin_id}")
        def delete_admin(admin_id: str, authorization: str | None = Header(None)):
            denied = backend._auth(authorization, ADMIN_TOKEN)
            if denied:
                return denied
            backend.admins = [a for a in backend.admins if a["id"] != admin_id]
            return {"message": "Administrador removido"}

        @app.put("/api/admin/users/{admin_id}/password")
        def reset_password(admin_id: str, body: dict, authorization: str | None = Header(None)):
            denied = backend._auth(authorization, ADMIN_TOKEN)
            if denied:
                return denied
            backend.bodies.append(body)
            return {"message": "Senha atualizada"}

        @app.get("/api/technician-report/{user_id}")
        def report(user_id: str):
            return {
                "technician": {"id": user_id, "name": "Ana Souza"},
                "startDate": None,
                "endDate": None,
                "totalPoints": 14,
                "totalServices": 2,
                "byServiceType": [
                    {"name": "Installation", "count": 1, "pointsEach": 10, "totalPoints": 10},
                    {"name": "Repair", "count": 1, "pointsEach": 4, "totalPoints": 4},
                ],
            }

        @app.get("/api/annual-summary")
        def annual_summary(year: int):
            months = [
                {"month": m, "monthName": f"M{m}", "period": f"24/{m - 1 or 12} - 25/{m}",
                 "cycleStart": "2024-01-24", "cycleEnd": "2024-02-25",
                 "totalServices": 10, "totalPoints": 1000, "qualifiedTechnicians": 1,
                 "totalTechnicians": 2, "totalPayment": 200.0}
                for m in range(1, 13)
            ]
            return {
                "year": year,
                "config": {k: PAYMENT_CONFIG[k] for k in
                           ("minPoints", "basePayment", "pointRate", "cycleStartDay", "cycleEndDay")},
                "months": months,
                "totals": {"totalPayment": 2400.0, "totalServices": 120,
                           "totalPoints": 12000, "qualifiedTechnicians": 12},
            }

        @app.get("/api/technicians-annual-payments")
        def annual_payments(year: int):
            return {
                "year": year,
                "config": {k: PAYMENT_CONFIG[k] for k in
                           ("minPoints", "basePayment", "pointRate", "cycleStartDay", "cycleEndDay")},
                "technicians": [
                    {"id": "u1", "name": "Ana Souza", "monthlyPayments": [200.0] * 12,
                     "monthlyPoints": [1000] * 12, "yearTotal": 2400.0},
                ],
                "monthlyTotals": [200.0] * 12,
                "monthlyQualified": [1] * 12,
                "monthNames": [f"M{m}" for m in range(1, 13)],
                "grandTotal": 2400.0,
            }

        return app

    def last_request(self) -> Request:
        return self.requests[-1]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(backend):
    """TechPointsClient backed by the in-process fake backend."""
    from fastapi.testclient import TestClient
    from techpoints.ui.api_client import TechPointsClient

    with TestClient(backend.app) as http:
        yield TechPointsClient(http=http)
