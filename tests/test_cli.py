import pytest
from typer.testing import CliRunner

from techpoints import cli

runner = CliRunner()


@pytest.fixture
def use_fake_backend(monkeypatch, client):
    monkeypatch.setattr(cli, "_client", lambda: client)
    return client


# ---------------------------------------------------------------------------
# pay
# ---------------------------------------------------------------------------

def test_pay_with_explicit_rules():
    result = runner.invoke(cli.app, ["pay", "1000", "--min-points", "900",
                                     "--base-payment", "100", "--point-rate", "1"])
    assert result.exit_code == 0
    assert "R$ 200,00" in result.output


def test_pay_below_minimum_uses_backend_config(use_fake_backend):
    result = runner.invoke(cli.app, ["pay", "899"])
    assert result.exit_code == 0
    assert "Minimum: 900 pts" in result.output
    assert "899 points → R$ 0,00" in result.output


def test_pay_reports_backend_failure(monkeypatch):
    from techpoints.ui.api_client import APIError

    class Down:
        def get_payment_config(self):
            raise APIError(0, "Connection error: refused")

    monkeypatch.setattr(cli, "_client", Down)
    result = runner.invoke(cli.app, ["pay", "10"])
    assert result.exit_code == 1
    assert "Connection error" in result.output


# ---------------------------------------------------------------------------
# imports
# ---------------------------------------------------------------------------

def test_upload_follows_progress(use_fake_backend, tmp_path):
    sheet = tmp_path / "march.csv"
    sheet.write_text("tecnico;servico;data\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["imports", "upload", str(sheet)])
    assert result.exit_code == 0, result.output
    assert "> Reading spreadsheet" in result.output
    assert "50.0%" in result.output
    assert "147/150 rows imported" in result.output


def test_upload_error_event_fails(use_fake_backend, backend, tmp_path):
    backend.import_lines = [{"type": "error", "msg": "Planilha inválida"}]
    sheet = tmp_path / "bad.csv"
    sheet.write_text("x\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["imports", "upload", str(sheet)])
    assert result.exit_code == 1
    assert "Planilha inválida" in result.output


def test_upload_incomplete_stream_fails(use_fake_backend, backend, tmp_path):
    backend.import_lines = [{"type": "log", "msg": "Reading spreadsheet"}]
    sheet = tmp_path / "cut.csv"
    sheet.write_text("x\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["imports", "upload", str(sheet)])
    assert result.exit_code == 1
    assert "before the import finished" in result.output


def test_upload_missing_file():
    result = runner.invoke(cli.app, ["imports", "upload", "does-not-exist.csv"])
    assert result.exit_code != 0


def test_history(use_fake_backend):
    result = runner.invoke(cli.app, ["imports", "history"])
    assert result.exit_code == 0
    assert "imp-1" in result.output
    assert "✅ Completed" in result.output


def test_revert_asks_for_confirmation(use_fake_backend, backend):
    result = runner.invoke(cli.app, ["imports", "revert", "imp-1"], input="n\n")
    assert result.exit_code == 1
    assert backend.history[0]["status"] == "CONCLUIDO"

    result = runner.invoke(cli.app, ["imports", "revert", "imp-1"], input="y\n")
    assert result.exit_code == 0
    assert backend.history[0]["status"] == "REVERTIDO"


def test_revert_unknown_import(use_fake_backend):
    result = runner.invoke(cli.app, ["imports", "revert", "nope", "--yes"])
    assert result.exit_code == 1
    assert "Importação não encontrada" in result.output


# ---------------------------------------------------------------------------
# doctor
# ---------------------------------------------------------------------------

def test_doctor_all_good(monkeypatch):
    monkeypatch.setattr("techpoints.ui.validation.validate_api_url", lambda: [])
    monkeypatch.setattr("techpoints.ui.validation.validate_backend_connection", lambda: [])
    result = runner.invoke(cli.app, ["doctor"])
    assert result.exit_code == 0
    assert "3/3 checks passed" in result.output


def test_doctor_bad_url_skips_backend(monkeypatch):
    monkeypatch.setattr("techpoints.ui.validation.validate_api_url",
                        lambda: ["Invalid API URL: 'nope'"])
    result = runner.invoke(cli.app, ["doctor"])
    assert result.exit_code == 1
    assert "Skipped" in result.output
    assert "Invalid API URL" in result.output
