import mimetypes
import sys
from pathlib import Path

import typer

from techpoints.config import settings
from techpoints.logging import logger, get_session_id
from techpoints.services.formatting import format_currency, format_datetime, status_label
from techpoints.services.import_stream import ImportProgress
from techpoints.services.payment_service import calculate_payment

app = typer.Typer(no_args_is_help=True)


def _client():
    from techpoints.ui.api_client import TechPointsClient
    return TechPointsClient()


@app.callback()
def main():
    """
    Technician points CLI.
    """
    pass


@app.command(name="doctor")
def doctor():
    """
    Check configuration and backend reachability.
    """
    from techpoints.ui.validation import validate_api_url, validate_backend_connection

    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 Technician Points Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python:     {sys.version.split()[0]}")
    print(f"  Session ID: {get_session_id()}")
    passed += 1

    # ── Check 2: Configuration ───────────────────────────────────────────────
    print("\n[Configuration]")
    url_errors = validate_api_url()
    if url_errors:
        print(f"  TECHPOINTS_API_URL:   ❌ {settings.API_URL}")
        failures.extend(url_errors)
    else:
        print(f"  TECHPOINTS_API_URL:   ✅ {settings.API_URL}")
        passed += 1
    print(f"  REQUEST_TIMEOUT:      {settings.REQUEST_TIMEOUT}s")
    print(f"  IMPORT_TIMEOUT:       {settings.IMPORT_TIMEOUT}s")
    print(f"  APP_BASE_URL:         {settings.APP_BASE_URL}")

    # ── Check 3: Backend ─────────────────────────────────────────────────────
    print("\n[Backend]")
    if url_errors:
        print("  Reachability:         ⚠️  Skipped (invalid API URL)")
    else:
        conn_errors = validate_backend_connection()
        if conn_errors:
            print("  Reachability:         ❌ Unreachable")
            failures.extend(conn_errors)
        else:
            print("  Reachability:         ✅ OK")
            passed += 1

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed, all good ✅")
        print()


@app.command(name="pay")
def pay(
    points: int = typer.Argument(..., help="Points earned in the cycle"),
    min_points: int | None = typer.Option(None, help="Override the configured minimum"),
    base_payment: float | None = typer.Option(None, help="Override the configured base payment"),
    point_rate: float | None = typer.Option(None, help="Override the configured rate per point"),
):
    """Compute a technician payment, using the backend configuration for unset rules."""
    if None in (min_points, base_payment, point_rate):
        from techpoints.ui.api_client import APIError
        try:
            config = _client().get_payment_config()
        except APIError as e:
            print(f"❌ Failed to load payment configuration: {e.detail}")
            raise typer.Exit(code=1)
        min_points = config.min_points if min_points is None else min_points
        base_payment = config.base_payment if base_payment is None else base_payment
        point_rate = config.point_rate if point_rate is None else point_rate

    payment = calculate_payment(points, min_points, base_payment, point_rate)
    print(f"Minimum: {min_points} pts | Base: {format_currency(base_payment)} | "
          f"Per point: {format_currency(point_rate)}")
    print(f"{points} points → {format_currency(payment)}")


imports_app = typer.Typer(help="Spreadsheet import commands.")
app.add_typer(imports_app, name="imports")


@imports_app.command("upload")
def upload(path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True)):
    """Upload a .csv/.xlsx spreadsheet and follow its progress."""
    from techpoints.ui.api_client import APIError

    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    progress = ImportProgress(expected_rows=settings.IMPORT_PROGRESS_ROWS)
    shown_logs = 0
    try:
        for event in _client().stream_import(path.name, path.read_bytes(), content_type):
            progress.apply(event)
            for line in progress.logs[shown_logs:]:
                print(line)
            shown_logs = len(progress.logs)
            if progress.error:
                break
            if event.type == "progress":
                print(f"  {progress.percent:5.1f}%  rows={progress.processed} "
                      f"ok={progress.success} dup={progress.duplicates} "
                      f"bad_date={progress.invalid_dates}")
    except APIError as e:
        logger.error(f"Import failed: {e}")
        print(f"❌ Failed: {e.detail}")
        raise typer.Exit(code=1)

    if progress.error:
        print(f"❌ Failed: {progress.error}")
        raise typer.Exit(code=1)
    if not progress.done:
        print("❌ Stream ended before the import finished")
        raise typer.Exit(code=1)
    print(f"✅ {progress.status_text} {progress.success}/{progress.processed} rows imported "
          f"({progress.duplicates} duplicates, {progress.invalid_dates} invalid dates)")


@imports_app.command("history")
def history():
    """List previous imports."""
    from techpoints.ui.api_client import APIError
    try:
        items = _client().list_import_history()
    except APIError as e:
        print(f"❌ Failed: {e.detail}")
        raise typer.Exit(code=1)

    if not items:
        print("No imports found.")
        return

    for item in items:
        print(f"{item.id}  {format_datetime(item.created_at)}  {item.row_count:>6} rows  "
              f"{status_label(item.status)}  {item.filename}")


@imports_app.command("revert")
def revert(
    import_id: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Undo an import, removing every service it created."""
    from techpoints.ui.api_client import APIError

    if not yes:
        typer.confirm(f"Revert import {import_id}? All of its records will be removed.", abort=True)
    try:
        result = _client().revert_import(import_id)
    except APIError as e:
        print(f"❌ Failed: {e.detail}")
        raise typer.Exit(code=1)
    print(f"✅ {result.message}")


if __name__ == "__main__":
    app()
