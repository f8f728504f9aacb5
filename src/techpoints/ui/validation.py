"""Pre-flight checks for the Streamlit UI and the ``doctor`` command."""
from typing import List
from urllib.parse import urlparse

from techpoints.config import settings


def validate_api_url() -> List[str]:
    """The configured backend URL must be an absolute http(s) URL."""
    errors = []
    parsed = urlparse(settings.API_URL)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        errors.append(f"Invalid API URL: {settings.API_URL!r}")
    return errors


def validate_backend_connection() -> List[str]:
    """Validate that the backend is reachable."""
    errors = []
    try:
        from techpoints.ui.api_client import TechPointsClient
        client = TechPointsClient()
        try:
            client.get_dashboard_filters()
        finally:
            client.close()
    except Exception as e:
        errors.append(f"Backend connection failed: {e}")
    return errors


def run_all_checks() -> List[str]:
    """Run all validation checks."""
    errors = []
    errors.extend(validate_api_url())
    if not errors:
        errors.extend(validate_backend_connection())
    return errors
