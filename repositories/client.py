"""
Client configuration and connection setup.

This module contains *only* settings loading and connection construction:
- an `httpx.Client` for the remote spreadsheet endpoint (API side)
- a `gspread` client for the Google Sheets tables (endpoint server side)

Environment variables (read from the process and from `.env` in the project
root):
- VYAPAR_API_URL: deployment URL of the spreadsheet endpoint
- VYAPAR_USE_MOCK: "true"/"1"/"yes" to answer every call from the mock store
- VYAPAR_TIMEOUT: HTTP timeout in seconds (default 30)
- VYAPAR_CACHE_DIR: directory for the offline cache (default ./.vyapar_cache)
- VYAPAR_SHEETS_BACKEND: "memory" (default) or "gspread" for the endpoint server
- GOOGLE_SA_JSON: service-account credentials JSON (gspread backend)
- VYAPAR_SPREADSHEET_IDS: "products=<id>,customers=<id>,sales=<id>,settings=<id>"
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

import httpx
from dotenv import load_dotenv

# Load environment variables from the .env file in the project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
SHEET_NAMES = ("products", "customers", "sales", "settings")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime configuration for the data layer."""

    api_url: Optional[str] = None
    use_mock: bool = False
    timeout: float = 30.0
    cache_dir: Path = Path(".vyapar_cache")
    sheets_backend: str = "memory"
    service_account_json: Optional[str] = None
    spreadsheet_ids: Mapping[str, str] = field(default_factory=dict)

    @property
    def remote_enabled(self) -> bool:
        return not self.use_mock and bool(self.api_url)


def _parse_spreadsheet_ids(raw: Optional[str]) -> Dict[str, str]:
    ids: Dict[str, str] = {}
    if not raw:
        return ids
    for part in raw.split(","):
        if "=" not in part:
            continue
        name, _, key = part.partition("=")
        if name.strip() and key.strip():
            ids[name.strip()] = key.strip()
    return ids


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Read settings from the environment.

    Raises:
        RuntimeError: if VYAPAR_TIMEOUT is not a number
    """
    env = os.environ if environ is None else environ

    raw_timeout = env.get("VYAPAR_TIMEOUT", "30")
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise RuntimeError(
            f"Invalid VYAPAR_TIMEOUT: {raw_timeout!r}. Set it to a number of seconds."
        ) from None

    return Settings(
        api_url=(env.get("VYAPAR_API_URL") or "").strip() or None,
        use_mock=env.get("VYAPAR_USE_MOCK", "").strip().lower() in _TRUTHY,
        timeout=timeout,
        cache_dir=Path(env.get("VYAPAR_CACHE_DIR") or ".vyapar_cache"),
        sheets_backend=(env.get("VYAPAR_SHEETS_BACKEND") or "memory").strip().lower(),
        service_account_json=env.get("GOOGLE_SA_JSON") or None,
        spreadsheet_ids=_parse_spreadsheet_ids(env.get("VYAPAR_SPREADSHEET_IDS")),
    )


def create_http_client(settings: Settings) -> httpx.Client:
    """
    HTTP client for the spreadsheet endpoint.

    Apps Script web apps answer through a redirect, so redirects are followed.
    """
    return httpx.Client(timeout=settings.timeout, follow_redirects=True)


def create_sheets_client(settings: Settings):
    """
    Authorized gspread client built from service-account credentials.

    Raises:
        RuntimeError: if GOOGLE_SA_JSON is not set
    """
    if not settings.service_account_json:
        raise RuntimeError(
            "Missing environment variable: GOOGLE_SA_JSON. "
            "Set GOOGLE_SA_JSON to the service-account credentials JSON."
        )

    import gspread
    from google.oauth2.service_account import Credentials

    info = json.loads(settings.service_account_json)
    creds = Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)
    return gspread.authorize(creds)


__all__ = [
    "SHEET_NAMES",
    "Settings",
    "create_http_client",
    "create_sheets_client",
    "load_settings",
]
