"""Service-account access tokens for the Google Sheets API."""

import asyncio
import json
import logging
from dataclasses import dataclass, field

from google.auth.transport.requests import Request
from google.oauth2.service_account import Credentials

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def parse_service_account(raw: str) -> dict[str, object]:
    """Parse service-account JSON and check the fields token minting needs."""
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid Google credentials format") from exc
    if not isinstance(info, dict):
        raise ValueError("Invalid Google credentials format")
    if not info.get("client_email") or not info.get("private_key"):
        raise ValueError("Google credentials missing required fields")
    return info


@dataclass
class ServiceAccountTokenProvider:
    """Mint and refresh bearer tokens from a service account."""

    info: dict[str, object]
    scopes: list[str] = field(default_factory=lambda: list(SHEETS_SCOPES))
    _credentials: Credentials | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_json(cls, raw: str) -> "ServiceAccountTokenProvider":
        """Build a provider from the raw service-account JSON."""
        return cls(info=parse_service_account(raw))

    async def __call__(self) -> str:
        """Return a valid access token, refreshing it off the event loop."""
        if self._credentials is None:
            self._credentials = Credentials.from_service_account_info(
                self.info, scopes=self.scopes
            )
            logger.info("Using service account %s", self.info.get("client_email"))
        if not self._credentials.valid:
            await asyncio.to_thread(self._credentials.refresh, Request())
        return str(self._credentials.token)
