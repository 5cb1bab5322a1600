"""Google Sheets values API client used as the row store."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError

from attendance_ledger.adapters.google_auth import ServiceAccountTokenProvider
from attendance_ledger.domain.errors import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

SHEETS_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"

ATTENDEES_TABLE = "Attendees"
SESSIONS_TABLE = "Sessions"
ATTENDANCE_TABLE = "Attendance"

TABLE_WIDTHS = {
    ATTENDEES_TABLE: 5,
    SESSIONS_TABLE: 9,
    ATTENDANCE_TABLE: 6,
}

Row = list[str]

# Anything that keeps a request from yielding rows counts as a store failure.
_STORE_ERRORS = (httpx.HTTPError, GoogleAuthError, ValueError)


class SheetStore(Protocol):
    """Row-oriented store interface over named tables."""

    async def list_rows(self, table: str) -> list[Row]:
        """Return every row of a table, header first."""

    async def append_rows(self, table: str, rows: Sequence[Row]) -> None:
        """Append rows to the end of a table in one call."""

    async def update_row(self, table: str, index: int, row: Row) -> None:
        """Overwrite the row at a 0-based index (the header is index 0)."""

    async def clear_row(self, table: str, index: int) -> None:
        """Blank the row at a 0-based index, keeping its position."""


@dataclass
class HttpxSheetsClient(SheetStore):
    """HTTPX-backed Google Sheets store."""

    spreadsheet_id: str
    http_client: httpx.AsyncClient
    token_provider: Callable[[], Awaitable[str]]
    base_url: str = SHEETS_BASE_URL
    timeout: float = 15
    widths: dict[str, int] = field(default_factory=lambda: dict(TABLE_WIDTHS))

    @classmethod
    def create(
        cls,
        spreadsheet_id: str,
        credentials_json: str,
        base_url: str = SHEETS_BASE_URL,
        timeout: float = 15,
    ) -> "HttpxSheetsClient":
        """Create a Sheets client with a managed httpx session."""
        return cls(
            spreadsheet_id=spreadsheet_id,
            http_client=httpx.AsyncClient(),
            token_provider=ServiceAccountTokenProvider.from_json(credentials_json),
            base_url=base_url,
            timeout=timeout,
        )

    async def list_rows(self, table: str) -> list[Row]:
        """Fetch all values in the table's column range."""
        try:
            response = await self.http_client.get(
                self._values_url(self._range(table)),
                headers=await self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
            values = response.json().get("values", [])
        except _STORE_ERRORS as exc:
            raise StoreReadError(f"Failed to read {table} rows") from exc
        return [[str(cell) for cell in row] for row in values]

    async def append_rows(self, table: str, rows: Sequence[Row]) -> None:
        """Append rows with a single values:append request."""
        if not rows:
            return
        await self._write(
            "post",
            f"{self._values_url(self._range(table))}:append",
            table,
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            json={"values": [list(row) for row in rows]},
        )
        logger.info("Appended %d row(s) to %s", len(rows), table)

    async def update_row(self, table: str, index: int, row: Row) -> None:
        """Overwrite a single row in place."""
        await self._write(
            "put",
            self._values_url(self._row_range(table, index)),
            table,
            params={"valueInputOption": "RAW"},
            json={"values": [list(row)]},
        )

    async def clear_row(self, table: str, index: int) -> None:
        """Clear a single row; the sheet keeps the blank line."""
        await self._write(
            "post",
            f"{self._values_url(self._row_range(table, index))}:clear",
            table,
            json={},
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _write(
        self,
        method: str,
        url: str,
        table: str,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> None:
        try:
            response = await self.http_client.request(
                method.upper(),
                url,
                params=params,
                json=json,
                headers=await self._headers(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except _STORE_ERRORS as exc:
            raise StoreWriteError(f"Failed to write {table} rows") from exc

    async def _headers(self) -> dict[str, str]:
        token = await self.token_provider()
        return {"Authorization": f"Bearer {token}"}

    def _values_url(self, a1_range: str) -> str:
        return (
            f"{self.base_url}/{self.spreadsheet_id}/values/"
            f"{quote(a1_range, safe='!:')}"
        )

    def _range(self, table: str) -> str:
        return f"{table}!A:{_column_letter(self._width(table))}"

    def _row_range(self, table: str, index: int) -> str:
        if index < 1:
            raise ValueError("Row index must point past the header row")
        sheet_row = index + 1
        last = _column_letter(self._width(table))
        return f"{table}!A{sheet_row}:{last}{sheet_row}"

    def _width(self, table: str) -> int:
        return self.widths.get(table, 26)


def _column_letter(position: int) -> str:
    """Convert a 1-based column position to A1 letters."""
    letters = ""
    while position > 0:
        position, remainder = divmod(position - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters
