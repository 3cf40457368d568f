"""GovContracts — SAM.gov Opportunities API Client.

Resolves the posted-date window, builds the search URL and performs exactly
one GET per run. Transport failures are folded into a FetchOutcome instead of
being raised, so the run can still record the failed attempt.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from urllib.parse import quote, urlencode

import httpx

from govcontracts.core.logging import get_logger, redact_api_keys
from govcontracts.models.run_models import FetchOutcome, PostedWindow

logger = get_logger("sam.client")

SAM_BASE_URL = "https://api.sam.gov/opportunities/v2/search"
PAGE_LIMIT = 1000
DATE_FORMAT = "%m/%d/%Y"
DEFAULT_WINDOW_DAYS = 7


def resolve_window(
    posted_from: Optional[str] = None,
    posted_to: Optional[str] = None,
    today: Optional[date] = None,
) -> PostedWindow:
    """Use both overrides verbatim (trimmed), else the last 7 days in UTC.

    A single override is ignored: partial windows are not supported.
    """
    start = (posted_from or "").strip()
    end = (posted_to or "").strip()
    if start and end:
        return PostedWindow(posted_from=start, posted_to=end)

    today = today or datetime.now(timezone.utc).date()
    return PostedWindow(
        posted_from=(today - timedelta(days=DEFAULT_WINDOW_DAYS)).strftime(DATE_FORMAT),
        posted_to=today.strftime(DATE_FORMAT),
    )


@dataclass(frozen=True)
class SamRequest:
    """A fully built search request. The URL carries the API key."""

    url: str
    window: PostedWindow

    def redacted_url(self) -> str:
        return redact_api_keys(self.url)


def build_request(
    api_key: str,
    window: PostedWindow,
    base_url: str = SAM_BASE_URL,
    limit: int = PAGE_LIMIT,
) -> SamRequest:
    """Percent-encode the key and dates into the fixed query string."""
    query = urlencode(
        [
            ("api_key", api_key),
            ("postedFrom", window.posted_from),
            ("postedTo", window.posted_to),
            ("limit", str(limit)),
        ],
        quote_via=quote,
        safe="",
    )
    return SamRequest(url=f"{base_url}?{query}", window=window)


class SamClient:
    """Async HTTP client for the SAM.gov search endpoint."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def execute(self, request: SamRequest) -> FetchOutcome:
        """Single GET, no retry. Non-2xx bodies are kept for the raw store."""
        client = await self._get_client()
        logger.info(
            f"GET {request.redacted_url()}",
            extra={
                "posted_from": request.window.posted_from,
                "posted_to": request.window.posted_to,
            },
        )

        try:
            resp = await client.get(request.url)
        except httpx.HTTPError as e:
            logger.error(f"Transport error calling SAM.gov: {e!r}")
            return FetchOutcome(
                status_code=None,
                body="",
                is_success=False,
                transport_error=str(e) or e.__class__.__name__,
            )

        outcome = FetchOutcome(
            status_code=resp.status_code,
            body=resp.text,
            is_success=resp.is_success,
        )
        log = logger.info if outcome.is_success else logger.warning
        log(
            f"SAM.gov responded {resp.status_code} ({len(outcome.body)} chars)",
            extra={"status_code": resp.status_code},
        )
        return outcome
