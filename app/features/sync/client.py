"""HTTP client for the VTEX Order Management System."""

import datetime
from collections.abc import AsyncIterator
from types import TracebackType

import httpx

from app.core.config import Settings, get_settings
from app.core.exceptions import UpstreamError
from app.core.logging import get_logger
from app.features.sync.schemas import VtexOrder, VtexOrderList

logger = get_logger(__name__)

ORDERS_PATH = "/api/oms/pvt/orders"


def invoiced_date_filter(start: datetime.date, end: datetime.date) -> str:
    """Render the OMS ``f_invoicedDate`` filter for whole days (UTC)."""
    return (
        f"invoicedDate:[{start.isoformat()}T00:00:00.000Z"
        f" TO {end.isoformat()}T23:59:59.999Z]"
    )


class VtexClient:
    """Lists invoiced orders and fetches their details.

    Use as an async context manager so the connection pool is closed.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.vtex_api_url,
                headers={
                    "Content-Type": "application/json",
                    "VtexIdclientAutCookie": self.settings.vtex_app_token,
                },
                timeout=httpx.Timeout(self.settings.vtex_timeout_seconds, connect=10.0),
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "VtexClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def list_order_pages(
        self, start: datetime.date, end: datetime.date
    ) -> AsyncIterator[list[str]]:
        """Yield order ids page by page until the OMS returns an empty list.

        Args:
            start: First invoice day.
            end: Last invoice day.

        Yields:
            Order ids of one listing page.

        Raises:
            UpstreamError: If a listing page cannot be fetched or parsed; the
                whole run is aborted.
        """
        client = self._get_client()
        page = 1
        while True:
            try:
                response = await client.get(
                    ORDERS_PATH,
                    params={
                        "page": page,
                        "per_page": self.settings.vtex_page_size,
                        "f_invoicedDate": invoiced_date_filter(start, end),
                        "f_status": "invoiced",
                    },
                )
                response.raise_for_status()
                listing = VtexOrderList.model_validate(response.json())
            except (httpx.HTTPError, ValueError) as e:
                logger.error(
                    "sync.vtex_page_failed",
                    page=page,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise UpstreamError(
                    message=f"Failed to list orders on page {page}",
                    details={"page": page, "error_type": type(e).__name__},
                ) from e

            if not listing.orders:
                logger.info("sync.vtex_listing_exhausted", pages=page - 1)
                return

            logger.info("sync.vtex_page_fetched", page=page, orders=len(listing.orders))
            yield [summary.order_id for summary in listing.orders]
            page += 1

    async def get_order(self, order_id: str) -> VtexOrder | None:
        """Fetch one order's detail.

        Args:
            order_id: OMS order id.

        Returns:
            Parsed order, or None if it could not be fetched or parsed.
        """
        try:
            response = await self._get_client().get(f"{ORDERS_PATH}/{order_id}")
            response.raise_for_status()
            return VtexOrder.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "sync.vtex_order_failed",
                order_id=order_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
