"""Fetch the lot collection once and bootstrap an engine with it.

The fetch is the only asynchronous step. Whatever happens, the loading
indicator is dismissed; on failure the user gets a notice and the map
stays basemap-only.
"""

from __future__ import annotations

from pathlib import Path

import httpx
from loguru import logger

from lotmap.engine import LotMapEngine
from lotmap.errors import FeatureCollectionError, LotMapError
from lotmap.layers import LotLayer, parse_lots

LOAD_FAILURE_NOTICE = "Error loading property data. Please refresh the page."

_FETCH_TIMEOUT = 15.0


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def fetch_lots(source: str | Path, client: httpx.AsyncClient | None = None) -> LotLayer:
    """Fetch and parse a lot FeatureCollection.

    Args:
        source: http(s) URL or local file path.
        client: Optional shared AsyncClient (a short-lived one is used otherwise).

    Raises:
        FeatureCollectionError: On HTTP, I/O or parse failure.
    """
    source = str(source)
    if _is_url(source):
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=_FETCH_TIMEOUT) as own_client:
                    resp = await own_client.get(source)
            else:
                resp = await client.get(source)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise FeatureCollectionError(f"Fetching {source} failed: {e}") from e
        content: str | bytes = resp.content
    else:
        try:
            content = Path(source).expanduser().read_bytes()
        except OSError as e:
            raise FeatureCollectionError(f"Reading {source} failed: {e}") from e

    layer = parse_lots(content)
    logger.info(f"Fetched {len(layer)} lots from {source}")
    return layer


class LoadingIndicator:
    """Loading spinner plus the failure notice shown to the user."""

    def __init__(self) -> None:
        self.loading = False
        self.notice: str | None = None

    def show(self) -> None:
        self.loading = True
        self.notice = None

    def hide(self) -> None:
        self.loading = False

    def fail(self, notice: str) -> None:
        self.notice = notice

    def to_dict(self) -> dict:
        return {"loading": self.loading, "notice": self.notice}


async def bootstrap(
    engine: LotMapEngine,
    source: str | Path,
    indicator: LoadingIndicator,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Fetch the lots and load them into the engine.

    Returns:
        True if the map loaded, False if the failure notice was raised.
    """
    indicator.show()
    try:
        layer = await fetch_lots(source, client=client)
        engine.load(layer)
        return True
    except LotMapError as e:
        logger.error(f"Error loading lots data: {e}")
        indicator.fail(LOAD_FAILURE_NOTICE)
        return False
    except Exception as e:
        logger.error(f"Unexpected error loading lots data: {e!r}")
        indicator.fail(LOAD_FAILURE_NOTICE)
        return False
    finally:
        indicator.hide()
