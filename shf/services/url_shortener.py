import logging

import httpx

from shf.core.config import settings

logger = logging.getLogger(__name__)


class UrlShortener:
    """Shortens URLs through a TinyURL-style API (GET ?url=... returns the short URL as text)."""

    def __init__(
        self,
        api_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_url = api_url if api_url is not None else settings.url_shortener_api_url
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.transport = transport

    def shorten(self, url: str) -> str | None:
        """Return the short URL, or None if the service is not configured or fails."""
        if not self.api_url:
            logger.warning("URL shortener not configured - cannot shorten %s", url)
            return None
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.api_url, params={"url": url})
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Shortening %s failed: %s", url, e)
            return None

        short_url = response.text.strip()
        if not short_url.startswith("http"):
            logger.warning("URL shortener returned an unexpected body for %s: %r", url, short_url[:100])
            return None
        return short_url
