"""Analytics Sinks — best-effort product event tracking.

Invariants:
    - track() NEVER raises: every failure is logged at WARNING and swallowed
    - Events carry distinct_id = user id; no journal text, emotion or mood is ever sent
    - The Mixpanel client is created once and closed on shutdown (aclose)

Design Decisions:
    - Plain httpx POST to the /track endpoint over the mixpanel SDK: the SDK is synchronous
      and would block the event loop
    - LoggingAnalyticsSink is the default so development never needs a token
"""

import logging
import time
import uuid

import httpx

from app.config import Settings

logger = logging.getLogger(__name__)


class LoggingAnalyticsSink:
    """Writes events to the application log."""

    async def track(
        self, event_name: str, user_id: str, properties: dict | None = None,
    ) -> None:
        logger.info(
            f"Analytics event: {event_name}",
            extra={"event": event_name, "user_id": user_id},
        )

    async def aclose(self) -> None:
        return None


class MixpanelAnalyticsSink:
    """Sends events to Mixpanel's ingestion API."""

    def __init__(self, token: str, api_url: str, timeout_seconds: float = 5.0):
        self.token = token
        self.api_url = api_url
        self._client = httpx.AsyncClient(timeout=timeout_seconds)

    def _payload(self, event_name: str, user_id: str, properties: dict | None) -> list[dict]:
        return [{
            "event": event_name,
            "properties": {
                **(properties or {}),
                "token": self.token,
                "distinct_id": user_id,
                "time": int(time.time()),
                "$insert_id": uuid.uuid4().hex,
            },
        }]

    async def track(
        self, event_name: str, user_id: str, properties: dict | None = None,
    ) -> None:
        try:
            response = await self._client.post(
                self.api_url,
                json=self._payload(event_name, user_id, properties),
                headers={"Accept": "text/plain"},
            )
            response.raise_for_status()
        except Exception as e:
            logger.warning(
                f"Analytics event '{event_name}' dropped: {e}",
                extra={"event": event_name, "user_id": user_id},
            )

    async def aclose(self) -> None:
        await self._client.aclose()


def build_analytics_sink(
    settings: Settings,
) -> LoggingAnalyticsSink | MixpanelAnalyticsSink:
    """Build the configured sink. Falls back to logging without a Mixpanel token."""
    if settings.analytics_backend == "mixpanel":
        if settings.mixpanel_token:
            return MixpanelAnalyticsSink(
                settings.mixpanel_token,
                settings.mixpanel_api_url,
                settings.analytics_timeout_seconds,
            )
        logger.warning("ANALYTICS_BACKEND=mixpanel without MIXPANEL_TOKEN, using log sink")
    return LoggingAnalyticsSink()


async def safe_track(
    sink, event_name: str, user_id: str, properties: dict | None = None,
) -> None:
    """Guard for injected sinks that do not honour the non-raising contract."""
    try:
        await sink.track(event_name, user_id, properties)
    except Exception as e:
        logger.warning(
            f"Analytics sink raised on '{event_name}': {e}",
            extra={"event": event_name, "user_id": user_id},
        )
