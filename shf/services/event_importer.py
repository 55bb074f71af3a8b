"""Import a company's events from the external course/event calendar."""

import logging
import re
from datetime import date
from decimal import Decimal

import httpx
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from shf.core.config import settings
from shf.db.models.event import Event as EventModel

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"[A-Za-z0-9_\-]+")


class EventImportError(Exception):
    """Base class for failures the calendar reports about a company key."""


class InvalidKeyError(EventImportError):
    """The key does not belong to any calendar."""


class MalformedKeyError(EventImportError):
    """The key has characters that cannot be sent in a request."""


class ExternalEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    external_id: str = Field(alias="id")
    name: str
    description: str | None = None
    location: str | None = None
    fee: Decimal | None = None
    start_date: date = Field(alias="start")
    sign_up_url: str | None = Field(default=None, alias="url")


class EventsImporter:
    def __init__(
        self,
        api_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_url = api_url or settings.events_api_url
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.transport = transport

    def fetch(self, key: str) -> list[ExternalEvent]:
        if not _KEY_RE.fullmatch(key):
            raise MalformedKeyError(f"Calendar key {key!r} contains invalid characters")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.api_url, params={"company_key": key})
        except httpx.InvalidURL as e:
            raise MalformedKeyError(str(e)) from e

        if response.status_code == 404:
            raise InvalidKeyError(f"No calendar found for key {key!r}")
        response.raise_for_status()

        payload = response.json()
        if isinstance(payload, dict) and payload.get("error") == "invalid_key":
            raise InvalidKeyError(f"No calendar found for key {key!r}")

        items = payload.get("events", []) if isinstance(payload, dict) else payload
        return [ExternalEvent.model_validate(item) for item in items]

    def import_events(self, db: Session, company, start_date: date) -> list[EventModel]:
        """Attach the calendar's events starting on or after ``start_date`` to the company.

        Raises:
            InvalidKeyError: If the calendar does not know the company's key
            MalformedKeyError: If the key cannot be used in a request
        """
        external_events = self.fetch(company.calendar_key)

        created = []
        for external in external_events:
            if external.start_date < start_date:
                continue
            event = EventModel(
                external_id=external.external_id,
                name=external.name,
                description=external.description,
                location=external.location,
                fee=external.fee,
                start_date=external.start_date,
                sign_up_url=external.sign_up_url,
            )
            company.events.append(event)
            created.append(event)

        db.flush()
        logger.info(
            "Imported %d events for company %s (calendar key %s)",
            len(created),
            company.id,
            company.calendar_key,
        )
        return created
