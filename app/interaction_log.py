import logging
from typing import Optional

import httpx

from .config import Settings

logger = logging.getLogger(__name__)


class AirtableLogger:
    """Appends one row per feedback interaction to an Airtable table."""

    def __init__(self, api_key: Optional[str], base_id: Optional[str], table: str = "Log",
                 api_url: str = "https://api.airtable.com/v0", timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.base_id = base_id
        self.table = table
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "AirtableLogger":
        return cls(
            api_key=settings.airtable_api_key,
            base_id=settings.airtable_base_id,
            table=settings.airtable_table,
            api_url=settings.airtable_api_url,
        )

    @property
    def url(self) -> str:
        return f"{self.api_url}/{self.base_id}/{self.table}"

    async def log_interaction(self, participant_id: Optional[str], group: str,
                              input_text: str, feedback: str) -> None:
        """Write the record. Failures are logged and never raised."""
        if not self.api_key or not self.base_id:
            logger.error("Airtable environment variables not set. Skipping log.")
            return

        fields = {
            "Participant_ID": participant_id,
            "Group": group,
            "Input_Text": input_text,
            "AI_Feedback": feedback,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json={"records": [{"fields": fields}]}, headers=headers)
                response.raise_for_status()
            logger.info(f"Airtable log successful for participant: {participant_id}")
        except httpx.HTTPStatusError as e:
            logger.error(f"Airtable logging failed: {e.response.status_code} - {e.response.text}")
        except httpx.RequestError as e:
            logger.error(f"Airtable logging failed: {type(e).__name__} - {e}")
        except Exception as e:
            logger.error(f"Airtable logging failed unexpectedly: {type(e).__name__} - {e}", exc_info=True)
