# modloom/resources/reports_client.py
"""Client for reporting games, mods and users to mod.io."""

from ..constants import ReportResource, ReportType
from ..log_config import logger
from ..models import Message
from ..routing import Routes
from .base_client import BaseResourceClient


class ReportsClient(BaseResourceClient):
    """Client for the mod.io `/report` endpoint."""

    async def submit(
        self,
        resource: ReportResource,
        resource_id: int,
        kind: ReportType,
        summary: str,
        *,
        name: str | None = None,
        contact: str | None = None,
    ) -> Message:
        """Reports a game, mod or user. Requires a token.

        Args:
            resource: The kind of resource reported.
            resource_id: The id of the reported resource.
            kind: The type of report.
            summary: Why the resource is reported.
            name: Name of the reporter, used for DMCA reports.
            contact: Contact details of the reporter.

        Returns:
            Message: The acknowledgement of mod.io.
        """
        logger.info(f"Reporting {resource.value} {resource_id} ({kind.name})")
        return await self._api_client.request(
            Routes.submit_report(),
            model=Message,
            body={
                "resource": resource.value,
                "id": str(resource_id),
                "type": str(kind.value),
                "summary": summary,
                "name": name,
                "contact": contact,
            },
        )
