"""
Unbound Python SDK - Messaging Resource

This module provides methods for sending SMS/MMS messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from unbound.config import Endpoints
from unbound.resources.base import BaseResource

if TYPE_CHECKING:
    from unbound.client import Unbound


class SmsResource(BaseResource):
    """
    Resource for SMS and MMS messages.

    Example:
        >>> await client.messaging.sms.send(to="+15550001111", message="hi")
    """

    async def send(
        self,
        to: str,
        from_number: Optional[str] = None,
        message: Optional[str] = None,
        template_id: Optional[str] = None,
        variables: Optional[Dict[str, Any]] = None,
        media_urls: Optional[List[str]] = None,
        webhook_url: Optional[str] = None,
    ) -> Any:
        """
        Send an SMS/MMS message.

        Args:
            to: Recipient phone number
            from_number: Sender phone number
            message: Message text
            template_id: Template to render instead of ``message``
            variables: Template variables
            media_urls: Media URLs for MMS
            webhook_url: Delivery status callback

        Returns:
            Message details
        """
        body = self._compact(
            to=to,
            **{"from": from_number},
            message=message,
            templateId=template_id,
            variables=variables,
            mediaUrls=media_urls,
            webhookUrl=webhook_url,
        )
        self._validate(
            body,
            {
                "to": {"type": "string", "required": True},
                "from": {"type": "string", "required": False},
                "message": {"type": "string", "required": False},
                "templateId": {"type": "string", "required": False},
                "variables": {"type": "object", "required": False},
                "mediaUrls": {"type": "array", "required": False},
                "webhookUrl": {"type": "string", "required": False},
            },
        )
        return await self._post(Endpoints.SMS, body)

    async def get(self, message_id: str) -> Any:
        """Get an SMS/MMS message by ID."""
        self._validate({"id": message_id}, {"id": {"type": "string", "required": True}})
        return await self._get(Endpoints.SMS_MESSAGE.format(message_id=message_id))


class MessagingResource:
    """Container for the messaging sub-resources."""

    def __init__(self, client: "Unbound") -> None:
        self.sms = SmsResource(client)
