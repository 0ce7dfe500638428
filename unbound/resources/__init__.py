"""
Unbound Python SDK - Resources

This module contains the API resource classes.
"""

from unbound.resources.base import BaseResource
from unbound.resources.ai import (
    AIResource,
    GenerativeResource,
    SpeechToTextResource,
    TextToSpeechResource,
)
from unbound.resources.messaging import MessagingResource, SmsResource
from unbound.resources.storage import StorageResource

__all__ = [
    "BaseResource",
    "AIResource",
    "GenerativeResource",
    "TextToSpeechResource",
    "SpeechToTextResource",
    "MessagingResource",
    "SmsResource",
    "StorageResource",
]
