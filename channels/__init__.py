"""
Outbound message channels for Form Architect.
"""

from .base import ChannelMessage, ChannelProvider, ChannelResponse
from .email import LogOnlyEmail, SendGridEmail, build_email_channel

__all__ = [
    "ChannelMessage",
    "ChannelProvider",
    "ChannelResponse",
    "LogOnlyEmail",
    "SendGridEmail",
    "build_email_channel",
]
