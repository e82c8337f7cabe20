"""
Outbound message value and sender.
"""

from dataclasses import dataclass
from typing import Optional, Union

from teleshop.core.interfaces import Markup, MessagingTransport


@dataclass(frozen=True)
class Reply:
    """Message to send: plain text, or a photo with the text as caption."""
    text: str
    reply_markup: Optional[Markup] = None
    photo: Optional[Union[bytes, str]] = None


async def send_reply(transport: MessagingTransport, chat_id: int, reply: Reply) -> None:
    if reply.photo is not None:
        await transport.send_photo(chat_id, reply.photo, reply.text, reply.reply_markup)
    else:
        await transport.send_text(chat_id, reply.text, reply.reply_markup)
