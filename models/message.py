"""
models/message.py
-----------------
The slice of a Telegram update the command layer works with.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class InboundMessage:
    sender_id: str
    chat_id: str
    text: str
    display_name: str
