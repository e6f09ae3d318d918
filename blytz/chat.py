from __future__ import annotations

from typing import List, Optional, Protocol

from .catalog import CatalogSnapshot
from .config import settings
from .console import warn
from .errors import ValidationError
from .schemas import ChatTurn

DEFAULT_PERSONA = (
    "You are Blytz, the shopping assistant of a fast-paced streetwear and tech marketplace. "
    "Be upbeat and brief (at most three sentences). Only recommend products from the catalog "
    "you are given, quote their prices exactly, and say so when nothing fits."
)


class TextGenerator(Protocol):
    def generate_text(self, system: str, user: str) -> str: ...


class ChatAssistant:
    """Single request per user turn; the transcript is the only state."""

    def __init__(
        self,
        generator: TextGenerator,
        catalog: CatalogSnapshot,
        persona: str = DEFAULT_PERSONA,
        fallback: Optional[str] = None,
    ) -> None:
        self.generator = generator
        self.catalog = catalog
        self.persona = persona
        self.fallback = fallback or settings.chat_fallback_message
        self.transcript: List[ChatTurn] = []

    def build_prompt(self, text: str) -> str:
        return f"Catalog:\n{self.catalog.summary()}\n\nCustomer: {text}"

    def send(self, text: str) -> ChatTurn:
        """Append the user turn, ask the model once, append and return the reply."""

        if not text or not text.strip():
            raise ValidationError("Message is empty", ["text"])
        self.transcript.append(ChatTurn(role="user", text=text.strip()))

        try:
            reply = self.generator.generate_text(self.persona, self.build_prompt(text.strip()))
        except Exception as exc:  # noqa: BLE001
            warn("Chat request failed", exc)
            reply = self.fallback

        turn = ChatTurn(role="assistant", text=reply)
        self.transcript.append(turn)
        return turn

    def reset(self) -> None:
        self.transcript.clear()
