from collections.abc import AsyncIterable
from dataclasses import dataclass

from src.modules.chat.schemas import StreamFragment


@dataclass(frozen=True)
class TranscriptEvent:
    kind: str  # "role" or "content"
    value: str


class StreamTranscript:
    """Accumulates a fragment stream into a role and the full text."""

    def __init__(self) -> None:
        self._role: str | None = None
        self._parts: list[str] = []

    @property
    def role(self) -> str | None:
        return self._role

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def feed(self, fragment: StreamFragment) -> list[TranscriptEvent]:
        events: list[TranscriptEvent] = []
        if fragment.role and self._role is None:
            self._role = fragment.role
            events.append(TranscriptEvent("role", fragment.role))
        if fragment.content:
            self._parts.append(fragment.content)
            events.append(TranscriptEvent("content", fragment.content))
        return events

    async def consume(self, fragments: AsyncIterable[StreamFragment]) -> str:
        async for fragment in fragments:
            self.feed(fragment)
        return self.text
