"""CompletionClient — abstract base for chat-completion backends."""
from abc import ABC, abstractmethod


class CompletionClient(ABC):
    name: str = "completion"

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        image_base64: str | None = None,
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        """Send one chat turn (optionally with a JPEG image) and return the reply text. Raises on failure."""
        ...
