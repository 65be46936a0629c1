"""ClaudeCompletionClient — Anthropic Claude Messages backend."""
from anthropic import AsyncAnthropic

from mealvision.constants import CLAUDE_MODEL, IMAGE_MEDIA_TYPE, PROVIDER_CLAUDE
from mealvision.llm.client import CompletionClient


class ClaudeCompletionClient(CompletionClient):
    name = PROVIDER_CLAUDE

    def __init__(self, api_key: str, model: str = CLAUDE_MODEL) -> None:
        self._model = model
        self._client = AsyncAnthropic(api_key=api_key)

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        image_base64: str | None = None,
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        image_blocks = (
            [
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": IMAGE_MEDIA_TYPE,
                        "data": image_base64,
                    },
                }
            ]
            if image_base64
            else []
        )
        system_kwargs = {"system": system} if system else {}
        message = await self._client.messages.create(
            model=self._model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[
                {
                    "role": "user",
                    "content": [*image_blocks, {"type": "text", "text": prompt}],
                }
            ],
            **system_kwargs,
        )
        text = "".join(
            getattr(block, "text", "") for block in message.content if block.type == "text"
        )
        return text or None
