"""OpenAICompletionClient — OpenAI GPT-4o chat-completions backend."""
from openai import AsyncOpenAI

from mealvision.constants import IMAGE_DETAIL, IMAGE_MEDIA_TYPE, OPENAI_MODEL, PROVIDER_OPENAI
from mealvision.llm.client import CompletionClient


class OpenAICompletionClient(CompletionClient):
    name = PROVIDER_OPENAI

    def __init__(self, api_key: str, model: str = OPENAI_MODEL) -> None:
        self._model = model
        self._client = AsyncOpenAI(api_key=api_key)

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        image_base64: str | None = None,
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        match image_base64:
            case str() as data if data:
                user_content: str | list[dict] = [
                    {"type": "text", "text": prompt},
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{IMAGE_MEDIA_TYPE};base64,{data}",
                            "detail": IMAGE_DETAIL,
                        },
                    },
                ]
            case _:
                user_content = prompt

        system_messages = [{"role": "system", "content": system}] if system else []
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[*system_messages, {"role": "user", "content": user_content}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        match response.choices:
            case [first, *_]:
                return first.message.content
            case _:
                return None
