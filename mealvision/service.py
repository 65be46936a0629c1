"""MealAnalysisService — meal photo in, normalized nutrition record out."""
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from mealvision.config import Config
from mealvision.constants import (
    ANALYSIS_MAX_TOKENS,
    ANALYSIS_TEMPERATURE,
    LANGUAGE_ENGLISH,
    LANGUAGE_HEBREW,
    MSG_ANALYSIS_DONE,
    MSG_ANALYSIS_EDITED_COUNT,
    MSG_ANALYSIS_ERROR,
    MSG_ANALYSIS_LANGUAGE,
    MSG_ANALYSIS_START,
    MSG_ANALYSIS_UPDATE_TEXT,
    MSG_BACKEND_SELECTED,
    MSG_ERR_ANALYSIS_FAILED,
    MSG_ERR_EMPTY_RESPONSE,
    MSG_ERR_UPDATE_FAILED,
    MSG_NO_BACKEND,
    MSG_PARSED_MEAL,
    MSG_REQUEST_SENT,
    MSG_RESPONSE_RECEIVED,
    MSG_TEXT_ERROR,
    MSG_UPDATE_ERROR,
    MSG_UPDATE_START,
    PROVIDER_CLAUDE,
    PROVIDER_OPENAI,
    TEXT_MAX_TOKENS,
    TEXT_TEMPERATURE,
    UPDATE_MAX_TOKENS,
    UPDATE_TEMPERATURE,
    USER_TEXT_ANALYZE,
    USER_TEXT_ANALYZE_FEEDBACK,
    USER_TEXT_EDITED_COUNT,
    USER_TEXT_UPDATE,
)
from mealvision.errors import EmptyResponseError, NotConfiguredError, translate_provider_error
from mealvision.json_extract import parse_json_object
from mealvision.llm.claude import ClaudeCompletionClient
from mealvision.llm.client import CompletionClient
from mealvision.llm.openai import OpenAICompletionClient
from mealvision.models import EditedIngredient, Ingredient, MealAnalysisResult
from mealvision.normalize import normalize_analysis, normalize_ingredients
from mealvision.prompts import build_analysis_prompt, build_update_context, build_update_prompt

logger = logging.getLogger(__name__)


def is_hebrew(language: str) -> bool:
    return language == LANGUAGE_HEBREW


def build_completion_client(config: Config) -> Optional[CompletionClient]:
    """Preferred provider's backend if its key is set, else the other one, else None."""
    openai_key, anthropic_key = config.openai_api_key, config.anthropic_api_key
    match (config.llm_provider, openai_key, anthropic_key):
        case (p, str() as k, _) if p == PROVIDER_OPENAI and k:
            return OpenAICompletionClient(k, config.openai_model)
        case (p, _, str() as k) if p == PROVIDER_CLAUDE and k:
            return ClaudeCompletionClient(k, config.claude_model)
        case (_, str() as k, _) if k:
            return OpenAICompletionClient(k, config.openai_model)
        case (_, _, str() as k) if k:
            return ClaudeCompletionClient(k, config.claude_model)
        case _:
            return None


def _analysis_user_text(update_text: str | None, edited_count: int) -> str:
    match update_text:
        case str() as text if text:
            edited = USER_TEXT_EDITED_COUNT % edited_count if edited_count else ""
            return f"{USER_TEXT_ANALYZE_FEEDBACK % text} {edited}"
        case _:
            return USER_TEXT_ANALYZE


class MealAnalysisService:
    """Sends meal photos to a completion backend and normalizes the nutrition JSON it returns.

    ``client`` is None when no credential is configured; every operation then
    raises ``NotConfiguredError`` without touching the network.
    """

    def __init__(self, client: Optional[CompletionClient]) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: Config) -> "MealAnalysisService":
        client = build_completion_client(config)
        match client:
            case None:
                logger.warning(MSG_NO_BACKEND)
            case c:
                logger.info(MSG_BACKEND_SELECTED, c.name)
        return cls(client)

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def _require_client(self) -> CompletionClient:
        match self._client:
            case None:
                raise NotConfiguredError()
            case client:
                return client

    async def _complete_json(
        self,
        client: CompletionClient,
        prompt: str,
        *,
        system: str,
        image_base64: str | None,
        max_tokens: int,
        temperature: float,
    ) -> dict[str, Any]:
        logger.info(MSG_REQUEST_SENT, client.name)
        content = await client.complete(
            prompt,
            system=system,
            image_base64=image_base64,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        match content:
            case str() as text if text.strip():
                logger.info(MSG_RESPONSE_RECEIVED, len(text))
                return parse_json_object(text)
            case _:
                raise EmptyResponseError(MSG_ERR_EMPTY_RESPONSE)

    # ── operations ────────────────────────────────────────────────────────────

    async def analyze_image(
        self,
        image_base64: str,
        language: str = LANGUAGE_ENGLISH,
        update_text: str | None = None,
        edited_ingredients: Sequence[EditedIngredient | Ingredient | Mapping[str, Any]] | None = None,
    ) -> MealAnalysisResult:
        client = self._require_client()
        hebrew = is_hebrew(language)
        edited = normalize_ingredients(list(edited_ingredients or []), hebrew)

        logger.info(MSG_ANALYSIS_START)
        logger.info(MSG_ANALYSIS_LANGUAGE, language)
        logger.info(MSG_ANALYSIS_UPDATE_TEXT, bool(update_text))
        logger.info(MSG_ANALYSIS_EDITED_COUNT, len(edited))

        system = build_analysis_prompt(hebrew)
        if update_text or edited:
            system += build_update_context(update_text, edited, hebrew)

        try:
            raw = await self._complete_json(
                client,
                _analysis_user_text(update_text, len(edited)),
                system=system,
                image_base64=image_base64,
                max_tokens=ANALYSIS_MAX_TOKENS,
                temperature=ANALYSIS_TEMPERATURE,
            )
            result = normalize_analysis(raw, hebrew)
        except Exception as exc:
            logger.error(MSG_ANALYSIS_ERROR, exc)
            raise translate_provider_error(exc, MSG_ERR_ANALYSIS_FAILED) from exc

        logger.info(MSG_PARSED_MEAL, result.name, len(result.ingredients))
        logger.info(MSG_ANALYSIS_DONE)
        return result

    async def update_analysis(
        self,
        original_analysis: MealAnalysisResult | Mapping[str, Any],
        update_text: str,
        language: str = LANGUAGE_ENGLISH,
    ) -> MealAnalysisResult:
        client = self._require_client()
        hebrew = is_hebrew(language)
        logger.info(MSG_UPDATE_START)

        try:
            raw = await self._complete_json(
                client,
                USER_TEXT_UPDATE % update_text,
                system=build_update_prompt(original_analysis, update_text, hebrew),
                image_base64=None,
                max_tokens=UPDATE_MAX_TOKENS,
                temperature=UPDATE_TEMPERATURE,
            )
            result = normalize_analysis(raw, hebrew)
        except Exception as exc:
            logger.error(MSG_UPDATE_ERROR, exc)
            raise translate_provider_error(exc, MSG_ERR_UPDATE_FAILED) from exc

        return result

    async def generate_text(self, prompt: str, max_tokens: int = TEXT_MAX_TOKENS) -> str:
        client = self._require_client()
        try:
            content = await client.complete(
                prompt, max_tokens=max_tokens, temperature=TEXT_TEMPERATURE
            )
        except Exception as exc:
            logger.error(MSG_TEXT_ERROR, exc)
            raise
        return content or ""
