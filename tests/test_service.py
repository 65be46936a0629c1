"""TDD: MealAnalysisService tests written FIRST"""
import json
import logging

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from mealvision.config import Config
from mealvision.errors import (
    AnalysisFailedError,
    EmptyResponseError,
    InvalidImageError,
    MalformedResponseError,
    NotConfiguredError,
    QuotaExceededError,
    RateLimitedError,
)
from mealvision.llm.claude import ClaudeCompletionClient
from mealvision.llm.client import CompletionClient
from mealvision.llm.openai import OpenAICompletionClient
from mealvision.models import Ingredient, MealAnalysisResult
from mealvision.service import MealAnalysisService, build_completion_client

REPLY = {
    "name": "Chicken rice bowl",
    "description": "Grilled chicken over rice",
    "calories": 650,
    "protein": 42,
    "carbs": 70,
    "fat": 18,
    "fiber": 4,
    "sugar": 3,
    "sodium": 820,
    "confidence": 88,
    "ingredients": [
        {"name": "chicken", "calories": 300, "protein_g": 38, "fats_g": 9},
        {"name": "rice", "calories": 350, "protein": 4, "carbs": 70},
    ],
}


def make_client(reply):
    client = MagicMock(spec=CompletionClient)
    client.name = "fake"
    client.complete = AsyncMock(return_value=reply)
    return client


def make_config(monkeypatch, **env):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return Config.from_env()


# ── not configured ────────────────────────────────────────────────────────────


async def test_every_operation_fails_without_credential():
    service = MealAnalysisService(None)

    assert service.is_configured is False
    with pytest.raises(NotConfiguredError):
        await service.analyze_image("QUJD")
    with pytest.raises(NotConfiguredError):
        await service.update_analysis({"name": "x"}, "more rice")
    with pytest.raises(NotConfiguredError):
        await service.generate_text("hello")


async def test_from_config_without_keys_never_builds_sdk_client(monkeypatch):
    config = make_config(monkeypatch)

    with patch("mealvision.llm.openai.AsyncOpenAI") as mock_openai, patch(
        "mealvision.llm.claude.AsyncAnthropic"
    ) as mock_anthropic:
        service = MealAnalysisService.from_config(config)
        with pytest.raises(NotConfiguredError, match="not configured"):
            await service.analyze_image("QUJD")

    mock_openai.assert_not_called()
    mock_anthropic.assert_not_called()


# ── backend selection ─────────────────────────────────────────────────────────


def test_build_client_prefers_configured_provider(monkeypatch):
    config = make_config(monkeypatch, OPENAI_API_KEY="sk", ANTHROPIC_API_KEY="ant", LLM_PROVIDER="claude")

    with patch("mealvision.llm.claude.AsyncAnthropic"):
        client = build_completion_client(config)

    assert isinstance(client, ClaudeCompletionClient)


def test_build_client_defaults_to_openai(monkeypatch):
    config = make_config(monkeypatch, OPENAI_API_KEY="sk", ANTHROPIC_API_KEY="ant")

    with patch("mealvision.llm.openai.AsyncOpenAI"):
        client = build_completion_client(config)

    assert isinstance(client, OpenAICompletionClient)


def test_build_client_falls_back_to_other_provider(monkeypatch):
    config = make_config(monkeypatch, ANTHROPIC_API_KEY="ant")

    with patch("mealvision.llm.claude.AsyncAnthropic"):
        client = build_completion_client(config)

    assert isinstance(client, ClaudeCompletionClient)


def test_build_client_none_without_keys(monkeypatch):
    assert build_completion_client(make_config(monkeypatch)) is None


# ── analyze_image ─────────────────────────────────────────────────────────────


async def test_analyze_image_returns_normalized_result():
    client = make_client("```json\n" + json.dumps(REPLY) + "\n```")
    service = MealAnalysisService(client)

    result = await service.analyze_image("QUJD")

    assert isinstance(result, MealAnalysisResult)
    assert result.name == "Chicken rice bowl"
    assert result.calories == 650.0
    assert result.confidence == 88.0
    assert [i.name for i in result.ingredients] == ["chicken", "rice"]
    assert result.ingredients[0].protein == 38.0
    assert result.ingredients[0].fat == 9.0


async def test_analyze_image_request_budget_and_image():
    client = make_client(json.dumps(REPLY))
    service = MealAnalysisService(client)

    await service.analyze_image("QUJD")

    call = client.complete.call_args
    assert call.kwargs["image_base64"] == "QUJD"
    assert call.kwargs["max_tokens"] == 2000
    assert call.kwargs["temperature"] == 0.1
    assert call.kwargs["system"].startswith("You are a professional nutrition expert")
    assert "Additional context" not in call.kwargs["system"]
    assert call.args[0] == "Please analyze this meal image and provide detailed nutritional information."


async def test_analyze_image_hebrew_prompt_and_placeholders():
    client = make_client(json.dumps({"ingredients": [{"calories": 10}]}))
    service = MealAnalysisService(client)

    result = await service.analyze_image("QUJD", language="hebrew")

    assert client.complete.call_args.kwargs["system"].startswith("אתה מומחה תזונה מקצועי")
    assert result.name == "ארוחה לא מזוהה"
    assert result.ingredients[0].name == "מרכיב לא מזוהה"


async def test_any_other_language_is_english():
    client = make_client("{}")
    service = MealAnalysisService(client)

    result = await service.analyze_image("QUJD", language="french")

    assert client.complete.call_args.kwargs["system"].startswith("You are a professional")
    assert result.name == "Unknown meal"


async def test_analyze_image_with_feedback_and_edits():
    client = make_client(json.dumps(REPLY))
    service = MealAnalysisService(client)

    await service.analyze_image(
        "QUJD",
        update_text="no sauce",
        edited_ingredients=[{"name": "rice", "calories": 300, "protein_g": 6}, "junk"],
    )

    call = client.complete.call_args
    assert '- User provided feedback: "no sauce"' in call.kwargs["system"]
    assert "- User edited 1 ingredients:" in call.kwargs["system"]
    assert "  1. rice: 300 cal, 6g protein" in call.kwargs["system"]
    assert call.args[0] == (
        'Please analyze this meal image and incorporate the following user feedback: "no sauce". '
        "The user has also provided 1 edited ingredients."
    )


async def test_analyze_image_edits_without_feedback_still_add_context():
    client = make_client(json.dumps(REPLY))
    service = MealAnalysisService(client)

    await service.analyze_image("QUJD", edited_ingredients=[Ingredient(name="egg", calories=78)])

    call = client.complete.call_args
    assert "Additional context" in call.kwargs["system"]
    assert call.args[0].startswith("Please analyze this meal image and provide")


async def test_analyze_image_empty_reply():
    service = MealAnalysisService(make_client(None))

    with pytest.raises(EmptyResponseError) as exc_info:
        await service.analyze_image("QUJD")

    assert str(exc_info.value) == "AI analysis failed. Please try again."


async def test_analyze_image_whitespace_reply_is_empty():
    service = MealAnalysisService(make_client("   "))

    with pytest.raises(EmptyResponseError):
        await service.analyze_image("QUJD")


async def test_analyze_image_malformed_reply():
    service = MealAnalysisService(make_client("Sorry, I can't analyze this."))

    with pytest.raises(MalformedResponseError):
        await service.analyze_image("QUJD")


@pytest.mark.parametrize(
    "provider_message, expected",
    [
        ("insufficient_quota: You exceeded your current quota", QuotaExceededError),
        ("Rate limit reached for requests", RateLimitedError),
        ("Error code: 400 - invalid_request_error: bad image", InvalidImageError),
        ("socket closed", AnalysisFailedError),
    ],
)
async def test_analyze_image_translates_provider_errors(provider_message, expected):
    client = make_client(None)
    client.complete.side_effect = RuntimeError(provider_message)
    service = MealAnalysisService(client)

    with pytest.raises(expected) as exc_info:
        await service.analyze_image("QUJD")

    assert isinstance(exc_info.value.__cause__, RuntimeError)


async def test_analyze_image_huge_number_becomes_zero():
    service = MealAnalysisService(make_client('{"name": "feast", "calories": 1' + "0" * 400 + "}"))

    result = await service.analyze_image("QUJD")

    assert result.name == "feast"
    assert result.calories == 0.0


async def test_analyze_image_normalization_failure_is_translated():
    service = MealAnalysisService(make_client(json.dumps(REPLY)))

    with patch("mealvision.service.normalize_analysis", side_effect=RuntimeError("unexpected shape")):
        with pytest.raises(AnalysisFailedError, match="AI analysis failed") as exc_info:
            await service.analyze_image("QUJD")

    assert isinstance(exc_info.value.__cause__, RuntimeError)


async def test_analyze_image_feedback_without_edits_keeps_trailing_space():
    client = make_client(json.dumps(REPLY))
    service = MealAnalysisService(client)

    await service.analyze_image("QUJD", update_text="no sauce")

    assert client.complete.call_args.args[0] == (
        'Please analyze this meal image and incorporate the following user feedback: "no sauce". '
    )


async def test_mismatched_totals_warn_but_succeed(caplog):
    reply = dict(REPLY, calories=1000)
    service = MealAnalysisService(make_client(json.dumps(reply)))

    with caplog.at_level(logging.WARNING):
        result = await service.analyze_image("QUJD")

    assert "don't match" in caplog.text
    assert result.calories == 1000.0
    assert len(result.ingredients) == 2


# ── update_analysis ───────────────────────────────────────────────────────────


async def test_update_analysis_serializes_original_and_uses_update_budget():
    client = make_client(json.dumps(dict(REPLY, calories=600)))
    service = MealAnalysisService(client)
    original = MealAnalysisResult(name="Chicken rice bowl", calories=650)

    result = await service.update_analysis(original, "half the rice")

    call = client.complete.call_args
    assert call.kwargs["image_base64"] is None
    assert call.kwargs["max_tokens"] == 1500
    assert call.kwargs["temperature"] == 0.1
    assert '"name": "Chicken rice bowl"' in call.kwargs["system"]
    assert 'User feedback: "half the rice"' in call.kwargs["system"]
    assert call.args[0] == 'Please update the meal analysis based on this feedback: "half the rice"'
    assert result.calories == 600.0


async def test_update_analysis_accepts_plain_mapping_in_hebrew():
    client = make_client("{}")
    service = MealAnalysisService(client)

    result = await service.update_analysis({"name": "סלט"}, "בלי רוטב", language="hebrew")

    assert '"name": "סלט"' in client.complete.call_args.kwargs["system"]
    assert result.name == "ארוחה לא מזוהה"


async def test_update_analysis_failure_message():
    client = make_client(None)
    client.complete.side_effect = RuntimeError("boom")
    service = MealAnalysisService(client)

    with pytest.raises(AnalysisFailedError, match="Failed to update meal analysis"):
        await service.update_analysis({"name": "x"}, "more")


@pytest.mark.parametrize(
    "provider_message, expected",
    [
        ("Error code: 429 - insufficient_quota", QuotaExceededError),
        ("Rate limit reached for gpt-4o", RateLimitedError),
    ],
)
async def test_update_analysis_translates_provider_errors(provider_message, expected):
    client = make_client(None)
    client.complete.side_effect = RuntimeError(provider_message)
    service = MealAnalysisService(client)

    with pytest.raises(expected):
        await service.update_analysis({"name": "x"}, "more")


async def test_update_analysis_huge_number_becomes_zero():
    service = MealAnalysisService(make_client('{"calories": 1' + "0" * 400 + "}"))

    result = await service.update_analysis({"name": "x"}, "more")

    assert result.calories == 0.0


# ── generate_text ─────────────────────────────────────────────────────────────


async def test_generate_text_passthrough():
    client = make_client("  Drink more water.  ")
    service = MealAnalysisService(client)

    result = await service.generate_text("tip?")

    assert result == "  Drink more water.  "
    call = client.complete.call_args
    assert call.args[0] == "tip?"
    assert call.kwargs["max_tokens"] == 1000
    assert call.kwargs["temperature"] == 0.7


async def test_generate_text_custom_budget_and_empty_reply():
    client = make_client(None)
    service = MealAnalysisService(client)

    assert await service.generate_text("tip?", max_tokens=50) == ""
    assert client.complete.call_args.kwargs["max_tokens"] == 50


async def test_generate_text_reraises_provider_error():
    client = make_client(None)
    client.complete.side_effect = RuntimeError("API down")
    service = MealAnalysisService(client)

    with pytest.raises(RuntimeError, match="API down"):
        await service.generate_text("tip?")
