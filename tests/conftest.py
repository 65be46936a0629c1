import pytest

ENV_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "LLM_PROVIDER",
    "OPENAI_MODEL",
    "CLAUDE_MODEL",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test from an empty provider environment, ignoring any local .env."""
    monkeypatch.setattr("mealvision.config.load_dotenv", lambda **_: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
