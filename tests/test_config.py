from agentic_invest.config import Settings
from agentic_invest.llm_providers import (
    GeminiModel,
    GrokModel,
    LLMProvider,
    get_model_string,
    get_provider_for_model_string,
)
from agentic_invest.pipeline.state import SessionStore


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.trends.primary_target == 15
    assert "NVDA" in settings.trends.excluded_tickers
    assert settings.rubric.trade_count == 5
    assert settings.rubric.max_loss_usd == 500
    assert settings.pipeline.summary_preview_chars == 300
    assert [p.value for p in settings.portfolio.initial_history][0] == 100000
    assert len(settings.portfolio.initial_history) == 7


def test_yaml_overlay_merges_sections(tmp_path):
    (tmp_path / "config.yaml").write_text(
        "trends:\n"
        "  excluded_tickers: [pltr, sofi]\n"
        "rubric:\n"
        "  trade_count: 3\n"
        "portfolio:\n"
        "  initial_history:\n"
        "    - {day: 1, value: 50000}\n",
        encoding="utf-8",
    )
    settings = Settings(_env_file=None, data_dir=tmp_path)

    settings.load_yaml_config()

    assert settings.trends.excluded_tickers == ["PLTR", "SOFI"]
    assert settings.trends.primary_target == 15
    assert settings.rubric.trade_count == 3
    assert settings.rubric.min_probability_of_profit == 0.65

    store = SessionStore.from_settings(settings)
    assert store.last_valuation.value == 50000


def test_nested_env_override(monkeypatch):
    monkeypatch.setenv("RUBRIC__NAV_USD", "250000")
    monkeypatch.setenv("XAI_API_KEY", "xai-key")

    settings = Settings(_env_file=None)

    assert settings.rubric.nav_usd == 250000
    assert settings.grok_api_key == "xai-key"


def test_model_strings():
    assert get_model_string(GrokModel.GROK_4) == "grok:grok-4"
    assert get_model_string(GeminiModel.GEMINI_2_5_FLASH) == "google-gla:gemini-2.5-flash"
    assert get_provider_for_model_string("grok:grok-4") == LLMProvider.GROK
    assert get_provider_for_model_string("google-gla:gemini-2.5-flash") == LLMProvider.GEMINI
