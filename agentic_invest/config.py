"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from agentic_invest.llm_providers import (
    GeminiModel,
    GrokModel,
    get_model_string,
)

logger = logging.getLogger(__name__)


DEFAULT_EXCLUDED_TICKERS = [
    "AAPL",
    "MSFT",
    "GOOGL",
    "GOOG",
    "AMZN",
    "NVDA",
    "TSLA",
    "META",
    "UNH",
    "JNJ",
]

DEFAULT_STRATEGY = (
    "My investment goal is to find lesser-known stocks with strong fundamentals that are "
    "gaining attention on social media, particularly Twitter/X. Focus on small to mid-cap "
    "companies (under $20B market cap) with recent catalysts but avoid mega-cap stocks like "
    "NVIDIA, Apple, or Tesla. I have a medium-to-high risk tolerance and am looking for "
    "hidden gems that could yield significant returns over the next 6-12 months. Prioritize "
    "companies with genuine community discussion, recent positive developments, and insider "
    "buying signals."
)


class TrendConfig(BaseModel):
    """Trend detection targets and the large-cap denylist."""

    primary_target: int = 15
    fallback_min: int = 3
    fallback_max: int = 8
    excluded_tickers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_TICKERS)
    )

    @field_validator("excluded_tickers", mode="after")
    @classmethod
    def normalize_tickers(cls, v: list[str]) -> list[str]:
        """Store the denylist upper-cased so lookups are case-insensitive."""
        return [t.strip().upper() for t in v if t.strip()]


class ModelConfig(BaseModel):
    """Model selection per stage (provider:model strings understood by pydantic-ai)."""

    trend_primary: str = get_model_string(GrokModel.GROK_4)
    trend_fallback: str = get_model_string(GeminiModel.GEMINI_2_5_FLASH)
    selector: str = get_model_string(GeminiModel.GEMINI_2_5_FLASH)
    advisor: str = get_model_string(GeminiModel.GEMINI_2_5_FLASH)

    trend_primary_temperature: float = 0.3
    trend_fallback_temperature: float = 0.7
    selector_temperature: float = 0.4
    advisor_temperature: float = 0.2
    timeout_seconds: float = 120.0


class RubricConfig(BaseModel):
    """Hard filters the advisor must apply to every trade."""

    trade_count: int = 5
    min_probability_of_profit: float = 0.65
    min_credit_to_max_loss: float = 0.33
    max_loss_pct_of_nav: float = 0.005
    nav_usd: float = 100_000.0
    max_trades_per_sector: int = 2
    max_quote_age_minutes: int = 10

    @property
    def max_loss_usd(self) -> float:
        return self.nav_usd * self.max_loss_pct_of_nav


class ValuationPoint(BaseModel):
    """A single day/value pair used to seed portfolio history."""

    day: int
    value: int


class PortfolioConfig(BaseModel):
    """Seed history for the simulated portfolio chart."""

    initial_history: list[ValuationPoint] = Field(
        default_factory=lambda: [
            ValuationPoint(day=1, value=100000),
            ValuationPoint(day=2, value=100500),
            ValuationPoint(day=3, value=100200),
            ValuationPoint(day=4, value=101100),
            ValuationPoint(day=5, value=101500),
            ValuationPoint(day=6, value=101300),
            ValuationPoint(day=7, value=102000),
        ]
    )


class PipelineConfig(BaseModel):
    """Orchestrator display parameters."""

    summary_preview_chars: int = 300
    default_strategy: str = DEFAULT_STRATEGY


class Settings(BaseSettings):
    """Main configuration class."""

    # Paths
    data_dir: Path = Path("data")

    # API Keys
    grok_api_key: str = Field(
        default="", validation_alias=AliasChoices("grok_api_key", "xai_api_key")
    )
    gemini_api_key: str = Field(
        default="", validation_alias=AliasChoices("gemini_api_key", "google_api_key")
    )
    openai_api_key: str = ""
    exa_api_key: str = ""
    finnhub_api_key: str = ""
    logfire_token: str = ""

    # Nested configuration sections
    trends: TrendConfig = Field(default_factory=TrendConfig)
    models: ModelConfig = Field(default_factory=ModelConfig)
    rubric: RubricConfig = Field(default_factory=RubricConfig)
    portfolio: PortfolioConfig = Field(default_factory=PortfolioConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("data_dir", mode="after")
    @classmethod
    def resolve_data_dir(cls, v: Path) -> Path:
        """Resolve data directory to absolute path."""
        return v.resolve()

    def load_yaml_config(self) -> None:
        """Load and merge YAML configuration."""
        config_path = self.data_dir / "config.yaml"

        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}. Using defaults.")
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)

            if not yaml_config:
                logger.warning(f"Empty config file: {config_path}")
                return

            for section_name in ["trends", "models", "rubric", "portfolio", "pipeline"]:
                if section_name in yaml_config:
                    section = getattr(self, section_name)
                    yaml_section = yaml_config[section_name]

                    section_dict = section.model_dump()
                    section_dict.update(yaml_section)

                    new_section = section.__class__(**section_dict)
                    setattr(self, section_name, new_section)

            logger.info(f"Loaded configuration from {config_path}")

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to load config: {e}")
            raise


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    settings = Settings()
    settings.load_yaml_config()
    return settings
