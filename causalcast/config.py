from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── App ──────────────────────────────────────────────
    app_name: str = "CausalCast"
    app_version: str = "0.1.0"
    debug: bool = False

    # ── Extraction ───────────────────────────────────────
    min_text_length: int = 20
    max_relations_per_source: int = 10
    default_relevance: float = 0.5
    reject_referential_entities: bool = False

    # ── Graph ────────────────────────────────────────────
    recency_boost: float = 1.2
    trusted_source_boost: float = 1.15
    trusted_sources: list[str] = Field(default_factory=lambda: ["Airweave", "Exa AI"])
    influence_factor: float = 0.8
    max_causal_chains: int = 10

    # ── Path scoring ─────────────────────────────────────
    path_length_decay: float = 0.9
    missing_edge_penalty: float = 0.3

    # ── Prediction ───────────────────────────────────────
    probability_floor: float = 0.1
    probability_ceiling: float = 0.9
    interval_half_width: float = 0.15
    max_predictions: int = 2

    # ── Sources ──────────────────────────────────────────
    recent_window_days: int = 7

    # ── Server ───────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000


settings = Settings()
