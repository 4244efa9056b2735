"""Rating Config Loader (YAML + defaults)."""
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from src.engine.elo_config import (
    BASE_K,
    DEFAULT_DELTA_CAP,
    DELTA_CAP_START_ROUND,
    DELTA_CAPS,
    ROUND_TYPE_WEIGHTS,
    START_RATING,
    USE_MOV,
)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "rating_config.yaml"


@dataclass(frozen=True)
class RatingConfig:
    """Immutable configuration for one rating computation."""
    base_k: float = BASE_K
    start_rating: float = START_RATING
    use_mov: bool = USE_MOV
    delta_cap_start_round: int = DELTA_CAP_START_ROUND
    round_type_weights: dict[str, float] = field(default_factory=lambda: dict(ROUND_TYPE_WEIGHTS))
    delta_caps: dict[str, float | None] = field(default_factory=lambda: dict(DELTA_CAPS))

    def __post_init__(self):
        if self.base_k <= 0:
            raise ValueError(f"base_k must be positive, got {self.base_k}")
        for rtype, cap in self.delta_caps.items():
            if cap is not None and cap < 0:
                raise ValueError(f"delta cap for {rtype!r} must be non-negative, got {cap}")

    @classmethod
    def from_yaml(cls, config_path: Path | str | None = None) -> "RatingConfig":
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "RatingConfig":
        """Build a config from a plain mapping; missing keys use the module defaults."""
        weights = dict(ROUND_TYPE_WEIGHTS)
        if raw.get("round_type_weights") is not None:
            weights = {str(k): float(v) for k, v in raw["round_type_weights"].items()}

        caps = dict(DELTA_CAPS)
        if raw.get("delta_caps") is not None:
            caps = {str(k): (None if v is None else float(v)) for k, v in raw["delta_caps"].items()}

        return cls(
            base_k=float(raw.get("base_k", BASE_K)),
            start_rating=float(raw.get("start_rating", START_RATING)),
            use_mov=bool(raw.get("use_mov", USE_MOV)),
            delta_cap_start_round=int(raw.get("delta_cap_start_round", DELTA_CAP_START_ROUND)),
            round_type_weights=weights,
            delta_caps=caps,
        )

    def with_overrides(self, **overrides) -> "RatingConfig":
        """Copy with the given fields replaced (None values are ignored)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def get_k_multiplier(self, round_type: str) -> float:
        return self.round_type_weights.get(round_type, 1.0)

    def get_round_k(self, round_type: str) -> float:
        return self.base_k * self.get_k_multiplier(round_type)

    def get_delta_cap(self, round_type: str) -> float | None:
        """Cap for a round type. Absent → DEFAULT_DELTA_CAP, explicit None → uncapped."""
        if round_type in self.delta_caps:
            return self.delta_caps[round_type]
        return DEFAULT_DELTA_CAP

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_k": self.base_k,
            "start_rating": self.start_rating,
            "use_mov": self.use_mov,
            "delta_cap_start_round": self.delta_cap_start_round,
            "round_type_weights": dict(self.round_type_weights),
            "delta_caps": dict(self.delta_caps),
        }
