"""
Round Elo Calculator — pairwise round-robin Elo + MOV + delta cap

한 라운드의 모든 참가자를 서로 1:1로 비교하는 round-robin Elo.

핵심 공식:
  e_ij     = 1 / (1 + 10^((r_j - r_i) / 400))
  s_ij     = 1.0 (score_i < score_j), 0.5 (동점), 0.0 (패)
  w_ij     = ln(1 + margin) × 2.2 / (0.001 × |r_i - r_j| + 2.2)   (MOV, 승리 시)
  K_round  = BASE_K × ROUND_TYPE_WEIGHTS[type]
  delta_i  = K_round × (W_i / (n-1)) × (S_i - E_i)

Delta cap:
  max|delta| > cap 이면 라운드 전체 delta에 동일한 scale = cap / max|delta| 적용
  (부호와 상대 크기 유지)
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from src.engine.elo_config import (
    EXPECTED_DIVISOR,
    FALLBACK_ROUND_TYPE,
    MOV_DAMPING,
    MOV_RATING_SCALE,
    RATING_DIFF_CLAMP,
)
from src.engine.rating_config import RatingConfig


def classify_round_type(round_label: Optional[str], weights: dict[str, float]) -> str:
    """라운드 라벨에서 round type token 추출.

    'TN-3 Final' → 'TN', 'CM 2-B' → 'CM'. weights에 없는 token은 FALLBACK_ROUND_TYPE.
    """
    if not round_label or not isinstance(round_label, str):
        return FALLBACK_ROUND_TYPE
    token = round_label.split('-')[0].strip().split(' ')[0]
    return token if token in weights else FALLBACK_ROUND_TYPE


def expected_score(rating_i: float, rating_j: float, cap: float = RATING_DIFF_CLAMP) -> float:
    """Logistic expected score of player i against player j.

    The clamped difference is computed but the exponent uses the raw
    difference; ratings depend on this exact behaviour.
    """
    diff = rating_j - rating_i
    if diff > cap:
        diff = cap
    elif diff < -cap:
        diff = -cap
    return 1.0 / (1.0 + 10.0 ** ((rating_j - rating_i) / EXPECTED_DIVISOR))


def mov_multiplier(margin: float, rating_diff: float) -> float:
    """Margin-of-victory weight. 1.0 for margin <= 0."""
    if margin <= 0:
        return 1.0
    return math.log(1 + margin) * (MOV_DAMPING / (MOV_RATING_SCALE * abs(rating_diff) + MOV_DAMPING))


def pairwise_result(score_i: float, score_j: float) -> tuple[float, float]:
    """(s_ij, margin) — lower score wins; margin is positive on a win, negative on a loss."""
    if score_i < score_j:
        return 1.0, score_j - score_i
    if score_i > score_j:
        return 0.0, (score_i - score_j) * -1.0
    return 0.5, 0.0


@dataclass
class RoundUpdateResult:
    """라운드 delta 계산 결과 (rating 적용 전)."""
    round_type: str
    k_effective: float
    expected: np.ndarray        # E_i
    actual: np.ndarray          # S_i
    mov_weight: np.ndarray      # W_i / (n-1), MOV off → 1.0
    raw_deltas: np.ndarray
    deltas: np.ndarray          # cap 적용 후
    scale_factor: float = 1.0
    max_abs_delta: float = 0.0
    delta_cap: Optional[float] = None

    @property
    def scaled(self) -> bool:
        return self.scale_factor != 1.0


class EloCalculator:
    """Round Elo 계산기."""

    def __init__(self, config: RatingConfig | None = None):
        self.config = config or RatingConfig()

    def classify(self, round_label: Optional[str]) -> str:
        return classify_round_type(round_label, self.config.round_type_weights)

    def compute_raw_deltas(
        self,
        ratings: list[float],
        scores: list[float],
        k_round: float,
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """n ≥ 2 라운드의 pairwise 비교.

        Returns:
            (E, S, mov_w, raw_deltas) — 참가자 순서와 동일한 배열
        """
        n = len(ratings)
        expected = np.zeros(n)
        actual = np.zeros(n)
        w_total = np.zeros(n)

        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                expected[i] += expected_score(ratings[i], ratings[j])

                s_ij, margin = pairwise_result(scores[i], scores[j])
                actual[i] += s_ij

                if self.config.use_mov:
                    w_total[i] += mov_multiplier(max(0.0, margin), ratings[i] - ratings[j])
                else:
                    w_total[i] += 1.0

        if self.config.use_mov and n > 1:
            mov_w = w_total / (n - 1)
        else:
            mov_w = np.ones(n)

        raw_deltas = k_round * mov_w * (actual - expected)
        return expected, actual, mov_w, raw_deltas

    def apply_delta_cap(
        self, raw_deltas: np.ndarray, round_type: str
    ) -> tuple[np.ndarray, float, float, Optional[float]]:
        """Round type cap 초과 시 전체 delta를 비례 축소.

        Returns:
            (deltas, scale_factor, max_abs_delta, delta_cap)
        """
        max_abs_delta = float(np.max(np.abs(raw_deltas))) if len(raw_deltas) else 0.0
        delta_cap = self.config.get_delta_cap(round_type)
        if delta_cap is None or max_abs_delta <= delta_cap:
            return raw_deltas.copy(), 1.0, max_abs_delta, delta_cap

        scale_factor = delta_cap / max_abs_delta
        return raw_deltas * scale_factor, scale_factor, max_abs_delta, delta_cap

    def process_round(
        self,
        ratings: list[float],
        scores: list[float],
        round_label: Optional[str],
        apply_cap: bool = True,
    ) -> RoundUpdateResult:
        """한 라운드(n ≥ 2)의 delta 계산. rating 자체는 변경하지 않음.

        Args:
            ratings: 참가자별 라운드 전 rating
            scores: 참가자별 점수 (낮을수록 좋음)
            round_label: 라운드 라벨 (round type 분류용)
            apply_cap: False면 cap 적용 구간 이전 (cap_start_round 미만)
        """
        round_type = self.classify(round_label)
        k_round = self.config.get_round_k(round_type)

        expected, actual, mov_w, raw_deltas = self.compute_raw_deltas(ratings, scores, k_round)

        if apply_cap:
            deltas, scale_factor, max_abs_delta, delta_cap = self.apply_delta_cap(raw_deltas, round_type)
        else:
            deltas, scale_factor, max_abs_delta, delta_cap = raw_deltas.copy(), 1.0, 0.0, None

        return RoundUpdateResult(
            round_type=round_type,
            k_effective=k_round,
            expected=expected,
            actual=actual,
            mov_weight=mov_w,
            raw_deltas=raw_deltas,
            deltas=deltas,
            scale_factor=scale_factor,
            max_abs_delta=max_abs_delta,
            delta_cap=delta_cap,
        )
