"""Round Elo record types.

Input:  ScoreRecord (one player's score in one round)
Output: HistoryRecord, SnapshotRecord, ScalingRecord, FinalRating → RatingResult
"""
import math
from dataclasses import asdict, dataclass, fields
from numbers import Integral, Real
from typing import Optional

import pandas as pd


@dataclass(frozen=True)
class ScoreRecord:
    """One player's score in one round (golf scoring: lower is better)."""
    player: str
    round_seq: int
    round_label: str
    score: float

    def __post_init__(self):
        if not isinstance(self.player, str) or not self.player.strip():
            raise ValueError(f"player must be a non-empty string, got {self.player!r}")
        if isinstance(self.round_seq, bool) or not isinstance(self.round_seq, Integral):
            raise ValueError(f"round_seq must be an integer, got {self.round_seq!r}")
        if isinstance(self.score, bool) or not isinstance(self.score, Real) or math.isnan(self.score):
            raise ValueError(f"score must be numeric, got {self.score!r}")
        object.__setattr__(self, 'round_seq', int(self.round_seq))
        object.__setattr__(self, 'round_label', '' if self.round_label is None else str(self.round_label))
        object.__setattr__(self, 'score', float(self.score))


@dataclass(frozen=True)
class HistoryRecord:
    """Per-player, per-round rating change."""
    round_seq: int
    round_label: str
    round_type: str
    player: str
    score: float
    rating_pre: float
    rating_post: float
    delta: float
    k_effective: float


@dataclass(frozen=True)
class SnapshotRecord:
    """One row of the leaderboard as it stood after a round."""
    round_seq: int
    round_label: str
    round_type: str
    player: str
    rating: float


@dataclass(frozen=True)
class ScalingRecord:
    """Delta before/after proportional rescaling against the round's cap."""
    round_seq: int
    round_label: str
    round_type: str
    player: str
    score: float
    delta_original: float
    delta_scaled: float
    reduction: float
    scale_factor: float
    max_abs_delta_original: float
    delta_cap: float


@dataclass(frozen=True)
class FinalRating:
    player: str
    rating: float


def _frame(records, record_type) -> pd.DataFrame:
    columns = [f.name for f in fields(record_type)]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)


@dataclass(frozen=True)
class RatingResult:
    """Immutable output bundle of one rating computation."""
    final_ratings: tuple[FinalRating, ...]
    history: tuple[HistoryRecord, ...]
    snapshots: tuple[SnapshotRecord, ...]
    scaling_records: tuple[ScalingRecord, ...]

    @property
    def ratings(self) -> dict[str, float]:
        return {r.player: r.rating for r in self.final_ratings}

    def round_labels(self) -> list[str]:
        """Distinct round labels in processing order."""
        seen = []
        for snap in self.snapshots:
            if snap.round_label not in seen:
                seen.append(snap.round_label)
        return seen

    def leaderboard_after(self, round_label: Optional[str] = None) -> list:
        """Leaderboard as of a round label (None or "" → final ratings)."""
        if not round_label:
            return list(self.final_ratings)
        rows = [s for s in self.snapshots if s.round_label == round_label]
        return sorted(rows, key=lambda s: -s.rating)

    def to_frames(self) -> dict[str, pd.DataFrame]:
        """One DataFrame per output collection."""
        return {
            'final_ratings': _frame(self.final_ratings, FinalRating),
            'history': _frame(self.history, HistoryRecord),
            'snapshots': _frame(self.snapshots, SnapshotRecord),
            'scaling_details': _frame(self.scaling_records, ScalingRecord),
        }
