"""
Round Elo Batch Processor

전체 라운드 결과를 round_seq 순서로 처리하여 rating을 계산하고
history / snapshot / scaling 레코드를 생성.

Usage:
    batch = EloBatch(config)
    batch.process(records)
    result = batch.result()
    # Results:
    result.final_ratings    → (FinalRating, ...)   rating 내림차순
    result.history          → (HistoryRecord, ...) 선수×라운드
    result.snapshots        → (SnapshotRecord, ...) 라운드별 전체 leaderboard
    result.scaling_records  → (ScalingRecord, ...) cap 발동 라운드만
"""

import logging
from typing import Iterable

import pandas as pd

from src.engine.elo_calculator import EloCalculator
from src.engine.elo_types import (
    FinalRating,
    HistoryRecord,
    RatingResult,
    ScalingRecord,
    ScoreRecord,
    SnapshotRecord,
)
from src.engine.errors import ComputationError, EmptyInputError
from src.engine.rating_config import RatingConfig

logger = logging.getLogger(__name__)


def group_rounds(records: Iterable[ScoreRecord]) -> list[tuple[int, list[ScoreRecord]]]:
    """round_seq별 그룹 (오름차순). 그룹 내부는 입력 순서 유지."""
    rounds: dict[int, list[ScoreRecord]] = {}
    for rec in records:
        rounds.setdefault(rec.round_seq, []).append(rec)
    return [(seq, rounds[seq]) for seq in sorted(rounds)]


class EloBatch:
    """Round Elo 배치 프로세서. 인스턴스 하나 = 계산 1회."""

    def __init__(self, config: RatingConfig | None = None):
        self.config = config or RatingConfig()
        self.calc = EloCalculator(config=self.config)

        # player → rating (삽입 순서 = 최초 등장 순서)
        self.ratings: dict[str, float] = {}
        self.history: list[HistoryRecord] = []
        self.snapshots: list[SnapshotRecord] = []
        self.scaling_records: list[ScalingRecord] = []
        self.rounds_processed = 0

    def _ensure_player(self, player: str) -> None:
        if player not in self.ratings:
            self.ratings[player] = self.config.start_rating

    def _sorted_ratings(self) -> list[tuple[str, float]]:
        return sorted(self.ratings.items(), key=lambda item: -item[1])

    def _record_snapshot(self, seq: int, round_label: str, round_type: str) -> None:
        for player, rating in self._sorted_ratings():
            self.snapshots.append(SnapshotRecord(
                round_seq=seq,
                round_label=round_label,
                round_type=round_type,
                player=player,
                rating=rating,
            ))

    def _process_single(self, seq: int, round_label: str, round_type: str,
                        group: list[ScoreRecord]) -> None:
        """참가자 1명 라운드: rating 변화 없음."""
        for rec in group:
            rating = self.ratings[rec.player]
            self.history.append(HistoryRecord(
                round_seq=seq,
                round_label=round_label,
                round_type=round_type,
                player=rec.player,
                score=rec.score,
                rating_pre=rating,
                rating_post=rating,
                delta=0.0,
                k_effective=0.0,
            ))

    def _process_round(self, seq: int, round_label: str, group: list[ScoreRecord]) -> str:
        players = [rec.player for rec in group]
        scores = [rec.score for rec in group]
        ratings_before = [self.ratings[p] for p in players]

        apply_cap = self.rounds_processed >= self.config.delta_cap_start_round
        result = self.calc.process_round(ratings_before, scores, round_label, apply_cap=apply_cap)
        round_type = result.round_type

        if result.scaled:
            logger.info(f"  round {seq} ({round_label}): max |delta| {result.max_abs_delta:.2f} "
                        f"> cap {result.delta_cap:g}, scale {result.scale_factor:.4f}")
            for i, player in enumerate(players):
                original = float(result.raw_deltas[i])
                scaled = float(result.deltas[i])
                self.scaling_records.append(ScalingRecord(
                    round_seq=seq,
                    round_label=round_label,
                    round_type=round_type,
                    player=player,
                    score=scores[i],
                    delta_original=original,
                    delta_scaled=scaled,
                    reduction=original - scaled,
                    scale_factor=result.scale_factor,
                    max_abs_delta_original=result.max_abs_delta,
                    delta_cap=result.delta_cap,
                ))

        # 모든 delta 계산 후 일괄 적용
        for i, player in enumerate(players):
            pre = self.ratings[player]
            delta = float(result.deltas[i])
            post = pre + delta
            self.ratings[player] = post
            self.history.append(HistoryRecord(
                round_seq=seq,
                round_label=round_label,
                round_type=round_type,
                player=player,
                score=scores[i],
                rating_pre=pre,
                rating_post=post,
                delta=delta,
                k_effective=result.k_effective,
            ))
        return round_type

    def process(self, records: Iterable[ScoreRecord]):
        """전체 라운드 처리 (round_seq 오름차순)."""
        rounds = group_rounds(records)
        total = len(rounds)

        for seq, group in rounds:
            self.rounds_processed += 1
            round_label = group[0].round_label
            try:
                for rec in group:
                    self._ensure_player(rec.player)

                if len(group) <= 1:
                    round_type = self.calc.classify(round_label)
                    self._process_single(seq, round_label, round_type, group)
                else:
                    round_type = self._process_round(seq, round_label, group)

                self._record_snapshot(seq, round_label, round_type)
            except Exception as exc:
                raise ComputationError(str(exc) or type(exc).__name__, round_seq=seq) from exc

            if self.rounds_processed % 100 == 0:
                logger.info(f"  Processed {self.rounds_processed:,} / {total:,} rounds")

        logger.info(f"  Completed {total:,} rounds, {len(self.ratings):,} players, "
                    f"{len(self.scaling_records):,} scaling records")

    def process_frame(self, long_df: pd.DataFrame):
        """Long-form DataFrame 처리. 컬럼: player, round_seq, round_label, score."""
        records = [
            ScoreRecord(
                player=str(row.player),
                round_seq=int(row.round_seq),
                round_label=row.round_label,
                score=float(row.score),
            )
            for row in long_df.itertuples(index=False)
        ]
        self.process(records)

    def result(self) -> RatingResult:
        final_ratings = tuple(FinalRating(player=p, rating=r) for p, r in self._sorted_ratings())
        return RatingResult(
            final_ratings=final_ratings,
            history=tuple(self.history),
            snapshots=tuple(self.snapshots),
            scaling_records=tuple(self.scaling_records),
        )


def compute_ratings(records: Iterable[ScoreRecord], config: RatingConfig | None = None) -> RatingResult:
    """records → RatingResult. 실패 시 ComputationError (부분 결과 없음)."""
    records = list(records)
    if not records:
        raise EmptyInputError()
    batch = EloBatch(config)
    batch.process(records)
    return batch.result()
