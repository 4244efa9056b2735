"""
Round Elo 계산 CLI

1. Score sheet (.xlsx / .csv) 로드 → long-form 변환
2. Rating 계산
3. 요약 출력
4. 결과 export (.xlsx workbook 또는 CSV 디렉토리: final_ratings / history / snapshots / scaling_details)

Usage:
    python -m scripts.run_ratings scores.csv
    python -m scripts.run_ratings scores.xlsx --output results.xlsx --config config/rating_config.yaml
    python -m scripts.run_ratings scores.csv --base-k 24 --no-mov --cap-start-round 1
"""

import argparse
import logging
import os
import sys

import yaml
from dotenv import load_dotenv

# Setup
logging.basicConfig(level=logging.INFO, format='%(asctime)s %(message)s', datefmt='%H:%M:%S')
load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.engine.elo_types import RatingResult
from src.engine.errors import InputFileError, RatingError
from src.engine.rating_config import DEFAULT_CONFIG_PATH, RatingConfig
from src.pipeline.rating_pipeline import run_rating_pipeline


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Round Elo ratings')
    parser.add_argument('input', type=str, help='Wide score sheet .xlsx or .csv (Name + one column per round)')
    parser.add_argument('--config', type=str, default=os.environ.get('RATING_CONFIG_PATH'),
                        help='YAML config (default: config/rating_config.yaml)')
    parser.add_argument('--output', type=str, default=os.environ.get('RATING_OUTPUT_DIR'),
                        help='Result workbook (.xlsx) or directory for result CSVs')
    parser.add_argument('--base-k', type=float, help='Override base K-factor')
    parser.add_argument('--start-rating', type=float, help='Override starting rating')
    parser.add_argument('--no-mov', action='store_true', help='Disable margin-of-victory weighting')
    parser.add_argument('--cap-start-round', type=int, help='Override delta cap start round')
    return parser.parse_args(argv)


def build_config(args) -> RatingConfig:
    try:
        config = RatingConfig.from_yaml(args.config)
        return config.with_overrides(
            base_k=args.base_k,
            start_rating=args.start_rating,
            use_mov=False if args.no_mov else None,
            delta_cap_start_round=args.cap_start_round,
        )
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        raise InputFileError(str(args.config or DEFAULT_CONFIG_PATH), str(e)) from e


def print_summary(result: RatingResult, config: RatingConfig):
    """결과 요약."""
    print("\n" + "=" * 60)
    print("ROUND ELO SUMMARY")
    print("=" * 60)

    ratings = [r.rating for r in result.final_ratings]
    print(f"\nPlayers: {len(ratings):,}")
    print(f"Rounds: {len({s.round_seq for s in result.snapshots}):,}")
    print(f"History rows: {len(result.history):,}")
    print(f"Snapshot rows: {len(result.snapshots):,}")

    mean = sum(ratings) / len(ratings)
    var = sum((r - mean) ** 2 for r in ratings) / len(ratings)
    print(f"\nRating Distribution:")
    print(f"  Mean: {mean:.1f}")
    print(f"  Min: {min(ratings):.1f}")
    print(f"  Max: {max(ratings):.1f}")
    print(f"  Std: {var ** 0.5:.1f}")

    print(f"\nTop 10:")
    for rank, r in enumerate(result.final_ratings[:10], start=1):
        print(f"  {rank:>2}. {r.player}: {r.rating:.1f} ({r.rating - config.start_rating:+.1f})")

    scaled_rounds = sorted({(s.round_seq, s.round_label, s.scale_factor) for s in result.scaling_records})
    if scaled_rounds:
        print(f"\nDelta Cap Interventions ({len(scaled_rounds)}):")
        for seq, label, factor in scaled_rounds:
            print(f"  {label} (seq {seq}): scale {factor:.4f}")


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        config = build_config(args)
        summary = run_rating_pipeline(args.input, output=args.output, config=config)
    except RatingError as e:
        print(f"\n{e.user_message}", file=sys.stderr)
        return 1

    if summary['status'] != 'success':
        print(f"\n{summary['message']}", file=sys.stderr)
        return 1

    print_summary(summary['result'], config)
    for name, path in summary['files'].items():
        print(f"  Saved {name}: {path}")
    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
