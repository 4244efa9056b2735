"""Rating Pipeline — score sheet 로드부터 결과 export까지.

Flow:
    1. Score sheet 로드 (.xlsx / .csv)
    2. ETL: wide → long (scoresheet_to_long)
    3. compute_ratings → rating 계산 (EmptyInputError → no_data)
    4. 결과 export (.xlsx workbook 또는 CSV, output 지정 시)
"""

import logging
from pathlib import Path

from src.engine.elo_batch import compute_ratings
from src.engine.errors import EmptyInputError
from src.engine.rating_config import RatingConfig
from src.etl.export_results import export_results
from src.etl.scoresheet_to_long import (
    convert_scoresheet_to_long,
    load_scoresheet,
    records_from_long,
)

logger = logging.getLogger(__name__)


def run_rating_pipeline(
    input_path: Path | str,
    output: Path | str | None = None,
    config: RatingConfig | None = None,
) -> dict:
    """메인 파이프라인.

    Args:
        input_path: wide-format score sheet (.xlsx / .xls / .csv)
        output: 결과 저장 경로. .xlsx면 workbook, 그 외는 CSV 디렉토리 (None이면 저장 안 함)
        config: RatingConfig (None이면 기본값)

    Returns:
        dict with status and stats (+ 'result': RatingResult on success)

    Raises:
        InputFileError: score sheet 로드 실패
        ComputationError: rating 계산 실패
    """
    config = config or RatingConfig()
    logger.info(f"=== Rating Pipeline: {input_path} ===")

    # 1. Load
    wide_df = load_scoresheet(input_path)

    # 2. ETL
    long_df = convert_scoresheet_to_long(wide_df)
    records = records_from_long(long_df)
    logger.info(f"  {len(records):,} score records")

    # 3. Compute (유효 레코드 없으면 no_data)
    try:
        result = compute_ratings(records, config)
    except EmptyInputError as e:
        logger.info(f"  {e}")
        return {'status': 'no_data', 'input': str(input_path), 'message': e.user_message}

    # 4. Export
    written = {}
    if output is not None:
        logger.info("  Exporting results...")
        written = export_results(result, output)

    summary = {
        'status': 'success',
        'input': str(input_path),
        'record_count': len(records),
        'round_count': len({s.round_seq for s in result.snapshots}),
        'player_count': len(result.final_ratings),
        'scaling_count': len(result.scaling_records),
        'files': {name: str(path) for name, path in written.items()},
        'result': result,
    }
    logger.info(f"  === Done: {summary['round_count']} rounds, {summary['player_count']} players ===")
    return summary
