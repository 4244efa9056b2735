"""RatingResult → workbook (.xlsx, collection당 1 sheet) 또는 CSV 파일 export."""

import logging
from pathlib import Path

import pandas as pd

from src.engine.elo_types import RatingResult

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIXES = ('.xlsx', '.xlsm')

# table name → (sheet name, csv file name)
TABLES = {
    'final_ratings': ('Final Ratings', 'final_ratings.csv'),
    'history': ('History', 'history.csv'),
    'snapshots': ('Snapshots', 'snapshots.csv'),
    'scaling_details': ('Scaling Details', 'scaling_details.csv'),
}


def _export_frames(result: RatingResult) -> dict[str, pd.DataFrame]:
    """scaling_details는 cap 발동 라운드가 있을 때만 포함."""
    frames = result.to_frames()
    if not result.scaling_records:
        frames.pop('scaling_details')
    return frames


def export_workbook(result: RatingResult, path: Path | str) -> Path:
    """단일 workbook 저장 (sheet: Final Ratings / History / Snapshots / Scaling Details)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(path, engine='openpyxl') as writer:
        for name, frame in _export_frames(result).items():
            sheet_name = TABLES[name][0]
            frame.to_excel(writer, sheet_name=sheet_name, index=False)
            logger.info(f"  {sheet_name}: {len(frame):,} rows")
    logger.info(f"  Saved workbook → {path}")
    return path


def export_csv(result: RatingResult, output_dir: Path | str) -> dict[str, Path]:
    """collection당 CSV 1개 저장."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = {}
    for name, frame in _export_frames(result).items():
        path = output_dir / TABLES[name][1]
        frame.to_csv(path, index=False)
        written[name] = path
        logger.info(f"  {name}: {len(frame):,} rows → {path}")
    return written


def export_results(result: RatingResult, output: Path | str) -> dict[str, Path]:
    """output이 .xlsx면 workbook, 아니면 CSV 디렉토리로 export.

    Returns:
        {table_name: written path}
    """
    output = Path(output)
    if output.suffix.lower() in WORKBOOK_SUFFIXES:
        path = export_workbook(result, output)
        return {name: path for name in _export_frames(result)}
    return export_csv(result, output)
