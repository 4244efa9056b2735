"""Wide score sheet (선수 × 라운드) → long-form score records 변환."""

import logging
import zipfile
from pathlib import Path

import pandas as pd

from src.engine.elo_types import ScoreRecord
from src.engine.errors import InputFileError

logger = logging.getLogger(__name__)

PLAYER_COLUMNS = ('Name', 'name', 'Player', 'player')

LONG_COLUMNS = ['player', 'round_label', 'score', 'round_seq']

EXCEL_SUFFIXES = ('.xlsx', '.xlsm', '.xls')

READ_ERRORS = (
    OSError,
    UnicodeDecodeError,
    ValueError,
    zipfile.BadZipFile,
    pd.errors.EmptyDataError,
    pd.errors.ParserError,
)


def load_scoresheet(path: Path | str) -> pd.DataFrame:
    """Score sheet 로드 (.xlsx/.xls → 첫 번째 시트, 그 외 CSV).

    첫 컬럼은 선수 이름, 이후 컬럼은 라운드별 점수.

    Raises:
        InputFileError: 파일 없음 / 빈 파일 / 인코딩·형식 오류
    """
    path = Path(path)
    try:
        if path.suffix.lower() in EXCEL_SUFFIXES:
            return pd.read_excel(path, sheet_name=0)
        return pd.read_csv(path)
    except READ_ERRORS as e:
        raise InputFileError(str(path), str(e) or type(e).__name__) from e


def _round_columns(columns) -> list:
    return [
        c for c in columns
        if c not in PLAYER_COLUMNS and not str(c).lower().startswith('unnamed')
    ]


def _player_name(row: pd.Series, name_columns: list[str]):
    for col in name_columns:
        value = row[col]
        if pd.notna(value) and str(value).strip():
            return str(value).strip()
    return None


def convert_scoresheet_to_long(wide_df: pd.DataFrame) -> pd.DataFrame:
    # 1. 선수 이름 컬럼 / 라운드 컬럼 (시트 순서 = round_seq)
    name_columns = [c for c in PLAYER_COLUMNS if c in wide_df.columns]
    round_columns = _round_columns(wide_df.columns)

    if not name_columns or wide_df.empty:
        return pd.DataFrame(columns=LONG_COLUMNS)

    # 2. 숫자가 아닌 점수 → NaN
    scores = wide_df[round_columns].apply(pd.to_numeric, errors='coerce')

    rows = []
    for idx, row in wide_df.iterrows():
        player = _player_name(row, name_columns)
        if player is None:
            logger.warning(f"Row {idx} missing player name, skipped")
            continue

        for seq, col in enumerate(round_columns):
            score = scores.at[idx, col]
            if pd.isna(score):
                continue
            rows.append({
                'player': player,
                'round_label': str(col).strip(),
                'score': float(score),
                'round_seq': seq,
            })

    long_df = pd.DataFrame(rows, columns=LONG_COLUMNS)

    # 3. 정렬 (라운드 → 시트 행 순서)
    return long_df.sort_values('round_seq', kind='stable').reset_index(drop=True)


def records_from_long(long_df: pd.DataFrame) -> list[ScoreRecord]:
    """Long-form DataFrame → ScoreRecord 리스트 (생성 시 검증)."""
    return [
        ScoreRecord(
            player=str(row.player),
            round_seq=int(row.round_seq),
            round_label=str(row.round_label),
            score=float(row.score),
        )
        for row in long_df.itertuples(index=False)
    ]
