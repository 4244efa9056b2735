"""Score sheet (wide) → long-form 변환 테스트."""

import numpy as np
import pandas as pd
import pytest

from src.engine.elo_types import ScoreRecord
from src.engine.errors import InputFileError
from src.etl.scoresheet_to_long import (
    convert_scoresheet_to_long,
    load_scoresheet,
    records_from_long,
)


def _make_sheet(rows, columns=('Name', 'TR-1', 'TN-2', 'CM-3')):
    """테스트용 wide score sheet 생성."""
    return pd.DataFrame(rows, columns=list(columns))


def test_basic_conversion():
    sheet = _make_sheet([
        ['Alice', 54, 50, 48],
        ['Bob', 49, 52, 51],
    ])
    result = convert_scoresheet_to_long(sheet)

    assert list(result.columns) == ['player', 'round_label', 'score', 'round_seq']
    assert len(result) == 6
    assert list(result['round_seq']) == [0, 0, 1, 1, 2, 2]
    assert list(result['player']) == ['Alice', 'Bob'] * 3
    assert list(result['round_label']) == ['TR-1', 'TR-1', 'TN-2', 'TN-2', 'CM-3', 'CM-3']
    assert result.iloc[0]['score'] == 54.0


def test_missing_scores_skipped():
    """빈 칸 / 숫자 아닌 점수는 해당 라운드 불참 처리."""
    sheet = _make_sheet([
        ['Alice', 54, None, 'DNF'],
        ['Bob', '', 52, '51'],
    ])
    result = convert_scoresheet_to_long(sheet)

    pairs = list(zip(result['player'], result['round_label'], result['score']))
    assert pairs == [('Alice', 'TR-1', 54.0), ('Bob', 'TN-2', 52.0), ('Bob', 'CM-3', 51.0)]


def test_rows_without_name_skipped():
    sheet = _make_sheet([
        [None, 54, 50, 48],
        ['  Carol ', 49, 52, 51],
        ['', 1, 2, 3],
    ])
    result = convert_scoresheet_to_long(sheet)
    assert set(result['player']) == {'Carol'}
    assert len(result) == 3


def test_unnamed_columns_ignored():
    """'Unnamed: n' 컬럼은 라운드가 아님 (round_seq에도 포함 안 됨)."""
    sheet = _make_sheet(
        [['Alice', 54, 999, 50]],
        columns=('Name', 'TR-1', 'Unnamed: 2', 'TN-2'),
    )
    result = convert_scoresheet_to_long(sheet)
    assert list(result['round_label']) == ['TR-1', 'TN-2']
    assert list(result['round_seq']) == [0, 1]


def test_alternative_player_column():
    sheet = _make_sheet([['Alice', 54], ['Bob', 49]], columns=('player', 'TN-1'))
    result = convert_scoresheet_to_long(sheet)
    assert list(result['player']) == ['Alice', 'Bob']
    assert list(result['round_seq']) == [0, 0]


def test_no_player_column_returns_empty():
    sheet = _make_sheet([[54, 50]], columns=('TR-1', 'TN-2'))
    result = convert_scoresheet_to_long(sheet)
    assert result.empty
    assert list(result.columns) == ['player', 'round_label', 'score', 'round_seq']


def test_load_scoresheet_csv(tmp_path):
    path = tmp_path / "scores.csv"
    path.write_text("Name,TR-1,TN-2\nAlice,54,50\nBob,49,\n", encoding="utf-8")

    sheet = load_scoresheet(path)
    result = convert_scoresheet_to_long(sheet)
    assert len(result) == 3
    assert np.isclose(result['score'].sum(), 153.0)


def test_records_from_long():
    sheet = _make_sheet([['Alice', 54, 50, 48]])
    records = records_from_long(convert_scoresheet_to_long(sheet))

    assert len(records) == 3
    assert all(isinstance(r, ScoreRecord) for r in records)
    assert records[1] == ScoreRecord(player='Alice', round_seq=1, round_label='TN-2', score=50.0)


def test_load_scoresheet_xlsx(tmp_path):
    """.xlsx → 첫 번째 시트 로드."""
    path = tmp_path / "scores.xlsx"
    _make_sheet([['Alice', 54, 50, 48], ['Bob', 49, None, 51]]).to_excel(path, index=False)

    result = convert_scoresheet_to_long(load_scoresheet(path))
    assert len(result) == 5
    assert list(result['round_label'].unique()) == ['TR-1', 'TN-2', 'CM-3']
    assert result.iloc[0]['score'] == 54.0


class TestLoadScoresheetErrors:
    """파일 로드 실패 → InputFileError (Error processing file: ...)."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputFileError) as exc_info:
            load_scoresheet(tmp_path / "missing.csv")
        assert exc_info.value.user_message.startswith('Error processing file:')
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(InputFileError) as exc_info:
            load_scoresheet(path)
        assert isinstance(exc_info.value.__cause__, pd.errors.EmptyDataError)

    def test_bad_encoding(self, tmp_path):
        path = tmp_path / "scores.csv"
        path.write_bytes(b"Name,TR-1\n\x93Alice\x94,3\n")
        with pytest.raises(InputFileError):
            load_scoresheet(path)

    def test_corrupt_workbook(self, tmp_path):
        path = tmp_path / "scores.xlsx"
        path.write_bytes(b"not a zip archive")
        with pytest.raises(InputFileError):
            load_scoresheet(path)
