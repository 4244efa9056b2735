"""Round Elo 설정 상수 (기본값)."""

# 초기 rating
START_RATING = 1500.0

# Base K-factor
BASE_K = 36.0

# Margin of victory 가중치 사용 여부
USE_MOV = True

# Delta cap 적용 시작 라운드 (처리된 라운드 수 기준, 1-based)
DELTA_CAP_START_ROUND = 2

# ─── Round type ───

# 인식 못한 라운드 라벨의 fallback type
FALLBACK_ROUND_TYPE = 'TR'

# Round type별 K multiplier
ROUND_TYPE_WEIGHTS: dict[str, float] = {
    'TR': 0.75,
    'CR': 0.75,
    'TN': 1.0,
    'CM': 0.25,
}

# Round type별 최대 |delta| (None = uncapped)
DELTA_CAPS: dict[str, float | None] = {
    'TN': 300.0,
    'CR': 225.0,
    'TR': None,
    'CM': 150.0,
}

# DELTA_CAPS에 없는 type의 cap
DEFAULT_DELTA_CAP = 300.0

# ─── Expected score / MOV ───

EXPECTED_DIVISOR = 400.0
RATING_DIFF_CLAMP = 300.0   # expected_score 시그니처에만 존재 (exponent에는 미적용)

MOV_DAMPING = 2.2
MOV_RATING_SCALE = 0.001
