"""Rating Config Tests."""
import pytest

from src.engine.rating_config import DEFAULT_CONFIG_PATH, RatingConfig


class TestRatingConfigDefaults:
    """기본값 (elo_config 상수) 테스트."""

    @pytest.fixture
    def config(self):
        return RatingConfig()

    def test_scalars(self, config):
        assert config.base_k == 36.0
        assert config.start_rating == 1500.0
        assert config.use_mov is True
        assert config.delta_cap_start_round == 2

    def test_round_k(self, config):
        assert config.get_round_k('TN') == 36.0
        assert config.get_round_k('TR') == 27.0
        assert config.get_round_k('CM') == 9.0
        assert config.get_round_k('??') == 36.0

    def test_delta_caps(self, config):
        assert config.get_delta_cap('TN') == 300.0
        assert config.get_delta_cap('CR') == 225.0
        assert config.get_delta_cap('CM') == 150.0
        assert config.get_delta_cap('TR') is None
        assert config.get_delta_cap('XX') == 300.0

    def test_default_mappings_not_shared(self):
        a = RatingConfig()
        b = RatingConfig()
        a.round_type_weights['TN'] = 5.0
        assert b.round_type_weights['TN'] == 1.0


class TestRatingConfigYaml:
    """YAML 기반 설정 로더 테스트."""

    def test_default_yaml_matches_constants(self):
        assert DEFAULT_CONFIG_PATH.exists()
        assert RatingConfig.from_yaml() == RatingConfig()

    def test_partial_yaml_falls_back(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("base_k: 24\nuse_mov: false\n", encoding="utf-8")

        config = RatingConfig.from_yaml(path)
        assert config.base_k == 24.0
        assert config.use_mov is False
        assert config.start_rating == 1500.0
        assert config.get_delta_cap('TN') == 300.0

    def test_null_cap_is_uncapped(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "delta_caps:\n  TN: null\n  CM: 100\n",
            encoding="utf-8",
        )
        config = RatingConfig.from_yaml(path)
        assert config.get_delta_cap('TN') is None
        assert config.get_delta_cap('CM') == 100.0
        # absent from the mapping → default cap
        assert config.get_delta_cap('CR') == 300.0

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert RatingConfig.from_yaml(path) == RatingConfig()


class TestRatingConfigOverrides:
    def test_with_overrides(self):
        config = RatingConfig().with_overrides(base_k=20.0, use_mov=False, start_rating=None)
        assert config.base_k == 20.0
        assert config.use_mov is False
        assert config.start_rating == 1500.0

    def test_frozen(self):
        config = RatingConfig()
        with pytest.raises(AttributeError):
            config.base_k = 10.0

    def test_round_trip_dict(self):
        config = RatingConfig(base_k=12.0, delta_caps={'TN': None})
        assert RatingConfig.from_dict(config.to_dict()) == config

    @pytest.mark.parametrize("kwargs", [
        {'base_k': 0.0},
        {'base_k': -5.0},
        {'delta_caps': {'TN': -1.0}},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            RatingConfig(**kwargs)
