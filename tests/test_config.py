"""
설정 로드 테스트
"""
import pytest

from progression.config import ProgressionConfig, load_config
from progression.errors import ConfigurationError


class TestProgressionConfig:
    """승급 설정"""

    def test_defaults(self, monkeypatch):
        for key in ("PROGRESSION_CLOSURE_MONTHS", "PROGRESSION_OVERDUE_GRACE_DAYS", "PROGRESSION_DAYS_PER_MONTH"):
            monkeypatch.delenv(key, raising=False)
        config = ProgressionConfig()
        assert config.closure_months == [7, 8]
        assert config.overdue_grace_days == 30
        assert config.days_per_month == 30
        assert config.closure_discount == 0.9

    def test_env_override(self, monkeypatch):
        """PROGRESSION_ 접두사 환경 변수"""
        monkeypatch.setenv("PROGRESSION_OVERDUE_GRACE_DAYS", "45")
        monkeypatch.setenv("PROGRESSION_CLOSURE_MONTHS", "[6, 7]")
        config = load_config()
        assert config.overdue_grace_days == 45
        assert config.closure_months == [6, 7]

    def test_closure_months_normalized(self):
        """중복 제거 및 정렬"""
        assert load_config(closure_months=[8, 7, 8]).closure_months == [7, 8]

    def test_invalid_month(self):
        with pytest.raises(ConfigurationError):
            load_config(closure_months=[13])

    def test_closure_covers_whole_year(self):
        with pytest.raises(ConfigurationError):
            load_config(closure_months=list(range(1, 13)))

    def test_invalid_discount(self):
        with pytest.raises(ConfigurationError):
            load_config(closure_discount=0)

    def test_invalid_days_per_month(self):
        with pytest.raises(ConfigurationError):
            load_config(days_per_month=0)
