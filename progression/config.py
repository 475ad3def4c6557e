"""
승급 엔진 설정
"""
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from .errors import ConfigurationError

load_dotenv()


class ProgressionConfig(BaseSettings):
    """승급/심사 일정 설정

    심사 지연 기준(30일)과 한 달 길이 근사(30일)는 운영 UI에서 쓰던 경험값.
    정확한 의도가 확정될 때까지 설정값으로 둔다.
    """

    # 휴관 기간 (7월, 8월)
    closure_months: List[int] = Field(default=[7, 8], description="수업이 없는 월 (1-12)")

    # 상태 판정
    overdue_grace_days: int = Field(default=30, ge=0, description="예상 심사일 이후 지연 판정 유예 (일)")
    days_per_month: int = Field(default=30, ge=1, description="경과 개월 계산용 한 달 일수")

    # 남은 주 수 추정
    classes_per_week: float = Field(default=2, gt=0, description="주당 수업 횟수")
    closure_discount: float = Field(default=0.9, gt=0, le=1, description="공휴일 손실 보정 계수")

    # 재심사 / 출석률
    retake_interval_months: int = Field(default=1, ge=0, description="불합격 후 재심사까지 개월")
    attendance_rate_months: int = Field(default=2, ge=1, description="출석률 계산 기간 (개월)")

    # 심사 안내
    notice_min_days: int = Field(default=10, ge=0, description="안내 가능 최소 잔여일")
    notice_max_days: int = Field(default=45, ge=0, description="안내 가능 최대 잔여일")
    notice_cooldown_days: int = Field(default=10, ge=0, description="재안내 최소 간격 (일)")

    @field_validator("closure_months")
    @classmethod
    def validate_closure_months(cls, v: List[int]) -> List[int]:
        """휴관 월 검증"""
        for month in v:
            if not 1 <= month <= 12:
                raise ValueError(f"휴관 월은 1-12 범위여야 합니다: {month}")
        if len(set(v)) >= 12:
            raise ValueError("휴관 기간이 1년 전체를 덮을 수 없습니다")
        return sorted(set(v))

    class Config:
        env_prefix = "PROGRESSION_"
        case_sensitive = False


def load_config(**overrides) -> ProgressionConfig:
    """설정 로드 (검증 실패 시 ConfigurationError)"""
    try:
        return ProgressionConfig(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"승급 설정 오류: {e}") from e


@lru_cache()
def get_progression_config() -> ProgressionConfig:
    return load_config()
