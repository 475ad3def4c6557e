"""
심사 예정일 추정

기준일 + 필요 개월 수로 예상 심사일을 계산하고 휴관 기간(기본 7-8월)을 건너뜀.
남은 주 수는 주당 수업 횟수와 공휴일 보정 계수를 이용한 근사치이며
실제 일정을 보장하지 않음.
"""
import math
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from .config import ProgressionConfig, get_progression_config


class ExamDateEstimator:
    """예상 심사일 계산기"""

    def __init__(self, config: Optional[ProgressionConfig] = None):
        self.config = config or get_progression_config()
        self.closure_months = frozenset(self.config.closure_months)

    def shift_out_of_closure(self, target: date) -> date:
        """휴관 월이면 휴관 이후 첫 달 1일로 이동"""
        if target.month not in self.closure_months:
            return target
        shifted = target.replace(day=1)
        while shifted.month in self.closure_months:
            shifted += relativedelta(months=1)
        return shifted

    def estimate(self, baseline_date: date, required_months: int) -> date:
        """예상 심사일

        달력 기준 월 덧셈 (말일 초과 시 해당 월 말일로 보정)
        예: 2024-05-15 + 2개월 = 2024-07-15 → 휴관 → 2024-09-01
        """
        raw = baseline_date + relativedelta(months=required_months)
        return self.shift_out_of_closure(raw)

    def remaining_weeks(self, credits_remaining: float, classes_per_week: Optional[float] = None) -> int:
        """남은 크레딧을 채우는 데 필요한 주 수 (근사치)

        ceil(credits / (classes_per_week * closure_discount))
        closure_discount(기본 0.9)는 공휴일로 빠지는 수업을 대략 반영한 값
        """
        if classes_per_week is None:
            classes_per_week = self.config.classes_per_week
        if classes_per_week <= 0:
            raise ValueError(f"주당 수업 횟수는 양수여야 합니다: {classes_per_week}")
        if credits_remaining <= 0:
            return 0
        effective = classes_per_week * self.config.closure_discount
        return math.ceil(credits_remaining / effective)

    @staticmethod
    def days_until(target: date, today: date) -> int:
        """남은 일수 (지났으면 음수)"""
        return (target - today).days

    def apply_age_floor(self, estimated: date, birth_date: Optional[date], min_age: Optional[int]) -> date:
        """최소 나이 도달일 이전이면 도달일로 미룸 (휴관 월이면 다시 이동)"""
        floor = min_age_date(birth_date, min_age)
        if floor is None:
            return estimated
        return self.shift_out_of_closure(max(estimated, floor))

    def retake_date(self, failed_on: date) -> date:
        """불합격 후 재심사 가능일"""
        return self.estimate(failed_on, self.config.retake_interval_months)

    def notice_due(self, estimated_date: Optional[date], today: date,
                   last_notice_date: Optional[date] = None) -> bool:
        """심사 안내 발송 가능 여부

        - 심사일까지 10~45일 남았을 때
        - 최근 안내 후 10일이 지났을 때만 재안내
        """
        if estimated_date is None:
            return False

        days_left = self.days_until(estimated_date, today)
        if days_left < self.config.notice_min_days or days_left > self.config.notice_max_days:
            return False

        if last_notice_date is not None:
            return (today - last_notice_date).days > self.config.notice_cooldown_days

        return True


def min_age_date(birth_date: Optional[date], min_age: Optional[int]) -> Optional[date]:
    """최소 나이 도달일 (생일 또는 요건 없으면 None)"""
    if birth_date is None or min_age is None:
        return None
    return birth_date + relativedelta(years=min_age)
