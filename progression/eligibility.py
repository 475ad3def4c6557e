"""
심사 자격 계산

회원의 출석/심사 이력으로 다음 급수 심사 자격을 판정
1. 기준일 = 마지막 심사일 (없으면 가입일)
2. 기준일 이후 출석 크레딧 합산 (present=True, date > 기준일)
3. 경과 개월 = floor(경과 일수 / days_per_month)
4. 다음 급수 요건과 비교 → 진행 중 / 심사 가능 / 지연 / 최고 급수

크레딧과 기간 요건은 둘 다 충족해야 함 (한쪽만 충족 시 진행 중)
"""
from datetime import date
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta
from loguru import logger

from .config import ProgressionConfig, get_progression_config
from .errors import InvalidSessionKind, MalformedMemberHistory
from .estimator import ExamDateEstimator, min_age_date
from .ladder import Category, GradeLadder
from .models import EligibilityState, EligibilityStatus, Member
from .weighting import AttendanceWeighting

Clock = Callable[[], date]


class EligibilityCalculator:
    """심사 자격 계산기

    순수 조회. 입력 스냅샷을 변경하지 않으며 현재 날짜는 주입된 clock에서 읽음.
    """

    def __init__(
        self,
        ladder: GradeLadder,
        weighting: AttendanceWeighting,
        estimator: Optional[ExamDateEstimator] = None,
        config: Optional[ProgressionConfig] = None,
        clock: Clock = date.today,
    ):
        self.ladder = ladder
        self.weighting = weighting
        self.config = config or get_progression_config()
        self.estimator = estimator or ExamDateEstimator(self.config)
        self.clock = clock

    # =====================================================
    # 이력 검증
    # =====================================================

    def validate_history(self, member: Member):
        """급수표 기준 회원 이력 검증 (오류 시 MalformedMemberHistory)"""
        self.validate_current_grade(member)
        self.validate_attendance(member)
        self.validate_exams(member)

    def validate_current_grade(self, member: Member):
        """현재 급수 존재 여부와 회원 구분 일치 확인"""
        if not self.ladder.has_grade(member.current_grade):
            raise MalformedMemberHistory(
                f"급수표에 없는 현재 급수: {member.current_grade}",
                member_id=member.member_id,
                field="current_grade",
                value=member.current_grade,
            )

        grade = self.ladder.get(member.current_grade)
        try:
            category = Category(member.category)
        except ValueError:
            category = None
        if category != Category(grade.category):
            raise MalformedMemberHistory(
                f"회원 구분({member.category})과 급수 구분({Category(grade.category).value})이 다릅니다",
                member_id=member.member_id,
                field="category",
                value=member.category,
            )

    def validate_attendance(self, member: Member):
        """기준일과 무관하게 모든 출석 기록의 세션 종류 확인"""
        for record in member.attendance:
            try:
                self.weighting.credit_value(record.session_kind)
            except InvalidSessionKind as e:
                e.member_id = member.member_id
                raise

    def validate_exams(self, member: Member):
        for exam in member.exams:
            for field_name in ("from_grade", "to_grade"):
                grade_id = getattr(exam, field_name)
                if not self.ladder.has_grade(grade_id):
                    raise MalformedMemberHistory(
                        f"심사 기록({exam.date.isoformat()})이 급수표에 없는 급수를 참조합니다: {grade_id}",
                        member_id=member.member_id,
                        field=f"exams.{field_name}",
                        value=grade_id,
                    )

    # =====================================================
    # 집계
    # =====================================================

    def credits_since(self, member: Member, baseline: date) -> float:
        """기준일 이후 출석 크레딧 합계"""
        total = 0
        for record in member.attendance:
            if not record.present or record.date <= baseline:
                continue
            try:
                total += self.weighting.credit_value(record.session_kind)
            except InvalidSessionKind as e:
                e.member_id = member.member_id
                raise
        return total

    def months_between(self, start: date, end: date) -> int:
        """경과 개월 수 (일수 / days_per_month 내림, 음수면 0)"""
        days = (end - start).days
        if days <= 0:
            return 0
        return days // self.config.days_per_month

    def attendance_rate(self, member: Member, months: Optional[int] = None) -> int:
        """최근 N개월 가중 출석률 (0-100)

        기간 내 기록 수 대비 출석 크레딧 합. 특강 가중치 때문에 100을 넘으면 100으로 자름.
        """
        if months is None:
            months = self.config.attendance_rate_months
        today = self.clock()
        cutoff = today - relativedelta(months=months)

        relevant = [r for r in member.attendance if cutoff <= r.date <= today]
        if not relevant:
            return 0

        actual = sum(self.weighting.credit_value(r.session_kind) for r in relevant if r.present)
        return min(round(actual / len(relevant) * 100), 100)

    # =====================================================
    # 평가
    # =====================================================

    def evaluate(self, member: Member) -> EligibilityStatus:
        """심사 자격 평가

        심사 기록 검증은 최고 급수 판정 이후에만 수행 (최고 급수 회원은 현재 급수만 확인)
        """
        self.validate_current_grade(member)
        self.validate_attendance(member)

        today = self.clock()
        baseline = member.baseline_date
        credits = self.credits_since(member, baseline)
        months = self.months_between(baseline, today)

        target = self.ladder.next_grade(member.current_grade)
        if target is None:
            logger.debug(f"{member.member_id}: 최고 급수 ({member.current_grade})")
            return EligibilityStatus(
                state=EligibilityState.MAX_GRADE,
                baseline_date=baseline,
                credits_since_baseline=credits,
                months_since_baseline=months,
            )

        self.validate_exams(member)
        req = self.ladder.requirements_for(target)
        estimated = self.estimator.estimate(baseline, req.min_months)

        age_date = min_age_date(member.birth_date, req.min_age)
        if age_date is not None:
            estimated = self.estimator.apply_age_floor(estimated, member.birth_date, req.min_age)

        meets_credits = credits >= req.min_attendance_credits
        meets_time = months >= req.min_months
        meets_age = age_date is None or today >= age_date

        if meets_credits and meets_time and meets_age:
            days_past = (today - estimated).days
            if days_past > self.config.overdue_grace_days:
                state = EligibilityState.OVERDUE
                days_overdue = days_past
            else:
                state = EligibilityState.READY
                days_overdue = 0
            status = EligibilityStatus(
                state=state,
                baseline_date=baseline,
                credits_since_baseline=credits,
                months_since_baseline=months,
                next_grade=target,
                estimated_date=estimated,
                days_overdue=days_overdue,
                min_age_date=age_date,
            )
        else:
            status = EligibilityStatus(
                state=EligibilityState.IN_PROGRESS,
                baseline_date=baseline,
                credits_since_baseline=credits,
                months_since_baseline=months,
                next_grade=target,
                estimated_date=estimated,
                credits_remaining=max(0, req.min_attendance_credits - credits),
                months_remaining=max(0, req.min_months - months),
                min_age_date=age_date,
            )

        logger.debug(
            f"{member.member_id}: {status.state.value} → {target.id} "
            f"(크레딧 {credits}/{req.min_attendance_credits}, {months}/{req.min_months}개월)"
        )
        return status
