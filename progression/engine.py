"""
승급 엔진

자격 계산기와 심사일 추정기를 묶어 회원별 리포트와 명단 리포트를 생성
"""
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Union

from loguru import logger

from .config import ProgressionConfig, get_progression_config
from .eligibility import Clock, EligibilityCalculator
from .errors import InvalidSessionKind, MalformedMemberHistory
from .estimator import ExamDateEstimator
from .ladder import GradeLadder
from .models import (
    EligibilityState,
    ExamRecord,
    ExamResult,
    Member,
    MemberReport,
    RosterReport,
)
from .schemas import MemberDiagnostic
from .weighting import AttendanceWeighting


class ProgressionEngine:
    """승급 엔진 (단일 회원 / 명단 리포트)"""

    def __init__(
        self,
        ladder: Optional[GradeLadder] = None,
        weighting: Optional[AttendanceWeighting] = None,
        config: Optional[ProgressionConfig] = None,
        clock: Clock = date.today,
    ):
        self.config = config or get_progression_config()
        self.ladder = ladder if ladder is not None else GradeLadder.default()
        self.weighting = weighting or AttendanceWeighting()
        self.clock = clock
        self.estimator = ExamDateEstimator(self.config)
        self.calculator = EligibilityCalculator(
            self.ladder,
            self.weighting,
            estimator=self.estimator,
            config=self.config,
            clock=clock,
        )

    # =====================================================
    # 단일 회원
    # =====================================================

    def evaluate(self, member: Member):
        return self.calculator.evaluate(member)

    def estimate(self, baseline_date: date, required_months: int) -> date:
        return self.estimator.estimate(baseline_date, required_months)

    def report_for(self, member: Member) -> MemberReport:
        """회원별 승급 리포트"""
        status = self.calculator.evaluate(member)
        today = self.clock()

        days_until_exam = None
        if status.estimated_date is not None:
            days_until_exam = self.estimator.days_until(status.estimated_date, today)

        return MemberReport(
            member_id=member.member_id,
            status=status,
            remaining_weeks=self.estimator.remaining_weeks(status.credits_remaining),
            days_until_exam=days_until_exam,
            attendance_rate=self.calculator.attendance_rate(member),
        )

    # =====================================================
    # 명단
    # =====================================================

    def roster_report(self, members: Iterable[Member]) -> RosterReport:
        """명단 리포트

        회원은 상태별로 정확히 한 목록에만 들어감.
        이력 오류가 있는 회원은 제외하고 진단 목록에 기록.
        """
        report = RosterReport()

        for member in members:
            try:
                member_report = self.report_for(member)
            except (MalformedMemberHistory, InvalidSessionKind) as e:
                diagnostic = MemberDiagnostic(
                    member_id=e.member_id or member.member_id,
                    error_type=type(e).__name__,
                    message=str(e),
                    field=e.field,
                    value=e.value,
                )
                logger.warning(f"회원 제외 ({diagnostic.member_id}): {diagnostic.message}")
                report.diagnostics.append(diagnostic)
                continue

            report.bucket(member_report.state).append(member_report)

        logger.info(
            f"명단 리포트: 심사 가능 {len(report.ready)}명, 지연 {len(report.overdue)}명, "
            f"진행 중 {len(report.in_progress)}명, 최고 급수 {len(report.max_grade)}명, "
            f"제외 {len(report.diagnostics)}명"
        )
        return report

    # =====================================================
    # 심사 결과 등록
    # =====================================================

    def register_exam(
        self,
        member: Member,
        exam_date: date,
        result: Union[str, ExamResult],
        notes: Optional[str] = None,
    ) -> Member:
        """심사 결과를 반영한 새 스냅샷 반환 (원본은 그대로)

        합격 시 현재 급수와 기준일(last_exam_date)이 갱신됨
        """
        self.calculator.validate_current_grade(member)
        result = ExamResult(result)

        target = self.ladder.next_grade(member.current_grade)
        if target is None:
            raise MalformedMemberHistory(
                f"최고 급수 회원은 심사를 등록할 수 없습니다: {member.current_grade}",
                member_id=member.member_id,
                field="current_grade",
                value=member.current_grade,
            )

        record = ExamRecord(
            member_id=member.member_id,
            date=exam_date,
            from_grade=member.current_grade,
            to_grade=target.id,
            result=result,
            notes=notes,
        )
        exams = member.exams + (record,)

        if result == ExamResult.PASSED:
            logger.info(f"{member.member_id}: {member.current_grade} → {target.id} 합격")
            return replace(member, exams=exams, current_grade=target.id, last_exam_date=exam_date)

        logger.info(f"{member.member_id}: {target.id} 불합격, 재심사 가능일 {self.estimator.retake_date(exam_date)}")
        return replace(member, exams=exams)

    def retake_date(self, failed_on: date) -> date:
        return self.estimator.retake_date(failed_on)

    def notice_due(self, report: MemberReport, last_notice_date: Optional[date] = None) -> bool:
        """심사 안내 발송 대상 여부 (최고 급수 회원 제외)"""
        if report.state == EligibilityState.MAX_GRADE:
            return False
        return self.estimator.notice_due(report.estimated_date, self.clock(), last_notice_date)


_engine: Optional[ProgressionEngine] = None


def get_engine() -> ProgressionEngine:
    """엔진 싱글톤 인스턴스 반환"""
    global _engine
    if _engine is None:
        _engine = ProgressionEngine()
    return _engine


def reload_engine(ladder: Optional[GradeLadder] = None, config: Optional[ProgressionConfig] = None) -> ProgressionEngine:
    """엔진 리로드 (설정 변경 시 호출 측에서 직렬화해서 호출)"""
    global _engine
    _engine = ProgressionEngine(ladder=ladder, config=config)
    return _engine
