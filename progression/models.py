"""
승급 엔진 데이터 모델

- 출석/심사 기록은 생성 후 변경하지 않는 이력
- Member는 호출 측이 조립해 넘기는 읽기 전용 스냅샷
- 평가 결과는 별도 값(EligibilityStatus, MemberReport)으로 반환
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .ladder import Category, Grade


class ExamResult(str, Enum):
    """심사 결과"""
    PASSED = "passed"
    FAILED = "failed"


class EligibilityState(str, Enum):
    """심사 자격 상태"""
    IN_PROGRESS = "in_progress"
    READY = "ready"
    OVERDUE = "overdue"
    MAX_GRADE = "max_grade"


# =====================================================
# 이력 기록
# =====================================================

@dataclass(frozen=True)
class AttendanceRecord:
    """출석 기록"""
    member_id: str
    date: date
    present: bool
    session_kind: str = "normal"
    credit_value: Optional[float] = None  # AttendanceWeighting.record()에서 채움
    notes: Optional[str] = None


@dataclass(frozen=True)
class ExamRecord:
    """심사 기록"""
    member_id: str
    date: date
    from_grade: str
    to_grade: str
    result: ExamResult
    notes: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.result == ExamResult.PASSED


@dataclass(frozen=True)
class Member:
    """회원 스냅샷"""
    member_id: str
    category: Category
    current_grade: str
    join_date: date
    last_exam_date: Optional[date] = None
    attendance: Tuple[AttendanceRecord, ...] = ()
    exams: Tuple[ExamRecord, ...] = ()
    birth_date: Optional[date] = None
    name: str = ""

    def __post_init__(self):
        # 리스트로 넘겨도 불변 튜플로 고정
        object.__setattr__(self, "attendance", tuple(self.attendance))
        object.__setattr__(self, "exams", tuple(self.exams))

    @property
    def last_passed_exam(self) -> Optional[ExamRecord]:
        passed = [e for e in self.exams if e.passed]
        if not passed:
            return None
        return max(passed, key=lambda e: e.date)

    @property
    def baseline_date(self) -> date:
        """기준일: 마지막 심사일 → 마지막 합격 기록 → 가입일"""
        if self.last_exam_date is not None:
            return self.last_exam_date
        last_passed = self.last_passed_exam
        if last_passed is not None:
            return last_passed.date
        return self.join_date


# =====================================================
# 평가 결과
# =====================================================

@dataclass(frozen=True)
class EligibilityStatus:
    """심사 자격 평가 결과"""
    state: EligibilityState
    baseline_date: date
    credits_since_baseline: float
    months_since_baseline: int
    next_grade: Optional[Grade] = None
    estimated_date: Optional[date] = None
    credits_remaining: float = 0
    months_remaining: int = 0
    days_overdue: int = 0
    min_age_date: Optional[date] = None

    @property
    def is_eligible(self) -> bool:
        return self.state in (EligibilityState.READY, EligibilityState.OVERDUE)


def _serialize(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class MemberReport:
    """회원별 승급 리포트"""
    member_id: str
    status: EligibilityStatus
    remaining_weeks: int = 0
    days_until_exam: Optional[int] = None
    attendance_rate: int = 0

    @property
    def state(self) -> EligibilityState:
        return self.status.state

    @property
    def next_grade(self) -> Optional[Grade]:
        return self.status.next_grade

    @property
    def estimated_date(self) -> Optional[date]:
        return self.status.estimated_date

    @property
    def credits_since_baseline(self) -> float:
        return self.status.credits_since_baseline

    @property
    def months_since_baseline(self) -> int:
        return self.status.months_since_baseline

    def to_dict(self) -> Dict[str, Any]:
        """JSON 내보내기용 딕셔너리"""
        status = self.status
        return _serialize({
            "member_id": self.member_id,
            "status": status.state,
            "next_grade": status.next_grade.id if status.next_grade else None,
            "estimated_date": status.estimated_date,
            "baseline_date": status.baseline_date,
            "credits_since_baseline": status.credits_since_baseline,
            "months_since_baseline": status.months_since_baseline,
            "credits_remaining": status.credits_remaining,
            "months_remaining": status.months_remaining,
            "days_overdue": status.days_overdue,
            "min_age_date": status.min_age_date,
            "remaining_weeks": self.remaining_weeks,
            "days_until_exam": self.days_until_exam,
            "attendance_rate": self.attendance_rate,
        })


@dataclass
class RosterReport:
    """명단 전체 리포트 (대시보드/알림용)"""
    ready: List[MemberReport] = field(default_factory=list)
    overdue: List[MemberReport] = field(default_factory=list)
    in_progress: List[MemberReport] = field(default_factory=list)
    max_grade: List[MemberReport] = field(default_factory=list)
    diagnostics: List[Any] = field(default_factory=list)  # List[MemberDiagnostic]

    def bucket(self, state: EligibilityState) -> List[MemberReport]:
        return {
            EligibilityState.READY: self.ready,
            EligibilityState.OVERDUE: self.overdue,
            EligibilityState.IN_PROGRESS: self.in_progress,
            EligibilityState.MAX_GRADE: self.max_grade,
        }[state]

    @property
    def total_reported(self) -> int:
        return len(self.ready) + len(self.overdue) + len(self.in_progress) + len(self.max_grade)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ready": [r.to_dict() for r in self.ready],
            "overdue": [r.to_dict() for r in self.overdue],
            "in_progress": [r.to_dict() for r in self.in_progress],
            "max_grade": [r.to_dict() for r in self.max_grade],
            "diagnostics": [d.model_dump(mode="json") for d in self.diagnostics],
        }
