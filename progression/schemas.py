"""
저장소 레코드 스키마

Pydantic 모델로 키-값 저장소의 원본 레코드를 검증하고 불변 스냅샷으로 변환
"""
from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import InvalidSessionKind
from .ladder import Category, Grade, Requirements
from .models import ExamRecord, ExamResult, Member
from .weighting import AttendanceWeighting, SessionKind


# ==================== 진단 ====================

class MemberDiagnostic(BaseModel):
    """회원별 진단 (배치 리포트에서 제외된 회원)"""
    member_id: Optional[str] = Field(None, description="회원 ID")
    error_type: str = Field(..., description="오류 유형")
    message: str = Field(..., description="오류 메시지")
    field: Optional[str] = Field(None, description="관련 필드")
    value: Optional[Any] = Field(None, description="문제가 된 값")


# ==================== 급수표 ====================

class RequirementsSchema(BaseModel):
    """승급 요건 스키마"""
    min_attendance_credits: float = Field(..., ge=0, description="최소 출석 크레딧")
    min_months: int = Field(..., ge=0, description="최소 경과 개월")
    min_age: Optional[int] = Field(None, ge=0, description="최소 나이")


class GradeSchema(BaseModel):
    """급수 스키마"""
    id: str = Field(..., min_length=1, description="급수 ID")
    name: str = Field(..., min_length=1, description="표시명")
    category: Category = Field(..., description="회원 구분")
    ordinal: int = Field(..., ge=1, description="급수표 내 순서")
    belt_color: str = Field(default="", description="띠 색")
    requirements: Optional[RequirementsSchema] = Field(None, description="다음 급수 승급 요건")

    def to_grade(self) -> Grade:
        requirements = None
        if self.requirements is not None:
            requirements = Requirements(
                min_attendance_credits=self.requirements.min_attendance_credits,
                min_months=self.requirements.min_months,
                min_age=self.requirements.min_age,
            )
        return Grade(
            id=self.id,
            name=self.name,
            category=self.category,
            ordinal=self.ordinal,
            belt_color=self.belt_color,
            requirements=requirements,
        )


# ==================== 회원 이력 ====================

class AttendanceRecordSchema(BaseModel):
    """출석 기록 스키마"""
    date: date
    present: bool = Field(default=True)
    session_kind: SessionKind = Field(default=SessionKind.NORMAL, description="세션 종류")
    notes: Optional[str] = None

    @field_validator("session_kind", mode="before")
    @classmethod
    def normalize_session_kind(cls, v: Any) -> SessionKind:
        """레거시 세션 코드 정규화 (빈 값은 일반 수업)"""
        if v is None or v == "":
            return SessionKind.NORMAL
        return AttendanceWeighting.parse_kind(v)


class ExamRecordSchema(BaseModel):
    """심사 기록 스키마"""
    date: date
    from_grade: str = Field(..., min_length=1)
    to_grade: str = Field(..., min_length=1)
    result: ExamResult
    notes: Optional[str] = None


class MemberRecordSchema(BaseModel):
    """회원 레코드 스키마"""
    member_id: str = Field(..., min_length=1, description="회원 ID")
    name: str = Field(default="", description="이름")
    category: Category = Field(..., description="회원 구분")
    current_grade: str = Field(..., min_length=1, description="현재 급수 ID")
    join_date: date
    last_exam_date: Optional[date] = None
    birth_date: Optional[date] = None
    attendance: List[AttendanceRecordSchema] = Field(default_factory=list)
    exams: List[ExamRecordSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def derive_last_exam_date(self) -> "MemberRecordSchema":
        """마지막 심사일이 없으면 합격 기록에서 보완"""
        if self.last_exam_date is None:
            passed = [e.date for e in self.exams if e.result == ExamResult.PASSED]
            if passed:
                self.last_exam_date = max(passed)
        return self

    def to_member(self, weighting: Optional[AttendanceWeighting] = None) -> Member:
        """불변 회원 스냅샷으로 변환 (날짜순 정렬)"""
        weighting = weighting or AttendanceWeighting()
        attendance = tuple(
            weighting.record(self.member_id, a.date, a.present, a.session_kind, a.notes)
            for a in sorted(self.attendance, key=lambda a: a.date)
        )
        exams = tuple(
            ExamRecord(
                member_id=self.member_id,
                date=e.date,
                from_grade=e.from_grade,
                to_grade=e.to_grade,
                result=e.result,
                notes=e.notes,
            )
            for e in sorted(self.exams, key=lambda e: e.date)
        )
        return Member(
            member_id=self.member_id,
            category=self.category,
            current_grade=self.current_grade,
            join_date=self.join_date,
            last_exam_date=self.last_exam_date,
            attendance=attendance,
            exams=exams,
            birth_date=self.birth_date,
            name=self.name,
        )


def member_from_record(data: dict, weighting: Optional[AttendanceWeighting] = None) -> Member:
    """원본 딕셔너리 → 회원 스냅샷

    알 수 없는 세션 종류는 InvalidSessionKind, 그 외 형식 오류는 pydantic ValidationError
    """
    member_id = data.get("member_id")
    try:
        schema = MemberRecordSchema(**data)
    except PydanticValidationError as e:
        # 세션 종류 오류는 기록 거부로 분리
        for error in e.errors():
            if error["loc"] and error["loc"][-1] == "session_kind":
                raise InvalidSessionKind(error.get("input"), member_id=member_id) from e
        raise
    return schema.to_member(weighting)
