"""
출석 가중치

세션 종류별 출석 크레딧
- 일반 수업 1, 특별 수업 2, 국내 강습회 3, 국제 강습회 6
- 알 수 없는 종류는 기본값으로 처리하지 않고 InvalidSessionKind
"""
from datetime import date
from enum import Enum
from typing import Dict, Mapping, Optional, Union

from loguru import logger

from .errors import ConfigurationError, InvalidSessionKind
from .models import AttendanceRecord


class SessionKind(str, Enum):
    """세션 종류"""
    NORMAL = "normal"
    SPECIAL = "special"
    NATIONAL_COURSE = "national-course"
    INTERNATIONAL_COURSE = "international-course"


# 세션 종류별 크레딧
SESSION_CREDIT_VALUES: Dict[SessionKind, float] = {
    SessionKind.NORMAL: 1,
    SessionKind.SPECIAL: 2,
    SessionKind.NATIONAL_COURSE: 3,
    SessionKind.INTERNATIONAL_COURSE: 6,
}

# 레거시 코드 매핑 (기존 저장 데이터 호환)
LEGACY_SESSION_KIND_MAP = {
    "especial": SessionKind.SPECIAL,
    "curso_nacional": SessionKind.NATIONAL_COURSE,
    "curso_internacional": SessionKind.INTERNATIONAL_COURSE,
    "national_course": SessionKind.NATIONAL_COURSE,
    "international_course": SessionKind.INTERNATIONAL_COURSE,
}


class AttendanceWeighting:
    """세션 종류 → 크레딧 변환"""

    def __init__(self, weights: Optional[Mapping[Union[str, SessionKind], float]] = None):
        if weights is None:
            weights = SESSION_CREDIT_VALUES

        table: Dict[SessionKind, float] = {}
        for kind, value in weights.items():
            try:
                parsed = self.parse_kind(kind)
            except InvalidSessionKind:
                raise ConfigurationError(f"가중치 표에 알 수 없는 세션 종류: {kind!r}")
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(f"가중치는 양수여야 합니다: {kind!r}={value!r}")
            table[parsed] = value

        missing = [k.value for k in SessionKind if k not in table]
        if missing:
            logger.error(f"가중치 표 누락: {missing}")
            raise ConfigurationError(f"가중치 표에 누락된 세션 종류: {', '.join(missing)}")

        self._table = table

    @staticmethod
    def parse_kind(value: Union[str, SessionKind]) -> SessionKind:
        """문자열에서 세션 종류 추출 (레거시 코드 포함)"""
        if isinstance(value, SessionKind):
            return value
        if not isinstance(value, str):
            raise InvalidSessionKind(value)

        key = value.strip().lower()
        if key in LEGACY_SESSION_KIND_MAP:
            return LEGACY_SESSION_KIND_MAP[key]
        try:
            return SessionKind(key)
        except ValueError:
            raise InvalidSessionKind(value)

    def credit_value(self, session_kind: Union[str, SessionKind]) -> float:
        """세션 종류별 크레딧"""
        return self._table[self.parse_kind(session_kind)]

    def record(
        self,
        member_id: str,
        on: date,
        present: bool,
        session_kind: Union[str, SessionKind] = SessionKind.NORMAL,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """출석 기록 생성 (크레딧 포함)"""
        try:
            kind = self.parse_kind(session_kind)
        except InvalidSessionKind as e:
            e.member_id = member_id
            raise
        return AttendanceRecord(
            member_id=member_id,
            date=on,
            present=present,
            session_kind=kind,
            credit_value=self._table[kind],
            notes=notes,
        )

    def as_dict(self) -> Dict[str, float]:
        return {kind.value: value for kind, value in self._table.items()}
