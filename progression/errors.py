"""
승급 엔진 예외 정의

- ConfigurationError: 급수표/가중치 설정 불일치 (치명적, 시작 중단)
- InvalidSessionKind: 알 수 없는 출석 세션 종류 (해당 기록 거부)
- MalformedMemberHistory: 급수표에 없는 급수를 참조하는 회원 이력 (배치에서 제외)
"""
from typing import Any, Optional


class ProgressionError(Exception):
    """승급 엔진 기본 예외"""


class ConfigurationError(ProgressionError):
    """급수표 또는 가중치 설정 오류"""


class InvalidSessionKind(ProgressionError, ValueError):
    """알 수 없는 세션 종류"""

    field = "attendance.session_kind"

    def __init__(self, value: Any, member_id: Optional[str] = None):
        self.value = value
        self.member_id = member_id
        super().__init__(f"알 수 없는 세션 종류: {value!r}")


class MalformedMemberHistory(ProgressionError):
    """회원 이력 오류"""

    def __init__(self, message: str, member_id: Optional[str] = None,
                 field: Optional[str] = None, value: Any = None):
        self.member_id = member_id
        self.field = field
        self.value = value
        super().__init__(message)
