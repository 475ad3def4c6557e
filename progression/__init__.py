"""
급수 승급 / 심사 자격 엔진

회원의 가중 출석 이력과 심사 이력으로
- 다음 급수 심사 자격 판정 (진행 중 / 심사 가능 / 지연 / 최고 급수)
- 휴관 기간을 고려한 예상 심사일 추정
- 명단 전체 리포트 (대시보드/알림용)
"""
from .config import ProgressionConfig, get_progression_config, load_config
from .eligibility import EligibilityCalculator
from .engine import ProgressionEngine, get_engine, reload_engine
from .errors import (
    ConfigurationError,
    InvalidSessionKind,
    MalformedMemberHistory,
    ProgressionError,
)
from .estimator import ExamDateEstimator
from .ladder import DEFAULT_GRADES, Category, Grade, GradeLadder, Requirements
from .models import (
    AttendanceRecord,
    EligibilityState,
    EligibilityStatus,
    ExamRecord,
    ExamResult,
    Member,
    MemberReport,
    RosterReport,
)
from .schemas import MemberDiagnostic, MemberRecordSchema, member_from_record
from .weighting import (
    LEGACY_SESSION_KIND_MAP,
    SESSION_CREDIT_VALUES,
    AttendanceWeighting,
    SessionKind,
)

__all__ = [
    # Ladder
    "Category",
    "Grade",
    "GradeLadder",
    "Requirements",
    "DEFAULT_GRADES",
    # Weighting
    "AttendanceWeighting",
    "SessionKind",
    "SESSION_CREDIT_VALUES",
    "LEGACY_SESSION_KIND_MAP",
    # Models
    "AttendanceRecord",
    "ExamRecord",
    "ExamResult",
    "Member",
    "EligibilityState",
    "EligibilityStatus",
    "MemberReport",
    "RosterReport",
    # Engine
    "EligibilityCalculator",
    "ExamDateEstimator",
    "ProgressionEngine",
    "get_engine",
    "reload_engine",
    # Schemas
    "MemberDiagnostic",
    "MemberRecordSchema",
    "member_from_record",
    # Config
    "ProgressionConfig",
    "get_progression_config",
    "load_config",
    # Errors
    "ProgressionError",
    "ConfigurationError",
    "InvalidSessionKind",
    "MalformedMemberHistory",
]
