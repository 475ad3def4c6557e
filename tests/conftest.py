"""
Pytest configuration and fixtures for grade progression tests
"""

import pytest
import sys
from datetime import date, timedelta
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from progression.config import load_config
from progression.ladder import Category, Grade, GradeLadder, Requirements
from progression.engine import ProgressionEngine
from progression.models import AttendanceRecord, Member


@pytest.fixture(scope="function")
def config():
    """기본 설정 (7-8월 휴관, 지연 유예 30일)"""
    return load_config(closure_months=[7, 8], overdue_grace_days=30, days_per_month=30)


@pytest.fixture(scope="function")
def small_ladder():
    """테스트용 소형 급수표

    youth: y1 → y2 → y3 (최고)
    adult: a1 → a2 (최고)
    """
    return GradeLadder([
        Grade("y1", "Youth 1", Category.YOUTH, 1, "White", Requirements(12, 3)),
        Grade("y2", "Youth 2", Category.YOUTH, 2, "Yellow", Requirements(20, 4, min_age=12)),
        Grade("y3", "Youth 3", Category.YOUTH, 3, "Black"),
        Grade("a1", "Adult 1", Category.ADULT, 1, "White", Requirements(12, 3)),
        Grade("a2", "Adult 2", Category.ADULT, 2, "Black"),
    ])


@pytest.fixture(scope="function")
def make_engine(small_ladder, config):
    """지정한 날짜를 오늘로 쓰는 엔진 생성"""
    def _make(today, ladder=None, cfg=None):
        return ProgressionEngine(
            ladder=ladder or small_ladder,
            config=cfg or config,
            clock=lambda: today,
        )
    return _make


def sessions(member_id, start, count, kind="normal", present=True, step_days=1):
    """start 다음 날부터 count개의 출석 기록 생성"""
    return [
        AttendanceRecord(
            member_id=member_id,
            date=start + timedelta(days=(i + 1) * step_days),
            present=present,
            session_kind=kind,
        )
        for i in range(count)
    ]


@pytest.fixture(scope="function")
def make_member():
    """회원 스냅샷 생성"""
    def _make(
        member_id="m1",
        grade="y1",
        category=Category.YOUTH,
        join_date=date(2024, 1, 1),
        credits=0,
        kind="normal",
        **kwargs
    ):
        attendance = kwargs.pop("attendance", None)
        if attendance is None:
            attendance = sessions(member_id, kwargs.get("last_exam_date") or join_date, credits, kind)
        return Member(
            member_id=member_id,
            category=category,
            current_grade=grade,
            join_date=join_date,
            attendance=attendance,
            **kwargs
        )
    return _make
