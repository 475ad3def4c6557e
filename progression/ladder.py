"""
급수 체계 (Grade Ladder)

회원 구분(유소년/성인)별로 정렬된 급수표와 승급 요건
- 급수표는 시작 시 한 번 로드되고 이후 읽기 전용
- Grade.requirements = 해당 급수에서 다음 급수로 올라가기 위한 요건
- 마지막 급수(최고 단)에는 요건이 없음
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from loguru import logger

from .errors import ConfigurationError


class Category(str, Enum):
    """회원 구분"""
    YOUTH = "youth"
    ADULT = "adult"


@dataclass(frozen=True)
class Requirements:
    """승급 요건"""
    min_attendance_credits: float
    min_months: int
    min_age: Optional[int] = None  # 승급 가능 최소 나이 (년)


@dataclass(frozen=True)
class Grade:
    """급수"""
    id: str
    name: str
    category: Category
    ordinal: int
    belt_color: str = ""
    requirements: Optional[Requirements] = None

    @property
    def is_terminal(self) -> bool:
        return self.requirements is None


GradeRef = Union[str, Grade]


# =====================================================
# 기본 급수표
# =====================================================

def _grade(grade_id, name, category, ordinal, belt, credits=None, months=None, min_age=None) -> Grade:
    requirements = None
    if credits is not None:
        requirements = Requirements(credits, months, min_age)
    return Grade(grade_id, name, category, ordinal, belt, requirements)


_Y = Category.YOUTH
_A = Category.ADULT

# 각 급수의 요건 = 다음 급수 승급 요건
DEFAULT_GRADES: Tuple[Grade, ...] = (
    # 유소년 (10급 ~ 초단)
    _grade("youth_10_kyu", "10th Kyu", _Y, 1, "White", 35, 4),
    _grade("youth_9_kyu", "9th Kyu", _Y, 2, "Yellow", 40, 4),
    _grade("youth_8_kyu", "8th Kyu", _Y, 3, "Yellow-Orange", 45, 5),
    _grade("youth_7_kyu", "7th Kyu", _Y, 4, "Orange", 50, 5),
    _grade("youth_6_kyu", "6th Kyu", _Y, 5, "Orange-Green", 55, 6),
    _grade("youth_5_kyu", "5th Kyu", _Y, 6, "Green", 60, 6),
    _grade("youth_4_kyu", "4th Kyu", _Y, 7, "Green-Blue", 65, 7),
    _grade("youth_3_kyu", "3rd Kyu", _Y, 8, "Blue", 70, 7),
    _grade("youth_2_kyu", "2nd Kyu", _Y, 9, "Blue-Brown", 80, 8),
    _grade("youth_1_kyu", "1st Kyu", _Y, 10, "Brown", 90, 10),
    _grade("youth_1_kyu_1_dan", "1st Kyu-1st Dan", _Y, 11, "Brown-Black", 100, 12, min_age=17),
    _grade("youth_1_dan", "1st Dan", _Y, 12, "Black"),
    # 성인 (6급 ~ 9단)
    _grade("adult_6_kyu", "6th Kyu", _A, 1, "White", 50, 6),
    _grade("adult_5_kyu", "5th Kyu", _A, 2, "Yellow", 60, 8),
    _grade("adult_4_kyu", "4th Kyu", _A, 3, "Orange", 70, 8),
    _grade("adult_3_kyu", "3rd Kyu", _A, 4, "Green", 80, 10),
    _grade("adult_2_kyu", "2nd Kyu", _A, 5, "Blue", 100, 12),
    _grade("adult_1_kyu", "1st Kyu", _A, 6, "Brown", 120, 18),
    _grade("adult_1_dan", "1st Dan", _A, 7, "Black", 140, 24),
    _grade("adult_2_dan", "2nd Dan", _A, 8, "Black", 160, 36),
    _grade("adult_3_dan", "3rd Dan", _A, 9, "Black", 180, 48),
    _grade("adult_4_dan", "4th Dan", _A, 10, "Black", 200, 60),
    _grade("adult_5_dan", "5th Dan", _A, 11, "Black", 220, 72),
    _grade("adult_6_dan", "6th Dan", _A, 12, "Black", 240, 84),
    _grade("adult_7_dan", "7th Dan", _A, 13, "Black", 260, 96),
    _grade("adult_8_dan", "8th Dan", _A, 14, "Black", 280, 120),
    _grade("adult_9_dan", "9th Dan", _A, 15, "Black"),
)


# =====================================================
# 급수표 클래스
# =====================================================

class GradeLadder:
    """구분별 급수표

    id 인덱스로 O(1) 조회. 생성 시 전체 급수표 일관성을 검증하고,
    불일치가 있으면 ConfigurationError (복구 불가).
    """

    def __init__(self, grades: Iterable[Grade]):
        self._ladders: Dict[Category, Tuple[Grade, ...]] = {}
        # id -> (구분, 급수표 내 위치)
        self._index: Dict[str, Tuple[Category, int]] = {}

        by_category: Dict[Category, List[Grade]] = {}
        seen = set()
        for grade in grades:
            if grade.id in seen:
                self._fail(f"중복된 급수 id: {grade.id}")
            seen.add(grade.id)
            try:
                category = Category(grade.category)
            except ValueError:
                self._fail(f"알 수 없는 회원 구분: {grade.category!r} ({grade.id})")
            by_category.setdefault(category, []).append(grade)

        if not by_category:
            self._fail("급수표가 비어 있습니다")

        for category, ladder in by_category.items():
            ladder.sort(key=lambda g: g.ordinal)
            self._validate_ladder(category, ladder)
            self._ladders[category] = tuple(ladder)
            for position, grade in enumerate(ladder):
                self._index[grade.id] = (category, position)

        logger.info(
            "급수표 로드 완료: "
            + ", ".join(f"{c.value} {len(l)}개" for c, l in self._ladders.items())
        )

    @staticmethod
    def _fail(message: str):
        """설정 오류 기록 후 ConfigurationError"""
        logger.error(message)
        raise ConfigurationError(message)

    def _validate_ladder(self, category: Category, ladder: List[Grade]):
        """구분별 급수표 검증"""
        ordinals = [g.ordinal for g in ladder]
        if len(set(ordinals)) != len(ordinals):
            self._fail(f"{category.value} 급수표의 순서 값이 중복됩니다: {ordinals}")

        for position, grade in enumerate(ladder):
            is_last = position == len(ladder) - 1
            req = grade.requirements
            if is_last and req is not None:
                self._fail(f"최고 급수에는 승급 요건이 없어야 합니다: {grade.id}")
            if not is_last and req is None:
                self._fail(f"승급 요건이 누락되었습니다: {grade.id}")
            if req is not None:
                if req.min_attendance_credits < 0 or req.min_months < 0:
                    self._fail(f"승급 요건은 음수일 수 없습니다: {grade.id}")
                if req.min_age is not None and req.min_age < 0:
                    self._fail(f"최소 나이는 음수일 수 없습니다: {grade.id}")

    # =====================================================
    # 생성
    # =====================================================

    @classmethod
    def default(cls) -> "GradeLadder":
        """기본 급수표"""
        return cls(DEFAULT_GRADES)

    @classmethod
    def from_catalog(cls, entries: Iterable[dict]) -> "GradeLadder":
        """딕셔너리 목록에서 급수표 생성 (설정 파일/저장소용)

        Args:
            entries: [{"id": ..., "name": ..., "category": ..., "ordinal": ..., "requirements": {...}}]
        """
        from pydantic import ValidationError as PydanticValidationError
        from .schemas import GradeSchema

        grades = []
        for entry in entries:
            try:
                grades.append(GradeSchema(**entry).to_grade())
            except PydanticValidationError as e:
                cls._fail(f"급수표 항목 형식 오류: {entry.get('id', entry)} - {e}")
        return cls(grades)

    # =====================================================
    # 조회
    # =====================================================

    @property
    def categories(self) -> List[Category]:
        return list(self._ladders)

    def grades(self, category: Union[str, Category]) -> Tuple[Grade, ...]:
        """구분별 급수 목록 (순서대로)"""
        try:
            return self._ladders[Category(category)]
        except (KeyError, ValueError):
            raise ConfigurationError(f"급수표에 없는 회원 구분: {category!r}")

    def has_grade(self, grade_id: str) -> bool:
        return grade_id in self._index

    def get(self, grade: GradeRef) -> Grade:
        """급수 조회 (없으면 ConfigurationError)"""
        grade_id = grade.id if isinstance(grade, Grade) else grade
        try:
            category, position = self._index[grade_id]
        except KeyError:
            raise ConfigurationError(f"급수표에 없는 급수: {grade_id!r}")
        return self._ladders[category][position]

    def next_grade(self, current: GradeRef) -> Optional[Grade]:
        """같은 구분의 다음 급수 (최고 급수면 None)"""
        grade = self.get(current)
        category, position = self._index[grade.id]
        ladder = self._ladders[category]
        if position + 1 >= len(ladder):
            return None
        return ladder[position + 1]

    def previous_grade(self, current: GradeRef) -> Optional[Grade]:
        grade = self.get(current)
        category, position = self._index[grade.id]
        if position == 0:
            return None
        return self._ladders[category][position - 1]

    def requirements_for(self, target: GradeRef) -> Optional[Requirements]:
        """target 급수로 승급하기 위한 요건 (입문 급수면 None)"""
        previous = self.previous_grade(target)
        if previous is None:
            return None
        return previous.requirements

    def is_terminal(self, grade: GradeRef) -> bool:
        return self.next_grade(grade) is None

    def __contains__(self, grade_id: str) -> bool:
        return self.has_grade(grade_id)

    def __len__(self) -> int:
        return len(self._index)
