"""
급수표 / 출석 가중치 테스트
"""
import pytest
from datetime import date

from progression.errors import ConfigurationError, InvalidSessionKind
from progression.ladder import Category, Grade, GradeLadder, Requirements
from progression.weighting import AttendanceWeighting, SessionKind


# =============================================================================
# 기본 급수표
# =============================================================================

class TestDefaultLadder:
    """기본 급수표 테스트"""

    def test_grade_counts(self):
        """유소년 12개, 성인 15개"""
        ladder = GradeLadder.default()
        assert len(ladder.grades("youth")) == 12
        assert len(ladder.grades(Category.ADULT)) == 15
        assert len(ladder) == 27

    def test_next_grade_same_category(self):
        """같은 구분 안에서 다음 급수"""
        ladder = GradeLadder.default()
        assert ladder.next_grade("youth_10_kyu").id == "youth_9_kyu"
        assert ladder.next_grade("adult_1_kyu").id == "adult_1_dan"

    def test_terminal_grades(self):
        """최고 급수는 None"""
        ladder = GradeLadder.default()
        assert ladder.next_grade("youth_1_dan") is None
        assert ladder.next_grade("adult_9_dan") is None
        assert ladder.is_terminal("adult_9_dan")

    def test_requirements_for_target(self):
        """target 승급 요건 = 직전 급수의 요건"""
        ladder = GradeLadder.default()
        assert ladder.requirements_for("youth_9_kyu") == Requirements(35, 4)
        assert ladder.requirements_for("youth_1_dan") == Requirements(100, 12, min_age=17)

    def test_entry_grade_has_no_requirements(self):
        """입문 급수로 가는 요건은 없음"""
        ladder = GradeLadder.default()
        assert ladder.requirements_for("adult_6_kyu") is None

    def test_accepts_grade_object(self):
        """Grade 객체로도 조회"""
        ladder = GradeLadder.default()
        grade = ladder.get("adult_6_kyu")
        assert ladder.next_grade(grade).id == "adult_5_kyu"

    def test_unknown_grade_is_configuration_error(self):
        """급수표에 없는 급수 조회"""
        ladder = GradeLadder.default()
        assert not ladder.has_grade("green_belt")
        assert "green_belt" not in ladder
        with pytest.raises(ConfigurationError):
            ladder.next_grade("green_belt")

    def test_unknown_category(self):
        ladder = GradeLadder.default()
        with pytest.raises(ConfigurationError):
            ladder.grades("seniors")


# =============================================================================
# 급수표 검증
# =============================================================================

class TestLadderValidation:
    """급수표 생성 시 일관성 검증"""

    def test_terminal_with_requirements(self):
        """최고 급수에 요건이 있으면 오류"""
        with pytest.raises(ConfigurationError):
            GradeLadder([
                Grade("a", "A", Category.ADULT, 1, requirements=Requirements(10, 1)),
                Grade("b", "B", Category.ADULT, 2, requirements=Requirements(10, 1)),
            ])

    def test_missing_requirements(self):
        """중간 급수 요건 누락"""
        with pytest.raises(ConfigurationError):
            GradeLadder([
                Grade("a", "A", Category.ADULT, 1),
                Grade("b", "B", Category.ADULT, 2),
            ])

    def test_duplicate_ordinal(self):
        """순서 값 중복"""
        with pytest.raises(ConfigurationError):
            GradeLadder([
                Grade("a", "A", Category.ADULT, 1, requirements=Requirements(10, 1)),
                Grade("b", "B", Category.ADULT, 1),
            ])

    def test_duplicate_id(self):
        with pytest.raises(ConfigurationError):
            GradeLadder([
                Grade("a", "A", Category.ADULT, 1, requirements=Requirements(10, 1)),
                Grade("a", "A again", Category.YOUTH, 1),
            ])

    def test_unknown_category(self):
        with pytest.raises(ConfigurationError):
            GradeLadder([Grade("a", "A", "seniors", 1)])

    def test_negative_requirements(self):
        with pytest.raises(ConfigurationError):
            GradeLadder([
                Grade("a", "A", Category.ADULT, 1, requirements=Requirements(-1, 1)),
                Grade("b", "B", Category.ADULT, 2),
            ])

    def test_empty_ladder(self):
        with pytest.raises(ConfigurationError):
            GradeLadder([])

    def test_sorted_by_ordinal(self):
        """입력 순서와 관계없이 순서 값으로 정렬"""
        ladder = GradeLadder([
            Grade("b", "B", Category.ADULT, 5),
            Grade("a", "A", Category.ADULT, 2, requirements=Requirements(10, 1)),
        ])
        assert [g.id for g in ladder.grades("adult")] == ["a", "b"]
        assert ladder.next_grade("a").id == "b"


class TestLadderFromCatalog:
    """딕셔너리 카탈로그 로드"""

    def test_from_catalog(self):
        ladder = GradeLadder.from_catalog([
            {"id": "w", "name": "White", "category": "adult", "ordinal": 1,
             "requirements": {"min_attendance_credits": 30, "min_months": 4}},
            {"id": "b", "name": "Black", "category": "adult", "ordinal": 2},
        ])
        assert ladder.requirements_for("b") == Requirements(30, 4)
        assert ladder.get("w").category == Category.ADULT

    def test_invalid_entry(self):
        """형식 오류 항목은 ConfigurationError"""
        with pytest.raises(ConfigurationError):
            GradeLadder.from_catalog([
                {"id": "w", "name": "White", "category": "kids", "ordinal": 1},
            ])

    def test_negative_months_entry(self):
        with pytest.raises(ConfigurationError):
            GradeLadder.from_catalog([
                {"id": "w", "name": "White", "category": "adult", "ordinal": 1,
                 "requirements": {"min_attendance_credits": 30, "min_months": -4}},
                {"id": "b", "name": "Black", "category": "adult", "ordinal": 2},
            ])


# =============================================================================
# 출석 가중치
# =============================================================================

class TestAttendanceWeighting:
    """세션 종류별 크레딧"""

    def test_fixed_table(self):
        weighting = AttendanceWeighting()
        assert weighting.credit_value("normal") == 1
        assert weighting.credit_value("special") == 2
        assert weighting.credit_value("national-course") == 3
        assert weighting.credit_value(SessionKind.INTERNATIONAL_COURSE) == 6

    def test_legacy_codes(self):
        """기존 저장 코드 호환"""
        weighting = AttendanceWeighting()
        assert weighting.credit_value("especial") == 2
        assert weighting.credit_value("curso_nacional") == 3
        assert weighting.credit_value("curso_internacional") == 6

    def test_unknown_kind_rejected(self):
        """알 수 없는 종류는 기본값 없이 오류"""
        weighting = AttendanceWeighting()
        with pytest.raises(InvalidSessionKind):
            weighting.credit_value("yoga")
        with pytest.raises(InvalidSessionKind):
            weighting.credit_value(None)

    def test_custom_weights(self):
        weighting = AttendanceWeighting({
            "normal": 1, "special": 3, "national-course": 4, "international-course": 8,
        })
        assert weighting.credit_value("special") == 3

    def test_incomplete_table(self):
        """누락된 종류가 있으면 설정 오류"""
        with pytest.raises(ConfigurationError):
            AttendanceWeighting({"normal": 1, "special": 2})

    def test_non_positive_weight(self):
        with pytest.raises(ConfigurationError):
            AttendanceWeighting({
                "normal": 0, "special": 2, "national-course": 3, "international-course": 6,
            })

    def test_unknown_kind_in_table(self):
        with pytest.raises(ConfigurationError):
            AttendanceWeighting({
                "normal": 1, "special": 2, "national-course": 3,
                "international-course": 6, "yoga": 1,
            })

    def test_record_fills_credit_value(self):
        """출석 기록 생성 시 크레딧 채움"""
        record = AttendanceWeighting().record("m1", date(2024, 3, 5), True, "curso_nacional")
        assert record.session_kind == SessionKind.NATIONAL_COURSE
        assert record.credit_value == 3

    def test_record_rejects_unknown_kind(self):
        with pytest.raises(InvalidSessionKind) as exc:
            AttendanceWeighting().record("m1", date(2024, 3, 5), True, "yoga")
        assert exc.value.member_id == "m1"
