"""Tests for student filters and grade ordering."""

from lesson_scores.core.filters import (
    ALL_GRADES,
    FilterState,
    compare_students,
    filter_students,
    grade_levels,
    matches_query,
    parse_student_code,
)
from lesson_scores.core.models import Student


def _names(students):
    return [s.fullname for s in students]


class TestParseStudentCode:
    """Tests for parse_student_code."""

    def test_plain_number(self):
        assert parse_student_code("12") == 12

    def test_leading_number_with_suffix(self):
        assert parse_student_code("7a") == 7

    def test_non_numeric_is_zero(self):
        assert parse_student_code("alice") == 0

    def test_empty_and_none_are_zero(self):
        assert parse_student_code("") == 0
        assert parse_student_code(None) == 0

    def test_surrounding_whitespace(self):
        assert parse_student_code("  42") == 42

    def test_non_ascii_digits_are_zero(self):
        """Thai and fullwidth digits are not student codes."""
        assert parse_student_code("๑๒") == 0
        assert parse_student_code("１２") == 0


class TestQueryFilter:
    """Tests for the free-text filter."""

    def test_matches_fullname_case_insensitive(self, sample_students):
        assert matches_query(sample_students[0], "SOMCHAI")

    def test_matches_username(self, sample_students):
        assert matches_query(sample_students[3], "ALI")

    def test_empty_query_matches_everything(self, sample_students):
        assert all(matches_query(s, "") for s in sample_students)

    def test_missing_fields_do_not_match(self):
        student = Student(id="x", username="", fullname="")
        assert not matches_query(student, "a")

    def test_filter_by_query_keeps_load_order(self, sample_students):
        result = filter_students(sample_students, FilterState(query="o"))
        assert _names(result) == [
            "Somchai Dee",
            "Boonmee Rak",
            "Alice Wong",
            "Bob Lee",
            "Aaron Best",
        ]


class TestGradeFilter:
    """Tests for grade filtering and ordering."""

    def test_all_grades_returns_everyone_in_load_order(self, sample_students):
        """Empty query and 'all' return the input unchanged."""
        result = filter_students(sample_students, FilterState())
        assert result == sample_students

    def test_grade_keeps_exact_matches_only(self, sample_students):
        result = filter_students(sample_students, FilterState(grade="M2"))
        assert {s.grade_level for s in result} == {"M2"}

    def test_numeric_usernames_sort_numerically(self, sample_students):
        """Usernames 12, 3, 7 sort as 3, 7, 12."""
        result = filter_students(sample_students, FilterState(grade="M1"))
        assert [s.username for s in result] == ["3", "7", "12"]

    def test_non_numeric_usernames_sort_by_name(self, sample_students):
        result = filter_students(sample_students, FilterState(grade="M2"))
        assert _names(result) == ["Aaron Best", "Alice Wong"]

    def test_grade_and_query_combine(self, sample_students):
        result = filter_students(sample_students, FilterState(query="oo", grade="M1"))
        assert _names(result) == ["Boonmee Rak"]

    def test_unknown_grade_returns_nothing(self, sample_students):
        assert filter_students(sample_students, FilterState(grade="M6")) == []

    def test_equal_students_keep_original_order(self):
        """Students comparing equal stay in their input order."""
        students = [
            Student(id="a", username="x1", fullname="Same Name", grade_level="P1"),
            Student(id="b", username="x2", fullname="Same Name", grade_level="P1"),
            Student(id="c", username="x3", fullname="Same Name", grade_level="P1"),
        ]
        result = filter_students(students, FilterState(grade="P1"))
        assert [s.id for s in result] == ["a", "b", "c"]

    def test_thai_names_use_collation(self):
        """Thai names order by collation when codes are missing."""
        students = [
            Student(id="1", username="b", fullname="ขวัญใจ", grade_level="P1"),
            Student(id="2", username="a", fullname="กมล", grade_level="P1"),
        ]
        result = filter_students(students, FilterState(grade="P1"))
        assert _names(result) == ["กมล", "ขวัญใจ"]


class TestCompareStudents:
    """Tests for the two-tier comparator."""

    def test_both_codes_numeric(self):
        a = Student(id="1", username="20", fullname="Zed")
        b = Student(id="2", username="3", fullname="Amy")
        assert compare_students(a, b) > 0
        assert compare_students(b, a) < 0

    def test_one_code_missing_falls_back_to_name(self):
        a = Student(id="1", username="20", fullname="Zed")
        b = Student(id="2", username="amy", fullname="Amy")
        assert compare_students(a, b) > 0

    def test_zero_code_falls_back_to_name(self):
        a = Student(id="1", username="0", fullname="Bee")
        b = Student(id="2", username="5", fullname="Ann")
        assert compare_students(a, b) > 0

    def test_identical(self):
        a = Student(id="1", username="5", fullname="Ann")
        assert compare_students(a, a) == 0


class TestGradeLevels:
    """Tests for grade_levels."""

    def test_distinct_sorted_non_empty(self, sample_students):
        assert grade_levels(sample_students) == ["M1", "M2"]

    def test_empty_list(self):
        assert grade_levels([]) == []

    def test_numeric_grades_from_raw_records(self):
        """Numeric and text grades from a JSON source list and filter together."""
        students = [
            Student.from_dict({"id": "a", "username": "2", "fullname": "Dao", "grade_level": 6}),
            Student.from_dict({"id": "b", "username": "1", "fullname": "Fah", "grade_level": "M1"}),
            Student.from_dict({"id": "c", "username": "3", "fullname": "Ploy", "grade_level": 6}),
        ]

        assert grade_levels(students) == ["6", "M1"]
        assert _names(filter_students(students, FilterState(grade="6"))) == ["Dao", "Ploy"]


class TestFilterState:
    """Tests for FilterState helpers."""

    def test_defaults(self):
        state = FilterState()
        assert state.query == ""
        assert state.grade == ALL_GRADES
        assert state.all_grades

    def test_with_grade_none_means_all(self):
        assert FilterState(grade="M1").with_grade(None).grade == ALL_GRADES

    def test_with_query_returns_new_state(self):
        state = FilterState()
        updated = state.with_query("ana")
        assert updated.query == "ana"
        assert state.query == ""
