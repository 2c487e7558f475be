"""
Tests for the display-only lookups and dashboard aggregates.

Resolver contract:
- missing category counts and displays as "General" without touching the record
- professor lookup coerces string ids and falls back to "Unknown"
- category order follows first occurrence, not sorting
"""

from cms_console.models import Course, Professor, User
from cms_console.resolver import (
    CHART_COLORS,
    category_slices,
    coerce_id,
    count_users_for_course,
    dashboard_summary,
    display_category,
    group_courses_by_category,
    recent_courses,
    resolve_professor_name,
    users_per_course,
)

PROFESSORS = [
    Professor(id=1, name="Dr. Alice Smith"),
    Professor(id=3, name="Dr. Carol Williams"),
]


def make_course(id, category=None, author_id=1, title=None):
    return Course(id=id, title=title or f"Course {id}", category=category, author_id=author_id)


def test_missing_category_grouped_as_general():
    courses = [make_course(1, "DevOps"), make_course(2, None), make_course(3, ""), make_course(4, "DevOps")]
    assert group_courses_by_category(courses) == {"DevOps": 2, "General": 2}


def test_grouping_does_not_mutate_courses():
    course = make_course(1, None)
    group_courses_by_category([course])
    assert course.category is None
    assert display_category(course) == "General"


def test_category_order_is_first_occurrence():
    courses = [make_course(1, "Zeta"), make_course(2, "Alpha"), make_course(3, None), make_course(4, "Alpha")]
    assert list(group_courses_by_category(courses)) == ["Zeta", "Alpha", "General"]


def test_resolve_professor_name_accepts_strings_and_numbers():
    assert resolve_professor_name(PROFESSORS, 3) == "Dr. Carol Williams"
    assert resolve_professor_name(PROFESSORS, "3") == "Dr. Carol Williams"
    assert resolve_professor_name(PROFESSORS, " 1 ") == "Dr. Alice Smith"


def test_resolve_professor_name_degrades_to_unknown():
    assert resolve_professor_name(PROFESSORS, 99) == "Unknown"
    assert resolve_professor_name(PROFESSORS, "") == "Unknown"
    assert resolve_professor_name(PROFESSORS, None) == "Unknown"
    assert resolve_professor_name(PROFESSORS, "abc") == "Unknown"
    assert resolve_professor_name([], 1) == "Unknown"


def test_coerce_id():
    assert coerce_id("42") == 42
    assert coerce_id(7) == 7
    assert coerce_id(True) is None
    assert coerce_id("4.5") is None


def test_count_users_for_course():
    users = [
        User(id=1, name="a", email="a@x", course_ids=[1, 2]),
        User(id=2, name="b", email="b@x", course_ids=[2]),
        User(id=3, name="c", email="c@x", role="visitor"),
    ]
    assert count_users_for_course(users, 2) == 2
    assert count_users_for_course(users, "1") == 1
    assert count_users_for_course(users, 5) == 0
    assert users_per_course([make_course(1), make_course(2)], users) == [
        {"id": 1, "title": "Course 1", "usersCount": 1},
        {"id": 2, "title": "Course 2", "usersCount": 2},
    ]


def test_category_slices_cycle_palette():
    courses = [make_course(i, f"Cat {i}") for i in range(len(CHART_COLORS) + 1)]
    slices = category_slices(courses)
    assert slices[0]["color"] == slices[-1]["color"] == CHART_COLORS[0]
    assert category_slices([]) == []


def test_recent_courses_takes_last_five():
    courses = [make_course(i, author_id=99 if i == 7 else 1) for i in range(1, 8)]
    rows = recent_courses(courses, PROFESSORS)
    assert [r["id"] for r in rows] == [3, 4, 5, 6, 7]
    assert rows[-1]["professorName"] == "Unknown"
    assert rows[0]["professorName"] == "Dr. Alice Smith"
    assert rows[0]["displayCategory"] == "General"
    assert rows[0]["authorId"] == 1


def test_dashboard_summary_counts():
    summary = dashboard_summary([make_course(1, "A")], [], PROFESSORS)
    assert summary["counts"] == {"courses": 1, "users": 0, "professors": 2}
    assert summary["coursesByCategory"][0]["name"] == "A"
    assert summary["coursesByCategory"][0]["percent"] == 100
    assert summary["usersPerCourse"] == [{"id": 1, "title": "Course 1", "usersCount": 0}]
