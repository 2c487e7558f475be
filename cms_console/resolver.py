# cms_console/resolver.py
"""Display-only lookups and aggregates over store snapshots.

Everything here is recomputed from the lists passed in and never writes
back to them. Lookup misses degrade to placeholders instead of raising.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence

from cms_console.models import Course, Professor, User

UNKNOWN = "Unknown"
DEFAULT_CATEGORY = "General"
RECENT_COURSES = 5
CHART_COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#A569BD", "#FF6F61"]


def coerce_id(value: Any) -> Optional[int]:
    """Form fields deliver ids as strings; stored ids are numeric"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def display_category(course: Course) -> str:
    return course.category or DEFAULT_CATEGORY


def resolve_professor_name(professors: Iterable[Professor], author_id: Any) -> str:
    wanted = coerce_id(author_id)
    if wanted is None:
        return UNKNOWN
    return next((p.name for p in professors if p.id == wanted), UNKNOWN)


def count_users_for_course(users: Iterable[User], course_id: Any) -> int:
    wanted = coerce_id(course_id)
    return sum(1 for u in users if wanted in u.course_ids)


def group_courses_by_category(courses: Iterable[Course]) -> Dict[str, int]:
    # dicts keep first-occurrence order, which is the chart's slice order
    counts: Dict[str, int] = {}
    for course in courses:
        category = display_category(course)
        counts[category] = counts.get(category, 0) + 1
    return counts


def users_per_course(courses: Sequence[Course], users: Sequence[User]) -> List[Dict[str, Any]]:
    return [
        {"id": c.id, "title": c.title, "usersCount": count_users_for_course(users, c.id)}
        for c in courses
    ]


def category_slices(courses: Sequence[Course]) -> List[Dict[str, Any]]:
    grouped = group_courses_by_category(courses)
    total = sum(grouped.values())
    return [
        {
            "name": name,
            "value": value,
            "percent": round(value * 100 / total) if total else 0,
            "color": CHART_COLORS[index % len(CHART_COLORS)],
        }
        for index, (name, value) in enumerate(grouped.items())
    ]


def course_row(course: Course, professors: Sequence[Professor]) -> Dict[str, Any]:
    row = course.model_dump(by_alias=True)
    row["professorName"] = resolve_professor_name(professors, course.author_id)
    row["displayCategory"] = display_category(course)
    return row


def recent_courses(courses: Sequence[Course], professors: Sequence[Professor],
                   limit: int = RECENT_COURSES) -> List[Dict[str, Any]]:
    """The last ``limit`` courses in listing order"""
    if limit <= 0:
        return []
    return [course_row(c, professors) for c in list(courses)[-limit:]]


def initials(name: Optional[str]) -> str:
    return name[:2].upper() if name else "PR"


def dashboard_summary(courses: Sequence[Course], users: Sequence[User],
                      professors: Sequence[Professor]) -> Dict[str, Any]:
    return {
        "counts": {
            "courses": len(courses),
            "users": len(users),
            "professors": len(professors),
        },
        "usersPerCourse": users_per_course(courses, users),
        "coursesByCategory": category_slices(courses),
        "recentCourses": recent_courses(courses, professors),
    }


async def filter_courses(store, keyword: Optional[str] = None, professor_id: Any = None) -> List[Course]:
    """Server-side search or professor filter applied to a course store.

    An empty keyword and empty professor id is a plain ``load()``.
    """
    pid = coerce_id(professor_id)
    if not keyword and pid is None:
        return await store.load()
    store.replace(await store.fetch_matching(keyword=keyword or None, professor_id=pid))
    return store.items
