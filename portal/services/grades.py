"""
grades.py - Grade arithmetic
Single responsibility: GPA and percentage helpers shared by result screens.
"""

from portal.services.normalize import normalize_list

GRADE_POINTS: dict[str, float] = {
    "A+": 4.0,
    "A": 4.0,
    "A-": 3.7,
    "B+": 3.3,
    "B": 3.0,
    "B-": 2.7,
    "C+": 2.3,
    "C": 2.0,
    "C-": 1.7,
    "D+": 1.3,
    "D": 1.0,
    "F": 0.0,
}


def calculate_gpa(grades: list[dict] | None) -> float:
    """Credit-weighted GPA rounded to two places; unknown letters count as 0."""
    if not grades:
        return 0.0
    total_points = 0.0
    total_credits = 0.0
    for g in grades:
        credits = float(g.get("creditHours") or 0)
        total_points += GRADE_POINTS.get(g.get("grade"), 0.0) * credits
        total_credits += credits
    if total_credits <= 0:
        return 0.0
    return round(total_points / total_credits, 2)


def percentage(marks_obtained, total_marks) -> float | None:
    try:
        total = float(total_marks)
        if total <= 0:
            return None
        return round(float(marks_obtained) / total * 100, 2)
    except (TypeError, ValueError):
        return None


def to_grade_row(result: dict) -> dict:
    """Flatten a result record with its course into what the GPA helpers read."""
    course = result.get("course") or {}
    return {
        "code": course.get("code") or "",
        "name": course.get("name") or "",
        "semester": result.get("semester") or course.get("semester") or "",
        "grade": result.get("letterGrade") or result.get("grade"),
        "creditHours": course.get("creditHours") or result.get("creditHours") or 0,
        "marksObtained": result.get("marksObtained"),
        "totalMarks": result.get("totalMarks"),
    }


def semester_summaries(rows: list[dict]) -> list[dict]:
    """Rows grouped by semester in first-seen order, each with its GPA."""
    grouped: dict[str, list[dict]] = {}
    for row in rows:
        grouped.setdefault(row.get("semester") or "", []).append(row)
    return [
        {"semester": name, "courses": courses, "gpa": calculate_gpa(courses)}
        for name, courses in grouped.items()
    ]


async def load_results(client) -> list[dict]:
    """The signed-in student's results. Raises ApiError on failure."""
    return [to_grade_row(r) for r in normalize_list(await client.get("/results"))]
