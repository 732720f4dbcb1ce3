"""
resources.py - Concrete resource definitions
Single responsibility: describe each list screen's endpoints, facets and messages.
"""
from portal.config import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER
from portal.domain.filters import ALL, Facet, encode_active_status
from portal.domain.models import CompositeUpdate, ResourceSpec
from portal.services.forum import order_posts, to_forum_post
from portal.services.normalize import flatten_profile

TEACHER_PROFILE_FIELDS = ("employeeId", "department", "designation")
STUDENT_PROFILE_FIELDS = ("rollNumber", "currentSemester", "program")


def flatten_teacher(user: dict) -> dict:
    return flatten_profile(user, "teacher", TEACHER_PROFILE_FIELDS)


def flatten_student(user: dict) -> dict:
    return flatten_profile(user, "student", STUDENT_PROFILE_FIELDS)


COURSES = ResourceSpec(
    key="courses",
    label="course",
    plural="courses",
    list_path="/courses",
    roles=(ROLE_ADMIN,),
    facets=(
        Facet("semester", "semester", label="Semester"),
        Facet("teacher", "teacherId", label="Teacher"),
    ),
)

TEACHERS = ResourceSpec(
    key="teachers",
    label="teacher",
    plural="teachers",
    list_path="/users",
    create_path="/auth/create-teacher",
    roles=(ROLE_ADMIN,),
    fixed_params={"role": "teacher"},
    facets=(
        Facet("department", "department", label="Department"),
        Facet("designation", "designation", label="Designation"),
    ),
    transform=flatten_teacher,
    composite=CompositeUpdate(
        profile_path="teacher",
        profile_fields=("department", "designation"),
    ),
)

STUDENTS = ResourceSpec(
    key="students",
    label="student",
    plural="students",
    list_path="/users",
    create_path="/auth/create-student",
    roles=(ROLE_ADMIN,),
    fixed_params={"role": "student"},
    facets=(
        Facet("semester", "currentSemester", label="Semester"),
        Facet("program", "program", label="Program"),
    ),
    transform=flatten_student,
    composite=CompositeUpdate(
        profile_path="student",
        profile_fields=STUDENT_PROFILE_FIELDS,
    ),
)

ENROLLMENTS = ResourceSpec(
    key="enrollments",
    label="enrollment",
    plural="enrollments",
    list_path="/enrollments",
    create_path="/enrollments/admin",
    roles=(ROLE_ADMIN,),
    facets=(
        Facet("course", "courseId", default=ALL, label="Course"),
        Facet("semester", "semester", default=ALL, label="Semester"),
        Facet("section", "section", default=ALL, label="Section"),
        Facet(
            "status",
            "isActive",
            default=ALL,
            initial="active",
            label="Status",
            encode=encode_active_status,
        ),
    ),
    can_update=False,
    messages={
        "create_success": "Student assigned to course successfully!",
        "create_failure": "Failed to assign student to course",
        "delete_success": "Student removed from course successfully!",
        "delete_failure": "Failed to remove student from course",
    },
)

TIMETABLE = ResourceSpec(
    key="timetable",
    label="timetable entry",
    plural="timetable entries",
    list_path="/timetable",
    roles=(ROLE_ADMIN,),
    facets=(
        Facet("semester", "semester", label="Semester"),
        Facet("course", "courseId", label="Course"),
        Facet("teacher", "teacherId", label="Teacher"),
    ),
)

REQUESTS = ResourceSpec(
    key="requests",
    label="request",
    plural="requests",
    list_path="/requests",
    roles=(ROLE_STUDENT,),
    can_update=False,
    can_delete=False,
    messages={"create_success": "Request submitted successfully!"},
)

FORUM = ResourceSpec(
    key="forum",
    label="post",
    plural="posts",
    list_path="/forum/posts",
    transform=to_forum_post,
    order=order_posts,
    can_update=False,
    can_delete=False,
    searchable=False,
    roles=(ROLE_TEACHER, ROLE_STUDENT),
    messages={"create_failure": "Failed to create post. Please try again."},
)
