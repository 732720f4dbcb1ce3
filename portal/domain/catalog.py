"""
catalog.py - Shared option lists.
Single responsibility: define the fixed choices offered by filters and forms.
"""

SEMESTER_TERMS: list[str] = ["Fall 2024", "Spring 2025", "Summer 2025"]

SEMESTER_NUMBERS: list[str] = [str(n) for n in range(1, 9)]

DEPARTMENTS: list[str] = [
    "Computer Science",
    "Electrical Engineering",
    "Mechanical Engineering",
    "Civil Engineering",
    "Business Administration",
    "Mathematics",
    "Physics",
    "Chemistry",
    "Biology",
    "English",
    "History",
    "Psychology",
]

DESIGNATIONS: list[str] = [
    "Professor",
    "Associate Professor",
    "Assistant Professor",
    "Lecturer",
    "Senior Lecturer",
]

PROGRAMS: list[str] = [
    "BS Computer Science",
    "BS Software Engineering",
    "BS Information Technology",
    "BS Electrical Engineering",
    "BS Mechanical Engineering",
    "BS Civil Engineering",
    "BS Business Administration",
    "BS Mathematics",
    "BS Physics",
    "BS Chemistry",
    "BS Biology",
    "BA English",
    "BA History",
    "BS Psychology",
]

DAYS: list[str] = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

REQUEST_TYPES: list[str] = [
    "Course Change",
    "Certificate",
    "Leave Request",
    "Other",
]

# Statuses a teacher can set when responding; "in-progress" is sent as "in_progress"
REQUEST_STATUSES: list[str] = ["pending", "in-progress", "resolved", "rejected"]

ENROLLMENT_STATUSES: list[str] = ["active", "inactive", "all"]
