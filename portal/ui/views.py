"""
views.py - UI view builders
Single responsibility: build flet controls for each screen using provided
controllers, services and callbacks.
"""

import asyncio
import logging

import flet as ft
from pydantic import ValidationError

from portal.api.errors import ApiError
from portal.config import (
    APP_TITLE,
    APP_VERSION,
    BORDER_RADIUS_BTN,
    BORDER_RADIUS_CARD,
    COLOR_ACCENT,
    COLOR_APPBAR_BG,
    COLOR_APPBAR_FG,
    COLOR_BG,
    COLOR_BORDER,
    COLOR_CARD,
    COLOR_DANGER,
    COLOR_PRIMARY,
    COLOR_SUCCESS,
    COLOR_TEXT_MAIN,
    COLOR_TEXT_MUTED,
    COLOR_WARNING,
    DEFAULT_PAGE_SIZE,
    ROLE_ADMIN,
    ROLE_TEACHER,
    SHADOW_ELEVATION,
)
from portal.domain.catalog import (
    DEPARTMENTS,
    DESIGNATIONS,
    ENROLLMENT_STATUSES,
    PROGRAMS,
    REQUEST_STATUSES,
    SEMESTER_NUMBERS,
    SEMESTER_TERMS,
)
from portal.domain.filters import ALL
from portal.domain.forms import LoginForm, form_errors
from portal.domain.models import MODAL_CREATE, MODAL_EDIT
from portal.services import (
    dashboard,
    feedback,
    forum,
    grades,
    profile,
    requests_review,
    roster,
    timetable,
)
from portal.services.chatbot import QUICK_QUESTIONS
from portal.services.filter_options import (
    FilterOptions,
    load_course_filters,
    load_enrollment_filters,
    load_enrollment_form_options,
    load_timetable_filters,
)
from portal.ui import actions
from portal.ui.components.resource_card import ResourceCard
from portal.ui.helpers import (
    dropdown_options,
    format_date,
    same_options,
    status_color,
    status_label,
)
from portal.utils.time import format_clock, time_ago

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

NAVIGATION: dict[str, list[tuple[str, str, str]]] = {
    ROLE_ADMIN: [
        ("dashboard", "Dashboard", ft.Icons.DASHBOARD),
        ("courses", "Courses", ft.Icons.MENU_BOOK),
        ("teachers", "Teachers", ft.Icons.SCHOOL),
        ("students", "Students", ft.Icons.PEOPLE),
        ("enrollments", "Enrollments", ft.Icons.ASSIGNMENT_IND),
        ("timetable", "Timetable", ft.Icons.CALENDAR_MONTH),
        ("chatbot", "Assistant", ft.Icons.SMART_TOY),
        ("profile", "Profile", ft.Icons.ACCOUNT_CIRCLE),
    ],
    ROLE_TEACHER: [
        ("schedule", "Timetable", ft.Icons.CALENDAR_MONTH),
        ("results", "Results", ft.Icons.GRADING),
        ("requests_review", "Requests", ft.Icons.INBOX),
        ("feedback", "Feedback", ft.Icons.STAR),
        ("forum", "Forum", ft.Icons.FORUM),
        ("chatbot", "Assistant", ft.Icons.SMART_TOY),
        ("profile", "Profile", ft.Icons.ACCOUNT_CIRCLE),
    ],
}
STUDENT_NAVIGATION = [
    ("schedule", "Timetable", ft.Icons.CALENDAR_MONTH),
    ("my_results", "Results", ft.Icons.GRADING),
    ("requests", "Requests", ft.Icons.INBOX),
    ("forum", "Forum", ft.Icons.FORUM),
    ("chatbot", "Assistant", ft.Icons.SMART_TOY),
    ("profile", "Profile", ft.Icons.ACCOUNT_CIRCLE),
]


def navigation_for(role: str) -> list[tuple[str, str, str]]:
    return NAVIGATION.get(role, STUDENT_NAVIGATION)


def build_appbar(user_name: str, role: str, on_logout) -> ft.AppBar:
    return ft.AppBar(
        title=ft.Text(
            APP_TITLE,
            color=COLOR_APPBAR_FG,
            weight=ft.FontWeight.BOLD,
            size=20,
        ),
        bgcolor=COLOR_APPBAR_BG,
        center_title=False,
        elevation=SHADOW_ELEVATION,
        shadow_color=ft.Colors.BLACK12,
        automatically_imply_leading=False,
        actions=[
            ft.Container(
                content=ft.Text(
                    f"{user_name}  ({role})",
                    color=COLOR_TEXT_MUTED,
                    size=14,
                    weight=ft.FontWeight.W_500,
                ),
                padding=ft.Padding.only(right=8),
                alignment=ft.Alignment.CENTER_LEFT,
            ),
            ft.IconButton(
                icon=ft.Icons.LOGOUT,
                icon_color=COLOR_TEXT_MUTED,
                tooltip="Sign out",
                on_click=lambda _e: on_logout(),
            ),
        ],
    )


def build_nav(role: str, current: str | None, on_navigate) -> ft.Container:
    def nav_btn(key, label, icon):
        selected = key == current
        color = COLOR_PRIMARY if selected else COLOR_TEXT_MUTED
        return ft.Container(
            content=ft.Row(
                [
                    ft.Icon(icon, color=color, size=18),
                    ft.Text(
                        label,
                        color=color,
                        weight=ft.FontWeight.BOLD if selected else ft.FontWeight.NORMAL,
                    ),
                ],
                spacing=12,
            ),
            padding=ft.Padding.symmetric(vertical=12, horizontal=20),
            border=ft.border.only(
                left=ft.BorderSide(3, COLOR_PRIMARY if selected else "transparent")
            ),
            on_click=lambda _e: on_navigate(key),
            ink=True,
        )

    return ft.Container(
        content=ft.Column(
            [nav_btn(*entry) for entry in navigation_for(role)],
            spacing=2,
        ),
        width=210,
        bgcolor=COLOR_CARD,
        padding=ft.Padding.symmetric(vertical=16),
    )


def build_shell(route: str, appbar: ft.AppBar, nav: ft.Control, body: ft.Control) -> ft.View:
    return ft.View(
        route=route,
        appbar=appbar,
        bgcolor=COLOR_BG,
        padding=0,
        controls=[
            ft.Row(
                [
                    nav,
                    ft.Container(content=body, expand=True, padding=24),
                ],
                expand=True,
                vertical_alignment=ft.CrossAxisAlignment.STRETCH,
            )
        ],
    )


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------


def _header(title: str, subtitle: str = "", action: ft.Control | None = None) -> ft.Row:
    texts = [ft.Text(title, size=24, weight=ft.FontWeight.BOLD, color=COLOR_TEXT_MAIN)]
    if subtitle:
        texts.append(ft.Text(subtitle, size=13, color=COLOR_TEXT_MUTED))
    return ft.Row(
        [ft.Column(texts, spacing=2, expand=True), *([action] if action else [])],
        vertical_alignment=ft.CrossAxisAlignment.CENTER,
    )


def _empty_state(message: str, icon=ft.Icons.INBOX) -> ft.Container:
    return ft.Container(
        content=ft.Column(
            [
                ft.Icon(icon, size=64, color=COLOR_BORDER),
                ft.Text(message, color=COLOR_TEXT_MUTED, size=16),
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        ),
        alignment=ft.Alignment.CENTER,
        padding=60,
    )


def _loading() -> ft.Container:
    return ft.Container(
        content=ft.ProgressRing(color=COLOR_PRIMARY),
        alignment=ft.Alignment.CENTER,
        padding=60,
    )


def _search_field(hint: str, value: str, on_change) -> ft.TextField:
    return ft.TextField(
        prefix_icon=ft.Icons.SEARCH,
        hint_text=hint,
        value=value,
        on_change=on_change,
        border_radius=BORDER_RADIUS_BTN,
        border_color="transparent",
        bgcolor=COLOR_CARD,
        content_padding=ft.Padding.symmetric(horizontal=12, vertical=12),
        text_size=14,
        expand=True,
    )


def _filter_dropdown(label: str, options, value: str, on_select) -> ft.Dropdown:
    return ft.Dropdown(
        label=label,
        options=options,
        value=value,
        on_select=on_select,
        border_radius=BORDER_RADIUS_BTN,
        border_color=COLOR_BORDER,
        bgcolor=COLOR_CARD,
        text_size=14,
        width=220,
    )


def _badge(text: str, color: str) -> ft.Container:
    return ft.Container(
        content=ft.Text(text, size=11, color="white", weight=ft.FontWeight.BOLD),
        bgcolor=color,
        border_radius=12,
        padding=ft.Padding.symmetric(horizontal=10, vertical=2),
    )


def _card(content: ft.Control, **kwargs) -> ft.Container:
    return ft.Container(
        content=content,
        padding=ft.Padding.all(16),
        bgcolor=COLOR_CARD,
        border_radius=BORDER_RADIUS_CARD,
        shadow=ft.BoxShadow(blur_radius=2, color=ft.Colors.BLACK12, offset=ft.Offset(0, 1)),
        **kwargs,
    )


def _nested(record: dict, *keys, default=""):
    value = record
    for key in keys:
        value = value.get(key) if isinstance(value, dict) else None
    return value if value not in (None, "") else default


def _active_badge(record: dict):
    if record.get("isActive") is False:
        return ("Inactive", status_color("inactive"))
    return ("Active", status_color("active"))


# ---------------------------------------------------------------------------
# Resource list screens (admin lists and student requests)
# ---------------------------------------------------------------------------


def _course_card(r: dict):
    teacher = _nested(r, "teacher", "user", "fullName", default="Unassigned")
    return (
        f"{r.get('code', '')} - {r.get('name', '')}",
        [f"{r.get('creditHours', '-')} credit hours", r.get("semester"), f"Teacher: {teacher}"],
        ft.Icons.MENU_BOOK,
        None,
    )


def _teacher_card(r: dict):
    return (
        r.get("fullName") or r.get("email") or "",
        [r.get("email"), r.get("employeeId"), r.get("department"), r.get("designation")],
        ft.Icons.SCHOOL,
        _active_badge(r),
    )


def _student_card(r: dict):
    semester = r.get("currentSemester")
    return (
        r.get("fullName") or r.get("email") or "",
        [
            r.get("email"),
            r.get("rollNumber"),
            f"Semester {semester}" if semester else "",
            r.get("program"),
        ],
        ft.Icons.PERSON,
        _active_badge(r),
    )


def _enrollment_card(r: dict):
    course = r.get("course") or {}
    return (
        _nested(r, "student", "user", "fullName", default="Unknown student"),
        [
            _nested(r, "student", "rollNumber"),
            f"{course.get('code', '')} - {course.get('name', '')}" if course else "",
            f"Section {r.get('section')}" if r.get("section") else "",
            r.get("semester") or course.get("semester"),
        ],
        ft.Icons.ASSIGNMENT_IND,
        _active_badge(r),
    )


def _timetable_card(r: dict):
    course = r.get("course") or {}
    return (
        f"{course.get('code', '')} - {course.get('name', '')}" if course else "Class",
        [
            f"{r.get('dayOfWeek', '')} {r.get('startTime', '')}-{r.get('endTime', '')}",
            f"Room {r.get('room')}" if r.get("room") else "",
            _nested(r, "teacher", "user", "fullName"),
            r.get("semester"),
        ],
        ft.Icons.CALENDAR_MONTH,
        None,
    )


def _request_card(r: dict):
    status = r.get("status") or "pending"
    return (
        r.get("subject") or "",
        [r.get("type"), format_date(r.get("createdAt")), r.get("response")],
        ft.Icons.INBOX,
        (status_label(status), status_color(status)),
    )


def _forum_card(r: dict):
    return (
        r.get("title") or "",
        [
            r.get("authorName"),
            r.get("courseLabel"),
            f"{r.get('replyCount', 0)} replies",
            f"{r.get('views', 0)} views",
            time_ago(r.get("createdAt")),
        ],
        ft.Icons.FORUM,
        ("Pinned", COLOR_WARNING) if r.get("isPinned") else None,
    )


CARD_BUILDERS = {
    "courses": _course_card,
    "teachers": _teacher_card,
    "students": _student_card,
    "enrollments": _enrollment_card,
    "timetable": _timetable_card,
    "requests": _request_card,
    "forum": _forum_card,
}

OPTION_LOADERS = {
    "courses": load_course_filters,
    "timetable": load_timetable_filters,
}


def _facet_choices(key: str, facet_name: str, options: FilterOptions) -> list[tuple[str, str]]:
    if key == "courses":
        return {"semester": same_options(SEMESTER_TERMS), "teacher": options.teachers}[facet_name]
    if key == "teachers":
        return {
            "department": same_options(DEPARTMENTS),
            "designation": same_options(DESIGNATIONS),
        }[facet_name]
    if key == "students":
        return {
            "semester": [(n, f"Semester {n}") for n in SEMESTER_NUMBERS],
            "program": same_options(PROGRAMS),
        }[facet_name]
    if key == "enrollments":
        return {
            "course": options.courses,
            "semester": options.semesters,
            "section": options.sections,
            "status": [(s, status_label(s)) for s in ENROLLMENT_STATUSES],
        }[facet_name]
    if key == "timetable":
        return {
            "semester": same_options(SEMESTER_TERMS),
            "course": options.courses,
            "teacher": options.teachers,
        }[facet_name]
    return []


async def _load_options(key: str, client, notifier, is_teacher: bool = False) -> FilterOptions:
    if key == "forum":
        return FilterOptions(courses=await forum.load_course_options(client, is_teacher))
    if key == "enrollments":
        filters, form = await asyncio.gather(
            load_enrollment_filters(client, notifier),
            load_enrollment_form_options(client),
        )
        filters.students = form.students
        return filters
    loader = OPTION_LOADERS.get(key)
    return await loader(client) if loader else FilterOptions()


def build_resource_list_view(
    page: ft.Page, controller, title: str, subtitle: str = "", is_teacher: bool = False
):
    """
    List screen driven by a ResourceListController. Filter widgets feed
    ``set_filter``/``set_search``; the list re-renders on every controller
    change; dialogs call the controller's mutations.
    """
    spec = controller.spec
    key = spec.key
    options = FilterOptions()
    label = spec.label[:1].upper() + spec.label[1:]
    card_builder = CARD_BUILDERS[key]
    list_column = ft.Column(spacing=0, scroll=ft.ScrollMode.AUTO, expand=True)
    count_text = ft.Text("", size=12, color=COLOR_TEXT_MUTED)

    # --- Filters ---
    dropdowns: dict[str, ft.Dropdown] = {}

    def facet_dropdown_options(facet) -> list:
        choices = _facet_choices(key, facet.name, options)
        has_all = any(v == ALL for v, _ in choices)
        return dropdown_options(
            choices, all_label=None if has_all else f"All {facet.label or facet.name}"
        )

    def ui_value(facet, value) -> str:
        return ALL if facet.is_default(value) else value

    def on_facet(facet):
        def handler(e):
            value = e.control.value or ALL
            controller.set_filter(**{facet.name: facet.default if value == ALL else value})

        return handler

    for facet in spec.facets:
        dropdowns[facet.name] = _filter_dropdown(
            facet.label or facet.name,
            facet_dropdown_options(facet),
            ui_value(facet, controller.state.filter_state.facets.get(facet.name)),
            on_facet(facet),
        )

    search_field = _search_field(
        f"Search {spec.plural}...",
        controller.state.filter_state.search_text,
        lambda e: controller.set_search(e.control.value),
    )

    def on_reset(_e=None):
        controller.reset_filters()
        search_field.value = ""
        for facet in spec.facets:
            dropdowns[facet.name].value = ui_value(
                facet, controller.state.filter_state.facets.get(facet.name)
            )
        page.update()

    filter_bar = ft.Row(
        [
            *([search_field] if spec.searchable else []),
            *dropdowns.values(),
            ft.TextButton("Reset", icon=ft.Icons.FILTER_ALT_OFF, on_click=on_reset),
        ],
        spacing=12,
        wrap=True,
        visible=spec.searchable or bool(spec.facets),
    )

    # --- Dialogs ---
    def open_create(_e=None):
        controller.open_create()
        actions.show_form_dialog(
            page,
            f"Add {label}",
            actions.form_layout(key, MODAL_CREATE, options),
            on_submit=controller.create,
            on_cancel=controller.close_modal,
            submit_label="Create",
        )

    def open_edit(record: dict):
        controller.open_edit(record)
        record_id = record.get("id")

        async def submit(payload: dict) -> bool:
            return await controller.update(record_id, payload)

        actions.show_form_dialog(
            page,
            f"Edit {label}",
            actions.form_layout(key, MODAL_EDIT, options),
            on_submit=submit,
            on_cancel=controller.close_modal,
            record=record,
        )

    def open_delete(record: dict):
        controller.open_delete(record)
        record_id = record.get("id")
        name, *_ = card_builder(record)

        async def confirm() -> bool:
            return await controller.remove(record_id)

        if key == "enrollments":
            title_text = "Remove Student from Course"
            message = f"Remove {name} from this course? This action cannot be undone."
        else:
            title_text = f"Delete {label}"
            message = f'Are you sure you want to delete "{name}"? This action cannot be undone.'
        actions.show_delete_dialog(
            page, title_text, message, confirm, on_cancel=controller.close_modal
        )

    def open_post(record: dict):
        async def load_thread():
            try:
                return await forum.load_post(controller.client, record)
            except ApiError as exc:
                logger.error("Error fetching post details: %s", exc)
                controller.notifier.error(exc.user_message("Failed to load post details"))
                return record, []

        async def reply(payload: dict) -> bool:
            try:
                await forum.post_reply(controller.client, record["id"], payload)
            except ApiError as exc:
                logger.error("Error posting reply: %s", exc)
                controller.notifier.error(
                    exc.user_message("Failed to post reply. Please try again.")
                )
                return False
            controller.notifier.success("Reply posted successfully!")
            # Reply counts on the list come from the server
            page.run_task(controller.refetch)
            return True

        actions.show_post_dialog(page, record, load_thread, reply)

    # --- Rendering ---
    def render(state):
        if state.loading and not state.items:
            list_column.controls = [_loading()]
        elif not state.items:
            list_column.controls = [_empty_state(f"No {spec.plural} found")]
        else:
            cards = []
            for record in state.items[:DEFAULT_PAGE_SIZE]:
                card_title, meta, icon, badge = card_builder(record)
                cards.append(
                    ResourceCard(
                        record,
                        card_title,
                        [str(m) for m in meta if m],
                        icon=icon,
                        badge=badge,
                        on_edit=open_edit if spec.can_update else None,
                        on_delete=open_delete if spec.can_delete else None,
                        on_open=open_post if key == "forum" else None,
                        disabled=state.submitting,
                    )
                )
            list_column.controls = cards
        count_text.value = f"{len(state.items)} {spec.plural}"
        try:
            page.update()
        except Exception:
            logger.debug("render after page teardown", exc_info=True)

    controller.on_change(render)

    async def load_options():
        loaded = await _load_options(key, controller.client, controller.notifier, is_teacher)
        options.courses = loaded.courses
        options.teachers = loaded.teachers
        options.students = loaded.students
        options.semesters = loaded.semesters
        options.sections = loaded.sections
        for facet in spec.facets:
            dropdowns[facet.name].options = facet_dropdown_options(facet)
        page.update()

    page.run_task(load_options)

    add_button = None
    if spec.can_create:
        add_button = ft.FilledButton(
            f"Add {label}",
            icon=ft.Icons.ADD,
            style=ft.ButtonStyle(bgcolor=COLOR_PRIMARY, color="white"),
            on_click=open_create,
        )

    list_column.controls = [_loading()]
    return ft.Column(
        [
            _header(title, subtitle, add_button),
            filter_bar,
            count_text,
            list_column,
        ],
        spacing=16,
        expand=True,
    )


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


def _stat_card(label: str, value, icon, color) -> ft.Container:
    return _card(
        ft.Row(
            [
                ft.Icon(icon, size=36, color=color),
                ft.Column(
                    [
                        ft.Text(str(value), size=26, weight=ft.FontWeight.BOLD, color=COLOR_TEXT_MAIN),
                        ft.Text(label, size=13, color=COLOR_TEXT_MUTED),
                    ],
                    spacing=0,
                ),
            ],
            spacing=16,
        ),
        width=240,
    )


def build_dashboard_view(page: ft.Page, client, user_name: str):
    cards_row = ft.Row([_loading()], spacing=16, wrap=True)

    async def load():
        stats = await dashboard.load_admin_stats(client)
        cards_row.controls = [
            _stat_card("Total Students", stats.total_students, ft.Icons.PEOPLE, COLOR_PRIMARY),
            _stat_card("Total Teachers", stats.total_teachers, ft.Icons.SCHOOL, COLOR_SUCCESS),
            _stat_card("Total Courses", stats.total_courses, ft.Icons.MENU_BOOK, COLOR_ACCENT),
            _stat_card("Active Users", stats.active_users, ft.Icons.VERIFIED_USER, COLOR_WARNING),
        ]
        page.update()

    page.run_task(load)
    return ft.Column(
        [_header(f"Welcome back, {user_name}", "Portal overview"), cards_row],
        spacing=24,
        expand=True,
    )


# ---------------------------------------------------------------------------
# Weekly schedule (teachers and students)
# ---------------------------------------------------------------------------


def _schedule_entry(entry: dict) -> ft.Container:
    course = entry.get("course") or {}
    return _card(
        ft.Row(
            [
                ft.Text(
                    f"{entry.get('startTime', '')} - {entry.get('endTime', '')}",
                    weight=ft.FontWeight.BOLD,
                    color=COLOR_PRIMARY,
                    width=120,
                ),
                ft.Column(
                    [
                        ft.Text(
                            f"{course.get('code', '')} - {course.get('name', '')}",
                            weight=ft.FontWeight.BOLD,
                            color=COLOR_TEXT_MAIN,
                        ),
                        ft.Text(
                            " ・ ".join(
                                t
                                for t in (
                                    f"Room {entry.get('room')}" if entry.get("room") else "",
                                    _nested(entry, "teacher", "user", "fullName"),
                                )
                                if t
                            ),
                            size=12,
                            color=COLOR_TEXT_MUTED,
                        ),
                    ],
                    spacing=2,
                    expand=True,
                ),
            ]
        ),
        margin=ft.margin.only(bottom=8),
    )


def build_schedule_view(page: ft.Page, client, notifier, is_teacher: bool):
    body = ft.Column([_loading()], scroll=ft.ScrollMode.AUTO, expand=True)

    async def load():
        try:
            entries = await timetable.load_schedule(client, is_teacher)
        except ApiError as exc:
            logger.error("Error fetching timetable: %s", exc)
            notifier.error(exc.user_message("Failed to load timetable"))
            entries = []
        grouped = timetable.group_by_day(entries)
        if not grouped:
            body.controls = [_empty_state("No classes scheduled", ft.Icons.EVENT_BUSY)]
        else:
            controls = []
            for day, day_entries in grouped.items():
                controls.append(
                    ft.Text(day or "Unscheduled", size=18, weight=ft.FontWeight.BOLD, color=COLOR_TEXT_MAIN)
                )
                controls.extend(_schedule_entry(e) for e in day_entries)
            body.controls = controls
        page.update()

    page.run_task(load)
    subtitle = "Your teaching schedule" if is_teacher else "Your weekly class schedule"
    return ft.Column([_header("Timetable", subtitle), body], spacing=16, expand=True)


# ---------------------------------------------------------------------------
# Teacher: rosters and grade entry
# ---------------------------------------------------------------------------


def build_roster_view(page: ft.Page, state, client, notifier):
    courses: list = []
    body = ft.Column([_loading()], scroll=ft.ScrollMode.AUTO, expand=True)

    semester_dd = _filter_dropdown(
        "Semester", dropdown_options([], "All Semesters"), state.roster_semester, None
    )
    course_dd = _filter_dropdown(
        "Course", dropdown_options([], "All Courses"), state.roster_course, None
    )

    def grade_text(student) -> str:
        g = student.grade
        if not g:
            return "Not graded"
        letter = f" ({g['letterGrade']})" if g.get("letterGrade") else ""
        return f"{g.get('marksObtained')}/{g.get('totalMarks')}{letter}"

    def open_grade(course, student):
        async def submit(payload: dict) -> bool:
            try:
                await roster.submit_grade(client, course, student, payload)
            except ApiError as exc:
                logger.error("Error submitting grade: %s", exc)
                notifier.error(exc.user_message("Failed to submit grade. Please try again."))
                return False
            notifier.success(f"Grade submitted successfully for {student.name}!")
            page.run_task(load)
            return True

        actions.show_grade_dialog(page, course, student, submit)

    def student_row(course, student) -> ft.Control:
        return ft.Container(
            content=ft.Row(
                [
                    ft.Column(
                        [
                            ft.Text(student.name, weight=ft.FontWeight.W_500, color=COLOR_TEXT_MAIN),
                            ft.Text(
                                f"{student.roll_number} ・ {student.email} ・ Section {student.section}",
                                size=12,
                                color=COLOR_TEXT_MUTED,
                            ),
                        ],
                        spacing=2,
                        expand=True,
                    ),
                    ft.Text(grade_text(student), color=COLOR_TEXT_MUTED),
                    ft.TextButton(
                        "Update Grade" if student.grade else "Add Grade",
                        icon=ft.Icons.GRADING,
                        on_click=lambda _e: open_grade(course, student),
                    ),
                ]
            ),
            padding=ft.Padding.symmetric(vertical=6),
            border=ft.border.only(bottom=ft.BorderSide(1, COLOR_BORDER)),
        )

    def render():
        visible = roster.filter_roster(
            courses, state.roster_semester, state.roster_course, state.roster_search
        )
        if not visible:
            body.controls = [_empty_state("No courses found", ft.Icons.MENU_BOOK)]
        else:
            body.controls = [
                _card(
                    ft.Column(
                        [
                            ft.Row(
                                [
                                    ft.Text(c.title, size=16, weight=ft.FontWeight.BOLD, color=COLOR_TEXT_MAIN, expand=True),
                                    ft.Text(f"{len(students)} students", size=12, color=COLOR_TEXT_MUTED),
                                ]
                            ),
                            *(
                                [student_row(c, s) for s in students]
                                or [ft.Text("No students enrolled", color=COLOR_TEXT_MUTED)]
                            ),
                        ],
                        spacing=4,
                    ),
                    margin=ft.margin.only(bottom=12),
                )
                for c, students in visible
            ]
        page.update()

    def on_semester(e):
        state.roster_semester = e.control.value or ALL
        render()

    def on_course(e):
        state.roster_course = e.control.value or ALL
        render()

    def on_search(e):
        state.roster_search = e.control.value or ""
        render()

    semester_dd.on_select = on_semester
    course_dd.on_select = on_course
    search_field = _search_field("Search by name or roll number...", state.roster_search, on_search)

    async def load():
        nonlocal courses
        try:
            courses = await roster.load_teacher_courses(client)
        except ApiError as exc:
            logger.error("Error fetching courses: %s", exc)
            notifier.error(exc.user_message("Failed to load courses"))
            courses = []
        semester_dd.options = dropdown_options(
            same_options(roster.semester_options(courses)), "All Semesters"
        )
        course_dd.options = dropdown_options(
            [(str(c.id), c.title) for c in courses], "All Courses"
        )
        render()

    page.run_task(load)
    return ft.Column(
        [
            _header("Results", "Enter and update grades for your students"),
            ft.Row([search_field, semester_dd, course_dd], spacing=12, wrap=True),
            body,
        ],
        spacing=16,
        expand=True,
    )


# ---------------------------------------------------------------------------
# Teacher: request review
# ---------------------------------------------------------------------------


def build_requests_review_view(page: ft.Page, state, client, notifier):
    rows: list[dict] = []
    body = ft.Column([_loading()], scroll=ft.ScrollMode.AUTO, expand=True)

    def open_respond(row: dict):
        async def submit(payload: dict) -> bool:
            try:
                await requests_review.respond(
                    client, row["id"], payload["response"], payload["status"]
                )
            except ApiError as exc:
                logger.error("Error submitting response: %s", exc)
                notifier.error(exc.user_message("Failed to submit response. Please try again."))
                return False
            notifier.success("Response submitted successfully!")
            page.run_task(load)
            return True

        actions.show_respond_dialog(page, row, submit)

    def request_card(row: dict) -> ft.Control:
        details = [
            ft.Text(
                f"{row['studentName']} ({row['studentRollNumber']}) ・ {row['type']} ・ {format_date(row.get('submittedDate'))}",
                size=12,
                color=COLOR_TEXT_MUTED,
            ),
            ft.Text(row.get("description") or "", color=COLOR_TEXT_MAIN),
        ]
        if row.get("response"):
            details.append(ft.Text(f"Response: {row['response']}", size=12, color=COLOR_SUCCESS))
        return _card(
            ft.Row(
                [
                    ft.Column(
                        [
                            ft.Text(row.get("subject") or "", size=16, weight=ft.FontWeight.BOLD, color=COLOR_TEXT_MAIN),
                            *details,
                        ],
                        spacing=4,
                        expand=True,
                    ),
                    _badge(status_label(row["status"]), status_color(row["status"])),
                    ft.TextButton(
                        "Respond",
                        icon=ft.Icons.REPLY,
                        on_click=lambda _e: open_respond(row),
                    ),
                ],
                vertical_alignment=ft.CrossAxisAlignment.START,
            ),
            margin=ft.margin.only(bottom=12),
        )

    def render():
        visible = requests_review.filter_requests(rows, state.request_status, state.request_search)
        body.controls = [request_card(r) for r in visible] or [
            _empty_state("No requests found")
        ]
        page.update()

    def on_status(e):
        state.request_status = e.control.value or ALL
        render()

    def on_search(e):
        state.request_search = e.control.value or ""
        render()

    status_dd = _filter_dropdown(
        "Status",
        dropdown_options([(s, status_label(s)) for s in REQUEST_STATUSES], "All Statuses"),
        state.request_status,
        on_status,
    )
    search_field = _search_field(
        "Search by student, roll number, subject or type...", state.request_search, on_search
    )

    async def load():
        nonlocal rows
        try:
            rows = await requests_review.load_requests(client)
        except ApiError as exc:
            logger.error("Error fetching requests: %s", exc)
            notifier.error(exc.user_message("Failed to load requests"))
            rows = []
        render()

    page.run_task(load)
    return ft.Column(
        [
            _header("Student Requests", "Review and respond to student requests"),
            ft.Row([search_field, status_dd], spacing=12, wrap=True),
            body,
        ],
        spacing=16,
        expand=True,
    )


# ---------------------------------------------------------------------------
# Student: results
# ---------------------------------------------------------------------------


def build_results_view(page: ft.Page, client, notifier):
    body = ft.Column([_loading()], scroll=ft.ScrollMode.AUTO, expand=True)
    cgpa_text = ft.Text("", size=16, weight=ft.FontWeight.BOLD, color=COLOR_PRIMARY)

    def course_row(row: dict) -> ft.Control:
        pct = grades.percentage(row.get("marksObtained"), row.get("totalMarks"))
        return ft.Row(
            [
                ft.Text(f"{row['code']} - {row['name']}", expand=True, color=COLOR_TEXT_MAIN),
                ft.Text(f"{row['creditHours']} cr", color=COLOR_TEXT_MUTED, width=60),
                ft.Text(
                    f"{row.get('marksObtained')}/{row.get('totalMarks')}"
                    + (f" ({pct}%)" if pct is not None else ""),
                    color=COLOR_TEXT_MUTED,
                    width=140,
                ),
                ft.Text(row.get("grade") or "-", weight=ft.FontWeight.BOLD, width=40),
            ]
        )

    async def load():
        try:
            rows = await grades.load_results(client)
        except ApiError as exc:
            logger.error("Error fetching results: %s", exc)
            notifier.error(exc.user_message("Failed to load results"))
            rows = []
        cgpa_text.value = f"CGPA: {grades.calculate_gpa(rows):.2f}"
        summaries = grades.semester_summaries(rows)
        body.controls = [
            _card(
                ft.Column(
                    [
                        ft.Row(
                            [
                                ft.Text(s["semester"] or "Semester", size=16, weight=ft.FontWeight.BOLD, expand=True),
                                ft.Text(f"GPA: {s['gpa']:.2f}", color=COLOR_PRIMARY),
                            ]
                        ),
                        *(course_row(r) for r in s["courses"]),
                    ],
                    spacing=6,
                ),
                margin=ft.margin.only(bottom=12),
            )
            for s in summaries
        ] or [_empty_state("No results published yet", ft.Icons.GRADING)]
        page.update()

    page.run_task(load)
    return ft.Column(
        [_header("Results", "Semester-wise grades", cgpa_text), body],
        spacing=16,
        expand=True,
    )


# ---------------------------------------------------------------------------
# Profile (all roles)
# ---------------------------------------------------------------------------

PERSONAL_LABELS = [
    ("fullName", "Full Name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("address", "Address"),
    ("dateOfBirth", "Date of Birth"),
]
TEACHER_LABELS = [
    ("employeeId", "Employee ID"),
    ("department", "Department"),
    ("designation", "Designation"),
    ("joiningDate", "Joining Date"),
]
STUDENT_LABELS = [
    ("rollNumber", "Roll Number"),
    ("currentSemester", "Current Semester"),
    ("program", "Program"),
    ("enrollmentDate", "Enrollment Date"),
]


def _info_row(label: str, value) -> ft.Row:
    return ft.Row(
        [
            ft.Text(label, width=160, color=COLOR_TEXT_MUTED),
            ft.Text(str(value) if value not in (None, "") else "-", color=COLOR_TEXT_MAIN, selectable=True),
        ]
    )


def build_profile_view(page: ft.Page, client, notifier, is_teacher: bool):
    current: dict = {}
    body = ft.Column([_loading()], scroll=ft.ScrollMode.AUTO, expand=True)

    def section(title: str, labels) -> ft.Container:
        return _card(
            ft.Column(
                [
                    ft.Text(title, size=16, weight=ft.FontWeight.BOLD, color=COLOR_TEXT_MAIN),
                    *(_info_row(label, current.get(name)) for name, label in labels),
                ],
                spacing=8,
            ),
            margin=ft.margin.only(bottom=12),
        )

    def render():
        if not current:
            body.controls = [_empty_state("Profile unavailable", ft.Icons.PERSON_OFF)]
        else:
            body.controls = [section("Personal Information", PERSONAL_LABELS)]
            role_labels = TEACHER_LABELS if is_teacher else STUDENT_LABELS
            if any(name in current for name, _ in role_labels):
                title = "Professional Information" if is_teacher else "Academic Information"
                body.controls.append(section(title, role_labels))
        page.update()

    async def load():
        nonlocal current
        try:
            current = await profile.load_profile(client, is_teacher)
        except ApiError as exc:
            logger.error("Error fetching profile: %s", exc)
            notifier.error("Failed to load profile data")
            current = {}
        render()

    def open_edit(_e=None):
        if not current:
            return

        async def submit(payload: dict) -> bool:
            try:
                await profile.update_profile(client, payload)
            except ApiError as exc:
                logger.error("Error updating profile: %s", exc)
                notifier.error(exc.user_message("Failed to update profile"))
                return False
            notifier.success("Profile updated successfully!")
            page.run_task(load)
            return True

        actions.show_form_dialog(
            page,
            "Edit Profile",
            actions.form_layout("profile", MODAL_EDIT, FilterOptions()),
            submit,
            record=current,
            submit_label="Save Changes",
        )

    def open_password(_e=None):
        async def submit(payload: dict) -> bool:
            try:
                await profile.change_password(client, payload)
            except ApiError as exc:
                logger.error("Error changing password: %s", exc)
                notifier.error(
                    exc.user_message("Failed to change password. Please check your current password.")
                )
                return False
            notifier.success("Password changed successfully!")
            return True

        actions.show_form_dialog(
            page,
            "Change Password",
            actions.form_layout("password", MODAL_EDIT, FilterOptions()),
            submit,
            submit_label="Change Password",
        )

    page.run_task(load)
    buttons = ft.Row(
        [
            ft.OutlinedButton("Change Password", icon=ft.Icons.LOCK, on_click=open_password),
            ft.FilledButton(
                "Edit Profile",
                icon=ft.Icons.EDIT,
                style=ft.ButtonStyle(bgcolor=COLOR_PRIMARY, color="white"),
                on_click=open_edit,
            ),
        ],
        spacing=8,
    )
    return ft.Column(
        [_header("My Profile", "View and manage your profile information", buttons), body],
        spacing=16,
        expand=True,
    )


# ---------------------------------------------------------------------------
# Teacher: student feedback
# ---------------------------------------------------------------------------

FEEDBACK_TARGETS = [("teacher", "Teacher"), ("course", "Course"), ("system", "System")]


def _stars(rating) -> ft.Row:
    filled = int(rating or 0)
    return ft.Row(
        [
            ft.Icon(
                ft.Icons.STAR if i < filled else ft.Icons.STAR_BORDER,
                color=COLOR_WARNING if i < filled else COLOR_BORDER,
                size=16,
            )
            for i in range(5)
        ],
        spacing=0,
    )


def build_feedback_view(page: ft.Page, state, client, notifier):
    rows: list[dict] = []
    summary = ft.Row([], spacing=16, wrap=True)
    body = ft.Column([_loading()], scroll=ft.ScrollMode.AUTO, expand=True)

    def feedback_card(row: dict) -> ft.Control:
        return _card(
            ft.Column(
                [
                    ft.Row(
                        [
                            _badge(row.get("targetType") or "-", COLOR_ACCENT),
                            ft.Text(row["targetName"], weight=ft.FontWeight.BOLD, color=COLOR_TEXT_MAIN, expand=True),
                            _stars(row.get("rating")),
                        ]
                    ),
                    ft.Text(
                        f"{row['studentName']} ({row['studentRollNumber']}) ・ {format_date(row.get('createdAt'))}",
                        size=12,
                        color=COLOR_TEXT_MUTED,
                    ),
                    ft.Text(row.get("comment") or "", color=COLOR_TEXT_MAIN),
                ],
                spacing=6,
            ),
            margin=ft.margin.only(bottom=12),
        )

    def render():
        teacher_count = sum(1 for r in rows if r.get("targetType") == "Teacher")
        summary.controls = [
            _stat_card("Average Rating", f"{feedback.average_rating(rows):.1f}/5", ft.Icons.STAR, COLOR_WARNING),
            _stat_card("Feedback About You", teacher_count, ft.Icons.PERSON, COLOR_PRIMARY),
            _stat_card("Total Feedback", len(rows), ft.Icons.FORUM, COLOR_ACCENT),
        ]
        visible = feedback.filter_feedback(rows, state.feedback_target)
        body.controls = [feedback_card(r) for r in visible] or [
            _empty_state("No feedback found", ft.Icons.STAR_BORDER)
        ]
        page.update()

    def on_target(e):
        state.feedback_target = e.control.value or ALL
        render()

    target_dd = _filter_dropdown(
        "Feedback Type",
        dropdown_options(FEEDBACK_TARGETS, "All Feedback"),
        state.feedback_target,
        on_target,
    )

    async def load():
        nonlocal rows
        try:
            rows = await feedback.load_teacher_feedback(client)
        except ApiError as exc:
            logger.error("Error fetching feedback: %s", exc)
            notifier.error(exc.user_message("Failed to load feedback"))
            rows = []
        render()

    page.run_task(load)
    return ft.Column(
        [
            _header(
                "Student Feedback",
                "Feedback from students about you, your courses, and the system",
            ),
            summary,
            target_dd,
            body,
        ],
        spacing=16,
        expand=True,
    )


# ---------------------------------------------------------------------------
# Assistant
# ---------------------------------------------------------------------------

BOT_REPLY_DELAY = 1.0


def _chat_bubble(message) -> ft.Row:
    mine = message.sender == "user"
    return ft.Row(
        [
            ft.Container(
                content=ft.Column(
                    [
                        ft.Text(message.text, color="white" if mine else COLOR_TEXT_MAIN, selectable=True),
                        ft.Text(
                            format_clock(message.timestamp),
                            size=10,
                            color=ft.Colors.WHITE70 if mine else COLOR_TEXT_MUTED,
                        ),
                    ],
                    spacing=4,
                    tight=True,
                ),
                bgcolor=COLOR_PRIMARY if mine else COLOR_CARD,
                border_radius=BORDER_RADIUS_CARD,
                padding=ft.Padding.symmetric(horizontal=14, vertical=10),
                width=480,
            )
        ],
        alignment=ft.MainAxisAlignment.END if mine else ft.MainAxisAlignment.START,
    )


def build_chatbot_view(page: ft.Page, conversation):
    messages = ft.ListView(expand=True, spacing=10, auto_scroll=True)
    typing = ft.Text("Assistant is typing...", size=12, color=COLOR_TEXT_MUTED, visible=False)

    def render():
        messages.controls = [_chat_bubble(m) for m in conversation.messages]
        page.update()

    async def send(text: str):
        if conversation.say(text) is None:
            return
        input_field.value = ""
        typing.visible = True
        render()
        await asyncio.sleep(BOT_REPLY_DELAY)
        conversation.answer(text)
        typing.visible = False
        render()

    async def on_send(_e=None):
        await send(input_field.value or "")

    def quick_button(question: str) -> ft.OutlinedButton:
        async def ask(_e=None):
            await send(question)

        return ft.OutlinedButton(question, on_click=ask)

    input_field = ft.TextField(
        hint_text="Type your question...",
        on_submit=on_send,
        border_radius=BORDER_RADIUS_BTN,
        border_color=COLOR_BORDER,
        bgcolor=COLOR_CARD,
        expand=True,
    )
    messages.controls = [_chat_bubble(m) for m in conversation.messages]
    return ft.Column(
        [
            _header("AI Assistant", "Ask about courses, assignments, results and more"),
            ft.Row([quick_button(q) for q in QUICK_QUESTIONS], wrap=True, spacing=8),
            _card(messages, expand=True),
            typing,
            ft.Row(
                [
                    input_field,
                    ft.IconButton(icon=ft.Icons.SEND, icon_color=COLOR_PRIMARY, on_click=on_send),
                ]
            ),
        ],
        spacing=12,
        expand=True,
    )


# ---------------------------------------------------------------------------
# Sign in
# ---------------------------------------------------------------------------


def build_login_view(page: ft.Page, on_login) -> ft.View:
    """``on_login(form)`` returns an error message, or None on success."""
    email_field = ft.TextField(
        label="Email",
        prefix_icon=ft.Icons.EMAIL,
        border_color=COLOR_BORDER,
        focused_border_color=COLOR_PRIMARY,
        border_radius=BORDER_RADIUS_BTN,
    )
    password_field = ft.TextField(
        label="Password",
        prefix_icon=ft.Icons.LOCK,
        password=True,
        can_reveal_password=True,
        border_color=COLOR_BORDER,
        focused_border_color=COLOR_PRIMARY,
        border_radius=BORDER_RADIUS_BTN,
    )
    error_text = ft.Text("", color=COLOR_DANGER, size=12)

    async def submit(_e=None):
        try:
            form = LoginForm(email=email_field.value, password=password_field.value)
        except ValidationError as exc:
            errors = form_errors(exc)
            email_field.error_text = errors.get("email")
            password_field.error_text = errors.get("password")
            page.update()
            return
        email_field.error_text = None
        password_field.error_text = None
        login_btn.disabled = True
        error_text.value = ""
        page.update()
        message = await on_login(form)
        login_btn.disabled = False
        error_text.value = message or ""
        page.update()

    password_field.on_submit = submit
    login_btn = ft.FilledButton(
        "Sign In",
        style=ft.ButtonStyle(bgcolor=COLOR_PRIMARY, color="white"),
        on_click=submit,
        width=360,
    )

    return ft.View(
        route="/login",
        bgcolor=COLOR_BG,
        vertical_alignment=ft.MainAxisAlignment.CENTER,
        horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        controls=[
            _card(
                ft.Column(
                    [
                        ft.Text(APP_TITLE, size=26, weight=ft.FontWeight.BOLD, color=COLOR_PRIMARY),
                        ft.Text("Sign in to your account", color=COLOR_TEXT_MUTED),
                        email_field,
                        password_field,
                        error_text,
                        login_btn,
                        ft.Text(f"v{APP_VERSION}", size=11, color=COLOR_TEXT_MUTED),
                    ],
                    spacing=16,
                    tight=True,
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                ),
                width=420,
            )
        ],
    )
