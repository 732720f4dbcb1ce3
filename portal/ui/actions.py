"""
actions.py - UI-side actions and dialogs
Single responsibility: handle modal flows (create/edit forms, delete
confirmation, grade entry, request responses).
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import flet as ft
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from portal.config import (
    BORDER_RADIUS_BTN,
    BORDER_RADIUS_CARD,
    COLOR_BORDER,
    COLOR_DANGER,
    COLOR_PRIMARY,
    COLOR_SUCCESS,
    COLOR_TEXT_MAIN,
    COLOR_TEXT_MUTED,
)
from portal.domain.catalog import (
    DAYS,
    DEPARTMENTS,
    DESIGNATIONS,
    PROGRAMS,
    REQUEST_STATUSES,
    REQUEST_TYPES,
    SEMESTER_NUMBERS,
    SEMESTER_TERMS,
)
from portal.domain.forms import (
    ChangePasswordForm,
    CourseForm,
    EnrollmentForm,
    FormModel,
    ForumPostForm,
    GradeForm,
    ProfileForm,
    ReplyForm,
    RequestForm,
    RespondForm,
    StudentCreateForm,
    StudentUpdateForm,
    TeacherCreateForm,
    TeacherUpdateForm,
    TimetableForm,
    form_errors,
)
from portal.domain.models import MODAL_CREATE
from portal.services.filter_options import FilterOptions
from portal.ui.helpers import dropdown_options, same_options, status_label
from portal.utils.time import time_ago

logger = logging.getLogger(__name__)

Submit = Callable[[dict], Awaitable[bool]]


@dataclass
class FieldDef:
    name: str
    label: str
    kind: str = "text"  # text | password | multiline | select
    options: list[tuple[str, str]] = field(default_factory=list)
    default: str = ""


@dataclass
class FormLayout:
    form: type[FormModel]
    fields: list[FieldDef]


# ---------------------------------------------------------------------------
# Per-resource layouts
# ---------------------------------------------------------------------------


def _credit_options() -> list[tuple[str, str]]:
    return [(str(n), f"{n} Credit Hour{'s' if n > 1 else ''}") for n in range(1, 7)]


def form_layout(key: str, mode: str, options: FilterOptions) -> FormLayout:
    """Fields and schema for a resource's create or edit dialog."""
    creating = mode == MODAL_CREATE
    if key == "courses":
        return FormLayout(
            CourseForm,
            [
                FieldDef("code", "Course Code *"),
                FieldDef("name", "Course Name *"),
                FieldDef("description", "Description", "multiline"),
                FieldDef("credit_hours", "Credit Hours *", "select", _credit_options(), "3"),
                FieldDef("semester", "Semester *", "select", same_options(SEMESTER_TERMS)),
                FieldDef("teacher_id", "Teacher *", "select", options.teachers),
            ],
        )
    if key == "teachers":
        fields = [
            FieldDef("full_name", "Full Name *"),
            FieldDef("email", "Email *"),
            FieldDef(
                "department",
                "Department",
                "select",
                same_options(DEPARTMENTS),
                "Computer Science" if creating else "",
            ),
            FieldDef(
                "designation",
                "Designation",
                "select",
                same_options(DESIGNATIONS),
                "Assistant Professor" if creating else "",
            ),
        ]
        if creating:
            fields.insert(2, FieldDef("password", "Password *", "password"))
        return FormLayout(TeacherCreateForm if creating else TeacherUpdateForm, fields)
    if key == "students":
        fields = [
            FieldDef("full_name", "Full Name *"),
            FieldDef("email", "Email *"),
            FieldDef("roll_number", "Roll Number"),
            FieldDef(
                "current_semester",
                "Current Semester",
                "select",
                [(n, f"Semester {n}") for n in SEMESTER_NUMBERS],
            ),
            FieldDef("program", "Program", "select", same_options(PROGRAMS)),
        ]
        if creating:
            fields.insert(2, FieldDef("password", "Password *", "password"))
        return FormLayout(StudentCreateForm if creating else StudentUpdateForm, fields)
    if key == "enrollments":
        return FormLayout(
            EnrollmentForm,
            [
                FieldDef("student_id", "Student *", "select", options.students),
                FieldDef("course_id", "Course *", "select", options.courses),
                FieldDef("section", "Section *"),
            ],
        )
    if key == "timetable":
        return FormLayout(
            TimetableForm,
            [
                FieldDef("course_id", "Course *", "select", options.courses),
                FieldDef("teacher_id", "Teacher *", "select", options.teachers),
                FieldDef("day_of_week", "Day *", "select", same_options(DAYS)),
                FieldDef("start_time", "Start Time * (HH:MM)"),
                FieldDef("end_time", "End Time * (HH:MM)"),
                FieldDef("room", "Room *"),
                FieldDef("semester", "Semester *", "select", same_options(SEMESTER_TERMS)),
            ],
        )
    if key == "requests":
        return FormLayout(
            RequestForm,
            [
                FieldDef("type", "Request Type *", "select", same_options(REQUEST_TYPES)),
                FieldDef("subject", "Subject *"),
                FieldDef("description", "Description *", "multiline"),
            ],
        )
    if key == "forum":
        return FormLayout(
            ForumPostForm,
            [
                FieldDef("title", "Title *"),
                FieldDef("course_id", "Course (optional)", "select", options.courses),
                FieldDef("content", "Content *", "multiline"),
            ],
        )
    if key == "profile":
        return FormLayout(
            ProfileForm,
            [
                FieldDef("full_name", "Full Name *"),
                FieldDef("email", "Email *"),
                FieldDef("phone", "Phone"),
                FieldDef("address", "Address", "multiline"),
                FieldDef("date_of_birth", "Date of Birth (YYYY-MM-DD)"),
            ],
        )
    if key == "password":
        return FormLayout(
            ChangePasswordForm,
            [
                FieldDef("current_password", "Current Password *", "password"),
                FieldDef("new_password", "New Password *", "password"),
                FieldDef("confirm_password", "Confirm New Password *", "password"),
            ],
        )
    raise KeyError(f"No form layout for {key}")


def initial_values(fields: list[FieldDef], record: dict | None) -> dict[str, str]:
    """Prefill from a record (camelCase keys) or fall back to field defaults."""
    values = {}
    for f in fields:
        raw = (record or {}).get(to_camel(f.name)) if record else None
        values[f.name] = f.default if raw is None else str(raw)
    return values


# ---------------------------------------------------------------------------
# Generic form dialog
# ---------------------------------------------------------------------------


def _build_input(f: FieldDef, value: str):
    common = dict(
        label=f.label,
        border_color=COLOR_BORDER,
        focused_border_color=COLOR_PRIMARY,
        border_radius=BORDER_RADIUS_BTN,
    )
    if f.kind == "select":
        return ft.Dropdown(
            options=dropdown_options(f.options),
            value=value or None,
            expand=True,
            **common,
        )
    if f.kind == "multiline":
        return ft.TextField(
            value=value, multiline=True, min_lines=3, max_lines=8, **common
        )
    if f.kind == "password":
        return ft.TextField(
            value=value, password=True, can_reveal_password=True, **common
        )
    return ft.TextField(value=value, **common)


def show_form_dialog(
    page: ft.Page,
    title: str,
    layout: FormLayout,
    on_submit: Submit,
    on_cancel: Callable[[], None] | None = None,
    record: dict | None = None,
    submit_label: str = "Save",
):
    """
    Open a form dialog. Input is validated with the layout's schema; only a
    valid payload reaches ``on_submit``. The dialog closes when
    ``on_submit`` reports success and stays open (inputs kept) otherwise.
    """
    values = initial_values(layout.fields, record)
    inputs = {f.name: _build_input(f, values[f.name]) for f in layout.fields}
    error_text = ft.Text("", color=COLOR_DANGER, size=12)

    def collect() -> dict:
        return {name: ctrl.value for name, ctrl in inputs.items()}

    def show_errors(errors: dict[str, str]):
        for name, ctrl in inputs.items():
            ctrl.error_text = errors.get(name)
        error_text.value = errors.get("__root__", "")
        page.update()

    def set_busy(busy: bool):
        save_btn.disabled = busy
        cancel_btn.disabled = busy
        save_btn.content = ft.Text("Saving..." if busy else submit_label)
        page.update()

    async def on_save(_e=None):
        try:
            form = layout.form(**collect())
        except ValidationError as exc:
            show_errors(form_errors(exc))
            return
        show_errors({})
        set_busy(True)
        try:
            ok = await on_submit(form.to_payload())
        except Exception:
            logger.exception("Form submit failed")
            ok = False
        if ok:
            dialog.open = False
            page.update()
        else:
            set_busy(False)

    def cancel(_e=None):
        dialog.open = False
        page.update()
        if on_cancel:
            on_cancel()

    cancel_btn = ft.TextButton("Cancel", on_click=cancel)
    save_btn = ft.FilledButton(
        content=ft.Text(submit_label),
        style=ft.ButtonStyle(bgcolor=COLOR_PRIMARY, color="white"),
        on_click=on_save,
    )

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(title, weight=ft.FontWeight.BOLD),
        content=ft.Container(
            content=ft.Column(
                controls=[*inputs.values(), error_text],
                spacing=16,
                tight=True,
                scroll=ft.ScrollMode.AUTO,
            ),
            width=560,
        ),
        actions=[cancel_btn, save_btn],
        actions_alignment=ft.MainAxisAlignment.END,
        shape=ft.RoundedRectangleBorder(radius=BORDER_RADIUS_CARD),
    )
    page.overlay.append(dialog)
    dialog.open = True
    page.update()
    return dialog


# ---------------------------------------------------------------------------
# Confirmation
# ---------------------------------------------------------------------------


def show_delete_dialog(
    page: ft.Page,
    title: str,
    message: str,
    on_confirm: Callable[[], Awaitable[bool]],
    on_cancel: Callable[[], None] | None = None,
    confirm_label: str = "Delete",
):
    async def confirm(_e=None):
        confirm_btn.disabled = True
        cancel_btn.disabled = True
        page.update()
        try:
            ok = await on_confirm()
        except Exception:
            logger.exception("Delete failed")
            ok = False
        if ok:
            dialog.open = False
        else:
            confirm_btn.disabled = False
            cancel_btn.disabled = False
        page.update()

    def cancel(_e=None):
        dialog.open = False
        page.update()
        if on_cancel:
            on_cancel()

    cancel_btn = ft.TextButton("Cancel", on_click=cancel)
    confirm_btn = ft.FilledButton(
        confirm_label,
        style=ft.ButtonStyle(bgcolor=COLOR_DANGER, color="white"),
        on_click=confirm,
    )
    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(title, weight=ft.FontWeight.BOLD),
        content=ft.Text(message, color=COLOR_TEXT_MUTED),
        actions=[cancel_btn, confirm_btn],
        actions_alignment=ft.MainAxisAlignment.END,
        shape=ft.RoundedRectangleBorder(radius=BORDER_RADIUS_CARD),
    )
    page.overlay.append(dialog)
    dialog.open = True
    page.update()
    return dialog


# ---------------------------------------------------------------------------
# Teacher flows
# ---------------------------------------------------------------------------


def show_grade_dialog(page: ft.Page, course, student, on_submit: Submit):
    """Grade entry for one student; prefilled from an existing grade."""
    existing = student.grade or {}
    layout = FormLayout(
        GradeForm,
        [
            FieldDef(
                "semester",
                "Semester *",
                "select",
                same_options(SEMESTER_TERMS),
                course.semester or "",
            ),
            FieldDef("total_marks", "Total Marks *", default="100"),
            FieldDef("marks_obtained", "Marks Obtained *"),
        ],
    )
    record = {
        "totalMarks": existing.get("totalMarks"),
        "marksObtained": existing.get("marksObtained"),
    }
    return show_form_dialog(
        page,
        f"Grade: {student.name} ({student.roll_number})",
        layout,
        on_submit,
        record={k: v for k, v in record.items() if v is not None},
        submit_label="Submit Grade",
    )


def show_respond_dialog(page: ft.Page, request: dict, on_submit: Submit):
    layout = FormLayout(
        RespondForm,
        [
            FieldDef("response", "Response *", "multiline"),
            FieldDef(
                "status",
                "Status *",
                "select",
                [(s, status_label(s)) for s in REQUEST_STATUSES],
                "resolved",
            ),
        ],
    )
    record = {"response": request.get("response")}
    status = request.get("status")
    if status and status != "pending":
        record["status"] = "in-progress" if status == "in_progress" else status
    return show_form_dialog(
        page,
        f"Respond: {request.get('subject') or ''}",
        layout,
        on_submit,
        record={k: v for k, v in record.items() if v},
        submit_label="Send Response",
    )


# ---------------------------------------------------------------------------
# Forum thread
# ---------------------------------------------------------------------------


def _reply_row(reply: dict) -> ft.Control:
    header = [
        ft.Text(reply["author"], weight=ft.FontWeight.BOLD, size=13, color=COLOR_TEXT_MAIN),
        ft.Text(time_ago(reply.get("createdAt")), size=11, color=COLOR_TEXT_MUTED),
    ]
    if reply.get("isTeacher"):
        header.insert(
            1,
            ft.Container(
                content=ft.Text("Teacher", size=10, color="white", weight=ft.FontWeight.BOLD),
                bgcolor=COLOR_SUCCESS,
                border_radius=10,
                padding=ft.Padding.symmetric(horizontal=8, vertical=1),
            ),
        )
    return ft.Container(
        content=ft.Column(
            [
                ft.Row(header, spacing=8),
                ft.Text(reply["content"], color=COLOR_TEXT_MAIN, selectable=True),
            ],
            spacing=4,
            tight=True,
        ),
        padding=ft.Padding.symmetric(vertical=8),
        border=ft.border.only(bottom=ft.BorderSide(1, COLOR_BORDER)),
    )


def _post_meta(post: dict) -> str:
    parts = (post.get("authorName"), post.get("courseLabel"), time_ago(post.get("createdAt")))
    return " ・ ".join(p for p in parts if p)


def show_post_dialog(
    page: ft.Page,
    post: dict,
    load_thread: Callable[[], Awaitable[tuple[dict, list[dict]]]],
    on_reply: Submit,
):
    """
    Post content, its replies and a reply box. ``load_thread`` returns the
    post and its replies; after a successful reply the thread reloads.
    """
    meta_text = ft.Text(_post_meta(post), size=12, color=COLOR_TEXT_MUTED)
    content_text = ft.Text(post.get("content") or "", color=COLOR_TEXT_MAIN, selectable=True)
    replies_title = ft.Text("Replies", weight=ft.FontWeight.BOLD, color=COLOR_TEXT_MAIN)
    replies_column = ft.Column([ft.ProgressRing(color=COLOR_PRIMARY)], spacing=0, tight=True)
    reply_field = ft.TextField(
        label="Write a reply...",
        multiline=True,
        min_lines=2,
        max_lines=5,
        border_color=COLOR_BORDER,
        focused_border_color=COLOR_PRIMARY,
        border_radius=BORDER_RADIUS_BTN,
    )

    def show_thread(detail: dict, replies: list[dict]):
        meta_text.value = _post_meta(detail)
        content_text.value = detail.get("content") or ""
        replies_title.value = f"Replies ({len(replies)})"
        replies_column.controls = [_reply_row(r) for r in replies] or [
            ft.Text("No replies yet", color=COLOR_TEXT_MUTED)
        ]
        page.update()

    async def refresh():
        detail, replies = await load_thread()
        show_thread(detail, replies)

    async def send(_e=None):
        try:
            form = ReplyForm(content=reply_field.value)
        except ValidationError as exc:
            reply_field.error_text = form_errors(exc).get("content")
            page.update()
            return
        reply_field.error_text = None
        send_btn.disabled = True
        page.update()
        try:
            ok = await on_reply(form.to_payload())
        except Exception:
            logger.exception("Reply submit failed")
            ok = False
        send_btn.disabled = False
        if ok:
            reply_field.value = ""
            await refresh()
        else:
            page.update()

    def close(_e=None):
        dialog.open = False
        page.update()

    send_btn = ft.FilledButton(
        "Post Reply",
        icon=ft.Icons.SEND,
        style=ft.ButtonStyle(bgcolor=COLOR_PRIMARY, color="white"),
        on_click=send,
    )
    dialog = ft.AlertDialog(
        title=ft.Text(post.get("title") or "", weight=ft.FontWeight.BOLD),
        content=ft.Container(
            content=ft.Column(
                [
                    meta_text,
                    content_text,
                    ft.Divider(),
                    replies_title,
                    replies_column,
                    reply_field,
                    ft.Row([send_btn], alignment=ft.MainAxisAlignment.END),
                ],
                spacing=12,
                tight=True,
                scroll=ft.ScrollMode.AUTO,
            ),
            width=640,
        ),
        actions=[ft.TextButton("Back to Forum", on_click=close)],
        actions_alignment=ft.MainAxisAlignment.END,
        shape=ft.RoundedRectangleBorder(radius=BORDER_RADIUS_CARD),
    )
    page.overlay.append(dialog)
    dialog.open = True
    page.update()
    page.run_task(refresh)
    return dialog
