"""
app_main.py - Campus Portal main application
Campus Portal v1.0
"""

import logging
import sys
from pathlib import Path

import flet as ft

from portal.api.client import ApiClient
from portal.api.errors import ApiError
from portal.auth import service as auth_service
from portal.auth.session import Session
from portal.config import APP_TITLE, COLOR_BG, COLOR_PRIMARY
from portal.services.resource_list import ResourceListController
from portal.services.resources import (
    COURSES,
    ENROLLMENTS,
    FORUM,
    REQUESTS,
    STUDENTS,
    TEACHERS,
    TIMETABLE,
)
from portal.ui import views
from portal.ui.notifier import SnackBarNotifier
from portal.ui_state import AppState

logger = logging.getLogger(__name__)

# Screens backed by a ResourceListController: key -> (spec, title, subtitle)
LIST_SCREENS = {
    "courses": (COURSES, "Courses", "Manage the course catalogue"),
    "teachers": (TEACHERS, "Teachers", "Manage teacher accounts"),
    "students": (STUDENTS, "Students", "Manage student accounts"),
    "enrollments": (ENROLLMENTS, "Enrollments", "Assign students to courses"),
    "timetable": (TIMETABLE, "Timetable", "Manage class schedules"),
    "requests": (REQUESTS, "My Requests", "Submit and track your requests"),
    "forum": (FORUM, "Community Forum", "Discuss and interact with your classmates and teachers"),
}


def resource_path(relative_path: str) -> str:
    """Get absolute path to resource, works for dev and for PyInstaller"""
    if hasattr(sys, "_MEIPASS"):
        return str(Path(sys._MEIPASS) / relative_path)
    return str(Path.cwd() / relative_path)


def main(page: ft.Page):
    page.title = APP_TITLE
    page.window.icon = resource_path("app.ico")
    page.window.maximized = True
    page.theme_mode = ft.ThemeMode.LIGHT
    page.bgcolor = COLOR_BG
    page.padding = 0
    page.theme = ft.Theme(color_scheme_seed=COLOR_PRIMARY)

    session = Session().load()
    state = AppState(session)
    notifier = SnackBarNotifier(page)

    def on_unauthorized():
        # The client already cleared the session
        notifier.error("Your session has expired. Please sign in again.")
        show_login()

    client = ApiClient(session, on_unauthorized=on_unauthorized)

    def dispose_screen():
        if state.controller is not None:
            state.controller.dispose()
            state.controller = None

    def show_login():
        dispose_screen()
        state.reset()
        page.views.clear()
        page.views.append(views.build_login_view(page, handle_login))
        page.update()

    async def handle_login(form) -> str | None:
        try:
            await auth_service.login(client, form)
        except ApiError as exc:
            logger.error("Login failed: %s", exc)
            return exc.user_message("Login failed. Please check your credentials.")
        navigate(views.navigation_for(session.role)[0][0])
        return None

    def handle_logout():
        auth_service.logout(session)
        show_login()

    def build_body(key: str):
        if key in LIST_SCREENS:
            spec, title, subtitle = LIST_SCREENS[key]
            controller = ResourceListController(
                spec,
                client,
                notifier,
                guard=lambda: session.permits(spec.roles),
                spawn=page.run_task,
            )
            state.controller = controller
            body = views.build_resource_list_view(
                page, controller, title, subtitle, is_teacher=session.is_teacher
            )
            controller.start()
            return body
        if key == "dashboard":
            return views.build_dashboard_view(page, client, session.display_name)
        if key == "schedule":
            return views.build_schedule_view(page, client, notifier, session.is_teacher)
        if key == "results":
            return views.build_roster_view(page, state, client, notifier)
        if key == "requests_review":
            return views.build_requests_review_view(page, state, client, notifier)
        if key == "my_results":
            return views.build_results_view(page, client, notifier)
        if key == "feedback":
            return views.build_feedback_view(page, state, client, notifier)
        if key == "profile":
            return views.build_profile_view(page, client, notifier, session.is_teacher)
        if key == "chatbot":
            return views.build_chatbot_view(page, state.conversation)
        raise KeyError(f"Unknown screen: {key}")

    def navigate(key: str):
        if not session.is_authenticated:
            show_login()
            return
        allowed = [k for k, _, _ in views.navigation_for(session.role)]
        if key not in allowed:
            logger.warning("Screen %s is not available to role %s", key, session.role)
            key = allowed[0]
        try:
            dispose_screen()
            state.current_screen = key
            body = build_body(key)
            page.views.clear()
            page.views.append(
                views.build_shell(
                    f"/{key}",
                    views.build_appbar(session.display_name, session.role, handle_logout),
                    views.build_nav(session.role, key, navigate),
                    body,
                )
            )
            page.update()
        except Exception as exc:
            logger.exception("Error in navigate")
            page.overlay.append(
                ft.AlertDialog(
                    title=ft.Text("An error occurred"),
                    content=ft.Text(f"Details: {exc}"),
                    open=True,
                )
            )
            page.update()

    async def on_window_event(e: ft.WindowEvent):
        if e.type == ft.WindowEventType.CLOSE:
            logger.debug("Window close event")
            dispose_screen()
            try:
                await client.aclose()
            except Exception:
                logger.warning("Failed to close HTTP client", exc_info=True)
            page.window.prevent_close = False
            await page.window.close()

    page.window.prevent_close = True
    page.window.on_event = on_window_event

    if session.is_authenticated:
        navigate(views.navigation_for(session.role)[0][0])
    else:
        show_login()


if __name__ == "__main__":
    ft.app(main)
