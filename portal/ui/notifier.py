"""
notifier.py - Toast notifications
Single responsibility: show success/error messages at the bottom of the page.
"""
import logging

import flet as ft

from portal.config import COLOR_DANGER, COLOR_SUCCESS

logger = logging.getLogger(__name__)


class SnackBarNotifier:
    def __init__(self, page: ft.Page):
        self.page = page

    def _show(self, message: str, color: str) -> None:
        snack = ft.SnackBar(ft.Text(message, color="white"), bgcolor=color)
        self.page.overlay.append(snack)
        snack.open = True
        self.page.update()

    def success(self, message: str) -> None:
        logger.info(message)
        self._show(message, COLOR_SUCCESS)

    def error(self, message: str) -> None:
        self._show(message, COLOR_DANGER)
