import flet as ft

from portal.config import (
    BORDER_RADIUS_CARD,
    COLOR_CARD,
    COLOR_DANGER,
    COLOR_PRIMARY,
    COLOR_TEXT_MAIN,
    COLOR_TEXT_MUTED,
)


class ResourceCard(ft.Container):
    """One list row: title, muted meta line, optional badge and row actions.

    With ``on_open`` the whole card is clickable (e.g. to open a detail view).
    """

    def __init__(
        self,
        record: dict,
        title: str,
        meta: list[str],
        icon=ft.Icons.DESCRIPTION,
        badge: tuple[str, str] | None = None,
        on_edit=None,
        on_delete=None,
        on_open=None,
        disabled: bool = False,
    ):
        super().__init__()
        self.record = record
        self.title = title
        self.meta = meta
        self.icon = icon
        self.badge = badge
        self.on_edit = on_edit
        self.on_delete = on_delete
        self.actions_disabled = disabled

        self.padding = ft.Padding.all(16)
        self.bgcolor = COLOR_CARD
        self.border_radius = BORDER_RADIUS_CARD
        self.border = ft.border.all(1, "transparent")
        self.shadow = ft.BoxShadow(
            blur_radius=2,
            color=ft.Colors.BLACK12,
            offset=ft.Offset(0, 1),
        )
        self.margin = ft.margin.only(bottom=12)
        if on_open:
            self.on_click = lambda _e: on_open(self.record)
            self.ink = True

        self.content = self._build_content()

    def _build_content(self):
        meta_row = [
            ft.Text(text, size=12, color=COLOR_TEXT_MUTED) for text in self.meta if text
        ]

        trailing = []
        if self.badge:
            text, color = self.badge
            trailing.append(
                ft.Container(
                    content=ft.Text(
                        text, size=11, color="white", weight=ft.FontWeight.BOLD
                    ),
                    bgcolor=color,
                    border_radius=12,
                    padding=ft.Padding.symmetric(horizontal=10, vertical=2),
                )
            )
        if self.on_edit:
            trailing.append(
                ft.IconButton(
                    icon=ft.Icons.EDIT_OUTLINED,
                    icon_color=COLOR_PRIMARY,
                    tooltip="Edit",
                    disabled=self.actions_disabled,
                    on_click=lambda _e: self.on_edit(self.record),
                )
            )
        if self.on_delete:
            trailing.append(
                ft.IconButton(
                    icon=ft.Icons.DELETE_OUTLINE,
                    icon_color=COLOR_DANGER,
                    tooltip="Delete",
                    disabled=self.actions_disabled,
                    on_click=lambda _e: self.on_delete(self.record),
                )
            )

        return ft.Row(
            controls=[
                ft.Icon(self.icon, size=24, color=COLOR_PRIMARY),
                ft.Column(
                    controls=[
                        ft.Text(
                            self.title,
                            weight=ft.FontWeight.BOLD,
                            size=16,
                            color=COLOR_TEXT_MAIN,
                            max_lines=1,
                            overflow=ft.TextOverflow.ELLIPSIS,
                        ),
                        ft.Row(controls=meta_row, spacing=8, wrap=True),
                    ],
                    spacing=4,
                    expand=True,
                ),
                *trailing,
            ],
            spacing=16,
            alignment=ft.MainAxisAlignment.START,
            vertical_alignment=ft.CrossAxisAlignment.CENTER,
        )
