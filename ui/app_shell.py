# ui/app_shell.py
from __future__ import annotations

import flet as ft

from core.log import get_logger
from core.settings import UI
from services.timeline_api import TimelineApi

from .pages.timeline import TimelinePage


log = get_logger("ui")


class AppShell:
    def __init__(self, page: ft.Page, api: TimelineApi | None = None):
        self.page = page
        self.api = api or TimelineApi()

        self.page.title = UI.app_title
        self.page.horizontal_alignment = ft.CrossAxisAlignment.STRETCH
        self.page.vertical_alignment = ft.MainAxisAlignment.START

        self._timeline = TimelinePage(self, self.api)

        self.content = ft.Container(expand=True)

        self.nav = ft.NavigationRail(
            selected_index=0,
            label_type=ft.NavigationRailLabelType.ALL,
            min_width=90,
            group_alignment=-0.9,
            on_change=self.on_nav_change,
            destinations=[
                ft.NavigationRailDestination(
                    icon=ft.Icons.VIEW_TIMELINE_OUTLINED,
                    selected_icon=ft.Icons.VIEW_TIMELINE,
                    label="Timeline",
                ),
            ],
        )

        self.root = ft.Row(
            controls=[
                ft.Container(self.nav, width=88, bgcolor=UI.theme.surface_bg),
                ft.VerticalDivider(width=1),
                self.content,
            ],
            expand=True,
            spacing=0,
        )

    # ---------- mounting ----------
    def mount(self):
        self.page.controls.clear()
        self.page.add(self.root)
        self.content.content = self._timeline.view
        self.page.update()
        log.info("Timeline shell mounted for user %s", UI.user_id)
        self._timeline.activate_from_menu()

    def on_nav_change(self, e: ft.ControlEvent):
        self.content.content = self._timeline.view
        self._timeline.activate_from_menu()
        self.page.update()
