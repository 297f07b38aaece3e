# ui/pages/timeline.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import flet as ft

from core.settings import UI
from core.statuses import status_color
from datetime_utils import utc_now
from services.timeline_api import ApiResponse, TimelineApi
from ui.timeline_layout import (
    block_tooltip,
    format_minutes,
    offset_to_minutes,
    timeline_blocks,
)


CLR_OUTLINE = UI.theme.outline
CLR_TEXTSUB = UI.theme.text_subtle
CLR_DROP_IDLE = UI.theme.drop_idle_bg
CLR_DROP_HOVER = UI.theme.drop_hover_bg
CLR_DROP_BORDER = UI.theme.drop_hover_border
CLR_BLOCK_TXT = UI.theme.block_text
TRACK_H = UI.timeline_track_height
TODAY_W = UI.today_panel_width


class TimelinePage:
    """Main tasks as proportional sub-task tracks plus the Today drop zone.

    The page never edits its own copies: every intent goes through
    :class:`TimelineApi` and the lists are redrawn from a fresh fetch.
    """

    def __init__(self, app, api: Optional[TimelineApi] = None):
        self.app = app
        self.api = api or TimelineApi()
        self.user_id = UI.user_id
        self.current_drag_sub_id: Optional[str] = None
        self._tap_offsets: Dict[str, float] = {}

        # ---------- new main task ----------
        self.title_tf = ft.TextField(
            label="Main task",
            hint_text="e.g. Website redesign",
            expand=True,
            prefix=ft.Icon(ft.Icons.VIEW_TIMELINE),
        )
        self.add_btn = ft.FilledButton("Add", icon=ft.Icons.ADD, on_click=self.on_add_main_task)

        self.tasks_list = ft.ListView(expand=True, spacing=12)
        self.today_list = ft.Column(spacing=8)

        self.today_zone = ft.Container(
            content=ft.Column(
                [
                    ft.Text("Today", size=18, weight=ft.FontWeight.W_600),
                    self.today_list,
                ],
                spacing=12,
            ),
            padding=16,
            bgcolor=CLR_DROP_IDLE,
            border=ft.border.all(1, CLR_OUTLINE),
            border_radius=8,
        )
        today_target = ft.DragTarget(
            group="subtask",
            content=self.today_zone,
            on_will_accept=self._on_drop_hover,
            on_leave=self._on_drop_leave,
            on_accept=self._on_drop_accept,
        )

        timeline_card = ft.Card(
            content=ft.Container(
                padding=16,
                expand=True,
                content=ft.Column(
                    [
                        ft.Text("Project timeline", size=18, weight=ft.FontWeight.W_600),
                        ft.Row([self.title_tf, self.add_btn], vertical_alignment=ft.CrossAxisAlignment.END),
                        self.tasks_list,
                    ],
                    spacing=12,
                    expand=True,
                ),
            ),
            expand=True,
        )

        self.view = ft.Container(
            content=ft.Row(
                [
                    ft.Container(content=timeline_card, expand=True),
                    ft.Container(content=today_target, width=TODAY_W),
                ],
                spacing=16,
                vertical_alignment=ft.CrossAxisAlignment.START,
                expand=True,
            ),
            expand=True,
            padding=20,
        )

    # --- called from the navigation rail ---
    def activate_from_menu(self):
        self.load()

    def load(self):
        tasks = self.api.list_tasks({"userId": self.user_id})
        today = self.api.list_today({"userId": self.user_id})
        if not self._check(tasks) or not self._check(today):
            return
        self._render_tasks(tasks.body)
        self._render_today(today.body)
        self.app.page.update()

    # ---------- rendering ----------
    def _render_tasks(self, main_tasks: List[Dict[str, Any]]):
        self.tasks_list.controls = [self._build_main_task(task) for task in main_tasks]
        if not main_tasks:
            self.tasks_list.controls.append(
                ft.Text("No main tasks yet", color=CLR_TEXTSUB)
            )

    def _build_main_task(self, task: Dict[str, Any]) -> ft.Control:
        header = ft.Container(
            content=ft.Row(
                [
                    ft.Text(task["title"], color=CLR_BLOCK_TXT, weight=ft.FontWeight.W_600),
                    ft.Text(format_minutes(task["totalDuration"]), color=CLR_BLOCK_TXT),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            ),
            bgcolor=task["color"],
            height=UI.header_height,
            padding=ft.padding.symmetric(horizontal=12),
            border_radius=ft.border_radius.only(top_left=8, top_right=8),
        )

        blocks = [self._build_block(sub) for sub in timeline_blocks(task)]
        track = ft.Row(blocks, spacing=2, height=TRACK_H)

        sub_title = ft.TextField(label="Sub-task", dense=True, expand=True)
        sub_minutes = ft.TextField(label="Minutes", dense=True, width=100)
        add_sub = ft.IconButton(
            icon=ft.Icons.ADD,
            tooltip="Add sub-task",
            on_click=lambda e, _tid=task["id"]: self.on_add_sub_task(_tid, sub_title, sub_minutes),
        )

        return ft.Container(
            content=ft.Column(
                [
                    header,
                    ft.Container(content=track, padding=8),
                    ft.Container(
                        content=ft.Row([sub_title, sub_minutes, add_sub], spacing=8),
                        padding=ft.padding.only(left=8, right=8, bottom=8),
                    ),
                ],
                spacing=0,
            ),
            border=ft.border.all(1, CLR_OUTLINE),
            border_radius=8,
            bgcolor="#ffffff",
        )

    def _build_block(self, sub: Dict[str, Any]) -> ft.Control:
        body = ft.Container(
            content=ft.Text(sub["title"], size=11, color=CLR_BLOCK_TXT, no_wrap=True,
                            overflow=ft.TextOverflow.ELLIPSIS),
            bgcolor=status_color(sub["status"]),
            border_radius=4,
            padding=ft.padding.symmetric(horizontal=6),
            alignment=ft.alignment.center_left,
            height=TRACK_H,
            tooltip=block_tooltip(sub),
        )
        gd = ft.GestureDetector(
            content=body,
            on_double_tap_down=lambda e, _sid=sub["id"]: self._remember_tap(_sid, e),
            on_double_tap=lambda e, _sid=sub["id"]: self.on_cut(_sid),
        )
        drag = ft.Draggable(
            group="subtask",
            data=sub["id"],
            on_drag_start=lambda e, _sid=sub["id"]: self._remember_drag(_sid),
            content=gd,
            content_feedback=ft.Container(
                content=ft.Text(sub["title"], size=12),
                padding=8, bgcolor="#ffffff", border_radius=6,
                border=ft.border.all(0.5, CLR_OUTLINE),
            ),
        )
        # flex share of the track; tenths of a percent keep small blocks visible
        return ft.Container(content=drag, expand=max(1, round(sub["widthPercent"] * 10)))

    def _render_today(self, items: List[Dict[str, Any]]):
        self.today_list.controls = [self._build_today_item(sub) for sub in items]

    def _build_today_item(self, sub: Dict[str, Any]) -> ft.Control:
        return ft.Container(
            content=ft.Row(
                [
                    ft.Text(sub["title"], weight=ft.FontWeight.W_500, expand=True,
                            overflow=ft.TextOverflow.ELLIPSIS),
                    ft.Text(format_minutes(sub["estimatedTime"]), size=12, color=CLR_TEXTSUB),
                    ft.IconButton(
                        icon=ft.Icons.UNDO,
                        tooltip="Back to timeline",
                        on_click=lambda e, _sid=sub["id"], _mid=sub["mainTaskId"]: self.on_demote(_sid, _mid),
                    ),
                ],
                vertical_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=ft.padding.only(left=12, right=4, top=4, bottom=4),
            bgcolor="#ffffff",
            border=ft.border.all(1, CLR_OUTLINE),
            border_radius=8,
        )

    # ---------- intents ----------
    def on_add_main_task(self, e=None):
        title = (self.title_tf.value or "").strip()
        if not title:
            return self._toast("Enter a title")
        resp = self.api.create_main_task(
            {
                "title": title,
                "startTime": utc_now().isoformat(),
                "userId": self.user_id,
            }
        )
        if self._check(resp):
            self.title_tf.value = ""
            self.load()

    def on_add_sub_task(self, main_task_id: str, title_tf: ft.TextField, minutes_tf: ft.TextField):
        try:
            minutes = int((minutes_tf.value or "").strip())
        except ValueError:
            return self._toast("Minutes must be a whole number")
        resp = self.api.create_sub_task(
            {
                "title": title_tf.value,
                "estimatedTime": minutes,
                "mainTaskId": main_task_id,
            }
        )
        if self._check(resp):
            self.load()

    def _remember_tap(self, sub_id: str, e: ft.TapEvent):
        self._tap_offsets[sub_id] = e.local_x

    def on_cut(self, sub_id: str):
        offset = self._tap_offsets.pop(sub_id, None)
        if offset is None:
            return
        resp = self.api.cut_sub_task({"subTaskId": sub_id, "cutTime": offset_to_minutes(offset)})
        if self._check(resp):
            self.load()

    def _remember_drag(self, sub_id: str):
        self.current_drag_sub_id = sub_id

    def _on_drop_hover(self, e):
        self.today_zone.bgcolor = CLR_DROP_HOVER
        self.today_zone.border = ft.border.all(1, CLR_DROP_BORDER)
        self.today_zone.update()

    def _on_drop_leave(self, e):
        self.today_zone.bgcolor = CLR_DROP_IDLE
        self.today_zone.border = ft.border.all(1, CLR_OUTLINE)
        self.today_zone.update()

    def _on_drop_accept(self, e):
        sub_id = self.current_drag_sub_id
        self.current_drag_sub_id = None
        self._on_drop_leave(e)
        if sub_id is None:
            return self._toast("Could not tell which sub-task was dropped")
        if self._check(self.api.promote({"subTaskId": sub_id})):
            self.load()

    def on_demote(self, sub_id: str, main_task_id: str):
        if self._check(self.api.demote({"subTaskId": sub_id, "mainTaskId": main_task_id})):
            self.load()

    # ---------- feedback ----------
    def _check(self, resp: ApiResponse) -> bool:
        if resp.ok:
            return True
        message = resp.body.get("error") if isinstance(resp.body, dict) else None
        self._toast(message or "Something went wrong")
        return False

    def _toast(self, text: str):
        self.app.page.snack_bar = ft.SnackBar(ft.Text(text))
        self.app.page.snack_bar.open = True
        self.app.page.update()


__all__ = ["TimelinePage"]
