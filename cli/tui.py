#!/usr/bin/env python3
"""Workout checklist TUI: weekday tabs, checklist, legend and history, powered by Textual."""

from __future__ import annotations

import logging
import sys

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
    Tab,
    Tabs,
    TextArea,
)

from workouts import (
    WEEKDAYS,
    ChecklistItem,
    NoteStore,
    OutOfRangeError,
    ValidationError,
    aggregate,
    get_user_timezone,
    load_profile,
    load_user_name,
    save_user_name,
    start_session,
    workspace_root,
)
from workouts.reset import Session


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 2fr;
    min-width: 30;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    min-width: 24;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 1 0 0 0;
}

.workout-row {
    height: 3;
}

.workout-row Checkbox {
    width: 1fr;
}

.workout-done Checkbox {
    color: $text-muted;
    text-style: strike;
}

.muted {
    color: $text-muted;
}

.remove-btn {
    min-width: 5;
    width: 5;
}

#legend-area {
    height: 1fr;
}

.overlay-screen {
    width: 1fr;
    padding: 0 1;
}

ModalScreen {
    align: center middle;
}

.dialog {
    width: 50;
    height: auto;
    border: thick $primary;
    background: $panel;
    padding: 1 2;
}

.dialog Horizontal {
    height: auto;
    align-horizontal: right;
}
"""


# ── Custom widgets ─────────────────────────────────────────────


class WorkoutRow(Horizontal):
    """A single workout: checkbox + remove button."""

    def __init__(self, item: ChecklistItem, **kwargs) -> None:
        super().__init__(**kwargs)
        self.item = item

    def compose(self) -> ComposeResult:
        yield Checkbox(self.item.name, value=self.item.checked, id=f"cb-{self.item.id}")
        yield Button("✕", id=f"rm-{self.item.id}", classes="remove-btn", variant="error")

    def on_mount(self) -> None:
        self.add_class("workout-row")
        if self.item.checked:
            self.add_class("workout-done")


class ConfirmScreen(ModalScreen[bool]):
    """Yes/No question; dismisses with the answer."""

    def __init__(self, question: str) -> None:
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label(self.question),
            Horizontal(
                Button("Yes", id="confirm-yes", variant="error"),
                Button("No", id="confirm-no"),
            ),
            classes="dialog",
        )

    @on(Button.Pressed)
    def _answer(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")


class NameScreen(ModalScreen[str]):
    """First-run prompt for the user's name."""

    def compose(self) -> ComposeResult:
        yield Vertical(
            Label("What's your name?"),
            Input(placeholder="Your name", id="name-input"),
            classes="dialog",
        )

    @on(Input.Submitted, "#name-input")
    def _submit(self, event: Input.Submitted) -> None:
        if event.value.strip():
            self.dismiss(event.value.strip())


# ── Screens ────────────────────────────────────────────────────


class HistoryScreen(Vertical):
    """History view: completion buckets by weekday, month or year."""

    def __init__(self, session: Session, mode: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session = session
        self.mode = mode

    def compose(self) -> ComposeResult:
        yield Label("History", classes="section-title")
        yield Static(id="history-mode")
        yield DataTable(id="history-table")

    def on_mount(self) -> None:
        table: DataTable = self.query_one("#history-table", DataTable)
        table.add_columns("Period", "Total", "Completed", "Rate")
        self.show(self.mode)

    def show(self, mode: str) -> None:
        self.mode = mode
        root = workspace_root()
        buckets = aggregate(self.session.store.load(), mode, get_user_timezone(root))
        self.query_one("#history-mode", Static).update(
            f"By {mode}   [w] weekday  [m] month  [y] year"
        )
        table: DataTable = self.query_one("#history-table", DataTable)
        table.clear()
        if not buckets:
            table.add_row("(no data yet)", "", "", "")
            return
        for b in buckets:
            table.add_row(b.display_label, str(b.total_count), str(b.completed_count), f"{b.completion_pct()}%")


# ── Main app ───────────────────────────────────────────────────


class WorkoutsApp(App):
    """Workout checklist: daily workouts per weekday."""

    TITLE = "Workout Checklist"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("a", "focus_add", "Add"),
        Binding("e", "focus_legend", "Legend"),
        Binding("h", "show_history", "History"),
        Binding("c", "clear_day", "Clear day"),
        Binding("w", "history_mode('weekday')", "Weekday"),
        Binding("m", "history_mode('month')", "Month"),
        Binding("y", "history_mode('year')", "Year"),
        Binding("ctrl+s", "save_legend", "Save legend"),
        Binding("escape", "blur_focus", "Back"),
        Binding("q", "quit_app", "Quit"),
    ]

    current_view: reactive[str] = reactive("checklist")

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Control which bindings appear in the footer based on context."""
        if action == "history_mode":
            return True if self.current_view == "history" else None
        if action in ("clear_day", "focus_add", "focus_legend"):
            return True if self.current_view == "checklist" else None
        if action == "save_legend":
            return True if getattr(self.focused, "id", None) == "legend-area" else None
        if action == "blur_focus":
            return True if self.focused is not None else None
        return True

    def __init__(self) -> None:
        super().__init__()
        self.session = start_session(workspace_root())
        self.selected_day = self.session.day
        self.notes = NoteStore(self.session.store.kv)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Tabs(
            *[Tab(day[:3], id=f"tab-{day.lower()}") for day in WEEKDAYS],
            active=f"tab-{self.selected_day.lower()}",
            id="day-tabs",
        )
        yield Horizontal(
            VerticalScroll(
                Label("Workouts", classes="section-title"),
                Input(placeholder="Add a workout and press Enter", id="add-input"),
                Vertical(id="workout-list"),
                id="left-pane",
                can_focus=False,
            ),
            Vertical(
                Label("Legend", classes="section-title"),
                TextArea(id="legend-area"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self._load_day()
        name = load_user_name(self.session.store.kv)
        if name:
            self._greet(name)
        else:
            self.push_screen(NameScreen(), self._on_name)

    # ── Data ───────────────────────────────────────────────────

    def _greet(self, name: str) -> None:
        msg = f"Train hard, {name}!"
        if self.session.reset_performed:
            msg += " New day, fresh checklist."
        self.notify(msg, title=self.session.day)

    def _on_name(self, name: str | None) -> None:
        if not name:
            return
        try:
            self._greet(save_user_name(self.session.store.kv, name))
        except ValidationError:
            self.push_screen(NameScreen(), self._on_name)

    def _load_day(self) -> None:
        self.sub_title = self.selected_day
        self._rebuild_list(self.session.checklist(self.selected_day).items())
        self.query_one("#legend-area", TextArea).load_text(self.notes.get(self.selected_day))

    def _rebuild_list(self, items: list[ChecklistItem]) -> None:
        workout_list = self.query_one("#workout-list", Vertical)
        workout_list.remove_children()
        if not items:
            workout_list.mount(Static("(no workouts yet)", classes="muted"))
            return
        for item in items:
            workout_list.mount(WorkoutRow(item))

    # ── Events ─────────────────────────────────────────────────

    @on(Tabs.TabActivated, "#day-tabs")
    def _on_day_selected(self, event: Tabs.TabActivated) -> None:
        tab_id = event.tab.id or ""
        day = tab_id.removeprefix("tab-").capitalize()
        if day in WEEKDAYS and day != self.selected_day:
            self.selected_day = day
            self._load_day()

    @on(Input.Submitted, "#add-input")
    def _on_add(self, event: Input.Submitted) -> None:
        try:
            items = self.session.checklist(self.selected_day).add(event.value)
        except ValidationError as e:
            self.notify(str(e), severity="warning")
            return
        event.input.value = ""
        self._rebuild_list(items)
        self.notify(f'"{items[-1].name}" added!')

    @on(Checkbox.Changed)
    def _on_toggle(self, event: Checkbox.Changed) -> None:
        item_id = (event.checkbox.id or "").removeprefix("cb-")
        try:
            items = self.session.checklist(self.selected_day).toggle(item_id)
        except OutOfRangeError as e:
            self.notify(str(e), severity="warning")
            self._load_day()
            return
        parent = event.checkbox.parent
        if isinstance(parent, WorkoutRow):
            parent.set_class(event.value, "workout-done")
        done = sum(1 for item in items if item.checked)
        self.sub_title = f"{self.selected_day}  {done}/{len(items)}"

    @on(Button.Pressed, ".remove-btn")
    def _on_remove(self, event: Button.Pressed) -> None:
        item_id = (event.button.id or "").removeprefix("rm-")
        try:
            items = self.session.checklist(self.selected_day).remove(item_id)
        except OutOfRangeError as e:
            self.notify(str(e), severity="warning")
            self._load_day()
            return
        self._rebuild_list(items)
        self.notify("Workout deleted!")

    # ── Actions ────────────────────────────────────────────────

    def action_clear_day(self) -> None:
        def _confirmed(yes: bool | None) -> None:
            if yes:
                self._rebuild_list(self.session.checklist(self.selected_day).clear_all())
                self.notify("All workouts cleared!")

        self.push_screen(
            ConfirmScreen(f"Delete all workouts for {self.selected_day}?"), _confirmed
        )

    def action_focus_add(self) -> None:
        self.query_one("#add-input", Input).focus()
        self.refresh_bindings()

    def action_focus_legend(self) -> None:
        self.query_one("#legend-area", TextArea).focus()
        self.refresh_bindings()

    def action_blur_focus(self) -> None:
        self.set_focus(None)
        self.refresh_bindings()

    def action_save_legend(self) -> None:
        self.notes.set(self.selected_day, self.query_one("#legend-area", TextArea).text)
        self.notify("Legend saved")

    def action_show_history(self) -> None:
        if self.current_view == "history":
            self._switch_to("checklist")
        else:
            self._switch_to("history")

    def action_history_mode(self, mode: str) -> None:
        for screen in self.query(HistoryScreen):
            screen.show(mode)

    def action_quit_app(self) -> None:
        self.exit()

    def _switch_to(self, view: str) -> None:
        main = self.query_one("#main-layout", Horizontal)

        for old in self.query(".overlay-screen"):
            old.remove()

        show_checklist = view == "checklist"
        self.query_one("#left-pane").display = show_checklist
        self.query_one("#right-pane").display = show_checklist
        if not show_checklist:
            mode = load_profile(workspace_root()).default_history_mode
            main.mount(HistoryScreen(self.session, mode, classes="overlay-screen"))
        else:
            self._load_day()
        self.current_view = view
        self.refresh_bindings()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        root.mkdir(parents=True)
        print(f"Created workspace: {root}", file=sys.stderr)

    # The terminal belongs to Textual; log to a file in the workspace.
    logging.basicConfig(
        filename=str(root / "workouts.log"),
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = WorkoutsApp()
    app.run()


if __name__ == "__main__":
    main()
