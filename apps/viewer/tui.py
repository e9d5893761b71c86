from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ports.ipc import EventSubPort
from rich.text import Text
from shared.config.loader import load_viewer_settings
from textual.app import App, ComposeResult
from textual.widgets import DataTable, Footer, Header, Static

from apps.viewer.compose import build_sub
from apps.viewer.settings import ViewerSettings

MAX_LOG_ROWS = 200

_STATE_STYLES = {
    "CAPTURING": "green",
    "IDLE": "",
    "FINISHED": "cyan",
    "CANCELLED": "yellow",
    "FAULTED": "red",
}


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class EventRow:
    ts: datetime
    topic: str
    summary: str
    style: str = ""


@dataclass
class SessionView:
    state: str = "-"
    frame_count: int = 0
    total_height: int = 0
    preview: str = "-"
    error: str | None = None
    last_seen_ts: datetime | None = None
    log: list[EventRow] = field(default_factory=list)


class ProgressViewerTUI(App):
    CSS_PATH = None
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("c", "clear", "Clear log"),
        ("?", "help", "Help"),
    ]

    def __init__(
        self, settings: ViewerSettings | None = None, sub: EventSubPort | None = None
    ) -> None:
        super().__init__()
        self.settings = settings or load_viewer_settings()
        self.sub_port = sub
        self.session_view = SessionView()
        self._sub_thread: threading.Thread | None = None
        self._stop = threading.Event()
        self._table: DataTable | None = None
        self._status: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static(f"[b]progress_sub[/b]= {self.settings.progress_sub}")
        table = DataTable(zebra_stripes=True)
        table.add_columns("Time (UTC)", "Topic", "Event")
        self._table = table
        self._status = Static("")
        yield table
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        if self.sub_port is None:
            self.sub_port = build_sub(self.settings)
        self._refresh_table()

        self._stop.clear()
        self._sub_thread = threading.Thread(target=self._reader_loop, daemon=True)
        self._sub_thread.start()
        self.set_interval(1.0 / max(0.5, self.settings.refresh_hz), self._refresh_status)

    def on_unmount(self) -> None:
        self._stop.set()
        if self._sub_thread and self._sub_thread.is_alive():
            self._sub_thread.join(timeout=1.0)
        if self.sub_port is not None:
            self.sub_port.close()

    # ----- Actions (key bindings) -----

    def action_quit(self) -> None:
        self.exit()

    def action_clear(self) -> None:
        self.session_view.log.clear()
        self._refresh_table()

    def action_help(self) -> None:
        self.notify(
            "Keys: q quit • c clear log • ? help\n"
            "Status turns yellow when no event arrived for a while.",
            severity="information",
        )

    # ----- Event loop -----

    def _reader_loop(self) -> None:
        assert self.sub_port is not None
        while not self._stop.is_set():
            msg = self.sub_port.recv(timeout_ms=250)
            if not msg:
                continue
            self._apply_message(msg)
            self.call_from_thread(self._refresh_table)

    def _apply_message(self, msg: dict) -> None:
        """Fold one received event into the session view."""
        v = self.session_view
        now = _utc_now()
        topic = str(msg.get("topic") or "?")
        v.last_seen_ts = now

        if "data" not in msg:
            code = (msg.get("error") or {}).get("code", "unknown")
            self._append_log(EventRow(now, topic, f"undecodable event ({code})", "red"))
            return

        data = msg.get("data") or {}
        if topic == "progress":
            v.frame_count = int(data.get("frame_count", v.frame_count))
            v.total_height = int(data.get("total_height", v.total_height))
            v.preview = f"{data.get('preview_width')}x{data.get('preview_height')}"
            if v.state in ("-", "IDLE", "FINISHED", "CANCELLED"):
                v.state = "CAPTURING"
            self._append_log(
                EventRow(now, topic, f"frame {v.frame_count}, height {v.total_height}px")
            )
        elif topic == "state":
            v.state = str(data.get("state") or "-").upper()
            err = data.get("error")
            v.error = f"{err.get('code')}: {err.get('detail')}" if err else None
            summary = v.state if not v.error else f"{v.state} ({v.error})"
            self._append_log(EventRow(now, topic, summary, _STATE_STYLES.get(v.state, "")))
            if v.state in ("FINISHED", "CANCELLED"):
                v.frame_count, v.total_height, v.preview = 0, 0, "-"
        else:
            self._append_log(EventRow(now, topic, str(data)))

    def _append_log(self, row: EventRow) -> None:
        self.session_view.log.insert(0, row)
        del self.session_view.log[MAX_LOG_ROWS:]

    # ----- Rendering -----

    def _refresh_table(self) -> None:
        if self._table is not None:
            self._table.clear()
            for row in self.session_view.log:
                self._table.add_row(
                    row.ts.isoformat(timespec="seconds"),
                    row.topic,
                    Text(row.summary, style=row.style),
                )
        self._refresh_status()

    def _refresh_status(self) -> None:
        if self._status is not None:
            self._status.update(self._status_text())

    def _is_stale(self) -> bool:
        ts = self.session_view.last_seen_ts
        if ts is None or self.session_view.state != "CAPTURING":
            return False
        return (_utc_now() - ts).total_seconds() > self.settings.stale_after_s

    def _status_text(self) -> Text:
        v = self.session_view
        style = "yellow" if self._is_stale() else _STATE_STYLES.get(v.state, "")
        state = f"{v.state} (STALE)" if self._is_stale() else v.state
        text = Text()
        text.append(state, style=style)
        text.append(f" • frames: {v.frame_count} • height: {v.total_height}px")
        text.append(f" • preview: {v.preview}")
        if v.error:
            text.append(f" • {v.error}", style="red")
        return text
