"""Real-time CLI dashboard for proxy monitoring."""

from collections import Counter, deque
from collections.abc import Mapping
from datetime import datetime
from threading import Lock
from typing import NamedTuple

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from core.request_types import ResourceKind
from ui.log_utils import write_cli_log, write_gone_log

console = Console()

KIND_STYLES = {
    ResourceKind.PLAYLIST: "cyan",
    ResourceKind.SEGMENT: "green",
    ResourceKind.OTHER: "yellow",
}


class FetchInfo(NamedTuple):
    url: str
    kind: ResourceKind
    status: int
    at: datetime


class Dashboard:
    """RequestLogger that mirrors every event to a live panel and the CLI log."""

    def __init__(self, config: Config, max_fetches: int = 10, max_errors: int = 3):
        self.config = config
        self._lock = Lock()
        self._fetches: deque[FetchInfo] = deque(maxlen=max_fetches)
        self._errors: deque[str] = deque(maxlen=max_errors)
        self._counts: Counter[ResourceKind] = Counter()
        self._error_count = 0
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        self._live = Live(self.render(), console=console, refresh_per_second=4)
        self._live.start()
        return self

    def stop(self) -> None:
        if self._live:
            self._live.stop()

    def log_fetch(self, url: str, kind: ResourceKind, status: int) -> None:
        with self._lock:
            self._counts[kind] += 1
            self._fetches.appendleft(FetchInfo(url, kind, status, datetime.now()))
            self._update()
        write_cli_log("FETCH", url, kind=kind.value, status=status)

    def log_error(self, route: str, status: int, message: str) -> None:
        with self._lock:
            self._error_count += 1
            self._push_error(f"{route} {status}: {message}")
        write_cli_log("ERROR", message[:200], route=route, status=status)

    def log_gone(self, url: str, headers: Mapping[str, str]) -> None:
        """Dump 410 headers for later diagnosis."""
        with self._lock:
            self._push_error(f"410 Gone: {url}")
        dump = write_gone_log(url, headers)
        write_cli_log("GONE", url, headers=dump.name)

    def render(self) -> Group:
        """Stats line, recent fetches table and recent errors, stacked."""
        return Group(self._stats(), self._fetch_table(), self._status())

    def _push_error(self, line: str) -> None:
        self._errors.appendleft(line if len(line) <= 70 else line[:70] + "...")
        self._update()

    def _update(self) -> None:
        if self._live:
            self._live.update(self.render())

    def _stats(self) -> Panel:
        parts: list[str | tuple[str, str]] = [("HLS Fetch Proxy", "bold cyan")]
        for kind in ResourceKind:
            parts += ["  |  ", (f"{kind.value.capitalize()}: {self._counts[kind]}", KIND_STYLES[kind])]
        parts += ["  |  ", (f"Errors: {self._error_count}", "red")]
        parts += ["  |  ", (f"Port: {self.config.proxy.port}", "dim")]
        return Panel(Text.assemble(*parts), style="cyan")

    def _fetch_table(self) -> Panel:
        if not self._fetches:
            return Panel(Text("Waiting for requests...", style="dim"), title="Recent Fetches")

        table = Table("Time", "Kind", "Status", "URL", box=None, expand=True, header_style="bold")
        table.columns[3].no_wrap = True
        table.columns[3].overflow = "ellipsis"
        for fetch in self._fetches:
            table.add_row(
                Text(fetch.at.strftime("%H:%M:%S"), style="dim"),
                Text(fetch.kind.value, style=KIND_STYLES[fetch.kind]),
                Text(str(fetch.status), style="green" if fetch.status < 400 else "red"),
                Text(fetch.url),
            )
        return Panel(table, title="Recent Fetches", border_style="blue")

    def _status(self) -> Panel:
        if self._errors:
            body = Text("\n").join(Text.assemble(("! ", "red bold"), (err, "red")) for err in self._errors)
        else:
            body = Text(f"GET http://localhost:{self.config.proxy.port}/fetch?url=<playlist-url>", style="dim")
        return Panel(body, title="Status", border_style="dim")
