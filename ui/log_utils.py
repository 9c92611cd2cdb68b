"""Shared logging utilities."""

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"

SENSITIVE_HEADER_MARKERS = ("key", "authorization", "cookie", "token")


def write_gone_log(
    url: str,
    headers: Mapping[str, str],
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Dump the headers of a 410 Gone upstream response to logs/gone/."""
    now = datetime.now(UTC)
    folder = log_root / "gone"
    folder.mkdir(parents=True, exist_ok=True)

    dump = folder / f"{now:%Y%m%dT%H%M%S.%fZ}_{uuid4().hex[:12]}.json"
    dump.write_text(
        json.dumps(
            {
                "timestamp": now.isoformat(),
                "status": 410,
                "url": url,
                "headers": {name: redact_header(name, value) for name, value in headers.items()},
            },
            indent=2,
        )
    )
    return dump


def redact_header(name: str, value: str) -> str:
    """Mask credentials and cookies, keeping a short prefix/suffix of long values."""
    if not any(marker in name.lower() for marker in SENSITIVE_HEADER_MARKERS):
        return value
    if len(value) <= 10:
        return "***"
    return f"{value[:6]}...{value[-4:]}"


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path = CLI_LOG_FILE,
    **extra: Any,
) -> None:
    """Append one `[time] LEVEL: message key=value` line to the CLI log."""
    fields = [f"[{datetime.now(UTC):%Y-%m-%d %H:%M:%S}] {level}: {message}"]
    fields.extend(f"{key}={value}" for key, value in extra.items())

    log_file.parent.mkdir(parents=True, exist_ok=True)
    with log_file.open("a") as f:
        f.write(" ".join(fields) + "\n")


def clear_logs(log_file: Path = CLI_LOG_FILE) -> None:
    """Truncate the CLI log from a previous run."""
    if log_file.exists():
        log_file.write_text("")
