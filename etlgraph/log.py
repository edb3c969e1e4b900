"""Loguru configuration and the in-memory log buffer shown to clients."""

import sys
from collections import deque
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from etlgraph.config import Settings

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[source]}</cyan> - <level>{message}</level>"
)

logger.configure(extra={"source": "etlgraph"})


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    level: str
    message: str
    source: str | None = None


class LogBuffer:
    """Loguru sink keeping the most recent entries in memory."""

    def __init__(self, max_entries: int = 1000):
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)
        self.sink_ids: list[int] = []

    def __call__(self, message) -> None:
        record = message.record
        self._entries.append(LogEntry(
            timestamp=record["time"].replace(tzinfo=None),
            level=record["level"].name,
            message=record["message"],
            source=record["extra"].get("source"),
        ))

    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()


def setup_logging(settings: Settings, console: bool = True) -> LogBuffer:
    """Replace loguru's default handler with console, file and buffer sinks."""
    logger.remove()
    buffer = LogBuffer(settings.log_buffer_size)
    level = settings.log_level.upper()

    if console:
        buffer.sink_ids.append(logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT))

    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        buffer.sink_ids.append(logger.add(
            settings.log_dir / "etlgraph_{time}.log",
            rotation="10 MB",
            retention="1 week",
            level="DEBUG",
        ))

    buffer.sink_ids.append(logger.add(buffer, level="DEBUG"))
    logger.bind(source="etlgraph").info("Logging initialized")
    return buffer


def shutdown_logging(buffer: LogBuffer) -> None:
    """Flush pending messages and detach the sinks installed by setup_logging."""
    logger.complete()
    for sink_id in buffer.sink_ids:
        try:
            logger.remove(sink_id)
        except ValueError:
            pass
    buffer.sink_ids.clear()
