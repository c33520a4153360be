# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# ova2scale/core/logger.py
"""
Console and file logging for ova2scale.

One named logger (``ova2scale``) is configured by ``Log.setup``. Records can
carry a ``ctx`` mapping (usually ``vm=<name>``) through ``Log.bind``; both
formatters render it, with secret-looking keys redacted.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from termcolor import colored as _colored

from .exceptions import _redact

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "ova2scale"

# level name -> (emoji, color)
_LEVELS = {
    "TRACE": ("🧬", "cyan"),
    "DEBUG": ("🔍", "blue"),
    "INFO": ("✅", "green"),
    "WARNING": ("⚠️", "yellow"),
    "ERROR": ("💥", "red"),
    "CRITICAL": ("🧨", "red"),
}

Ctx = Mapping[str, Any]


def is_tty(stream=None) -> bool:
    stream = sys.stdout if stream is None else stream
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


def _supports_unicode() -> bool:
    enc = getattr(sys.stderr, "encoding", None) or "utf-8"
    try:
        "✅".encode(enc)
    except (UnicodeEncodeError, LookupError):
        return False
    return True


def c(
    text: str,
    color: Optional[str] = None,
    attrs: Optional[List[str]] = None,
    *,
    enable: bool = True,
) -> str:
    """Colorize text if enabled."""
    if not enable or not color:
        return text
    return _colored(text, color=color, attrs=attrs or [])


def _clip(v: Any, limit: int = 240) -> str:
    s = str(v).replace("\r", "\\r").replace("\n", "\\n")
    return s if len(s) <= limit else s[: limit - 1] + "…"


def _record_ctx(record: logging.LogRecord) -> Dict[str, Any]:
    ctx = getattr(record, "ctx", None)
    return _redact(dict(ctx)) if ctx else {}


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Adapter carrying a persistent ``ctx`` dict; per-call ``extra={"ctx": ...}`` wins on key clashes.

      log = Log.bind(logger, vm="web01")
      log.info("copying %d disk(s)", 2)
    """

    def __init__(self, logger: logging.Logger, ctx: Optional[Ctx] = None):
        super().__init__(logger, extra={"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["ctx"] = {**self.extra["ctx"], **dict(extra.get("ctx") or {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **ctx: Any) -> "ContextLoggerAdapter":
        return ContextLoggerAdapter(self.logger, {**self.extra["ctx"], **ctx})

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(TRACE, msg, *args, **kwargs)


@dataclass(frozen=True)
class LogStyle:
    color: bool = True
    unicode: bool = True
    utc: bool = False
    show_ms: bool = False
    show_pid: bool = False
    show_src: bool = False  # module:line
    show_logger: bool = False


class EmojiFormatter(logging.Formatter):
    """``HH:MM:SS ✅ INFO     message key=value`` with indented tracebacks."""

    def __init__(self, style: LogStyle):
        super().__init__()
        self._style = style

    def _clock(self, created: float) -> str:
        tz = _dt.timezone.utc if self._style.utc else None
        fmt = "%H:%M:%S.%f" if self._style.show_ms else "%H:%M:%S"
        s = _dt.datetime.fromtimestamp(created, tz=tz).strftime(fmt)
        return s[:-3] if self._style.show_ms else s

    def format(self, record: logging.LogRecord) -> str:
        emoji, color = _LEVELS.get(record.levelname, ("•", None))
        if not self._style.unicode:
            emoji = "·"
        colorize = self._style.color and is_tty(sys.stderr)

        msg = record.getMessage()
        if record.levelno >= logging.WARNING:
            msg = c(msg, color, ["bold"], enable=colorize)
        level = c(f"{record.levelname:<8}", color, enable=colorize)

        tags: List[str] = []
        if self._style.show_pid:
            tags.append(f"pid={os.getpid()}")
        if self._style.show_logger:
            tags.append(record.name)
        if self._style.show_src:
            tags.append(f"{record.module}:{record.lineno}")
        where = f" [{' '.join(tags)}]" if tags else ""

        ctx = _record_ctx(record)
        tail = "".join(f" {k}={_clip(ctx[k])}" for k in sorted(ctx, key=str))

        line = f"{self._clock(record.created)} {emoji} {level}{where} {msg}{tail}"

        if record.exc_info or record.stack_info:
            block = "\n".join(
                p for p in (self.formatException(record.exc_info) if record.exc_info else "", record.stack_info or "") if p
            )
            block = "\n".join("  " + ln for ln in block.splitlines())
            line += "\n" + (c(block, "red", enable=colorize) if record.exc_info else block)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def __init__(self, *, utc: bool = True):
        super().__init__()
        self._tz = _dt.timezone.utc if utc else None

    def format(self, record: logging.LogRecord) -> str:
        obj: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, tz=self._tz).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "lineno": record.lineno,
        }
        ctx = _record_ctx(record)
        if ctx:
            obj["ctx"] = {str(k): _clip(v) for k, v in ctx.items()}
        if record.exc_info:
            obj["exc_type"] = record.exc_info[0].__name__ if record.exc_info[0] else "Exception"
            obj["traceback"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False, default=str)


class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        """-q WARNING, -qq ERROR, -vv DEBUG, -vvv TRACE, else INFO; quiet wins."""
        if quiet >= 2:
            return logging.ERROR
        if quiet == 1:
            return logging.WARNING
        if verbose >= 3:
            return TRACE
        if verbose == 2:
            return logging.DEBUG
        return logging.INFO

    @staticmethod
    def bind(logger: logging.Logger, **ctx: Any) -> ContextLoggerAdapter:
        if isinstance(logger, ContextLoggerAdapter):
            return logger.bind(**ctx)
        return ContextLoggerAdapter(logger, ctx)

    @staticmethod
    def banner(logger: logging.Logger, title: str, *, char: str = "─") -> None:
        t = f" {title.strip()} "
        pad = char * max(8, (72 - len(t)) // 2)
        logger.info((pad + t + pad)[:72])

    @staticmethod
    def step(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("➡️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def ok(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("✅ %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def warn(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.warning("⚠️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def fail(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.error("💥 %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def trace(logger: logging.Logger, msg: str, *args: Any) -> None:
        logger.log(TRACE, msg, *args)

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        color: bool = True,
        utc: bool = False,
        logger_name: str = LOGGER_NAME,
        json_logs: bool = False,
    ) -> logging.Logger:
        """
        (Re)configure ``logger_name`` and return it.

        stderr gets the emoji format (or NDJSON with ``json_logs``); ``log_file``
        adds an uncolored, fully annotated copy at the same level.
        """
        level = Log._level_from_flags(verbose, quiet)
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        logger.setLevel(level)

        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

        unicode_ok = _supports_unicode()
        console = LogStyle(
            color=color,
            unicode=unicode_ok,
            utc=utc,
            show_ms=verbose >= 3,
            show_pid=verbose >= 2,
            show_src=verbose >= 3,
        )
        sh = logging.StreamHandler(stream=sys.stderr)
        sh.setFormatter(JsonFormatter(utc=utc) if json_logs else EmojiFormatter(console))
        sh.setLevel(level)
        logger.addHandler(sh)

        if log_file:
            fp = Path(log_file).expanduser().resolve()
            fp.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(fp, encoding="utf-8")
            if json_logs:
                fh.setFormatter(JsonFormatter(utc=utc))
            else:
                fh.setFormatter(EmojiFormatter(LogStyle(
                    color=False,
                    unicode=unicode_ok,
                    utc=utc,
                    show_ms=True,
                    show_pid=True,
                    show_src=True,
                    show_logger=True,
                )))
            fh.setLevel(level)
            logger.addHandler(fh)

        logger.debug("logging ready (level=%s, pid=%s)", logging.getLevelName(level), os.getpid())
        return logger
