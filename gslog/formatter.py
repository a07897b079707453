"""Log records and the text and JSON formatters."""

from __future__ import annotations

import json
import os
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from traceback import FrameSummary
from typing import Any

from gslog.levels import (
    DEFAULT_CHANNEL_NAME,
    DEFAULT_TIME_FORMAT,
    FIELD_KEY_CALLER,
    FIELD_KEY_CHANNEL,
    FIELD_KEY_DATA,
    FIELD_KEY_DATETIME,
    FIELD_KEY_EXTRA,
    FIELD_KEY_LEVEL,
    FIELD_KEY_MESSAGE,
    FIELD_KEY_TIMESTAMP,
    CallerFlag,
    Level,
    level_name,
)

CallerFormatFn = Callable[[FrameSummary], str]

DEFAULT_TEMPLATE = (
    "[{{datetime}}] [{{channel}}] [{{level}}] [{{caller}}] {{message}} {{data}} {{extra}}\n"
)
NAMED_TEMPLATE = (
    "{{datetime}} channel={{channel}} level={{level}} [file={{caller}}] "
    "message={{message}} data={{data}}\n"
)

DEFAULT_FIELDS: tuple[str, ...] = (
    FIELD_KEY_DATETIME,
    FIELD_KEY_CHANNEL,
    FIELD_KEY_LEVEL,
    FIELD_KEY_CALLER,
    FIELD_KEY_MESSAGE,
    FIELD_KEY_DATA,
    FIELD_KEY_EXTRA,
)
NO_TIME_FIELDS: tuple[str, ...] = (
    FIELD_KEY_CHANNEL,
    FIELD_KEY_LEVEL,
    FIELD_KEY_MESSAGE,
    FIELD_KEY_DATA,
    FIELD_KEY_EXTRA,
)

# ANSI SGR codes per level for console output.
COLOR_THEME: dict[int, str] = {
    Level.PANIC: "31",
    Level.FATAL: "31",
    Level.ERROR: "35",
    Level.WARN: "33",
    Level.NOTICE: "1",
    Level.INFO: "32",
    Level.DEBUG: "36",
}

_MILLIS = re.compile(r"(?<!%)%L")
_TEMPLATE_FIELD = re.compile(r"\{\{(\w+)\}\}")


def _format_time(moment: datetime, layout: str) -> str:
    return moment.strftime(_MILLIS.sub(f"{moment.microsecond // 1000:03d}", layout))


def _render_color(text: str, code: str) -> str:
    return f"\x1b[{code}m{text}\x1b[0m"


@dataclass
class Record:
    """A single log event."""

    channel: str = DEFAULT_CHANNEL_NAME
    level: Level = Level.INFO
    message: str = ""
    time: datetime = field(default_factory=datetime.now)
    data: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    fields: dict[str, Any] = field(default_factory=dict)
    caller: FrameSummary | None = None
    caller_flag: CallerFlag = CallerFlag.FNL_FCN

    def level_name(self) -> str:
        """Upper case name of the record's level."""
        return level_name(self.level)

    def timestamp(self) -> str:
        """Unix time with microseconds, e.g. ``1609459200.000005``."""
        seconds = int(self.time.replace(microsecond=0).timestamp())
        return f"{seconds}.{self.time.microsecond:06d}"


def _to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "nil"
    if isinstance(value, Mapping):
        return _map_to_string(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple, set, frozenset)):
        return "[" + " ".join(_to_string(item) for item in value) + "]"
    return str(value)


def _map_to_string(mapping: Mapping[Any, Any]) -> str:
    if not mapping:
        return "{}"
    return "{" + ", ".join(f"{k}:{_to_string(v)}" for k, v in mapping.items()) + "}"


def encode_to_string(value: Any) -> str:
    """Render a data value for text logs; mappings become ``{k:v, k2:v2}``."""
    return _to_string(value)


def format_caller(caller: FrameSummary, flag: CallerFlag) -> str:
    """Render caller information according to ``flag``."""
    path = caller.filename
    base = os.path.basename(path)
    module = os.path.splitext(base)[0]
    func = caller.name
    line = caller.lineno

    match flag:
        case CallerFlag.FULL:
            return f"{module}.{func}(),{base}:{line}"
        case CallerFlag.FUNC:
            return f"{module}.{func}"
        case CallerFlag.FC_LINE:
            return f"{module}.{func}:{line}"
        case CallerFlag.PKG:
            return module
        case CallerFlag.PKG_FNL:
            return f"{module},{base}:{line}"
        case CallerFlag.FP_LINE:
            return f"{path}:{line}"
        case CallerFlag.FN_LINE:
            return f"{base}:{line}"
        case CallerFlag.FC_NAME:
            return func
        case _:
            return f"{base}:{line},{func}"


class Formatter(ABC):
    """Turns a record into the bytes written by a handler."""

    @abstractmethod
    def format(self, record: Record) -> bytes:
        """Format ``record``."""


class FormatterFunc(Formatter):
    """Adapts a plain function to the Formatter interface."""

    def __init__(self, func: Callable[[Record], bytes]) -> None:
        self.func = func

    def format(self, record: Record) -> bytes:
        return self.func(record)


class FormatterWrapper:
    """Holds a formatter, defaulting to a TextFormatter."""

    def __init__(self, formatter: Formatter | None = None) -> None:
        self._formatter = formatter

    @property
    def formatter(self) -> Formatter:
        if self._formatter is None:
            self._formatter = TextFormatter()
        return self._formatter

    @formatter.setter
    def formatter(self, formatter: Formatter) -> None:
        self._formatter = formatter

    def format(self, record: Record) -> bytes:
        """Format ``record`` with the held formatter."""
        return self.formatter.format(record)


FormattableTrait = FormatterWrapper


class TextFormatter(Formatter):
    """Renders records through a ``{{field}}`` template."""

    def __init__(
        self,
        template: str = DEFAULT_TEMPLATE,
        *,
        time_format: str = DEFAULT_TIME_FORMAT,
        enable_color: bool = False,
        color_theme: dict[int, str] | None = None,
        full_display: bool = False,
        encode_func: Callable[[Any], str] | None = encode_to_string,
        caller_format_func: CallerFormatFn | None = None,
    ) -> None:
        self.time_format = time_format
        self.enable_color = enable_color
        self.color_theme = COLOR_THEME if color_theme is None else color_theme
        self.full_display = full_display
        self.encode_func = encode_func
        self.caller_format_func = caller_format_func
        self.template = template

    @property
    def template(self) -> str:
        return self._template

    @template.setter
    def template(self, template: str) -> None:
        self._template = template
        parts: list[tuple[bool, str]] = []
        pos = 0
        for match in _TEMPLATE_FIELD.finditer(template):
            if match.start() > pos:
                parts.append((False, template[pos : match.start()]))
            parts.append((True, match.group(1)))
            pos = match.end()
        if pos < len(template):
            parts.append((False, template[pos:]))
        self._parts = parts

    def fields(self) -> list[str]:
        """Field names used by the template, in order."""
        return [text for is_field, text in self._parts if is_field]

    def configure(self, fn: Callable[[TextFormatter], None]) -> TextFormatter:
        return self.with_options(fn)

    def with_options(self, *fns: Callable[[TextFormatter], None]) -> TextFormatter:
        for fn in fns:
            fn(self)
        return self

    def with_enable_color(self, enable: bool) -> TextFormatter:
        self.enable_color = enable
        return self

    def _colored(self, text: str, level: int, theme: dict[int, str]) -> str:
        if self.enable_color and level in theme:
            return _render_color(text, theme[level])
        return text

    def format(self, record: Record) -> bytes:
        encode = self.encode_func or encode_to_string
        theme = COLOR_THEME if self.color_theme is None else self.color_theme
        out: list[str] = []

        for is_field, name in self._parts:
            if not is_field:
                out.append(name)
            elif name == FIELD_KEY_DATETIME:
                out.append(_format_time(record.time, self.time_format))
            elif name == FIELD_KEY_TIMESTAMP:
                out.append(record.timestamp())
            elif name == FIELD_KEY_CALLER and record.caller is not None:
                if self.caller_format_func is not None:
                    out.append(self.caller_format_func(record.caller))
                else:
                    out.append(format_caller(record.caller, record.caller_flag))
            elif name == FIELD_KEY_LEVEL:
                out.append(self._colored(record.level_name(), record.level, theme))
            elif name == FIELD_KEY_CHANNEL:
                out.append(record.channel)
            elif name == FIELD_KEY_MESSAGE:
                out.append(self._colored(record.message, record.level, theme))
            elif name == FIELD_KEY_DATA:
                if self.full_display or record.data:
                    out.append(encode(record.data))
            elif name == FIELD_KEY_EXTRA:
                if self.full_display or record.extra:
                    out.append(encode(record.extra))
            elif name in record.fields:
                out.append(encode(record.fields[name]))
            else:
                out.append(name)

        return "".join(out).encode("utf-8")


def text_formatter_with(*fns: Callable[[TextFormatter], None]) -> TextFormatter:
    """Create a TextFormatter and apply option functions to it."""
    return TextFormatter().with_options(*fns)


@dataclass
class JSONFormatter(Formatter):
    """Renders records as one JSON object per line."""

    fields: list[str] = field(default_factory=lambda: list(DEFAULT_FIELDS))
    aliases: dict[str, str] = field(default_factory=dict)
    pretty_print: bool = False
    time_format: str = DEFAULT_TIME_FORMAT
    caller_format_func: CallerFormatFn | None = None

    def configure(self, fn: Callable[[JSONFormatter], None]) -> JSONFormatter:
        fn(self)
        return self

    def add_field(self, name: str) -> JSONFormatter:
        self.fields.append(name)
        return self

    def format(self, record: Record) -> bytes:
        log_data: dict[str, Any] = {}

        for name in self.fields:
            out_name = self.aliases.get(name, name)
            if name == FIELD_KEY_DATETIME:
                log_data[out_name] = _format_time(record.time, self.time_format)
            elif name == FIELD_KEY_TIMESTAMP:
                log_data[out_name] = record.timestamp()
            elif name == FIELD_KEY_CALLER and record.caller is not None:
                if self.caller_format_func is not None:
                    log_data[out_name] = self.caller_format_func(record.caller)
                else:
                    log_data[out_name] = format_caller(record.caller, record.caller_flag)
            elif name == FIELD_KEY_LEVEL:
                log_data[out_name] = record.level_name()
            elif name == FIELD_KEY_CHANNEL:
                log_data[out_name] = record.channel
            elif name == FIELD_KEY_MESSAGE:
                log_data[out_name] = record.message
            elif name == FIELD_KEY_DATA:
                log_data[out_name] = record.data
            elif name == FIELD_KEY_EXTRA:
                log_data[out_name] = record.extra

        for key, value in record.fields.items():
            log_data[f"fields.{key}" if key in log_data else key] = value

        if self.pretty_print:
            text = json.dumps(
                log_data, indent=2, sort_keys=True, ensure_ascii=False, default=str
            )
        else:
            text = json.dumps(
                log_data,
                separators=(",", ":"),
                sort_keys=True,
                ensure_ascii=False,
                default=str,
            )
        return (text + "\n").encode("utf-8")


def as_text_formatter(formatter: Formatter) -> TextFormatter:
    """Return ``formatter`` if it is a TextFormatter, else raise TypeError."""
    if isinstance(formatter, TextFormatter):
        return formatter
    raise TypeError("slog: cannot cast input as TextFormatter")


def as_json_formatter(formatter: Formatter) -> JSONFormatter:
    """Return ``formatter`` if it is a JSONFormatter, else raise TypeError."""
    if isinstance(formatter, JSONFormatter):
        return formatter
    raise TypeError("slog: cannot cast input as JSONFormatter")