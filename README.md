# gslog

Building blocks for leveled logging: log levels, records, text and JSON
formatters, buffered writers, and handlers that write records to streams,
files, the console or e-mail. It has no dependencies outside the standard
library.

## Installation

```
pip install gslog
```

For the test suite:

```
pip install "gslog[test]"
pytest
```

## Levels (`gslog.levels`)

`Level` is an `int`. A smaller value is more severe:
`Level.PANIC` (100), `FATAL` (200), `ERROR` (300), `WARN` (400),
`NOTICE` (500), `INFO` (600), `DEBUG` (700), `TRACE` (800).

```python
from gslog.levels import Level, level_by_name, level_name, name_to_level

Level.INFO.name                          # "INFO"
Level.INFO.lower_name()                  # "info"
Level.INFO.should_handling(Level.ERROR)  # True
Level.INFO.should_handling(Level.TRACE)  # False
level_name(20)                           # "UNKNOWN"
level_by_name("warning")                 # Level.WARN
level_by_name("bogus")                   # Level.INFO (fallback)
name_to_level("bogus")                   # raises ValueError
```

Accepted names (case-insensitive) include `err`, `warning`, `note`, and the
empty string, which means `INFO`. The module also defines the level groups
`ALL_LEVELS`, `DANGER_LEVELS` and `NORMAL_LEVELS`, the `FIELD_KEY_*` names,
`DEFAULT_CHANNEL_NAME` and `DEFAULT_TIME_FORMAT`, and `CallerFlag`, which
chooses how caller information is rendered.

A global list of exit callbacks is kept with `register_exit_handler`,
`prepend_exit_handler`, `exit_handlers`, `reset_exit_handlers` and
`run_exit_handlers`. `run_exit_handlers` calls them in order; if one raises,
the error is printed to stderr and the remaining callbacks are skipped.

## Records and formatters (`gslog.formatter`)

A `Record` holds `channel`, `level`, `message`, `time`, `data`, `extra`,
`fields`, and optionally a `caller` (a `traceback.FrameSummary`) with its
`caller_flag`.

`TextFormatter` renders a `{{field}}` template (`DEFAULT_TEMPLATE` unless
given). Known fields are `datetime`, `timestamp`, `caller`, `level`,
`channel`, `message`, `data` and `extra`; any other name is looked up in
`record.fields` and written literally if absent. Empty `data`/`extra` are
left out unless `full_display` is set. With `enable_color`, the level and
message are wrapped in ANSI colors per level. Times use strftime layouts,
where `%L` stands for milliseconds.

`JSONFormatter` writes one JSON object per line with sorted keys. `fields`
chooses what is exported, `aliases` renames keys, `pretty_print` indents.
Entries of `record.fields` whose names clash with an exported key are
written as `fields.<name>`.

```python
from gslog.formatter import JSONFormatter, Record, TextFormatter, text_formatter_with
from gslog.levels import Level

record = Record(channel="app", level=Level.INFO, message="started", data={"user": "tom"})

TextFormatter("[{{level}}] {{message}} {{data}}\n").format(record)
# b"[INFO] started {user:tom}\n"

json_formatter = JSONFormatter(aliases={"message": "msg"})
json_formatter.add_field("timestamp")
json_formatter.format(record)

colored = text_formatter_with(lambda f: f.with_enable_color(True))
```

`FormatterFunc` wraps a plain function as a formatter, `FormatterWrapper`
holds a formatter (a `TextFormatter` by default), and `as_text_formatter` /
`as_json_formatter` raise `TypeError` when given the other kind.

## Level filtering (`gslog.handling`)

- `LevelWithFormatter(level)`: handles records at or above a maximum level.
- `LevelsWithFormatter(levels)`: handles records whose level is in a list.
- `LevelFormatting`, made by `new_max_level_formatting` or
  `new_levels_formatting`, switches between both modes (`LevelMode.MAX`,
  `LevelMode.LIST`).

Each has `is_handling(level)` and a `formatter` property.

## Buffered writers (`gslog.bufwrite`)

Both writers accept `bytes` or `str`, and offer `write`, `flush`, `sync`
and `close` (which flushes and then closes the underlying writer if it has
a `close` method). A failed write is kept and raised again on later calls;
`ShortWriteError` is raised when fewer bytes were accepted than given.

- `BufferedWriter` fills its buffer completely before writing it out, so a
  write may be split.
- `LineWriter` never splits one write: if it does not fit, the buffer is
  flushed and the whole write goes straight through. `reset(writer)` clears
  the buffer and the stored error. `new_line_writer(writer, size)` reuses
  `writer` when it already is a large enough `LineWriter`.

```python
import io
from gslog.bufwrite import BufferedWriter, LineWriter

out = io.BytesIO()
bw = BufferedWriter(out, 12)
bw.write("hello, ")
bw.write("worlds. oh")
out.getvalue()   # b"hello, world"

out = io.BytesIO()
lw = LineWriter(out, 12)
lw.write("hello, ")
lw.write("worlds. oh")
out.getvalue()   # b"hello, worlds. oh"
```

## Handlers (`gslog.handlers`)

Every handler has `is_handling(level)`, `handle(record)`, `flush()`,
`close()` and a settable `formatter`, and can be used as a context manager.

`gslog.handlers.writers`:

- `IOWriterHandler` (`new_io_writer`, `io_writer_with_max_level`,
  `new_simple_handler`): writes to any writable object, text or binary;
  `close` leaves the output open. `text_formatter()` returns the formatter
  as a `TextFormatter`.
- `WriteCloserHandler` (`new_write_closer`, `write_closer_with_max_level`):
  `close` closes the output.
- `FlushCloseHandler` (`new_flush_closer`, `flush_closer_with_max_level`):
  `close` flushes, then closes.
- `SyncCloseHandler` (`new_sync_closer`, `sync_closer_with_max_level`):
  `flush` syncs the output to storage; `close` syncs, then closes.
- `new_console(levels)` / `console_with_max_level(level)`: write to
  `sys.stdout`, colored when stdout is a terminal and `NO_COLOR` is unset.
- `quick_open_file(path)` opens a file for appending, creating parent
  directories. `LockWrapper` is a lock that can be switched off.

```python
import io
from gslog.handlers.writers import console_with_max_level, new_io_writer
from gslog.levels import Level

buf = io.StringIO()
handler = new_io_writer(buf, [Level.INFO, Level.ERROR])
if handler.is_handling(record.level):
    handler.handle(record)

console = console_with_max_level(Level.DEBUG)
```

`gslog.handlers.config` holds `Config`, the option functions
(`with_logfile`, `with_file_perm`, `with_level_mode`, `with_log_level`,
`with_level_name`, `with_log_levels`, `with_level_names`,
`with_level_names_string`, `with_buff_mode`, `with_buff_size`,
`with_use_json`, `with_debug_mode`), `new_empty_config`, `new_config`
(line buffering with an 8 KiB buffer) and a `Builder`.
`Config.create_writer()` raises `ValueError` when no log file is set;
`Builder.build()` raises `ValueError` when neither an output nor a log file
is set, and picks the handler class from the methods the output has.

`gslog.handlers.files` has `new_file_handler`, `json_file_handler`,
`new_buff_file_handler`, `new_simple_file_handler` (maximum level `INFO`
by default), `new_buffered_handler`, `line_buffered_file` and
`line_buff_writer`.

```python
from gslog.handlers.config import Builder, with_buff_size, with_level_names_string
from gslog.handlers.files import json_file_handler, new_file_handler

h = new_file_handler("app.log", with_buff_size(1024), with_level_names_string("info,error"))
h.handle(record)
h.close()

with json_file_handler("app.json.log") as jh:
    jh.handle(record)

h2 = Builder().with_logfile("errors.log").with_use_json(True).build()
```

`gslog.handlers.email.EmailHandler` mails each record over SMTP, using
STARTTLS and login when the server offers them; its default maximum level
is `INFO`.

```python
from gslog.handlers.email import EmailHandler, EmailOption

password = "password"
sender = EmailOption(
    smtp_host="smtp.example.com",
    smtp_port=587,
    from_addr="alerts@example.com",
    password=password,
)
mailer = EmailHandler(sender, ["ops@example.com"])
```

## What this package does not do

- There is no logger object: nothing creates records from log calls,
  checks handlers' levels and dispatches to them. Build `Record`s yourself
  and call `is_handling` / `handle`.
- Caller information is not captured automatically; set `Record.caller`
  if it should appear in the output.
- Log files are not rotated by size or time, old files are not cleaned up
  or compressed, and there is no syslog handler.