from __future__ import annotations

"""
Rotating Log Sink.

Accepts batches of records, validates them as a whole, ensures the target
directory exists, archives the active file when it is too large (or on the
first write when a fresh file is requested), prunes old archives, appends the
rendered lines and optionally mirrors them to the console.

Filesystem failures are reported and swallowed unless the configuration asks
for strict behavior; invalid records always raise before any I/O happens.
"""

import logging
import os
import threading
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from opskit.core.logsink.console import ConsoleSink, default_console
from opskit.core.logsink.formatting import RenderedRecord, local_now, render_record
from opskit.core.logsink.rotation import (
    RotationReason,
    archive_active_file,
    check_rotation,
    next_archive_path,
    prune_archives,
)
from opskit.domain.constants import (
    DEFAULT_LOG_FILE_NAME,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_MAX_HISTORY,
    FORMAT_STRUCTURED,
    ROTATION_INFO_MSG,
    ROTATION_WARNING_MSG,
)
from opskit.domain.errors import (
    AppendFailedError,
    DirectoryUnavailableError,
    InvalidRecordError,
    LogWriterError,
    RotationFailedError,
)
from opskit.domain.models import LogFormat, LogRecord, LogSeverity, SinkConfig
from opskit.infra.fs import get_file_size_mb, safe_mkdir

logger = logging.getLogger(__name__)

Messages = Union[str, Sequence[str]]
_ValidRecord = Tuple[LogRecord, LogSeverity]

# ==============================================================================
# SINK
# ==============================================================================

class RotatingLogSink:
    """
    Single-writer rotating log file.

    The only state carried between calls is whether this sink has already
    written its target once, which governs `create_new_on_init`.
    """

    def __init__(
            self,
            config: Optional[SinkConfig] = None,
            console: Optional[ConsoleSink] = None,
            clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config or SinkConfig()
        self.console = console if console is not None else default_console()
        self._clock = clock or local_now
        self._lock = threading.RLock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        """True once the sink has appended to its target in this process."""
        return self._initialized

    # --------------------------------------------------------------------------
    # PUBLIC API
    # --------------------------------------------------------------------------

    def write(
            self,
            messages: Messages,
            severity: Union[LogSeverity, int] = LogSeverity.INFO,
            source: Optional[str] = None,
            *,
            debug: bool = False,
            config: Optional[SinkConfig] = None,
    ) -> Optional[List[str]]:
        """
        Write one or more messages sharing a severity and source.

        Args:
            messages: A single message or a sequence of messages.
            severity: Severity applied to every message.
            source: Component name. Defaults to the config's default_source.
            debug: Mark the messages as debug-class.
            config: Per-call configuration replacing the sink's own.

        Returns:
            Optional[List[str]]: The submitted messages when echo_input is set.

        Raises:
            InvalidRecordError: On empty input or invalid records.
            LogWriterError: On filesystem failures when errors are not suppressed.
        """
        if isinstance(messages, str):
            messages = [messages]
        records = [
            LogRecord(message=m, severity=severity, source=source, debug=debug)
            for m in (messages or [])
        ]
        return self.write_records(records, config=config)

    def write_records(
            self,
            records: Iterable[LogRecord],
            config: Optional[SinkConfig] = None,
    ) -> Optional[List[str]]:
        """
        Validate, rotate if needed, append and mirror a batch of records.

        The whole batch is validated before any I/O. Records are appended in
        submission order.
        """
        cfg = config or self.config
        records = list(records)
        echo = [r.message for r in records] if cfg.echo_input else None

        if not records:
            raise InvalidRecordError("No log message was supplied.")

        active = records if cfg.log_debug_messages else [r for r in records if not r.debug]
        if not active:
            return echo

        valid = _validate_records(active)
        first_source = self._resolve_source(valid[0][0], cfg)

        with self._lock:
            file_ready = False
            if cfg.logging_enabled:
                file_ready = self._prepare_target(cfg, first_source)

            rendered = [
                self._render(record.message, sev, self._resolve_source(record, cfg), cfg)
                for record, sev in valid
            ]

            if file_ready:
                lines = [r.select(cfg.log_format) for r in rendered]
                if self._append_lines(cfg.target_path, lines, cfg):
                    self._initialized = True

            if cfg.mirror_to_console:
                for (_, sev), r in zip(valid, rendered):
                    self.console.emit(r.legacy, sev)

        return echo

    def bind(self, source: str) -> "BoundLogWriter":
        """Return a writer that stamps every record with the given source."""
        return BoundLogWriter(self, source)

    # --------------------------------------------------------------------------
    # PRIVATE HELPERS
    # --------------------------------------------------------------------------

    def _resolve_source(self, record: LogRecord, cfg: SinkConfig) -> Optional[str]:
        return record.source or cfg.default_source

    def _render(
            self,
            message: str,
            severity: LogSeverity,
            source: Optional[str],
            cfg: SinkConfig,
    ) -> RenderedRecord:
        return render_record(
            message,
            severity,
            self._clock(),
            source=source,
            context=cfg.context,
            script_name=cfg.script_name,
        )

    def _prepare_target(self, cfg: SinkConfig, source: Optional[str]) -> bool:
        """
        Ensure the directory exists and rotate the active file if required.

        Returns:
            bool: False when file output must be skipped for this call.
        """
        directory = cfg.resolved_directory
        ok, err = safe_mkdir(directory)
        if not ok:
            self._handle_failure(
                DirectoryUnavailableError(f"Cannot create log directory '{directory}': {err}"),
                cfg,
            )
            return False

        path = cfg.target_path
        reason = check_rotation(
            get_file_size_mb(path),
            cfg.max_file_size_mb,
            first_write=not self._initialized,
            create_new_on_init=cfg.create_new_on_init,
            file_exists=os.path.isfile(path),
        )
        if reason is not None:
            self._rotate(path, reason, cfg, source)
        return True

    def _rotate(
            self,
            path: str,
            reason: RotationReason,
            cfg: SinkConfig,
            source: Optional[str],
    ) -> None:
        """Archive the active file, announce it when size-triggered, prune archives."""
        size_label = f"{cfg.max_file_size_mb:g}"
        try:
            archive = next_archive_path(path)
            if reason is RotationReason.SIZE:
                self._announce(
                    path,
                    ROTATION_WARNING_MSG.format(size=size_label, archive=archive),
                    LogSeverity.WARNING,
                    source,
                    cfg,
                )
            archive_active_file(path, archive)
        except RotationFailedError as e:
            self._handle_failure(e, cfg)
            return

        logger.debug(f"Rotated log file {path} ({reason.value})")
        if reason is RotationReason.SIZE:
            self._announce(
                path,
                ROTATION_INFO_MSG.format(size=size_label, archive=archive),
                LogSeverity.INFO,
                source,
                cfg,
            )

        try:
            prune_archives(os.path.dirname(path), os.path.basename(path), cfg.max_history)
        except RotationFailedError as e:
            self._handle_failure(e, cfg)

    def _announce(
            self,
            path: str,
            message: str,
            severity: LogSeverity,
            source: Optional[str],
            cfg: SinkConfig,
    ) -> None:
        """Append a sink-generated record without going through rotation again."""
        rendered = self._render(message, severity, source, cfg)
        self._append_lines(path, [rendered.select(cfg.log_format)], cfg)
        if cfg.mirror_to_console:
            self.console.emit(rendered.legacy, severity)

    def _append_lines(self, path: str, lines: List[str], cfg: SinkConfig) -> bool:
        """Raw append primitive. Returns False when the append failed and was suppressed."""
        try:
            with open(path, "a", encoding="utf-8") as f:
                for line in lines:
                    f.write(f"{line}\n")
            return True
        except OSError as e:
            self._handle_failure(
                AppendFailedError(f"Failed to write to log file '{path}': {e}"), cfg, cause=e
            )
            return False

    def _handle_failure(
            self,
            error: LogWriterError,
            cfg: SinkConfig,
            cause: Optional[BaseException] = None,
    ) -> None:
        """Raise an environment failure, or report it when errors are suppressed."""
        if not cfg.suppress_errors:
            raise error from (cause or error.__cause__)
        logger.warning(f"{type(error).__name__}: {error}")
        if cfg.show_errors:
            self.console.report_error(f"[{type(error).__name__}] {error}")

# ==============================================================================
# BOUND WRITER
# ==============================================================================

class BoundLogWriter:
    """Writer bound to one component name, used instead of caller introspection."""

    def __init__(self, sink: RotatingLogSink, source: str):
        self.sink = sink
        self.source = source

    def log(
            self,
            messages: Messages,
            severity: Union[LogSeverity, int] = LogSeverity.INFO,
            *,
            debug: bool = False,
    ) -> Optional[List[str]]:
        return self.sink.write(messages, severity, self.source, debug=debug)

    def success(self, messages: Messages) -> Optional[List[str]]:
        return self.log(messages, LogSeverity.SUCCESS)

    def info(self, messages: Messages) -> Optional[List[str]]:
        return self.log(messages, LogSeverity.INFO)

    def warning(self, messages: Messages) -> Optional[List[str]]:
        return self.log(messages, LogSeverity.WARNING)

    def error(self, messages: Messages) -> Optional[List[str]]:
        return self.log(messages, LogSeverity.ERROR)

    def debug(self, messages: Messages) -> Optional[List[str]]:
        return self.log(messages, LogSeverity.INFO, debug=True)

# ==============================================================================
# PROCESS-WIDE CALL SURFACE
# ==============================================================================

_SHARED_SINKS: Dict[str, RotatingLogSink] = {}
_SHARED_SINKS_LOCK = threading.Lock()


def get_shared_sink(config: SinkConfig) -> RotatingLogSink:
    """
    Return the process-wide sink for the config's target path.

    Sharing one sink per path keeps `create_new_on_init` to a single
    rotation per path for the lifetime of the process. The registry holds
    one small entry per distinct target path and is never evicted, since
    dropping an entry would let that path rotate on init a second time.
    Call reset_shared_sinks() to start over.
    """
    key = os.path.normcase(config.target_path) if config.logging_enabled else ""
    with _SHARED_SINKS_LOCK:
        sink = _SHARED_SINKS.get(key)
        if sink is None:
            sink = RotatingLogSink(config)
            _SHARED_SINKS[key] = sink
        return sink


def reset_shared_sinks() -> None:
    """Forget every shared sink (fresh-process semantics)."""
    with _SHARED_SINKS_LOCK:
        _SHARED_SINKS.clear()


def write_log(
        messages: Messages,
        severity: Union[LogSeverity, int] = LogSeverity.INFO,
        source: Optional[str] = None,
        log_type: Union[str, LogFormat] = FORMAT_STRUCTURED,
        directory: Optional[str] = None,
        file_name: Optional[str] = None,
        create_new_log: bool = False,
        max_log_history: int = DEFAULT_MAX_HISTORY,
        max_log_file_size_mb: float = DEFAULT_MAX_FILE_SIZE_MB,
        show_errors: bool = True,
        write_host: bool = False,
        pass_thru: bool = False,
        debug_message: bool = False,
        log_debug_message: bool = False,
        suppress_errors: bool = True,
) -> Optional[List[str]]:
    """
    One-shot logging call.

    Builds a SinkConfig from keyword arguments and writes through the shared
    sink of the resolved target path.

    Args:
        messages: A single message or a sequence of messages.
        severity: 0 Success, 1 Info, 2 Warning, 3 Error.
        source: Component name written with every record.
        log_type: 'Structured' or 'Legacy'.
        directory: Target directory. None uses the default log directory.
        file_name: Target file. None uses the default name; '' disables file output.
        create_new_log: Archive an existing file on the first write of this process.
        max_log_history: Archives retained after a rotation.
        max_log_file_size_mb: Rotation threshold (0 disables size rotation).
        show_errors: Report suppressed failures on the console.
        write_host: Mirror records to the console.
        pass_thru: Return the submitted messages.
        debug_message: Mark the messages as debug-class.
        log_debug_message: Process debug-class messages.
        suppress_errors: Swallow filesystem failures.

    Returns:
        Optional[List[str]]: The messages when pass_thru is set.
    """
    if max_log_history < 0 or max_log_file_size_mb < 0:
        raise ValueError("max_log_history and max_log_file_size_mb must not be negative.")

    cfg = SinkConfig(
        directory=directory or "",
        file_name=DEFAULT_LOG_FILE_NAME if file_name is None else file_name,
        log_format=LogFormat.parse(log_type),
        max_file_size_mb=float(max_log_file_size_mb),
        max_history=int(max_log_history),
        create_new_on_init=create_new_log,
        mirror_to_console=write_host,
        echo_input=pass_thru,
        suppress_errors=suppress_errors,
        show_errors=show_errors,
        log_debug_messages=log_debug_message,
    )
    sink = get_shared_sink(cfg)
    return sink.write(messages, severity, source, debug=debug_message, config=cfg)

# ==============================================================================
# VALIDATION
# ==============================================================================

def _validate_records(records: Sequence[LogRecord]) -> List[_ValidRecord]:
    """Validate a whole batch, failing on the first invalid record."""
    valid: List[_ValidRecord] = []
    for index, record in enumerate(records):
        message = record.message
        if not isinstance(message, str) or not message.strip():
            raise InvalidRecordError(f"Record #{index} has an empty message.")
        valid.append((record, _coerce_severity(record.severity, index)))
    return valid


def _coerce_severity(value: object, index: int) -> LogSeverity:
    """Accept a LogSeverity or a plain int in 0..3; bools, floats and strings are rejected."""
    if isinstance(value, LogSeverity):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return LogSeverity(value)
        except ValueError:
            pass
    raise InvalidRecordError(f"Record #{index} has an invalid severity: {value!r}")
