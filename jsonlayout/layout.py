"""
JSONLayout: logging formatter producing size-bounded single-line JSON.
"""

import logging
import sys
from typing import Any, Callable, Dict, Mapping, Optional

from jsonlayout import context
from jsonlayout.config import LayoutConfig
from jsonlayout.diagnostics import DiagnosticsSink
from jsonlayout.encoder import BoundedEncoder, EncodeResult, JSONCodec
from jsonlayout.errors import ConfigError
from jsonlayout.record import Record, assemble
from jsonlayout.renderer import FieldRenderer
from jsonlayout.validator import validate


class JSONLayout(logging.Formatter):
    """
    Formatter that outputs each event as prefix + one-line ASCII JSON.

    Example config (YAML):
        fields:
          message: '%(message)s'
          category: '%(name)s'
          where: '%(filename)s:%(lineno)d'
        prefix: '@cee:'
        include_context: true
        context_field_name: context
        max_length_kb: 3.8

    The JSON body never exceeds max_length_kb unless even the message alone
    does not fit. Reductions are reported on stderr.

    Context data comes from jsonlayout.context and from the per-call
    extra={'context': {...}}, the latter taking precedence.
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        context_provider: Callable[[], Mapping[str, Any]] = context.snapshot,
        sink: Optional[DiagnosticsSink] = None,
        **options
    ):
        super().__init__()
        if config is None:
            config = LayoutConfig.from_dict(options)
        elif options:
            raise ConfigError(f"Unexpected options with an explicit config: {', '.join(sorted(options))}")

        self.config = config
        self.context_provider = context_provider
        self.renderer = FieldRenderer(config.fields, self)
        self.codec = JSONCodec(canonical=config.canonical)
        self.encoder = self._make_encoder(sink)

        # fail fast on a bad config
        validate(self)

    def _make_encoder(self, sink: Optional[DiagnosticsSink]) -> BoundedEncoder:
        return BoundedEncoder(
            self.config.budget,
            codec=self.codec,
            prefix=self.config.prefix,
            sink=sink,
            label=type(self).__name__
        )

    def snapshot(self, record: logging.LogRecord) -> Optional[Dict[str, Any]]:
        """Context for one event, or None when context is disabled"""
        if not self.config.include_context:
            return None
        data = dict(self.context_provider())
        call_context = getattr(record, 'context', None)
        if isinstance(call_context, Mapping):
            data.update(call_context)
        return data

    def build_record(self, record: logging.LogRecord) -> Record:
        return assemble(
            self.renderer.render(record),
            self.snapshot(record),
            self.config.placement,
            canonical=self.config.canonical
        )

    def encode_record(self, record: logging.LogRecord, sink: Optional[DiagnosticsSink] = None) -> EncodeResult:
        encoder = self.encoder if sink is None else self._make_encoder(sink)
        return encoder.encode(self.build_record(record))

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as prefix + JSON (the handler adds the newline)"""
        return self.encode_record(record).output

    def make_log_record(
        self,
        message: str,
        category: str = '',
        priority: int = logging.INFO,
        caller_level: int = 0
    ) -> logging.LogRecord:
        """Build a LogRecord located caller_level frames above the caller"""
        try:
            frame = sys._getframe(caller_level + 1)
            pathname, lineno, func = frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name
        except ValueError:
            pathname, lineno, func = '', 0, None

        return logging.LogRecord(
            name=category,
            level=priority,
            pathname=pathname,
            lineno=lineno,
            msg=message,
            args=None,
            exc_info=None,
            func=func
        )

    def render(
        self,
        message: str,
        category: str = '',
        priority: int = logging.INFO,
        caller_level: int = 0
    ) -> str:
        """Return the full wire line for a message, trailing newline included"""
        record = self.make_log_record(message, category, priority, caller_level + 1)
        return self.format(record) + '\n'
