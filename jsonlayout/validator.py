"""
Construction-time check of a layout.
"""

import logging
from typing import TYPE_CHECKING

from jsonlayout.diagnostics import MemorySink
from jsonlayout.encoder import EncodeResult, Outcome
from jsonlayout.errors import ConfigError

if TYPE_CHECKING:
    from jsonlayout.layout import JSONLayout


def validate(layout: 'JSONLayout') -> EncodeResult:
    """
    Run one synthetic event through render, assemble and encode.

    Args:
        layout: A JSONLayout (or anything with make_log_record/encode_record)

    Returns:
        The EncodeResult of the synthetic event

    Raises:
        ConfigError: If rendering raises or the event collapses to the fallback object
    """
    sink = MemorySink()
    message = f"Testing {type(layout).__name__} config"

    try:
        record = layout.make_log_record(message, 'test', logging.INFO, 1)
        result = layout.encode_record(record, sink=sink)
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"Layout failed to render a test event: {e}") from e

    if result.outcome is Outcome.FALLBACK:
        raise ConfigError(f"Layout cannot encode a test event within budget: {'; '.join(sink.lines)}")

    return result
