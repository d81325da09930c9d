"""
jsonlayout: Size-bounded JSON log layout

Formats log events as single-line ASCII JSON objects that always fit a
configured byte budget, with optional mapped diagnostic context.
"""

from jsonlayout.config import LayoutConfig, load_config
from jsonlayout.encoder import BoundedEncoder, EncodeResult, JSONCodec, Outcome, encode
from jsonlayout.errors import ConfigError
from jsonlayout.layout import JSONLayout
from jsonlayout.logger import get_logger, setup_logging, validate_log_line

__all__ = [
    'BoundedEncoder', 'ConfigError', 'EncodeResult', 'JSONCodec', 'JSONLayout', 'LayoutConfig',
    'Outcome', 'encode', 'get_logger', 'load_config', 'setup_logging', 'validate_log_line',
]
__version__ = '1.0.0'
