#!/usr/bin/env python3
"""
Demo script showing jsonlayout usage.

This example demonstrates:
1. Structured JSON logging with mapped diagnostic context
2. Per-call context via extra={'context': ...}
3. What happens when an event is larger than the budget
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jsonlayout import LayoutConfig, context, get_logger

config = LayoutConfig(
    fields={
        'message': '%(message)s',
        'category': '%(name)s',
        'level': '%(levelname)s',
        'where': '%(filename)s:%(lineno)d',
    },
    include_context=True,
    context_field_name='context',
    max_length_kb=0.5,
)
logger = get_logger('layout_demo', config=config)


def demo_structured_logging():
    """Demo structured JSON logging"""
    print("\n=== Structured Logging Demo ===")

    logger.info("Application started")
    with context.bound(request_id='req-456'):
        logger.info("User login", extra={'context': {'user_id': 123, 'ip': '192.168.1.1'}})
        logger.warning("High memory usage", extra={'context': {'memory_percent': 85.5}})


def demo_budget():
    """Demo degradation of oversized events"""
    print("\n=== Budget Demo (512 bytes) ===")

    logger.info("Large payload", extra={'context': {'payload': 'x' * 2000}})
    logger.info("Long message " + 'y' * 2000)

    print("\nNote: reductions are reported on stderr, the log lines stay valid JSON")


if __name__ == '__main__':
    demo_structured_logging()
    demo_budget()
