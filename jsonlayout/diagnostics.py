"""
Side channel for degradation notices.

Sinks must never go through the logging module: the layout is part of the
logging pipeline and a notice logged from inside it would recurse.
"""

from typing import List

import click


class DiagnosticsSink:
    """Base sink, discards everything"""

    def emit(self, line: str) -> None:
        pass


class StderrSink(DiagnosticsSink):
    """Writes notices to stderr"""

    def emit(self, line: str) -> None:
        try:
            click.echo(line, err=True)
        except (OSError, ValueError):
            # stderr closed or broken; notices are best effort
            pass


class MemorySink(DiagnosticsSink):
    """Collects notices in memory"""

    def __init__(self):
        self.lines: List[str] = []

    def emit(self, line: str) -> None:
        self.lines.append(line)

    def clear(self) -> None:
        self.lines.clear()
