"""
Field rendering from logging records.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from jsonlayout.record import Field, Scalar, Structured

Template = Union[str, Callable[[logging.LogRecord], Any]]


class _RecordAttributes(dict):
    """Attribute mapping for %-formatting; missing keys and None render empty"""

    def __missing__(self, key: str) -> str:
        return ''


class FieldRenderer:
    """
    Renders configured field templates against a LogRecord.

    String templates use %-style placeholders over record attributes, e.g.
    '%(levelname)s', '%(filename)s:%(lineno)d'. Callable templates receive the
    record; a str result is text, anything else is kept as a structure.
    """

    def __init__(self, fields: Mapping[str, Template], formatter: Optional[logging.Formatter] = None):
        self.fields = dict(fields)
        self.formatter = formatter or logging.Formatter()

    def attributes(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Build the placeholder mapping for a record"""
        attrs = _RecordAttributes(
            (k, v) for k, v in record.__dict__.items() if v is not None
        )
        message = record.getMessage()
        if message.endswith('\n'):
            message = message[:-1]
        attrs['message'] = message

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatter.formatException(record.exc_info)
        if record.exc_text:
            attrs['exc_text'] = record.exc_text
        return attrs

    def render(self, record: logging.LogRecord) -> List[Field]:
        attrs = self.attributes(record)
        rendered = []
        for name, template in self.fields.items():
            if callable(template):
                value = template(record)
                rendered.append(Field(name, Scalar(value) if isinstance(value, str) else Structured(value)))
            else:
                rendered.append(Field(name, Scalar(template % attrs)))
        return rendered
