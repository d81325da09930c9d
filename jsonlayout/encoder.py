"""
Bounded JSON encoder.

Encodes a Record as a single-line ASCII JSON object no longer than a byte
budget. When the first attempt fails or is too long, fields are degraded and
the encode is retried:

    1. every rendered field, message or nested context whose encoded value is
       larger than half the budget is truncated (text) or set to null
       (structures), and any value that cannot be encoded is set to null;
    2. if no field qualifies, the last non-message field is dropped;
    3. when nothing is left to reduce, the output is {"message": <original>}.

Each retry is reported to the diagnostics sink, never raised to the caller.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Optional, Union

from jsonlayout.diagnostics import DiagnosticsSink, StderrSink
from jsonlayout.errors import EncodeError, SizeExceeded
from jsonlayout.record import Field, Record, Scalar, Structured

MESSAGE = 'message'
TRUNCATION_MARKER = '...[truncated, was {} chars total]...'


class JSONCodec:
    """Compact, ASCII-only JSON codec"""

    def __init__(self, canonical: bool = False):
        self.canonical = canonical
        self._encoder = json.JSONEncoder(
            ensure_ascii=True,
            separators=(',', ':'),
            allow_nan=False,
            check_circular=True,
            sort_keys=canonical,
            default=self._convert
        )

    @staticmethod
    def _convert(obj: Any) -> Any:
        to_json = getattr(obj, 'to_json', None)
        if callable(to_json):
            return to_json()
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    def encode(self, value: Any) -> str:
        """Encode any value, raising EncodeError on structural failure"""
        try:
            return self._encoder.encode(value)
        except (TypeError, ValueError, RecursionError) as e:
            raise EncodeError(str(e)) from e

    def encode_fields(self, fields: List[Field]) -> str:
        return self.encode({f.name: f.to_json() for f in fields})


@dataclass(frozen=True)
class Truncate:
    name: str
    original_len: int
    new_len: int

    def describe(self) -> str:
        return f"truncated {self.name} from {self.original_len} to {self.new_len}"


@dataclass(frozen=True)
class Nullify:
    name: str
    original_type: str
    reason: str

    def describe(self) -> str:
        return f"{self.name} {self.original_type} set to null ({self.reason})"


@dataclass(frozen=True)
class Drop:
    name: str

    def describe(self) -> str:
        return f"dropped {self.name}"


DegradationAction = Union[Truncate, Nullify, Drop]


class Outcome(Enum):
    SUCCESS = 'success'
    DEGRADED = 'degraded'
    FALLBACK = 'fallback'


@dataclass
class EncodeResult:
    """Result of one encode call; output is prefix + body"""
    output: str
    body: str
    outcome: Outcome
    actions: List[DegradationAction] = field(default_factory=list)


class BoundedEncoder:
    """
    Encodes records within a byte budget.

    The encoder holds only immutable configuration and may be shared between
    threads as long as its sink is.
    """

    def __init__(
        self,
        budget: float,
        codec: Optional[JSONCodec] = None,
        prefix: str = '',
        sink: Optional[DiagnosticsSink] = None,
        label: str = 'JSONLayout'
    ):
        self.budget = budget
        self.codec = codec or JSONCodec()
        self.prefix = prefix
        self.sink = sink if sink is not None else StderrSink()
        self.label = label

    def encode(self, record: Record) -> EncodeResult:
        working = record.fields()
        actions: List[DegradationAction] = []
        dropped: List[str] = []

        while True:
            try:
                body = self.codec.encode_fields(working)
                if len(body) > self.budget:
                    raise SizeExceeded(len(body), self.budget)
                outcome = Outcome.DEGRADED if actions else Outcome.SUCCESS
                return EncodeResult(self.prefix + body, body, outcome, actions)
            except (EncodeError, SizeExceeded) as e:
                error = e

            pass_actions = self._shrink(working)
            if pass_actions:
                note = ', '.join(a.describe() for a in pass_actions) + ', retrying'
            else:
                index = self._drop_candidate(working)
                if index is None:
                    return self._fallback(record, error, actions)
                name = working.pop(index).name
                dropped.append(name)
                pass_actions = [Drop(name)]
                note = 'retrying without ' + ', '.join(dropped)

            actions.extend(pass_actions)
            self.sink.emit(f"Error encoding {self.label}: {error} ({note})")

    def _shrink(self, working: List[Field]) -> List[DegradationAction]:
        """
        Truncate or nullify every oversized candidate field in place.

        Inline context entries are only nullified when they cannot be encoded
        on their own; when merely large they are left for eviction.
        """
        threshold = self.budget / 2
        order = list(range(len(working)))
        if working and working[0].name == MESSAGE:
            order = order[1:] + [0]

        actions: List[DegradationAction] = []
        for i in order:
            current = working[i]
            size_checked = not current.from_context or current.nested or current.name == MESSAGE

            if isinstance(current.value, Structured):
                if current.value.tree is None:
                    continue
                type_name = type(current.value.tree).__name__
                try:
                    size = len(self.codec.encode(current.value.tree))
                except EncodeError as e:
                    reason = f"after encoding error ({e})"
                else:
                    if not size_checked or size <= threshold:
                        continue
                    reason = f"was {size} bytes"
                working[i] = replace(current, value=Structured(None))
                actions.append(Nullify(current.name, type_name, reason))
            elif size_checked:
                text = current.value.text
                if len(self.codec.encode(text)) <= threshold:
                    continue
                cut = self._truncate(text, threshold)
                if len(cut) >= len(text):
                    continue
                working[i] = replace(current, value=Scalar(cut))
                actions.append(Truncate(current.name, len(text), len(cut)))

        return actions

    def _truncate(self, text: str, limit: float) -> str:
        """Longest prefix of text that, with the marker, encodes within limit"""
        marker = TRUNCATION_MARKER.format(len(text))
        room = int(limit) - len(self.codec.encode(marker))
        keep = 0
        for char in text:
            # escaped width: 1 for plain ASCII, 6 or 12 for \uXXXX sequences
            width = len(self.codec.encode(char)) - 2
            if width > room:
                break
            room -= width
            keep += 1
        return text[:keep] + marker

    @staticmethod
    def _drop_candidate(working: List[Field]) -> Optional[int]:
        for i in range(len(working) - 1, -1, -1):
            if working[i].name != MESSAGE:
                return i
        return None

    def _fallback(self, record: Record, error: Exception, actions: List[DegradationAction]) -> EncodeResult:
        message = record.get(MESSAGE)
        if message is None:
            body = '{}'
        elif isinstance(message.value, Scalar):
            body = self.codec.encode({MESSAGE: message.value.text})
        else:
            try:
                text = self.codec.encode(message.value.tree)
            except EncodeError:
                text = str(message.value.tree)
            body = self.codec.encode({MESSAGE: text})
        self.sink.emit(f"Error encoding {self.label}: {error} (falling back to message only)")
        return EncodeResult(self.prefix + body, body, Outcome.FALLBACK, actions)


def encode(
    record: Record,
    budget: float,
    codec: Optional[JSONCodec] = None,
    prefix: str = '',
    sink: Optional[DiagnosticsSink] = None
) -> EncodeResult:
    """Encode a record within budget bytes; see BoundedEncoder"""
    return BoundedEncoder(budget, codec=codec, prefix=prefix, sink=sink).encode(record)
