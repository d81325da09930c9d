"""
Record model and assembly of rendered fields with context data.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Union


@dataclass(frozen=True)
class Scalar:
    """Plain text field value"""
    text: str


@dataclass(frozen=True)
class Structured:
    """Arbitrary JSON tree (mapping, sequence, scalar or None)"""
    tree: Any


FieldValue = Union[Scalar, Structured]


@dataclass(frozen=True)
class Field:
    """
    Named value of one record.

    from_context marks fields taken from the context snapshot; nested marks
    the single field holding the whole snapshot.
    """
    name: str
    value: FieldValue
    from_context: bool = False
    nested: bool = False

    def to_json(self) -> Any:
        if isinstance(self.value, Scalar):
            return self.value.text
        return self.value.tree


@dataclass(frozen=True)
class Inline:
    """Context entries become top-level fields"""
    pass


@dataclass(frozen=True)
class Nested:
    """Context snapshot is placed under a single field"""
    name: str


Placement = Union[Inline, Nested]


class Record:
    """
    Ordered field list with unique names.

    Adding a field whose name is already present removes the old one, and the
    new field takes the later position.
    """

    def __init__(self, fields: Optional[Iterable[Field]] = None):
        self._fields: List[Field] = []
        for field in fields or ():
            self.add(field)

    def add(self, field: Field) -> None:
        self._fields = [f for f in self._fields if f.name != field.name]
        self._fields.append(field)

    def get(self, name: str) -> Optional[Field]:
        for field in self._fields:
            if field.name == name:
                return field
        return None

    def names(self) -> List[str]:
        return [f.name for f in self._fields]

    def fields(self) -> List[Field]:
        """Return a copy of the field list"""
        return list(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Record({self._fields!r})"


def assemble(
    rendered_fields: Iterable[Field],
    context_snapshot: Optional[Mapping[str, Any]],
    placement: Placement,
    canonical: bool = False
) -> Record:
    """
    Merge rendered fields with a context snapshot.

    Args:
        rendered_fields: Fields produced by the renderer, in order
        context_snapshot: Context data, or None when context is disabled
        placement: Inline() or Nested(name)
        canonical: Append inline context entries in sorted key order

    Returns:
        A fresh Record; context entries override same-named rendered fields
    """
    record = Record(rendered_fields)

    if context_snapshot is None:
        return record

    if isinstance(placement, Nested):
        if context_snapshot:
            record.add(Field(placement.name, Structured(dict(context_snapshot)),
                             from_context=True, nested=True))
        return record

    keys = list(context_snapshot)
    if canonical:
        keys = sorted(keys, key=str)
    for key in keys:
        record.add(Field(str(key), Structured(context_snapshot[key]), from_context=True))

    return record
