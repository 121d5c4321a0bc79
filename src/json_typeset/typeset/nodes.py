"""TypeSet dataclass and ObservedType StrEnum for the observed-shape tree.

A TypeSet records every kind of value ever seen at one JSON path.  Flags are
independent: the same path may have held a number in one record and a string
in the next, so the node is a union over time rather than a single tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto


class ObservedType(StrEnum):
    """Closed vocabulary of value kinds a TypeSet can record.

    StrEnum values are the lowercased member names, which are also the keys
    used by the snapshot encoding:
    - NULL    -> "null"    : JSON null
    - BOOL    -> "bool"    : true / false
    - NUMBER  -> "number"  : integer or float
    - STRING  -> "string"  : JSON string
    - ARRAY   -> "array"   : JSON array (element union lives in ``TypeSet.array``)
    - OBJECT  -> "object"  : JSON object (fields live in ``TypeSet.object``)
    - ABSENT  -> "absent"  : missing from an object, or an empty array
    """

    NULL = auto()
    BOOL = auto()
    NUMBER = auto()
    STRING = auto()
    ARRAY = auto()
    OBJECT = auto()
    ABSENT = auto()


# Flag order is the order flags appear in an encoded snapshot.
FLAG_TYPES: tuple[ObservedType, ...] = (
    ObservedType.ABSENT,
    ObservedType.NULL,
    ObservedType.BOOL,
    ObservedType.NUMBER,
    ObservedType.STRING,
)


@dataclass(slots=True)
class TypeSet:
    """Union of every shape observed at one JSON path.

    Attributes:
        absent: Missing from an object that already knew this field, or (for an
                array-element node) an empty array was observed.
        null:   A JSON null was observed.
        bool:   A JSON boolean was observed.
        number: A JSON number was observed.
        string: A JSON string was observed.
        array:  Merged element node shared by every element of every array seen
                at this path; None until the first array arrives.
        object: Child node per field name ever seen in an object at this path;
                None until the first object arrives.  Entries are never removed.
    """

    absent: bool = False
    null: bool = False
    bool: bool = False
    number: bool = False
    string: bool = False
    array: TypeSet | None = None
    object: dict[str, TypeSet] | None = None

    def observed(self) -> frozenset[ObservedType]:
        """Return the set of value kinds recorded on this node (not its children)."""
        kinds = {flag for flag in FLAG_TYPES if getattr(self, flag.value)}
        if self.array is not None:
            kinds.add(ObservedType.ARRAY)
        if self.object is not None:
            kinds.add(ObservedType.OBJECT)
        return frozenset(kinds)

    def is_empty(self) -> bool:
        """True when nothing at all has been observed at this path."""
        return not self.observed()

    def field(self, name: str) -> TypeSet | None:
        """Return the child node for ``name``, or None if it was never seen."""
        if self.object is None:
            return None
        return self.object.get(name)
