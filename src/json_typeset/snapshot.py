"""Snapshot codec: loss-free mapping between a TypeSet tree and JSON.

The encoding mirrors the TypeSet structure.  Only true flags are written,
followed by ``array`` (encoded recursively) and ``object`` (field name to
encoded child, keys sorted) when present.  Decoding restores every omitted
flag as False and every omitted branch as None.

Output depends only on the tree's content, never on the order in which fields
were first observed, so successive snapshots diff cleanly.

Example::

    from json_typeset.snapshot import dumps, loads

    text = dumps(root)          # '{\\n  "object": {...}\\n}'
    assert loads(text) == root
"""

from __future__ import annotations

import json
from typing import Any

from json_typeset.errors import SnapshotDecodeError
from json_typeset.typeset.nodes import FLAG_TYPES, ObservedType, TypeSet

__all__ = ["decode", "dumps", "encode", "loads"]

_ARRAY = ObservedType.ARRAY.value
_OBJECT = ObservedType.OBJECT.value


def encode(node: TypeSet) -> dict[str, Any]:
    """Return the JSON-ready mapping for ``node`` and all of its descendants."""
    data: dict[str, Any] = {}
    for flag in FLAG_TYPES:
        if getattr(node, flag.value):
            data[flag.value] = True
    if node.array is not None:
        data[_ARRAY] = encode(node.array)
    if node.object is not None:
        data[_OBJECT] = {name: encode(node.object[name]) for name in sorted(node.object)}
    return data


def decode(data: Any, path: str = "") -> TypeSet:
    """Rebuild a TypeSet tree from its encoded mapping.

    Unknown keys are ignored.

    Args:
        data: The decoded snapshot document (or a sub-document).
        path: JSON Pointer of ``data`` within the snapshot, used in error messages.

    Returns:
        A freshly allocated TypeSet tree.

    Raises:
        SnapshotDecodeError: If ``data`` is not a mapping, a flag is not a
            boolean, or ``object`` is not a mapping.
    """
    if not isinstance(data, dict):
        msg = f"expected an object at {path or '/'}, got {type(data).__name__}"
        raise SnapshotDecodeError(msg)

    node = TypeSet()
    for flag in FLAG_TYPES:
        value = data.get(flag.value, False)
        if not isinstance(value, bool):
            msg = f"flag {flag.value!r} at {path or '/'} must be a boolean, got {value!r}"
            raise SnapshotDecodeError(msg)
        setattr(node, flag.value, value)

    if _ARRAY in data:
        node.array = decode(data[_ARRAY], f"{path}/{_ARRAY}")

    if _OBJECT in data:
        fields = data[_OBJECT]
        if not isinstance(fields, dict):
            msg = f"{path}/{_OBJECT} must be an object, got {type(fields).__name__}"
            raise SnapshotDecodeError(msg)
        node.object = {
            name: decode(child, f"{path}/{_OBJECT}/{name}")
            for name, child in fields.items()
        }

    return node


def dumps(node: TypeSet, indent: int | None = 2) -> str:
    """Serialise ``node`` to ASCII snapshot text (trailing newline included)."""
    return json.dumps(encode(node), indent=indent) + "\n"


def loads(text: str) -> TypeSet:
    """Parse snapshot text produced by :func:`dumps`.

    Raises:
        SnapshotDecodeError: If ``text`` is not JSON or not a valid snapshot.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotDecodeError(f"snapshot is not valid JSON: {exc}") from exc
    return decode(data)
