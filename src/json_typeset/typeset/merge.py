"""TypeSetMerger: folds decoded JSON values into a TypeSet tree in place.

Uses recursive dispatch over the Python types produced by ``json.loads``.
Every merge reports whether the target tree strictly grew, which lets callers
skip persisting a schema that has already stabilised.

Arrays are not positional: every element of every array observed at a path is
merged into the single ``TypeSet.array`` node.  Objects mark already-known
fields missing from the incoming value as ``absent`` before merging the fields
that are present, so a field is never marked absent before it first appears.

Creating a node's field mapping or array-element node also counts as growth,
so ``merge(TypeSet(), {})`` returns True.  This departs from reporting only
the OR of the absence phase and the field phase, which would return False
while the tree still gained an ``object`` branch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from json_typeset.typeset.nodes import TypeSet

# Type alias for valid JSON values
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


def _set_flag(node: TypeSet, name: str) -> bool:
    """Set a boolean flag on ``node``; return True if it was previously unset."""
    if getattr(node, name):
        return False
    setattr(node, name, True)
    return True


@dataclass
class TypeSetMerger:
    """Merges JSON values into TypeSet nodes.

    The dispatch order is critical: bool MUST be checked before int because
    bool is a subclass of int in Python (isinstance(True, int) is True).

    Example::
        merger = TypeSetMerger()
        root = TypeSet()
        merger.merge(root, {"id": 1})   # True  -> root.object["id"].number
        merger.merge(root, {"id": 2})   # False -> nothing new
    """

    def merge(self, node: TypeSet, value: JsonValue) -> bool:
        """Fold ``value`` into ``node``.

        Args:
            node:  The TypeSet to update in place.
            value: Any decoded JSON value (dict, list, str, int, float, bool, None).

        Returns:
            True if ``node`` or any of its descendants gained a flag, a field or
            a structural branch; False if the value was already fully covered.

        Raises:
            TypeError: If value is not a valid JSON type.
        """
        # bool before int: bool subclasses int
        if isinstance(value, bool):
            return _set_flag(node, "bool")

        if isinstance(value, dict):
            return self._merge_object(node, value)

        if isinstance(value, list):
            return self._merge_array(node, value)

        if isinstance(value, str):
            return _set_flag(node, "string")

        if isinstance(value, (int, float)):
            return _set_flag(node, "number")

        if value is None:
            return _set_flag(node, "null")

        raise TypeError(f"Unsupported JSON value type: {type(value)!r}")

    def _merge_array(self, node: TypeSet, arr: list[Any]) -> bool:
        """Merge every element of ``arr`` into the shared element node.

        An empty array marks the element node ``absent``.  Non-empty arrays are
        merged element by element without short-circuiting, since a later
        element may still contribute a new flag.
        """
        created = node.array is None
        if node.array is None:
            node.array = TypeSet()
        elements = node.array

        if not arr:
            return _set_flag(elements, "absent") or created

        changed = created
        for item in arr:
            changed = self.merge(elements, item) or changed
        return changed

    def _merge_object(self, node: TypeSet, obj: dict[str, Any]) -> bool:
        """Merge an object's fields into the field mapping.

        Phase 1 marks every known field missing from ``obj`` as absent.
        Phase 2 merges each present field into its (possibly new) child.
        """
        created = node.object is None
        if node.object is None:
            node.object = {}
        fields = node.object

        changed = created
        for name, child in fields.items():
            if name not in obj:
                changed = _set_flag(child, "absent") or changed

        for name, val in obj.items():
            child = fields.get(name)
            if child is None:
                child = fields[name] = TypeSet()
            changed = self.merge(child, val) or changed

        return changed


# Module-level merger (stateless, safe to share)
_merger = TypeSetMerger()


def merge(node: TypeSet, value: JsonValue) -> bool:
    """Fold ``value`` into ``node`` and report whether the tree grew.

    Args:
        node:  Root (or any) TypeSet to update in place.
        value: A decoded JSON value.

    Returns:
        True if the tree strictly grew, False otherwise.
    """
    return _merger.merge(node, value)
