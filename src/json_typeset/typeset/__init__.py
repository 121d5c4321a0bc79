"""Typeset subpackage: the observed-shape tree and its merge algorithm.

Re-exports the public API for the typeset module:
- TypeSet: dataclass recording every kind of value seen at one JSON path
- ObservedType: StrEnum of the seven observable kinds
- TypeSetMerger: folds decoded JSON values into a TypeSet tree
- merge: module-level convenience around a shared TypeSetMerger
"""

from json_typeset.typeset.merge import TypeSetMerger, merge
from json_typeset.typeset.nodes import ObservedType, TypeSet

__all__ = ["ObservedType", "TypeSet", "TypeSetMerger", "merge"]
