"""Generic Tree Differ.

Walks two node trees side by side, pairs collection elements by identity
and turns every divergence into a classified change.
"""

from collections.abc import Collection
from functools import partial

from rpcdiff.types import Change

from .classifiers import DiffContext, reference_compare, shape_compare
from .identity import key_map, reference_identity
from .nodes import COLLECTION_KINDS, Embedded, Scalar, _Node, is_reference, shape_of
from .rules import classify


class TreeDiffer:
    """Recursive comparison of two node trees.

    One instance accumulates nothing between calls; ``compare`` returns the
    changes found under the given path.
    """

    def __init__(self, context: DiffContext):
        self.context = context
        self._resolve_old = partial(reference_identity, document=context.old)
        self._resolve_new = partial(reference_identity, document=context.new)

    def compare(
        self,
        old: _Node | None,
        new: _Node | None,
        path: list[str],
        exclude: Collection[str] = (),
    ) -> list[Change]:
        """Compare two nodes located at ``path``.

        Args:
            old: Node from the old document, or None if absent.
            new: Node from the new document, or None if absent.
            path: Structural path of both nodes from the document root.
            exclude: Field names skipped at this level because the caller
                handles them separately.

        Returns:
            Changes in traversal order.
        """
        if old is None and new is None:
            return []

        # Nothing to pair on the missing side.
        if old is None or new is None:
            return [self._change(path, old, new)]

        if isinstance(old, Embedded) and isinstance(new, Embedded):
            return self._compare_scalars(path, old.inner, new.inner)

        changes: list[Change] = []

        if shape_of(old) != shape_of(new):
            reference = is_reference(old) or is_reference(new)
            comparator = reference_compare if reference else shape_compare
            tag, _ = classify(path)
            changes.append(comparator(path, old.plain(), new.plain(), tag=tag, context=self.context))
            if old.kind != new.kind or old.kind not in COLLECTION_KINDS:
                return changes

        if old.kind in COLLECTION_KINDS:
            changes.extend(self._compare_collections(old, new, path, exclude))
            return changes

        if isinstance(old, Scalar) and isinstance(new, Scalar):
            changes.extend(self._compare_scalars(path, old, new))
        return changes

    def _compare_collections(
        self,
        old: _Node,
        new: _Node,
        path: list[str],
        exclude: Collection[str],
    ) -> list[Change]:
        old_map = key_map(old, self._resolve_old)
        new_map = key_map(new, self._resolve_new)
        changes: list[Change] = []

        for key, old_value in old_map.items():
            if key in exclude:
                continue
            new_value = new_map.get(key)
            changes.extend(self.compare(old_value, new_value, path + [key]))

        for key, new_value in new_map.items():
            if key in exclude or key in old_map:
                continue
            changes.append(self._change(path + [key], None, new_value))

        return changes

    def _compare_scalars(self, path: list[str], old: Scalar, new: Scalar) -> list[Change]:
        if type(old.value) is type(new.value) and old.value == new.value:
            return []

        tag, comparator = classify(path)
        if path and path[-1] == "$ref" and old.value is not None and new.value is not None:
            comparator = reference_compare
        return [comparator(path, old.value, new.value, tag=tag, context=self.context)]

    def _change(self, path: list[str], old: _Node | None, new: _Node | None) -> Change:
        tag, comparator = classify(path)
        return comparator(
            path,
            old.plain() if old is not None else None,
            new.plain() if new is not None else None,
            tag=tag,
            context=self.context,
        )
