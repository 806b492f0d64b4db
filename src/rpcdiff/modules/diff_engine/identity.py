"""Identity Resolver.

Pairs elements of two versions of a collection by a stable key instead
of by position.
"""

from collections.abc import Callable

from rpcdiff.types import Document

from .nodes import Embedded, KeyedCollection, OrderedCollection, Record, Scalar, _Node, is_reference

# Maps a "$ref" pointer to the identity of the component it points at.
RefResolver = Callable[[str], str | None]


def reference_identity(ref: str, document: Document) -> str | None:
    """Identity of the shared component a reference points at.

    Content descriptors resolve to their name and errors to their code,
    so a ``$ref`` parameter pairs with an inline parameter of the same
    name. Anything else (or a dangling reference) has no identity.
    """
    section, _, name = ref.removeprefix("#/components/").partition("/")
    if section == "contentDescriptors":
        descriptor = document.content_descriptors.get(name)
        return descriptor.name if descriptor is not None else None
    if section == "errors" and document.components and document.components.errors:
        error = document.components.errors.get(name)
        return str(error.code) if error is not None else None
    return None


def identity_key(
    item: _Node,
    index: int,
    as_set: bool = False,
    resolve: RefResolver | None = None,
) -> str:
    """Key used to pair a list element with its counterpart.

    Args:
        item: The list element.
        index: Its position in the list.
        as_set: The list is a set of scalars keyed by value.
        resolve: Resolves references to the identity of their target.

    Returns:
        The identity value for records that declare one, the target's
        identity for resolvable references, the scalar value for set
        members, otherwise the positional index.
    """
    if isinstance(item, Record):
        value = item.identity_value
        if value is None and resolve is not None and is_reference(item):
            ref = item.fields.get("$ref")
            if ref is not None:
                value = resolve(ref.plain())
        if value is not None:
            return str(value)
    elif as_set and isinstance(item, (Scalar, Embedded)):
        value = item.plain()
        if value is not None:
            return str(value)
    return str(index)


def key_map(node: _Node, resolve: RefResolver | None = None) -> dict[str, _Node]:
    """Children of a collection node keyed for pairing.

    Duplicate identity keys are a precondition violation; the last one wins.
    """
    if isinstance(node, Record):
        return dict(node.fields)
    if isinstance(node, KeyedCollection):
        return dict(node.entries)
    if isinstance(node, OrderedCollection):
        return {
            identity_key(item, index, node.as_set, resolve): item
            for index, item in enumerate(node.items)
        }
    return {}
