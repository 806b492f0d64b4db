"""Value model the tree differ walks.

Every document entity is mapped once, at the boundary, onto a closed set
of node variants. The differ only ever inspects these variants, never the
document model classes themselves.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel

from rpcdiff.types import OpenRPCModel


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    def plain(self) -> Any:
        """Return the JSON-compatible value this node was built from."""
        raise NotImplementedError


class Scalar(_Node):
    """A leaf value: string, number, boolean or null."""

    kind: Literal["scalar"] = "scalar"
    value: Any = None

    def plain(self) -> Any:
        return self.value


class Embedded(_Node):
    """A newtype wrapping exactly one scalar (e.g. a schema type tag).

    A newtype over a list of scalars (a type union) is still compared as
    one value; ``inner`` then holds the list.
    """

    kind: Literal["embedded"] = "embedded"
    type_name: str
    inner: Scalar

    def plain(self) -> Any:
        return self.inner.value


class Record(_Node):
    """A document entity with named fields in declaration order."""

    kind: Literal["record"] = "record"
    type_name: str
    identity: str | None = None
    fields: dict[str, "Node"] = Field(default_factory=dict)

    @property
    def identity_value(self) -> Any:
        """Value of the identity field, or None when there is none."""
        if self.identity is None:
            return None
        node = self.fields.get(self.identity)
        if isinstance(node, (Scalar, Embedded)):
            return node.plain()
        return None

    def plain(self) -> dict[str, Any]:
        return {name: node.plain() for name, node in self.fields.items()}


class KeyedCollection(_Node):
    """A mapping of names to values."""

    kind: Literal["keyed"] = "keyed"
    entries: dict[str, "Node"] = Field(default_factory=dict)

    def plain(self) -> dict[str, Any]:
        return {key: node.plain() for key, node in self.entries.items()}


class OrderedCollection(_Node):
    """A list. ``as_set`` marks lists of scalars compared by value."""

    kind: Literal["ordered"] = "ordered"
    items: list["Node"] = Field(default_factory=list)
    as_set: bool = False

    def plain(self) -> list[Any]:
        return [node.plain() for node in self.items]


Node = Annotated[
    Union[Scalar, Embedded, Record, KeyedCollection, OrderedCollection],
    Field(discriminator="kind"),
]

Record.model_rebuild()
KeyedCollection.model_rebuild()
OrderedCollection.model_rebuild()

COLLECTION_KINDS = frozenset({"record", "keyed", "ordered"})


def shape_of(node: _Node) -> str:
    """Shape class of a node; records and newtypes include their type."""
    if isinstance(node, Record):
        return f"record:{node.type_name}"
    if isinstance(node, Embedded):
        return f"embedded:{node.type_name}"
    return node.kind


def is_reference(node: _Node | None) -> bool:
    return isinstance(node, Record) and node.type_name == "Reference"


def to_node(value: Any, as_set: bool = False) -> _Node | None:
    """Map a document value onto the node model.

    Args:
        value: A document model instance, container or scalar.
        as_set: Treat a list value as a set of scalars.

    Returns:
        The node, or None when the value is absent.
    """
    if value is None:
        return None

    if isinstance(value, RootModel):
        root = value.root
        if isinstance(root, (list, tuple)) and not any(isinstance(item, (dict, list, BaseModel)) for item in root):
            return Embedded(type_name=type(value).__name__, inner=Scalar(value=[_scalar(item) for item in root]))
        if isinstance(root, (dict, list, tuple, BaseModel)):
            return to_node(root)
        return Embedded(type_name=type(value).__name__, inner=Scalar(value=_scalar(root)))

    if isinstance(value, BaseModel):
        return _record(value)

    if isinstance(value, dict):
        return KeyedCollection(
            entries={str(key): to_node(item) or Scalar() for key, item in value.items()}
        )

    if isinstance(value, (list, tuple)):
        return OrderedCollection(
            items=[to_node(item) or Scalar() for item in value],
            as_set=as_set,
        )

    return Scalar(value=_scalar(value))


def _record(model: BaseModel) -> Record:
    identity = None
    set_fields: frozenset[str] = frozenset()
    if isinstance(model, OpenRPCModel):
        identity = model.identity_field
        set_fields = model.set_fields

    fields: dict[str, _Node] = {}
    for name, info in type(model).model_fields.items():
        node = to_node(getattr(model, name), as_set=name in set_fields)
        # unset optional fields are omitted, like omitempty
        if node is None:
            continue
        fields[info.alias or name] = node

    # undeclared keywords kept by models that allow extra fields
    for name, value in (model.model_extra or {}).items():
        node = to_node(value)
        if node is not None:
            fields[name] = node

    return Record(type_name=type(model).__name__, identity=identity, fields=fields)


def _scalar(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value
