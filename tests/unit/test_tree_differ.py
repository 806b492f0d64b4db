"""Unit tests for the node model, identity resolver and tree differ."""

from functools import partial

import pytest

from rpcdiff.types import (
    ChangeObject,
    ChangeType,
    Criticality,
    Document,
    Method,
    Reference,
    Schema,
)
from rpcdiff.modules.diff_engine import DiffContext, TreeDiffer
from rpcdiff.modules.diff_engine.identity import identity_key, key_map, reference_identity
from rpcdiff.modules.diff_engine.nodes import (
    Embedded,
    KeyedCollection,
    OrderedCollection,
    Record,
    Scalar,
    to_node,
)


@pytest.fixture
def differ():
    document = Document.model_validate({"openrpc": "1.2.6", "info": {"title": "t", "version": "1"}})
    return TreeDiffer(DiffContext(old=document, new=document))


class TestNodes:
    """Tests for mapping document values onto nodes."""

    def test_model_becomes_record_in_field_order(self):
        """Models map to records keyed by their JSON names."""
        node = to_node(Method(name="user.get"))
        assert isinstance(node, Record)
        assert node.type_name == "Method"
        assert node.identity == "name"
        assert list(node.fields)[:2] == ["name", "paramStructure"]

    def test_unset_fields_are_omitted(self):
        """Optional fields left as None do not appear."""
        node = to_node(Method(name="user.get"))
        assert "summary" not in node.fields
        assert "result" not in node.fields

    def test_type_tag_is_embedded(self):
        """The schema type newtype maps to an embedded scalar."""
        node = to_node(Schema(type="integer"))
        assert isinstance(node.fields["type"], Embedded)
        assert node.fields["type"].plain() == "integer"

    def test_type_list_is_embedded(self):
        """A list of type names is one embedded value."""
        node = to_node(Schema(type=["string", "null"]))
        assert isinstance(node.fields["type"], Embedded)
        assert node.fields["type"].plain() == ["string", "null"]

    def test_undeclared_keywords_are_kept(self):
        """Schema keywords without a declared field still become fields."""
        schema = Schema.model_validate({"type": "integer", "minimum": 1, "x-internal": {"owner": "core"}})
        node = to_node(schema)
        assert node.fields["minimum"].plain() == 1
        assert isinstance(node.fields["x-internal"], KeyedCollection)
        assert list(node.fields)[-2:] == ["minimum", "x-internal"]

    def test_required_is_a_set(self):
        """A schema's required list is compared as a set."""
        node = to_node(Schema(required=["a", "b"]))
        required = node.fields["required"]
        assert isinstance(required, OrderedCollection)
        assert required.as_set

    def test_containers(self):
        """Plain dicts and lists map to keyed and ordered collections."""
        assert isinstance(to_node({"a": 1}), KeyedCollection)
        assert isinstance(to_node([1]), OrderedCollection)
        assert isinstance(to_node("x"), Scalar)
        assert to_node(None) is None

    def test_plain_round_trip(self):
        """plain() returns the JSON shape of the value."""
        node = to_node(Schema(type="object", required=["id"]))
        assert node.plain() == {"type": "object", "required": ["id"]}


class TestIdentity:
    """Tests for pairing collection elements."""

    def test_record_identity(self):
        """Records with an identity field are keyed by it."""
        assert identity_key(to_node(Method(name="user.get")), 3) == "user.get"

    def test_positional_fallback(self):
        """Elements without identity are keyed by position."""
        assert identity_key(to_node(Reference(ref="#/components/schemas/X")), 3) == "3"
        assert identity_key(to_node(5), 1) == "1"

    def test_set_members_keyed_by_value(self):
        """Members of a set are keyed by their value."""
        assert identity_key(to_node("name"), 0, as_set=True) == "name"

    def test_key_map_of_methods(self):
        """A method list is keyed by method name."""
        node = to_node([Method(name="a"), Method(name="b")])
        assert list(key_map(node)) == ["a", "b"]

    def test_reference_keyed_by_target_identity(self):
        """References to shared descriptors and errors take their target's key."""
        document = Document.model_validate({
            "openrpc": "1.2.6",
            "info": {"title": "t", "version": "1"},
            "components": {
                "contentDescriptors": {"UserId": {"name": "id", "schema": {"type": "integer"}}},
                "errors": {"NotFound": {"code": 404, "message": "Not found"}},
            },
        })
        resolve = partial(reference_identity, document=document)

        descriptor = to_node(Reference(ref="#/components/contentDescriptors/UserId"))
        error = to_node(Reference(ref="#/components/errors/NotFound"))
        dangling = to_node(Reference(ref="#/components/contentDescriptors/Missing"))
        schema = to_node(Reference(ref="#/components/schemas/User"))

        assert identity_key(descriptor, 0, resolve=resolve) == "id"
        assert identity_key(error, 0, resolve=resolve) == "404"
        assert identity_key(dangling, 2, resolve=resolve) == "2"
        assert identity_key(schema, 3, resolve=resolve) == "3"
        assert identity_key(descriptor, 1) == "1"


class TestTreeDiffer:
    """Tests for the generic tree differ."""

    def test_equal_scalars(self, differ):
        """Equal scalars produce no change."""
        assert differ.compare(to_node(1), to_node(1), ["x"]) == []

    def test_changed_scalar(self, differ):
        """Unequal scalars produce one changed record."""
        changes = differ.compare(to_node(1), to_node(2), ["x"])
        assert len(changes) == 1
        assert changes[0].type == ChangeType.CHANGED
        assert changes[0].object == ChangeObject.OTHER
        assert changes[0].old == 1
        assert changes[0].new == 2

    def test_bool_is_not_int(self, differ):
        """Scalar comparison is sensitive to type."""
        changes = differ.compare(to_node(1), to_node(True), ["x"])
        assert len(changes) == 1

    def test_added_value_does_not_recurse(self, differ):
        """A value present on one side only is a single change."""
        changes = differ.compare(None, to_node({"a": 1, "b": 2}), ["x"])
        assert len(changes) == 1
        assert changes[0].type == ChangeType.ADDED
        assert changes[0].new == {"a": 1, "b": 2}

    def test_removed_value(self, differ):
        """A value missing on the new side is removed."""
        changes = differ.compare(to_node("v"), None, ["x"])
        assert len(changes) == 1
        assert changes[0].type == ChangeType.REMOVED
        assert changes[0].old == "v"

    def test_pairs_by_identity_not_position(self, differ):
        """Reordering identified elements is not a change."""
        old = to_node([Method(name="a"), Method(name="b")])
        new = to_node([Method(name="b"), Method(name="a")])
        assert differ.compare(old, new, ["methods"]) == []

    def test_positional_lists(self, differ):
        """Lists without identity are compared by position."""
        changes = differ.compare(to_node([1, 2]), to_node([2, 1]), ["x"])
        assert [change.path for change in changes] == [["x", "0"], ["x", "1"]]

    def test_set_comparison(self, differ):
        """Set members are matched by value regardless of order."""
        old = to_node(Schema(required=["a", "b"]))
        new = to_node(Schema(required=["b", "a", "c"]))
        changes = differ.compare(old, new, ["components", "schemas", "S"])
        assert len(changes) == 1
        assert changes[0].path == ["components", "schemas", "S", "required", "c"]
        assert changes[0].type == ChangeType.ADDED

    def test_embedded_compared_once(self, differ):
        """A type tag change is one change carrying the inner strings."""
        old = to_node(Schema(type="integer"))
        new = to_node(Schema(type="string"))
        changes = differ.compare(old, new, ["components", "schemas", "S"])
        assert len(changes) == 1
        assert changes[0].path == ["components", "schemas", "S", "type"]
        assert changes[0].old == "integer"
        assert changes[0].new == "string"
        assert changes[0].criticality == Criticality.BREAKING

    def test_exclusion(self, differ):
        """Excluded fields are skipped entirely."""
        changes = differ.compare(to_node({"a": 1, "b": 1}), to_node({"a": 2, "b": 2}), ["x"], exclude={"a"})
        assert len(changes) == 1
        assert changes[0].path == ["x", "b"]

    def test_scalar_collection_mismatch(self, differ):
        """A scalar turned into a list is one non breaking change."""
        changes = differ.compare(to_node(1), to_node([1]), ["x"])
        assert len(changes) == 1
        assert changes[0].type == ChangeType.CHANGED
        assert changes[0].criticality == Criticality.NON_BREAKING

    def test_object_to_reference(self, differ):
        """Swapping an inline schema for a reference is breaking."""
        old = to_node(Schema(type="object"))
        new = to_node(Reference(ref="#/components/schemas/X"))
        path = ["methods", "m", "params", "p", "schema"]
        changes = differ.compare(old, new, path)

        assert changes[0].path == path
        assert changes[0].type == ChangeType.CHANGED
        assert changes[0].object == ChangeObject.METHOD_PARAM_TYPE
        assert all(change.criticality == Criticality.BREAKING for change in changes)

    def test_reference_target_changed(self, differ):
        """Pointing a reference elsewhere is breaking, even where other changes are not."""
        old = to_node(Reference(ref="#/components/schemas/A"))
        new = to_node(Reference(ref="#/components/schemas/B"))
        changes = differ.compare(old, new, ["methods", "m", "params", "p"])
        assert len(changes) == 1
        assert changes[0].path == ["methods", "m", "params", "p", "$ref"]
        assert changes[0].criticality == Criticality.BREAKING
