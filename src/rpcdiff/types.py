"""Core type definitions for rpcdiff.

All types use Pydantic. The OpenRPC document model mirrors the JSON
wire format through field aliases, so paths produced by the diff engine
use the same names as the documents themselves.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, RootModel, Tag


# ============================================================================
# Enums
# ============================================================================


class Criticality(str, Enum):
    """Severity of a single change, or of a whole diff."""

    BREAKING = "BREAKING"
    DANGEROUS = "DANGEROUS"
    NON_BREAKING = "NON_BREAKING"

    @property
    def rank(self) -> int:
        return _CRITICALITY_RANK[self]

    @property
    def label(self) -> str:
        """Lower-case label used in text reports."""
        return _CRITICALITY_LABEL[self]


_CRITICALITY_RANK = {
    Criticality.NON_BREAKING: 0,
    Criticality.DANGEROUS: 1,
    Criticality.BREAKING: 2,
}

_CRITICALITY_LABEL = {
    Criticality.BREAKING: "breaking",
    Criticality.DANGEROUS: "dangerous",
    Criticality.NON_BREAKING: "non breaking",
}


class ChangeType(str, Enum):
    """Kind of divergence found at a path."""

    ADDED = "ADDED"
    REMOVED = "REMOVED"
    CHANGED = "CHANGED"


class ChangeObject(str, Enum):
    """Semantic tag: which part of the contract changed."""

    OPEN_RPC_VERSION = "OPEN_RPC_VERSION"

    SCHEMA_INFO = "SCHEMA_INFO"
    SCHEMA_VERSION = "SCHEMA_VERSION"
    SCHEMA_SERVERS = "SCHEMA_SERVERS"

    METHOD = "METHOD"
    METHOD_TAGS = "METHOD_TAGS"
    METHOD_SUMMARY = "METHOD_SUMMARY"
    METHOD_DESC = "METHOD_DESC"
    METHOD_PARAM_STRUCTURE = "METHOD_PARAM_STRUCTURE"

    METHOD_PARAM = "METHOD_PARAM"
    METHOD_PARAM_REQUIRED = "METHOD_PARAM_REQUIRED"
    METHOD_PARAM_TYPE = "METHOD_PARAM_TYPE"  # type + ref + items type + items ref
    METHOD_PARAM_DESC = "METHOD_PARAM_DESC"

    METHOD_RESULT = "METHOD_RESULT"
    METHOD_RESULT_DESC = "METHOD_RESULT_DESC"
    METHOD_RESULT_TYPE = "METHOD_RESULT_TYPE"

    METHOD_ERROR = "METHOD_ERROR"
    METHOD_ERROR_MSG = "METHOD_ERROR_MSG"

    COMPONENTS_SCHEMA = "COMPONENTS_SCHEMA"
    COMPONENTS_SCHEMA_REQUIRED = "COMPONENTS_SCHEMA_REQUIRED"
    COMPONENTS_SCHEMA_PROPERTY = "COMPONENTS_SCHEMA_PROPERTY"
    COMPONENTS_SCHEMA_PROPERTY_DESC = "COMPONENTS_SCHEMA_PROPERTY_DESC"
    COMPONENTS_SCHEMA_PROPERTY_TYPE = "COMPONENTS_SCHEMA_PROPERTY_TYPE"

    COMPONENTS_DESCRIPTOR = "COMPONENTS_DESCRIPTOR"
    COMPONENTS_DESCRIPTOR_SUMMARY = "COMPONENTS_DESCRIPTOR_SUMMARY"
    COMPONENTS_DESCRIPTOR_TYPE = "COMPONENTS_DESCRIPTOR_TYPE"

    OTHER = "OTHER"


class ParamStructure(str, Enum):
    """How a method accepts its arguments."""

    BY_POSITION = "by-position"
    BY_NAME = "by-name"
    EITHER = "either"


# ============================================================================
# OpenRPC Document Model
# ============================================================================


class OpenRPCModel(BaseModel):
    """Base for every document entity.

    ``identity_field`` names the field used to pair list elements across
    two document versions. ``set_fields`` names list fields whose scalar
    items are compared as a set (keyed by value).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    identity_field: ClassVar[str | None] = None
    set_fields: ClassVar[frozenset[str]] = frozenset()


class Reference(OpenRPCModel):
    """A pointer to a named entry under ``components``."""

    ref: str = Field(alias="$ref")

    @property
    def target(self) -> str:
        """Name of the referenced component (last pointer segment)."""
        return self.ref.rsplit("/", 1)[-1]


def _ref_discriminator(value: Any) -> str:
    if isinstance(value, dict):
        return "ref" if "$ref" in value else "inline"
    return "ref" if isinstance(value, Reference) else "inline"


class TypeTag(RootModel[Union[str, list[str]]]):
    """JSON type of a schema: one type name, or a list of them."""

    model_config = ConfigDict(frozen=True)


class Schema(OpenRPCModel):
    """An inline JSON schema.

    Keywords not declared here (minimum, pattern, additionalProperties,
    ...) are kept as extra fields so they are compared too.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    set_fields: ClassVar[frozenset[str]] = frozenset({"required"})

    id: str | None = Field(default=None, alias="$id")
    title: str | None = None
    description: str | None = None
    type: TypeTag | None = None
    format: str | None = None
    required: list[str] = Field(default_factory=list)
    properties: dict[str, "SchemaOrReference"] | None = None
    items: "SchemaOrReference | None" = None
    one_of: list["SchemaOrReference"] | None = Field(default=None, alias="oneOf")
    any_of: list["SchemaOrReference"] | None = Field(default=None, alias="anyOf")
    all_of: list["SchemaOrReference"] | None = Field(default=None, alias="allOf")
    enum: list[Any] | None = None
    default: Any = None


SchemaOrReference = Annotated[
    Union[Annotated[Reference, Tag("ref")], Annotated[Schema, Tag("inline")]],
    Discriminator(_ref_discriminator),
]

Schema.model_rebuild()


class ContentDescriptor(OpenRPCModel):
    """A named, typed value: method parameter or result."""

    identity_field: ClassVar[str | None] = "name"

    name: str
    summary: str | None = None
    description: str | None = None
    required: bool = False
    schema_: SchemaOrReference = Field(alias="schema")
    deprecated: bool | None = None


ContentDescriptorOrReference = Annotated[
    Union[Annotated[Reference, Tag("ref")], Annotated[ContentDescriptor, Tag("inline")]],
    Discriminator(_ref_discriminator),
]


class Error(OpenRPCModel):
    """An application error a method may return."""

    identity_field: ClassVar[str | None] = "code"

    code: int
    message: str
    data: Any = None


ErrorOrReference = Annotated[
    Union[Annotated[Reference, Tag("ref")], Annotated[Error, Tag("inline")]],
    Discriminator(_ref_discriminator),
]


class MethodTag(OpenRPCModel):
    """A method tag."""

    identity_field: ClassVar[str | None] = "name"

    name: str
    summary: str | None = None
    description: str | None = None


class Method(OpenRPCModel):
    """A single RPC method."""

    identity_field: ClassVar[str | None] = "name"

    name: str
    summary: str | None = None
    description: str | None = None
    tags: list[MethodTag] | None = None
    param_structure: ParamStructure = Field(
        default=ParamStructure.EITHER,
        alias="paramStructure",
    )
    params: list[ContentDescriptorOrReference] = Field(default_factory=list)
    result: ContentDescriptorOrReference | None = None
    errors: list[ErrorOrReference] | None = None
    deprecated: bool | None = None
    external_docs: dict[str, Any] | None = Field(default=None, alias="externalDocs")
    examples: list[Any] | None = None


class Server(OpenRPCModel):
    """A server the API is served from."""

    identity_field: ClassVar[str | None] = "name"

    name: str | None = None
    url: str
    summary: str | None = None
    description: str | None = None


class Info(OpenRPCModel):
    """Document metadata."""

    title: str
    version: str
    description: str | None = None
    terms_of_service: str | None = Field(default=None, alias="termsOfService")
    contact: dict[str, Any] | None = None
    license: dict[str, Any] | None = None


class Components(OpenRPCModel):
    """Shared, named definitions."""

    schemas: dict[str, SchemaOrReference] | None = None
    content_descriptors: dict[str, ContentDescriptor] | None = Field(
        default=None,
        alias="contentDescriptors",
    )
    errors: dict[str, Error] | None = None
    examples: dict[str, Any] | None = None


class Document(OpenRPCModel):
    """A parsed OpenRPC document."""

    openrpc: str
    info: Info
    servers: list[Server] | None = None
    methods: list[Method] = Field(default_factory=list)
    components: Components | None = None
    external_docs: dict[str, Any] | None = Field(default=None, alias="externalDocs")

    @property
    def schemas(self) -> dict[str, Schema | Reference]:
        """Shared schemas by name (empty when there are no components)."""
        if self.components is None or self.components.schemas is None:
            return {}
        return self.components.schemas

    @property
    def content_descriptors(self) -> dict[str, ContentDescriptor]:
        """Shared content descriptors by name."""
        if self.components is None or self.components.content_descriptors is None:
            return {}
        return self.components.content_descriptors


# ============================================================================
# Diff Types
# ============================================================================


class DiffOptions(BaseModel):
    """Options controlling a comparison."""

    compare_meta: bool = Field(
        default=False,
        description="Include info and servers sections as non-breaking changes",
    )


class Change(BaseModel):
    """A single classified difference between two documents."""

    model_config = ConfigDict(frozen=True)

    path: list[str] = Field(description="Structural path from the document root")
    type: ChangeType
    object: ChangeObject = Field(description="Semantic tag of the changed element")
    criticality: Criticality
    old: Any = None
    new: Any = None


class Diff(BaseModel):
    """Result of comparing two documents."""

    criticality: Criticality = Criticality.NON_BREAKING
    changes: list[Change] = Field(default_factory=list)

    def by_criticality(self, level: Criticality) -> list[Change]:
        """Changes of one severity level, in traversal order."""
        return [change for change in self.changes if change.criticality == level]
