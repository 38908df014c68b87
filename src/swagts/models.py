"""Canonical Pydantic models shared across all swagts modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into four groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`NamingConfig`, :class:`OutputConfig` and :class:`GlobalConfig`.

**Input models** -- the typed view of the OpenAPI subset the resolvers read:
    :class:`SchemaKind`, :class:`RawSchema`, :class:`RawMediaType`,
    :class:`RawParameter`, :class:`RawRequestBody`, :class:`RawResponse`,
    :class:`RawOperation` and :class:`RawDocument`.

**IR models** -- produced by the resolvers and consumed by the emitter:
    :class:`ModelKind`, :class:`Model`, :class:`Property`, :class:`HTTPMethod`,
    :class:`ParameterLocation`, :class:`MethodParameter`, :class:`MethodBody`,
    :class:`MethodReturn`, :class:`Method` and :class:`Document`.

**Diagnostics and results**:
    :class:`UnresolvedReference`, :class:`OperationError`,
    :class:`Diagnostics`, :class:`ConversionErrorKind`,
    :class:`ConversionError`, :class:`ConversionSuccess`,
    :class:`ConversionFailure` and the :data:`ConversionResult` union.

IR models are frozen and serialise with camelCase aliases
(``originalName``, ``schemaPointer``, ``arrayItemModel`` ...) so that
``model_dump(by_alias=True)`` yields exactly the shape the emitter expects.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# --- Config ---


class NamingConfig(BaseModel):
    """Rules applied by the name deriver when turning paths into method names.

    ``ignored_segments`` lists path segments that are dropped wherever they
    appear (e.g. a common ``api`` prefix or a vendor name baked into every
    path) before the remaining segments are camel-cased.
    """

    ignored_segments: list[str] = Field(
        default_factory=lambda: ["api"],
        description="Path segments removed from derived method names",
    )


class OutputConfig(BaseModel):
    """Default output preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )
    by_alias: bool = Field(
        default=True, description="Serialise the IR with camelCase field names"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/swagts/config.json``.

    Loaded and saved by :func:`~swagts.config.load_global_config` and
    :func:`~swagts.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~swagts.config.resolve_config`
    for the full precedence chain.
    """

    naming: NamingConfig = Field(default_factory=NamingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Input Models ---


class SchemaKind(str, enum.Enum):
    """Shape of a raw schema as seen by the resolvers."""

    REFERENCE = "reference"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"
    PRIMITIVE = "primitive"


class RawSchema(BaseModel):
    """The subset of a JSON-Schema object the resolvers read.

    Unknown keywords (``format``, ``description``, ``allOf`` ...) are kept in
    ``model_extra`` and otherwise ignored.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: Optional[str] = None
    ref: Optional[str] = Field(default=None, alias="$ref")
    enum: Optional[list[Any]] = None
    properties: Optional[dict[str, RawSchema]] = None
    items: Optional[RawSchema] = None
    required: list[str] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _collapse_type_array(cls, value: Any) -> Any:
        # OpenAPI 3.1 allows ["string", "null"]
        if isinstance(value, list):
            non_null = [t for t in value if t != "null"]
            return non_null[0] if non_null else None
        return value

    @field_validator("required", mode="before")
    @classmethod
    def _ignore_non_list_required(cls, value: Any) -> Any:
        # Swagger 2 style ``required: true`` on a property carries no names
        if not isinstance(value, list):
            return []
        return value

    @property
    def kind(self) -> SchemaKind:
        """Classify the schema.

        A declared ``object``/``array`` type wins over ``enum``, which wins
        over ``$ref``. An untyped schema with ``properties`` is an object.
        """
        if self.type == "object":
            return SchemaKind.OBJECT
        if self.type == "array":
            return SchemaKind.ARRAY
        if self.enum is not None:
            return SchemaKind.ENUM
        if self.ref is not None:
            return SchemaKind.REFERENCE
        if self.properties is not None:
            return SchemaKind.OBJECT
        return SchemaKind.PRIMITIVE


class RawMediaType(BaseModel):
    """One entry of a ``content`` map."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    schema_: Optional[RawSchema] = Field(default=None, alias="schema")


class RawParameter(BaseModel):
    """An OpenAPI *Parameter Object* after ``$ref`` indirection."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    in_: str = Field(alias="in")
    required: bool = False
    schema_: Optional[RawSchema] = Field(default=None, alias="schema")


class RawRequestBody(BaseModel):
    """An OpenAPI *Request Body Object* after ``$ref`` indirection."""

    model_config = ConfigDict(extra="allow")

    required: Optional[bool] = None
    content: dict[str, RawMediaType] = Field(default_factory=dict)


class RawResponse(BaseModel):
    """An OpenAPI *Response Object* after ``$ref`` indirection."""

    model_config = ConfigDict(extra="allow")

    description: Optional[str] = None
    content: Optional[dict[str, RawMediaType]] = None


class RawOperation(BaseModel):
    """An OpenAPI *Operation Object*.

    ``parameters``, ``requestBody`` and the values of ``responses`` are kept
    raw because any of them may be a ``$ref`` into ``components``; the method
    resolver dereferences and validates them individually.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    summary: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: list[Any] = Field(default_factory=list)
    request_body: Optional[Any] = Field(default=None, alias="requestBody")
    responses: dict[str, Any]

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_status_keys(cls, value: Any) -> Any:
        # YAML reads unquoted 200: as an int
        if isinstance(value, dict):
            return {str(status): response for status, response in value.items()}
        return value

    @field_validator("tags", "parameters", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class RawDocument(BaseModel):
    """Validated top-level structure of an OpenAPI document.

    ``source`` keeps the original dictionary for JSON-pointer lookups into
    ``components`` (parameters, request bodies, responses).
    """

    title: Optional[str] = None
    schemas: dict[str, RawSchema]
    paths: dict[str, Any] = Field(default_factory=dict)
    source: dict[str, Any] = Field(default_factory=dict)


# --- IR Models ---


class _IRModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class ModelKind(str, enum.Enum):
    """The four shapes a resolved :class:`Model` can take."""

    OBJECT = "object"
    ARRAY = "array"
    ENUM = "enum"
    PRIMITIVE = "primitive"


class Model(_IRModel):
    """A resolved, named representation of a schema.

    A model exclusively owns its nested property sub-models and its
    ``array_item_model``; two reference sites of the same named schema each
    get an independent instance. ``schema_pointer`` is set only for
    top-level named schemas (``#/components/schemas/<key>``) and is the key
    the method resolver matches ``$ref`` strings against.

    ``back_reference`` marks the placeholder returned when resolution runs
    into a schema already being expanded higher up the same chain; it carries
    the target's name and pointer but no properties.
    """

    name: str
    original_name: str
    kind: ModelKind
    type: Optional[str] = None
    schema_pointer: Optional[str] = None
    properties: Optional[list[Property]] = None
    enum_values: Optional[list[str]] = None
    array_item_model: Optional[Model] = None
    back_reference: bool = False


class Property(_IRModel):
    """A single property of an object :class:`Model`.

    ``type`` is the declared primitive type (``integer`` normalised to
    ``number``) or, when the property declares none, the name of its
    sub-model.
    """

    name: str
    type: Optional[str] = None
    required: bool = False
    sub_model: Optional[Model] = None


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Parameter locations carried into the IR."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"


class MethodParameter(_IRModel):
    """A single parameter of a :class:`Method`."""

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    type: str = "string"


class MethodBody(_IRModel):
    """Request body of a :class:`Method`.

    Always present on a method; ``required`` is ``None`` when the operation
    declares no request body. ``model`` is the matching entry of
    :attr:`Document.models` (same object), not a copy.
    """

    required: Optional[bool] = None
    model: Optional[Model] = None


class MethodReturn(_IRModel):
    """Resolved shape of one response status's body."""

    is_array: bool = False
    status: str
    model: Optional[Model] = None


class Method(_IRModel):
    """A resolved (path, HTTP verb) operation."""

    name: str
    original_name: str
    http_method: HTTPMethod
    path: str
    summary: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    error_response_type_name: str
    body: MethodBody = Field(default_factory=MethodBody)
    success_response: Optional[MethodReturn] = None
    error_responses: list[MethodReturn] = Field(default_factory=list)
    parameters: Optional[list[MethodParameter]] = None


class Document(_IRModel):
    """Complete resolved representation of an OpenAPI document.

    Built once per conversion by :func:`~swagts.resolver.assembler.assemble`
    and handed to the emitter as-is.
    """

    title: Optional[str] = None
    methods: list[Method] = Field(default_factory=list)
    models: list[Model] = Field(default_factory=list)


# --- Diagnostics ---


class UnresolvedReference(_IRModel):
    """A ``$ref`` pointer that did not lead to a schema, component or model."""

    pointer: str
    context: str


class OperationError(_IRModel):
    """An operation that was skipped because it could not be parsed."""

    path: str
    method: Optional[str] = None
    message: str


class Diagnostics(BaseModel):
    """Resolution report collected alongside a :class:`Document`.

    Mutable on purpose: the resolvers append to it while walking the
    document. An empty report means every reference resolved and every
    operation was usable.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    unresolved: list[UnresolvedReference] = Field(default_factory=list)
    operation_errors: list[OperationError] = Field(default_factory=list)

    def record_unresolved(self, pointer: str, context: str) -> None:
        self.unresolved.append(UnresolvedReference(pointer=pointer, context=context))

    def record_operation_error(
        self, path: str, method: Optional[str], message: str
    ) -> None:
        self.operation_errors.append(
            OperationError(path=path, method=method, message=message)
        )

    @property
    def is_clean(self) -> bool:
        """Whether nothing was reported."""
        return not self.unresolved and not self.operation_errors


# --- Conversion results ---


class ConversionErrorKind(str, enum.Enum):
    """Failure categories surfaced to the collaborator layer."""

    MISSING_INPUT = "missing_input"
    MISSING_SCHEMA_DICTIONARY = "missing_schema_dictionary"
    MALFORMED_DOCUMENT = "malformed_document"


class ConversionError(_IRModel):
    """Typed error payload of a :class:`ConversionFailure`."""

    kind: ConversionErrorKind
    message: str


class ConversionSuccess(_IRModel):
    """A successfully assembled document plus its diagnostics."""

    status: Literal["ok"] = "ok"
    document: Document
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)


class ConversionFailure(_IRModel):
    """A conversion that produced no document."""

    status: Literal["error"] = "error"
    error: ConversionError
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)


ConversionResult = Annotated[
    Union[ConversionSuccess, ConversionFailure],
    Field(discriminator="status"),
]
"""Discriminated union returned by :func:`~swagts.resolver.assembler.convert`."""


RawSchema.model_rebuild()
Model.model_rebuild()
Property.model_rebuild()
