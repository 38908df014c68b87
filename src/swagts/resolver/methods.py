"""Resolve ``paths`` into :class:`~swagts.models.Method` descriptors.

One method is produced per path + HTTP verb pair, in document order. The
already-resolved model list is the only source of models: request bodies and
responses are matched by comparing their ``$ref`` string with
:attr:`~swagts.models.Model.schema_pointer`, and the matched model object
itself (not a copy) is attached to the method.

Response classification:

* ``success_response`` -- the first response whose status code lies in
  ``200..299``. A response without JSON content still counts; its model is
  absent.
* ``error_responses`` -- every response whose status code is ``>= 400``.
* Anything else (``1xx``, ``3xx``, ``default``, ``2XX``) is ignored.

Status keys are read like ``parseInt`` reads them: leading digits only.

Failure scope is a single operation. An operation that cannot be parsed
(e.g. no ``responses``) is skipped, logged and recorded in
:class:`~swagts.models.Diagnostics`; the rest of the document still
resolves. Parameters, request bodies and responses given as ``$ref`` into
``components`` are dereferenced first.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any, Optional

from swagts.exceptions import MalformedOperationError, SpecParseError
from swagts.models import (
    Diagnostics,
    HTTPMethod,
    Method,
    MethodBody,
    MethodParameter,
    MethodReturn,
    Model,
    ParameterLocation,
    RawDocument,
    RawOperation,
    RawParameter,
    RawRequestBody,
    RawResponse,
    RawSchema,
)
from swagts.parser.document import parse_operation, validate_part
from swagts.parser.refs import deref
from swagts.resolver.naming import DEFAULT_IGNORED_SEGMENTS, error_type_name, method_name

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

_STATUS_DIGITS = re.compile(r"\s*(\d+)")


def status_code(status: str) -> Optional[int]:
    """Return the numeric prefix of a response key, or ``None``.

    Example::

        status_code("201")      # 201
        status_code("default")  # None
        status_code("2XX")      # 2
    """
    match = _STATUS_DIGITS.match(str(status))
    return int(match.group(1)) if match else None


def is_success_status(status: str) -> bool:
    code = status_code(status)
    return code is not None and 200 <= code <= 299


def is_error_status(status: str) -> bool:
    code = status_code(status)
    return code is not None and code >= 400


def _merge_parameters(
    path_params: list[RawParameter],
    op_params: list[RawParameter],
) -> list[RawParameter]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field), per the OpenAPI spec.
    """
    overridden = {(param.name, param.in_) for param in op_params}
    merged = [p for p in path_params if (p.name, p.in_) not in overridden]
    merged.extend(op_params)
    return merged


class MethodResolver:
    """Resolve every operation of one document into methods.

    Args:
        document: The parsed document.
        models: The fully resolved model list; bodies and responses are
            matched against it.
        ignored_segments: Path segments dropped from derived method names.
        diagnostics: Collector for unresolved pointers and skipped
            operations. A private one is created when omitted.
    """

    def __init__(
        self,
        document: RawDocument,
        models: list[Model],
        ignored_segments: Iterable[str] = DEFAULT_IGNORED_SEGMENTS,
        diagnostics: Optional[Diagnostics] = None,
    ) -> None:
        self._document = document
        self._models = models
        self._ignored = tuple(ignored_segments)
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def resolve_all(self) -> list[Method]:
        methods: list[Method] = []

        for path, path_item in self._document.paths.items():
            if not isinstance(path_item, dict):
                logger.debug("Skipping path '%s': path item is not an object", path)
                self.diagnostics.record_operation_error(
                    path, None, f"Path item must be an object (got {type(path_item).__name__})"
                )
                continue

            path_params = path_item.get("parameters") or []

            for verb, raw_operation in path_item.items():
                try:
                    http_method = HTTPMethod(verb)
                except ValueError:
                    continue

                try:
                    methods.append(
                        self.resolve_method(path, http_method, raw_operation, path_params)
                    )
                except MalformedOperationError as exc:
                    logger.debug("Skipping %s %s: %s", verb.upper(), path, exc)
                    self.diagnostics.record_operation_error(path, verb, str(exc))

        return methods

    def resolve_method(
        self,
        path: str,
        http_method: HTTPMethod,
        raw_operation: Any,
        path_params: Any = (),
    ) -> Method:
        """Resolve a single operation.

        Raises:
            MalformedOperationError: If the operation, one of its parameters,
                its request body or one of its responses fails validation.
        """
        verb = http_method.value
        operation = parse_operation(raw_operation, path, verb)
        name = method_name(path, verb, self._ignored)

        return Method(
            name=name,
            original_name=path,
            http_method=http_method,
            path=path,
            summary=operation.summary,
            tags=operation.tags,
            error_response_type_name=error_type_name(name),
            parameters=self._parameters(operation, path_params, path, verb),
            body=self._body(operation, path, verb),
            success_response=self._success_response(operation, path, verb),
            error_responses=self._error_responses(operation, path, verb),
        )

    # ------------------------------------------------------------------ #
    # Parameters
    # ------------------------------------------------------------------ #

    def _parameters(
        self,
        operation: RawOperation,
        path_params: Any,
        path: str,
        verb: str,
    ) -> Optional[list[MethodParameter]]:
        if not isinstance(path_params, (list, tuple)):
            raise MalformedOperationError(
                "Path-level 'parameters' must be a list", path=path, method=verb
            )

        if not operation.parameters and not path_params:
            return None

        context = f"{verb.upper()} {path} parameters"
        merged = _merge_parameters(
            self._validate_parameters(path_params, context, path, verb),
            self._validate_parameters(operation.parameters, context, path, verb),
        )

        parameters: list[MethodParameter] = []
        for param in merged:
            try:
                location = ParameterLocation(param.in_)
            except ValueError:
                logger.debug("Skipping %s parameter '%s' of %s", param.in_, param.name, context)
                continue

            parameters.append(
                MethodParameter(
                    name=param.name,
                    location=location,
                    required=param.required,
                    type=_parameter_type(param.schema_),
                )
            )
        return parameters

    def _validate_parameters(
        self, raw_params: Iterable[Any], context: str, path: str, verb: str
    ) -> list[RawParameter]:
        result: list[RawParameter] = []
        for raw in raw_params:
            target = self._deref(raw, context)
            if target is None:
                continue
            result.append(validate_part(RawParameter, target, path=path, method=verb))
        return result

    # ------------------------------------------------------------------ #
    # Body and responses
    # ------------------------------------------------------------------ #

    def _body(self, operation: RawOperation, path: str, verb: str) -> MethodBody:
        if operation.request_body is None:
            return MethodBody()

        context = f"{verb.upper()} {path} requestBody"
        raw = self._deref(operation.request_body, context)
        if raw is None:
            return MethodBody()

        body = validate_part(RawRequestBody, raw, path=path, method=verb)
        media = body.content.get(JSON_CONTENT_TYPE)
        schema = media.schema_ if media is not None else None
        return MethodBody(
            required=body.required,
            model=self._match(schema.ref if schema is not None else None, context),
        )

    def _success_response(
        self, operation: RawOperation, path: str, verb: str
    ) -> Optional[MethodReturn]:
        for status, raw in operation.responses.items():
            if not is_success_status(status):
                continue
            result = self._method_return(status, raw, path, verb)
            if result is not None:
                return result
        return None

    def _error_responses(
        self, operation: RawOperation, path: str, verb: str
    ) -> list[MethodReturn]:
        results: list[MethodReturn] = []
        for status, raw in operation.responses.items():
            if not is_error_status(status):
                continue
            result = self._method_return(status, raw, path, verb)
            if result is None:
                result = MethodReturn(is_array=False, status=str(status), model=None)
            results.append(result)
        return results

    def _method_return(
        self, status: str, raw: Any, path: str, verb: str
    ) -> Optional[MethodReturn]:
        context = f"{verb.upper()} {path} {status}"
        target = self._deref(raw, context)
        if not isinstance(target, dict):
            return None

        response = validate_part(RawResponse, target, path=path, method=verb)
        schema: Optional[RawSchema] = None
        if response.content is not None:
            media = response.content.get(JSON_CONTENT_TYPE)
            schema = media.schema_ if media is not None else None

        if schema is not None and schema.type == "array":
            item_ref = schema.items.ref if schema.items is not None else None
            return MethodReturn(
                is_array=True,
                status=str(status),
                model=self._match(item_ref, context),
            )
        return MethodReturn(
            is_array=False,
            status=str(status),
            model=self._match(schema.ref if schema is not None else None, context),
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _match(self, pointer: Optional[str], context: str) -> Optional[Model]:
        """Find the resolved model whose ``schema_pointer`` equals *pointer*."""
        if pointer is None:
            return None
        for model in self._models:
            if model.schema_pointer == pointer:
                return model
        logger.debug("No model for '%s' at %s", pointer, context)
        self.diagnostics.record_unresolved(pointer, context)
        return None

    def _deref(self, obj: Any, context: str) -> Any:
        """Follow component ``$ref`` indirections; ``None`` when they dangle."""
        try:
            return deref(obj, self._document.source)
        except SpecParseError as exc:
            pointer = obj.get("$ref", "") if isinstance(obj, dict) else ""
            logger.debug("Cannot follow '%s' at %s: %s", pointer, context, exc)
            self.diagnostics.record_unresolved(str(pointer), context)
            return None


def _parameter_type(schema: Optional[RawSchema]) -> str:
    declared = schema.type if schema is not None else None
    if declared == "integer":
        return "number"
    return declared or "string"


def resolve_methods(
    document: RawDocument,
    models: list[Model],
    ignored_segments: Iterable[str] = DEFAULT_IGNORED_SEGMENTS,
    diagnostics: Optional[Diagnostics] = None,
) -> list[Method]:
    """Resolve every (path, verb) operation of *document* against *models*."""
    return MethodResolver(document, models, ignored_segments, diagnostics).resolve_all()
