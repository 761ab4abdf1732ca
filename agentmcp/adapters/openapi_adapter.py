"""
OpenAPI Tool Definition Generator.

Converts an OpenAPI 3.x document into ToolDefinitions, one per operation.

Design Principle:
    "One Operation -> One ToolDefinition"

    For every path and HTTP method the importer produces a definition
    with:
    - name: operationId (or one generated from method + path)
    - description: operation description, summary, or "METHOD /path"
    - input_schema: path, query and header parameters plus the properties
      of the request body schema, flattened into one object schema
    - parameters: ParamSpecs (name + location) in declaration order,
      path-level parameters first; an operation parameter with the same
      name and location replaces the path-level one
    - request_body_content_type: the body media type (JSON preferred)

Local $ref pointers (#/components/...) are dereferenced before use.

Usage:
    importer = OpenAPISpecImporter()
    definitions = importer.import_spec(spec_dict)

    # Only some operations
    definitions = importer.import_spec(spec_dict, tags_filter=["items"])
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .schemas import DEFAULT_CONTENT_TYPE, ParamSpec, ToolDefinition

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Preferred body media types, in order; otherwise the first declared one wins
_PREFERRED_CONTENT_TYPES = ("application/json", "application/x-www-form-urlencoded")


class OpenAPISpecImporter:
    """
    Utility for importing an OpenAPI document into ToolDefinitions.

    Usage:
        importer = OpenAPISpecImporter()
        definitions = importer.import_spec(spec)
    """

    def import_spec(
        self,
        spec: dict[str, Any],
        *,
        tags_filter: list[str] | None = None,
        operations_filter: list[str] | None = None,
    ) -> list[ToolDefinition]:
        """
        Import operations from an OpenAPI document.

        Args:
            spec: OpenAPI 3.x document
            tags_filter: Only import operations with these tags
            operations_filter: Only import these tool names

        Returns:
            List of ToolDefinition objects, in document order

        Raises:
            ValueError: If the document has no usable "paths" object
        """
        paths = spec.get("paths")
        if not isinstance(paths, dict):
            raise ValueError("OpenAPI document has no 'paths' object")

        resolver = _RefResolver(spec)
        definitions: list[ToolDefinition] = []

        for path, path_item in paths.items():
            path_item = resolver.resolve(path_item)
            if not isinstance(path_item, dict):
                continue

            path_params = path_item.get("parameters", [])

            for method in HTTP_METHODS:
                op = path_item.get(method)
                if not isinstance(op, dict):
                    continue

                name = op.get("operationId") or _generate_operation_id(method, path)

                if operations_filter and name not in operations_filter:
                    continue

                op_tags = op.get("tags", [])
                if tags_filter and not any(t in op_tags for t in tags_filter):
                    continue

                all_params = _merge_parameters(
                    path_params, op.get("parameters"), resolver
                )
                definitions.append(
                    self._build_definition(name, method, path, op, all_params, resolver)
                )

        logger.info(f"[openapi_importer] Imported {len(definitions)} operations")
        return definitions

    def _build_definition(
        self,
        name: str,
        method: str,
        path: str,
        op: dict[str, Any],
        params: list[dict[str, Any]],
        resolver: _RefResolver,
    ) -> ToolDefinition:
        properties: dict[str, Any] = {}
        required: list[str] = []
        specs: list[ParamSpec] = []

        for param in params:
            param_name = param["name"]
            param_in = param["in"]

            schema = param.get("schema")
            prop_schema = dict(schema) if isinstance(schema, dict) else {"type": "string"}
            if param.get("description"):
                prop_schema["description"] = param["description"]

            properties[param_name] = prop_schema
            if param.get("required", False) and param_name not in required:
                required.append(param_name)
            specs.append(ParamSpec(name=param_name, location=param_in))

        content_type = DEFAULT_CONTENT_TYPE
        request_body = resolver.resolve(op.get("requestBody"))

        if isinstance(request_body, dict):
            content = request_body.get("content")
            if not isinstance(content, dict):
                content = {}
            content_type = _pick_content_type(content)

            media = resolver.resolve(content.get(content_type))
            body_schema = resolver.resolve(media.get("schema")) if isinstance(media, dict) else None
            if isinstance(body_schema, dict) and isinstance(body_schema.get("properties"), dict):
                body_required = body_schema.get("required")
                if not isinstance(body_required, list):
                    body_required = []

                for prop_name, prop_schema in body_schema["properties"].items():
                    # Parameters keep their own schema on a name clash
                    if prop_name in properties:
                        continue
                    properties[prop_name] = prop_schema
                    if prop_name in body_required:
                        required.append(prop_name)

        return ToolDefinition(
            name=name,
            description=_describe(method, path, op),
            input_schema={"type": "object", "properties": properties, "required": required},
            method=method,
            path_template=path,
            parameters=tuple(specs),
            request_body_content_type=content_type,
            operation_id=op.get("operationId"),
        )


def _merge_parameters(
    path_params: Any,
    op_params: Any,
    resolver: _RefResolver,
) -> list[dict[str, Any]]:
    """
    Combine path-level and operation-level parameters.

    An operation parameter replaces the path-level one with the same
    (name, in) and takes its position. Entries that are not objects, or
    lack a name or location, are dropped.
    """
    merged: dict[tuple[Any, Any], dict[str, Any]] = {}

    for group in (path_params, op_params):
        if not isinstance(group, list):
            continue
        for param in group:
            param = resolver.resolve(param)
            if not isinstance(param, dict):
                continue
            key = (param.get("name"), param.get("in"))
            if not all(isinstance(part, str) and part for part in key):
                continue
            merged[key] = param

    return list(merged.values())


def _pick_content_type(content: dict[str, Any]) -> str:
    for content_type in _PREFERRED_CONTENT_TYPES:
        if content_type in content:
            return content_type
    for content_type in content:
        return content_type
    return DEFAULT_CONTENT_TYPE


def _describe(method: str, path: str, op: dict[str, Any]) -> str:
    return op.get("description") or op.get("summary") or f"Executes {method.upper()} {path}"


class _RefResolver:
    """
    Local $ref resolver for OpenAPI documents.

    Handles references like:
    - #/components/schemas/Task
    - #/components/parameters/workspace_slug

    Recursive references resolve to the unresolved {"$ref": ...} node
    at the point where they loop.
    """

    def __init__(self, spec: dict[str, Any]):
        self._spec = spec
        self._cache: dict[str, Any] = {}
        self._resolving: set[str] = set()

    def resolve(self, obj: Any) -> Any:
        """Resolve $ref in an object (recursively)."""
        if isinstance(obj, list):
            return [self.resolve(item) for item in obj]

        if not isinstance(obj, dict):
            return obj

        if "$ref" not in obj:
            return {k: self.resolve(v) for k, v in obj.items()}

        ref = obj["$ref"]

        if not isinstance(ref, str) or not ref.startswith("#/") or ref in self._resolving:
            logger.warning(f"[ref_resolver] Unresolvable $ref: {ref}")
            return obj

        if ref in self._cache:
            return self._cache[ref]

        current: Any = self._spec
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                logger.warning(f"[ref_resolver] Could not resolve: {ref}")
                return obj

        self._resolving.add(ref)
        try:
            resolved = self.resolve(current)
        finally:
            self._resolving.discard(ref)

        self._cache[ref] = resolved
        return resolved


def _generate_operation_id(method: str, path: str) -> str:
    """
    Generate a tool name from method and path.

    Examples:
        GET /projects -> get_projects
        POST /projects/{id}/tasks -> post_projects_by_id_tasks
    """
    clean_path = path.strip("/")
    clean_path = re.sub(r"\{[^}]+\}", "by_id", clean_path)
    clean_path = re.sub(r"[^A-Za-z0-9_]", "_", clean_path)

    return f"{method}_{clean_path}" if clean_path else method
