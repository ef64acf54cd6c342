"""
Schema Resolver - Expands $ref and allOf constructs into concrete schema trees.

Supports:
- Local JSON pointers (#/components/schemas/Name, #/components/parameters/...)
- Nested object/array structure expansion
- allOf composition (shallow merge, later members win)
- Circular reference detection (degrades to a sentinel node, never raises)

Resolution is pure: the input document is never mutated, and resolving the
same node twice yields equal results.
"""

from enum import Enum
from typing import Any, Dict, FrozenSet, Optional
import logging

logger = logging.getLogger(__name__)

CIRCULAR_MARKER = "x-circular-ref"


class SchemaKind(str, Enum):
    """Shapes a schema node can take, in resolution priority order"""
    REFERENCE = "reference"
    ARRAY = "array"
    OBJECT = "object"
    COMPOSITION = "composition"
    PRIMITIVE = "primitive"


def classify(node: Dict[str, Any]) -> SchemaKind:
    """
    Classify a schema node

    The checks run in the same order the resolver applies them, so a node
    carrying both `properties` and `allOf` is an OBJECT.
    """
    if "$ref" in node:
        return SchemaKind.REFERENCE
    if node.get("type") == "array" and isinstance(node.get("items"), dict):
        return SchemaKind.ARRAY
    if isinstance(node.get("properties"), dict):
        return SchemaKind.OBJECT
    if isinstance(node.get("allOf"), list):
        return SchemaKind.COMPOSITION
    return SchemaKind.PRIMITIVE


def circular_sentinel(pointer: str) -> Dict[str, Any]:
    """Build the marker node that stands in for a reference cycle"""
    return {
        "type": "object",
        "description": f"[Circular Reference: {pointer}]",
        CIRCULAR_MARKER: pointer,
    }


def is_circular_sentinel(node: Any) -> bool:
    return isinstance(node, dict) and CIRCULAR_MARKER in node


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(pointer: str, document: Dict[str, Any]) -> Optional[Any]:
    """
    Walk a local JSON pointer (e.g. "#/components/schemas/Product")

    Returns:
        The target node, or None if any segment is absent
    """
    if not isinstance(pointer, str) or not pointer.startswith("#"):
        logger.debug(f"Unsupported reference: {pointer!r}")
        return None

    current: Any = document
    for raw in pointer.lstrip("#").lstrip("/").split("/"):
        if raw == "":
            continue
        key = _unescape(raw)
        if isinstance(current, dict) and key in current:
            current = current[key]
        elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
            current = current[int(key)]
        else:
            logger.debug(f"Reference segment '{key}' missing in {pointer}")
            return None
    return current


def resolve_schema(
    node: Any,
    document: Dict[str, Any],
    visited_refs: FrozenSet[str] = frozenset(),
) -> Any:
    """
    Resolve a schema node against its document

    Args:
        node: Schema node (untrusted input; non-mappings pass through)
        document: Full OpenAPI document used for pointer lookups
        visited_refs: Pointers already expanded on the current branch

    Returns:
        A node with no $ref or allOf keys (cycles replaced by a sentinel)
    """
    if not isinstance(node, dict):
        return node

    kind = classify(node)

    if kind is SchemaKind.REFERENCE:
        pointer = node["$ref"]
        if not isinstance(pointer, str):
            logger.debug(f"Ignoring non-string reference: {pointer!r}")
            return {}
        if pointer in visited_refs:
            logger.debug(f"Circular reference detected: {pointer}")
            return circular_sentinel(pointer)
        target = resolve_pointer(pointer, document)
        if target is None:
            target = {}
        return resolve_schema(target, document, visited_refs | {pointer})

    if kind is SchemaKind.ARRAY:
        resolved = dict(node)
        resolved["items"] = resolve_schema(node["items"], document, visited_refs)
        return resolved

    if kind is SchemaKind.OBJECT:
        if isinstance(node.get("allOf"), list):
            # The node's own keys merge last, after its allOf members
            own = {k: v for k, v in node.items() if k != "allOf"}
            return resolve_schema({"allOf": node["allOf"] + [own]}, document, visited_refs)
        resolved = dict(node)
        resolved["properties"] = {
            name: resolve_schema(prop, document, visited_refs)
            for name, prop in node["properties"].items()
        }
        return resolved

    if kind is SchemaKind.COMPOSITION:
        # Shallow merge: a later member's "properties" replaces an earlier one
        combined: Dict[str, Any] = {}
        for member in node["allOf"]:
            resolved_member = resolve_schema(member, document, visited_refs)
            if isinstance(resolved_member, dict):
                combined.update(resolved_member)
        return combined

    if kind is SchemaKind.PRIMITIVE:
        return node

    raise ValueError(f"Unhandled schema kind: {kind}")


def resolve_media(content: Any, document: Dict[str, Any]) -> Any:
    """Resolve the schema of every media type in a `content` mapping"""
    if not isinstance(content, dict):
        return content

    resolved = {}
    for media_type, media in content.items():
        if isinstance(media, dict) and "schema" in media:
            media = dict(media)
            media["schema"] = resolve_schema(media["schema"], document)
        resolved[media_type] = media
    return resolved


def deref(node: Any, document: Dict[str, Any]) -> Any:
    """
    Follow $ref chains on a non-schema object (parameter, requestBody, response)

    Only the top level is followed; a chain that loops back returns {}.
    """
    seen = set()
    while isinstance(node, dict) and "$ref" in node:
        pointer = node["$ref"]
        if not isinstance(pointer, str):
            return {}
        if pointer in seen:
            logger.debug(f"Circular reference detected: {pointer}")
            return {}
        seen.add(pointer)
        target = resolve_pointer(pointer, document)
        node = target if target is not None else {}
    return node
