"""
Type Projector - Turns resolved schemas into type descriptions.

The description is a small tagged tree (primitive, literal union, sequence,
record, open map, unknown). Renderers turn it into TypeScript or Python
TypedDict declarations. Field order always follows schema property order,
so output is stable for an unchanged document.
"""

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Tuple, Union
import json
import keyword
import re

from .resolver import is_circular_sentinel


@dataclass(frozen=True)
class PrimitiveType:
    name: str  # "string", "number", "integer", "boolean"


@dataclass(frozen=True)
class LiteralUnion:
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class SequenceType:
    item: "TypeDescription"


@dataclass(frozen=True)
class Field:
    name: str
    type: "TypeDescription"
    optional: bool = True
    description: str = ""


@dataclass(frozen=True)
class RecordType:
    fields: Tuple[Field, ...] = dataclass_field(default_factory=tuple)


@dataclass(frozen=True)
class OpenMapType:
    pass


@dataclass(frozen=True)
class UnknownType:
    pass


TypeDescription = Union[PrimitiveType, LiteralUnion, SequenceType, RecordType, OpenMapType, UnknownType]

PRIMITIVES = ("string", "number", "integer", "boolean")


def project(schema: Any) -> TypeDescription:
    """
    Project a resolved schema onto a type description

    Args:
        schema: Resolved schema (no $ref / allOf)

    Returns:
        TypeDescription tree
    """
    if not isinstance(schema, dict):
        return UnknownType()

    if is_circular_sentinel(schema):
        return OpenMapType()

    schema_type = schema.get("type")

    if schema_type == "string" and isinstance(schema.get("enum"), list) and schema["enum"]:
        return LiteralUnion(tuple(schema["enum"]))

    if schema_type in PRIMITIVES:
        return PrimitiveType(schema_type)

    if schema_type == "array":
        return SequenceType(project(schema.get("items")))

    if schema_type == "object":
        properties = schema.get("properties")
        if not isinstance(properties, dict):
            return OpenMapType()
        required = schema.get("required")
        if not isinstance(required, list):
            required = []
        return RecordType(tuple(
            Field(
                name=name,
                type=project(prop),
                optional=name not in required,
                description=(prop.get("description") or "") if isinstance(prop, dict) else "",
            )
            for name, prop in properties.items()
        ))

    return UnknownType()


# ============================================================================
# Renderers
# ============================================================================


def type_name(*parts: str) -> str:
    """Build a PascalCase identifier from free-form parts ("get", "/users/{id}")"""
    words: List[str] = []
    for part in parts:
        words.extend(w for w in re.split(r"[^0-9A-Za-z]+", part or "") if w)
    name = "".join(w[0].upper() + w[1:] for w in words)
    if not name or name[0].isdigit():
        name = f"T{name}"
    return name


def _ts_key(name: str) -> str:
    return name if re.fullmatch(r"[A-Za-z_$][0-9A-Za-z_$]*", name) else json.dumps(name)


def _ts_literal(value: Any) -> str:
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
        return f"'{escaped}'"
    return json.dumps(value)


def to_typescript(description: TypeDescription, indent: int = 0) -> str:
    """Inline TypeScript type expression"""
    if isinstance(description, PrimitiveType):
        return "number" if description.name == "integer" else description.name
    if isinstance(description, LiteralUnion):
        return " | ".join(_ts_literal(v) for v in description.values)
    if isinstance(description, SequenceType):
        item = to_typescript(description.item, indent)
        if isinstance(description.item, LiteralUnion):
            item = f"({item})"
        return f"{item}[]"
    if isinstance(description, RecordType):
        pad = "  " * (indent + 1)
        lines = [
            f"{pad}{_ts_key(f.name)}{'?' if f.optional else ''}: {to_typescript(f.type, indent + 1)};"
            for f in description.fields
        ]
        return "{\n" + "\n".join(lines) + ("\n" if lines else "") + "  " * indent + "}"
    if isinstance(description, OpenMapType):
        return "Record<string, any>"
    if isinstance(description, UnknownType):
        return "any"
    raise ValueError(f"Unhandled type description: {description!r}")


def render_typescript(description: TypeDescription, name: str) -> str:
    """Render a named TypeScript declaration"""
    if isinstance(description, RecordType):
        return f"export interface {name} {to_typescript(description)}"
    return f"export type {name} = {to_typescript(description)};"


_PY_PRIMITIVES = {"string": "str", "integer": "int", "number": "float", "boolean": "bool"}


class _TypedDictRenderer:
    """Renders records as TypedDict classes, hoisting nested records"""

    def __init__(self):
        self.classes: List[str] = []
        self._names: Dict[str, int] = {}

    def _unique(self, name: str) -> str:
        count = self._names.get(name, 0)
        self._names[name] = count + 1
        return name if count == 0 else f"{name}{count + 1}"

    def expr(self, description: TypeDescription, hint: str) -> str:
        if isinstance(description, PrimitiveType):
            return _PY_PRIMITIVES[description.name]
        if isinstance(description, LiteralUnion):
            return f"Literal[{', '.join(repr(v) for v in description.values)}]"
        if isinstance(description, SequenceType):
            return f"List[{self.expr(description.item, hint + 'Item')}]"
        if isinstance(description, RecordType):
            return self.record(description, hint)
        if isinstance(description, OpenMapType):
            return "Dict[str, Any]"
        if isinstance(description, UnknownType):
            return "Any"
        raise ValueError(f"Unhandled type description: {description!r}")

    def record(self, description: RecordType, name: str) -> str:
        name = self._unique(name)
        lines = [f"class {name}(TypedDict, total=False):"]
        for f in description.fields:
            annotation = self.expr(f.type, name + type_name(f.name))
            if not f.optional:
                annotation = f"Required[{annotation}]"
            key = f.name if f.name.isidentifier() and not keyword.iskeyword(f.name) else None
            if key is None:
                # Non-identifier and keyword keys cannot be class attributes
                lines.append(f"    # {f.name!r}: {annotation}")
            else:
                lines.append(f"    {key}: {annotation}")
        if len(lines) == 1:
            lines.append("    pass")
        self.classes.append("\n".join(lines))
        return name


def render_typeddict(description: TypeDescription, name: str) -> str:
    """Render Python TypedDict declaration(s); nested records come first"""
    renderer = _TypedDictRenderer()
    if isinstance(description, RecordType):
        renderer.record(description, name)
    else:
        renderer.classes.append(f"{name} = {renderer.expr(description, name + 'Item')}")
    return "\n\n\n".join(renderer.classes)


TYPEDDICT_HEADER = "from typing import Any, Dict, List, Literal\n\nfrom typing_extensions import Required, TypedDict"


def render(description: TypeDescription, name: str, style: str = "typescript") -> str:
    """Render a declaration in the requested style ("typescript" or "python")"""
    if style == "typescript":
        return render_typescript(description, name)
    if style == "python":
        return render_typeddict(description, name)
    raise ValueError(f"Unknown style: {style}. Use 'typescript' or 'python'")
