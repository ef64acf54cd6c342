"""
Unit tests for the Type Projector

Tests:
- Schema → type description mapping rules
- Determinism and field order
- TypeScript and TypedDict rendering
"""

import pytest

from swagger_explorer.introspection.projector import (
    Field,
    LiteralUnion,
    OpenMapType,
    PrimitiveType,
    RecordType,
    SequenceType,
    UnknownType,
    project,
    render,
    render_typeddict,
    render_typescript,
    type_name,
)
from swagger_explorer.introspection.resolver import circular_sentinel, resolve_schema


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def user_schema():
    return {
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "name": {"type": "string"},
            "status": {"type": "string", "enum": ["active", "blocked"]},
        },
        "required": ["id"],
    }


# ============================================================================
# TEST: projection rules
# ============================================================================


class TestProject:
    """Mapping rules"""

    def test_string_enum_is_literal_union(self):
        assert project({"type": "string", "enum": ["a", "b"]}) == LiteralUnion(("a", "b"))

    @pytest.mark.parametrize("schema_type", ["string", "number", "integer", "boolean"])
    def test_primitives(self, schema_type):
        assert project({"type": schema_type}) == PrimitiveType(schema_type)

    def test_array(self):
        assert project({"type": "array", "items": {"type": "string"}}) == SequenceType(PrimitiveType("string"))

    def test_array_without_items(self):
        assert project({"type": "array"}) == SequenceType(UnknownType())

    def test_object_with_properties(self, user_schema):
        description = project(user_schema)

        assert isinstance(description, RecordType)
        assert [f.name for f in description.fields] == ["id", "name", "status"]
        assert description.fields[0] == Field("id", PrimitiveType("integer"), optional=False)
        assert description.fields[1].optional is True
        assert description.fields[2].type == LiteralUnion(("active", "blocked"))

    def test_object_without_properties_is_open_map(self):
        assert project({"type": "object"}) == OpenMapType()

    def test_anything_else_is_unknown(self):
        assert project({}) == UnknownType()
        assert project({"type": "null"}) == UnknownType()
        assert project(None) == UnknownType()

    def test_circular_sentinel_is_open_map(self):
        assert project(circular_sentinel("#/components/schemas/Node")) == OpenMapType()

    def test_deterministic(self, sample_document):
        schema = resolve_schema({"$ref": "#/components/schemas/Team"}, sample_document)
        assert project(schema) == project(schema)
        assert render_typescript(project(schema), "Team") == render_typescript(project(schema), "Team")


# ============================================================================
# TEST: renderers
# ============================================================================


class TestRender:
    """Declaration rendering"""

    def test_typescript_interface(self, user_schema):
        rendered = render_typescript(project(user_schema), "User")

        assert rendered == (
            "export interface User {\n"
            "  id: number;\n"
            "  name?: string;\n"
            "  status?: 'active' | 'blocked';\n"
            "}"
        )

    def test_typescript_nested(self, sample_document):
        schema = resolve_schema({"$ref": "#/components/schemas/Team"}, sample_document)
        rendered = render_typescript(project(schema), "Team")

        assert "  members?: {\n    id: number;\n    name: string;" in rendered
        assert "  parent?: Record<string, any>;" in rendered

    def test_typescript_type_alias(self):
        rendered = render_typescript(project({"type": "array", "items": {"type": "integer"}}), "Ids")
        assert rendered == "export type Ids = number[];"

    def test_typescript_quotes_odd_keys(self):
        rendered = render_typescript(project({"type": "object", "properties": {"x-rate": {"type": "number"}}}), "R")
        assert '"x-rate"?: number;' in rendered

    def test_typescript_escapes_quotes_in_literals(self):
        rendered = render_typescript(project({"type": "string", "enum": ["it's", 'say "hi"', "a\\b"]}), "Phrase")
        assert rendered == "export type Phrase = 'it\\'s' | 'say \"hi\"' | 'a\\\\b';"

    def test_typeddict_comments_out_keyword_keys(self):
        schema = {
            "type": "object",
            "properties": {"class": {"type": "string"}, "from": {"type": "integer"}, "name": {"type": "string"}},
        }
        rendered = render_typeddict(project(schema), "Row")

        assert "    # 'class': str" in rendered
        assert "    # 'from': int" in rendered
        assert "    name: str" in rendered
        assert "\n    class:" not in rendered

    def test_typeddict(self, user_schema):
        rendered = render_typeddict(project(user_schema), "User")

        assert rendered == (
            "class User(TypedDict, total=False):\n"
            "    id: Required[int]\n"
            "    name: str\n"
            "    status: Literal['active', 'blocked']"
        )

    def test_typeddict_hoists_nested_records(self, sample_document):
        schema = resolve_schema({"$ref": "#/components/schemas/Team"}, sample_document)
        rendered = render_typeddict(project(schema), "Team")

        nested = rendered.index("class TeamMembersItem(TypedDict, total=False):")
        parent = rendered.index("class Team(TypedDict, total=False):")
        assert nested < parent
        assert "    members: List[TeamMembersItem]" in rendered
        assert "    parent: Dict[str, Any]" in rendered

    def test_render_dispatch(self, user_schema):
        description = project(user_schema)
        assert render(description, "User") == render_typescript(description, "User")
        assert render(description, "User", style="python") == render_typeddict(description, "User")
        with pytest.raises(ValueError):
            render(description, "User", style="rust")

    def test_type_name(self):
        assert type_name("get", "/users/{id}") == "GetUsersId"
        assert type_name("createUser") == "CreateUser"
        assert type_name("") == "T"
