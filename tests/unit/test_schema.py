"""Collection schema parsing, field types and role entity tests."""

import pytest

from app.domain.entities.role import Role, RolePermissions, UserPermissions
from app.domain.entities.schema import (
    USERS_SCHEMA,
    CollectionSchema,
    FieldDef,
    ValidationRule,
)
from app.domain.enums import AuditAction, Capability
from app.domain.exceptions import SchemaLoadException
from app.domain.field_types import FieldType, is_numeric, render_hint


def test_fields_sorted_by_order_stable() -> None:
    schema = CollectionSchema.from_field_dicts(
        "c",
        [
            {"name": "z", "type": "text", "order": 2},
            {"name": "a", "type": "text"},
            {"name": "m", "type": "number", "order": 0},
        ],
    )
    assert schema.field_names == ["a", "m", "z"]


def test_validation_rule_parsed_from_camel_case() -> None:
    schema = CollectionSchema.from_field_dicts(
        "c",
        [
            {
                "name": "sku",
                "type": "text",
                "validation": {"required": True, "pattern": "^A", "patternError": "Starts with A"},
            }
        ],
    )
    rule = schema.field("sku").validation
    assert rule == ValidationRule(required=True, pattern="^A", pattern_error="Starts with A")
    assert rule.to_dict()["patternError"] == "Starts with A"


def test_select_requires_options() -> None:
    with pytest.raises(SchemaLoadException) as exc_info:
        CollectionSchema.from_field_dicts("c", [{"name": "s", "type": "select"}])
    assert exc_info.value.error_code == "SCHEMA_LOAD_ERROR"
    assert exc_info.value.details["collection"] == "c"


def test_non_select_options_are_dropped_when_loading() -> None:
    schema = CollectionSchema.from_field_dicts(
        "c", [{"name": "t", "type": "text", "options": []}]
    )
    assert schema.field("t").options == ()


def test_non_select_options_rejected_on_construction() -> None:
    with pytest.raises(ValueError):
        FieldDef(name="t", type=FieldType.TEXT, options=("x",))


@pytest.mark.parametrize(
    "raw",
    [
        "not a list",
        [{"name": "x"}],
        [{"name": "x", "type": "color"}],
        [{"name": "", "type": "text"}],
        [{"name": "x", "type": "text", "validation": {"min": "five"}}],
    ],
)
def test_malformed_schema_raises(raw) -> None:
    with pytest.raises(SchemaLoadException):
        CollectionSchema.from_field_dicts("c", raw)


def test_duplicate_field_names_rejected() -> None:
    with pytest.raises(SchemaLoadException, match="duplicate"):
        CollectionSchema.from_field_dicts(
            "c", [{"name": "x", "type": "text"}, {"name": "x", "type": "number"}]
        )


def test_field_lookup_and_round_trip_dict() -> None:
    field = FieldDef(name="s", type=FieldType.SELECT, options=("a",), order=3)
    assert FieldDef.from_dict(field.to_dict()) == field
    schema = CollectionSchema("c", (field,))
    assert schema.field("s") is field
    assert schema.field("missing") is None


def test_users_schema_is_builtin() -> None:
    assert USERS_SCHEMA.collection == "users"
    assert USERS_SCHEMA.field_names == ["name", "email", "role"]


def test_field_type_helpers_cover_every_member() -> None:
    assert FieldType.values() == ["text", "number", "boolean", "select", "date", "email", "url"]
    assert render_hint(FieldType.BOOLEAN) == "switch"
    assert {render_hint(t) for t in FieldType} >= {"text", "number", "select", "date"}
    assert [t for t in FieldType if is_numeric(t)] == [FieldType.NUMBER]


def test_role_from_nested_and_legacy_documents() -> None:
    nested = Role.from_document(
        "editor", {"permissions": {"canView": True, "canEdit": True}, "category": "system"}
    )
    legacy = Role.from_document("old", {"canView": True, "canDelete": True})
    assert nested.permissions == RolePermissions(can_view=True, can_edit=True)
    assert nested.category == "system"
    assert legacy.permissions == RolePermissions(can_view=True, can_delete=True)
    assert legacy.category == "custom"
    assert nested.to_document()["permissions"]["canEdit"] is True


def test_role_permissions_toggle() -> None:
    perms = RolePermissions().toggled(Capability.EDIT)
    assert perms.has(Capability.EDIT)
    assert not perms.toggled(Capability.EDIT).has(Capability.EDIT)


def test_user_permissions_admin_flag() -> None:
    assert UserPermissions("admin", RolePermissions()).is_admin
    assert not UserPermissions("editor", RolePermissions.all_granted()).is_admin
    assert UserPermissions("viewer", RolePermissions(can_view=True)).to_dict() == {
        "role": "viewer",
        "canView": True,
        "canEdit": False,
        "canDelete": False,
        "canManageRoles": False,
    }


def test_enum_values() -> None:
    assert AuditAction.values() == ["create", "update", "delete"]
    assert Capability.values() == ["canView", "canEdit", "canDelete", "canManageRoles"]
