"""Pydantic request/response schemas for the API."""

from app.schemas.analytics import CollectionCount, CollectionStatsResponse
from app.schemas.audit_log import AuditEntryListResponse, AuditEntryResponse
from app.schemas.collection import (
    BulkDeleteRequest,
    BulkEditRequest,
    CollectionListResponse,
    DocumentWriteRequest,
    MutationResponse,
    PageResponse,
    QueryRequest,
    SchemaResponse,
)
from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.role import (
    DefaultRoleRequest,
    RoleCreateRequest,
    RoleResponse,
    RoleSaveRequest,
    RoleToggleRequest,
    UserPermissionsResponse,
)
from app.schemas.settings import AppTitleRequest, AppTitleResponse

__all__ = [
    "AppTitleRequest",
    "AppTitleResponse",
    "AuditEntryListResponse",
    "AuditEntryResponse",
    "BulkDeleteRequest",
    "BulkEditRequest",
    "CollectionCount",
    "CollectionListResponse",
    "CollectionStatsResponse",
    "DefaultRoleRequest",
    "DocumentWriteRequest",
    "HealthResponse",
    "MutationResponse",
    "PageResponse",
    "QueryRequest",
    "ReadinessResponse",
    "RoleCreateRequest",
    "RoleResponse",
    "RoleSaveRequest",
    "RoleToggleRequest",
    "SchemaResponse",
    "UserPermissionsResponse",
]
