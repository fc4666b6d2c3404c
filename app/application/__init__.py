"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (document store, schemas, roles, audit).
"""

from app.application.interfaces import (
    IAccessConfigRepository,
    IAuditLogRepository,
    IDocumentStore,
    IRoleRepository,
    ISchemaRepository,
)
from app.application.services.audit_log import AuditLogService
from app.application.services.permission_evaluator import PermissionEvaluator
from app.application.services.role_service import RoleService
from app.application.use_cases.collections import (
    CollectionEngine,
    MutationCoordinator,
)

__all__ = [
    "AuditLogService",
    "CollectionEngine",
    "IAccessConfigRepository",
    "IAuditLogRepository",
    "IDocumentStore",
    "IRoleRepository",
    "ISchemaRepository",
    "MutationCoordinator",
    "PermissionEvaluator",
    "RoleService",
]
