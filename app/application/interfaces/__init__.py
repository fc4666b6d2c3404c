"""Application interfaces (ports): repository protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IAccessConfigRepository,
    IAuditLogRepository,
    IDocumentStore,
    IRoleRepository,
    ISchemaRepository,
)

__all__ = [
    "IAccessConfigRepository",
    "IAuditLogRepository",
    "IDocumentStore",
    "IRoleRepository",
    "ISchemaRepository",
]
