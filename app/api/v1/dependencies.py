"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the signed-in identity, the repository set
and the application services. Routes depend only on these, not on
infrastructure directly. Switch backends via STORE_BACKEND in config.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from app.application.dtos.identity import UNKNOWN_EMAIL, Identity
from app.application.services.app_settings import AppSettingsService
from app.application.services.audit_log import AuditLogService
from app.application.services.permission_evaluator import PermissionEvaluator
from app.application.services.role_service import RoleService
from app.application.use_cases.analytics import GetCollectionStatsUseCase
from app.application.use_cases.collections import CollectionEngine
from app.core.config import get_settings
from app.domain.exceptions import AuthenticationException
from app.infrastructure.store_factory import StoreFactory, StoreRepositories
from app.shared.enums import StoreBackend


def get_repositories(request: Request) -> StoreRepositories:
    """Repository set built at startup; the memory backend is created on demand.

    Raises:
        HTTPException: 503 when the Firestore backend is not configured.
    """
    repos = getattr(request.app.state, "repositories", None)
    if repos is not None:
        return repos
    settings = get_settings()
    if settings.store_backend is StoreBackend.MEMORY:
        from app.infrastructure.memory.store import MemoryDatabase

        db = getattr(request.app.state, "memory_db", None) or MemoryDatabase()
        request.app.state.memory_db = db
        request.app.state.repositories = StoreFactory.create_repositories(
            settings, memory_db=db
        )
        return request.app.state.repositories
    raise HTTPException(status_code=503, detail="Document store is not configured")


def get_identity(request: Request) -> Identity:
    """Signed-in user forwarded by the identity provider in request headers."""
    settings = get_settings()
    user_id = (request.headers.get(settings.user_id_header) or "").strip()
    if not user_id:
        raise AuthenticationException()
    email = (request.headers.get(settings.user_email_header) or "").strip()
    return Identity(user_id=user_id, email=email or UNKNOWN_EMAIL)


Repositories = Annotated[StoreRepositories, Depends(get_repositories)]
CurrentIdentity = Annotated[Identity, Depends(get_identity)]


def get_permission_evaluator(repos: Repositories) -> PermissionEvaluator:
    return PermissionEvaluator(
        repos.roles, repos.access_config, default_role=get_settings().default_role
    )


Evaluator = Annotated[PermissionEvaluator, Depends(get_permission_evaluator)]


def get_audit_log_service(repos: Repositories) -> AuditLogService:
    return AuditLogService(repos.audit_log, default_limit=get_settings().changelog_limit)


AuditLog = Annotated[AuditLogService, Depends(get_audit_log_service)]


def get_role_service(repos: Repositories, evaluator: Evaluator) -> RoleService:
    return RoleService(repos.roles, repos.access_config, evaluator)


def get_collection_engine(
    collection: str,
    repos: Repositories,
    identity: CurrentIdentity,
    evaluator: Evaluator,
    audit_log: AuditLog,
) -> CollectionEngine:
    """Engine bound to the ``{collection}`` path parameter for this request."""
    return CollectionEngine(
        collection=collection,
        store=repos.documents,
        schema_repo=repos.schemas,
        audit_log=audit_log,
        evaluator=evaluator,
        identity=identity,
        page_size=get_settings().page_size,
    )


Engine = Annotated[CollectionEngine, Depends(get_collection_engine)]
Roles = Annotated[RoleService, Depends(get_role_service)]


def get_app_settings_service(
    repos: Repositories, evaluator: Evaluator
) -> AppSettingsService:
    return AppSettingsService(repos.access_config, evaluator)


def get_collection_stats_use_case(
    repos: Repositories, evaluator: Evaluator
) -> GetCollectionStatsUseCase:
    return GetCollectionStatsUseCase(repos.schemas, repos.documents, evaluator)


AppSettings = Annotated[AppSettingsService, Depends(get_app_settings_service)]
CollectionStatsUseCase = Annotated[
    GetCollectionStatsUseCase, Depends(get_collection_stats_use_case)
]
