"""Application services: validation, coercion, query, permissions, roles, audit, CSV."""

from app.application.services.app_settings import AppSettingsService
from app.application.services.audit_log import AuditLogService, filter_entries
from app.application.services.coercion import coerce_document, coerce_value
from app.application.services.csv_bridge import export_csv, parse_csv
from app.application.services.permission_evaluator import PermissionEvaluator
from app.application.services.query_engine import run_query
from app.application.services.role_service import RoleService
from app.application.services.validation import (
    validate_document,
    validate_field,
)

__all__ = [
    "AppSettingsService",
    "AuditLogService",
    "PermissionEvaluator",
    "RoleService",
    "coerce_document",
    "coerce_value",
    "export_csv",
    "filter_entries",
    "parse_csv",
    "run_query",
    "validate_document",
    "validate_field",
]
