"""Firestore collection and document paths used by the repositories.

Firestore has no DDL or migrations. Collections are created automatically
when you first write a document. These constants keep names consistent.
Settings can override each of them per deployment.
"""

# Schema registry: one document per administered collection, holding ``fields``.
COLLECTION_SCHEMAS = "config/collections/items"

# Append-only audit trail
COLLECTION_CHANGELOG = "changelog"

# Access control
COLLECTION_ROLES = "roles"
COLLECTION_USERS = "users"
DOCUMENT_APP_CONFIG = "app_config/global"

# Field names inside access-control documents
FIELD_USER_ROLE = "role"
FIELD_DEFAULT_ROLE = "defaultRole"
FIELD_APP_TITLE = "appTitle"
FIELD_SCHEMA_FIELDS = "fields"
FIELD_AUDIT_TIMESTAMP = "timestamp"
