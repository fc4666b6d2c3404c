"""DTO for the identity supplied by the external identity provider."""

from dataclasses import dataclass

UNKNOWN_EMAIL = "unknown@example.com"


@dataclass(frozen=True)
class Identity:
    """Signed-in user as (user_id, email). The engine never handles credentials."""

    user_id: str
    email: str = UNKNOWN_EMAIL
