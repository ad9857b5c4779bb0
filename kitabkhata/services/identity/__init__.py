"""Identity collaborator."""

from kitabkhata.services.identity.identity import (
    IdentityError,
    user_from_id_token,
    user_from_manual_login,
)

__all__ = ["IdentityError", "user_from_id_token", "user_from_manual_login"]
