from dataclasses import dataclass
from typing import Any, Dict

from storefront.errors import UnauthorizedError

@dataclass(frozen=True)
class Identity:
    """Utilisateur authentifié, passé explicitement à chaque opération du cœur."""
    id: str
    email: str = ""

    @classmethod
    def from_user(cls, user: Dict[str, Any]) -> "Identity":
        user_id = str((user or {}).get("id") or "")
        if not user_id:
            raise UnauthorizedError("Utilisateur non valide")
        return cls(id=user_id, email=str(user.get("email") or ""))
