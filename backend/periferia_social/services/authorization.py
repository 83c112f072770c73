"""
Periferia Social Backend — Ownership Checks
============================================

Every mutating post endpoint asks the same question ("is the actor the owner
of this resource?"); keeping the answer in one place stops the routes from
drifting apart.
"""

from periferia_social.exceptions import PermissionDeniedError


def is_owner(actor_id: int, owner_id: int) -> bool:
    """True iff the authenticated actor owns the resource."""
    return actor_id == owner_id


def ensure_owner(actor_id: int, owner_id: int, action: str = "modify this resource") -> None:
    """Raises PermissionDeniedError (403) unless `actor_id` owns the resource."""
    if not is_owner(actor_id, owner_id):
        raise PermissionDeniedError(
            message=f"You do not have permission to {action}",
            context={"actor_id": actor_id, "owner_id": owner_id},
        )
