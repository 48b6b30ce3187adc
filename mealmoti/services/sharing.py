"""Sharing service for granting and revoking access to owned resources."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from mealmoti.database import upsert_statement
from mealmoti.models.enums import ResourceKind
from mealmoti.services.access import AccessResolver, get_policy
from mealmoti.services.auth import get_user_by_email
from mealmoti.services.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class SharingService:
    """Manage share grants on lists and stores. Only owners may manage them."""

    def __init__(self, db: Session):
        self.db = db
        self.access = AccessResolver(db)

    def share_resource(
        self,
        owner_id: int,
        kind: ResourceKind,
        resource_id: int,
        target_email: str,
        can_edit: bool,
    ):
        """Grant (or update) another user's access to a resource.

        The grant is written with a single INSERT ... ON CONFLICT DO UPDATE on
        the (resource, user) unique constraint, so re-sharing changes
        ``can_edit`` in place and concurrent calls never create two grants.
        """
        policy = get_policy(kind)
        if not policy.shareable:
            raise InvalidInputError(f"{policy.label}s cannot be shared")

        label = policy.label.lower()
        self.access.require_owner(
            owner_id, kind, resource_id, detail=f"Only the owner can share this {label}"
        )

        target = get_user_by_email(self.db, target_email)
        if target is None:
            raise NotFoundError("User not found")
        if target.id == owner_id:
            raise InvalidInputError("Cannot share with yourself")

        stmt = upsert_statement(
            self.db,
            policy.share_model,
            values={policy.share_fk: resource_id, "user_id": target.id, "can_edit": can_edit},
            index_elements=[policy.share_fk, "user_id"],
            update={"can_edit": can_edit, "updated_at": func.now()},
        )
        self.db.execute(stmt)
        self.db.commit()

        logger.info(
            f"User {owner_id} shared {label} {resource_id} with user {target.id} "
            f"(can_edit={can_edit})"
        )
        return self._get_share(kind, resource_id, target.id)

    def revoke_share(
        self, owner_id: int, kind: ResourceKind, resource_id: int, target_user_id: int
    ) -> None:
        """Remove a user's access. Raises NotFoundError if no grant exists."""
        policy = get_policy(kind)
        if not policy.shareable:
            raise InvalidInputError(f"{policy.label}s cannot be shared")

        self.access.require_owner(
            owner_id, kind, resource_id, detail="Only the owner can manage sharing"
        )

        share_model = policy.share_model
        deleted = (
            self.db.query(share_model)
            .filter(
                getattr(share_model, policy.share_fk) == resource_id,
                share_model.user_id == target_user_id,
            )
            .delete(synchronize_session=False)
        )
        if not deleted:
            self.db.rollback()
            raise NotFoundError("Share not found")

        self.db.commit()
        logger.info(
            f"User {owner_id} revoked user {target_user_id} from "
            f"{policy.label.lower()} {resource_id}"
        )

    def list_shares(self, user_id: int, kind: ResourceKind, resource_id: int) -> list:
        """Get the grants on a resource; visible to anyone who can read it."""
        policy = get_policy(kind)
        if not policy.shareable:
            raise InvalidInputError(f"{policy.label}s cannot be shared")

        self.access.require_read(user_id, kind, resource_id)

        share_model = policy.share_model
        return (
            self.db.query(share_model)
            .options(joinedload(share_model.user))
            .filter(getattr(share_model, policy.share_fk) == resource_id)
            .order_by(share_model.id)
            .all()
        )

    def _get_share(self, kind: ResourceKind, resource_id: int, user_id: int):
        policy = get_policy(kind)
        share_model = policy.share_model
        return (
            self.db.query(share_model)
            .options(joinedload(share_model.user))
            .filter(
                getattr(share_model, policy.share_fk) == resource_id,
                share_model.user_id == user_id,
            )
            .one()
        )
