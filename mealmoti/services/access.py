"""Ownership and sharing rules for every resource kind.

Every resource kind is described by an :class:`AccessPolicy` that names its
owner column, an optional "general catalog" flag, and an optional share table.
A single rule is evaluated for all of them:

* ``is_owner``  -> the resource's owner column equals the user
* ``can_read``  -> owner, general catalog entry, or an explicit share exists
* ``can_edit``  -> owner, or an explicit share with ``can_edit``

Lists only configure shares, recipes/articles/products only the general flag,
stores configure both. Absence of access is reported as booleans; the
``require_*`` helpers turn them into domain errors. Callers without read access
always get ``NotFoundError`` so the existence of a resource is never disclosed
to strangers; ``ForbiddenError`` is reserved for callers who can read.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from mealmoti.models.catalog import Article, Product, Store, StoreShare
from mealmoti.models.enums import ResourceKind
from mealmoti.models.list import ListShare, ShoppingList
from mealmoti.models.mixins import SoftDeleteMixin
from mealmoti.models.recipe import Recipe
from mealmoti.services.errors import ForbiddenError, NotFoundError


@dataclass(frozen=True)
class Access:
    """Outcome of an access check."""

    can_read: bool = False
    can_edit: bool = False
    is_owner: bool = False


NO_ACCESS = Access()


@dataclass(frozen=True)
class AccessPolicy:
    """Visibility configuration for one resource kind."""

    kind: ResourceKind
    label: str
    model: Any
    owner_attr: str
    general_attr: str | None = None
    share_model: Any = None
    share_fk: str | None = None

    @property
    def shareable(self) -> bool:
        return self.share_model is not None

    def load(self, db: Session, resource_id: int) -> Any:
        """Load a live resource, ignoring soft-deleted rows."""
        query = db.query(self.model).filter(self.model.id == resource_id)
        if issubclass(self.model, SoftDeleteMixin):
            query = query.filter(self.model.not_deleted())
        return query.first()

    def find_share(self, db: Session, resource_id: int, user_id: int) -> Any:
        if self.share_model is None:
            return None
        return (
            db.query(self.share_model)
            .filter(
                getattr(self.share_model, self.share_fk) == resource_id,
                self.share_model.user_id == user_id,
            )
            .first()
        )

    def decide(self, resource: Any, share: Any, user_id: int) -> Access:
        """Apply the ownership/general/share rule to a loaded resource."""
        if resource is None:
            return NO_ACCESS

        is_owner = getattr(resource, self.owner_attr) == user_id
        is_general = bool(self.general_attr and getattr(resource, self.general_attr))
        can_edit = is_owner or (share is not None and bool(share.can_edit))
        can_read = can_edit or is_general or share is not None
        return Access(can_read=can_read, can_edit=can_edit, is_owner=is_owner)

    def readable_filter(self, user_id: int):
        """SQL criterion matching every resource of this kind the user can read."""
        clauses = [getattr(self.model, self.owner_attr) == user_id]
        if self.general_attr:
            clauses.append(getattr(self.model, self.general_attr).is_(True))
        if self.share_model is not None:
            shared_ids = select(getattr(self.share_model, self.share_fk)).where(
                self.share_model.user_id == user_id
            )
            clauses.append(self.model.id.in_(shared_ids))
        return or_(*clauses)


POLICIES: dict[ResourceKind, AccessPolicy] = {
    ResourceKind.LIST: AccessPolicy(
        kind=ResourceKind.LIST,
        label="List",
        model=ShoppingList,
        owner_attr="owner_id",
        share_model=ListShare,
        share_fk="list_id",
    ),
    ResourceKind.RECIPE: AccessPolicy(
        kind=ResourceKind.RECIPE,
        label="Recipe",
        model=Recipe,
        owner_attr="created_by_id",
        general_attr="is_general",
    ),
    ResourceKind.STORE: AccessPolicy(
        kind=ResourceKind.STORE,
        label="Store",
        model=Store,
        owner_attr="created_by_id",
        general_attr="is_general",
        share_model=StoreShare,
        share_fk="store_id",
    ),
    ResourceKind.ARTICLE: AccessPolicy(
        kind=ResourceKind.ARTICLE,
        label="Article",
        model=Article,
        owner_attr="created_by_id",
        general_attr="is_general",
    ),
    ResourceKind.PRODUCT: AccessPolicy(
        kind=ResourceKind.PRODUCT,
        label="Product",
        model=Product,
        owner_attr="created_by_id",
        general_attr="is_general",
    ),
}


def get_policy(kind: ResourceKind) -> AccessPolicy:
    """Get the access policy for a resource kind."""
    return POLICIES[kind]


class AccessResolver:
    """Resolve and enforce a user's rights on a resource."""

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, user_id: int, kind: ResourceKind, resource_id: int) -> Access:
        """Return the user's access to a resource. Never raises for missing rows."""
        _, access = self._load(user_id, kind, resource_id)
        return access

    def require_read(self, user_id: int, kind: ResourceKind, resource_id: int) -> Any:
        """Return the resource if readable, else raise NotFoundError."""
        resource, _ = self._load_readable(user_id, kind, resource_id)
        return resource

    def require_read_with_access(
        self, user_id: int, kind: ResourceKind, resource_id: int
    ) -> tuple[Any, Access]:
        """Like :meth:`require_read`, also returning the user's rights."""
        return self._load_readable(user_id, kind, resource_id)

    def require_edit(
        self,
        user_id: int,
        kind: ResourceKind,
        resource_id: int,
        detail: str | None = None,
    ) -> Any:
        """Return the resource if editable by the user."""
        resource, access = self._load_readable(user_id, kind, resource_id)
        if not access.can_edit:
            label = POLICIES[kind].label.lower()
            raise ForbiddenError(detail or f"You don't have permission to edit this {label}")
        return resource

    def require_owner(
        self,
        user_id: int,
        kind: ResourceKind,
        resource_id: int,
        detail: str | None = None,
    ) -> Any:
        """Return the resource if the user owns it."""
        resource, access = self._load_readable(user_id, kind, resource_id)
        if not access.is_owner:
            label = POLICIES[kind].label.lower()
            raise ForbiddenError(detail or f"Only the owner can modify this {label}")
        return resource

    def _load(self, user_id: int, kind: ResourceKind, resource_id: int) -> tuple[Any, Access]:
        policy = POLICIES[kind]
        resource = policy.load(self.db, resource_id)
        if resource is None:
            return None, NO_ACCESS
        share = policy.find_share(self.db, resource_id, user_id)
        return resource, policy.decide(resource, share, user_id)

    def _load_readable(
        self, user_id: int, kind: ResourceKind, resource_id: int
    ) -> tuple[Any, Access]:
        resource, access = self._load(user_id, kind, resource_id)
        if not access.can_read:
            raise NotFoundError(f"{POLICIES[kind].label} not found")
        return resource, access
