"""Purchase service for recording shopping trips against a list."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session, selectinload

from mealmoti.models.enums import ResourceKind
from mealmoti.models.item import Item
from mealmoti.models.purchase import Purchase, PurchaseItem
from mealmoti.models.user import User
from mealmoti.schemas.purchase import PurchaseCreate, PurchaseUpdate
from mealmoti.services.access import AccessResolver
from mealmoti.services.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class PurchaseService:
    """Snapshot checked items into purchases."""

    def __init__(self, db: Session):
        self.db = db
        self.access = AccessResolver(db)

    def record_purchase(self, user: User, list_id: int, data: PurchaseCreate) -> Purchase:
        """Record every checked item of the list as one purchase.

        Each line's subtotal is ``(purchased_quantity or quantity) * price``;
        lines without a price count as zero and ``total_paid`` stays empty when
        nothing was priced. The items' ``purchased_at`` is stamped, their
        checked state is not changed.
        """
        self.access.require_edit(
            user.id,
            ResourceKind.LIST,
            list_id,
            detail="You don't have permission to edit this list",
        )

        checked_items = (
            self.db.query(Item)
            .filter(
                Item.list_id == list_id,
                Item.checked.is_(True),
                Item.not_deleted(),
            )
            .order_by(Item.sort_order, Item.id)
            .all()
        )
        if not checked_items:
            raise InvalidInputError("There are no checked items to record")

        purchased_at = data.purchased_at or datetime.now(UTC)
        purchase = Purchase(
            list_id=list_id,
            recorded_by=user.id,
            purchased_at=purchased_at,
            notes=data.notes,
        )

        total_paid = 0.0
        for item in checked_items:
            quantity = item.purchased_quantity or item.quantity or 1
            price = item.price or 0
            subtotal = quantity * price
            if price > 0:
                total_paid += subtotal

            purchase.items.append(
                PurchaseItem(
                    item_id=item.id,
                    name=item.name,
                    quantity=item.quantity,
                    purchased_quantity=quantity,
                    unit_id=item.unit_id,
                    price=price,
                    subtotal=subtotal,
                    store_id=item.store_id,
                )
            )
            item.purchased_at = purchased_at

        purchase.total_paid = total_paid if total_paid > 0 else None

        self.db.add(purchase)
        self.db.commit()
        self.db.refresh(purchase)

        logger.info(
            f"User {user.id} recorded purchase {purchase.id} with {len(checked_items)} items "
            f"on list {list_id}"
        )
        return purchase

    def list_purchases(self, user: User, list_id: int) -> list[Purchase]:
        """Get a list's purchases, newest first."""
        self.access.require_read(user.id, ResourceKind.LIST, list_id)

        return (
            self.db.query(Purchase)
            .options(selectinload(Purchase.items))
            .filter(Purchase.list_id == list_id)
            .order_by(Purchase.purchased_at.desc(), Purchase.id.desc())
            .all()
        )

    def get_purchase(self, user: User, purchase_id: int) -> Purchase:
        """Get a purchase of a list the user can read."""
        purchase = self._get(purchase_id)
        try:
            self.access.require_read(user.id, ResourceKind.LIST, purchase.list_id)
        except NotFoundError:
            raise NotFoundError("Purchase not found") from None
        return purchase

    def update_purchase(self, user: User, purchase_id: int, data: PurchaseUpdate) -> Purchase:
        """Correct a purchase and recompute its totals.

        Changed lines get ``subtotal = purchased_quantity * price`` and
        ``total_paid`` is summed again over the priced lines.
        """
        purchase = self._get(purchase_id)
        try:
            self.access.require_edit(
                user.id,
                ResourceKind.LIST,
                purchase.list_id,
                detail="You don't have permission to edit this purchase",
            )
        except NotFoundError:
            raise NotFoundError("Purchase not found") from None

        if data.purchased_at is not None:
            purchase.purchased_at = data.purchased_at
        if "notes" in data.model_fields_set:
            purchase.notes = data.notes

        lines = {line.id: line for line in purchase.items}
        for line_update in data.items:
            line = lines.get(line_update.id)
            if line is None:
                raise InvalidInputError(
                    f"Item {line_update.id} does not belong to purchase {purchase.id}"
                )
            if line_update.purchased_quantity is not None:
                line.purchased_quantity = line_update.purchased_quantity
            if line_update.price is not None:
                line.price = line_update.price
            line.subtotal = (line.purchased_quantity or line.quantity or 1) * line.price

        total_paid = sum(line.subtotal for line in purchase.items if line.price > 0)
        purchase.total_paid = total_paid if total_paid > 0 else None

        self.db.commit()
        self.db.refresh(purchase)

        logger.info(f"User {user.id} updated purchase {purchase.id}, total {purchase.total_paid}")
        return purchase

    def _get(self, purchase_id: int) -> Purchase:
        purchase = (
            self.db.query(Purchase)
            .options(selectinload(Purchase.items))
            .filter(Purchase.id == purchase_id)
            .first()
        )
        if not purchase:
            raise NotFoundError("Purchase not found")
        return purchase
