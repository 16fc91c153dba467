"""Crops and products share one store: each kind is described by a
`ListingKind` and the store operates on whichever kind it is handed."""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from farmlink.crud.base import is_present, storage_guard
from farmlink.errors import Unauthenticated, ValidationError
from farmlink.models.crop import Crop
from farmlink.models.product import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingKind:
    name: str
    model: type
    owner_field: str
    owner_name_field: str
    price_field: str
    text_fields: tuple
    search_fields: tuple
    optional_fields: tuple = ()
    missing_message: str = "All fields are required."

    @property
    def owner_column(self):
        return getattr(self.model, self.owner_field)


CROP = ListingKind(
    name="crop",
    model=Crop,
    owner_field="farmer_id",
    owner_name_field="farmer_name",
    price_field="price_per_kg",
    text_fields=("crop_name", "quantity", "location", "phone"),
    search_fields=("crop_name", "farmer_name", "location"),
)

PRODUCT = ListingKind(
    name="product",
    model=Product,
    owner_field="vendor_id",
    owner_name_field="vendor_name",
    price_field="price",
    text_fields=("product_name", "location", "phone"),
    search_fields=("product_name", "vendor_name", "location", "description"),
    optional_fields=("description",),
    missing_message="Product name, price, location, and phone are required.",
)


def parse_price(value, missing_message: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(missing_message)
    if isinstance(value, bool):
        raise ValidationError("Enter a valid price.")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Enter a valid price.")
    if not math.isfinite(price) or price <= 0:
        raise ValidationError("Enter a valid price.")
    return price


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ListingStore:
    def __init__(self, db: Session):
        self.db = db

    def _newest_first(self, kind: ListingKind, query):
        return query.order_by(kind.model.created_at.desc(), kind.model.id.desc())

    def list_all(self, kind: ListingKind, search: Optional[str] = None) -> List:
        query = self.db.query(kind.model)
        if search and search.strip():
            pattern = f"%{_escape_like(search.strip())}%"
            query = query.filter(
                or_(*[getattr(kind.model, f).ilike(pattern, escape="\\") for f in kind.search_fields])
            )
        with storage_guard(self.db, f"list {kind.name}s"):
            return self._newest_first(kind, query).all()

    def list_by_owner(self, kind: ListingKind, owner_id: int) -> List:
        query = self.db.query(kind.model).filter(kind.owner_column == owner_id)
        with storage_guard(self.db, f"list {kind.name}s by owner"):
            return self._newest_first(kind, query).all()

    def create(self, kind: ListingKind, owner_id: int, owner_name: str, fields: dict) -> int:
        values = {}
        for name in kind.text_fields:
            if not is_present(fields.get(name)):
                raise ValidationError(kind.missing_message)
            values[name] = fields[name].strip()
        values[kind.price_field] = parse_price(fields.get(kind.price_field), kind.missing_message)
        for name in kind.optional_fields:
            value = fields.get(name)
            values[name] = value.strip() if isinstance(value, str) else ""

        db_listing = kind.model(
            **values,
            **{kind.owner_field: owner_id, kind.owner_name_field: owner_name},
        )
        with storage_guard(self.db, f"create {kind.name}", f"Failed to post {kind.name}."):
            try:
                self.db.add(db_listing)
                self.db.commit()
            except IntegrityError:
                # The only constraint left to fail is the owner foreign key:
                # the token outlived its account.
                self.db.rollback()
                logger.info("Rejected %s for missing owner id=%s", kind.name, owner_id)
                raise Unauthenticated("Account no longer exists. Please login again.")
            self.db.refresh(db_listing)

        logger.info("Created %s id=%s owner=%s", kind.name, db_listing.id, owner_id)
        return db_listing.id

    def delete_owned(self, kind: ListingKind, listing_id: int, owner_id: int) -> bool:
        # Ownership is part of the DELETE predicate, so there is no separate check to race.
        with storage_guard(self.db, f"delete {kind.name}", "Failed to delete."):
            removed = (
                self.db.query(kind.model)
                .filter(kind.model.id == listing_id, kind.owner_column == owner_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()

        if removed:
            logger.info("Deleted %s id=%s owner=%s", kind.name, listing_id, owner_id)
        return removed > 0
