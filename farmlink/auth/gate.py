"""Role and ownership checks for listing operations.

`authorize` is pure: given the verified identity (or None), the operation
and, where relevant, the owner of the target listing, it either returns
or raises. Route handlers use it through the `requires` dependency.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Depends

from farmlink.auth.security import get_optional_identity
from farmlink.errors import Forbidden, Unauthenticated
from farmlink.schemas.user import IdentityClaim


class Operation(str, Enum):
    BROWSE_CROPS = "browse_crops"
    VIEW_OWN_CROPS = "view_own_crops"
    CREATE_CROP = "create_crop"
    DELETE_CROP = "delete_crop"
    BROWSE_PRODUCTS = "browse_products"
    VIEW_OWN_PRODUCTS = "view_own_products"
    CREATE_PRODUCT = "create_product"
    DELETE_PRODUCT = "delete_product"


@dataclass(frozen=True)
class Rule:
    role: Optional[str] = None
    owner_only: bool = False
    denied: str = "Access denied."


RULES = {
    Operation.BROWSE_CROPS: Rule(),
    Operation.VIEW_OWN_CROPS: Rule(role="farmer"),
    Operation.CREATE_CROP: Rule(role="farmer", denied="Only farmers can post crops."),
    Operation.DELETE_CROP: Rule(role="farmer", owner_only=True),
    Operation.BROWSE_PRODUCTS: Rule(),
    Operation.VIEW_OWN_PRODUCTS: Rule(role="vendor"),
    Operation.CREATE_PRODUCT: Rule(role="vendor", denied="Only vendors can post products."),
    Operation.DELETE_PRODUCT: Rule(role="vendor", owner_only=True),
}


def authorize(
    identity: Optional[IdentityClaim],
    operation: Operation,
    owner_id: Optional[int] = None,
) -> IdentityClaim:
    if identity is None:
        raise Unauthenticated()

    rule = RULES[operation]
    if rule.role is not None and identity.role != rule.role:
        raise Forbidden(rule.denied)
    # owner_id is None when ownership is enforced by the store's delete predicate.
    if rule.owner_only and owner_id is not None and owner_id != identity.id:
        raise Forbidden(rule.denied)
    return identity


def requires(operation: Operation):
    def dependency(identity: Optional[IdentityClaim] = Depends(get_optional_identity)) -> IdentityClaim:
        return authorize(identity, operation)

    return dependency
