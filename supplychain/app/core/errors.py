"""
Erreurs métier typées.

Chaque erreur porte un ``code`` stable (exposé dans la réponse HTTP) et un
``status_code``. Les services lèvent, les handlers FastAPI traduisent :

    SupplyChainError
    +-- NotFoundError            404
    +-- ConflictError            409  (stock, annulation, suppression, unicité)
    +-- UnauthorizedError        401
    +-- ForbiddenError           403
"""

from __future__ import annotations


class SupplyChainError(Exception):
    code: str = "SUPPLY_CHAIN_ERROR"
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------- NOT FOUND ----------
class NotFoundError(SupplyChainError):
    code = "NOT_FOUND"
    status_code = 404
    entity = "Entity"

    def __init__(self, entity_id: int | str | None = None, message: str | None = None):
        self.entity_id = entity_id
        super().__init__(message or f"{self.entity} not found with ID: {entity_id}")


class CustomerNotFoundError(NotFoundError):
    code = "CUSTOMER_NOT_FOUND"
    entity = "Customer"


class CustomerOrderNotFoundError(NotFoundError):
    code = "CUSTOMER_ORDER_NOT_FOUND"
    entity = "Customer order"


class DeliveryNotFoundError(NotFoundError):
    code = "DELIVERY_NOT_FOUND"
    entity = "Delivery"


class ProductNotFoundError(NotFoundError):
    code = "PRODUCT_NOT_FOUND"
    entity = "Product"


class ProductionOrderNotFoundError(NotFoundError):
    code = "PRODUCTION_ORDER_NOT_FOUND"
    entity = "Production order"


class BillOfMaterialNotFoundError(NotFoundError):
    code = "BILL_OF_MATERIAL_NOT_FOUND"
    entity = "Bill of Material"


class RawMaterialNotFoundError(NotFoundError):
    code = "RAW_MATERIAL_NOT_FOUND"
    entity = "Raw material"


class SupplierNotFoundError(NotFoundError):
    code = "SUPPLIER_NOT_FOUND"
    entity = "Supplier"


class SupplyOrderNotFoundError(NotFoundError):
    code = "SUPPLY_ORDER_NOT_FOUND"
    entity = "Supply order"


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"
    entity = "User"


# ---------- CONFLICTS ----------
class ConflictError(SupplyChainError):
    code = "CONFLICT"
    status_code = 409


class InsufficientStockError(ConflictError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_name: str, available: int, required: int):
        self.product_name = product_name
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient stock for product '{product_name}'. Available: {available}, Required: {required}"
        )


class InsufficientMaterialsError(ConflictError):
    code = "INSUFFICIENT_MATERIALS"

    def __init__(self, product_id: int, missing: list[tuple[str, int, int]]):
        # missing = [(material_name, required, available), ...]
        self.product_id = product_id
        self.missing = missing
        details = ", ".join(f"{name} (Required: {req}, Available: {avail})" for name, req, avail in missing)
        super().__init__(
            f"Cannot start production for product ID: {product_id}. Insufficient materials: {details}"
        )


class CustomerOrderCannotBeCancelledError(ConflictError):
    code = "CUSTOMER_ORDER_CANNOT_BE_CANCELLED"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(
            f"Cannot cancel customer order with ID: {order_id}. Order has already been shipped or delivered"
        )


class ProductionOrderCannotBeCancelledError(ConflictError):
    code = "PRODUCTION_ORDER_CANNOT_BE_CANCELLED"

    def __init__(self, order_id: int, status: str):
        self.order_id = order_id
        super().__init__(
            f"Cannot cancel production order with ID: {order_id}. Current status: {status}"
        )


class SupplyOrderCannotBeDeletedError(ConflictError):
    code = "SUPPLY_ORDER_CANNOT_BE_DELETED"

    def __init__(self, order_id: int, status: str):
        self.order_id = order_id
        super().__init__(f"Cannot delete supply order with ID: {order_id}. Order status is: {status}")


class HasActiveOrdersError(ConflictError):
    code = "HAS_ACTIVE_ORDERS"
    entity = "entity"
    orders_label = "active order(s)"

    def __init__(self, entity_id: int, active_count: int):
        self.entity_id = entity_id
        self.active_count = active_count
        super().__init__(
            f"Cannot delete {self.entity} with ID: {entity_id}. "
            f"It has {active_count} {self.orders_label}"
        )


class CustomerHasActiveOrdersError(HasActiveOrdersError):
    code = "CUSTOMER_HAS_ACTIVE_ORDERS"
    entity = "customer"


class SupplierHasActiveOrdersError(HasActiveOrdersError):
    code = "SUPPLIER_HAS_ACTIVE_ORDERS"
    entity = "supplier"


class ProductHasActiveOrdersError(HasActiveOrdersError):
    code = "PRODUCT_HAS_ACTIVE_ORDERS"
    entity = "product"
    orders_label = "active production order(s)"


class EmailAlreadyExistsError(ConflictError):
    code = "EMAIL_ALREADY_EXISTS"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already exists: {email}")


class ProductNameAlreadyExistsError(ConflictError):
    code = "PRODUCT_NAME_ALREADY_EXISTS"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Product name already exists: {name}")


class DeliveryAlreadyExistsError(ConflictError):
    code = "DELIVERY_ALREADY_EXISTS"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Delivery already exists for order ID: {order_id}")


# ---------- AUTH ----------
class UnauthorizedError(SupplyChainError):
    code = "UNAUTHORIZED"
    status_code = 401


class ForbiddenError(SupplyChainError):
    code = "FORBIDDEN"
    status_code = 403
