from typing import Optional, List
from uuid import UUID


class ErrorCodes:
    """Centralized error code constants"""
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INVALID_MOVEMENT = "INVALID_MOVEMENT"
    CATEGORY_IN_USE = "CATEGORY_IN_USE"
    PRODUCT_IN_USE = "PRODUCT_IN_USE"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class InventoryServiceError(Exception):
    """Base exception for inventory operations."""
    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.code = code

    def __str__(self):
        error_details = f" - Errors: {', '.join(self.errors)}" if self.errors else ""
        code_details = f" [Code: {self.code}]" if self.code else ""
        return f"{self.__class__.__name__}: {self.message}{error_details}{code_details}"


class NotAuthenticatedError(InventoryServiceError):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message=message, code=ErrorCodes.NOT_AUTHENTICATED)


class PermissionDeniedError(InventoryServiceError):
    """Raised when an actor may not act on a category."""
    def __init__(self, message: str = "User not permitted to manage products in this category."):
        super().__init__(message=message, code=ErrorCodes.PERMISSION_DENIED)


class AdminRequiredError(InventoryServiceError):
    def __init__(self, message: str = "Administrator access required"):
        super().__init__(message=message, code=ErrorCodes.ADMIN_REQUIRED)


class ProductNotFoundError(InventoryServiceError):
    """Raised when a requested product doesn't exist."""
    def __init__(self, product_id: UUID):
        super().__init__(
            message=f"Product not found with id: {product_id}",
            errors=[f"product_id={product_id}: error=not_found"],
            code=ErrorCodes.PRODUCT_NOT_FOUND
        )


class CategoryNotFoundError(InventoryServiceError):
    """Raised when a referenced category doesn't exist."""
    def __init__(self, category_id: UUID):
        super().__init__(
            message=f"Category not found with id: {category_id}",
            errors=[f"category_id={category_id}: error=not_found"],
            code=ErrorCodes.CATEGORY_NOT_FOUND
        )


class UserNotFoundError(InventoryServiceError):
    def __init__(self, user_id: UUID):
        super().__init__(
            message=f"User not found with id: {user_id}",
            errors=[f"user_id={user_id}: error=not_found"],
            code=ErrorCodes.USER_NOT_FOUND
        )


class InsufficientStockError(InventoryServiceError):
    """Raised when an exit asks for more than the quantity in stock."""
    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            message=f"Insufficient stock for product: {product_name}",
            errors=[f"available={available}", f"requested={requested}"],
            code=ErrorCodes.INSUFFICIENT_STOCK
        )
        self.available = available
        self.requested = requested


class InvalidMovementError(InventoryServiceError):
    def __init__(self, message: str = "Movement quantity must be greater than zero"):
        super().__init__(message=message, errors=[message], code=ErrorCodes.INVALID_MOVEMENT)


class CategoryInUseError(InventoryServiceError):
    def __init__(self, category_id: UUID, product_count: int):
        super().__init__(
            message=f"Category {category_id} still has {product_count} product(s)",
            code=ErrorCodes.CATEGORY_IN_USE
        )


class CategoryAssignedError(InventoryServiceError):
    """Raised when a category is still assigned to one or more users."""
    def __init__(self, category_id: UUID, user_count: int):
        super().__init__(
            message=f"Category {category_id} is still assigned to {user_count} user(s)",
            code=ErrorCodes.CATEGORY_IN_USE
        )


class ProductInUseError(InventoryServiceError):
    def __init__(self, product_id: UUID):
        super().__init__(
            message=f"Product {product_id} has stock movements and cannot be deleted",
            code=ErrorCodes.PRODUCT_IN_USE
        )


class DuplicateEmailError(InventoryServiceError):
    def __init__(self, email: str):
        super().__init__(
            message=f"A user with email {email} already exists",
            code=ErrorCodes.DUPLICATE_EMAIL
        )


class InternalServiceError(InventoryServiceError):
    """Storage failure surfaced without details."""
    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message=message, code=ErrorCodes.INTERNAL_ERROR)
