class ProductError(Exception):
    """Base class for failures raised by the product data layer."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProductValidationError(ProductError):
    """Exception raised when client-supplied data violates a field constraint."""

    status_code = 400


class ProductNotFoundError(ProductError):
    """Exception raised when the requested product doesn't exist."""

    status_code = 404

    def __init__(self, product_id: int):
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id


class StorageError(ProductError):
    """Exception raised when the datastore rejects or fails a statement."""

    status_code = 500


class DatabaseInitError(Exception):
    """Exception raised when the datastore cannot be opened or its schema created."""
    pass
