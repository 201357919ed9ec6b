class StoreError(ValueError):
    """Domain failure with the HTTP status the API answers with."""
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

class NotFound(StoreError):
    status_code = 404

class Conflict(StoreError):
    status_code = 409

class Invalid(StoreError):
    status_code = 422

class EmptyCart(StoreError):
    def __init__(self): super().__init__('Cart is empty')

class MissingShippingAddress(StoreError):
    def __init__(self): super().__init__('Please select shipping address')

class InsufficientStock(Conflict):
    def __init__(self, product_name: str, available: int):
        super().__init__(f'Only {available} left in stock for {product_name}')

class OrderPlacementFailed(StoreError):
    status_code = 500
    def __init__(self): super().__init__('Failed to place order')
