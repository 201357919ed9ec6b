from pydantic import BaseModel, EmailStr, Field, computed_field, model_validator
from typing import Optional, List
from datetime import datetime
from teashop.db.models import PaymentMethod
from teashop.services.pricing import effective_unit_price, discount_percent

# --- catalog ---

class CategoryBase(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: Optional[str] = None
    image_url: Optional[str] = None
class CategoryCreate(CategoryBase): pass
class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = None
    image_url: Optional[str] = None
class CategoryRead(CategoryBase):
    id: int
    created_at: datetime
    class Config: from_attributes = True

class ProductBase(BaseModel):
    category_id: int
    name: str = Field(min_length=2, max_length=240)
    description: Optional[str] = None
    price_cents: int = Field(ge=0)
    sale_price_cents: Optional[int] = Field(default=None, ge=0)
    image_url: str = Field(min_length=1)
    stock: int = Field(default=0, ge=0)
    is_bestseller: bool = False
class ProductCreate(ProductBase):
    @model_validator(mode='after')
    def _sale_below_price(self):
        if self.sale_price_cents is not None and self.sale_price_cents >= self.price_cents:
            raise ValueError('sale_price_cents must be lower than price_cents')
        return self
class ProductUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=2, max_length=240)
    description: Optional[str] = None
    price_cents: Optional[int] = Field(default=None, ge=0)
    sale_price_cents: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = Field(default=None, min_length=1)
    stock: Optional[int] = Field(default=None, ge=0)
    is_bestseller: Optional[bool] = None
class ProductRead(ProductBase):
    id: int
    category_id: Optional[int] = None
    created_at: datetime
    class Config: from_attributes = True

    @computed_field
    @property
    def effective_price_cents(self) -> int:
        return effective_unit_price(self.price_cents, self.sale_price_cents)

    @computed_field
    @property
    def discount_percent(self) -> int:
        return discount_percent(self.price_cents, self.sale_price_cents)

class ImageUploadRead(BaseModel):
    object_key: str
    url: str

class CategoryWithProducts(BaseModel):
    category: CategoryRead
    products: List[ProductRead] = []

class HomeRead(BaseModel):
    categories: List[CategoryRead]
    bestsellers: List[ProductRead]

class AdminCategoryGroup(BaseModel):
    category: Optional[CategoryRead] = None
    name: str
    product_count: int
    expanded: bool
    products: List[ProductRead] = []

# --- auth / account ---

class SignUpPayload(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)

class SignInPayload(BaseModel):
    email: EmailStr
    password: str

class TokenRead(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    role: str

class UserRead(BaseModel):
    id: int
    email: EmailStr
    role: str
    class Config: from_attributes = True

class AddressCreate(BaseModel):
    full_name: str = Field(min_length=1)
    street_address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    phone: str = Field(min_length=1)
class AddressRead(AddressCreate):
    id: int
    class Config: from_attributes = True

class AccountRead(UserRead):
    addresses: List[AddressRead] = []

# --- cart ---

class CartItemAdd(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)

class CartItemUpdate(BaseModel):
    quantity: int = Field(ge=0)

class CartItemRead(BaseModel):
    product_id: int
    quantity: int
    product: ProductRead
    class Config: from_attributes = True

class CartTotals(BaseModel):
    subtotal_cents: int
    tax_cents: int
    shipping_cents: int
    total_cents: int

class CartRead(BaseModel):
    items: List[CartItemRead] = []
    totals: CartTotals
    currency: str

# --- orders ---

class CheckoutPayload(BaseModel):
    shipping_address_id: Optional[int] = None
    billing_address_id: Optional[int] = None
    same_as_shipping: bool = True
    payment_method: PaymentMethod = PaymentMethod.CARD

class CheckoutResponse(BaseModel):
    order_id: int
    order_number: str
    status: str
    subtotal_cents: int
    tax_cents: int
    shipping_cents: int
    total_cents: int
    currency: str
    payment_id: int
    confirmation_url: str

class OrderItemRead(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price_at_purchase_cents: int
    sale_price_at_purchase_cents: Optional[int] = None
    class Config: from_attributes = True

class PaymentRead(BaseModel):
    id: int
    amount_cents: int
    currency: str
    payment_method: PaymentMethod
    status: str
    class Config: from_attributes = True

class OrderRead(BaseModel):
    id: int
    order_number: str
    status: str
    subtotal_cents: int
    tax_cents: int
    shipping_cents: int
    total_cents: int
    currency: str
    shipping_address_id: int
    billing_address_id: int
    created_at: datetime
    items: List[OrderItemRead] = []
    payments: List[PaymentRead] = []
    class Config: from_attributes = True
