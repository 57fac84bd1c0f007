"""Request body schemas. Wire format is camelCase, fields are snake_case."""

from typing import Annotated, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel


class Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra='ignore',
    )

    def to_record(self):
        """Dump as a camelCase dict ready for storage."""
        return self.model_dump(by_alias=True)


def validation_errors(exc: ValidationError):
    # ctx can hold exception objects jsonify can't encode, input can echo passwords
    return exc.errors(include_url=False, include_context=False, include_input=False)


# ---------- USERS ----------

# passwords are taken byte for byte, only the other fields get trimmed
Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]


class InsertUser(Schema):
    model_config = ConfigDict(str_strip_whitespace=False)

    username: Trimmed = Field(min_length=3, max_length=50)
    password: str = Field(min_length=8)
    email: EmailStr
    full_name: Trimmed = Field(min_length=2)


class LoginRequest(Schema):
    model_config = ConfigDict(str_strip_whitespace=False)

    username: Trimmed = Field(min_length=1)
    password: str = Field(min_length=1)


# ---------- CATALOG ----------

class InsertCategory(Schema):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
    description: Optional[str] = None
    image_url: Optional[str] = None


class InsertProduct(Schema):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: float = Field(gt=0)
    discount_price: Optional[float] = Field(default=None, gt=0)
    image_url: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    category_id: Optional[int] = None
    stock: int = Field(default=0, ge=0)
    featured: bool = False
    is_new_arrival: bool = False
    is_best_seller: bool = False

    @model_validator(mode='after')
    def check_discount(self):
        if self.discount_price is not None and self.discount_price >= self.price:
            raise ValueError('discountPrice must be lower than price')
        return self


# ---------- CART & ORDERS ----------

class InsertCartItem(Schema):
    user_id: int
    product_id: int
    quantity: int = Field(default=1, ge=1)


class InsertOrder(Schema):
    user_id: int
    shipping_address: str = Field(min_length=5)
    payment_method: Literal['cod', 'card', 'upi']
    # accepted for compatibility, the server computes the real total
    total: Optional[float] = Field(default=None, ge=0)


# ---------- REVIEWS & TESTIMONIALS ----------

class InsertReview(Schema):
    user_id: int
    product_id: int
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1, max_length=2000)


class InsertTestimonial(Schema):
    name: str = Field(min_length=1)
    location: Optional[str] = None
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)
    avatar_initials: Optional[str] = Field(default=None, max_length=3)
    avatar_color: Optional[str] = None
