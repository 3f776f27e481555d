from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..categories import SUBCATEGORIES, VALID_CATEGORIES, VALID_SIZES, is_valid_subcategory

ProductStatus = Literal["active", "inactive", "out-of-stock", "discontinued"]


def _check_category(value: str) -> str:
    value = value.lower()
    if value not in VALID_CATEGORIES:
        raise ValueError(f"Category must be one of: {', '.join(VALID_CATEGORIES)}")
    return value


def _check_colours(values: List[str]) -> List[str]:
    if any(not c for c in values):
        raise ValueError("Each colour must not be empty")
    return values


def _check_sizes(values: List[str]) -> List[str]:
    bad = [s for s in values if s not in VALID_SIZES]
    if bad:
        raise ValueError(f"Each size must be one of: {', '.join(VALID_SIZES)}")
    return values


def _split_tags(value):
    # Form-style clients send "a, b, c"
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return value


def _normalise_tags(values: List[str]) -> List[str]:
    if any(not t for t in values):
        raise ValueError("Each tag must not be empty")
    return [t.lower() for t in values]


class ProductCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=2, max_length=20, pattern=r"^[a-zA-Z0-9_-]+$",
                    description="User-defined identifier (letters, numbers, hyphens, underscores)")
    name: str = Field(..., min_length=2, max_length=100)
    category: str
    subcategory: str = Field(..., max_length=50)
    description: str = Field(..., min_length=10, max_length=1000)
    pictures: List[str] = Field(default_factory=list, description="Image URLs")
    colours: List[str] = Field(..., min_length=1)
    printing_method: str = Field(..., min_length=2, max_length=200)
    sizes: List[str] = Field(..., min_length=1)
    minimum_quantity: int = Field(..., ge=1, le=1000)
    featured: bool = False
    tags: List[str] = Field(default_factory=list)
    status: ProductStatus = "active"

    @field_validator("category")
    @classmethod
    def check_category(cls, v: str) -> str:
        return _check_category(v)

    @field_validator("colours")
    @classmethod
    def check_colours(cls, v: List[str]) -> List[str]:
        return _check_colours(v)

    @field_validator("sizes")
    @classmethod
    def check_sizes(cls, v: List[str]) -> List[str]:
        return _check_sizes(v)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return _split_tags(v)

    @field_validator("tags")
    @classmethod
    def normalise_tags(cls, v: List[str]) -> List[str]:
        return _normalise_tags(v)

    @model_validator(mode="after")
    def check_subcategory(self):
        if not is_valid_subcategory(self.category, self.subcategory):
            raise ValueError(
                f"Invalid subcategory for {self.category}. "
                f"Available subcategories: {', '.join(SUBCATEGORIES[self.category])}"
            )
        return self


class ProductUpdate(BaseModel):
    """Partial update; omitted fields are left as they are."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    subcategory: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    pictures: Optional[List[str]] = None
    colours: Optional[Union[List[str], str]] = None
    printing_method: Optional[str] = Field(None, min_length=2, max_length=200)
    sizes: Optional[List[str]] = None
    minimum_quantity: Optional[int] = Field(None, ge=1, le=1000)
    featured: Optional[bool] = None
    tags: Optional[List[str]] = None
    status: Optional[ProductStatus] = None

    @field_validator("colours")
    @classmethod
    def check_colours(cls, v):
        if v is None:
            return v
        if isinstance(v, str):
            v = [v]
        return _check_colours(v)

    @field_validator("sizes")
    @classmethod
    def check_sizes(cls, v):
        return v if v is None else _check_sizes(v)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return _split_tags(v)

    @field_validator("tags")
    @classmethod
    def normalise_tags(cls, v):
        return v if v is None else _normalise_tags(v)


class ProductResponse(BaseModel):
    id: str
    name: str
    category: str
    subcategory: str
    description: str
    pictures: List[str] = []
    colours: List[str] = []
    printing_method: str
    sizes: List[str] = []
    minimum_quantity: int
    featured: bool = False
    tags: List[str] = []
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProductManageItem(BaseModel):
    id: str
    name: str
    category: str
    subcategory: str
    description: str
    status: str
    featured: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductListResponse(BaseModel):
    success: bool = True
    count: int
    category: Optional[str] = None
    subcategory: Optional[str] = None
    products: List[ProductResponse]


class ProductManageListResponse(BaseModel):
    success: bool = True
    category: str
    category_display: str
    count: int
    products: List[ProductManageItem]


class ProductMutationResponse(BaseModel):
    success: bool = True
    message: str
    category: str
    product: Optional[ProductResponse] = None
    deleted_id: Optional[str] = None
