from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ..categories import display_name
from ..dependencies import get_product_service
from ..repositories.image_store import ImageUpload
from ..schemas.product import (
    ProductCreate,
    ProductListResponse,
    ProductManageListResponse,
    ProductMutationResponse,
    ProductResponse,
    ProductUpdate,
)
from ..security import require_auth
from ..services.product_service import ProductService

router = APIRouter(tags=["Products"])


def _serialize(products):
    return [ProductResponse.model_validate(p) for p in products]


@router.get("/products-json", response_model=ProductListResponse)
def list_products(svc: ProductService = Depends(get_product_service)):
    """All products, newest first."""
    products = svc.list_products()
    return ProductListResponse(count=len(products), products=_serialize(products))


@router.get("/products/category/{category}", response_model=ProductListResponse)
def list_category_products(category: str, svc: ProductService = Depends(get_product_service)):
    """Products in one category, newest first."""
    products = svc.list_by_category(category)
    return ProductListResponse(category=category.lower(), count=len(products), products=_serialize(products))


@router.get("/products/category/{category}/manage", response_model=ProductManageListResponse)
def list_category_products_for_management(category: str, svc: ProductService = Depends(get_product_service)):
    """Compact listing for the admin dashboard (truncated descriptions)."""
    items = svc.list_for_management(category)
    category = category.lower()
    return ProductManageListResponse(
        category=category,
        category_display=display_name(category),
        count=len(items),
        products=items,
    )


@router.get("/products/subcategory/{category}/{subcategory}", response_model=ProductListResponse)
def list_subcategory_products(
    category: str,
    subcategory: str,
    svc: ProductService = Depends(get_product_service),
):
    products = svc.list_by_subcategory(category, subcategory)
    return ProductListResponse(
        category=category.lower(),
        subcategory=subcategory,
        count=len(products),
        products=_serialize(products),
    )


@router.get("/products/{category}/{subcategory}", response_model=ProductListResponse)
def find_subcategory_products(
    category: str,
    subcategory: str,
    svc: ProductService = Depends(get_product_service),
):
    """Like /products/subcategory/... but 404 when nothing matches."""
    products = svc.list_by_subcategory(category, subcategory)
    if not products:
        raise HTTPException(status_code=404, detail="No products found for this category and subcategory.")
    return ProductListResponse(
        category=category.lower(),
        subcategory=subcategory,
        count=len(products),
        products=_serialize(products),
    )


# -- Admin (Basic auth) --

@router.post("/create-product", response_model=ProductResponse, status_code=201)
async def create_product(
    product_id: str = Form(..., alias="id"),
    name: str = Form(...),
    category: str = Form(...),
    subcategory: str = Form(...),
    description: str = Form(...),
    colours: List[str] = Form(...),
    printing_method: str = Form(...),
    sizes: List[str] = Form(...),
    minimum_quantity: int = Form(...),
    featured: bool = Form(False),
    tags: Optional[str] = Form(None, description="Comma-separated"),
    images: Optional[List[UploadFile]] = File(None, description="Up to 5 JPG, PNG or WebP images"),
    svc: ProductService = Depends(get_product_service),
    _user: str = Depends(require_auth),
):
    """Create a product from a multipart form, uploading its images to the image store."""
    try:
        req = ProductCreate(
            id=product_id,
            name=name,
            category=category,
            subcategory=subcategory,
            description=description,
            colours=colours,
            printing_method=printing_method,
            sizes=sizes,
            minimum_quantity=minimum_quantity,
            featured=featured,
            tags=tags or [],
        )
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False))

    uploads = [
        ImageUpload(filename=f.filename, content=await f.read(), content_type=f.content_type)
        for f in images or []
        if f.filename
    ]
    return await svc.create_product_with_images(req, uploads)


@router.post("/create-product-json", response_model=ProductResponse, status_code=201)
def create_product_json(
    req: ProductCreate,
    svc: ProductService = Depends(get_product_service),
    _user: str = Depends(require_auth),
):
    """Create a product from JSON. ``pictures`` holds image URLs hosted elsewhere."""
    return svc.create_product(req)


@router.put("/products/category/{category}/{product_id}", response_model=ProductMutationResponse)
def update_product(
    category: str,
    product_id: str,
    req: ProductUpdate,
    svc: ProductService = Depends(get_product_service),
    _user: str = Depends(require_auth),
):
    product = svc.update_product(category, product_id, req)
    return ProductMutationResponse(
        message=f"{product.category} product updated successfully",
        category=product.category,
        product=ProductResponse.model_validate(product),
    )


@router.delete("/products/category/{category}/{product_id}", response_model=ProductMutationResponse)
async def delete_product(
    category: str,
    product_id: str,
    svc: ProductService = Depends(get_product_service),
    _user: str = Depends(require_auth),
):
    """Delete a product and the images the image store holds for it."""
    deleted_id = await svc.delete_product(category, product_id)
    category = category.lower()
    return ProductMutationResponse(
        message=f"{category} product deleted successfully",
        category=category,
        deleted_id=deleted_id,
    )
