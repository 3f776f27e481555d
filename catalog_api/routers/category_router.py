from fastapi import APIRouter, Depends

from ..categories import SUBCATEGORIES, VALID_CATEGORIES, display_name
from ..dependencies import get_product_service
from ..services.product_service import ProductService, require_category

router = APIRouter(tags=["Categories"])


@router.get("/categories")
def list_categories():
    """All categories with display names and subcategories."""
    return {
        "success": True,
        "categories": [
            {
                "name": category,
                "display_name": display_name(category),
                "subcategories": SUBCATEGORIES.get(category, []),
            }
            for category in VALID_CATEGORIES
        ],
    }


@router.get("/categories-structure")
def categories_structure():
    return {
        "success": True,
        "categories": SUBCATEGORIES,
        "total_categories": len(SUBCATEGORIES),
        "total_subcategories": sum(len(subs) for subs in SUBCATEGORIES.values()),
    }


@router.get("/categories/summary")
def categories_summary(svc: ProductService = Depends(get_product_service)):
    """Product count per category."""
    return {
        "success": True,
        "message": "Categories summary fetched successfully",
        "total_categories": len(VALID_CATEGORIES),
        "categories": svc.category_summary(),
    }


@router.get("/subcategories/{category}")
def list_subcategories(category: str):
    category = require_category(category)
    return {
        "success": True,
        "category": category,
        "subcategories": SUBCATEGORIES.get(category, []),
    }
