"""Product categories, subcategories and sizes accepted by the catalog."""

from typing import Dict, List

VALID_CATEGORIES: List[str] = [
    "sports-wear", "gym-wear", "fitness-wear",
    "streetwear", "fashion-wear", "mma-arts", "accessories",
]

SUBCATEGORIES: Dict[str, List[str]] = {
    "sports-wear": [
        "T-Shirts", "Shorts", "Jerseys", "Uniforms", "Tank Tops", "Hoodies", "Track Suits",
    ],
    "gym-wear": [
        "Tank Tops", "Leggings", "Sports Bras", "Gym Shorts", "Hoodies", "Tracksuits", "Joggers",
    ],
    "fitness-wear": [
        "Yoga Sets", "Compression Wear", "Running Shorts", "Fitness Tops", "Athletic Wear",
    ],
    "streetwear": [
        "T-Shirts", "Hoodies", "Sweatshirts", "Casual Shorts", "Joggers", "Tank Tops",
    ],
    "fashion-wear": [
        "Jackets", "Casual Wear", "Designer Tops", "Fashion Accessories",
    ],
    "mma-arts": [
        "MMA Shorts", "Rash Guards", "MMA Gloves", "Fighting Gear", "Training Wear",
    ],
    "accessories": [
        "Bags", "Caps", "Socks", "Gloves", "Belts",
    ],
}

VALID_SIZES: List[str] = ["XS", "S", "M", "L", "XL", "XXL", "XXXL"]

PRODUCT_STATUSES: List[str] = ["active", "inactive", "out-of-stock", "discontinued"]


def display_name(category: str) -> str:
    """``"sports-wear"`` -> ``"Sports Wear"``."""
    return " ".join(word.capitalize() for word in category.split("-"))


def is_valid_subcategory(category: str, subcategory: str) -> bool:
    return subcategory in SUBCATEGORIES.get(category, [])
