"""Mock products covering every category, for local development and demos."""

import logging
from typing import List

from sqlalchemy.orm import Session

from .repositories.product_repository import ProductRepository
from .schemas.product import ProductCreate

logger = logging.getLogger("catalog_api.seed")

MOCK_PRODUCTS: List[dict] = [
    {
        "id": "sports-001",
        "name": "Pro Team Jersey",
        "category": "sports-wear",
        "subcategory": "Jerseys",
        "description": "Premium team jersey with moisture-wicking fabric and reinforced stitching for match days.",
        "colours": ["Navy Blue", "Red", "White"],
        "printing_method": "Sublimation",
        "sizes": ["M", "L", "XL", "XXL"],
        "minimum_quantity": 25,
        "featured": True,
        "tags": ["football", "sports", "team uniform"],
    },
    {
        "id": "gym-001",
        "name": "Seamless Training Leggings",
        "category": "gym-wear",
        "subcategory": "Leggings",
        "description": "High-waisted seamless leggings with four-way stretch and a squat-proof knit.",
        "colours": ["Black", "Olive"],
        "printing_method": "Heat Transfer",
        "sizes": ["XS", "S", "M", "L"],
        "minimum_quantity": 50,
        "tags": ["gym", "leggings"],
    },
    {
        "id": "fit-001",
        "name": "Two Piece Yoga Set",
        "category": "fitness-wear",
        "subcategory": "Yoga Sets",
        "description": "Soft brushed yoga set with a supportive top and matching flare pants.",
        "colours": ["Sage", "Lilac"],
        "printing_method": "Screen Print",
        "sizes": ["S", "M", "L"],
        "minimum_quantity": 30,
        "tags": ["yoga", "fitness"],
    },
    {
        "id": "street-001",
        "name": "Heavyweight Oversized Hoodie",
        "category": "streetwear",
        "subcategory": "Hoodies",
        "description": "Oversized 450gsm fleece hoodie with dropped shoulders and a double-lined hood.",
        "colours": ["Washed Black", "Bone"],
        "printing_method": "Puff Print",
        "sizes": ["S", "M", "L", "XL", "XXL"],
        "minimum_quantity": 20,
        "featured": True,
        "tags": ["streetwear", "hoodie"],
    },
    {
        "id": "fashion-001",
        "name": "Cropped Varsity Jacket",
        "category": "fashion-wear",
        "subcategory": "Jackets",
        "description": "Wool-blend varsity jacket with chenille patches and ribbed cuffs.",
        "colours": ["Green", "Cream"],
        "printing_method": "Embroidery",
        "sizes": ["S", "M", "L"],
        "minimum_quantity": 15,
        "tags": ["jacket", "varsity"],
    },
    {
        "id": "mma-001",
        "name": "Competition Rash Guard",
        "category": "mma-arts",
        "subcategory": "Rash Guards",
        "description": "Long sleeve compression rash guard with flatlock seams for grappling sessions.",
        "colours": ["Black", "Blue"],
        "printing_method": "Sublimation",
        "sizes": ["S", "M", "L", "XL"],
        "minimum_quantity": 25,
        "tags": ["mma", "bjj", "rash guard"],
    },
    {
        "id": "acc-001",
        "name": "Performance Crew Socks",
        "category": "accessories",
        "subcategory": "Socks",
        "description": "Cushioned crew socks with arch support and a breathable mesh top.",
        "colours": ["White", "Black"],
        "printing_method": "Knitted Logo",
        "sizes": ["M", "L"],
        "minimum_quantity": 100,
        "tags": ["socks", "accessories"],
    },
]


def seed_products(db: Session, reset: bool = False) -> int:
    """Insert the mock products, skipping ids that already exist.

    With ``reset`` the mock ids are deleted first. Returns the number inserted.
    """
    repo = ProductRepository(db)
    if reset:
        for item in MOCK_PRODUCTS:
            existing = repo.get(item["id"])
            if existing:
                repo.delete(existing)

    inserted = 0
    for item in MOCK_PRODUCTS:
        if repo.get(item["id"]):
            logger.info("Skipping existing product %s", item["id"])
            continue
        repo.create(**ProductCreate(**item).model_dump())
        inserted += 1
    logger.info("Seeded %d of %d mock products", inserted, len(MOCK_PRODUCTS))
    return inserted
