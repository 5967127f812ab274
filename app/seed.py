# app/seed.py
"""
Demo data for a fresh shop.

Creates the configured admin account and the sample catalogue on startup
(SEED_DEMO_DATA=true). Running it twice changes nothing: the admin is only
created when its email is free, and sweets only when the inventory is empty.
"""

import logging

from app.core.security import hash_password
from app.models.user import Role, User
from app.repositories.sweet_repo import SweetRepository
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

SAMPLE_SWEETS: list[dict] = [
    {
        "name": "Belgian Dark Chocolate Truffle",
        "category": "chocolate",
        "price": 12.99,
        "quantity": 50,
        "image_url": "https://images.unsplash.com/photo-1481391319762-47dff72954d9?w=400&q=80",
        "description": "Rich, velvety dark chocolate truffles made with premium Belgian cocoa",
    },
    {
        "name": "Rainbow Lollipop Swirl",
        "category": "candy",
        "price": 3.99,
        "quantity": 100,
        "image_url": "https://images.unsplash.com/photo-1575224300306-1b8da36134ec?w=400&q=80",
        "description": "Colorful handcrafted lollipops with a delightful fruity flavor",
    },
    {
        "name": "Red Velvet Cupcake",
        "category": "cake",
        "price": 6.99,
        "quantity": 30,
        "image_url": "https://images.unsplash.com/photo-1614707267537-b85aaf00c4b7?w=400&q=80",
        "description": "Moist red velvet cupcake topped with cream cheese frosting",
    },
    {
        "name": "Classic Chocolate Chip Cookie",
        "category": "cookie",
        "price": 2.49,
        "quantity": 75,
        "image_url": "https://images.unsplash.com/photo-1499636136210-6f4ee915583e?w=400&q=80",
        "description": "Freshly baked cookies loaded with premium chocolate chips",
    },
    {
        "name": "French Butter Croissant",
        "category": "pastry",
        "price": 4.99,
        "quantity": 25,
        "image_url": "https://images.unsplash.com/photo-1555507036-ab1f4038808a?w=400&q=80",
        "description": "Flaky, buttery croissants made with authentic French technique",
    },
    {
        "name": "Vanilla Bean Gelato",
        "category": "ice_cream",
        "price": 7.99,
        "quantity": 40,
        "image_url": "https://images.unsplash.com/photo-1570197788417-0e82375c9371?w=400&q=80",
        "description": "Creamy Italian gelato made with real Madagascar vanilla beans",
    },
    {
        "name": "Salted Caramel Bonbon",
        "category": "chocolate",
        "price": 15.99,
        "quantity": 35,
        "image_url": "https://images.unsplash.com/photo-1549007994-cb92caebd54b?w=400&q=80",
        "description": "Luxurious salted caramel encased in smooth milk chocolate",
    },
    {
        "name": "Strawberry Cheesecake Slice",
        "category": "cake",
        "price": 8.99,
        "quantity": 20,
        "image_url": "https://images.unsplash.com/photo-1508737027454-e6454ef45afd?w=400&q=80",
        "description": "Creamy New York style cheesecake with fresh strawberry topping",
    },
]


def seed_admin(user_repo: UserRepository, email: str, password: str) -> User:
    """Return the admin account for `email`, creating it if needed."""
    existing = user_repo.get_by_email(email)
    if existing is not None:
        return existing

    admin = user_repo.create(email, hash_password(password), Role.ADMIN)
    logger.info("Seeded admin account %s", admin.id)
    return admin


def seed_sweets(sweet_repo: SweetRepository, admin_id: str) -> int:
    """Insert the sample catalogue into an empty inventory. Returns rows added."""
    if sweet_repo.list_all():
        return 0

    for fields in SAMPLE_SWEETS:
        sweet_repo.create(fields, admin_id)

    logger.info("Seeded %d sample sweets", len(SAMPLE_SWEETS))
    return len(SAMPLE_SWEETS)


def seed_demo_data(
    user_repo: UserRepository,
    sweet_repo: SweetRepository,
    admin_email: str,
    admin_password: str,
) -> None:
    admin = seed_admin(user_repo, admin_email, admin_password)
    seed_sweets(sweet_repo, admin.id)
