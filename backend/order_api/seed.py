"""
Seed data for development and testing.
Creates one restaurant per region with a small menu.
"""

from sqlalchemy.orm import Session
from sqlalchemy import select

from order_api.models import MenuItem, Restaurant
from shared.config.constants import Regions
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit

logger = get_logger(__name__)


# Prices in cents
SEED_RESTAURANTS: list[dict] = [
    {
        "name": "Tandoori Express",
        "region": Regions.INDIA,
        "menu": [
            ("Butter Chicken", 35000),
            ("Paneer Tikka", 25000),
            ("Biryani", 30000),
        ],
    },
    {
        "name": "Burger Planet",
        "region": Regions.AMERICA,
        "menu": [
            ("Cheese Burger", 1000),
            ("Fries", 400),
            ("Hotdog", 800),
        ],
    },
]

# Demo identities for issuing development tokens (see cli.py issue-token)
SEED_USERS: list[dict] = [
    {"sub": "nick-fury", "name": "Nick Fury", "role": "ADMIN", "region": Regions.INDIA},
    {"sub": "captain-marvel", "name": "Captain Marvel", "role": "MANAGER", "region": Regions.INDIA},
    {"sub": "captain-america", "name": "Captain America", "role": "MANAGER", "region": Regions.AMERICA},
    {"sub": "thanos", "name": "Thanos", "role": "MEMBER", "region": Regions.INDIA},
    {"sub": "thor", "name": "Thor", "role": "MEMBER", "region": Regions.INDIA},
    {"sub": "travis", "name": "Travis", "role": "MEMBER", "region": Regions.AMERICA},
]


def seed(db: Session) -> int:
    """
    Insert the sample restaurants and menus.
    Idempotent: restaurants that already exist by name are skipped.

    Returns the number of restaurants created.
    """
    existing = set(db.scalars(select(Restaurant.name)).all())
    created = 0

    for data in SEED_RESTAURANTS:
        if data["name"] in existing:
            continue

        restaurant = Restaurant(name=data["name"], region=data["region"])
        restaurant.menu_items = [
            MenuItem(name=name, price_cents=price_cents) for name, price_cents in data["menu"]
        ]
        db.add(restaurant)
        created += 1

    if created:
        safe_commit(db)
        logger.info("Seed data created", restaurants=created)
    else:
        logger.info("Seed data already present, skipping")

    return created
