#!/usr/bin/env python3
"""
Brings the storefront schema to head and optionally seeds rewards and sample coupons.

The database itself must already exist.

Usage:
    python scripts/init_db.py [--seed-data]
"""

import sys
import argparse
from datetime import datetime, timedelta
from pathlib import Path

# add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from alembic import command
from alembic.config import Config
from sqlalchemy.exc import SQLAlchemyError

from storefront.db.session import session_scope
from storefront import models
import logging

# configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# rewards are managed here, there is no admin CRUD for them
DEFAULT_REWARDS = [
    {"name": "Frete Grátis", "description": "Entrega sem custo no próximo pedido", "points_required": 10, "reward_type": "free_delivery", "sort_order": 1},
    {"name": "Desconto 10%", "description": "10% de desconto no subtotal", "points_required": 15, "reward_type": "discount_10", "sort_order": 2},
    {"name": "Desconto 20%", "description": "20% de desconto no subtotal", "points_required": 25, "reward_type": "discount_20", "sort_order": 3},
    {"name": "Item Grátis", "description": "Um item grátis combinado na loja", "points_required": 30, "reward_type": "free_item", "sort_order": 4},
    {"name": "Desconto 50%", "description": "Metade do subtotal por nossa conta", "points_required": 50, "reward_type": "discount_50", "sort_order": 5},
]

SAMPLE_COUPONS = [
    {"code": "BEMVINDO10", "type": "percentage", "value": 10, "expires_in_days": None},
    {"code": "FRETEGRATIS", "type": "free_delivery", "value": 0, "expires_in_days": 30},
    {"code": "MENOS5", "type": "fixed", "value": 5, "expires_in_days": 30},
]


def run_migrations():
    logger.info("Running Alembic migrations...")
    try:
        command.upgrade(Config(str(project_root / "alembic.ini")), "head")
    except SQLAlchemyError as e:
        logger.error(f"Migration failed: {e}")
        return False
    logger.info("Migrations completed successfully")
    return True


def seed_rewards(db):
    """insert missing rewards by name, leave existing ones alone."""
    existing = {r.name for r in db.query(models.Reward).all()}
    created = 0
    for data in DEFAULT_REWARDS:
        if data["name"] in existing:
            continue
        db.add(models.Reward(is_active=True, **data))
        created += 1
        logger.info(f"Created reward: {data['name']} ({data['points_required']} points)")
    return created


def seed_coupons(db):
    existing = {c.code for c in db.query(models.Coupon).all()}
    created = 0
    for data in SAMPLE_COUPONS:
        if data["code"] in existing:
            continue
        expires_at = None
        if data["expires_in_days"]:
            expires_at = datetime.utcnow() + timedelta(days=data["expires_in_days"])
        db.add(models.Coupon(
            code=data["code"],
            type=data["type"],
            value=data["value"],
            is_active=True,
            expires_at=expires_at,
        ))
        created += 1
        logger.info(f"Created coupon: {data['code']} ({data['type']})")
    return created


def seed_initial_data():
    """seed the reward catalog and a few sample coupons; safe to run twice."""
    logger.info("Seeding initial data...")
    try:
        with session_scope() as db:
            rewards = seed_rewards(db)
            coupons = seed_coupons(db)
    except SQLAlchemyError as e:
        logger.error(f"Error during seeding: {e}")
        return False
    logger.info(f"Seeding done: {rewards} rewards, {coupons} coupons created")
    return True


def main():
    parser = argparse.ArgumentParser(description="Migrate the storefront database")
    parser.add_argument("--seed-data", action="store_true", help="Seed the reward catalog and sample coupons")
    args = parser.parse_args()

    if not run_migrations():
        return False
    if args.seed_data and not seed_initial_data():
        return False
    return True


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
