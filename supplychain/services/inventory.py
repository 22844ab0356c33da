"""
Stock ledger.

Toute lecture-modification-écriture d'un champ ``stock`` passe par ici :
la ligne est relue ``SELECT ... FOR UPDATE`` (après flush des changements
en attente) avant d'être vérifiée puis modifiée. Aucun commit ici, c'est
l'appelant (l'endpoint) qui ferme la transaction.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from supplychain.app.core.errors import (
    InsufficientStockError,
    ProductNotFoundError,
    RawMaterialNotFoundError,
)
from supplychain.app.db.models.models_v1 import BillOfMaterial, Product, RawMaterial

logger = logging.getLogger(__name__)


def _lock(db: Session, model, entity_id: int):
    db.flush()
    return (
        db.execute(
            select(model)
            .where(model.id == entity_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        .scalars()
        .one_or_none()
    )


def lock_product(db: Session, product_id: int) -> Product:
    product = _lock(db, Product, product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


def lock_raw_material(db: Session, material_id: int) -> RawMaterial:
    material = _lock(db, RawMaterial, material_id)
    if material is None:
        raise RawMaterialNotFoundError(material_id)
    return material


def reserve_product_stock(db: Session, product: Product, quantity: int) -> Product:
    """
    Décrémente le stock produit de ``quantity``.

    Une quantité négative rend du stock (delta d'une mise à jour à la baisse).
    Rien n'est écrit si le stock est insuffisant.
    """
    product = lock_product(db, product.id)
    if product.stock < quantity:
        logger.warning(
            "Insufficient stock for product: %s. Available: %s, Required: %s",
            product.name,
            product.stock,
            quantity,
        )
        raise InsufficientStockError(product.name, product.stock, quantity)
    product.stock -= quantity
    return product


def release_product_stock(db: Session, product: Product, quantity: int) -> Product:
    product = lock_product(db, product.id)
    product.stock += quantity
    return product


# ---------- MATIÈRES (lecture seule) ----------
def _bom_lines(db: Session, product_id: int) -> list[BillOfMaterial]:
    return list(
        db.execute(
            select(BillOfMaterial)
            .where(BillOfMaterial.product_id == product_id)
            .order_by(BillOfMaterial.id.asc())
        )
        .scalars()
        .all()
    )


def check_materials_availability(db: Session, product_id: int, quantity: int) -> bool:
    """
    Vrai si chaque ligne de nomenclature est couverte pour ``quantity`` unités.

    Un produit sans nomenclature n'est jamais productible. On s'arrête à la
    première matière insuffisante.
    """
    lines = _bom_lines(db, product_id)
    if not lines:
        logger.warning("No bill of materials defined for product ID: %s", product_id)
        return False

    for line in lines:
        required = line.quantity * quantity
        if line.material.stock < required:
            logger.warning(
                "Insufficient material: %s. Required: %s, Available: %s",
                line.material.name,
                required,
                line.material.stock,
            )
            return False
    return True


def missing_materials(db: Session, product_id: int, quantity: int) -> list[tuple[str, int, int]]:
    """[(matière, requis, disponible), ...] pour les lignes insuffisantes."""
    missing = []
    for line in _bom_lines(db, product_id):
        required = line.quantity * quantity
        if line.material.stock < required:
            missing.append((line.material.name, required, line.material.stock))
    return missing
