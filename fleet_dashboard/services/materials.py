"""
Material Service
================

Material catalog CRUD. Names are unique; the planner matches instructions
against them.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..errors import ConflictError, NotFoundError
from ..models import Material
from ..schemas.materials import MaterialCreate
from .helpers import store_errors


logger = logging.getLogger(__name__)


def list_materials(db: Session) -> List[Material]:
    with store_errors(db, "list materials"):
        return db.query(Material).order_by(Material.name).all()


def get_material(db: Session, material_id: int) -> Material:
    with store_errors(db, "load material"):
        material = db.get(Material, material_id)
    if material is None:
        raise NotFoundError("Material", str(material_id))
    return material


def create_material(db: Session, payload: MaterialCreate) -> Material:
    """
    Raises:
        ConflictError: if a material with the same name exists
    """
    with store_errors(db, "check material name"):
        existing = db.query(Material).filter(Material.name == payload.name).first()
    if existing is not None:
        raise ConflictError(f"Material '{payload.name}' already exists")

    material = Material(
        name=payload.name,
        type=payload.type,
        density=payload.density,
        color=payload.color,
        description=payload.description,
        properties=payload.properties.model_dump(),
        economic_data=payload.economic_data,
        compliance=payload.compliance,
    )
    db.add(material)
    with store_errors(db, "create material"):
        db.commit()
    db.refresh(material)

    logger.info("Created material: %s (id=%s)", material.name, material.id)
    return material


def delete_material(db: Session, material_id: int) -> None:
    material = get_material(db, material_id)
    db.delete(material)
    with store_errors(db, "delete material"):
        db.commit()
    logger.info("Deleted material %s", material_id)
