from sqlalchemy.orm import Session
from sqlalchemy import or_
from datetime import date
from typing import List, Optional

from reservas.models.availability import ScheduleBlock
from reservas.schemas.availability import ScheduleBlockCreate


def get_block(db: Session, tenant_id: int, block_id: int) -> Optional[ScheduleBlock]:
    return (
        db.query(ScheduleBlock)
        .filter(ScheduleBlock.tenant_id == tenant_id, ScheduleBlock.id == block_id)
        .first()
    )


def get_blocks(
    db: Session,
    tenant_id: int,
    provider_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[ScheduleBlock]:
    """
    Obtiene los bloqueos de la barbería. Si se indica provider_id incluye
    también los bloqueos generales (sin barbero).
    """
    query = db.query(ScheduleBlock).filter(ScheduleBlock.tenant_id == tenant_id)
    if provider_id is not None:
        query = query.filter(
            or_(
                ScheduleBlock.provider_id == provider_id,
                ScheduleBlock.provider_id.is_(None),
            )
        )
    if date_from is not None:
        query = query.filter(ScheduleBlock.end_date >= date_from)
    if date_to is not None:
        query = query.filter(ScheduleBlock.start_date <= date_to)
    return query.order_by(ScheduleBlock.start_date, ScheduleBlock.start_time).all()


def create_block(db: Session, tenant_id: int, block: ScheduleBlockCreate) -> ScheduleBlock:
    db_block = ScheduleBlock(tenant_id=tenant_id, **block.model_dump())
    db.add(db_block)
    db.commit()
    db.refresh(db_block)
    return db_block


def delete_block(db: Session, tenant_id: int, block_id: int) -> bool:
    db_block = get_block(db, tenant_id, block_id)
    if not db_block:
        return False

    db.delete(db_block)
    db.commit()
    return True
