from sqlalchemy.orm import Session
from typing import Optional

from reservas.models.audit_log import AuditLog


def log_action(
    db: Session,
    entity_type: str,
    action: str,
    tenant_id: Optional[int] = None,
    user_id: Optional[int] = None,
    entity_id: Optional[int] = None,
    new_values: Optional[dict] = None,
) -> AuditLog:
    # Se agrega a la sesión actual; el commit lo hace quien llama
    entry = AuditLog(
        tenant_id=tenant_id,
        user_id=user_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        new_values=new_values,
    )
    db.add(entry)
    return entry
