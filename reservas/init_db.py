from sqlalchemy.orm import Session
from reservas.models.user import User
from reservas.services.auth import get_password_hash
import logging
import os

logger = logging.getLogger(__name__)


def create_initial_admin(db: Session):
    """
    Crea el super admin de la plataforma si la tabla de usuarios está vacía.
    Las credenciales vienen de SUPER_ADMIN_EMAIL y SUPER_ADMIN_PASSWORD.
    """
    if db.query(User).count() > 0:
        logger.info("Users already exist, skipping initial super admin.")
        return None

    email = os.getenv("SUPER_ADMIN_EMAIL")
    password = os.getenv("SUPER_ADMIN_PASSWORD")
    if not email or not password:
        logger.warning(
            "SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD not set, no super admin created"
        )
        return None

    admin = User(
        name="superadmin",
        email=email,
        phone=None,
        hashed_password=get_password_hash(password),
        is_super_admin=True,
        is_active=True,
    )
    db.add(admin)
    db.commit()
    logger.info(f"Super admin created: {email}")
    return admin
