"""
Seed-скрипт: создание таблиц и администратора из ENV
Запуск: python -m epharmacy.scripts.seed_admin
"""
import logging
from sqlmodel import Session, select
from epharmacy.db.session import engine, create_db_and_tables
from epharmacy.models.user import User, UserRole
from epharmacy.core.security import hash_password
from epharmacy.core.config import settings

logger = logging.getLogger(__name__)


def seed_admin(session: Session) -> User | None:
    """Создание админа если не существует"""
    admin_username = settings.ADMIN_USERNAME
    admin_password = settings.ADMIN_PASSWORD
    
    if not admin_username or not admin_password:
        logger.warning("ADMIN_USERNAME/ADMIN_PASSWORD not set, skipping admin seed")
        return None
    
    existing = session.exec(select(User).where(User.username == admin_username)).first()
    if existing:
        logger.info(f"Admin already exists: {existing.username}")
        return existing
    
    admin = User(
        username=admin_username,
        password_hash=hash_password(admin_password),
        first_name="Admin",
        role=UserRole.ADMINISTRATOR,
        is_active=True
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)
    logger.info(f"Admin created: {admin.username}")
    return admin


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    logger.info("Creating tables...")
    create_db_and_tables()
    logger.info("Seeding admin...")
    with Session(engine) as session:
        seed_admin(session)
    logger.info("Done!")


if __name__ == "__main__":
    main()
