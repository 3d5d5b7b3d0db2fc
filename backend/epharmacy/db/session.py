from sqlmodel import SQLModel, create_engine
from epharmacy.core.config import settings

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # FastAPI выполняет sync-эндпоинты в threadpool
    connect_args["check_same_thread"] = False

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)


def create_db_and_tables():
    # Импорт регистрирует все таблицы в metadata
    import epharmacy.models  # noqa: F401
    SQLModel.metadata.create_all(engine)
