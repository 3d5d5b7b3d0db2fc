"""
Pytest fixtures: in-memory SQLite, shared session, TestClient with
get_db / get_current_user overridden.

Run with:
    pytest -v
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import epharmacy.models  # noqa: F401
from epharmacy.api.deps import get_db, get_current_user
from epharmacy.core.security import hash_password
from epharmacy.main import app
from epharmacy.models import Brand, Category, Ingredient, Product, User, UserRole


@pytest.fixture
def engine():
    """Create in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Create database session."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    """TestClient sharing the test session; nobody is logged in by default."""
    app.dependency_overrides[get_db] = lambda: session
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(session):
    """Make get_current_user return the given user for the following requests."""
    def _login(user: User):
        user_id = user.id
        app.dependency_overrides[get_current_user] = lambda: session.get(User, user_id)
    return _login


def make_user(session: Session, username: str, role: UserRole) -> User:
    user = User(
        username=username,
        password_hash=hash_password("secret123"),
        first_name=username.capitalize(),
        last_name="Test",
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def admin(session):
    return make_user(session, "admin", UserRole.ADMINISTRATOR)


@pytest.fixture
def customer(session):
    return make_user(session, "alice", UserRole.CUSTOMER)


@pytest.fixture
def category_tree(session):
    """Category (root) > Medicine > Pain Relief."""
    root = Category(name="Category")
    session.add(root)
    session.commit()
    
    mid = Category(name="Medicine", parent_category_id=root.id)
    session.add(mid)
    session.commit()
    
    leaf = Category(name="Pain Relief", parent_category_id=mid.id)
    session.add(leaf)
    session.commit()
    
    return root.id, mid.id, leaf.id


@pytest.fixture
def brand(session):
    brand = Brand(name="Bayer")
    session.add(brand)
    session.commit()
    session.refresh(brand)
    return brand


@pytest.fixture
def ingredient(session):
    ingredient = Ingredient(name="Ibuprofen", description="NSAID", is_active_substance=True)
    session.add(ingredient)
    session.commit()
    session.refresh(ingredient)
    return ingredient


def make_product(session: Session, name: str = "Nurofen", quantity: int = 10,
                 prescription: bool = False, price: str = "9.99") -> Product:
    product = Product(
        name=name,
        price=Decimal(price),
        available_quantity=quantity,
        is_prescription_required=prescription,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product
