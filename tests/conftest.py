import itertools
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from dataclasses import dataclass  # noqa: E402
from datetime import date  # noqa: E402
from typing import AsyncGenerator, Dict, Optional  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from hr_portal.auth.models import User  # noqa: E402
from hr_portal.auth.security import hash_password, token_for_user  # noqa: E402
from hr_portal.core.enums import Role  # noqa: E402
from hr_portal.core.models import Employee  # noqa: E402
from hr_portal.core.storage import LocalBlobStorage, get_blob_storage  # noqa: E402
from hr_portal.db.session import Base, get_db  # noqa: E402
from hr_portal.main import app  # noqa: E402


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "Password123"
# bcrypt is slow on purpose; hash once for every seeded account
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@dataclass
class Account:
    user_id: int
    employee_id: Optional[int]
    role: Role
    email: str
    token: str

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture()
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test. StaticPool keeps every session on the same connection."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture()
def storage(tmp_path) -> LocalBlobStorage:
    return LocalBlobStorage(str(tmp_path), url_prefix="/storage/")


@pytest.fixture()
async def client(session_factory: async_sessionmaker, storage: LocalBlobStorage) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app; one database session per request."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
def make_account(session_factory: async_sessionmaker):
    counter = itertools.count(1)

    async def _make(
        role: Role = Role.EMPLOYEE,
        *,
        with_employee: bool = True,
        leave_balance: int = 10,
        name: Optional[str] = None,
    ) -> Account:
        n = next(counter)
        email = f"{role.value}{n}@example.com"
        async with session_factory() as session:
            user = User(
                name=name or f"{role.value.title()} {n}",
                email=email,
                password_hash=TEST_PASSWORD_HASH,
                role=role.value,
            )
            session.add(user)
            await session.flush()
            employee_id = None
            if with_employee:
                employee = Employee(
                    user_id=user.id,
                    position="Engineer",
                    department="IT",
                    employee_code=f"EMP-TEST{n:04d}",
                    hire_date=date(2020, 1, 15),
                    leave_balance=leave_balance,
                )
                session.add(employee)
                await session.flush()
                employee_id = employee.id
            await session.commit()
            user_id = user.id
        return Account(
            user_id=user_id,
            employee_id=employee_id,
            role=role,
            email=email,
            token=token_for_user(user_id, role.value),
        )

    return _make


@pytest.fixture()
async def employee(make_account) -> Account:
    return await make_account(Role.EMPLOYEE, name="Alice Martin")


@pytest.fixture()
async def other_employee(make_account) -> Account:
    return await make_account(Role.EMPLOYEE, name="Bob Durand")


@pytest.fixture()
async def hr(make_account) -> Account:
    return await make_account(Role.RH, with_employee=False, name="Hannah Rh")


@pytest.fixture()
async def admin(make_account) -> Account:
    return await make_account(Role.ADMIN, with_employee=False, name="Ada Admin")


@pytest.fixture()
def fetch(session_factory: async_sessionmaker):
    """Read a row back through a fresh session, bypassing the app's session."""

    async def _fetch(model, ident):
        async with session_factory() as session:
            return await session.get(model, ident)

    return _fetch
