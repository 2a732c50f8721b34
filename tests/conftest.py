import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from decimal import Decimal  # noqa: E402
from typing import AsyncGenerator, Dict, Optional  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.auth.models import User  # noqa: E402
from app.auth.security import create_access_token, hash_password  # noqa: E402
from app.core.enums import AccountType, EnrollmentCategory, StudentStatus  # noqa: E402
from app.core.models import FeeStructure, Student  # noqa: E402
from app.db.session import Base, Database, get_db  # noqa: E402
from app.main import app  # noqa: E402

TEST_PASSWORD = "Secret123"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture()
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A throwaway SQLite file database with every table created."""
    db = Database(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        connect_args={"timeout": 30},
    )
    event.listen(db.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest.fixture()
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


@pytest.fixture()
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app; each request gets its own session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with database.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    account_type: AccountType = AccountType.ADMINISTRATOR,
    full_name: str = "Test User",
    is_verified: bool = True,
    verification_token: Optional[str] = None,
) -> User:
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        school_name="Assurance Remedial School",
        account_type=account_type.value,
        is_verified=is_verified,
        verification_token=verification_token,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User, account_type: Optional[str] = None) -> Dict[str, str]:
    token = create_access_token(
        subject={
            "sub": str(user.id),
            "email": user.email,
            "account_type": account_type or user.account_type,
        }
    )
    return {"Authorization": f"Bearer {token}"}


async def create_student(
    db: AsyncSession,
    *,
    student_id: str = "STU001",
    full_name: str = "Ama Mensah",
    enrollment_category: Optional[EnrollmentCategory] = EnrollmentCategory.MAY_JUNE,
    status: StudentStatus = StudentStatus.ACTIVE,
    email: Optional[str] = None,
) -> Student:
    student = Student(
        student_id=student_id,
        full_name=full_name,
        email=email,
        enrollment_category=enrollment_category.value if enrollment_category else None,
        status=status.value,
    )
    db.add(student)
    await db.commit()
    await db.refresh(student)
    return student


async def create_fee_structure(
    db: AsyncSession,
    student: Student,
    *,
    total_fees: str = "500.00",
    amount_paid: str = "0.00",
    academic_year: str = "2024",
    term: str = "Term1",
) -> FeeStructure:
    total = Decimal(total_fees)
    paid = Decimal(amount_paid)
    structure = FeeStructure(
        student_id=student.id,
        academic_year=academic_year,
        term=term,
        total_fees=total,
        amount_paid=paid,
        balance=total - paid,
    )
    db.add(structure)
    await db.commit()
    await db.refresh(structure)
    return structure


@pytest.fixture()
def user_password() -> str:
    """Plain-text password of every user created by ``make_user``."""
    return TEST_PASSWORD


@pytest.fixture()
def make_user(db_session: AsyncSession):
    async def _make(**kwargs) -> User:
        return await create_user(db_session, **kwargs)

    return _make


@pytest.fixture()
def make_auth_headers():
    return auth_headers


@pytest.fixture()
def make_student(db_session: AsyncSession):
    async def _make(**kwargs) -> Student:
        return await create_student(db_session, **kwargs)

    return _make


@pytest.fixture()
def make_fee_structure(db_session: AsyncSession):
    async def _make(student: Student, **kwargs) -> FeeStructure:
        return await create_fee_structure(db_session, student, **kwargs)

    return _make


@pytest.fixture()
async def admin_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, email="admin@example.com", full_name="Ada Admin")


@pytest.fixture()
async def accountant_user(db_session: AsyncSession) -> User:
    return await create_user(
        db_session,
        email="accounts@example.com",
        full_name="Kofi Accounts",
        account_type=AccountType.ACCOUNTANT,
    )


@pytest.fixture()
def admin_headers(admin_user: User) -> Dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture()
def accountant_headers(accountant_user: User) -> Dict[str, str]:
    return auth_headers(accountant_user)
