from typing import AsyncGenerator, Callable, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.auth.security import create_access_token
from app.core.identifiers import generate_class_code
from app.core.models import SchoolClass, Student, StudentClass, TeacherClass
from app.db.session import Base, get_db, get_session_factory
from app.main import app

TEACHER_ID = "teacher-1"
ASSISTANT_ID = "teacher-2"


@pytest.fixture()
async def engine(tmp_path):
    """File-backed SQLite per test so concurrent sessions see the same data."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app and the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers() -> Callable[..., Dict[str, str]]:
    def _headers(user_id: str = TEACHER_ID) -> Dict[str, str]:
        token = create_access_token(subject={"sub": user_id})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def seed_class(db_session: AsyncSession):
    """Create a class linked to a teacher, with enrolled students. Returns (class_id, [student_id, ...])."""

    async def _seed(
        user_id: str = TEACHER_ID,
        role: str = "primary",
        class_name: str = "Year 4 English",
        class_code: Optional[str] = None,
        students: Optional[List[str]] = None,
    ):
        school_class = SchoolClass(class_name=class_name, class_code=class_code or generate_class_code())
        db_session.add(school_class)
        await db_session.flush()
        db_session.add(TeacherClass(user_id=user_id, class_id=school_class.class_id, role=role))

        student_ids = []
        for first_name in students if students is not None else ["Ana", "Ben"]:
            student = Student(student_name_first_en=first_name, student_name_en=first_name)
            db_session.add(student)
            await db_session.flush()
            db_session.add(StudentClass(student_id=student.student_id, class_id=school_class.class_id))
            student_ids.append(student.student_id)
        await db_session.commit()
        return school_class.class_id, student_ids

    return _seed
