import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from config.settings import settings as app_settings, Settings

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()

DEFAULT_CATEGORIES = [
    ("Web", "#7FB3D5", "Web applications and sites"),
    ("Backend", "#82E0AA", "APIs and backend services"),
    ("Mobile", "#BB8FCE", "Mobile applications"),
    ("Desktop", "#F7DC6F", "Desktop applications"),
    ("DevOps", "#E74C3C", "Infrastructure and deployment"),
]

SAMPLE_PROJECTS = [
    {
        "title": "Course Platform Backend",
        "description": "Online course management system with authentication and a full admin area",
        "technologies": ["Node.js", "Express", "PostgreSQL", "JWT"],
        "github_url": "https://github.com/example/course-platform-backend",
        "demo_url": "https://course-platform.example.com",
        "category": "backend",
        "featured": True,
    },
    {
        "title": "Interactive Museum",
        "description": "3D and augmented reality experience for a virtual museum",
        "technologies": ["Three.js", "React", "WebXR", "Blender"],
        "github_url": "https://github.com/example/interactive-museum",
        "demo_url": "https://museum.example.com",
        "category": "web",
        "featured": True,
    },
    {
        "title": "Holiday Courses",
        "description": "Holiday course management with bookings and payments",
        "technologies": ["Laravel", "MySQL", "Bootstrap", "Stripe"],
        "github_url": "https://github.com/example/holiday-courses",
        "demo_url": "https://holiday-courses.example.com",
        "category": "web",
        "featured": True,
    },
]


def normalize_database_url(url: str) -> str:
    """Select the async driver for plain PostgreSQL URLs"""
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Connection pool handle shared by all requests.

    Created once when the application starts and disposed at shutdown.
    Repositories never touch the engine directly; they receive a session
    scoped to a single request.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = normalize_database_url(url)
        self.engine: AsyncEngine = create_async_engine(self.url, echo=echo, future=True)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_all(self):
        async with self.engine.begin() as conn:
            # Import models here to ensure they're registered with Base
            import database_models  # noqa: F401
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()


def create_database(settings: Optional[Settings] = None) -> Database:
    settings = settings or app_settings
    if settings.is_production and "sqlite" in settings.database_url.lower():
        raise RuntimeError("SQLite is forbidden in production. Use a PostgreSQL DATABASE_URL.")
    return Database(settings.database_url)


async def init_db(database: Database, settings: Optional[Settings] = None):
    """
    Create all tables, make sure the admin account exists and seed demo
    content into empty tables.
    """
    from crud.user import UserRepository
    from database_models import Category, Project

    settings = settings or app_settings
    await database.create_all()

    async with database.session_factory() as session:
        user_repo = UserRepository(session)
        created = await user_repo.ensure_admin(settings.admin_email, settings.admin_password)
        if created:
            logger.info(f"Default admin user created: {settings.admin_email}")
        else:
            logger.info(f"Admin user already exists: {settings.admin_email}")

        if not settings.seed_demo_data:
            return

        project_total = await session.scalar(select(func.count(Project.id)))
        if not project_total:
            session.add_all([Project(**data) for data in SAMPLE_PROJECTS])
            await session.commit()
            logger.info("Sample projects inserted")

        category_total = await session.scalar(select(func.count(Category.id)))
        if not category_total:
            session.add_all([
                Category(name=name, color=color, description=description)
                for name, color, description in DEFAULT_CATEGORIES
            ])
            await session.commit()
            logger.info("Default categories inserted")


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function that yields a database session.
    Use this in FastAPI route dependencies to get a database session.

    Example:
        @router.get("/projects")
        async def list_projects(db: AsyncSession = Depends(get_db)):
            # Use db here
            pass
    """
    database = get_database(request)
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
