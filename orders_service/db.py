from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from orders_service.core.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,  # критично, чтобы объект order не стал "detached"
    class_=AsyncSession,
    autoflush=False,
)


async def get_db():
    """
    Dependency для FastAPI роутов.
    usage:
        async def handler(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        yield session
