import asyncio
from quiz_app.database import engine, Base

# Import all models so SQLAlchemy knows them
from quiz_app.models import User, Quiz, Question, Option, Attempt  # noqa: F401


async def flush_database():
    """Drops every table (quizzes, questions, options, attempts, users) and recreates them empty."""
    async with engine.begin() as conn:
        print("Dropping all tables...")
        await conn.run_sync(Base.metadata.drop_all)
        print("All tables dropped successfully!")

        print("Recreating tables...")
        await conn.run_sync(Base.metadata.create_all)
        print("All tables recreated successfully!")

if __name__ == "__main__":
    asyncio.run(flush_database())
