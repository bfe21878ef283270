from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.config import settings

# The engine is configured with the database URL and owns the connection pool.
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# One Session per request; the request handler commits or rolls back.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Always close, even if the endpoint raised.
        db.close()
