# app/models/__init__.py
# Import all models to ensure SQLAlchemy can resolve relationships
# Order matters for dependencies - import directory tables first

from app.db.base_class import Base
from app.models.user import User
from app.models.event import Event
from app.models.registration import Registration
