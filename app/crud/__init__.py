# app/crud/__init__.py

from .crud_event import event
from .crud_registration import registration
from .crud_user import user
