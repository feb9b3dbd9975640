# app/models/__init__.py
from app.models.enums import IdentifierKind, BlockStatus, MembershipAction, Subsystem
