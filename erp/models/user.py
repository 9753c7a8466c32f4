"""
Application User
"""
from sqlalchemy import Column, String, Boolean
from erp.core import Base
from .base import IdMixin, TimestampMixin

USER_ROLES = ("admin", "manager", "staff")

class AppUser(Base, IdMixin, TimestampMixin):
    """Application User"""
    __tablename__ = "users"
    
    full_name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="staff")  # admin, manager, staff
    is_active = Column(Boolean, nullable=False, default=True)
