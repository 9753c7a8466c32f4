"""
Audit Log Model
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from erp.core import Base
from .base import IdMixin

class AuditLog(Base, IdMixin):
    """Audit Log for tracking changes"""
    __tablename__ = "audit_log"
    
    table_name = Column(String(100), nullable=False, index=True)
    record_id = Column(String(50), nullable=False, index=True)
    
    action = Column(String(20), nullable=False)  # STATUS_CHANGE, PAYMENT_CHANGE
    
    performed_by = Column(Integer, ForeignKey("users.id"))
    performed_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    
    # Before/After data
    before_data = Column(JSON)
    after_data = Column(JSON)
