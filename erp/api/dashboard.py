"""
Dashboard API
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from erp.core import get_db, get_schema_probe, SchemaProbe
from erp.models import AppUser
from erp.services import DashboardService
from .auth import get_current_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary")
def dashboard_summary(
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    current_user: AppUser = Depends(get_current_user)
):
    return DashboardService.get_summary(db, probe)
