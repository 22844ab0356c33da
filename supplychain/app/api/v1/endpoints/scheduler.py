from __future__ import annotations

from fastapi import APIRouter, Depends

from supplychain.app.api.deps import get_session_factory
from supplychain.app.core.config import Settings, get_settings
from supplychain.services.alerts import run_low_stock_check

router = APIRouter(prefix="/scheduler")


@router.post("/low-stock/run")
def run_low_stock(
    session_factory=Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
):
    found = run_low_stock_check(session_factory, settings)
    return {"materials_below_minimum": found}
