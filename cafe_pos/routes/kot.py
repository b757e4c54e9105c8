"""
KOT Routes for Cafe POS
=======================

Endpoints:
----------
- POST /kot/route: Split a list of lines into ticket groups
- GET /settings/kot: Read the venue's KOT preference
- PUT /settings/kot: Replace the venue's KOT preference

The preference body is never rejected for shape problems: an unknown type
is stored as "single" and categories are dropped outside category mode.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas.kot import KOTGroupOut, KOTRouteRequest, KOTRouteResponse
from ..services.kot import KOTPreference, route_items
from ..services.order import get_kot_preference, save_kot_preference

logger = logging.getLogger(__name__)

kot_router = APIRouter(tags=["KOT"])


@kot_router.post("/kot/route", response_model=KOTRouteResponse)
def route_kot(payload: KOTRouteRequest, db: Session = Depends(get_db)) -> KOTRouteResponse:
    """Preview ticket groups without creating an order."""
    preference = payload.preference if payload.preference is not None else get_kot_preference(db)
    groups = route_items(payload.items, preference)
    return KOTRouteResponse(groups=[KOTGroupOut(title=g.title, items=g.items) for g in groups])


@kot_router.get("/settings/kot", response_model=KOTPreference)
def read_kot_settings(db: Session = Depends(get_db)) -> KOTPreference:
    return get_kot_preference(db)


@kot_router.put("/settings/kot", response_model=KOTPreference)
def update_kot_settings(
    payload: Dict[str, Any] = Body(..., examples=[{"type": "category", "categories": ["Desserts"]}]),
    db: Session = Depends(get_db),
) -> KOTPreference:
    preference = KOTPreference.from_config(payload)
    return save_kot_preference(db, preference)
