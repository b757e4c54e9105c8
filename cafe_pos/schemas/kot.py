"""
KOT Schemas for Cafe POS
========================

Request and response models for ticket routing. The routing preference is
accepted as a loose mapping on purpose: an unknown ``type`` routes as
"single" rather than failing validation.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..services.cart import LineItem


class KOTRouteRequest(BaseModel):
    items: List[LineItem]
    preference: Optional[Dict[str, Any]] = Field(
        default=None,
        description='{"type": "single"|"separate"|"category", "categories": [...]}; '
                    "the saved venue preference is used when omitted",
    )


class KOTGroupOut(BaseModel):
    title: str
    items: List[LineItem]
    ticket: Optional[str] = None


class KOTRouteResponse(BaseModel):
    groups: List[KOTGroupOut]


class OrderKOTResponse(BaseModel):
    order_id: int
    is_update: bool = False
    groups: List[KOTGroupOut]
