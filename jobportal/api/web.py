from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from jobportal.schemas.envelope import success_response
from jobportal.services.web_proxy import chat_reply, nearby_places, reverse_location

router = APIRouter()


class ChatPayload(BaseModel):
    message: str = ""


class LocationPayload(BaseModel):
    lat: Any = None
    lng: Any = None


class NearbyPayload(BaseModel):
    type: Optional[str] = None
    lat: Any = None
    lng: Any = None
    radiusKm: float = Field(5, gt=0, le=50)
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


@router.post("/chat-bot")
def chat_bot(payload: ChatPayload):
    return success_response("Reply generated successfully", {"reply": chat_reply(payload.message)})


@router.post("/location")
def location(payload: LocationPayload):
    return success_response("User location fetched successfully", reverse_location(payload.lat, payload.lng))


@router.post("/nearby")
def nearby(payload: NearbyPayload):
    data = nearby_places(
        payload.type,
        payload.lat,
        payload.lng,
        radius_km=payload.radiusKm,
        page=payload.page,
        limit=payload.limit,
    )
    if not data["count"]:
        return success_response(f"No {data['type']}s found within {data['radiusKm']:g} km.", data)
    return success_response("Nearby places fetched successfully", data)
