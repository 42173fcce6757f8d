from __future__ import annotations

import logging
import math
import re
from typing import Any

import httpx

from jobportal.core.config import settings
from jobportal.core.errors import UpstreamError, ValidationError
from jobportal.schemas.envelope import total_pages

_LOG = logging.getLogger("jobportal.web")

_AMENITY_RE = re.compile(r"^[a-z_]{1,64}$")
CHAT_TIMEOUT_SECONDS = 10.0
GEO_TIMEOUT_SECONDS = 15.0
OVERPASS_TIMEOUT_SECONDS = 25.0
LANDMARK_RADIUS_METERS = 1000
MAX_LANDMARKS = 5


def coordinate_or_400(value: Any, name: str, bound: float) -> float:
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValidationError("Latitude and longitude are required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Field "{name}" must be a number')
    if not math.isfinite(number) or abs(number) > bound:
        raise ValidationError(f'Field "{name}" is out of range')
    return number


def to_dms(lat: float, lng: float) -> dict[str, str]:
    def _part(coord: float, is_lat: bool) -> str:
        absolute = abs(coord)
        degrees = math.floor(absolute)
        minutes_full = (absolute - degrees) * 60
        minutes = math.floor(minutes_full)
        seconds = math.floor((minutes_full - minutes) * 60)
        if is_lat:
            direction = "N" if coord >= 0 else "S"
        else:
            direction = "E" if coord >= 0 else "W"
        return f"{degrees}°{minutes}'{seconds}\"{direction}"

    return {
        "decimal": f"{lat}, {lng}",
        "dms": f"{_part(lat, True)} {_part(lng, False)}",
    }


def _get_json(client: httpx.Client, url: str, *, params: dict[str, Any], service: str) -> dict[str, Any]:
    try:
        response = client.get(url, params=params)
    except httpx.HTTPError as exc:
        raise UpstreamError(f"{service} is unavailable", error=str(exc)) from exc
    if response.status_code >= 400:
        raise UpstreamError(f"{service} error: HTTP {response.status_code}", error=response.text[:500])
    try:
        data = response.json()
    except ValueError as exc:
        raise UpstreamError(f"{service} returned an invalid response", error=str(exc)) from exc
    if not isinstance(data, dict):
        raise UpstreamError(f"{service} returned an invalid response", error=f"expected an object, got {type(data).__name__}")
    return data


def _elements(data: dict[str, Any]) -> list[dict[str, Any]]:
    elements = data.get("elements")
    if not isinstance(elements, list):
        return []
    return [el for el in elements if isinstance(el, dict)]


def chat_reply(message: str) -> str:
    text = str(message or "").strip()
    if not text:
        raise ValidationError("Message is required.")
    api_key = str(settings.OPENAI_API_KEY or "").strip()
    if not api_key:
        raise UpstreamError("Chatbot service is not configured")

    try:
        with httpx.Client(timeout=CHAT_TIMEOUT_SECONDS) as client:
            response = client.post(
                settings.OPENAI_API_URL,
                headers={"Authorization": f"Bearer {api_key}"},
                json={
                    "model": settings.OPENAI_MODEL,
                    "messages": [
                        {"role": "system", "content": settings.CHATBOT_SYSTEM_PROMPT},
                        {"role": "user", "content": text},
                    ],
                },
            )
    except httpx.HTTPError as exc:
        _LOG.warning("chatbot request failed: %s", exc)
        raise UpstreamError("Error contacting chatbot service.", error=str(exc)) from exc

    if response.status_code >= 400:
        _LOG.warning("chatbot upstream status=%s body=%s", response.status_code, response.text[:500])
        raise UpstreamError(f"OpenAI API error: HTTP {response.status_code}", error=response.text[:500])
    try:
        data = response.json() if response.content else {}
    except ValueError as exc:
        raise UpstreamError("OpenAI API returned an invalid response", error=str(exc)) from exc
    if not isinstance(data, dict):
        raise UpstreamError("OpenAI API returned an invalid response", error=f"expected an object, got {type(data).__name__}")
    choices = data.get("choices")
    reply = ""
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        content = choices[0].get("message")
        if isinstance(content, dict):
            reply = str(content.get("content") or "").strip()
    return reply or "Sorry, I couldn't get a response."


def _timezone_id(client: httpx.Client, lat: float, lng: float) -> str | None:
    try:
        data = _get_json(
            client,
            settings.GEONAMES_URL,
            params={"lat": lat, "lng": lng, "username": settings.GEONAMES_USERNAME},
            service="Timezone service",
        )
    except UpstreamError as exc:
        _LOG.warning("timezone lookup skipped: %s", exc.detail)
        return None
    return data.get("timezoneId") or None


def _landmarks(client: httpx.Client, lat: float, lng: float) -> list[str]:
    query = f'[out:json];(node(around:{LANDMARK_RADIUS_METERS},{lat},{lng})["tourism"];);out;'
    try:
        data = _get_json(client, settings.OVERPASS_URL, params={"data": query}, service="Places service")
    except UpstreamError as exc:
        _LOG.warning("landmark lookup skipped: %s", exc.detail)
        return []
    names = [((el.get("tags") or {}).get("name")) for el in _elements(data)]
    return [name for name in names if name][:MAX_LANDMARKS]


def reverse_location(lat_raw: Any, lng_raw: Any) -> dict[str, Any]:
    lat = coordinate_or_400(lat_raw, "lat", 90.0)
    lng = coordinate_or_400(lng_raw, "lng", 180.0)

    with httpx.Client(timeout=GEO_TIMEOUT_SECONDS, headers={"User-Agent": settings.HTTP_USER_AGENT}) as client:
        place = _get_json(
            client,
            settings.NOMINATIM_URL,
            params={"lat": lat, "lon": lng, "format": "json", "addressdetails": 1},
            service="Geocoding service",
        )
        timezone_id = _timezone_id(client, lat, lng)
        landmarks = _landmarks(client, lat, lng)

    address = place.get("address")
    if not isinstance(address, dict):
        address = {}
    country_code = str(address.get("country_code") or "").upper() or None
    return {
        "lat": lat,
        "lng": lng,
        "city": address.get("city") or address.get("town") or address.get("village"),
        "district": address.get("county"),
        "state": address.get("state"),
        "state_code": address.get("state_code"),
        "country": address.get("country"),
        "country_code": country_code,
        "postcode": address.get("postcode"),
        "address": place.get("display_name"),
        "timezone": timezone_id,
        "nearby_landmarks": landmarks,
        "coordinates_format": to_dms(lat, lng),
    }


def nearby_places(
    amenity: Any,
    lat_raw: Any,
    lng_raw: Any,
    *,
    radius_km: Any = 5,
    page: int = 1,
    limit: int = 10,
) -> dict[str, Any]:
    lat = coordinate_or_400(lat_raw, "lat", 90.0)
    lng = coordinate_or_400(lng_raw, "lng", 180.0)
    kind = str(amenity or "hospital").strip().lower()
    if not _AMENITY_RE.fullmatch(kind):
        raise ValidationError('Field "type" must be an OpenStreetMap amenity name')
    try:
        radius = float(radius_km)
    except (TypeError, ValueError):
        raise ValidationError('Field "radiusKm" must be a number')
    if not math.isfinite(radius) or radius <= 0:
        raise ValidationError('Field "radiusKm" must be positive')

    radius_meters = int(radius * 1000)
    query = f'[out:json];node["amenity"="{kind}"](around:{radius_meters},{lat},{lng});out;'
    with httpx.Client(timeout=OVERPASS_TIMEOUT_SECONDS, headers={"User-Agent": settings.HTTP_USER_AGENT}) as client:
        data = _get_json(client, settings.OVERPASS_URL, params={"data": query}, service="Places service")

    places = [
        {
            "id": el.get("id"),
            "name": (el.get("tags") or {}).get("name") or "Unknown",
            "location": {"lat": el.get("lat"), "lng": el.get("lon")},
        }
        for el in _elements(data)
    ]
    start = (page - 1) * limit
    return {
        "count": len(places),
        "page": page,
        "limit": limit,
        "totalPages": total_pages(len(places), limit),
        "type": kind,
        "radiusKm": radius,
        "places": places[start:start + limit],
    }
