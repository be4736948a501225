from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from transit_finder.adapters.api.dependencies import (
    get_search_cache,
    get_suggestion_service,
)
from transit_finder.adapters.api.schemas.routes import CoordinateSchema
from transit_finder.adapters.api.schemas.suggestions import LocationSuggestionSchema
from transit_finder.app.services.search_cache import SearchCache
from transit_finder.app.services.suggestion_service import LocationSuggestionService

router = APIRouter(tags=["suggestions"])


@router.get("/location-suggestions", response_model=list[LocationSuggestionSchema])
async def location_suggestions(
    query: str | None = None,
    service: LocationSuggestionService = Depends(get_suggestion_service),
    cache: SearchCache = Depends(get_search_cache),
) -> list[LocationSuggestionSchema]:
    if not query:
        raise HTTPException(status_code=400, detail="Query parameter is required")

    suggestions = await service.suggest(query, cache=cache)
    return [
        LocationSuggestionSchema(
            name=s.name,
            type=s.type,
            coordinates=CoordinateSchema(lat=s.coordinates.lat, lng=s.coordinates.lng),
            osm_id=s.osm_id,
            osm_type=s.osm_type,
            network=s.network,
            city=s.city,
        )
        for s in suggestions
    ]
