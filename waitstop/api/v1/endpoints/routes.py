"""
Routes API Endpoint

Compares taxi, transit and taxi-then-transit options for a trip.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from waitstop.api.deps import get_trip_planner
from waitstop.schemas.routes import RouteSearchRequest, RouteSearchResponse
from waitstop.services.trip_planner_service import (
    LocationNotFoundError,
    MissingInputError,
    TripPlannerService,
)

logger = logging.getLogger(__name__)

router = APIRouter()

NO_OPTIONS_MESSAGE = "No route could be found between these locations"


@router.post("/search", response_model=RouteSearchResponse)
async def search_routes(
    request: RouteSearchRequest,
    planner: TripPlannerService = Depends(get_trip_planner),
):
    """
    Search for Saver, Smart and VIP options between two locations.

    Each endpoint may be free text (geocoded), coordinates, or both.

    Args:
        request: Route search parameters
        planner: Trip planner wired at startup

    Returns:
        RouteSearchResponse with the resolved endpoints and available options.
        An empty option list is a valid result and carries a message.

    Raises:
        HTTPException: 400 for missing input, 404 when a location cannot be
            resolved, 500 for anything unexpected
    """
    logger.info(
        "Route search request: origin=%s, destination=%s, scenario=%s",
        request.origin or request.origin_coordinates,
        request.destination or request.destination_coordinates,
        request.scenario.value,
    )

    try:
        plan = await planner.plan(
            origin=request.origin,
            destination=request.destination,
            origin_coordinates=request.origin_coordinates,
            destination_coordinates=request.destination_coordinates,
        )

    except MissingInputError as e:
        logger.info("Rejected route search: %s", str(e))
        raise HTTPException(status_code=400, detail="Missing origin or destination") from e

    except LocationNotFoundError as e:
        logger.info("Route search failed: %s", str(e))
        raise HTTPException(status_code=404, detail="Location not found") from e

    except Exception as e:
        logger.exception("Unexpected error in route search")
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while searching for routes",
        ) from e

    logger.info("Route search successful: %d options", len(plan.options))

    return RouteSearchResponse(
        origin=plan.origin,
        destination=plan.destination,
        scenario=request.scenario,
        options=plan.options,
        message=None if plan.options else NO_OPTIONS_MESSAGE,
        search_time=datetime.now(timezone.utc),
    )
