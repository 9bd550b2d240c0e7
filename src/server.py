import logging
import os

import uvicorn
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.gzip import GZipMiddleware

from geo_math import InvalidCoordinates
from road_network_fetcher import NetworkUnavailable
from route_planner import (
    FareEstimate,
    NoNodeFound,
    RideRequestDraft,
    RideRequestPayload,
    RouteComputationCancelled,
    RouteRequest,
    RouteResult,
    Router,
    RouterConfiguration,
)

app = FastAPI()
app.add_middleware(GZipMiddleware)

logger = logging.getLogger(__name__)
router = Router()


@app.get("/configuration")
def get_configuration() -> RouterConfiguration:
    """
    Returns the active router configuration: fare table, road speeds,
    retry and fetch settings, and the operating area.
    """
    return router.configuration


def _plan_route(route_request: RouteRequest) -> RouteResult:
    try:
        return router.plan_route(
            route_request.origin,
            route_request.destination,
            route_request.search_radius_meters,
        )
    except InvalidCoordinates as exc:
        raise HTTPException(422, str(exc))
    except NoNodeFound as exc:
        raise HTTPException(404, str(exc))
    except NetworkUnavailable as exc:
        raise HTTPException(503, str(exc))
    except RouteComputationCancelled as exc:
        raise HTTPException(503, str(exc))
    except Exception as exc:
        logger.exception(
            "Failed to plan route from %s to %s",
            route_request.origin.coordinates,
            route_request.destination.coordinates,
            exc_info=exc,
        )
        raise HTTPException(500, "Route planning failed")


@app.post("/routes")
def plan_route(route_request: RouteRequest) -> RouteResult:
    """
    Returns the fastest route between origin and destination.

    A route which does not follow the road network, because there is no road
    connection or the map data is unavailable, is returned with `degraded`
    set and the reason in `degraded_reason`.
    """

    return _plan_route(route_request)


@app.post("/routes/ride-request")
def build_ride_request(ride_request: RideRequestDraft) -> RideRequestPayload:
    """
    Plans the route and returns the data to submit as a ride request.
    """

    route = _plan_route(ride_request)

    return RideRequestPayload.from_route(
        route,
        ride_request.origin,
        ride_request.destination,
        ride_request.pickup_address,
        ride_request.dropoff_address,
    )


@app.get("/fares")
def estimate_fare(distance_km: float = Query(ge=0)) -> FareEstimate:
    return FareEstimate(
        distance_km=distance_km,
        fare=router.fare_estimator.estimate(distance_km),
        currency=router.fare_estimator.currency,
    )


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.environ.get("APP_HOST", "127.0.0.1"),
        port=int(os.environ.get("APP_PORT", 8000)),
    )
