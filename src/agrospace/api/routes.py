"""
API routes.

Endpoints:
- GET  `/api/fields`: all loaded fields with center + polygon.
- GET  `/api/fields/{id}/size`: the field's size (404 if unknown).
- POST `/api/fields/distance`: meters from a field's centroid to a point (400 if unknown id).
- POST `/api/fields/point-location`: `{id, name}` of the field containing a point, or `false`.
- GET  `/api/health`: liveness + number of loaded fields.

Handlers receive the catalog built at startup through `get_catalog`.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from agrospace.catalog.fields import FieldCatalog, UnknownFieldError
from agrospace.domain.models import DistanceRequest, FieldResponse, PointLocationRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def get_catalog(request: Request) -> FieldCatalog:
    return request.app.state.catalog


def _internal_error(e: Exception) -> HTTPException:
    logger.exception("Field query failed")
    return HTTPException(
        status_code=500,
        detail={"code": "INTERNAL_ERROR", "message": str(e)},
    )


@router.get("/api/health")
def get_health(catalog: FieldCatalog = Depends(get_catalog)) -> dict:
    return {"status": "ok", "fields": len(catalog)}


@router.get("/api/fields", response_model=list[FieldResponse])
def get_all_fields(catalog: FieldCatalog = Depends(get_catalog)) -> list[FieldResponse]:
    """Return every field in load order."""
    try:
        return [FieldResponse.from_field(f) for f in catalog.get_all_fields()]
    except Exception as e:
        raise _internal_error(e) from e


@router.get("/api/fields/{field_id}/size")
def get_field_size(field_id: int, catalog: FieldCatalog = Depends(get_catalog)) -> float:
    try:
        size = catalog.get_field_size(field_id)
    except Exception as e:
        raise _internal_error(e) from e
    if size is None:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": "Field not found"})
    return size


@router.post("/api/fields/distance")
def post_distance(body: DistanceRequest, catalog: FieldCatalog = Depends(get_catalog)) -> float:
    """Great-circle distance in meters from the field's centroid to the given point."""
    try:
        return catalog.calculate_distance(body.field_id, body.lat, body.lng)
    except UnknownFieldError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except Exception as e:
        raise _internal_error(e) from e


@router.post("/api/fields/point-location", response_model=None)
def post_point_location(body: PointLocationRequest, catalog: FieldCatalog = Depends(get_catalog)) -> dict | bool:
    """Return the first field containing the point, or `false` when none does."""
    try:
        result = catalog.is_point_in_field(body.lat, body.lng)
    except Exception as e:
        raise _internal_error(e) from e
    if result is None:
        return False
    return result.model_dump()
