"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- catalog entities (`Location`, `FieldBoundary`, `Field`)
- query results (`PointLocation`)
- API payloads (`FieldResponse`, `DistanceRequest`, `PointLocationRequest`)

Catalog entities are frozen and hold polygons as tuples, so a `Field` handed
out by the catalog cannot be used to change what the catalog stores.
Coordinates are deliberately not range-checked: out-of-range values are
accepted and passed through unchanged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field as PydanticField


class Location(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class FieldBoundary(BaseModel):
    """A field outline parsed from the boundary document, before the centroid join."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    size: float = 0.0
    polygon: tuple[Location, ...] = ()


class Field(BaseModel):
    """A field boundary joined with its centroid."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    size: float = 0.0
    center: Location
    polygon: tuple[Location, ...] = ()


class PointLocation(BaseModel):
    """The field that contains a queried point."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class FieldLocations(BaseModel):
    center: Location
    polygon: list[Location]


class FieldResponse(BaseModel):
    """One entry of the `GET /api/fields` listing."""

    id: int
    name: str
    size: float
    locations: FieldLocations

    @classmethod
    def from_field(cls, field: Field) -> "FieldResponse":
        return cls(
            id=field.id,
            name=field.name,
            size=field.size,
            locations=FieldLocations(center=field.center, polygon=list(field.polygon)),
        )


class DistanceRequest(BaseModel):
    """Body of `POST /api/fields/distance` (accepts `fieldId` or `field_id`)."""

    model_config = ConfigDict(populate_by_name=True)

    field_id: int = PydanticField(..., alias="fieldId")
    lat: float
    lng: float


class PointLocationRequest(BaseModel):
    lat: float
    lng: float
