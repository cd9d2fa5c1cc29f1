"""
Field catalog.

The catalog joins the boundary and centroid KML documents by field id and keeps
the result in memory for the lifetime of the process. It is built once (lazily,
on first use) and never mutated afterwards, so queries need no locking.

Known limitation: `is_point_in_field` returns the first containing field in load
order (boundary document order). Overlapping fields are not disambiguated.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from agrospace.config.settings import KML_NAMESPACE, Settings
from agrospace.core.env import resolve_data_path
from agrospace.core.geo import contains_point, haversine_m
from agrospace.domain.models import Field, Location, PointLocation
from agrospace.ingestion import kml

logger = logging.getLogger(__name__)

MIN_POLYGON_POINTS = 3


class UnknownFieldError(ValueError):
    """Raised when a query needs a field id that is not in the catalog."""

    def __init__(self, field_id: int):
        super().__init__(f"Field with id {field_id} not found")
        self.field_id = field_id


class FieldCatalog:
    def __init__(self, fields_path: str | Path, centroids_path: str | Path, *, namespace: str = KML_NAMESPACE):
        self.fields_path = Path(fields_path)
        self.centroids_path = Path(centroids_path)
        self.namespace = namespace
        self._lock = threading.Lock()
        self._fields: dict[int, Field] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "FieldCatalog":
        return cls(
            resolve_data_path(settings.data.fields_path),
            resolve_data_path(settings.data.centroids_path),
            namespace=settings.data.kml_namespace,
        )

    @property
    def loaded(self) -> bool:
        return self._fields is not None

    def load(self) -> None:
        """Parse both documents and publish the joined catalog (no-op once loaded).

        Raises `FileNotFoundError` if either document is missing; the catalog then
        stays unloaded and the next call tries again.
        """
        self._ensure_loaded()

    def _ensure_loaded(self) -> dict[int, Field]:
        fields = self._fields
        if fields is not None:
            return fields
        with self._lock:
            if self._fields is not None:
                return self._fields
            try:
                fields = self._build()
            except Exception as e:
                logger.error("Failed to load fields: %s", e)
                raise
            self._fields = fields
            logger.info("Loaded %d fields", len(fields))
            return fields

    def _build(self) -> dict[int, Field]:
        boundaries = kml.parse_field_boundaries(kml.load_kml(self.fields_path), namespace=self.namespace)
        centroids = kml.parse_centroids(kml.load_kml(self.centroids_path), namespace=self.namespace)

        fields: dict[int, Field] = {}
        for boundary in boundaries:
            center = centroids.get(boundary.id)
            if center is None:
                logger.debug("No centroid for field %s; dropped.", boundary.id)
                continue
            if len(boundary.polygon) < MIN_POLYGON_POINTS:
                logger.debug("Field %s has fewer than %d polygon points; dropped.", boundary.id, MIN_POLYGON_POINTS)
                continue
            fields[boundary.id] = Field(
                id=boundary.id,
                name=boundary.name,
                size=boundary.size,
                center=center,
                polygon=boundary.polygon,
            )
        return fields

    def __len__(self) -> int:
        return len(self._ensure_loaded())

    def get_all_fields(self) -> list[Field]:
        return list(self._ensure_loaded().values())

    def get_field(self, field_id: int) -> Field | None:
        return self._ensure_loaded().get(field_id)

    def get_field_size(self, field_id: int) -> float | None:
        field = self.get_field(field_id)
        return field.size if field is not None else None

    def calculate_distance(self, field_id: int, lat: float, lng: float) -> float:
        """Distance in meters from the field's centroid to `(lat, lng)`.

        Raises `UnknownFieldError` for an unknown id.
        """
        field = self.get_field(field_id)
        if field is None:
            raise UnknownFieldError(field_id)
        return haversine_m(field.center, Location(lat=lat, lng=lng))

    def is_point_in_field(self, lat: float, lng: float) -> PointLocation | None:
        point = Location(lat=lat, lng=lng)
        for field in self._ensure_loaded().values():
            if contains_point(field.polygon, point):
                return PointLocation(id=field.id, name=field.name)
        return None
