"""
Pydantic models for GeoJSON output
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float]  # [longitude, latitude]


class GeoJSONLineString(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]]  # [[lon, lat], ...]


class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]  # [[[lon, lat], ...]]


GeoJSONGeometry = Union[GeoJSONPoint, GeoJSONLineString, GeoJSONPolygon]


class GeoJSONFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    id: str  # "node/17", "way/42"
    geometry: GeoJSONGeometry
    properties: Dict[str, Any] = Field(default_factory=dict)


class GeoJSONFeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[GeoJSONFeature] = Field(default_factory=list)
    generator: Optional[str] = None


_GEOMETRY_MODELS = {
    "Point": GeoJSONPoint,
    "LineString": GeoJSONLineString,
    "Polygon": GeoJSONPolygon,
}


def _as_lists(value: Any) -> Any:
    """shapely mapping() returns nested tuples, GeoJSON wants lists"""
    if isinstance(value, (list, tuple)):
        return [_as_lists(v) for v in value]
    return value


def geometry_model(geometry: BaseGeometry) -> GeoJSONGeometry:
    """Convert a shapely geometry into its GeoJSON model"""
    data = mapping(geometry)
    model = _GEOMETRY_MODELS.get(data["type"])
    if model is None:
        raise ValueError(f"Unsupported geometry type for GeoJSON export: {data['type']}")
    return model(coordinates=_as_lists(data["coordinates"]))


def feature(type_: str, id_: int, geometry: BaseGeometry, properties: Dict[str, Any]) -> GeoJSONFeature:
    return GeoJSONFeature(
        id=f"{type_}/{id_}",
        geometry=geometry_model(geometry),
        properties=dict(properties),
    )
