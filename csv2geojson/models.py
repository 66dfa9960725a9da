"""
Data models for IP-lookup records and the GeoJSON objects built from them.
Uses Python 3.10 type annotations and Pydantic v2 for schema validation.
"""

import codecs
import math
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


# Positional column layout of an input row
COLUMNS = ("Timestamp", "IP", "City", "Region", "Country", "Latitude", "Longitude")
MIN_COLUMNS = len(COLUMNS)

OutputNaming = Literal["derived", "fixed"]
CoordinatePolicy = Literal["lenient", "strict"]


class IpLocationRecord(BaseModel):
    """One geolocated IP lookup, as read from a CSV row."""
    timestamp: str
    ip: str
    city: str
    region: str
    country: str
    latitude: float
    longitude: float


class Properties(BaseModel):
    """Flat feature properties; serialized with capitalized keys."""
    timestamp: str = Field(..., serialization_alias="Timestamp")
    ip: str = Field(..., serialization_alias="IP")
    city: str = Field(..., serialization_alias="City")
    region: str = Field(..., serialization_alias="Region")
    country: str = Field(..., serialization_alias="Country")


class Point(BaseModel):
    """GeoJSON Point geometry. Coordinates are [longitude, latitude]."""
    type: Literal["Point"] = "Point"
    coordinates: list[float] = Field(..., min_length=2, max_length=2)

    @model_validator(mode='after')
    def validate_finite(self) -> 'Point':
        """JSON has no representation for NaN or infinity."""
        if not all(math.isfinite(c) for c in self.coordinates):
            raise ValueError("Point coordinates must be finite numbers")
        return self

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class Feature(BaseModel):
    """GeoJSON Feature pairing a Point with the record's properties."""
    type: Literal["Feature"] = "Feature"
    properties: Properties
    geometry: Point


class FeatureCollection(BaseModel):
    """GeoJSON FeatureCollection; feature order follows input row order."""
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form with GeoJSON key names, ready for json.dumps."""
        return self.model_dump(by_alias=True)


class ConverterSettings(BaseModel):
    """Behavioural switches for the converter."""
    skip_header: bool = Field(True, description="Discard the first CSV row as a header")
    output_naming: OutputNaming = Field("derived", description="'derived' uses <stem>.geojson, 'fixed' uses output_name")
    output_name: str = Field("output.geojson", min_length=1, description="File name used when output_naming is 'fixed'")
    output_dir: Optional[Path] = Field(None, description="Directory for the output file (current directory if unset)")
    coordinate_policy: CoordinatePolicy = Field("lenient", description="'lenient' writes 0.0 for bad coordinates, 'strict' aborts")
    indent: int = Field(4, ge=0, description="Indentation step of the pretty-printed output")
    encoding: str = Field("utf-8", min_length=1, description="Encoding of the input CSV (output is always UTF-8)")
    delimiter: str = Field(",", description="CSV field delimiter")

    @field_validator('encoding')
    @classmethod
    def validate_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError(f"unknown encoding: {value}") from None
        return value

    @field_validator('delimiter')
    @classmethod
    def validate_delimiter(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("delimiter must be a single character")
        return value

    @property
    def strict(self) -> bool:
        return self.coordinate_policy == "strict"


def describe_validation_error(error: ValidationError) -> str:
    """
    Turn a Pydantic ValidationError into a one-line message.

    Args:
        error: The validation error to describe

    Returns:
        Message naming the first failing location
    """
    errors = error.errors()
    if not errors:
        return "Unknown validation error"

    first = errors[0]
    location = ".".join(str(loc) for loc in first["loc"])
    return f"Validation error at '{location}': {first['msg']}"
