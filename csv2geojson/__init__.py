"""
csv2geojson: convert CSV files of geolocated IP lookups into GeoJSON.
"""

from csv2geojson.converter import GeoJSONConverter
from csv2geojson.errors import (
    Csv2GeoJsonError, ConfigurationError, CoordinateParseError,
    CSVParseError, FileOperationError, SerializationError
)
from csv2geojson.models import ConverterSettings, Feature, FeatureCollection, Point

__version__ = "0.1.0"

__all__ = [
    "GeoJSONConverter",
    "ConverterSettings",
    "Feature",
    "FeatureCollection",
    "Point",
    "Csv2GeoJsonError",
    "ConfigurationError",
    "CoordinateParseError",
    "CSVParseError",
    "FileOperationError",
    "SerializationError",
]
