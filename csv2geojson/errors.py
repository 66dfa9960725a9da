#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Error definitions for the csv2geojson package.
Custom exception classes for better error handling and reporting.
Uses Python 3.10+ type annotations.
"""

from typing import Optional


class Csv2GeoJsonError(Exception):
    """Base exception class for all csv2geojson errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        """
        Get suggestions for fixing the error.

        Returns:
            List of suggestion strings
        """
        return [
            "Check the error message for details",
            "Run with --log-level debug for more information",
        ]


class FileOperationError(Csv2GeoJsonError):
    """Exception for file operation errors (opening, reading or writing)."""

    def __init__(self, message: str, file_path: Optional[str] = None, *args, **kwargs):
        self.file_path = file_path
        super().__init__(message, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        """
        Get suggestions for fixing file operation errors.

        Returns:
            List of suggestion strings
        """
        suggestions = []

        if "permission denied" in self.message.lower():
            suggestions.append("Check file permissions")
            suggestions.append("Ensure you have read/write access to the file")

        elif "no such file" in self.message.lower() or "not found" in self.message.lower():
            suggestions.append("Verify the file path is correct")
            suggestions.append("Check that the file exists")

        elif "is a directory" in self.message.lower():
            suggestions.append("Expected a file but found a directory")
            suggestions.append("Specify a file path, not a directory")

        if not suggestions:
            suggestions.append("Check the file path and permissions")
            suggestions.append("Ensure the directory exists and is accessible")

        return suggestions


class CSVParseError(Csv2GeoJsonError):
    """Exception for structurally malformed CSV input."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 row_number: Optional[int] = None, *args, **kwargs):
        self.file_path = file_path
        self.row_number = row_number
        super().__init__(message, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        """
        Get suggestions for fixing CSV parse errors.

        Returns:
            List of suggestion strings
        """
        suggestions = []

        if "header" in self.message.lower():
            suggestions.append("The file is empty; add a header row and data rows")
            suggestions.append("Or use --no-skip-header if the file has no header row")

        elif "expected at least" in self.message.lower():
            suggestions.append("Each row needs 7 columns: Timestamp, IP, City, Region, Country, Latitude, Longitude")
            suggestions.append("Check for missing commas or truncated lines")

        elif "wrong number of fields" in self.message.lower():
            suggestions.append("Every row must have the same number of columns as the first row")
            suggestions.append("Quote fields that contain commas")

        elif "decode" in self.message.lower():
            suggestions.append("Check the file encoding, or pass --encoding")

        if self.row_number is not None:
            suggestions.append(f"Error occurs at row {self.row_number}")

        if not suggestions:
            suggestions.append("Check the CSV format - ensure it's properly formatted")
            suggestions.append("Verify delimiter is comma (,) and fields are properly quoted if needed")

        return suggestions


class CoordinateParseError(CSVParseError):
    """Exception for a latitude or longitude that is not a valid number (strict mode)."""

    def __init__(self, message: str, field: str, value: str,
                 file_path: Optional[str] = None, row_number: Optional[int] = None,
                 *args, **kwargs):
        self.field = field
        self.value = value
        super().__init__(message, file_path, row_number, *args, **kwargs)

    def get_suggestions(self) -> list[str]:
        suggestions = [
            f"Fix the {self.field} value {self.value!r} so it is a finite decimal number",
            "Or use --lenient to write 0.0 for unparseable coordinates",
        ]
        if self.row_number is not None:
            suggestions.append(f"Error occurs at row {self.row_number}")
        return suggestions


class SerializationError(Csv2GeoJsonError):
    """Exception for failures while encoding the FeatureCollection as JSON."""
    pass


class ConfigurationError(Csv2GeoJsonError):
    """Exception for configuration-related errors."""

    def get_suggestions(self) -> list[str]:
        """
        Get suggestions for fixing configuration errors.

        Returns:
            List of suggestion strings
        """
        suggestions = []

        if "config file" in self.message.lower():
            suggestions.append("Check that the config file exists and has correct permissions")
            suggestions.append("Use --config option to specify an alternate config file")

        elif "output_naming" in self.message:
            suggestions.append("Valid naming modes are: derived, fixed")

        elif "coordinate_policy" in self.message:
            suggestions.append("Valid coordinate policies are: lenient, strict")

        elif "encoding" in self.message:
            suggestions.append("Use a codec name Python knows, such as utf-8, latin-1 or cp1252")

        if not suggestions:
            suggestions.append("Check your configuration settings and CSV2GEOJSON_* environment variables")
            suggestions.append("Run with --log-level debug for more detailed information")

        return suggestions
