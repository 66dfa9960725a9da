#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
GeoJSONConverter:
Convert CSV files of geolocated IP lookups into GeoJSON FeatureCollections.

Uses Python 3.10+ type annotations.
"""

import csv
import json
import logging
import math
from pathlib import Path
from typing import Any, NamedTuple, Optional

from pydantic import ValidationError

from csv2geojson.config import OUTPUT_EXTENSION
from csv2geojson.errors import (
    ConfigurationError, CoordinateParseError, CSVParseError,
    FileOperationError, SerializationError
)
from csv2geojson.models import (
    MIN_COLUMNS, ConverterSettings, Feature, FeatureCollection,
    IpLocationRecord, Point, Properties, describe_validation_error
)

# Configure logger
logger = logging.getLogger(__name__)


class CsvRow(NamedTuple):
    """A raw CSV row and the input line it ended on."""
    line_number: int
    fields: list[str]


class GeoJSONConverter:
    """
    Converts CSV rows of IP lookups to GeoJSON point features.
    """
    def __init__(self, settings: Optional[ConverterSettings] = None, **overrides: Any):
        """
        Initialize the converter.

        Args:
            settings: Converter settings (defaults used if omitted)
            **overrides: Individual settings replacing those in `settings`

        Raises:
            ConfigurationError: If an override is not a valid setting value
        """
        settings = settings or ConverterSettings()
        if overrides:
            try:
                settings = ConverterSettings(**{**settings.model_dump(), **overrides})
            except ValidationError as e:
                raise ConfigurationError(f"Invalid configuration: {describe_validation_error(e)}") from e
        self.settings = settings

    def read_rows(self, csv_path: Path) -> list[CsvRow]:
        """
        Read every data row of a CSV file into memory.

        Blank lines are ignored. The first non-blank row fixes the expected
        field count; when skip_header is set it is then discarded.

        Args:
            csv_path: Path to the CSV file

        Returns:
            Data rows in file order

        Raises:
            FileOperationError: If the file cannot be opened or read
            CSVParseError: If the CSV structure is malformed
        """
        csv_path = Path(csv_path)
        rows: list[CsvRow] = []
        expected_fields: Optional[int] = None
        header_pending = self.settings.skip_header

        try:
            with csv_path.open(encoding=self.settings.encoding, newline='') as f:
                reader = csv.reader(f, delimiter=self.settings.delimiter, strict=True)
                try:
                    for fields in reader:
                        if not fields:
                            continue

                        if expected_fields is None:
                            expected_fields = len(fields)
                        elif len(fields) != expected_fields:
                            raise CSVParseError(
                                f"Error reading CSV: line {reader.line_num}: wrong number of fields "
                                f"(expected {expected_fields}, got {len(fields)})",
                                file_path=str(csv_path),
                                row_number=reader.line_num
                            )

                        if header_pending:
                            header_pending = False
                            logger.debug("Skipping header row: %s", fields)
                            continue

                        rows.append(CsvRow(reader.line_num, fields))
                except csv.Error as e:
                    raise CSVParseError(
                        f"Error reading CSV: line {reader.line_num}: {str(e)}",
                        file_path=str(csv_path),
                        row_number=reader.line_num
                    ) from e
        except UnicodeDecodeError as e:
            raise CSVParseError(
                f"Error reading CSV: cannot decode file as {self.settings.encoding}: {str(e)}",
                file_path=str(csv_path)
            ) from e
        except OSError as e:
            raise FileOperationError(f"Error opening CSV file: {str(e)}", file_path=str(csv_path)) from e

        if header_pending:
            raise CSVParseError("Error reading CSV header: file is empty", file_path=str(csv_path))

        logger.info("Read %d rows from %s", len(rows), csv_path)
        return rows

    def parse_coordinate(
        self,
        value: str,
        field: str,
        row_number: Optional[int] = None,
        file_path: Optional[str] = None
    ) -> float:
        """
        Parse a latitude or longitude as a 64-bit float.

        Under the lenient policy an unparseable or non-finite value becomes 0.0;
        under the strict policy it raises.

        Raises:
            CoordinateParseError: On an invalid value with the strict policy
        """
        try:
            number = float(value)
        except ValueError:
            number = math.nan

        if math.isfinite(number):
            return number

        if self.settings.strict:
            raise CoordinateParseError(
                f"Invalid {field} {value!r} at row {row_number}",
                field=field,
                value=value,
                file_path=file_path,
                row_number=row_number
            )

        logger.warning("Row %s: invalid %s %r, using 0.0", row_number, field, value)
        return 0.0

    def row_to_record(self, row: CsvRow, file_path: Optional[str] = None) -> IpLocationRecord:
        """
        Map a CSV row to a record by column position.

        Columns 0-4 are Timestamp, IP, City, Region, Country; column 5 is the
        latitude and column 6 the longitude. Further columns are ignored.

        Raises:
            CSVParseError: If the row has fewer than seven columns
        """
        fields = row.fields
        if len(fields) < MIN_COLUMNS:
            raise CSVParseError(
                f"Row {row.line_number} has {len(fields)} columns, expected at least {MIN_COLUMNS}",
                file_path=file_path,
                row_number=row.line_number
            )

        return IpLocationRecord(
            timestamp=fields[0],
            ip=fields[1],
            city=fields[2],
            region=fields[3],
            country=fields[4],
            latitude=self.parse_coordinate(fields[5], "latitude", row.line_number, file_path),
            longitude=self.parse_coordinate(fields[6], "longitude", row.line_number, file_path),
        )

    @staticmethod
    def record_to_feature(record: IpLocationRecord) -> Feature:
        """Build a point feature; GeoJSON orders coordinates [longitude, latitude]."""
        return Feature(
            properties=Properties(
                timestamp=record.timestamp,
                ip=record.ip,
                city=record.city,
                region=record.region,
                country=record.country,
            ),
            geometry=Point(coordinates=[record.longitude, record.latitude]),
        )

    def build_collection(self, rows: list[CsvRow], file_path: Optional[str] = None) -> FeatureCollection:
        """
        Map every row to a feature, keeping input order.

        Args:
            rows: Rows as returned by read_rows
            file_path: Source path, used in error reports

        Returns:
            FeatureCollection with one feature per row
        """
        features = [self.record_to_feature(self.row_to_record(row, file_path)) for row in rows]
        return FeatureCollection(features=features)

    def csv_to_collection(self, csv_path: Path) -> FeatureCollection:
        """
        Read a CSV file and build its FeatureCollection.

        Raises:
            FileOperationError: On file access errors
            CSVParseError: On malformed input
        """
        rows = self.read_rows(csv_path)
        return self.build_collection(rows, str(csv_path))

    def serialize(self, collection: FeatureCollection) -> str:
        """
        Serialize a collection to pretty-printed JSON text.

        Raises:
            SerializationError: If the collection cannot be encoded
        """
        try:
            return json.dumps(
                collection.to_dict(),
                indent=self.settings.indent,
                ensure_ascii=False,
                allow_nan=False
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Error converting to JSON: {str(e)}") from e

    def output_path_for(self, csv_path: Path) -> Path:
        """
        Work out where the GeoJSON for `csv_path` goes.

        'derived' naming swaps the input's extension for .geojson;
        'fixed' naming always uses the configured output name.
        """
        if self.settings.output_naming == "fixed":
            name = self.settings.output_name
        else:
            base = Path(csv_path).name
            # Everything from the last dot is the extension, so ".csv" has an empty stem
            stem = base.rpartition(".")[0] if "." in base else base
            name = stem + OUTPUT_EXTENSION

        if self.settings.output_dir is not None:
            return Path(self.settings.output_dir) / name
        return Path(name)

    def convert_file(self, csv_path: Path, output_path: Optional[Path] = None) -> Path:
        """
        Convert a single CSV file to GeoJSON.

        The whole input is parsed and serialized before the output file is
        opened, so a parse failure never leaves an output file behind.

        Args:
            csv_path: Path to CSV file
            output_path: Optional explicit output path (overrides the naming mode)

        Returns:
            Path to the generated GeoJSON file

        Raises:
            FileOperationError: If the input cannot be read or the output cannot be written
            CSVParseError: On malformed input
            SerializationError: If JSON encoding fails
        """
        csv_path = Path(csv_path)
        collection = self.csv_to_collection(csv_path)
        text = self.serialize(collection)

        if output_path is None:
            output_path = self.output_path_for(csv_path)
        output_path = Path(output_path)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with output_path.open('w', encoding='utf-8', newline='') as f:
                f.write(text)
        except OSError as e:
            raise FileOperationError(f"Error creating GeoJSON file: {str(e)}", file_path=str(output_path)) from e

        logger.info(
            "Converted %s -> %s (%d features)",
            csv_path.name, output_path, len(collection.features)
        )
        return output_path
