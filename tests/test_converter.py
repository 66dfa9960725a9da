"""
Unit tests for the converter module.
Tests CSV reading, row mapping, serialization and output naming.
"""

import json
import logging
from pathlib import Path

import pytest

from csv2geojson.converter import CsvRow, GeoJSONConverter
from csv2geojson.errors import (
    ConfigurationError, CoordinateParseError, CSVParseError, FileOperationError
)
from csv2geojson.models import ConverterSettings, IpLocationRecord

HEADER = "Timestamp,IP,City,Region,Country,Latitude,Longitude\n"

SAMPLE_CSV = HEADER + (
    "2023-01-01T00:00:00Z,1.2.3.4,Springfield,IL,US,39.7817,-89.6501\n"
    "2023-01-02T12:30:00Z,5.6.7.8,Lyon,Auvergne-Rhone-Alpes,FR,45.764,4.8357\n"
    "2023-01-03T08:15:00Z,9.10.11.12,Sydney,NSW,AU,-33.8688,151.2093\n"
)

EXPECTED_FIRST_FEATURE = {
    "type": "Feature",
    "properties": {
        "Timestamp": "2023-01-01T00:00:00Z",
        "IP": "1.2.3.4",
        "City": "Springfield",
        "Region": "IL",
        "Country": "US",
    },
    "geometry": {
        "type": "Point",
        "coordinates": [-89.6501, 39.7817],
    },
}


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    csv_path = tmp_path / "hosts.csv"
    csv_path.write_text(SAMPLE_CSV, encoding="utf-8")
    return csv_path


@pytest.fixture
def converter(tmp_path: Path) -> GeoJSONConverter:
    return GeoJSONConverter(output_dir=tmp_path / "out")


class TestReadRows:
    """Tests for reading and structurally checking CSV input."""

    def test_header_is_skipped(self, converter, sample_csv):
        rows = converter.read_rows(sample_csv)
        assert len(rows) == 3
        assert rows[0].fields[1] == "1.2.3.4"
        assert rows[0].line_number == 2

    def test_header_kept_when_not_skipping(self, sample_csv):
        rows = GeoJSONConverter(skip_header=False).read_rows(sample_csv)
        assert len(rows) == 4
        assert rows[0].fields[0] == "Timestamp"

    def test_blank_lines_are_ignored(self, tmp_path):
        csv_path = tmp_path / "blank.csv"
        csv_path.write_text(SAMPLE_CSV.replace("\n2023-01-02", "\n\n2023-01-02"), encoding="utf-8")
        rows = GeoJSONConverter().read_rows(csv_path)
        assert [row.fields[1] for row in rows] == ["1.2.3.4", "5.6.7.8", "9.10.11.12"]

    def test_quoted_field_with_comma(self, tmp_path):
        csv_path = tmp_path / "quoted.csv"
        csv_path.write_text(
            HEADER + '2023-01-01T00:00:00Z,1.2.3.4,"Washington, D.C.",DC,US,38.9072,-77.0369\n',
            encoding="utf-8"
        )
        rows = GeoJSONConverter().read_rows(csv_path)
        assert rows[0].fields[2] == "Washington, D.C."

    def test_inconsistent_field_count(self, tmp_path):
        csv_path = tmp_path / "ragged.csv"
        csv_path.write_text(HEADER + "2023-01-01T00:00:00Z,1.2.3.4,Springfield,IL,US,39.7817\n", encoding="utf-8")

        with pytest.raises(CSVParseError) as excinfo:
            GeoJSONConverter().read_rows(csv_path)

        assert "wrong number of fields" in str(excinfo.value)
        assert excinfo.value.row_number == 2
        assert excinfo.value.file_path == str(csv_path)

    def test_malformed_quoting(self, tmp_path):
        csv_path = tmp_path / "quotes.csv"
        csv_path.write_text(HEADER + '2023-01-01T00:00:00Z,"1.2.3.4"x,Springfield,IL,US,39.7817,-89.6501\n',
                            encoding="utf-8")

        with pytest.raises(CSVParseError) as excinfo:
            GeoJSONConverter().read_rows(csv_path)

        assert excinfo.value.row_number == 2

    def test_empty_file_with_header_expected(self, tmp_path):
        csv_path = tmp_path / "empty.csv"
        csv_path.write_text("", encoding="utf-8")

        with pytest.raises(CSVParseError) as excinfo:
            GeoJSONConverter().read_rows(csv_path)

        assert "header" in str(excinfo.value)

    def test_empty_file_without_header(self, tmp_path):
        csv_path = tmp_path / "empty.csv"
        csv_path.write_text("", encoding="utf-8")
        assert GeoJSONConverter(skip_header=False).read_rows(csv_path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileOperationError) as excinfo:
            GeoJSONConverter().read_rows(tmp_path / "missing.csv")

        assert "Error opening CSV file" in str(excinfo.value)
        assert excinfo.value.file_path.endswith("missing.csv")

    def test_undecodable_file(self, tmp_path):
        csv_path = tmp_path / "latin1.csv"
        csv_path.write_bytes(HEADER.encode() + "x,1.2.3.4,S\xe3o Paulo,SP,BR,-23.55,-46.63\n".encode("latin-1"))

        with pytest.raises(CSVParseError) as excinfo:
            GeoJSONConverter().read_rows(csv_path)

        assert "decode" in str(excinfo.value)

    def test_other_encoding(self, tmp_path):
        csv_path = tmp_path / "latin1.csv"
        csv_path.write_bytes(HEADER.encode() + "x,1.2.3.4,S\xe3o Paulo,SP,BR,-23.55,-46.63\n".encode("latin-1"))

        rows = GeoJSONConverter(encoding="latin-1").read_rows(csv_path)
        assert rows[0].fields[2] == "S\xe3o Paulo"

    def test_output_is_utf8_whatever_the_input_encoding(self, tmp_path):
        csv_path = tmp_path / "hosts.csv"
        csv_path.write_bytes(HEADER.encode() + "x,1.2.3.4,M\xfcnchen,BY,DE,48.137,11.575\n".encode("latin-1"))

        output_path = GeoJSONConverter(encoding="latin-1").convert_file(csv_path, tmp_path / "hosts.geojson")

        data = json.loads(output_path.read_bytes().decode("utf-8"))
        assert data["features"][0]["properties"]["City"] == "M\xfcnchen"

    def test_custom_delimiter(self, tmp_path):
        csv_path = tmp_path / "semi.csv"
        csv_path.write_text(SAMPLE_CSV.replace(",", ";"), encoding="utf-8")

        rows = GeoJSONConverter(delimiter=";").read_rows(csv_path)
        assert len(rows) == 3
        assert rows[2].fields[2] == "Sydney"


class TestParseCoordinate:
    """Tests for the lenient and strict coordinate policies."""

    @pytest.mark.parametrize("value,expected", [
        ("39.7817", 39.7817),
        ("-89.6501", -89.6501),
        ("0", 0.0),
        ("1e2", 100.0),
    ])
    def test_valid_values(self, value, expected):
        assert GeoJSONConverter().parse_coordinate(value, "latitude", 2) == expected

    @pytest.mark.parametrize("value", ["", "abc", "12,5", "nan", "inf", "-Infinity"])
    def test_lenient_defaults_to_zero(self, value, caplog):
        with caplog.at_level(logging.WARNING, logger="csv2geojson.converter"):
            result = GeoJSONConverter().parse_coordinate(value, "longitude", 7)

        assert result == 0.0
        assert "invalid longitude" in caplog.text

    @pytest.mark.parametrize("value", ["", "abc", "nan"])
    def test_strict_raises(self, value):
        converter = GeoJSONConverter(coordinate_policy="strict")

        with pytest.raises(CoordinateParseError) as excinfo:
            converter.parse_coordinate(value, "latitude", 4, "hosts.csv")

        error = excinfo.value
        assert error.field == "latitude"
        assert error.value == value
        assert error.row_number == 4
        assert error.file_path == "hosts.csv"


class TestRowMapping:
    """Tests for mapping rows to records and features."""

    def test_row_to_record(self):
        row = CsvRow(2, ["2023-01-01T00:00:00Z", "1.2.3.4", "Springfield", "IL", "US", "39.7817", "-89.6501"])
        record = GeoJSONConverter().row_to_record(row)

        assert record == IpLocationRecord(
            timestamp="2023-01-01T00:00:00Z",
            ip="1.2.3.4",
            city="Springfield",
            region="IL",
            country="US",
            latitude=39.7817,
            longitude=-89.6501,
        )

    def test_extra_columns_ignored(self):
        row = CsvRow(2, ["t", "1.2.3.4", "c", "r", "US", "1.5", "2.5", "AS15169", "extra"])
        record = GeoJSONConverter().row_to_record(row)
        assert (record.latitude, record.longitude) == (1.5, 2.5)

    def test_short_row(self):
        row = CsvRow(3, ["t", "1.2.3.4", "c", "r", "US"])

        with pytest.raises(CSVParseError) as excinfo:
            GeoJSONConverter().row_to_record(row, "hosts.csv")

        assert "expected at least 7" in str(excinfo.value)
        assert excinfo.value.row_number == 3

    def test_coordinates_are_longitude_first(self):
        record = IpLocationRecord(timestamp="t", ip="i", city="c", region="r", country="US",
                                  latitude=10.0, longitude=20.0)
        feature = GeoJSONConverter.record_to_feature(record)
        assert feature.geometry.coordinates == [20.0, 10.0]
        assert feature.geometry.longitude == 20.0
        assert feature.geometry.latitude == 10.0


class TestCollection:
    """Tests for building and serializing FeatureCollections."""

    def test_feature_per_row_in_order(self, converter, sample_csv):
        collection = converter.csv_to_collection(sample_csv)

        assert collection.type == "FeatureCollection"
        assert [f.properties.ip for f in collection.features] == ["1.2.3.4", "5.6.7.8", "9.10.11.12"]

    def test_example_feature(self, converter, sample_csv):
        data = json.loads(converter.serialize(converter.csv_to_collection(sample_csv)))
        assert data["features"][0] == EXPECTED_FIRST_FEATURE

    def test_key_order(self, converter, sample_csv):
        data = json.loads(converter.serialize(converter.csv_to_collection(sample_csv)))

        assert list(data) == ["type", "features"]
        feature = data["features"][0]
        assert list(feature) == ["type", "properties", "geometry"]
        assert list(feature["properties"]) == ["Timestamp", "IP", "City", "Region", "Country"]
        assert list(feature["geometry"]) == ["type", "coordinates"]

    def test_four_space_indent(self, converter, sample_csv):
        text = converter.serialize(converter.csv_to_collection(sample_csv))
        lines = text.splitlines()

        assert lines[0] == "{"
        assert lines[1] == '    "type": "FeatureCollection",'
        assert lines[2] == '    "features": ['
        assert lines[3] == "        {"
        assert lines[4] == '            "type": "Feature",'
        assert not text.endswith("\n")

    def test_custom_indent(self, sample_csv):
        converter = GeoJSONConverter(indent=2)
        text = converter.serialize(converter.csv_to_collection(sample_csv))
        assert text.splitlines()[1] == '  "type": "FeatureCollection",'

    def test_empty_collection(self):
        converter = GeoJSONConverter()
        data = json.loads(converter.serialize(converter.build_collection([])))
        assert data == {"type": "FeatureCollection", "features": []}

    def test_header_as_data_row(self, sample_csv):
        converter = GeoJSONConverter(skip_header=False)
        collection = converter.csv_to_collection(sample_csv)

        assert len(collection.features) == 4
        first = collection.features[0]
        assert first.properties.timestamp == "Timestamp"
        assert first.geometry.coordinates == [0.0, 0.0]

    def test_non_ascii_preserved(self, tmp_path):
        csv_path = tmp_path / "unicode.csv"
        csv_path.write_text(HEADER + "t,1.2.3.4,München,Bayern,DE,48.1351,11.582\n", encoding="utf-8")

        converter = GeoJSONConverter()
        text = converter.serialize(converter.csv_to_collection(csv_path))
        assert "München" in text


class TestOutputNaming:
    """Tests for output path selection."""

    def test_derived_name(self):
        assert GeoJSONConverter().output_path_for(Path("data/hosts.csv")) == Path("hosts.geojson")

    def test_derived_name_multiple_suffixes(self):
        assert GeoJSONConverter().output_path_for(Path("hosts.2023.csv")) == Path("hosts.2023.geojson")

    @pytest.mark.parametrize("name,expected", [
        (".csv", ".geojson"),
        ("hosts", "hosts.geojson"),
        (".hidden.csv", ".hidden.geojson"),
    ])
    def test_derived_name_dot_rules(self, name, expected):
        assert GeoJSONConverter().output_path_for(Path(name)) == Path(expected)

    def test_fixed_name(self):
        converter = GeoJSONConverter(output_naming="fixed")
        assert converter.output_path_for(Path("hosts.csv")) == Path("output.geojson")

    def test_fixed_custom_name(self, tmp_path):
        converter = GeoJSONConverter(output_naming="fixed", output_name="map.json", output_dir=tmp_path)
        assert converter.output_path_for(Path("hosts.csv")) == tmp_path / "map.json"

    def test_output_dir(self, tmp_path):
        converter = GeoJSONConverter(output_dir=tmp_path)
        assert converter.output_path_for(Path("hosts.csv")) == tmp_path / "hosts.geojson"


class TestConvertFile:
    """Tests for the full conversion pipeline."""

    def test_convert_file(self, converter, sample_csv, tmp_path):
        output_path = converter.convert_file(sample_csv)

        assert output_path == tmp_path / "out" / "hosts.geojson"
        data = json.loads(output_path.read_text(encoding="utf-8"))
        assert len(data["features"]) == 3
        assert data["features"][0] == EXPECTED_FIRST_FEATURE

    def test_explicit_output_path(self, converter, sample_csv, tmp_path):
        target = tmp_path / "nested" / "dir" / "custom.geojson"
        assert converter.convert_file(sample_csv, target) == target
        assert target.exists()

    def test_output_is_byte_identical_across_runs(self, converter, sample_csv):
        first = converter.convert_file(sample_csv).read_bytes()
        second = converter.convert_file(sample_csv).read_bytes()
        assert first == second

    def test_overwrites_existing_output(self, converter, sample_csv, tmp_path):
        target = tmp_path / "out" / "hosts.geojson"
        target.parent.mkdir()
        target.write_text("stale", encoding="utf-8")

        converter.convert_file(sample_csv)
        assert json.loads(target.read_text(encoding="utf-8"))["type"] == "FeatureCollection"

    def test_parse_failure_leaves_no_output(self, tmp_path):
        csv_path = tmp_path / "short.csv"
        csv_path.write_text("a,b,c\n1,2,3\n", encoding="utf-8")
        converter = GeoJSONConverter(output_dir=tmp_path / "out")

        with pytest.raises(CSVParseError):
            converter.convert_file(csv_path)

        assert not (tmp_path / "out" / "short.geojson").exists()

    def test_strict_failure_leaves_no_output(self, tmp_path):
        csv_path = tmp_path / "bad.csv"
        csv_path.write_text(HEADER + "t,1.2.3.4,c,r,US,north,-89.6501\n", encoding="utf-8")
        converter = GeoJSONConverter(output_dir=tmp_path, coordinate_policy="strict")

        with pytest.raises(CoordinateParseError) as excinfo:
            converter.convert_file(csv_path)

        assert excinfo.value.file_path == str(csv_path)
        assert not (tmp_path / "bad.geojson").exists()

    def test_unwritable_destination(self, sample_csv, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(FileOperationError) as excinfo:
            GeoJSONConverter().convert_file(sample_csv, blocker / "hosts.geojson")

        assert "Error creating GeoJSON file" in str(excinfo.value)


class TestConverterSettings:
    """Tests for converter construction."""

    def test_defaults(self):
        converter = GeoJSONConverter()
        assert converter.settings == ConverterSettings()

    def test_overrides_apply_on_top_of_settings(self):
        base = ConverterSettings(skip_header=False, indent=2)
        converter = GeoJSONConverter(base, output_naming="fixed")

        assert converter.settings.skip_header is False
        assert converter.settings.indent == 2
        assert converter.settings.output_naming == "fixed"

    def test_invalid_override(self):
        with pytest.raises(ConfigurationError) as excinfo:
            GeoJSONConverter(output_naming="random")

        assert "output_naming" in str(excinfo.value)
