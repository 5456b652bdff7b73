"""Unit tests for date-time deserialization and body hydration."""

from datetime import UTC, date, datetime

import pytest
from pydantic import BaseModel
from pytest_mock import MockerFixture

from src.descriptions.schema import ObjectSchema, ScalarSchema, Schema
from src.request.hydration import DateTimeSerializer, ObjectHydrator, parse_temporal


def scalar(definition: dict) -> ScalarSchema:
    """Build a scalar schema."""
    schema = Schema.from_definition(definition)
    assert isinstance(schema, ScalarSchema)
    return schema


def obj(definition: dict) -> ObjectSchema:
    """Build an object schema."""
    schema = Schema.from_definition(definition)
    assert isinstance(schema, ObjectSchema)
    return schema


@pytest.mark.unit
class TestParseTemporal:
    """Test RFC 3339 date and date-time parsing."""

    def test_date_time_with_zone(self) -> None:
        """Test parsing a UTC timestamp."""
        assert parse_temporal("2016-01-01T10:30:00Z", "date-time") == datetime(
            2016, 1, 1, 10, 30, tzinfo=UTC
        )

    def test_date(self) -> None:
        """Test parsing a calendar date."""
        assert parse_temporal("2016-01-01", "date") == date(2016, 1, 1)

    def test_invalid(self) -> None:
        """Test that invalid strings raise ValueError."""
        with pytest.raises(ValueError, match="not an RFC 3339 date-time"):
            parse_temporal("yesterday", "date-time")

    def test_lower_case_separators(self) -> None:
        """Test that lower-case T and Z are accepted."""
        assert parse_temporal("2016-01-01t10:30:00z", "date-time") == datetime(
            2016, 1, 1, 10, 30, tzinfo=UTC
        )

    @pytest.mark.parametrize(
        "value",
        ["2016-01-01", "20160101T0000", "2016-01-01T10:30:00", "2016-01-01T10:30Z"],
    )
    def test_date_time_requires_time_and_offset(self, value: str) -> None:
        """Test that ISO forms looser than RFC 3339 are rejected."""
        with pytest.raises(ValueError, match="not an RFC 3339 date-time"):
            parse_temporal(value, "date-time")

    @pytest.mark.parametrize("value", ["20160101", "2016-W01-1"])
    def test_date_requires_full_date(self, value: str) -> None:
        """Test that compact and week dates are rejected."""
        with pytest.raises(ValueError, match="not an RFC 3339 full-date"):
            parse_temporal(value, "date")


@pytest.mark.unit
class TestDateTimeSerializer:
    """Test lenient temporal deserialization."""

    def test_deserializes_date_time(self) -> None:
        """Test that a date-time string becomes a datetime."""
        value = DateTimeSerializer().deserialize(
            "2016-01-01T00:00:00+02:00", scalar({"type": "string", "format": "date-time"})
        )

        assert isinstance(value, datetime)
        assert value.utcoffset() is not None

    def test_deserializes_date(self) -> None:
        """Test that a date string becomes a date."""
        value = DateTimeSerializer().deserialize(
            "2016-02-29", scalar({"type": "string", "format": "date"})
        )

        assert value == date(2016, 2, 29)

    @pytest.mark.parametrize("value", ["not a date", 42, None])
    def test_leaves_other_values(self, value: object) -> None:
        """Test that unparseable and non-string values are returned as is."""
        schema = scalar({"type": "string", "format": "date-time"})

        assert DateTimeSerializer().deserialize(value, schema) == value


@pytest.mark.unit
class TestObjectHydrator:
    """Test hydration of JSON bodies into models."""

    @pytest.fixture
    def pet_schema(self) -> ObjectSchema:
        """Provide a nested pet schema.

        Returns:
            ObjectSchema: Pet with an owner object, tag list and birth date.
        """
        return obj(
            {
                "type": "object",
                "title": "Pet",
                "properties": {
                    "name": {"type": "string"},
                    "born": {"type": "string", "format": "date-time"},
                    "owner": {"type": "object", "properties": {"name": {"type": "string"}}},
                    "tags": {
                        "type": "array",
                        "items": {"type": "object", "properties": {"label": {"type": "string"}}},
                    },
                    "first-name": {"type": "string"},
                    "json": {"type": "string"},
                },
            }
        )

    def test_hydrates_nested_objects(self, pet_schema: ObjectSchema) -> None:
        """Test that objects, arrays and dates are hydrated recursively."""
        pet = ObjectHydrator().hydrate(
            {
                "name": "Rex",
                "born": "2016-01-01T00:00:00Z",
                "owner": {"name": "Ann"},
                "tags": [{"label": "good"}],
            },
            pet_schema,
        )

        assert isinstance(pet, BaseModel)
        assert type(pet).__name__ == "Pet"
        assert pet.name == "Rex"
        assert pet.born == datetime(2016, 1, 1, tzinfo=UTC)
        assert isinstance(pet.owner, BaseModel)
        assert pet.owner.name == "Ann"
        assert pet.tags[0].label == "good"

    def test_keeps_undeclared_and_unusable_names(self, pet_schema: ObjectSchema) -> None:
        """Test that extra and non-identifier properties are kept as extras."""
        pet = ObjectHydrator().hydrate(
            {"name": "Rex", "first-name": "R", "json": "j", "color": "brown"}, pet_schema
        )

        assert pet.model_extra == {"first-name": "R", "json": "j", "color": "brown"}
        assert pet.model_dump()["color"] == "brown"

    def test_absent_properties_are_none(self, pet_schema: ObjectSchema) -> None:
        """Test that declared but absent properties default to None."""
        pet = ObjectHydrator().hydrate({}, pet_schema)

        assert pet.name is None
        assert pet.owner is None

    def test_model_is_reused(self, pet_schema: ObjectSchema) -> None:
        """Test that one model class is generated per schema."""
        hydrator = ObjectHydrator()

        first = hydrator.hydrate({"name": "a"}, pet_schema)
        second = hydrator.hydrate({"name": "b"}, pet_schema)

        assert type(first) is type(second)

    def test_mismatched_data_passes_through(self, pet_schema: ObjectSchema) -> None:
        """Test that data not matching its schema kind is returned unchanged."""
        hydrator = ObjectHydrator()

        assert hydrator.hydrate("text", pet_schema) == "text"
        assert hydrator.hydrate({"tags": "none"}, pet_schema).tags == "none"

    def test_uses_given_date_time_serializer(
        self, mocker: MockerFixture, pet_schema: ObjectSchema
    ) -> None:
        """Test that temporal properties go through the injected serializer."""
        serializer = mocker.Mock(spec=DateTimeSerializer)
        serializer.deserialize.return_value = "converted"

        pet = ObjectHydrator(serializer).hydrate({"born": "2016-01-01"}, pet_schema)

        assert pet.born == "converted"
        serializer.deserialize.assert_called_once_with(
            "2016-01-01", pet_schema.properties["born"]
        )

    def test_untitled_schema_gets_generated_name(self) -> None:
        """Test the generated model name of untitled schemas."""
        model = ObjectHydrator().model_for(obj({"type": "object", "properties": {}}))

        assert model.__name__ == "Body1"
