from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import InvalidFormat, MissingField

# Pydantic error types that mean "the device did not send this field"
MISSING_ERROR_TYPES = {"missing", "string_too_short"}


class DeviceRequest(BaseModel):
    """A taxi request sent by a device. Field names on the wire are serial/location/type."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)

    device_id: str = Field(alias="serial", min_length=1)
    location: str = Field(min_length=1)
    request_type: str = Field(alias="type", min_length=1)

    @classmethod
    def from_body(cls, body: Any) -> "DeviceRequest":
        """
        Build a DeviceRequest from a decoded JSON body.

        Raises:
            MissingField: If serial, location or type is absent, null or empty
            InvalidFormat: If a field has a type that cannot be read as a string
        """
        if not isinstance(body, dict):
            raise MissingField(f"Request body is {type(body).__name__}, not an object")
        try:
            return cls.model_validate(body)
        except ValidationError as e:
            errors = e.errors()
            missing = [
                err["loc"][0] for err in errors
                if err["type"] in MISSING_ERROR_TYPES or err.get("input") is None
            ]
            if missing:
                raise MissingField(f"Missing fields: {missing}")
            raise InvalidFormat(f"Invalid request fields: {errors}", detail="Invalid request body")


class NotificationPayload(BaseModel):
    """Push notification derived from a DeviceRequest"""
    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    data: Dict[str, str]

    def to_message(self, topic: str) -> Dict[str, Any]:
        """Render as an FCM HTTP v1 ``message`` object addressed to a topic."""
        return {
            "topic": topic,
            "notification": {"title": self.title, "body": self.body},
            "data": dict(self.data),
        }
