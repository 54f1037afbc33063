"""
Pydantic Models - boundary records consumed by the cart core.

- Coordinates: a latitude/longitude pair from the location collaborator or
  a restaurant record
- Restaurant: the restaurant record handed in at add-item / switch time
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Coordinates(BaseModel):
    """A point on the globe, in degrees."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    @model_validator(mode="before")
    @classmethod
    def accept_short_keys(cls, data: Any) -> Any:
        # Restaurant documents store {lat, lng}; the location service uses long names
        if isinstance(data, dict) and "latitude" not in data and "lat" in data:
            data = {**data, "latitude": data["lat"], "longitude": data.get("lng")}
        return data

    def to_dict(self) -> dict:
        """Serialize in the restaurant-document shape."""
        return {"lat": self.latitude, "lng": self.longitude}


class Restaurant(BaseModel):
    """Restaurant record as delivered by the data service."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    name: str
    image: Optional[str] = None
    location: Optional[Coordinates] = None
    estimated_delivery_time: Optional[int] = Field(default=None, ge=0, alias="estimatedDeliveryTime")
