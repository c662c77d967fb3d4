"""
Pydantic schemas for property requests and responses.
Handles multipart listing forms, amenity flag parsing and listing output.
"""

from fastapi import Form
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any

from dealer_listings.models.property import AMENITY_FIELDS


class PropertyForm(BaseModel):
    """
    Listing fields submitted with add/update requests.

    Amenity flags are parsed as booleans (true/false, 1/0, yes/no, on/off);
    anything else is rejected with a validation error.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Listing name", examples=["Lakeview Villa"])
    location: str = Field(..., min_length=1, max_length=255, description="Location/address", examples=["Pune"])
    bedrooms: int = Field(..., ge=0, le=100, description="Number of bedrooms", examples=[2])
    bathrooms: int = Field(..., ge=0, le=100, description="Number of bathrooms", examples=[1])
    kitchen: bool = Field(False, description="Has kitchen")
    ac: bool = Field(False, description="Has air conditioning")
    wifi: bool = Field(False, description="Has wifi")
    parking: bool = Field(False, description="Has parking")
    food: bool = Field(False, description="Food included")

    @field_validator("name", "location")
    @classmethod
    def validate_text(cls, v):
        """Validate and clean free-text fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @classmethod
    def as_form(
        cls,
        name: str = Form(...),
        location: str = Form(...),
        bedrooms: int = Form(...),
        bathrooms: int = Form(...),
        kitchen: bool = Form(False),
        ac: bool = Form(False),
        wifi: bool = Form(False),
        parking: bool = Form(False),
        food: bool = Form(False)
    ) -> "PropertyForm":
        """Build the schema from multipart form fields (FastAPI dependency)."""
        return cls(
            name=name,
            location=location,
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            kitchen=kitchen,
            ac=ac,
            wifi=wifi,
            parking=parking,
            food=food
        )

    def to_record(self) -> Dict[str, Any]:
        """Column values for the properties table, flags as 0/1."""
        record = self.model_dump()
        for field in AMENITY_FIELDS:
            record[field] = int(record[field])
        return record


class PropertyResponse(BaseModel):
    """Schema for a property in API responses."""

    id: int = Field(..., description="Property ID")
    dealer_id: int = Field(..., description="Owning dealer ID")
    name: str = Field(..., description="Listing name")
    location: str = Field(..., description="Location/address")
    image: Optional[str] = Field(None, description="Absolute image URL, null when no image was uploaded")
    bedrooms: int = Field(..., description="Number of bedrooms")
    bathrooms: int = Field(..., description="Number of bathrooms")
    kitchen: int = Field(..., description="Has kitchen (0/1)")
    ac: int = Field(..., description="Has air conditioning (0/1)")
    wifi: int = Field(..., description="Has wifi (0/1)")
    parking: int = Field(..., description="Has parking (0/1)")
    food: int = Field(..., description="Food included (0/1)")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., description="Confirmation message")


class PropertyCreatedResponse(MessageResponse):
    """Confirmation returned after adding a property."""

    id: int = Field(..., description="ID of the created property")
