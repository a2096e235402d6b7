# fifo_inventory/core/models/product.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, condecimal, ConfigDict
from decimal import Decimal

class Product(BaseModel):
    """
    Represents a stocked product.
    current_stock and average_cost are derived from the product's lots and are
    only ever written by the aggregate recalculator.
    """
    id: str = Field(..., description="Unique identifier for the product")
    name: str = Field(..., description="Display name")
    sku: str = Field(..., description="Unique stock keeping unit code")
    description: str = Field(default="", description="Free text description")
    units: Optional[str] = Field(None, description="Unit of measure (e.g., kg, box)")

    # --- Derived Fields
    current_stock: condecimal(ge=0) = Field(default=Decimal(0), description="Sum of remaining quantities of the product's lots")
    average_cost: condecimal(ge=0) = Field(default=Decimal(0), description="Quantity-weighted unit price of the remaining stock")

    created_at: datetime = Field(..., description="When the product was created")
    updated_at: datetime = Field(..., description="When the product or its aggregates last changed")

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )
