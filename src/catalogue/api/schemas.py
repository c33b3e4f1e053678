"""Pydantic request/response schemas for the Catalogue API."""

from pydantic import BaseModel, Field


class RegisterProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "P1005",
                    "name": "Orange Juice 1L",
                    "price": 2.49,
                    "quantity": 20,
                    "barcode": "012349",
                }
            ]
        }
    }

    product_id: str | None = Field(None, max_length=100)
    name: str = Field(..., max_length=255)
    price: float = Field(..., ge=0)
    quantity: int = Field(0, ge=0)
    barcode: str = Field(..., min_length=1, max_length=100)


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    id: str
    name: str
    price: float
    quantity: int
    barcode: str
