"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from catalogue.api.schemas import ProductIdResponse, ProductResponse, RegisterProductRequest
from catalogue.product.registration import RegisterProduct, find_by_barcode

product_router = APIRouter(prefix="/api/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def register_product(body: RegisterProductRequest) -> ProductIdResponse:
    command = RegisterProduct(
        product_id=body.product_id,
        name=body.name,
        price=body.price,
        quantity=body.quantity,
        barcode=body.barcode,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/barcode/{barcode}", response_model=ProductResponse)
async def get_by_barcode(barcode: str) -> ProductResponse:
    product = find_by_barcode(barcode)
    if product is None:
        raise HTTPException(status_code=404, detail=f"No product with barcode {barcode}")
    return ProductResponse(**product.to_payload())
