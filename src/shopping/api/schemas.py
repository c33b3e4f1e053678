"""Pydantic request/response schemas for the scan session API.

These are external contracts — separate from the engine's frozen
snapshots, which they are built from.
"""

from typing import Literal

from pydantic import BaseModel, Field

from shopping.session import SessionView


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class ScanRequest(BaseModel):
    barcode: str = Field(..., min_length=1, max_length=100)
    source: Literal["wedge", "camera"] = "wedge"

    model_config = {"json_schema_extra": {"examples": [{"barcode": "012345", "source": "wedge"}]}}


class KeysRequest(BaseModel):
    keys: list[str] = Field(..., min_length=1)

    model_config = {"json_schema_extra": {"examples": [{"keys": ["0", "1", "2", "3", "4", "5", "Enter"]}]}}


class ModeRequest(BaseModel):
    mode: Literal["wedge", "camera"]


class CameraDecodeRequest(BaseModel):
    text: str = Field(..., max_length=100)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class CartLineResponse(BaseModel):
    line_id: str
    product_id: str
    name: str
    barcode: str
    unit_price: float
    quantity: int
    subtotal: float


class CartResponse(BaseModel):
    lines: list[CartLineResponse]
    total: float
    item_count: int
    line_count: int


class FeedbackResponse(BaseModel):
    kind: str
    text: str


class ConfirmationResponse(BaseModel):
    intent: str
    title: str
    message: str
    target_line_id: str | None = None


class SessionResponse(BaseModel):
    mode: str
    camera_error: str | None = None
    cart: CartResponse
    feedback: FeedbackResponse
    pending_confirmation: ConfirmationResponse | None = None

    @classmethod
    def from_view(cls, view: SessionView) -> "SessionResponse":
        pending = view.pending_confirmation
        return cls(
            mode=view.mode.value,
            camera_error=view.camera_error,
            cart=CartResponse(
                lines=[
                    CartLineResponse(
                        line_id=line.line_id,
                        product_id=line.product_id,
                        name=line.name,
                        barcode=line.barcode,
                        unit_price=float(line.unit_price),
                        quantity=line.quantity,
                        subtotal=float(line.subtotal),
                    )
                    for line in view.cart.lines
                ],
                total=float(view.cart.total),
                item_count=view.cart.item_count,
                line_count=view.cart.line_count,
            ),
            feedback=FeedbackResponse(kind=view.feedback.kind.value, text=view.feedback.text),
            pending_confirmation=(
                ConfirmationResponse(
                    intent=pending.intent.value,
                    title=pending.title,
                    message=pending.message,
                    target_line_id=pending.target_line_id,
                )
                if pending
                else None
            ),
        )
