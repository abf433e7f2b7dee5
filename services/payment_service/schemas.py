from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from .models import PaymentStatus

class PaymentResponse(BaseModel):
    id: str
    order_id: str
    amount: Decimal
    status: PaymentStatus
    transaction_id: str
    created_at: datetime

    class Config:
        from_attributes = True
