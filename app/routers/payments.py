# app/routers/payments.py
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from app.core.auth import require_customer
from app.database import get_session
from app.models.user import User
from app.repositories.address_repo import AddressRepository
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.payment import PaymentMethodRead, PaymentRequest, PaymentResponse
from app.services.order_service import OrderService
from app.services.payment_gateway import PaymentGateway, get_payment_gateway

router = APIRouter(prefix="/payments", tags=["Payments"])

service = OrderService(
    OrderRepository(),
    CartRepository(),
    ProductRepository(),
    AddressRepository(),
)

PAYMENT_METHODS = [
    PaymentMethodRead(
        id="credit_card",
        name="Credit Card",
        description="Visa, Mastercard, American Express",
        icon="credit-card",
    ),
    PaymentMethodRead(
        id="paypal",
        name="PayPal",
        description="Pay with your PayPal account",
        icon="paypal",
    ),
    PaymentMethodRead(
        id="apple_pay",
        name="Apple Pay",
        description="Pay with Touch ID or Face ID",
        icon="apple",
    ),
    PaymentMethodRead(
        id="google_pay",
        name="Google Pay",
        description="Pay with Google",
        icon="google",
    ),
]


@router.get("/methods", response_model=list[PaymentMethodRead])
def list_payment_methods():
    """
    Payment methods the checkout page can offer. Public endpoint.
    """
    return PAYMENT_METHODS


@router.post("/process", response_model=PaymentResponse)
def process_payment(
    payload: PaymentRequest,
    response: Response,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Confirm payment for one of the current user's pending orders.

    - 200 with success=true when the gateway approves.
    - 400 with success=false when it declines (order keeps status
      'pending', payment_status becomes 'failed').
    - 404 when the order is not the user's or was already processed.
    """
    result = service.process_payment(session, current_user.id, payload, gateway)
    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return result
