from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketpoint.api.deps import get_current_email, require_path_owner
from ticketpoint.db.session import get_db
from ticketpoint.schemas.payment import CheckoutRequest, CheckoutSessionOut, PaymentConfirm, PaymentConfirmOut, TransactionOut
from ticketpoint.services import payments
from ticketpoint.services.payment_gateway import StripeGateway, get_payment_gateway

router = APIRouter()

@router.post("/create-checkout-session", response_model=CheckoutSessionOut)
def create_checkout_session(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    email: str = Depends(get_current_email),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    url = payments.start_checkout(db, gateway, payload.booking_id, email)
    return {"url": url}

@router.post("/payment-success", response_model=PaymentConfirmOut)
def payment_success(payload: PaymentConfirm, db: Session = Depends(get_db), gateway: StripeGateway = Depends(get_payment_gateway)):
    """Reconcile a checkout session. Replaying the same session id is a no-op."""
    transaction, already = payments.confirm_payment(db, gateway, payload.session_id)
    return {"already_processed": already, "transaction": transaction}

@router.get("/transactions/{email}", response_model=list[TransactionOut])
def transactions(db: Session = Depends(get_db), caller: str = Depends(require_path_owner)):
    return payments.transactions_for_user(db, caller)
