from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from accessgate.api.deps import get_payment_ledger, get_payment_verifier
from accessgate.api.errors import status_for
from accessgate.payments.ledger import PaymentLedger
from accessgate.payments.models import PaymentRecord, PaymentVerification
from accessgate.payments.verifier import PaymentVerifier
from accessgate.schemas.payments import CheckPaymentIn, CheckPaymentOut, RecordPaymentIn, VerifyPaymentIn


router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/verify", response_model=PaymentVerification)
def verify_payment(
    body: VerifyPaymentIn,
    verifier: PaymentVerifier = Depends(get_payment_verifier),
):
    """Check a claimed transaction on-chain. Does not record anything."""
    result = verifier.verify(
        body.tx_hash,
        body.expected_recipient,
        body.expected_amount,
        body.expected_sender,
    )
    if not result.verified:
        return JSONResponse(status_code=status_for(result.failure), content=result.model_dump(mode="json"))
    return result


@router.post("/record", response_model=PaymentRecord)
def record_payment(
    body: RecordPaymentIn,
    ledger: PaymentLedger = Depends(get_payment_ledger),
) -> PaymentRecord:
    return ledger.record_payment(
        body.content_id,
        body.payer,
        body.tx_hash,
        body.amount,
        body.timestamp,
    )


@router.post("/check", response_model=CheckPaymentOut)
def check_payment(
    body: CheckPaymentIn,
    ledger: PaymentLedger = Depends(get_payment_ledger),
) -> CheckPaymentOut:
    record = ledger.get_payment(body.content_id, body.payer)
    if record is None:
        return CheckPaymentOut(has_paid=False)
    return CheckPaymentOut(
        has_paid=True,
        amount=record.amount,
        timestamp=record.timestamp,
        tx_hash=record.tx_hash,
    )
