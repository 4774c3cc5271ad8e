from fastapi import APIRouter, Depends

from accessgate.api.deps import get_access_resolver, get_payment_ledger
from accessgate.paywall.access import AccessResolver
from accessgate.paywall.models import AccessDecision
from accessgate.payments.ledger import PaymentLedger
from accessgate.payments.models import PaymentRecord
from accessgate.schemas.access import ResolveAccessIn


router = APIRouter(tags=["access"])


@router.post("/access/resolve", response_model=AccessDecision)
def resolve_access(
    body: ResolveAccessIn,
    resolver: AccessResolver = Depends(get_access_resolver),
) -> AccessDecision:
    """granted=False means a definitive denial; infrastructure failures return 5xx."""
    return resolver.resolve_access(body.content_id, body.identity)


@router.get("/users/{address}/purchases", response_model=list[PaymentRecord])
def list_purchases(
    address: str,
    ledger: PaymentLedger = Depends(get_payment_ledger),
) -> list[PaymentRecord]:
    return ledger.list_payments(address)
