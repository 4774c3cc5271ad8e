"""
Access decision for gated content (internal library).
Decision (AccessResolver) and payment recording are separate steps; a denial
carries PaymentOptions so the caller can initiate payment.
"""
from accessgate.paywall.access import AccessResolver
from accessgate.paywall.models import AccessDecision, AccessReason, PaymentOptions

__all__ = [
    "AccessDecision",
    "AccessReason",
    "AccessResolver",
    "PaymentOptions",
]
