#!/usr/bin/env python3
"""
Print the access decision for one content item and one address.
Run from the project root: python -m scripts.check_access <content_id> <address>
or: PYTHONPATH=. python scripts/check_access.py <content_id> <address>
"""
import os
import sys

# project root on PYTHONPATH
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from accessgate.chain.rpc import JsonRpcChainReader
from accessgate.core.errors import AccessGateError
from accessgate.paywall.access import AccessResolver
from accessgate.payments.ledger import PaymentLedger
from accessgate.storage.kv import build_store
from accessgate.subscriptions.service import SubscriptionLedger


def main() -> int:
    if len(sys.argv) != 3:
        print("usage: check_access.py <content_id> <address>")
        return 2
    content_id, address = sys.argv[1], sys.argv[2]
    store = build_store()
    chain = JsonRpcChainReader()
    resolver = AccessResolver(chain, SubscriptionLedger(store), PaymentLedger(store))
    try:
        decision = resolver.resolve_access(content_id, address)
    except AccessGateError as e:
        print(f"undetermined: {e.kind.value}: {e}")
        return 1
    finally:
        chain.close()
    if decision.granted:
        print(f"granted ({decision.reason.value}); descriptor at {decision.storage_pointer}")
    else:
        opts = decision.payment_options
        print(f"denied; pay {opts.price_display} to {opts.pay_to}")
        if opts.subscription_fee:
            print(f"  or subscribe for {opts.subscription_fee} USDC/month")
    return 0


if __name__ == "__main__":
    sys.exit(main())
