"""
Service wiring for the HTTP layer.
One chain reader and one store per process; routes receive services through
Depends so tests can swap them via app.dependency_overrides.
"""
from functools import lru_cache

from fastapi import Depends

from accessgate.chain.reader import ChainReader
from accessgate.chain.rpc import JsonRpcChainReader
from accessgate.content.metadata import MetadataResolver
from accessgate.paywall.access import AccessResolver
from accessgate.payments.ledger import PaymentLedger
from accessgate.payments.verifier import PaymentVerifier
from accessgate.storage.kv import KVStore, build_store
from accessgate.subscriptions.service import SubscriptionLedger


@lru_cache
def get_store() -> KVStore:
    return build_store()


@lru_cache
def get_chain_reader() -> ChainReader:
    return JsonRpcChainReader()


@lru_cache
def get_metadata_resolver() -> MetadataResolver:
    return MetadataResolver()


def get_payment_verifier(chain: ChainReader = Depends(get_chain_reader)) -> PaymentVerifier:
    return PaymentVerifier(chain)


def get_payment_ledger(store: KVStore = Depends(get_store)) -> PaymentLedger:
    return PaymentLedger(store)


def get_subscription_ledger(store: KVStore = Depends(get_store)) -> SubscriptionLedger:
    return SubscriptionLedger(store)


def get_access_resolver(
    chain: ChainReader = Depends(get_chain_reader),
    subscriptions: SubscriptionLedger = Depends(get_subscription_ledger),
    payments: PaymentLedger = Depends(get_payment_ledger),
) -> AccessResolver:
    return AccessResolver(chain, subscriptions, payments)
