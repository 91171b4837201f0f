# services/ledger_service.py
"""
Payment Ledger Service - blockchain-like immutable payment records.

When a payment settles (acceptance payment, rent installment, logged payment):
1. Compute SHA-256 hash from payment_id + lease_id + payer_id + amount + timestamp
2. Store record with reference to previous record's hash (chain)
3. Ledger records are append-only; no update/delete

Verification: recompute hash and compare with stored hash; optionally verify chain.
"""
import hashlib
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from rentmate.clock import SystemClock
from rentmate.exceptions import DuplicateResourceError
from rentmate.models import Payment, PaymentLedger
from rentmate.repositories import Store


# Genesis block: no previous record
GENESIS_HASH = "0"

_CENTS = Decimal("0.01")


def _normalize_amount(amount: Decimal) -> str:
     """Normalize amount to canonical string for hashing (2 decimal places, exact)."""
     return str(Decimal(amount).quantize(_CENTS))


def _normalize_timestamp(ts: datetime) -> str:
     """Normalize timestamp to ISO format for deterministic hashing."""
     return ts.isoformat()


def compute_transaction_hash(
     payment_id: int,
     lease_id: int,
     payer_id: int,
     amount: Decimal,
     timestamp: datetime
) -> str:
     """
     Compute SHA-256 hash for a payment record.

     Input string: payment_id|lease_id|payer_id|amount|timestamp (canonical format).
     Returns 64-char hex string.
     """
     payload = "|".join([
          str(payment_id),
          str(lease_id),
          str(payer_id),
          _normalize_amount(amount),
          _normalize_timestamp(timestamp)
     ])
     return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def get_previous_hash(store: Store) -> str:
     """Get the transaction_hash of the most recent ledger entry, or GENESIS_HASH if empty."""
     last = store.ledger.last()
     if last is None:
          return GENESIS_HASH
     return last.transaction_hash


def find_entry_for_payment(store: Store, payment_id: int) -> Optional[PaymentLedger]:
     return store.ledger.first(payment_id=payment_id)


def append_payment_record(
     store: Store,
     payment: Payment,
     timestamp: Optional[datetime] = None
) -> PaymentLedger:
     """
     Append an immutable payment record to the ledger.

     - Computes transaction_hash from the payment's identity, amount and timestamp
     - Sets previous_hash to the last record's transaction_hash (or "0")
     - Does NOT update or delete existing records (immutability)

     Raises:
          DuplicateResourceError: If the payment already has a ledger entry (double record).
     """
     if timestamp is None:
          timestamp = SystemClock().now()

     if find_entry_for_payment(store, payment.id) is not None:
          raise DuplicateResourceError(f"Ledger entry already exists for payment_id={payment.id}")

     transaction_hash = compute_transaction_hash(
          payment.id, payment.lease_id, payment.payer_id, payment.amount, timestamp
     )
     entry = PaymentLedger(
          payment_id=payment.id,
          transaction_hash=transaction_hash,
          previous_hash=get_previous_hash(store),
          timestamp=timestamp
     )
     return store.ledger.add(entry)


def _recompute(store: Store, entry: PaymentLedger) -> Optional[str]:
     payment = store.payments.get(entry.payment_id)
     if payment is None:
          return None
     return compute_transaction_hash(
          entry.payment_id,
          payment.lease_id,
          payment.payer_id,
          payment.amount,
          entry.timestamp
     )


def verify_ledger_entry(
     store: Store,
     ledger_id: Optional[int] = None,
     payment_id: Optional[int] = None
) -> Tuple[bool, str]:
     """
     Verify a ledger entry by recomputing the hash and comparing.

     Pass either ledger_id or payment_id to identify the entry.

     Returns:
          (success: bool, message: str)
          - (True, "Verification passed") if hash matches
          - (False, reason) if hash mismatch, missing record, or chain broken
     """
     if ledger_id is not None:
          entry = store.ledger.get(ledger_id)
     elif payment_id is not None:
          entry = find_entry_for_payment(store, payment_id)
     else:
          return False, "Must provide ledger_id or payment_id"

     if entry is None:
          return False, "Ledger entry not found"

     computed = _recompute(store, entry)
     if computed is None:
          return False, "Payment not found"
     if computed != entry.transaction_hash:
          return False, f"Hash mismatch: stored={entry.transaction_hash[:16]}..., computed={computed[:16]}..."

     # previous_hash should match previous record's transaction_hash
     if entry.previous_hash != GENESIS_HASH:
          prev_entry = store.ledger.last(lambda e: e.id < entry.id)
          if prev_entry is None:
               return False, "Previous chain link not found"
          if prev_entry.transaction_hash != entry.previous_hash:
               return False, "Chain broken: previous_hash does not match previous record"

     return True, "Verification passed"


def verify_full_chain(store: Store) -> Tuple[bool, str, int]:
     """
     Verify the entire ledger chain from first to last entry.

     Returns:
          (all_valid: bool, message: str, entries_checked: int)
     """
     entries = store.ledger.list()
     if not entries:
          return True, "Chain is empty (no entries)", 0

     prev_hash = GENESIS_HASH
     checked = 0

     for entry in entries:
          if entry.previous_hash != prev_hash:
               return False, f"Chain broken at id={entry.id}: previous_hash mismatch", checked
          computed = _recompute(store, entry)
          if computed is None:
               return False, f"Payment not found for ledger id={entry.id}", checked
          if computed != entry.transaction_hash:
               return False, f"Hash mismatch at ledger id={entry.id}", checked
          prev_hash = entry.transaction_hash
          checked += 1

     return True, "Full chain verification passed", checked
