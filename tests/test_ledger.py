"""
Payment ledger tests.

Verifies:
- Hashes are deterministic and sensitive to every input
- Entries chain to the previous entry's hash, starting from the genesis hash
- A payment is recorded at most once
- Tampering with a payment breaks verification
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from rentmate.exceptions import DuplicateResourceError
from rentmate.models import Payment, PaymentRecordStatus, PaymentType
from rentmate.services.ledger_service import (
    GENESIS_HASH,
    append_payment_record,
    compute_transaction_hash,
    verify_full_chain,
    verify_ledger_entry,
)

from conftest import T0


def _payment(store, amount="1800.00", lease_id=1, payer_id=2):
    return store.payments.add(
        Payment(
            lease_id=lease_id,
            payer_id=payer_id,
            amount=Decimal(amount),
            type=PaymentType.RENT,
            status=PaymentRecordStatus.COMPLETED,
            paid_at=T0,
            created_at=T0,
        )
    )


class TestComputeHash:

    def test_deterministic(self):
        first = compute_transaction_hash(1, 2, 3, Decimal("1800.00"), T0)
        second = compute_transaction_hash(1, 2, 3, Decimal("1800.00"), T0)
        assert first == second
        assert len(first) == 64

    def test_amount_scale_does_not_matter(self):
        assert compute_transaction_hash(1, 2, 3, Decimal("1800"), T0) == \
            compute_transaction_hash(1, 2, 3, Decimal("1800.00"), T0)

    def test_sensitive_to_inputs(self):
        base = compute_transaction_hash(1, 2, 3, Decimal("1800.00"), T0)
        assert compute_transaction_hash(9, 2, 3, Decimal("1800.00"), T0) != base
        assert compute_transaction_hash(1, 2, 3, Decimal("1800.01"), T0) != base
        assert compute_transaction_hash(1, 2, 3, Decimal("1800.00"), T0 + timedelta(seconds=1)) != base


class TestAppend:

    def test_first_entry_links_to_genesis(self, store):
        entry = append_payment_record(store, _payment(store), T0)
        assert entry.previous_hash == GENESIS_HASH

    def test_entries_chain(self, store):
        first = append_payment_record(store, _payment(store), T0)
        second = append_payment_record(store, _payment(store, "250.00"), T0 + timedelta(days=1))
        assert second.previous_hash == first.transaction_hash

    def test_payment_recorded_once(self, store):
        payment = _payment(store)
        append_payment_record(store, payment, T0)
        with pytest.raises(DuplicateResourceError):
            append_payment_record(store, payment, T0)


class TestVerify:

    def test_full_chain_passes(self, store):
        for amount in ("1800.00", "1800.00", "75.50"):
            append_payment_record(store, _payment(store, amount), T0)
        valid, _, checked = verify_full_chain(store)
        assert valid is True
        assert checked == 3

    def test_empty_chain(self, store):
        assert verify_full_chain(store) == (True, "Chain is empty (no entries)", 0)

    def test_verify_single_entry_by_payment(self, store):
        append_payment_record(store, _payment(store), T0)
        payment = _payment(store, "90.00")
        append_payment_record(store, payment, T0)
        valid, message = verify_ledger_entry(store, payment_id=payment.id)
        assert valid is True
        assert message == "Verification passed"

    def test_tampered_amount_detected(self, store):
        payment = _payment(store)
        entry = append_payment_record(store, payment, T0)
        payment.amount = Decimal("18.00")

        valid, message = verify_ledger_entry(store, ledger_id=entry.id)
        assert valid is False
        assert message.startswith("Hash mismatch")
        assert verify_full_chain(store)[0] is False

    def test_broken_link_detected(self, store):
        append_payment_record(store, _payment(store), T0)
        second = append_payment_record(store, _payment(store, "20.00"), T0)
        second.previous_hash = "f" * 64
        valid, message, checked = verify_full_chain(store)
        assert valid is False
        assert checked == 1

    def test_missing_entry(self, store):
        assert verify_ledger_entry(store, payment_id=404) == (False, "Ledger entry not found")
        assert verify_ledger_entry(store)[0] is False
