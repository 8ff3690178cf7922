# sales/tests/test_order_numbering.py

import threading
import unittest
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import close_old_connections, connection
from django.db.models import F
from django.test import TestCase, TransactionTestCase
from django.test.utils import CaptureQueriesContext

from businesses.models import Business
from sales.models import OrderSequence
from sales.services.exceptions import SequenceExhaustionError
from sales.services.order_numbering import (
    MAX_ORDER_NUMBER,
    NO_SEQUENCE_MESSAGE,
    configure_order_sequence,
    format_order_number,
    peek_next_order_number,
    reserve_next_order_number,
)


class FormatOrderNumberTests(TestCase):
    def test_zero_padded_to_six_digits(self):
        self.assertEqual(format_order_number("", 1), "000001")
        self.assertEqual(format_order_number("A-", 42), "A-000042")
        self.assertEqual(format_order_number(None, 999999), "999999")


class ReserveOrderNumberTests(TestCase):
    """
    GUARANTEES:
    - Numbers increase by one per reservation and are never reused
    - Sequences are independent per business
    - A missing or exhausted sequence fails loudly
    """

    def setUp(self):
        self.business = Business.objects.create(name="Corner Cafe")
        self.seq = OrderSequence.objects.create(business=self.business, prefix="CC-")

    def test_sequential_numbers(self):
        numbers = [reserve_next_order_number(business_id=self.business.id) for _ in range(3)]

        self.assertEqual(numbers, ["CC-000001", "CC-000002", "CC-000003"])
        self.seq.refresh_from_db()
        self.assertEqual(self.seq.current_number, 3)

    def test_sequences_are_per_business(self):
        other = Business.objects.create(name="Food Truck")
        OrderSequence.objects.create(business=other)

        reserve_next_order_number(business_id=self.business.id)
        self.assertEqual(reserve_next_order_number(business_id=other.id), "000001")

    def test_missing_sequence_raises_with_admin_message(self):
        orphan = Business.objects.create(name="No Sequence")

        with self.assertRaises(SequenceExhaustionError) as ctx:
            reserve_next_order_number(business_id=orphan.id)
        self.assertEqual(str(ctx.exception), NO_SEQUENCE_MESSAGE)

    def test_exhausted_sequence_raises_and_keeps_counter(self):
        self.seq.current_number = MAX_ORDER_NUMBER
        self.seq.save(update_fields=["current_number"])

        with self.assertRaises(SequenceExhaustionError):
            reserve_next_order_number(business_id=self.business.id)

        self.seq.refresh_from_db()
        self.assertEqual(self.seq.current_number, MAX_ORDER_NUMBER)

    def test_peek_does_not_reserve(self):
        self.assertEqual(peek_next_order_number(business_id=self.business.id), "CC-000001")
        self.assertEqual(peek_next_order_number(business_id=self.business.id), "CC-000001")
        self.assertEqual(reserve_next_order_number(business_id=self.business.id), "CC-000001")

    def test_increment_is_applied_by_the_database(self):
        stale = OrderSequence.objects.get(pk=self.seq.pk)

        self.assertEqual(reserve_next_order_number(business_id=self.business.id), "CC-000001")
        # another terminal takes numbers 2..6 in between
        OrderSequence.objects.filter(pk=self.seq.pk).update(current_number=F("current_number") + 5)
        self.assertEqual(reserve_next_order_number(business_id=self.business.id), "CC-000007")

        self.assertEqual(stale.current_number, 0)

    def test_reservation_is_a_single_increment_update(self):
        with CaptureQueriesContext(connection) as ctx:
            reserve_next_order_number(business_id=self.business.id)

        sequence_sql = [
            q["sql"] for q in ctx.captured_queries if "sales_ordersequence" in q["sql"]
        ]
        self.assertTrue(sequence_sql[0].startswith("UPDATE"))
        self.assertRegex(
            sequence_sql[0],
            r'"current_number" = \("sales_ordersequence"\."current_number" \+ ',
        )
        self.assertEqual(sum(sql.startswith("UPDATE") for sql in sequence_sql), 1)


class ConfigureOrderSequenceTests(TestCase):
    def setUp(self):
        self.business = Business.objects.create(name="Bakery")

    def test_creates_sequence(self):
        seq = configure_order_sequence(business=self.business, prefix="B-", start_at=100)

        self.assertEqual(seq.current_number, 100)
        self.assertEqual(reserve_next_order_number(business_id=self.business.id), "B-000101")

    def test_never_moves_backwards(self):
        configure_order_sequence(business=self.business, start_at=50)

        with self.assertRaises(ValueError):
            configure_order_sequence(business=self.business, start_at=10)

    def test_changes_prefix_only(self):
        configure_order_sequence(business=self.business, start_at=5)
        seq = configure_order_sequence(business=self.business, prefix="N-")

        self.assertEqual((seq.prefix, seq.current_number), ("N-", 5))

    def test_command_configures_sequence(self):
        out = StringIO()
        call_command(
            "configure_order_sequence", str(self.business.id),
            "--prefix", "B-", "--start-at", "9", stdout=out,
        )

        self.assertIn("B-000010", out.getvalue())

    def test_command_refuses_to_move_backwards(self):
        configure_order_sequence(business=self.business, start_at=20)

        with self.assertRaises(CommandError):
            call_command("configure_order_sequence", str(self.business.id), "--start-at", "3")


@unittest.skipUnless(connection.vendor == "postgresql", "needs row-level locking")
class ConcurrentReservationTests(TransactionTestCase):
    def setUp(self):
        self.business = Business.objects.create(name="Busy Counter")
        OrderSequence.objects.create(business=self.business)

    def test_concurrent_reservations_are_unique(self):
        results = []
        lock = threading.Lock()

        def worker():
            try:
                for _ in range(10):
                    number = reserve_next_order_number(business_id=self.business.id)
                    with lock:
                        results.append(number)
            finally:
                close_old_connections()

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(results), 80)
        self.assertEqual(len(set(results)), 80)
        self.assertEqual(sorted(results), [format_order_number("", n) for n in range(1, 81)])
