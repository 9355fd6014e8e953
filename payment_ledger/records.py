"""Typed transaction records.

A raw record is a list of text fields ``type, client, tx[, amount]`` as produced by
the csv reader. ``RecordParser`` turns it into a ``Transaction`` or raises
``MalformedRecord``; nothing downstream ever sees a half parsed record.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN

import numpy


AMOUNT_PRECISION = Decimal('0.0001')
# 24 significant digits at 4 dp, well inside the default decimal context
MAX_AMOUNT = Decimal('99999999999999999999.9999')


class MalformedRecord(Exception):

    """Raw record could not be turned into a transaction."""

    def __init__(self, message, fields=None):
        super().__init__(message)
        self.message = message
        self.fields = fields

    def __str__(self):
        if self.fields is None:
            return self.message
        return f'{self.message}: {self.fields!r}'


class TransactionType:

    """Transaction Types."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"
    MONETARY = {DEPOSIT, WITHDRAWAL}
    REFERENCING = {DISPUTE, RESOLVE, CHARGEBACK}
    ALLTYPES = MONETARY | REFERENCING


class Transaction:

    """Client's transaction."""

    def __init__(self, transaction_type, client_id, transaction_id, amount=None):
        self.type = transaction_type
        self.client_id = client_id
        self.id = transaction_id
        self.amount = amount

    def __eq__(self, other):
        if not isinstance(other, Transaction):
            return NotImplemented
        return (self.type, self.client_id, self.id, self.amount) == \
            (other.type, other.client_id, other.id, other.amount)

    def __repr__(self):
        return (f'Transaction(type={self.type!r}, client_id={self.client_id}, '
                f'id={self.id}, amount={self.amount})')


class RecordParser:

    """Parse raw records into transactions."""

    CLIENT_ID_RANGE = numpy.iinfo(numpy.uint16)
    TRANSACTION_ID_RANGE = numpy.iinfo(numpy.uint32)

    def parse(self, fields):
        """Get transaction from raw record fields."""
        fields = [str(field).strip() for field in fields]
        if len(fields) not in (3, 4):
            raise MalformedRecord(f'expected 3 or 4 fields, got {len(fields)}', fields)

        transaction_type = fields[0]
        if transaction_type not in TransactionType.ALLTYPES:
            raise MalformedRecord(f'unknown transaction type {transaction_type!r}', fields)

        client_id = self._parse_id(fields[1], self.CLIENT_ID_RANGE, 'client', fields)
        transaction_id = self._parse_id(fields[2], self.TRANSACTION_ID_RANGE, 'tx', fields)
        raw_amount = fields[3] if len(fields) == 4 else ''

        if transaction_type in TransactionType.MONETARY:
            amount = self._parse_amount(raw_amount, fields)
        elif raw_amount:
            raise MalformedRecord(f'{transaction_type} does not take an amount', fields)
        else:
            amount = None

        return Transaction(transaction_type, client_id, transaction_id, amount)

    @staticmethod
    def _parse_id(text, bounds, name, fields):
        if '_' in text:
            raise MalformedRecord(f'invalid {name} id {text!r}', fields)
        try:
            value = int(text, 10)
        except ValueError:
            raise MalformedRecord(f'invalid {name} id {text!r}', fields) from None
        if not bounds.min <= value <= bounds.max:
            raise MalformedRecord(f'{name} id {value} out of range', fields)
        return value

    @staticmethod
    def _parse_amount(text, fields):
        if not text:
            raise MalformedRecord('missing amount', fields)
        if '_' in text:
            raise MalformedRecord(f'invalid amount {text!r}', fields)
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise MalformedRecord(f'invalid amount {text!r}', fields) from None
        if not amount.is_finite():
            raise MalformedRecord(f'invalid amount {text!r}', fields)
        if amount < 0:
            raise MalformedRecord(f'negative amount {text!r}', fields)
        if amount > MAX_AMOUNT:
            raise MalformedRecord(f'amount {text!r} above limit', fields)
        try:
            # -0 quantizes to -0.0000, which would print with a sign
            return amount.copy_abs().quantize(AMOUNT_PRECISION, rounding=ROUND_HALF_EVEN)
        except InvalidOperation:
            raise MalformedRecord(f'invalid amount {text!r}', fields) from None
