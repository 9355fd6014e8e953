""" Payment ledger engine.

``StateMachine`` applies one transaction at a time to an ``AccountStore`` and a
``TransactionLog`` it is handed, answering ``Applied`` or ``Rejected``.
``PaymentsEngine`` feeds it records from a reader and reports final balances.
"""
import logging

from payment_ledger.accounts import AccountStore
from payment_ledger.records import MAX_AMOUNT, MalformedRecord, RecordParser, TransactionType
from payment_ledger.reporting import ClientsBalancesReporter
from payment_ledger.transaction_log import EntryStatus, TransactionLog


class RejectReason:

    """Why a transaction was not applied."""

    ACCOUNT_LOCKED = "account locked"
    DUPLICATE_TX = "duplicate transaction id"
    INSUFFICIENT_FUNDS = "insufficient funds"
    UNKNOWN_TX = "unknown transaction"
    CLIENT_MISMATCH = "client mismatch"
    WITHDRAWAL_DISPUTE = "withdrawals cannot be disputed"
    NOT_DISPUTABLE = "transaction not disputable"
    NOT_DISPUTED = "transaction not under dispute"
    BALANCE_LIMIT = "balance limit exceeded"


class Applied:

    """Transaction changed the ledger."""

    applied = True

    def __init__(self, transaction):
        self.transaction = transaction

    def __repr__(self):
        return f'Applied({self.transaction!r})'


class Rejected:

    """Transaction skipped, ledger untouched."""

    applied = False

    def __init__(self, transaction, reason):
        self.transaction = transaction
        self.reason = reason

    def __repr__(self):
        return f'Rejected({self.transaction!r}, {self.reason!r})'


class StateMachine:

    """Apply transactions to accounts and the transaction log."""

    def __init__(self, accounts, transaction_log):
        self._accounts = accounts
        self._log = transaction_log
        self._handlers = {
            TransactionType.DEPOSIT: self._deposit,
            TransactionType.WITHDRAWAL: self._withdrawal,
            TransactionType.DISPUTE: self._dispute,
            TransactionType.RESOLVE: self._resolve,
            TransactionType.CHARGEBACK: self._chargeback,
        }

    def apply(self, transaction):
        """Apply transaction, or reject it leaving all state as it was."""
        reason = self._handlers[transaction.type](transaction)
        if reason is not None:
            return Rejected(transaction, reason)
        return Applied(transaction)

    def _deposit(self, transaction):
        account = self._accounts.get_or_create(transaction.client_id)
        if account.locked:
            return RejectReason.ACCOUNT_LOCKED
        if transaction.id in self._log:
            return RejectReason.DUPLICATE_TX
        if account.total + transaction.amount > MAX_AMOUNT:
            return RejectReason.BALANCE_LIMIT

        self._log.record(transaction.id, transaction.client_id, transaction.type, transaction.amount)
        account.credit(transaction.amount)
        return None

    def _withdrawal(self, transaction):
        account = self._accounts.get_or_create(transaction.client_id)
        if account.locked:
            return RejectReason.ACCOUNT_LOCKED
        if transaction.id in self._log:
            return RejectReason.DUPLICATE_TX
        if account.available < transaction.amount:
            return RejectReason.INSUFFICIENT_FUNDS

        self._log.record(transaction.id, transaction.client_id, transaction.type, transaction.amount)
        account.debit(transaction.amount)
        return None

    def _dispute(self, transaction):
        entry, account, reason = self._find_referenced(transaction)
        if reason is not None:
            return reason
        if entry.kind == TransactionType.WITHDRAWAL:
            return RejectReason.WITHDRAWAL_DISPUTE
        if entry.status != EntryStatus.NORMAL:
            return RejectReason.NOT_DISPUTABLE
        if account.available < entry.amount:
            return RejectReason.INSUFFICIENT_FUNDS

        account.hold(entry.amount)
        self._log.set_status(entry.id, EntryStatus.DISPUTED)
        return None

    def _resolve(self, transaction):
        entry, account, reason = self._find_referenced(transaction)
        if reason is not None:
            return reason
        if entry.status != EntryStatus.DISPUTED:
            return RejectReason.NOT_DISPUTED

        account.release(entry.amount)
        self._log.set_status(entry.id, EntryStatus.NORMAL)
        return None

    def _chargeback(self, transaction):
        entry, account, reason = self._find_referenced(transaction)
        if reason is not None:
            return reason
        if entry.status != EntryStatus.DISPUTED:
            return RejectReason.NOT_DISPUTED

        account.charge_back(entry.amount)
        self._log.set_status(entry.id, EntryStatus.CHARGED_BACK)
        return None

    def _find_referenced(self, transaction):
        entry = self._log.get(transaction.id)
        if entry is None:
            return None, None, RejectReason.UNKNOWN_TX
        if entry.client_id != transaction.client_id:
            return entry, None, RejectReason.CLIENT_MISMATCH
        account = self._accounts.get(entry.client_id)
        if account.locked:
            return entry, account, RejectReason.ACCOUNT_LOCKED
        return entry, account, None


class ProcessingStats:

    """Count record outcomes."""

    def __init__(self):
        self.applied = 0
        self.rejected = 0
        self.malformed = 0

    def __repr__(self):
        return f'applied={self.applied} rejected={self.rejected} malformed={self.malformed}'


class PaymentsEngine:

    """Handle payments."""

    def __init__(self, input_data, output, parser=None):
        self._input_data = input_data
        self._parser = parser or RecordParser()
        self._accounts = AccountStore()
        self._transaction_log = TransactionLog()
        self._state_machine = StateMachine(self._accounts, self._transaction_log)
        self._output = output
        self.stats = ProcessingStats()

    @property
    def accounts(self):
        """Get account store."""
        return self._accounts

    def run(self):
        """Handle transactions and report balances."""
        self.process()
        self.report()

    def report(self):
        """Write header and all clients' balances."""
        balances_reporter = ClientsBalancesReporter(self._accounts)

        self._output.write(balances_reporter.get_header())

        for balance in balances_reporter.get_balances():
            self._output.write(balance)

    def process(self):
        """Handle transactions without reporting."""
        for record in self._input_data.get():
            self.process_record(record)
        logging.info('All transactions processed: %s', self.stats)
        return self._accounts

    def process_record(self, record):
        """Parse and apply a single raw record."""
        try:
            transaction = self._parser.parse(record)
        except MalformedRecord as e:
            self.stats.malformed += 1
            logging.error('Bad record: %s', e)
            return None

        result = self._state_machine.apply(transaction)
        if result.applied:
            self.stats.applied += 1
        else:
            self.stats.rejected += 1
            logging.error('Rejected %s: client %s, tx %s: %s',
                          transaction.type, transaction.client_id, transaction.id, result.reason)
        return result
