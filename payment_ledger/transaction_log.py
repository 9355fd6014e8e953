"""Index of accepted deposits and withdrawals, kept for later disputes."""


class DuplicateTx(Exception):

    """Transaction id already present in the log."""

    def __init__(self, transaction_id):
        super().__init__(f'transaction {transaction_id} already recorded')
        self.transaction_id = transaction_id


class EntryStatus:

    """Dispute status of a logged transaction."""

    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "chargedback"


class LedgerEntry:

    """Accepted deposit or withdrawal."""

    def __init__(self, transaction_id, client_id, kind, amount):
        self.id = transaction_id
        self.client_id = client_id
        self.kind = kind
        self.amount = amount
        self.status = EntryStatus.NORMAL

    def __repr__(self):
        return (f'LedgerEntry(id={self.id}, client_id={self.client_id}, kind={self.kind!r}, '
                f'amount={self.amount}, status={self.status!r})')


class TransactionLog:

    """Append-only map of transaction id to ledger entry."""

    def __init__(self):
        self._entries = {}

    def __contains__(self, transaction_id):
        return transaction_id in self._entries

    def __len__(self):
        return len(self._entries)

    def record(self, transaction_id, client_id, kind, amount):
        """Add new entry with normal status."""
        if transaction_id in self._entries:
            raise DuplicateTx(transaction_id)
        entry = LedgerEntry(transaction_id, client_id, kind, amount)
        self._entries[transaction_id] = entry
        return entry

    def get(self, transaction_id):
        """Get entry or None."""
        return self._entries.get(transaction_id)

    def set_status(self, transaction_id, status):
        """Change status of an existing entry."""
        self._entries[transaction_id].status = status
