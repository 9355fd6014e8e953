import logging
from decimal import Decimal


class Account:

    """Gather client's balance."""

    def __init__(self, client_id):
        self.client_id = client_id
        self.available = Decimal(0)
        self.held = Decimal(0)
        self.locked = False

    @property
    def total(self):
        """Get total funds."""
        return self.available + self.held

    def credit(self, amount):
        """Add funds to available."""
        self.available += amount

    def debit(self, amount):
        """Take funds from available."""
        self.available -= amount

    def hold(self, amount):
        """Move funds from available to held."""
        self.available -= amount
        self.held += amount

    def release(self, amount):
        """Move funds from held back to available."""
        self.held -= amount
        self.available += amount

    def charge_back(self, amount):
        """Remove held funds and lock the account."""
        self.held -= amount
        self.locked = True


class AccountStore:

    """Client accounts in first-seen order."""

    def __init__(self):
        self._accounts = {}

    def __len__(self):
        return len(self._accounts)

    def __contains__(self, client_id):
        return client_id in self._accounts

    def get(self, client_id):
        """Get account without creating it."""
        return self._accounts.get(client_id)

    def get_or_create(self, client_id):
        """Get account, opening an empty one on first reference."""
        account = self._accounts.get(client_id)
        if account is None:
            account = self._accounts[client_id] = Account(client_id)
            logging.debug('Opened account for client %s', client_id)
        return account

    def balances(self):
        """Get (client, available, held, total, locked) for each account."""
        for client_id, account in self._accounts.items():
            yield client_id, account.available, account.held, account.total, account.locked
