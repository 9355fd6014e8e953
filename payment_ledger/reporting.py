from payment_ledger.records import AMOUNT_PRECISION


class ClientsBalancesReporter:

    """Report all clients' balances."""

    FIELDS = ['client', 'available', 'held', 'total', 'locked']

    def __init__(self, accounts):
        self._accounts = accounts

    @classmethod
    def get_header(cls):
        """Get fields names."""
        return ','.join(cls.FIELDS)

    def get_balances(self):
        """Get all clients' balances."""
        for client_id, available, held, total, locked in self._accounts.balances():
            amounts = ','.join(self._format_amount(amount) for amount in (available, held, total))
            yield f"{client_id},{amounts},{'true' if locked else 'false'}"

    @staticmethod
    def _format_amount(amount):
        return str(amount.quantize(AMOUNT_PRECISION))


class Reporter:

    """Report data provided."""

    @staticmethod
    def write(data):
        """Write data provided."""
        print(data, flush=True)
