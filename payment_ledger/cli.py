""" Payment ledger command line.

Writing to stdout
Example::
payment-ledger <NAME>.csv

Writing to file, diagnostics on stderr
Example::
payment-ledger <NAME>.csv > accounts.csv

Rejected and malformed records are logged on stderr; ``-v`` adds debug detail.
"""
import logging
import sys

import pandas

from payment_ledger.engine import PaymentsEngine
from payment_ledger.reader import CsvTransactionsReader
from payment_ledger.reporting import Reporter


LOG_FORMAT = '%(levelname)s:%(message)s'
USAGE = 'usage: payment-ledger [-v|--verbose] <transactions.csv>'


class CmdParser:

    """Parse command line execution arguments."""

    VERBOSE_FLAGS = {'-v', '--verbose'}

    def __init__(self, argv=None):
        self._data = sys.argv[1:] if argv is None else list(argv)
        self._input_file = ''
        self._verbose = False
        self._update()

    def _update(self):
        positional = []
        for argument in self._data:
            if argument in self.VERBOSE_FLAGS:
                self._verbose = True
            else:
                positional.append(argument)
        if positional:
            self._input_file = positional[0]

    @property
    def input_file(self):
        """Get input file name."""
        return self._input_file

    @property
    def verbose(self):
        """Get whether debug logging is requested."""
        return self._verbose

    @property
    def log_level(self):
        """Get logging level."""
        return logging.DEBUG if self._verbose else logging.WARNING


def configure_logging(level):
    """Send diagnostics to stderr."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def main(argv=None):
    """Run payment engine."""

    parser = CmdParser(argv)
    configure_logging(parser.log_level)

    if not parser.input_file:
        print(USAGE, file=sys.stderr)
        return 2

    bank = PaymentsEngine(CsvTransactionsReader(parser.input_file), Reporter())
    try:
        bank.process()
    except (OSError, UnicodeDecodeError, pandas.errors.ParserError) as e:
        logging.critical('Could not read %s: %s', parser.input_file, e)
        return 1

    bank.report()
    return 0


if __name__ == '__main__':
    sys.exit(main())
