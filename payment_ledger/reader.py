import logging

import pandas


class CsvTransactionsReader:

    """Read raw transaction records from csv."""

    FIELDS = ['type', 'client', 'tx', 'amount']

    def __init__(self, path, chunksize=1):
        self._path = path
        self._chunksize = chunksize
        self._bad_lines = []

    def _keep_bad_line(self, line):
        # handed on to the parser, which reports it
        self._bad_lines.append(line)
        return None

    def _open(self):
        try:
            return pandas.read_csv(self._path,
                                   iterator=True,
                                   chunksize=self._chunksize,
                                   dtype=str,
                                   keep_default_na=False,
                                   skipinitialspace=True,
                                   comment='#',
                                   index_col=False,
                                   engine='python',
                                   on_bad_lines=self._keep_bad_line)
        except pandas.errors.EmptyDataError:
            logging.warning('No transactions found in %s', self._path)
            return None

    def _get_record_from_file(self):
        reader = self._open()
        if reader is None:
            return
        with reader:
            for chunk in reader:
                chunk.columns = [str(column).strip() for column in chunk.columns]
                chunk = chunk.reindex(columns=self.FIELDS).fillna('')
                for record in chunk.itertuples(index=False, name=None):
                    yield list(record)
                while self._bad_lines:
                    yield self._bad_lines.pop(0)
        logging.info('All records read from %s', self._path)

    def get(self):
        """Get raw records."""
        return self._get_record_from_file()
