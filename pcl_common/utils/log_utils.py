import logging
import sys


class ConsoleHandler(logging.StreamHandler):
    """
    Stream handler used by the packaged log.yml.
        Writes to stderr unless a stream is given and flushes after
        every record so native-side progress messages show up in order.
    """

    def __init__(self, stream=None):
        super().__init__(stream if stream is not None else sys.stderr)

    def emit(self, record):
        super().emit(record)
        self.flush()
