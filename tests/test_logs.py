from __future__ import annotations

import io
import logging
import unittest

from yank.logs import configure_logging, flush_logging


class LoggingSetupTests(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger("yank")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    def test_records_are_held_until_flushed(self) -> None:
        stream = io.StringIO()
        handler = configure_logging(stream=stream)

        logging.getLogger("yank.export").warning("Stat Err %s: %s", "missing.txt", "gone")
        self.assertEqual(stream.getvalue(), "")

        flush_logging(handler)
        self.assertEqual(stream.getvalue(), "Stat Err missing.txt: gone\n")

    def test_debug_only_when_verbose(self) -> None:
        stream = io.StringIO()
        handler = configure_logging(stream=stream)
        logging.getLogger("yank.runtime").debug("hidden")
        flush_logging(handler)
        self.assertEqual(stream.getvalue(), "")

        stream = io.StringIO()
        handler = configure_logging(verbose=True, stream=stream)
        logging.getLogger("yank.runtime").debug("shown")
        flush_logging(handler)
        self.assertEqual(stream.getvalue(), "shown\n")

    def test_reconfiguring_replaces_previous_handler(self) -> None:
        configure_logging(stream=io.StringIO())
        configure_logging(stream=io.StringIO())
        self.assertEqual(len(logging.getLogger("yank").handlers), 1)


if __name__ == "__main__":
    unittest.main()
