# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  test_log.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Test blobref/log.py

"""
import logging
import unittest

import blobref.log


class TestBlobrefLogger(unittest.TestCase):
    def test_set_level_verbose_or_quiet(self):
        """Test set level convenience method."""
        logger = blobref.log.BlobrefLogger("test-blobref-logger")

        # Default level if verbose and quiet are false
        logger.setLevelVerboseOrQuiet(False, False)
        self.assertEqual(logger.level, logging.NOTSET)

        # INFO if verbose is true
        logger.setLevelVerboseOrQuiet(True, False)
        self.assertEqual(logger.level, logging.INFO)

        # CRITICAL if quiet is true
        logger.setLevelVerboseOrQuiet(False, True)
        self.assertEqual(logger.level, logger.QUIET)

    def test_base_logger(self):
        """Test that library loggers inherit from the blobref base logger."""
        self.assertIsInstance(
            logging.getLogger("blobref"), blobref.log.BlobrefLogger
        )
        child = logging.getLogger("blobref.resolver._resolver")
        self.assertIs(child.parent, logging.getLogger("blobref"))

    def test_error_stacktrace(self):
        """Test that stacktraces are only shown in DEBUG level."""
        records = []
        handler = logging.Handler()
        handler.emit = records.append

        logger = blobref.log.BlobrefLogger("test-blobref-error")
        logger.addHandler(handler)

        for level, show_stacktrace in [
            (logging.DEBUG, True),
            (logging.INFO, False),
        ]:
            logger.setLevel(level)
            try:
                raise ValueError("boom")

            except ValueError:
                logger.error("failed: %s", "boom")

            record = records.pop()
            self.assertEqual(record.getMessage(), "failed: boom")
            self.assertEqual(bool(record.exc_info), show_stacktrace)


if __name__ == "__main__":
    unittest.main()
