# python
"""
Logs module behavioral tests (handler installation and levels).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import logging
import unittest
from unittest import TestCase

from rich.console import Console
from rich.logging import RichHandler

from dotroute.logs import configure


class TestConfigure(TestCase):
    """Behavioral tests for configure()."""

    def tearDown(self):
        logger = logging.getLogger("dotroute")
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    def testQuietByDefault(self):
        logger = configure()
        self.assertEqual(logger.level, logging.WARNING)
        self.assertIsInstance(logger.handlers[0], RichHandler)

    def testVerboseIsDebug(self):
        self.assertEqual(configure(True).level, logging.DEBUG)

    def testReconfigureReplacesHandler(self):
        configure()
        logger = configure(True)
        self.assertEqual(len(logger.handlers), 1)

    def testRecordsGoToGivenConsole(self):
        buffer = io.StringIO()
        configure(True, console=Console(file=buffer, width=200))
        logging.getLogger("dotroute.registry").debug("registered command %r", "add")
        self.assertIn("registered command 'add'", buffer.getvalue())


if __name__ == "__main__":
    unittest.main()
