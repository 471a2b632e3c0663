"""
tests/cli/test_console.py - Console helpers and logging setup
"""

import logging

from rich.logging import RichHandler

from cli.ui.console import (
    NOISY_LOGGERS,
    console,
    print_error,
    print_error_tree,
    print_success,
    setup_logging,
)


class TestPrintHelpers:
    """print_* helpers"""

    def test_messages(self):
        """Success and error lines carry their marks"""
        with console.capture() as capture:
            print_success("done")
            print_error("failed")

        output = capture.get()
        assert "✓ done" in output
        assert "✗ failed" in output

    def test_error_tree_truncation(self):
        """Each branch shows three items and a remainder line"""
        items = [f"account-{i}" for i in range(5)]

        with console.capture() as capture:
            print_error_tree([("AuthenticationError", items)], title="2 target(s) failed")

        output = capture.get()
        assert "2 target(s) failed" in output
        assert "AuthenticationError (5)" in output
        assert "account-2" in output
        assert "account-3" not in output
        assert "... and 2 more" in output


class TestSetupLogging:
    """setup_logging"""

    def test_default_level(self):
        """WARNING level with a RichHandler by default"""
        setup_logging()

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert any(isinstance(h, RichHandler) for h in root.handlers)

    def test_verbose(self):
        """verbose enables DEBUG but keeps library loggers quiet"""
        setup_logging(verbose=True)

        assert logging.getLogger().level == logging.DEBUG
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
