"""Tests for the transaction CLI commands."""

import argparse
import logging

from cli.transactions import cmd_list
from payees import pattern_rule
from tests.helpers import make_transaction


class TestCmdList:
    """Tests for cmd_list."""

    def test_shows_display_payee(self, services, caplog):
        """Test listed rows carry the renamed payee, not the raw bank string."""
        services.transactions.add_all([make_transaction("JOES GRILL &/25-11-17", "-23.50")])
        services.rules.add(pattern_rule("JOES GRILL"))
        caplog.set_level(logging.INFO, logger="wheremoney")

        cmd_list(argparse.Namespace(filter=None, limit=50), services)

        assert "JOES GRILL " in caplog.text
        assert "&/25-11-17" not in caplog.text
        assert "Showing 1 of 1 transaction(s)" in caplog.text
