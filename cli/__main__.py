#!/usr/bin/env python3
"""
Wheremoney CLI - command-line interface for tracking where the money goes.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    transactions Import, categorize and tag transactions
    categories   Show and reload the category taxonomy
    rules        Manage payee renaming rules
    mappings     Manage saved CSV column mappings
    analytics    Spending reports
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli transactions import export.csv --date-column Date --payee-column Payee --amount-column Amount
    python -m cli transactions categorize txn-1234 Restaurant
    python -m cli analytics report
"""

import sys
import argparse
from cli import analytics, categories, mappings, migrate, rules, transactions
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Wheremoney - Personal finance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    transactions.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    rules.setup_parser(subparsers)
    mappings.setup_parser(subparsers)
    analytics.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # Migrate commands need db_manager for raw database operations
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
                return

            services = Services(config)
            if not services.db_manager.is_initialized():
                print("Database is not initialized. Run 'python -m cli migrate apply' first.")
                sys.exit(1)

            args.func(args, services)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
