#!/usr/bin/env python3

import sys

from models.column_mapping import ColumnMapping
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List saved column mappings."""
    mappings = services.mappings.find_all()

    if not mappings:
        logger.info("No saved column mappings.")
        return

    for name, mapping in mappings.items():
        logger.info(f"{name}:")
        for field_name, column in mapping.to_dict().items():
            logger.info(f"  {field_name:<15} <- {column}")


def cmd_save(args, services):
    """Save a named column mapping."""
    try:
        mapping = ColumnMapping(
            date=args.date_column,
            payee=args.payee_column,
            amount=args.amount_column,
            transaction_id=args.transaction_id_column,
            type=args.type_column,
            description=args.description_column,
            account=args.account_column,
            balance=args.balance_column,
            reference=args.reference_column,
        )
        services.mappings.save(args.name, mapping)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error saving mapping: {e}")
        sys.exit(1)

    logger.info(f"✓ Saved column mapping '{args.name}'")


def cmd_delete(args, services):
    """Delete a saved column mapping."""
    if not services.mappings.delete(args.name):
        logger.error(f"Saved mapping '{args.name}' not found.")
        sys.exit(1)

    logger.info(f"✓ Deleted column mapping '{args.name}'")


def setup_parser(subparsers):
    """Setup mappings subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "mappings",
        help="Manage saved column mappings",
        description="Save and reuse CSV column mappings",
    )

    mappings_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available mapping commands",
        dest="subcommand",
        required=True,
    )

    list_parser = mappings_subparsers.add_parser("list", help="List saved mappings")
    list_parser.set_defaults(func=cmd_list)

    save_parser = mappings_subparsers.add_parser("save", help="Save a mapping")
    save_parser.add_argument("name", help="Mapping name")
    save_parser.add_argument("--date-column", required=True)
    save_parser.add_argument("--payee-column", required=True)
    save_parser.add_argument("--amount-column", required=True)
    save_parser.add_argument("--transaction-id-column")
    save_parser.add_argument("--type-column")
    save_parser.add_argument("--description-column")
    save_parser.add_argument("--account-column")
    save_parser.add_argument("--balance-column")
    save_parser.add_argument("--reference-column")
    save_parser.set_defaults(func=cmd_save)

    delete_parser = mappings_subparsers.add_parser("delete", help="Delete a mapping")
    delete_parser.add_argument("name", help="Mapping name")
    delete_parser.set_defaults(func=cmd_delete)
