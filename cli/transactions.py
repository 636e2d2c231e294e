#!/usr/bin/env python3

import sys
from pathlib import Path

from categorization import BulkApplyChoice, CategorizationController
from cli.categories import get_categories
from editing import add_tag, remove_tag, set_saving
from ingestion import import_transactions
from models.column_mapping import ColumnMapping
from taxonomy.hierarchy import find_category
from logger import get_logger

logger = get_logger()

_CHOICE_LABELS = {
    BulkApplyChoice.CREATE_RULE_AND_APPLY: "Create a renaming rule and apply the category to all",
    BulkApplyChoice.APPLY_ONLY: "Apply the category to all",
    BulkApplyChoice.CANCEL: "Cancel",
}

_CHOICE_ARGS = {
    "create-rule": BulkApplyChoice.CREATE_RULE_AND_APPLY,
    "apply": BulkApplyChoice.APPLY_ONLY,
    "cancel": BulkApplyChoice.CANCEL,
}


def _mapping_from_args(args, services):
    """Build the column mapping from --mapping or the individual column options."""
    if args.mapping:
        mapping = services.mappings.find(args.mapping)
        if not mapping:
            logger.error(f"Saved mapping '{args.mapping}' not found.")
            logger.info("Use 'python -m cli mappings list' to see saved mappings.")
            sys.exit(1)
        return mapping

    if not (args.date_column and args.payee_column and args.amount_column):
        logger.error(
            "Either --mapping or all of --date-column, --payee-column and --amount-column are required"
        )
        sys.exit(1)

    return ColumnMapping(
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


def cmd_import(args, services):
    """Import transactions from a CSV file.

    Args:
        args: Parsed command-line arguments with csv_file and column mapping options
        services: Services container
    """
    csv_path = Path(args.csv_file)
    if not csv_path.exists():
        logger.error(f"File not found: {args.csv_file}")
        sys.exit(1)

    mapping = _mapping_from_args(args, services)
    policy = args.policy or services.config.duplicate_detection

    logger.info(f"CSV file: {args.csv_file}")
    logger.info(f"Duplicate detection: {policy}")
    logger.info("-" * 80)

    try:
        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            result = import_transactions(
                f, mapping, services.transactions, policy=policy, dayfirst=args.dayfirst
            )
    except ValueError as e:
        logger.error(f"Invalid import: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error during import: {e}")
        sys.exit(1)

    logger.info(f"✓ Successfully imported {len(result.accepted)} transactions")
    if result.skipped_count:
        logger.info(f"  ({result.skipped_count} duplicate transaction(s) skipped)")

    if args.save_mapping:
        services.mappings.save(args.save_mapping, mapping)
        logger.info(f"Saved column mapping as '{args.save_mapping}'")


def cmd_list(args, services):
    """List transactions with display payees."""
    transactions = services.transactions.get_all()
    controller = CategorizationController(services.transactions, services.rules)

    if args.filter:
        needle = args.filter.lower()
        transactions = [
            t
            for t in transactions
            if needle in t.payee.lower()
            or (t.description and needle in t.description.lower())
        ]

    if not transactions:
        logger.info("No transactions found.")
        return

    shown = transactions[: args.limit] if args.limit else transactions
    for t in shown:
        tags = f" [{', '.join(t.tags)}]" if t.tags else ""
        saving = " (saving)" if t.is_saving else ""
        logger.info(
            f"{t.id}  {t.date.date().isoformat()}  {controller.display_payee(t)[:40]:<40}  "
            f"{t.amount:>12}  {t.category or 'Uncategorized'}{tags}{saving}"
        )

    logger.info(f"\nShowing {len(shown)} of {len(transactions)} transaction(s)")


def _ask_choice(prompt):
    """Ask the user how to apply a category to similar transactions."""
    print(
        f"\nFound {prompt.similar_count} other transaction(s) matching '{prompt.pattern}'."
    )
    if prompt.has_rule:
        print("A renaming rule already matches this payee.")

    for number, option in enumerate(prompt.options, start=1):
        print(f"  {number}. {_CHOICE_LABELS[option]}")

    answer = input("Choose an option: ").strip()
    try:
        return prompt.options[int(answer) - 1]
    except (ValueError, IndexError):
        logger.info("Invalid choice, cancelling.")
        return BulkApplyChoice.CANCEL


def cmd_categorize(args, services):
    """Set the category of a transaction, optionally applying it to similar ones.

    Args:
        args: Parsed command-line arguments with transaction_id and category
        services: Services container
    """
    categories = get_categories(services)
    if not find_category(args.category, categories):
        logger.error(f"Category '{args.category}' not found.")
        logger.info("Use 'python -m cli categories list' to see available categories.")
        sys.exit(1)

    controller = CategorizationController(services.transactions, services.rules)

    try:
        prompt = controller.categorize(args.transaction_id, args.category)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error updating transaction: {e}")
        sys.exit(1)

    logger.info(f"✓ Transaction categorized as '{args.category}'")
    if prompt is None:
        return

    if args.choice:
        choice = _CHOICE_ARGS[args.choice]
        if choice not in prompt.options:
            logger.info("A renaming rule already matches this payee, applying category only.")
            choice = BulkApplyChoice.APPLY_ONLY
    else:
        choice = _ask_choice(prompt)

    try:
        result = controller.resolve(prompt, choice)
    except Exception as e:
        logger.error(f"Error applying category: {e}")
        sys.exit(1)

    if result.choice == BulkApplyChoice.CANCEL:
        logger.info("Similar transactions left unchanged.")
        return

    logger.info(f"✓ Applied '{args.category}' to {result.updated_count} transaction(s)")
    if result.rule:
        logger.info(f"✓ Created renaming rule: {result.rule.pattern} -> {result.rule.replacement}")


def cmd_rename(args, services):
    """Rename a transaction's payee by creating an exact-match renaming rule."""
    controller = CategorizationController(services.transactions, services.rules)

    try:
        rule = controller.rename_payee(args.transaction_id, args.new_payee)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error creating renaming rule: {e}")
        sys.exit(1)

    logger.info(f"✓ Created renaming rule {rule.id}: {rule.pattern} -> {rule.replacement}")


def cmd_tag(args, services):
    """Add or remove a tag on a transaction."""
    try:
        if args.remove:
            tags = remove_tag(services.transactions, args.transaction_id, args.tag)
        else:
            tags = add_tag(services.transactions, args.transaction_id, args.tag)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error updating tags: {e}")
        sys.exit(1)

    logger.info(f"✓ Tags: {', '.join(tags) if tags else '(none)'}")


def cmd_saving(args, services):
    """Mark or unmark a transaction as a saving."""
    try:
        set_saving(services.transactions, args.transaction_id, args.on)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error updating transaction: {e}")
        sys.exit(1)

    state = "marked" if args.on else "unmarked"
    logger.info(f"✓ Transaction {state} as saving")


def cmd_delete(args, services):
    """Delete a transaction by ID."""
    transaction = services.transactions.find(args.transaction_id)
    if not transaction:
        logger.error(f"Transaction with ID '{args.transaction_id}' not found.")
        sys.exit(1)

    logger.info(
        f"\nTransaction to delete: {transaction.date.date().isoformat()} "
        f"{transaction.payee} {transaction.amount}"
    )
    confirm = input("Are you sure? (yes/no): ").strip().lower()
    if confirm != "yes":
        logger.info("Deletion cancelled.")
        return

    try:
        services.transactions.delete_one(args.transaction_id)
    except Exception as e:
        logger.error(f"Error deleting transaction: {e}")
        sys.exit(1)

    logger.info("✓ Transaction deleted.")


def cmd_clear(args, services):
    """Delete all transactions."""
    confirm = (
        input("This will delete ALL transactions. Continue? (yes/no): ")
        .strip()
        .lower()
    )
    if confirm != "yes":
        logger.info("Clear cancelled.")
        return

    try:
        count = services.transactions.clear_all()
    except Exception as e:
        logger.error(f"Error clearing transactions: {e}")
        sys.exit(1)

    logger.info(f"✓ Deleted {count} transaction(s).")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Import and manage transactions",
        description="Import, categorize, rename and tag transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions import
    import_parser = transactions_subparsers.add_parser(
        "import", help="Import transactions from a CSV file"
    )
    import_parser.add_argument("csv_file", help="Path to the CSV export")
    import_parser.add_argument("--mapping", help="Name of a saved column mapping")
    import_parser.add_argument("--date-column", help="Column holding the date")
    import_parser.add_argument("--payee-column", help="Column holding the payee")
    import_parser.add_argument("--amount-column", help="Column holding the signed amount")
    import_parser.add_argument("--transaction-id-column", help="Column holding the bank transaction ID")
    import_parser.add_argument("--type-column", help="Column holding credit/debit")
    import_parser.add_argument("--description-column", help="Column holding a description")
    import_parser.add_argument("--account-column", help="Column holding the account")
    import_parser.add_argument("--balance-column", help="Column holding the balance")
    import_parser.add_argument("--reference-column", help="Column holding a reference")
    import_parser.add_argument(
        "--policy",
        choices=["strict", "off"],
        help="Duplicate detection policy (default: from config)",
    )
    import_parser.add_argument(
        "--dayfirst",
        action="store_true",
        help="Parse ambiguous dates as DD/MM/YYYY",
    )
    import_parser.add_argument(
        "--save-mapping",
        metavar="NAME",
        help="Save the column mapping under this name",
    )
    import_parser.set_defaults(func=cmd_import)

    # transactions list
    list_parser = transactions_subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument("--filter", help="Only show payees/descriptions containing this text")
    list_parser.add_argument("--limit", type=int, default=50, help="Maximum rows to show (0 = all)")
    list_parser.set_defaults(func=cmd_list)

    # transactions categorize
    categorize_parser = transactions_subparsers.add_parser(
        "categorize", help="Set the category of a transaction"
    )
    categorize_parser.add_argument("transaction_id", help="Transaction ID")
    categorize_parser.add_argument("category", help="Category name")
    categorize_parser.add_argument(
        "--choice",
        choices=sorted(_CHOICE_ARGS),
        help="Answer the similar-transactions prompt non-interactively",
    )
    categorize_parser.set_defaults(func=cmd_categorize)

    # transactions rename
    rename_parser = transactions_subparsers.add_parser(
        "rename", help="Rename a transaction's payee"
    )
    rename_parser.add_argument("transaction_id", help="Transaction ID")
    rename_parser.add_argument("new_payee", help="New display payee")
    rename_parser.set_defaults(func=cmd_rename)

    # transactions tag
    tag_parser = transactions_subparsers.add_parser("tag", help="Add or remove a tag")
    tag_parser.add_argument("transaction_id", help="Transaction ID")
    tag_parser.add_argument("tag", help="Tag")
    tag_parser.add_argument("--remove", action="store_true", help="Remove the tag instead")
    tag_parser.set_defaults(func=cmd_tag)

    # transactions saving
    saving_parser = transactions_subparsers.add_parser(
        "saving", help="Mark or unmark a transaction as a saving"
    )
    saving_parser.add_argument("transaction_id", help="Transaction ID")
    saving_group = saving_parser.add_mutually_exclusive_group(required=True)
    saving_group.add_argument("--on", dest="on", action="store_true")
    saving_group.add_argument("--off", dest="on", action="store_false")
    saving_parser.set_defaults(func=cmd_saving)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser("delete", help="Delete a transaction")
    delete_parser.add_argument("transaction_id", help="Transaction ID")
    delete_parser.set_defaults(func=cmd_delete)

    # transactions clear
    clear_parser = transactions_subparsers.add_parser("clear", help="Delete all transactions")
    clear_parser.set_defaults(func=cmd_clear)
