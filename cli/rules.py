#!/usr/bin/env python3

import sys

from models.payee_rule import PayeeRenamingRule
from payees import new_rule_id, validate_pattern
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List payee renaming rules in application order."""
    rules = services.rules.find_all()

    if not rules:
        logger.info("No renaming rules found.")
        return

    logger.info("\nRenaming rules (applied top to bottom):")
    logger.info("=" * 80)
    for position, rule in enumerate(rules, start=1):
        kind = "regex" if rule.is_regex else "text"
        state = "enabled" if rule.enabled else "disabled"
        logger.info(f"{position}. [{rule.id}] ({kind}, {state})")
        logger.info(f"   {rule.pattern}  ->  {rule.replacement}")

    logger.info(f"\nTotal rules: {len(rules)}")


def cmd_add(args, services):
    """Add a renaming rule to the end of the list."""
    error = validate_pattern(args.pattern, args.regex)
    if error:
        logger.error(error)
        sys.exit(1)

    rule = PayeeRenamingRule(
        id=new_rule_id(),
        pattern=args.pattern,
        replacement=args.replacement,
        is_regex=args.regex,
        enabled=True,
    )

    try:
        services.rules.add(rule)
    except Exception as e:
        logger.error(f"Error saving rule: {e}")
        sys.exit(1)

    logger.info(f"✓ Rule created with ID: {rule.id}")


def cmd_toggle(args, services):
    """Enable a disabled rule or disable an enabled one."""
    rule = next((r for r in services.rules.find_all() if r.id == args.rule_id), None)
    if not rule:
        logger.error(f"Rule with ID {args.rule_id} not found.")
        sys.exit(1)

    try:
        services.rules.set_enabled(rule.id, not rule.enabled)
    except Exception as e:
        logger.error(f"Error saving rule: {e}")
        sys.exit(1)

    logger.info(f"✓ Rule {rule.id} {'disabled' if rule.enabled else 'enabled'}")


def cmd_delete(args, services):
    """Delete a rule by ID."""
    try:
        deleted = services.rules.delete(args.rule_id)
    except Exception as e:
        logger.error(f"Error deleting rule: {e}")
        sys.exit(1)

    if not deleted:
        logger.error(f"Rule with ID {args.rule_id} not found.")
        sys.exit(1)

    logger.info(f"✓ Rule {args.rule_id} deleted.")


def setup_parser(subparsers):
    """Setup rules subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "rules",
        help="Manage payee renaming rules",
        description="List, add, toggle and delete payee renaming rules",
    )

    rules_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available rule commands",
        dest="subcommand",
        required=True,
    )

    list_parser = rules_subparsers.add_parser("list", help="List all rules")
    list_parser.set_defaults(func=cmd_list)

    add_parser = rules_subparsers.add_parser("add", help="Add a rule")
    add_parser.add_argument("pattern", help="Text or regular expression to match")
    add_parser.add_argument("replacement", help="Replacement text")
    add_parser.add_argument(
        "--regex", action="store_true", help="Treat pattern as a regular expression"
    )
    add_parser.set_defaults(func=cmd_add)

    toggle_parser = rules_subparsers.add_parser("toggle", help="Enable/disable a rule")
    toggle_parser.add_argument("rule_id", help="ID of the rule")
    toggle_parser.set_defaults(func=cmd_toggle)

    delete_parser = rules_subparsers.add_parser("delete", help="Delete a rule")
    delete_parser.add_argument("rule_id", help="ID of the rule")
    delete_parser.set_defaults(func=cmd_delete)
