#!/usr/bin/env python3

import sys

from cli.categories import get_categories
from taxonomy.hierarchy import find_category
from tools import analytics
from logger import get_logger

logger = get_logger()


def cmd_report(args, services):
    """Print a spending report over all stored transactions."""
    transactions = services.transactions.get_all()
    categories = get_categories(services)
    currency = services.config.currency

    if not transactions:
        logger.info("No transactions found.")
        return

    totals = analytics.summary(transactions)
    logger.info("\nSummary")
    logger.info("=" * 80)
    logger.info(f"Total income:   {totals.income:>14.2f} {currency}")
    logger.info(f"Total spending: {totals.spending:>14.2f} {currency}")
    logger.info(f"Net:            {totals.net:>14.2f} {currency}")
    logger.info(
        f"Subscriptions:  {analytics.subscription_total(transactions, categories):>14.2f} {currency}"
    )

    logger.info("\nSpending by root category")
    logger.info("-" * 80)
    rollup = analytics.rollup_by_root(transactions, categories)
    for name, total in sorted(rollup.items(), key=lambda item: item[1], reverse=True):
        logger.info(f"{name:<40} {total:>14.2f}")

    logger.info("\nSpending by category")
    logger.info("-" * 80)
    for entry in analytics.category_breakdown(transactions, categories):
        logger.info(f"{entry.name:<40} {entry.total:>14.2f}")

    logger.info("\nMonthly")
    logger.info("-" * 80)
    logger.info(f"{'Month':<10} {'Income':>14} {'Spending':>14} {'Net':>14}")
    for bucket in analytics.monthly_series(transactions):
        logger.info(
            f"{bucket.month:<10} {bucket.income:>14.2f} {bucket.spending:>14.2f} {bucket.net:>14.2f}"
        )

    logger.info(f"\nTop {args.top} merchants")
    logger.info("-" * 80)
    for entry in analytics.top_payees(transactions, args.top):
        logger.info(f"{entry.payee[:40]:<40} {entry.total:>14.2f}")

    goal = services.config.savings_goal
    if goal.amount > 0:
        progress = analytics.savings_progress(transactions, goal)
        logger.info("\nSavings goal")
        logger.info("-" * 80)
        logger.info(
            f"Saved {progress.saved:.2f} of {progress.target:.2f} {currency} "
            f"over {progress.months} month(s) ({progress.ratio:.0%})"
        )


def cmd_drilldown(args, services):
    """Show spending one level below a category."""
    transactions = services.transactions.get_all()
    categories = get_categories(services)

    if not find_category(args.category, categories):
        logger.error(f"Category '{args.category}' not found.")
        sys.exit(1)

    logger.info(f"\n{args.category}: {analytics.rollup_total(args.category, transactions, categories):.2f}")
    logger.info("-" * 80)
    breakdown = analytics.drilldown(args.category, transactions, categories)
    if not breakdown:
        logger.info("No spending in this category.")
        return

    for name, total in sorted(breakdown.items(), key=lambda item: item[1], reverse=True):
        logger.info(f"{name:<40} {total:>14.2f}")


def setup_parser(subparsers):
    """Setup analytics subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "analytics",
        help="Spending analytics",
        description="Summaries of income and spending",
    )

    analytics_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available analytics commands",
        dest="subcommand",
        required=True,
    )

    report_parser = analytics_subparsers.add_parser("report", help="Full spending report")
    report_parser.add_argument("--top", type=int, default=10, help="Number of top merchants")
    report_parser.set_defaults(func=cmd_report)

    drilldown_parser = analytics_subparsers.add_parser(
        "drilldown", help="Spending one level below a category"
    )
    drilldown_parser.add_argument("category", help="Category name")
    drilldown_parser.set_defaults(func=cmd_drilldown)
