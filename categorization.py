"""Categorization with pattern-based bulk apply.

Categorizing one transaction may categorize its whole merchant group:

1. The category is saved on the transaction.
2. The payee pattern is extracted (trailing dates stripped).
3. Other transactions with the same pattern but a different category are
   looked up. Without any, the flow ends.
4. The caller gets a CategorizationPrompt. If no enabled renaming rule
   matches the payee yet, it may create a pattern rule and apply the category
   to the whole group; otherwise it may only apply the category. Cancel is
   always available.
5. The chosen apply is one bulk update over every transaction currently
   matching the pattern.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from models.payee_rule import PayeeRenamingRule
from models.transaction import Transaction
from payees import apply_rules, exact_rule, extract_pattern, has_matching_rule, pattern_rule
from services.store import PersistenceError, TransactionStore
from logger import get_logger

logger = get_logger()


class BulkApplyChoice(str, Enum):
    CREATE_RULE_AND_APPLY = "create_rule_and_apply"
    APPLY_ONLY = "apply_only"
    CANCEL = "cancel"


@dataclass
class CategorizationPrompt:
    """Pending bulk-apply decision after categorizing one transaction.

    Attributes:
        transaction_id: The transaction that was categorized.
        payee: Its raw payee.
        pattern: Extracted payee pattern shared by the group.
        category: The category that was set.
        similar_count: Other transactions with the pattern and a different category.
        has_rule: Whether an enabled renaming rule already matches the payee.
    """

    transaction_id: str
    payee: str
    pattern: str
    category: str
    similar_count: int
    has_rule: bool

    @property
    def options(self) -> List[BulkApplyChoice]:
        if self.has_rule:
            return [BulkApplyChoice.APPLY_ONLY, BulkApplyChoice.CANCEL]
        return [
            BulkApplyChoice.CREATE_RULE_AND_APPLY,
            BulkApplyChoice.APPLY_ONLY,
            BulkApplyChoice.CANCEL,
        ]


@dataclass
class BulkApplyResult:
    choice: BulkApplyChoice
    updated_count: int = 0
    rule: Optional[PayeeRenamingRule] = None


def matching_transactions(pattern: str, transactions: List[Transaction]) -> List[Transaction]:
    """Transactions whose payee extracts to pattern."""
    return [t for t in transactions if extract_pattern(t.payee) == pattern]


class CategorizationController:
    """Coordinates categorization, similar-transaction search and bulk apply.

    Args:
        store: TransactionStore holding the transactions.
        rules: RuleService for the renaming rules. The rule list is re-read
            for every decision.
    """

    def __init__(self, store: TransactionStore, rules):
        self.store = store
        self.rules = rules

    def categorize(
        self, transaction_id: str, category: Optional[str]
    ) -> Optional[CategorizationPrompt]:
        """Set the category of one transaction.

        Args:
            transaction_id: ID of the transaction to categorize.
            category: Category name, or None to clear the category.

        Returns:
            A CategorizationPrompt if other transactions of the same merchant
            could receive the category too, None otherwise.

        Raises:
            ValueError: If the transaction doesn't exist.
            PersistenceError: If saving the category fails.
        """
        transaction = self.store.find(transaction_id)
        if transaction is None:
            raise ValueError(f"Transaction with ID '{transaction_id}' not found")

        self.store.update_one(transaction_id, {"category": category})
        logger.info(f"Set category of {transaction_id} to {category!r}")

        if not category:
            return None

        pattern = extract_pattern(transaction.payee)
        if not pattern:
            return None

        similar = [
            t
            for t in matching_transactions(pattern, self.store.get_all())
            if t.id != transaction_id and t.category != category
        ]
        if not similar:
            return None

        has_rule = has_matching_rule(transaction.payee, self.rules.find_all())
        logger.debug(
            f"Found {len(similar)} similar transaction(s) for pattern {pattern!r} (has_rule={has_rule})"
        )

        return CategorizationPrompt(
            transaction_id=transaction_id,
            payee=transaction.payee,
            pattern=pattern,
            category=category,
            similar_count=len(similar),
            has_rule=has_rule,
        )

    def resolve(
        self, prompt: CategorizationPrompt, choice: BulkApplyChoice
    ) -> BulkApplyResult:
        """Carry out the caller's choice for a prompt.

        The match set is re-derived from the store, so every transaction
        matching the pattern at this moment is updated, in one bulk call.

        Raises:
            ValueError: If choice is not one of prompt.options.
            PersistenceError: If the bulk update or saving the rule fails.
        """
        if choice not in prompt.options:
            raise ValueError(f"Choice {choice.value} is not available for this prompt")

        if choice == BulkApplyChoice.CANCEL:
            return BulkApplyResult(choice=choice)

        # A rule may have been added since the prompt was built
        if choice == BulkApplyChoice.CREATE_RULE_AND_APPLY and has_matching_rule(
            prompt.payee, self.rules.find_all()
        ):
            logger.info("A matching rule already exists, applying category only")
            choice = BulkApplyChoice.APPLY_ONLY

        matches = matching_transactions(prompt.pattern, self.store.get_all())
        updated = self.store.bulk_update(
            [t.id for t in matches], {"category": prompt.category}
        )
        logger.info(
            f"Applied category {prompt.category!r} to {updated} transaction(s) matching {prompt.pattern!r}"
        )

        rule = None
        if choice == BulkApplyChoice.CREATE_RULE_AND_APPLY:
            rule = pattern_rule(prompt.pattern)
            try:
                self.rules.add(rule)
            except PersistenceError as e:
                raise PersistenceError(
                    f"Category applied to {updated} transaction(s), but saving the renaming rule failed: {e}"
                ) from e
            logger.info(f"Created renaming rule {rule.pattern!r} -> {rule.replacement!r}")

        return BulkApplyResult(choice=choice, updated_count=updated, rule=rule)

    def rename_payee(self, transaction_id: str, new_payee: str) -> PayeeRenamingRule:
        """Rename the payee of a transaction by adding an exact-match rule.

        Only transactions with the identical raw payee are affected.

        Raises:
            ValueError: If the transaction doesn't exist or new_payee is empty.
            PersistenceError: If saving the rule fails.
        """
        new_payee = new_payee.strip()
        if not new_payee:
            raise ValueError("New payee cannot be empty")

        transaction = self.store.find(transaction_id)
        if transaction is None:
            raise ValueError(f"Transaction with ID '{transaction_id}' not found")

        rule = exact_rule(transaction.payee, new_payee)
        self.rules.add(rule)
        logger.info(f"Created renaming rule {rule.pattern!r} -> {new_payee!r}")
        return rule

    def display_payee(self, transaction: Transaction) -> str:
        return apply_rules(transaction.payee, self.rules.find_all())
