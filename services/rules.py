"""Payee renaming rule storage.

The rules are one ordered list, read and written as a whole.
"""

from typing import List

from models.payee_rule import PayeeRenamingRule

RULES_KEY = "payee-renaming-rules"


class RuleService:
    """Service for managing the ordered payee renaming rule list."""

    def __init__(self, settings):
        """Initialize the rule service.

        Args:
            settings: SettingsService used as the keyed store.
        """
        self.settings = settings

    def find_all(self) -> List[PayeeRenamingRule]:
        """Get all rules in application order."""
        return [
            PayeeRenamingRule.from_dict(data)
            for data in self.settings.get(RULES_KEY, [])
        ]

    def save_all(self, rules: List[PayeeRenamingRule]) -> None:
        self.settings.set(RULES_KEY, [rule.to_dict() for rule in rules])

    def add(self, rule: PayeeRenamingRule) -> PayeeRenamingRule:
        """Append a rule to the end of the list."""
        rules = self.find_all()
        rules.append(rule)
        self.save_all(rules)
        return rule

    def set_enabled(self, rule_id: str, enabled: bool) -> bool:
        """Enable or disable a rule.

        Returns:
            True if the rule was found, False otherwise.
        """
        rules = self.find_all()
        found = False
        for rule in rules:
            if rule.id == rule_id:
                rule.enabled = enabled
                found = True

        if found:
            self.save_all(rules)
        return found

    def delete(self, rule_id: str) -> bool:
        """Delete a rule by ID.

        Returns:
            True if rule was deleted, False if not found.
        """
        rules = self.find_all()
        remaining = [rule for rule in rules if rule.id != rule_id]
        if len(remaining) == len(rules):
            return False

        self.save_all(remaining)
        return True
