"""Tests for renaming rule and settings storage."""

from models.payee_rule import PayeeRenamingRule
from services.rules import RULES_KEY


def make_rule(rule_id, pattern="NETFLIX", replacement="Netflix", is_regex=False):
    return PayeeRenamingRule(
        id=rule_id, pattern=pattern, replacement=replacement, is_regex=is_regex
    )


class TestSettingsService:
    """Tests for SettingsService."""

    def test_default_when_missing(self, services):
        assert services.settings.get("missing") is None
        assert services.settings.get("missing", []) == []

    def test_set_and_replace(self, services):
        services.settings.set("currency", "EUR")
        services.settings.set("currency", "USD")

        assert services.settings.get("currency") == "USD"

    def test_json_values(self, services):
        services.settings.set("nested", {"a": [1, 2], "b": None})

        assert services.settings.get("nested") == {"a": [1, 2], "b": None}


class TestRuleService:
    """Tests for RuleService."""

    def test_empty(self, services):
        assert services.rules.find_all() == []

    def test_add_appends_in_order(self, services):
        services.rules.add(make_rule("rule-1"))
        services.rules.add(make_rule("rule-2", pattern="^SPOTIFY.*", is_regex=True))

        rules = services.rules.find_all()

        assert [r.id for r in rules] == ["rule-1", "rule-2"]
        assert rules[1].is_regex is True
        assert rules[1].enabled is True

    def test_stored_format(self, services):
        """Test rules are stored as a JSON list with camelCase keys."""
        services.rules.add(make_rule("rule-1"))

        assert services.settings.get(RULES_KEY) == [
            {
                "id": "rule-1",
                "pattern": "NETFLIX",
                "replacement": "Netflix",
                "isRegex": False,
                "enabled": True,
            }
        ]

    def test_set_enabled(self, services):
        services.rules.add(make_rule("rule-1"))

        assert services.rules.set_enabled("rule-1", False) is True
        assert services.rules.find_all()[0].enabled is False
        assert services.rules.set_enabled("rule-missing", False) is False

    def test_delete(self, services):
        services.rules.add(make_rule("rule-1"))
        services.rules.add(make_rule("rule-2"))

        assert services.rules.delete("rule-1") is True
        assert services.rules.delete("rule-1") is False
        assert [r.id for r in services.rules.find_all()] == ["rule-2"]

    def test_save_all_reorders(self, services):
        services.rules.save_all([make_rule("rule-2"), make_rule("rule-1")])

        assert [r.id for r in services.rules.find_all()] == ["rule-2", "rule-1"]
