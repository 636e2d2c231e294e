"""Payee renaming rule model."""

from dataclasses import dataclass


@dataclass
class PayeeRenamingRule:
    """A rule that rewrites raw payee strings for display.

    Attributes:
        id: Unique rule identifier.
        pattern: Plain text or regular expression, matched case-insensitively.
        replacement: Text substituted for every match.
        is_regex: Whether pattern is a regular expression.
        enabled: Disabled rules are kept but never applied.
    """

    id: str
    pattern: str
    replacement: str
    is_regex: bool = False
    enabled: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pattern": self.pattern,
            "replacement": self.replacement,
            "isRegex": self.is_regex,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PayeeRenamingRule":
        return cls(
            id=data["id"],
            pattern=data["pattern"],
            replacement=data.get("replacement", ""),
            is_regex=bool(data.get("isRegex", False)),
            enabled=bool(data.get("enabled", True)),
        )
