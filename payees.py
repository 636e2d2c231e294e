"""Payee normalization: pattern extraction and renaming rules.

Raw payee strings from bank exports are noisy; many embed a per-transaction
date at the end ("JOES GRILL &/25-11-17"). extract_pattern() strips that
suffix so transactions from the same merchant can be grouped, and renaming
rules rewrite raw payees into display names.
"""

import re
import uuid
from typing import List, Optional

from models.payee_rule import PayeeRenamingRule
from logger import get_logger

logger = get_logger()

# Optional whitespace and an optional '&', '/' or '&/' separator before the date
_SEPARATOR = r"\s*(?:&/|[&/])?"

# Applied in order, each once, anchored at the end of the payee
_DATE_SUFFIXES = [
    re.compile(_SEPARATOR + r"(?<!\d)\d{2}-\d{2}-\d{2}(?:\d{2})?\s*$"),  # DD-MM-YY[YY]
    re.compile(_SEPARATOR + r"(?<!\d)\d{4}-\d{2}-\d{2}\s*$"),  # YYYY-MM-DD
    re.compile(_SEPARATOR + r"(?<!\d)\d{2}/\d{2}/\d{2}(?:\d{2})?\s*$"),  # DD/MM/YY[YY]
]

_REGEX_SPECIAL = re.compile(r"[.*+?^${}()|\[\]\\]")

# $$, $& and $1..$99 in replacement strings
_REPLACEMENT_REF = re.compile(r"\$(\$|&|\d{1,2})")


def extract_pattern(payee: str) -> str:
    """Strip a trailing date-like suffix from a raw payee.

    Intentionally heuristic: it exists to group transactions of the same
    merchant whose payee embeds the transaction date.

    Examples:
        "JOES GRILL &/25-11-17" -> "JOES GRILL"
        "JOES GRILL DOWNTOWN" -> "JOES GRILL DOWNTOWN"
    """
    pattern = payee
    for suffix in _DATE_SUFFIXES:
        pattern = suffix.sub("", pattern, count=1)
    return pattern.strip()


def escape_regex(text: str) -> str:
    """Escape regex metacharacters so text matches literally."""
    return _REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), text)


def _compile(rule: PayeeRenamingRule) -> re.Pattern:
    source = rule.pattern if rule.is_regex else escape_regex(rule.pattern)
    return re.compile(source, re.IGNORECASE)


def _expand(replacement: str, match: re.Match) -> str:
    """Expand $&, $1.. and $$ references in a replacement string."""

    def substitute(ref: re.Match) -> str:
        token = ref.group(1)
        if token == "$":
            return "$"
        if token == "&":
            return match.group(0)
        index = int(token)
        if 0 < index <= match.re.groups:
            return match.group(index) or ""
        # "$10" with fewer than ten groups is group 1 followed by a literal "0"
        if len(token) == 2 and 0 < int(token[0]) <= match.re.groups:
            return (match.group(int(token[0])) or "") + token[1]
        return ref.group(0)

    return _REPLACEMENT_REF.sub(substitute, replacement)


def apply_rules(payee: str, rules: List[PayeeRenamingRule]) -> str:
    """Apply all enabled renaming rules, in order, to a payee.

    Each rule replaces every case-insensitive match of its pattern, and its
    output feeds the next rule. A rule with an invalid regex is logged and
    skipped.

    Args:
        payee: Raw payee string.
        rules: Ordered list of renaming rules.

    Returns:
        The renamed payee, trimmed.
    """
    result = payee

    for rule in rules:
        if not rule.enabled:
            continue

        try:
            regex = _compile(rule)
        except re.error as e:
            logger.warning(f"Skipping renaming rule {rule.id} ({rule.pattern!r}): {e}")
            continue

        result = regex.sub(lambda m: _expand(rule.replacement, m), result)

    return result.strip()


def has_matching_rule(payee: str, rules: List[PayeeRenamingRule]) -> bool:
    """Check whether any enabled rule already matches the raw payee."""
    for rule in rules:
        if not rule.enabled:
            continue

        if not rule.is_regex:
            if rule.pattern.lower() in payee.lower():
                return True
            continue

        try:
            if re.search(rule.pattern, payee, re.IGNORECASE):
                return True
        except re.error:
            continue

    return False


def validate_pattern(pattern: str, is_regex: bool) -> Optional[str]:
    """Check a rule pattern before it is saved.

    Returns:
        An error message, or None if the pattern is usable.
    """
    if not pattern:
        return "Pattern cannot be empty"
    if not is_regex:
        return None
    try:
        re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        return f"Invalid regular expression: {e}"
    return None


def new_rule_id() -> str:
    return f"rule-{uuid.uuid4().hex[:12]}"


def pattern_rule(pattern: str) -> PayeeRenamingRule:
    """Rule renaming every payee that starts with pattern to pattern."""
    return PayeeRenamingRule(
        id=new_rule_id(),
        pattern=f"^{escape_regex(pattern)}.*",
        replacement=pattern,
        is_regex=True,
        enabled=True,
    )


def exact_rule(original_payee: str, new_payee: str) -> PayeeRenamingRule:
    """Rule renaming exactly one raw payee string."""
    return PayeeRenamingRule(
        id=new_rule_id(),
        pattern=f"^{escape_regex(original_payee)}$",
        replacement=new_payee,
        is_regex=True,
        enabled=True,
    )
