"""Symbol importance weights used for edge weighting.

The multipliers and thresholds below are empirically tuned. They are kept
as named constants so they can be adjusted without touching the rules.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

BASE_WEIGHT = 1.0

MEANINGFUL_LONG_LENGTH = 8
MEANINGFUL_LONG_MULTIPLIER = 10.0
MEANINGFUL_SHORT_LENGTH = 5
MEANINGFUL_SHORT_MULTIPLIER = 5.0

PRIVATE_MULTIPLIER = 0.1

# (definition count strictly above, multiplier), checked in order
GENERIC_DEFINITION_PENALTIES: tuple[tuple[int, float], ...] = (
    (10, 0.05),
    (5, 0.1),
    (3, 0.5),
)

FEATURE_MATCH_MULTIPLIER = 10.0
DOMAIN_MATCH_MULTIPLIER = 3.0

HOOK_MULTIPLIER = 5.0
UTILITY_MULTIPLIER = 3.0
SCHEMA_MULTIPLIER = 4.0
SERVICE_MULTIPLIER = 3.0

SHORT_NAME_LENGTH = 2
SHORT_NAME_MULTIPLIER = 0.1

MENTIONED_IDENTIFIER_MULTIPLIER = 10.0

FEATURE_SUFFIXES = re.compile(r"(s|ing|ed|er)$")
MIN_FEATURE_ROOT_LENGTH = 3

_VERB_PREFIXES = (
    "get|set|create|build|parse|format|validate|convert|transform|calculate"
    "|compute|extract|generate|make|find|filter|map|reduce|merge|clone|deep"
    "|shallow|is|has|can|should|will"
)

NAMING_PATTERNS: dict[str, re.Pattern[str]] = {
    "hook": re.compile(r"^use[A-Z][a-zA-Z0-9]*$"),
    "hoc": re.compile(r"^with[A-Z]"),
    "context": re.compile(r"(Context|Provider)$"),
    "schema": re.compile(r"(Schema|Validator|Dto|Zod|Yup)$", re.IGNORECASE),
    "service": re.compile(
        r"(Service|Client|Api|Repository|Store|Manager|Handler|Controller)$"
    ),
    "guard": re.compile(r"^(is|has|can|should|will|assert)(?:[A-Z]|_[a-z0-9])"),
    "utility": re.compile(rf"^({_VERB_PREFIXES})(?:[A-Z]|_[a-z0-9])"),
    "constant": re.compile(r"^[A-Z][A-Z0-9_]+$"),
    "type": re.compile(
        r"^(I[A-Z]|T[A-Z])|((Props|Config|Options|Params|Args|Context|State"
        r"|Data|Result|Response|Request|Payload)$)"
    ),
    "component": re.compile(r"^[A-Z][a-z][a-zA-Z0-9]*$"),
}


def is_hook_name(name: str) -> bool:
    return bool(NAMING_PATTERNS["hook"].search(name))


def is_utility_name(name: str) -> bool:
    return bool(NAMING_PATTERNS["utility"].search(name))


def is_schema_name(name: str) -> bool:
    return bool(NAMING_PATTERNS["schema"].search(name))


def is_service_name(name: str) -> bool:
    return bool(NAMING_PATTERNS["service"].search(name))


def detect_naming_pattern(name: str) -> str | None:
    """Return the first naming convention a symbol follows, most specific first.

    Examples:
        >>> detect_naming_pattern("useAuth")
        'hook'
        >>> detect_naming_pattern("get_user")
        'utility'
        >>> detect_naming_pattern("x") is None
        True
    """
    for pattern_name, pattern in NAMING_PATTERNS.items():
        if pattern_name == "component" and is_hook_name(name):
            continue
        if pattern.search(name):
            return pattern_name
    return None


def matches_feature(symbol_name: str, feature: str) -> bool:
    """Check whether a symbol name refers to a feature.

    The feature matches as a case-insensitive substring, or through its
    root with one trailing ``s``/``ing``/``ed``/``er`` removed when that
    root is at least three characters long ("booking" matches "bookSlot").
    """
    lower_symbol = symbol_name.lower()
    lower_feature = feature.lower()
    if lower_feature in lower_symbol:
        return True
    root = FEATURE_SUFFIXES.sub("", lower_feature)
    return len(root) >= MIN_FEATURE_ROOT_LENGTH and root in lower_symbol


def matches_any_domain(symbol_name: str, domains: Sequence[str] | None) -> bool:
    return any(
        matches_feature(symbol_name, domain) for domain in domains or () if domain
    )


def symbol_weight(
    symbol_name: str,
    definition_count: int,
    matches_feature: bool,
    matches_domain: bool = False,
) -> float:
    """Score how much a reference to this symbol says about file importance.

    Rules are multiplicative and applied in this order: naming pattern
    bonus, private penalty, generic-name penalty (defined in many files),
    feature or domain boost, convention bonuses (hook, utility, schema,
    service), very-short-name penalty.

    Args:
        symbol_name: The referenced symbol.
        definition_count: Number of files defining the symbol.
        matches_feature: The symbol matches the requested feature.
        matches_domain: The symbol matches one of the requested domains.
            Only used when matches_feature is false.

    Returns:
        A positive weight; 1.0 is the baseline.
    """
    weight = BASE_WEIGHT
    length = len(symbol_name)

    if detect_naming_pattern(symbol_name) is not None:
        if length >= MEANINGFUL_LONG_LENGTH:
            weight *= MEANINGFUL_LONG_MULTIPLIER
        elif length >= MEANINGFUL_SHORT_LENGTH:
            weight *= MEANINGFUL_SHORT_MULTIPLIER

    if symbol_name.startswith("_"):
        weight *= PRIVATE_MULTIPLIER

    for threshold, multiplier in GENERIC_DEFINITION_PENALTIES:
        if definition_count > threshold:
            weight *= multiplier
            break

    if matches_feature:
        weight *= FEATURE_MATCH_MULTIPLIER
    elif matches_domain:
        weight *= DOMAIN_MATCH_MULTIPLIER

    if is_hook_name(symbol_name):
        weight *= HOOK_MULTIPLIER
    if is_utility_name(symbol_name):
        weight *= UTILITY_MULTIPLIER
    if is_schema_name(symbol_name):
        weight *= SCHEMA_MULTIPLIER
    if is_service_name(symbol_name):
        weight *= SERVICE_MULTIPLIER

    if length <= SHORT_NAME_LENGTH:
        weight *= SHORT_NAME_MULTIPLIER

    return weight


def is_mentioned_identifier(
    symbol_name: str,
    feature: str | None = None,
    domains: Sequence[str] | None = None,
) -> bool:
    """Check whether a symbol is named after the feature or a domain.

    Stronger than ``matches_feature``: the symbol must equal the
    identifier, or start with it before a character that is not lowercase,
    or end with it after one that is not uppercase (``BookingService``,
    ``booking2fa`` and ``createBooking`` for "booking", but not
    ``rebookingsLog``).
    """
    identifiers = [feature.lower()] if feature else []
    identifiers.extend(domain.lower() for domain in domains or ())
    lower_symbol = symbol_name.lower()

    for identifier in identifiers:
        if not identifier:
            continue
        if lower_symbol == identifier:
            return True
        if lower_symbol.startswith(identifier):
            next_char = symbol_name[len(identifier)]
            if not next_char.islower():
                return True
        if lower_symbol.endswith(identifier):
            prev_char = symbol_name[-len(identifier) - 1]
            if not prev_char.isupper():
                return True
    return False
