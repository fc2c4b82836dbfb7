# =============================================================================
# core/marketing.py  —  Derived marketing fields for a ProductSummary
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The LLM writes the creative parts of a summary (title, short
#   description, marketing copy).  The structured parts are computed here,
#   deterministically, from the product's price, tags and category name:
#
#     key_features     first 3 tags + price tier + "<category> Specialized"
#     target_audience  price-tier audience + (optional) category audience
#     use_case         one fixed sentence chosen by category
#
# RULE TABLES:
#   Each rule table is an ordered list of (predicate, label) pairs.  The
#   first predicate that matches wins.  Price thresholds are strict
#   (> 1000, > 500), so exactly 1000.00 is still the middle tier.
# =============================================================================

from typing import Callable, Iterable, Optional

from core.models import Product

Rule = tuple[Callable[[Product], bool], str]


def _category_contains(word: str) -> Callable[[Product], bool]:
    needle = word.lower()
    return lambda product: needle in (product.category_name or "").lower()


def _always(product: Product) -> bool:
    return True


PRICE_FEATURE_RULES: list[Rule] = [
    (lambda p: p.price > 1000, "Premium Quality"),
    (lambda p: p.price > 500, "Professional Grade"),
    (_always, "Great Value"),
]

PRICE_AUDIENCE_RULES: list[Rule] = [
    (lambda p: p.price > 1000, "Professional Users"),
    (lambda p: p.price > 500, "Enthusiasts"),
    (_always, "Beginners"),
]

# No fallback: a category matching none of these adds no audience label.
CATEGORY_AUDIENCE_RULES: list[Rule] = [
    (_category_contains("Mountain"), "Adventure Seekers"),
    (_category_contains("Road"), "Speed Enthusiasts"),
    (_category_contains("City"), "Urban Commuters"),
]

USE_CASE_RULES: list[Rule] = [
    (
        _category_contains("Mountain"),
        "Perfect for off-road adventures, trail riding, and mountain biking excursions.",
    ),
    (
        _category_contains("Road"),
        "Ideal for road cycling, racing, and long-distance rides on paved surfaces.",
    ),
    (
        _category_contains("City"),
        "Great for daily commuting, urban exploration, and casual city riding.",
    ),
    (_always, "Versatile design suitable for various cycling activities and terrains."),
]


def first_match(rules: Iterable[Rule], product: Product) -> Optional[str]:
    """Label of the first rule whose predicate holds, or None."""
    for predicate, label in rules:
        if predicate(product):
            return label
    return None


def _unique(items: Iterable[str]) -> list[str]:
    # dict preserves insertion order -> first occurrence wins
    return list(dict.fromkeys(items))


def extract_key_features(product: Product) -> list[str]:
    features = list(product.tags[:3])
    features.append(first_match(PRICE_FEATURE_RULES, product))
    features.append(f"{product.category_name} Specialized")
    return _unique(features)


def determine_target_audience(product: Product) -> list[str]:
    audiences = [first_match(PRICE_AUDIENCE_RULES, product)]
    category_audience = first_match(CATEGORY_AUDIENCE_RULES, product)
    if category_audience is not None:
        audiences.append(category_audience)
    return _unique(audiences)


def generate_use_case(product: Product) -> str:
    return first_match(USE_CASE_RULES, product)
