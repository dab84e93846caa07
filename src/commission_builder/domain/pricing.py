# src/commission_builder/domain/pricing.py
"""
Pricing Engine - Deterministic Price Computation

This module turns a catalog and a selection into a price breakdown. Every
amount it returns is in the base currency; conversion into the display
currency is done only by convert() at presentation time.

Files that USE this module:
- commission_builder.application.wizard (recomputes the breakdown after every action)
- commission_builder.adapters.formatting.formatter (per-item price tags)
- commission_builder.adapters.export.pdf_exporter (breakdown section)
- tests.test_pricing (unit tests)

Files that this module USES:
- commission_builder.domain.models (Catalog, SelectionState, Breakdown)
"""
from __future__ import annotations

from typing import Optional

from commission_builder.domain.models import (
    ADDON_PERCENT,
    STYLE_PERCENT,
    Addon,
    ArtStyle,
    Breakdown,
    Catalog,
    Currency,
    DiscountPolicy,
    SelectionState,
    Tier,
)


def clamp_quantity(value) -> int:
    """
    Coerce an item count to an integer >= 1.

    Booleans, None, non-finite numbers and anything unparsable count as a
    single item.

    Args:
        value: Raw quantity (int, float, numeric string, bool or None)

    Returns:
        Integer quantity, at least 1
    """
    if isinstance(value, bool) or value is None:
        return 1
    try:
        quantity = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(1, quantity)


def addon_amount(addon: Addon, base: float, selection_value=True) -> float:
    """
    Amount a single selected add-on contributes.

    Args:
        addon: Add-on definition
        base: Selected tier price
        selection_value: Stored selection (True for flags, a count for quantity add-ons)

    Returns:
        Contribution in base currency
    """
    if addon.kind == ADDON_PERCENT:
        return base * (addon.value / 100)
    if addon.has_quantity:
        return addon.value * clamp_quantity(selection_value)
    return addon.value


def style_amount(style: Optional[ArtStyle], base: float) -> float:
    if style is None or style.kind != STYLE_PERCENT:
        return 0.0
    return base * (style.value / 100)


def reference_discount(policy: DiscountPolicy, file_count: int) -> float:
    """
    Discount earned by reference files beyond the first, capped.

    Every attached file counts, whatever its kind.
    """
    extra_files = max(0, file_count - 1)
    return min(policy.per_file_amount * extra_files, policy.max_discount)


def resolve_tier(catalog: Catalog, selection: SelectionState) -> Optional[Tier]:
    """Return the selected tier, or None when type/sub-type cannot be resolved."""
    commission_type = catalog.find_type(selection.selected_type_id)
    sub_type = catalog.find_sub_type(commission_type, selection.selected_sub_id)
    if sub_type is None or not sub_type.tiers:
        return None
    return sub_type.tier_at(selection.selected_tier_index)


def compute_breakdown(catalog: Catalog, selection: SelectionState) -> Breakdown:
    """
    Compute the price breakdown for the current selection.

    Pure function: neither the catalog nor the selection is modified. When the
    type, sub-type or tier cannot be resolved an all-zero breakdown is returned.

    Args:
        catalog: Catalog providing prices and rules
        selection: Current selection state

    Returns:
        Breakdown in base currency
    """
    commission_type = catalog.find_type(selection.selected_type_id)
    tier = resolve_tier(catalog, selection)
    if commission_type is None or tier is None:
        return Breakdown.zero()

    base = tier.price
    style_add = style_amount(catalog.find_style(selection.selected_style_id), base)

    addons_sum = 0.0
    for addon in commission_type.addons:
        if addon.id not in selection.selected_addons:
            continue
        addons_sum += addon_amount(addon, base, selection.selected_addons[addon.id])

    ref_discount = reference_discount(catalog.discount_policy, len(selection.files))
    total = max(0.0, base + style_add + addons_sum - ref_discount)

    return Breakdown(
        base=base,
        style_add=style_add,
        addons_sum=addons_sum,
        ref_discount=ref_discount,
        total=total,
    )


def convert(amount: float, currency: Currency) -> float:
    """Convert a base-currency amount into the display currency."""
    return amount * currency.rate


def format_price(amount: float, currency: Currency) -> str:
    """
    Format a base-currency amount for display, e.g. '$45.00' or '€41.40'.

    Args:
        amount: Amount in base currency
        currency: Display currency

    Returns:
        Symbol followed by the converted amount to 2 decimal places
    """
    return f"{currency.symbol}{convert(amount, currency):.2f}"
