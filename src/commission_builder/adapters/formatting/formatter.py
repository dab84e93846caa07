# src/commission_builder/adapters/formatting/formatter.py
"""
Summary Formatter - Text Formatting and Presentation

This module turns the catalog, the selection and the price breakdown into
display text: price tags for tiers, styles and add-ons, the reference
discount hint, and the plain-text summary copied to the clipboard. Amounts
are converted into the selected currency here and nowhere else.

Files that USE this module:
- commission_builder.application.wizard (summary_text for the summary step)
- commission_builder.adapters.export.pdf_exporter (shared labels and add-on lines)
- commission_builder.app (prints the summary)
- tests.test_formatter (unit tests)

Files that this module USES:
- commission_builder.domain.models (Catalog, SelectionState, Breakdown)
- commission_builder.domain.default_catalog (default label templates)
- commission_builder.domain.pricing (format_price, addon_amount, style_amount, resolve_tier)
"""
from __future__ import annotations

from typing import List

from commission_builder.domain.default_catalog import DEFAULT_LABELS
from commission_builder.domain.models import (
    ADDON_PERCENT,
    STYLE_NONE,
    Addon,
    ArtStyle,
    Breakdown,
    Catalog,
    Currency,
    SelectionState,
)
from commission_builder.domain.pricing import addon_amount, format_price, resolve_tier, style_amount


def _tag_amount(amount: float, kind: str) -> float:
    """Percent-based price tags are shown in whole base-currency units."""
    return float(round(amount)) if kind == ADDON_PERCENT else amount


def addon_price_tag(addon: Addon, base: float, currency: Currency) -> str:
    """
    Price tag shown next to an add-on.

    Args:
        addon: Add-on definition
        base: Selected tier price
        currency: Display currency

    Returns:
        '$7.00 each' for quantity add-ons, '+$15.00' otherwise
    """
    if addon.has_quantity:
        return f"{format_price(addon.value, currency)} each"
    return f"+{format_price(_tag_amount(addon_amount(addon, base), addon.kind), currency)}"


def style_price_tag(style: ArtStyle, base: float, currency: Currency) -> str:
    if style.kind == STYLE_NONE:
        return "(no fee)"
    return f"(+{format_price(_tag_amount(style_amount(style, base), ADDON_PERCENT), currency)})"


def reference_discount_text(catalog: Catalog, currency: Currency) -> str:
    """
    Fill the reference discount label template.

    Placeholders: {currency} (symbol), {amount} (per extra file), {max} (cap).
    """
    template = catalog.label("referenceDiscountText", DEFAULT_LABELS["referenceDiscountText"])
    policy = catalog.discount_policy
    return (
        template
        .replace("{currency}", currency.symbol)
        .replace("{amount}", f"{policy.per_file_amount:g}")
        .replace("{max}", f"{policy.max_discount:g}")
    )


def addon_labels(catalog: Catalog, state: SelectionState, with_counts: bool = False) -> List[str]:
    """
    Labels of the selected add-ons in selection order.

    Args:
        with_counts: Append ' xN' to quantity add-ons

    Returns:
        List of labels (unknown ids are shown as the raw id)
    """
    commission_type = catalog.find_type(state.selected_type_id)
    labels = []
    for addon_id, value in state.selected_addons.items():
        addon = commission_type.find_addon(addon_id) if commission_type else None
        if addon is None:
            labels.append(addon_id)
        elif with_counts and addon.has_quantity:
            labels.append(f"{addon.label} x{value}")
        else:
            labels.append(addon.label)
    return labels


def style_label(catalog: Catalog, state: SelectionState) -> str:
    style = catalog.find_style(state.selected_style_id)
    return style.label if style else state.selected_style_id


def summary_lines(catalog: Catalog, state: SelectionState, breakdown: Breakdown) -> List[str]:
    """
    Plain-text summary, one field per line.

    Args:
        catalog: Catalog for labels and currency
        state: Current selection
        breakdown: Breakdown computed for state

    Returns:
        List of summary lines
    """
    currency = catalog.currency(state.currency)
    commission_type = catalog.find_type(state.selected_type_id)
    sub_type = catalog.find_sub_type(commission_type, state.selected_sub_id)
    tier = resolve_tier(catalog, state)

    lines = []
    if state.username.strip():
        lines.append(f"Client: {state.username}")
    if state.description.strip():
        lines.append(f"Description: {state.description}")

    tier_name = tier.name if tier else "—"
    tier_price = tier.price if tier else 0
    file_names = ", ".join(f.name for f in state.files) or "—"

    lines.extend([
        f"Type: {commission_type.name if commission_type else ''}",
        f"Subtype: {sub_type.name if sub_type else ''}",
        f"Tier: {tier_name} ({format_price(tier_price, currency)})",
        f"Style: {style_label(catalog, state)}",
        f"Currency: {currency.name}",
        f"Add-ons: {'; '.join(addon_labels(catalog, state)) or 'None'}",
        f"Reference sheets uploaded: {len(state.files)} ({file_names})",
        f"Reference discount applied: -{format_price(breakdown.ref_discount, currency)}",
        f"Estimated total: {format_price(breakdown.total, currency)}",
    ])
    return lines


def summary_text(catalog: Catalog, state: SelectionState, breakdown: Breakdown) -> str:
    """Summary lines joined for the clipboard."""
    return "\n".join(summary_lines(catalog, state, breakdown))
