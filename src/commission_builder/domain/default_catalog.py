# src/commission_builder/domain/default_catalog.py
"""
Default Catalog - Built-in Commission Definitions

The catalog used when no external source is configured, or when loading one
fails. Keeping it in code means the wizard stays usable with possibly stale
prices instead of not starting at all.

Files that USE this module:
- commission_builder.application.catalog_service (fallback catalog)
- tests.* (realistic catalog fixture)

Files that this module USES:
- commission_builder.domain.models (catalog dataclasses)
"""
from __future__ import annotations

from commission_builder.domain.models import (
    ADDON_FLAT,
    ADDON_PERCENT,
    DEFAULT_STYLE_ID,
    ITEM_PROP_ADDON_ID,
    STYLE_NONE,
    STYLE_PERCENT,
    Addon,
    ArtStyle,
    Catalog,
    CommissionType,
    Currency,
    DiscountPolicy,
    SubType,
    TermsOfService,
    Tier,
)

DEFAULT_LABELS = {
    "siteTitle": "Commission Builder",
    "footerText": "Prices are estimates and may change after review.",
    "currencyLabel": "Currency",
    "nameFieldLabel": "Your name",
    "nameFieldPlaceholder": "Name or handle",
    "descriptionFieldLabel": "Describe your commission",
    "descriptionFieldPlaceholder": "Characters, pose, mood...",
    "referenceDiscountText": "Each extra reference saves {currency}{amount} (max {currency}{max})",
}

DEFAULT_TOS = TermsOfService(
    content="\n".join([
        "# Terms of Service",
        "",
        "* Payment is due before work begins.",
        "* Two rounds of minor revisions are included.",
        "* Finished pieces may be shown in the artist's portfolio.",
    ]),
    agreement_text="I have read and agree to the Terms of Service",
)


def _character_addons() -> tuple:
    return (
        Addon(id="addChar", label="Additional character", kind=ADDON_PERCENT, value=75),
        Addon(id=ITEM_PROP_ADDON_ID, label="Item/Prop", kind=ADDON_FLAT, value=7),
        Addon(id="simpleBg", label="Simple background", kind=ADDON_FLAT, value=10),
        Addon(id="rush", label="Rush delivery", kind=ADDON_PERCENT, value=30),
    )


def build_default_catalog() -> Catalog:
    """
    Build the baked-in catalog.

    Returns:
        Catalog with source "default" and no warnings
    """
    character = CommissionType(
        id="character",
        name="Character Art",
        price_range_label="$20 - $120",
        sub_types=(
            SubType(id="bust", name="Bust", tiers=(
                Tier("Sketch", 20),
                Tier("Flat color", 35),
                Tier("Fully shaded", 50),
            )),
            SubType(id="halfBody", name="Half body", tiers=(
                Tier("Sketch", 30),
                Tier("Flat color", 50),
                Tier("Fully shaded", 75),
            )),
            SubType(id="fullBody", name="Full body", tiers=(
                Tier("Sketch", 45),
                Tier("Flat color", 80),
                Tier("Fully shaded", 120),
            )),
        ),
        addons=_character_addons(),
    )
    emotes = CommissionType(
        id="emotes",
        name="Emotes & Badges",
        price_range_label="$10 - $60",
        sub_types=(
            SubType(id="singleEmote", name="Single emote", tiers=(
                Tier("Static", 10),
                Tier("Animated", 25),
            )),
            SubType(id="emotePack", name="Pack of 5", tiers=(
                Tier("Static", 40),
                Tier("Animated", 60),
            )),
        ),
        addons=(
            Addon(id="subBadge", label="Matching sub badge", kind=ADDON_FLAT, value=8),
            Addon(id="rush", label="Rush delivery", kind=ADDON_PERCENT, value=30),
        ),
    )
    ref_sheet = CommissionType(
        id="refSheet",
        name="Reference Sheet",
        price_range_label="$60 - $150",
        sub_types=(
            SubType(id="standard", name="Standard sheet", tiers=(
                Tier("Front view", 60),
                Tier("Front + back", 95),
                Tier("Turnaround", 150),
            )),
        ),
        addons=_character_addons(),
    )
    other = CommissionType(
        id="other",
        name="Something else",
        price_range_label="Quote on request",
        sub_types=(
            SubType(id="custom", name="Custom request", tiers=(Tier("Consultation", 0),)),
        ),
        coming_soon=True,
    )

    return Catalog(
        commission_types=(character, emotes, ref_sheet, other),
        currencies={
            "USD": Currency(code="USD", symbol="$", name="US Dollar", rate=1.0),
            "EUR": Currency(code="EUR", symbol="€", name="Euro", rate=0.92),
            "GBP": Currency(code="GBP", symbol="£", name="British Pound", rate=0.79),
            "CAD": Currency(code="CAD", symbol="C$", name="Canadian Dollar", rate=1.36),
        },
        default_currency="USD",
        discount_policy=DiscountPolicy(per_file_amount=2, max_discount=4),
        art_styles={
            DEFAULT_STYLE_ID: ArtStyle(id=DEFAULT_STYLE_ID, label="Basic", kind=STYLE_NONE, value=0),
            "style_painterly": ArtStyle(id="style_painterly", label="Painterly", kind=STYLE_PERCENT, value=25),
            "style_pixel": ArtStyle(id="style_pixel", label="Pixel art", kind=STYLE_PERCENT, value=15),
        },
        labels=dict(DEFAULT_LABELS),
        terms_of_service=DEFAULT_TOS,
        source="default",
    )
