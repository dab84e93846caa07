# src/commission_builder/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Catalog definitions (currencies, commission types, tiers, add-ons, styles)
- The user's in-progress selection
- The price breakdown produced by the pricing engine

Files that USE this module:
- commission_builder.domain.pricing (computes breakdowns from catalog + selection)
- commission_builder.application.* (all services use domain models)
- commission_builder.adapters.* (adapters create and read domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- commission_builder.domain.errors (ResolutionMiss for strict lookups)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from collections import OrderedDict  # Ordered add-on selection mapping
from dataclasses import dataclass, field  # Decorators for creating data classes
from enum import Enum  # Wizard step enumeration
from typing import Any, List, Mapping, Optional, Tuple, Union

from commission_builder.domain.errors import ResolutionMiss

# Base currency every stored price is expressed in
BASE_CURRENCY = "USD"

# Add-on id whose selection value is an item count instead of a flag
ITEM_PROP_ADDON_ID = "itemProp"

# Art style that never adds a fee; always present and selected by default
DEFAULT_STYLE_ID = "style_basic"

ADDON_FLAT = "flat"
ADDON_PERCENT = "percent"
STYLE_NONE = "none"
STYLE_PERCENT = "percent"


class Step(str, Enum):
    """Wizard steps in their strict linear order."""
    TYPE = "type"
    SUBTYPE = "subtype"
    DETAILS = "details"
    UPLOAD = "upload"
    SUMMARY = "summary"
    TOS = "tos"


STEP_ORDER: Tuple[Step, ...] = (
    Step.TYPE,
    Step.SUBTYPE,
    Step.DETAILS,
    Step.UPLOAD,
    Step.SUMMARY,
    Step.TOS,
)


@dataclass(frozen=True)
class Currency:
    """
    Display currency.

    Attributes:
        code: ISO-like currency code (e.g. "USD")
        symbol: Symbol printed before amounts
        name: Human readable name
        rate: Multiplier from the base currency into this currency
    """
    code: str
    symbol: str
    name: str
    rate: float = 1.0


@dataclass(frozen=True)
class Tier:
    """A priced service level within a sub-type (price in base currency)."""
    name: str
    price: float


@dataclass(frozen=True)
class SubType:
    id: str
    name: str
    tiers: Tuple[Tier, ...]

    def tier_at(self, index: int) -> Tier:
        """Return the tier at index, or the first tier when index is out of range."""
        if 0 <= index < len(self.tiers):
            return self.tiers[index]
        return self.tiers[0]


@dataclass(frozen=True)
class Addon:
    """
    Optional extra charged on top of the tier price.

    Attributes:
        id: Add-on identifier (unique within a commission type)
        label: Display label
        kind: "flat" (value in base currency) or "percent" (of the tier price)
        value: Flat amount or percentage
    """
    id: str
    label: str
    kind: str
    value: float

    @property
    def has_quantity(self) -> bool:
        return self.id == ITEM_PROP_ADDON_ID


@dataclass(frozen=True)
class ArtStyle:
    id: str
    label: str
    kind: str = STYLE_NONE
    value: float = 0.0


@dataclass(frozen=True)
class DiscountPolicy:
    """
    Reference-file discount rules.

    Attributes:
        per_file_amount: Discount earned by every reference after the first
        max_discount: Cap on the total reference discount
    """
    per_file_amount: float = 2.0
    max_discount: float = 4.0


@dataclass(frozen=True)
class CommissionType:
    id: str
    name: str
    price_range_label: str = ""
    sub_types: Tuple[SubType, ...] = ()
    addons: Tuple[Addon, ...] = ()
    coming_soon: bool = False

    def find_addon(self, addon_id: str) -> Optional[Addon]:
        for addon in self.addons:
            if addon.id == addon_id:
                return addon
        return None


@dataclass(frozen=True)
class TermsOfService:
    content: str = ""
    agreement_text: str = "I have read and agree to the Terms of Service"


@dataclass(frozen=True)
class Catalog:
    """
    Read-only description of everything that can be ordered and how it is priced.

    Attributes:
        commission_types: Commission types in display order
        currencies: Currency code -> Currency
        default_currency: Code selected for a fresh session
        discount_policy: Reference-file discount rules
        art_styles: Style id -> ArtStyle (always contains the no-fee style)
        labels: UI text overrides
        terms_of_service: ToS text shown before export
        theme: Raw theme document, passed through to renderers untouched
        source: Where the catalog came from ("default" or source names)
        warnings: Non-fatal problems met while loading
    """
    commission_types: Tuple[CommissionType, ...]
    currencies: Mapping[str, Currency]
    default_currency: str = BASE_CURRENCY
    discount_policy: DiscountPolicy = DiscountPolicy()
    art_styles: Mapping[str, ArtStyle] = field(default_factory=dict)
    labels: Mapping[str, str] = field(default_factory=dict)
    terms_of_service: TermsOfService = TermsOfService()
    theme: Mapping[str, Any] = field(default_factory=dict)
    source: str = "default"
    warnings: Tuple[str, ...] = ()

    def find_type(self, type_id: Optional[str]) -> Optional[CommissionType]:
        """Look up a commission type by id; None when absent."""
        if not type_id:
            return None
        for commission_type in self.commission_types:
            if commission_type.id == type_id:
                return commission_type
        return None

    @staticmethod
    def find_sub_type(commission_type: Optional[CommissionType], sub_id: Optional[str]) -> Optional[SubType]:
        """Look up a sub-type within a commission type; None when either is absent."""
        if commission_type is None or not sub_id:
            return None
        for sub_type in commission_type.sub_types:
            if sub_type.id == sub_id:
                return sub_type
        return None

    def require_type(self, type_id: Optional[str]) -> CommissionType:
        """
        Strict variant of find_type.

        Raises:
            ResolutionMiss: If the id is not in the catalog
        """
        commission_type = self.find_type(type_id)
        if commission_type is None:
            raise ResolutionMiss(f"Unknown commission type: {type_id!r}")
        return commission_type

    def find_style(self, style_id: Optional[str]) -> Optional[ArtStyle]:
        if not style_id:
            return None
        return self.art_styles.get(style_id)

    def currency(self, code: Optional[str]) -> Currency:
        """Return the currency for code, falling back to the default currency, then to the base currency."""
        if code and code in self.currencies:
            return self.currencies[code]
        if self.default_currency in self.currencies:
            return self.currencies[self.default_currency]
        return Currency(code=BASE_CURRENCY, symbol="$", name="US Dollar", rate=1.0)

    def label(self, key: str, default: str = "") -> str:
        return self.labels.get(key, default)


@dataclass
class FileRef:
    """
    A reference file attached to the order.

    Only (name, size, last_modified) survive persistence; kind is re-derived
    and handle is the in-memory resource registered for the upload.
    """
    name: str
    size: int
    last_modified: int
    kind: str = "other"
    handle: Optional[Any] = field(default=None, compare=False, repr=False)

    @property
    def identity(self) -> Tuple[str, int, int]:
        return (self.name, self.size, self.last_modified)


AddonValue = Union[int, bool]


@dataclass
class SelectionState:
    """The user's in-progress order plus the wizard's current step (mutable)."""
    step: Step = Step.TYPE
    selected_type_id: Optional[str] = None
    selected_sub_id: Optional[str] = None
    selected_tier_index: int = 0
    selected_style_id: str = DEFAULT_STYLE_ID
    selected_addons: "OrderedDict[str, AddonValue]" = field(default_factory=OrderedDict)
    files: List[FileRef] = field(default_factory=list)
    username: str = ""
    description: str = ""
    currency: str = BASE_CURRENCY
    tos_accepted: bool = False

    def clear_downstream_of_type(self) -> None:
        self.selected_sub_id = None
        self.selected_tier_index = 0
        self.selected_addons.clear()
        self.selected_style_id = DEFAULT_STYLE_ID
        self.files = []

    def clear_downstream_of_sub(self) -> None:
        self.selected_tier_index = 0
        self.selected_addons.clear()


@dataclass(frozen=True)
class Breakdown:
    """
    Decomposition of the estimated price, in base currency.

    Attributes:
        base: Selected tier price
        style_add: Art style surcharge
        addons_sum: Sum of selected add-ons
        ref_discount: Reference-file discount (already capped)
        total: Final estimate, never negative
    """
    base: float = 0.0
    style_add: float = 0.0
    addons_sum: float = 0.0
    ref_discount: float = 0.0
    total: float = 0.0

    @classmethod
    def zero(cls) -> Breakdown:
        return cls()
