# src/commission_builder/adapters/catalog/schema.py
"""
Catalog Document Schema - Validation of External Catalog JSON

This module defines the Pydantic models for the catalog JSON document and
converts a validated document into the immutable domain Catalog. Only
commissionTypes and currencies are required; every other field has a default.

Files that USE this module:
- commission_builder.application.catalog_service (validates fetched documents)
- tests.test_catalog_service (unit tests)

Files that this module USES:
- commission_builder.domain.models (catalog dataclasses)
- commission_builder.domain.default_catalog (default labels and ToS)
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from commission_builder.domain.default_catalog import DEFAULT_LABELS, DEFAULT_TOS
from commission_builder.domain.models import (
    DEFAULT_STYLE_ID,
    STYLE_NONE,
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


class _Document(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TierDoc(_Document):
    name: str
    price: float = Field(ge=0)


class SubTypeDoc(_Document):
    id: str
    name: str
    tiers: List[TierDoc] = Field(min_length=1)


class AddonDoc(_Document):
    id: str
    label: str
    kind: Literal["flat", "percent"] = Field(default="flat", alias="type")
    value: float = 0.0


class CommissionTypeDoc(_Document):
    id: str
    name: str
    price_range: str = Field(default="", alias="priceRange")
    sub_types: List[SubTypeDoc] = Field(default_factory=list, alias="subTypes")
    addons: List[AddonDoc] = Field(default_factory=list)
    coming_soon: bool = Field(default=False, alias="comingSoon")


class CurrencyDoc(_Document):
    symbol: str
    name: str = ""
    rate: float = Field(default=1.0, gt=0)


class ArtStyleDoc(_Document):
    label: str
    kind: Literal["none", "percent"] = Field(default="none", alias="type")
    value: float = 0.0


class DiscountSettingsDoc(_Document):
    """Discount rules in the discountSettings block (referenceDiscountPerFile, maxReferenceDiscount)."""
    per_file: float = Field(default=2.0, ge=0, alias="referenceDiscountPerFile")
    max_discount: float = Field(default=4.0, ge=0, alias="maxReferenceDiscount")


class DiscountPolicyDoc(_Document):
    per_file: float = Field(default=2.0, ge=0, alias="perFileAmount")
    max_discount: float = Field(default=4.0, ge=0, alias="maxDiscount")


class TermsOfServiceDoc(_Document):
    content: Union[str, List[str]] = ""
    agreement_text: Optional[str] = Field(default=None, alias="agreementText")


class CatalogDocument(_Document):
    """Top-level catalog document."""
    commission_types: List[CommissionTypeDoc] = Field(alias="commissionTypes")
    currencies: Dict[str, CurrencyDoc] = Field(min_length=1)
    default_currency: str = Field(default="USD", alias="defaultCurrency")
    discount_settings: Optional[DiscountSettingsDoc] = Field(default=None, alias="discountSettings")
    discount_policy: Optional[DiscountPolicyDoc] = Field(default=None, alias="discountPolicy")
    art_styles: Optional[Dict[str, ArtStyleDoc]] = Field(default=None, alias="artStyles")
    labels: Dict[str, str] = Field(default_factory=dict)
    terms_of_service: Optional[TermsOfServiceDoc] = Field(default=None, alias="termsOfService")
    theme: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def check_references(self) -> CatalogDocument:
        """Cross-field checks: default currency exists, no-fee style exists."""
        if self.default_currency not in self.currencies:
            raise ValueError(f"defaultCurrency {self.default_currency!r} is not defined in currencies")
        if self.art_styles is not None and DEFAULT_STYLE_ID not in self.art_styles:
            raise ValueError(f"artStyles must define the no-fee style {DEFAULT_STYLE_ID!r}")
        return self

    def _policy(self) -> DiscountPolicy:
        doc = self.discount_policy or self.discount_settings
        if doc is None:
            return DiscountPolicy()
        return DiscountPolicy(per_file_amount=doc.per_file, max_discount=doc.max_discount)

    def _art_styles(self) -> Dict[str, ArtStyle]:
        if self.art_styles is None:
            return {DEFAULT_STYLE_ID: ArtStyle(id=DEFAULT_STYLE_ID, label="Basic", kind=STYLE_NONE)}
        return {
            style_id: ArtStyle(id=style_id, label=doc.label, kind=doc.kind, value=doc.value)
            for style_id, doc in self.art_styles.items()
        }

    def _terms(self) -> TermsOfService:
        if self.terms_of_service is None:
            return DEFAULT_TOS
        content = self.terms_of_service.content
        if isinstance(content, list):
            # Multi-line content is stored as a list of lines for easier editing
            content = "\n".join(content)
        return TermsOfService(
            content=content,
            agreement_text=self.terms_of_service.agreement_text or DEFAULT_TOS.agreement_text,
        )

    def to_catalog(
        self,
        source: str,
        theme: Optional[Dict[str, Any]] = None,
        warnings: Tuple[str, ...] = (),
    ) -> Catalog:
        """
        Convert the validated document into a domain Catalog.

        Args:
            source: Name recorded as the catalog's origin
            theme: Theme document overriding the embedded theme, if any
            warnings: Non-fatal warnings collected while loading

        Returns:
            Immutable Catalog
        """
        commission_types = tuple(
            CommissionType(
                id=t.id,
                name=t.name,
                price_range_label=t.price_range,
                sub_types=tuple(
                    SubType(
                        id=s.id,
                        name=s.name,
                        tiers=tuple(Tier(name=tier.name, price=tier.price) for tier in s.tiers),
                    )
                    for s in t.sub_types
                ),
                addons=tuple(
                    Addon(id=a.id, label=a.label, kind=a.kind, value=a.value) for a in t.addons
                ),
                coming_soon=t.coming_soon,
            )
            for t in self.commission_types
        )
        currencies = {
            code: Currency(code=code, symbol=doc.symbol, name=doc.name or code, rate=doc.rate)
            for code, doc in self.currencies.items()
        }
        labels = dict(DEFAULT_LABELS)
        labels.update(self.labels)

        return Catalog(
            commission_types=commission_types,
            currencies=currencies,
            default_currency=self.default_currency,
            discount_policy=self._policy(),
            art_styles=self._art_styles(),
            labels=labels,
            terms_of_service=self._terms(),
            theme=theme if theme is not None else (self.theme or {}),
            source=source,
            warnings=warnings,
        )
