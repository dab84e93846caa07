# src/commission_builder/adapters/export/pdf_exporter.py
"""
PDF Exporter - Commission Summary Document

Produces the printable commission summary the client sends with their
payment, using ReportLab. Reference images are embedded best-effort: an
image that cannot be read or decoded is logged and skipped.

Files that USE this module:
- commission_builder.app (PdfExporter wired into the wizard)
- commission_builder.application.wizard (calls export through the Exporter protocol)
- commission_builder.adapters.export (package re-export)

Files that this module USES:
- commission_builder.adapters.formatting.formatter (add-on labels, style price tag)
- commission_builder.domain.errors (ExportFailure)
- commission_builder.domain.models (Catalog, SelectionState, Breakdown, FileRef)
- commission_builder.domain.pricing (format_price, resolve_tier)
"""
from __future__ import annotations

import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Callable, Optional

from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from commission_builder.adapters.formatting.formatter import addon_labels, style_price_tag
from commission_builder.domain.errors import ExportFailure
from commission_builder.domain.models import STYLE_NONE, Breakdown, Catalog, FileRef, SelectionState
from commission_builder.domain.pricing import format_price, resolve_tier

log = logging.getLogger(__name__)

MARGIN = 40
IMAGE_MAX_WIDTH = 200
IMAGE_MAX_HEIGHT = 150

ImageLoader = Callable[[FileRef], Optional[bytes]]


def _safe(s) -> str:
    if s is None:
        return ""
    return str(s)


class _Page:
    """Top-down text cursor over a canvas that starts new pages as needed."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.width, self.height = letter
        self.content_width = self.width - 2 * MARGIN
        self.y = self.height - MARGIN - 20

    def ensure(self, needed: float) -> None:
        if self.y - needed < MARGIN:
            self.c.showPage()
            self.y = self.height - MARGIN - 20

    def text(self, text: str, size: int = 12, font: str = "Helvetica", x: float = MARGIN,
             max_width: Optional[float] = None) -> None:
        lines = simpleSplit(_safe(text), font, size, max_width or self.content_width) or [""]
        for line in lines:
            self.ensure(size * 1.2)
            self.c.setFont(font, size)
            self.c.drawString(x, self.y, line)
            self.y -= size * 1.2

    def rule(self) -> None:
        self.ensure(15)
        self.c.setStrokeColorRGB(0.78, 0.78, 0.78)
        self.c.line(MARGIN, self.y, self.width - MARGIN, self.y)
        self.y -= 15

    def gap(self, amount: float) -> None:
        self.y -= amount


def _embed_image(page: _Page, ref: FileRef, data: bytes) -> None:
    reader = ImageReader(BytesIO(data))
    img_width, img_height = reader.getSize()
    img_width = img_width or IMAGE_MAX_WIDTH
    img_height = img_height or IMAGE_MAX_HEIGHT
    # Scale down to fit, never up
    scale = min(IMAGE_MAX_WIDTH / img_width, IMAGE_MAX_HEIGHT / img_height, 1)
    img_width *= scale
    img_height *= scale

    page.ensure(img_height + 10)
    page.c.drawImage(reader, MARGIN, page.y - img_height, img_width, img_height)
    page.c.setFont("Helvetica", 10)
    page.c.drawString(MARGIN + img_width + 10, page.y - 20, ref.name)
    page.y -= img_height + 10


def build_summary_pdf_bytes(
    catalog: Catalog,
    state: SelectionState,
    breakdown: Breakdown,
    read_image: Optional[ImageLoader] = None,
    now: Optional[datetime] = None,
) -> bytes:
    """
    Returns PDF bytes for the commission summary.

    catalog/state/breakdown: the order to describe (breakdown is used as-is)
    read_image: returns the bytes behind an uploaded file, or None
    now: generation time printed in the footer (defaults to local now)
    """
    currency = catalog.currency(state.currency)
    commission_type = catalog.find_type(state.selected_type_id)
    sub_type = catalog.find_sub_type(commission_type, state.selected_sub_id)
    tier = resolve_tier(catalog, state)
    now = now or datetime.now()

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle("Commission Summary")
    page = _Page(c)

    # ---- Header
    page.text("Commission Summary", size=20, font="Helvetica-Bold")
    page.gap(10)
    page.text("(SEND THIS TO ME WITH YOUR PAYMENT)", size=14, font="Helvetica-Oblique")
    page.gap(15)

    if state.username.strip():
        page.text(f"Client: {state.username}", size=14, font="Helvetica-Bold")
        page.gap(10)

    if state.description.strip():
        page.text("COMMISSION DESCRIPTION", size=12, font="Helvetica-Bold")
        page.gap(5)
        page.text(state.description, size=11)
        page.gap(10)

    page.rule()

    # ---- Commission details
    page.text("COMMISSION DETAILS", size=14, font="Helvetica-Bold")
    page.gap(10)
    page.text(f"Type: {commission_type.name if commission_type else 'Not selected'}")
    page.gap(5)
    page.text(f"Subtype: {sub_type.name if sub_type else 'Not selected'}")
    page.gap(5)
    tier_name = tier.name if tier else "Not selected"
    page.text(f"Tier: {tier_name} - {format_price(tier.price if tier else 0, currency)}")
    page.gap(5)
    page.text(f"Currency: {currency.name}")
    page.gap(15)

    style = catalog.find_style(state.selected_style_id)
    if style is None:
        style_line = "Basic (no extra cost)"
    elif style.kind == STYLE_NONE:
        style_line = f"{style.label} (no extra cost)"
    else:
        style_line = f"{style.label} {style_price_tag(style, tier.price if tier else 0, currency)}"
    page.text(f"Art Style: {style_line}")
    page.gap(15)

    # ---- Add-ons
    page.text("ADD-ONS", size=14, font="Helvetica-Bold")
    page.gap(10)
    labels = addon_labels(catalog, state, with_counts=True)
    for label in labels or ["None selected"]:
        page.text(f"• {label}")
        page.gap(5)
    page.gap(10)

    # ---- Reference files
    page.text("REFERENCE SHEETS", size=14, font="Helvetica-Bold")
    page.gap(10)
    if state.files:
        page.text(f"{len(state.files)} file(s) uploaded:")
        page.gap(5)
        for ref in state.files:
            page.text(f"• {ref.name}")
            page.gap(5)
        for ref in state.files:
            if ref.kind != "image" or read_image is None:
                continue
            try:
                data = read_image(ref)
                if data:
                    _embed_image(page, ref, data)
                else:
                    log.info("No content available for %s, not embedding", ref.name)
            except Exception as e:
                log.warning("Failed to embed image %s: %s", ref.name, e)
    else:
        page.text("No reference sheets uploaded")
    page.gap(20)

    # ---- Pricing breakdown
    page.rule()
    page.text("PRICING BREAKDOWN", size=14, font="Helvetica-Bold")
    page.gap(10)
    page.text(f"Base Price: {format_price(breakdown.base, currency)}")
    page.gap(5)
    if breakdown.style_add > 0:
        page.text(f"Style Add-on: +{format_price(breakdown.style_add, currency)}")
        page.gap(5)
    if breakdown.addons_sum > 0:
        page.text(f"Add-ons: +{format_price(breakdown.addons_sum, currency)}")
        page.gap(5)
    if breakdown.ref_discount > 0:
        page.text(f"Reference Discount: -{format_price(breakdown.ref_discount, currency)}")
        page.gap(5)
    page.gap(10)
    page.text(f"TOTAL ESTIMATED PRICE: {format_price(breakdown.total, currency)}", size=16,
              font="Helvetica-Bold")

    # ---- Footer
    c.setFont("Helvetica-Oblique", 10)
    c.drawString(MARGIN, MARGIN * 0.5,
                 f"Generated on {now.strftime('%Y-%m-%d')} at {now.strftime('%H:%M:%S')}")

    c.showPage()
    c.save()

    buf.seek(0)
    return buf.read()


class PdfExporter:
    """Writes the commission summary PDF to a fixed path."""

    def __init__(self, output_path: Path, read_image: Optional[ImageLoader] = None):
        self.output_path = Path(output_path)
        self.read_image = read_image

    def export(self, catalog: Catalog, state: SelectionState, breakdown: Breakdown) -> Path:
        """
        Generate and write the PDF.

        Raises:
            ExportFailure: If the document cannot be generated or written
        """
        try:
            data = build_summary_pdf_bytes(catalog, state, breakdown, read_image=self.read_image)
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.output_path.write_bytes(data)
        except Exception as e:
            raise ExportFailure(f"PDF export failed: {e}") from e
        log.info("PDF generated: %s (%d bytes)", self.output_path, len(data))
        return self.output_path
