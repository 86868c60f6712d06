"""
PNG export of receipts.

Draws the same composed layout the preview endpoint returns (item columns,
summary slots, separators) with Pillow, plus the template's branding:
logo, business header, custom headers, customer block, notes, custom
section, footer and terms.

Rendering runs in two passes. The first pass lays everything out as a list
of drawing operations and measures the total height, the second creates
the canvas and replays the operations.

Example::

    png = render_receipt_image(receipt, scale=2)
    response = HttpResponse(png, content_type='image/png')
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Optional

from django.conf import settings
from PIL import Image, ImageColor, ImageDraw, ImageFont

from apps.designs.models import ReceiptTemplate
from apps.receipts.presentation import ReceiptLayout, compose_receipt_layout

from .exceptions import ReceiptRenderingError

logger = logging.getLogger(__name__)

RECEIPT_WIDTH = 400
PADDING = 24
LINE_SPACING = 4
SECTION_GAP = 12
MIN_SCALE = 1
MAX_SCALE = 4

DEFAULT_BACKGROUND = '#ffffff'
DEFAULT_TEXT = '#000000'
DEFAULT_ACCENT = '#3b82f6'
DEFAULT_BORDER = '#e5e7eb'


@dataclass
class _Op:
    kind: str
    args: dict


def _color(value: Optional[str], default: str) -> tuple:
    try:
        return ImageColor.getrgb(value or default)
    except ValueError:
        logger.debug("Invalid colour %r, using %s", value, default)
        return ImageColor.getrgb(default)


def _decode_logo(logo_url: str) -> Optional[Image.Image]:
    """Load a logo from a ``data:`` URL. Remote URLs are not fetched."""
    if not logo_url or not logo_url.startswith('data:'):
        if logo_url:
            logger.debug("Skipping non-inline logo %s", logo_url[:60])
        return None

    try:
        header, encoded = logo_url.split(',', 1)
        data = base64.b64decode(encoded) if ';base64' in header else encoded.encode()
        logo = Image.open(BytesIO(data))
        logo.load()
    except (ValueError, binascii.Error, OSError):
        logger.debug("Unreadable inline logo, skipping")
        return None

    return logo.convert('RGBA')


class ReceiptPainter:
    """Lay out and draw one receipt at a given scale."""

    def __init__(self, template: ReceiptTemplate, scale: int = 2, background_color: Optional[str] = None):
        self.template = template
        self.scale = scale
        self.width = RECEIPT_WIDTH * scale
        self.padding = PADDING * scale
        self.content_width = self.width - 2 * self.padding

        self.background = _color(background_color or template.background_color, DEFAULT_BACKGROUND)
        self.text_color = _color(template.text_color, DEFAULT_TEXT)
        self.accent_color = _color(template.accent_color, DEFAULT_ACCENT)
        self.border_color = _color(template.border_color, DEFAULT_BORDER)

        self.ops: list[_Op] = []
        self.y = self.padding
        self._fonts: dict[int, Any] = {}
        self._measure = ImageDraw.Draw(Image.new('RGB', (1, 1)))

    # -- primitives -------------------------------------------------------

    def font(self, size: int):
        px = max(6, int(size * self.scale))
        if px not in self._fonts:
            self._fonts[px] = ImageFont.load_default(size=px)
        return self._fonts[px]

    def text_width(self, text: str, font) -> float:
        return self._measure.textlength(text, font=font)

    def line_height(self, font) -> int:
        left, top, right, bottom = self._measure.textbbox((0, 0), 'Ag', font=font)
        return int(bottom - top) + LINE_SPACING * self.scale

    def wrap(self, text: str, font, max_width: float) -> list[str]:
        lines = []
        for paragraph in str(text).split('\n'):
            words = paragraph.split(' ')
            current = ''
            for word in words:
                candidate = f"{current} {word}" if current else word
                if current and self.text_width(candidate, font) > max_width:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    def _x_for(self, text: str, font, left: float, width: float, alignment: str) -> float:
        text_width = self.text_width(text, font)
        if alignment == 'center':
            return left + (width - text_width) / 2
        if alignment == 'right':
            return left + width - text_width
        return left

    def _stroke(self, style: str) -> int:
        return max(1, self.scale // 2) if style in ('bold', 'bold-italic') else 0

    def block(self, text: str, size: int, alignment: str = 'left', style: str = 'normal', color=None) -> None:
        """Wrapped paragraph across the full content width."""
        if not text:
            return
        font = self.font(size)
        fill = color or self.text_color
        for line in self.wrap(text, font, self.content_width):
            self.ops.append(_Op('text', {
                'xy': (self._x_for(line, font, self.padding, self.content_width, alignment), self.y),
                'text': line,
                'font': font,
                'fill': fill,
                'stroke': self._stroke(style),
            }))
            self.y += self.line_height(font)

    def cells(self, cells, size: int, style: str = 'normal') -> None:
        """
        One table row. ``cells`` are (content, width_percent, alignment).

        Each cell wraps inside its own width and the row is as tall as its
        tallest cell.
        """
        font = self.font(size)
        line_height = self.line_height(font)
        x = self.padding
        row_lines = 1
        for content, width_percent, alignment in cells:
            width = self.content_width * float(width_percent) / 100
            lines = self.wrap(content, font, max(width, 1)) if content else []
            for index, line in enumerate(lines):
                self.ops.append(_Op('text', {
                    'xy': (self._x_for(line, font, x, width, alignment), self.y + index * line_height),
                    'text': line,
                    'font': font,
                    'fill': self.text_color,
                    'stroke': self._stroke(style),
                }))
            row_lines = max(row_lines, len(lines))
            x += width
        self.y += row_lines * line_height

    def rule(self, left_percent: float = 0, width_percent: float = 100, style: str = 'solid', color=None) -> None:
        x0 = self.padding + self.content_width * left_percent / 100
        x1 = x0 + self.content_width * width_percent / 100
        self.y += 2 * self.scale
        self.ops.append(_Op('rule', {
            'x0': x0,
            'x1': x1,
            'y': self.y,
            'style': style,
            'fill': color or self.border_color,
        }))
        self.y += (5 if style == 'double' else 3) * self.scale

    def image(self, img: Image.Image, width: int, alignment: str) -> None:
        ratio = width / img.width
        resized = img.resize((int(width), max(1, int(img.height * ratio))))
        if alignment == 'center':
            x = self.padding + (self.content_width - resized.width) / 2
        elif alignment == 'right':
            x = self.padding + self.content_width - resized.width
        else:
            x = self.padding
        self.ops.append(_Op('image', {'xy': (int(x), int(self.y)), 'image': resized}))
        self.y += resized.height

    def gap(self, units: int = SECTION_GAP) -> None:
        self.y += units * self.scale

    # -- output -----------------------------------------------------------

    def draw(self) -> Image.Image:
        height = int(self.y + self.padding)
        canvas = Image.new('RGB', (self.width, height), self.background)
        draw = ImageDraw.Draw(canvas)

        for op in self.ops:
            args = op.args
            if op.kind == 'text':
                draw.text(
                    args['xy'],
                    args['text'],
                    font=args['font'],
                    fill=args['fill'],
                    stroke_width=args['stroke'],
                    stroke_fill=args['fill'],
                )
            elif op.kind == 'rule':
                self._draw_rule(draw, args)
            elif op.kind == 'image':
                logo = args['image']
                canvas.paste(logo, args['xy'], logo)

        if self.template.show_border:
            draw.rectangle(
                (0, 0, self.width - 1, height - 1),
                outline=self.border_color,
                width=max(1, self.scale),
            )
        return canvas

    def _draw_rule(self, draw, args) -> None:
        x0, x1, y, fill = args['x0'], args['x1'], args['y'], args['fill']
        width = max(1, self.scale)
        if args['style'] == 'dashed':
            dash = 4 * self.scale
            x = x0
            while x < x1:
                draw.line((x, y, min(x + dash, x1), y), fill=fill, width=width)
                x += 2 * dash
        elif args['style'] == 'double':
            draw.line((x0, y, x1, y), fill=fill, width=width)
            draw.line((x0, y + 3 * self.scale, x1, y + 3 * self.scale), fill=fill, width=width)
        else:
            draw.line((x0, y, x1, y), fill=fill, width=width)


def _format_datetime(receipt, template) -> list[str]:
    date_text = receipt.receipt_date.isoformat() if receipt.receipt_date else ''
    time_text = receipt.receipt_time.strftime('%H:%M') if receipt.receipt_time else ''

    if template.datetime_format == 'separate':
        lines = [f"Date: {date_text}"]
        if time_text:
            lines.append(f"Time: {time_text}")
        return lines

    return [f"Date: {date_text} {time_text}".rstrip()]


def _paint_header(painter: ReceiptPainter, receipt, template) -> None:
    size = template.font_size

    if template.show_logo:
        logo = _decode_logo(template.logo_url)
        if logo is not None:
            painter.image(logo, template.logo_size * painter.scale, template.logo_position)
            painter.gap(8)

    painter.block(
        template.business_name,
        size + 6,
        alignment=template.header_style,
        style='bold',
        color=painter.accent_color,
    )
    painter.block(template.business_address, size - 2, alignment=template.header_style)
    for contact in (template.business_phone, template.business_email, template.business_website):
        painter.block(contact, size - 2, alignment=template.header_style)

    if template.show_custom_headers:
        painter.gap(6)
        painter.block(
            template.custom_header1,
            template.custom_header1_size,
            alignment=template.custom_header_alignment,
            style=template.custom_header1_style,
        )
        painter.block(
            template.custom_header2,
            template.custom_header2_size,
            alignment=template.custom_header_alignment,
            style=template.custom_header2_style,
        )

    painter.rule()
    painter.block(f"Receipt #: {receipt.receipt_number}", size - 2, alignment=template.header_style)


def _paint_customer(painter: ReceiptPainter, receipt, template) -> None:
    if not template.show_customer_block:
        return

    alignment = template.customer_block_alignment
    painter.gap(6)
    painter.block(
        template.customer_block_title,
        template.customer_block_title_size,
        alignment=alignment,
        style=template.customer_block_title_style,
    )
    painter.block(
        template.customer_block_text,
        template.customer_block_text_size,
        alignment=alignment,
        style=template.customer_block_text_style,
    )
    for value in (receipt.customer_name, receipt.customer_email, receipt.customer_phone):
        painter.block(value, template.customer_block_text_size, alignment=alignment)

    if template.show_datetime_in_customer:
        for line in _format_datetime(receipt, template):
            painter.block(line, template.datetime_size, alignment=alignment, style=template.datetime_style)


def _paint_items(painter: ReceiptPainter, receipt_layout: ReceiptLayout, template) -> None:
    size = template.font_size
    painter.gap(8)

    if receipt_layout.header is not None:
        painter.cells(
            [(cell.content, cell.width_percent, cell.alignment) for cell in receipt_layout.header.cells],
            size,
            style='bold',
        )
        painter.rule()

    for row in receipt_layout.items:
        painter.cells([(cell.content, cell.width_percent, cell.alignment) for cell in row.cells], size)

    painter.rule()


def _paint_summary(painter: ReceiptPainter, receipt_layout: ReceiptLayout, template) -> None:
    size = template.font_size
    for line in receipt_layout.summary:
        painter.cells(
            [(slot.content, slot.width_percent, slot.alignment) for slot in line.slots],
            size + 2 if line.emphasis else size,
            style='bold' if line.emphasis else 'normal',
        )
        if line.separator is not None:
            painter.rule(
                left_percent=line.separator.margin_left_percent,
                width_percent=line.separator.width_percent,
                style=line.separator.style,
            )


def _paint_footer(painter: ReceiptPainter, receipt, template) -> None:
    size = template.font_size

    if receipt.notes:
        painter.gap()
        painter.block('Notes', size, style='bold')
        painter.block(receipt.notes, size - 2)

    if template.show_custom_section and (template.custom_section_title or template.custom_section_text):
        painter.gap()
        painter.block(
            template.custom_section_title,
            template.custom_section_title_size,
            alignment=template.custom_section_alignment,
            style=template.custom_section_title_style,
        )
        painter.block(
            template.custom_section_text,
            template.custom_section_text_size,
            alignment=template.custom_section_alignment,
            style=template.custom_section_text_style,
        )

    if template.show_footer and template.footer_text:
        painter.gap()
        painter.block(template.footer_text, size, alignment='center')

    if template.show_terms and template.terms_conditions:
        painter.gap(8)
        painter.block(template.terms_conditions, max(size - 4, 8), alignment='center')


def render_receipt_image(receipt, scale: Optional[int] = None, background_color: Optional[str] = None) -> bytes:
    """
    Render ``receipt`` as PNG bytes.

    Args:
        receipt: Saved Receipt; its template (or template defaults when it
            has none) controls the appearance
        scale: Pixel density multiplier, clamped to 1..4
            (default ``RECEIPT_IMAGE_SCALE``)
        background_color: Override for the template background colour

    Raises:
        ReceiptRenderingError: If the image cannot be produced
    """
    if scale is None:
        scale = settings.RECEIPT_IMAGE_SCALE
    scale = min(max(int(scale), MIN_SCALE), MAX_SCALE)

    template = receipt.template or ReceiptTemplate()
    receipt_layout = compose_receipt_layout(
        receipt.get_line_items(),
        receipt.calculate(),
        template.get_layout(),
        currency_symbol=settings.RECEIPT_CURRENCY_SYMBOL,
    )

    try:
        painter = ReceiptPainter(template, scale=scale, background_color=background_color)
        _paint_header(painter, receipt, template)
        _paint_customer(painter, receipt, template)
        _paint_items(painter, receipt_layout, template)
        _paint_summary(painter, receipt_layout, template)
        _paint_footer(painter, receipt, template)

        buffer = BytesIO()
        painter.draw().save(buffer, format='PNG')
    except (OSError, ValueError, TypeError) as e:
        logger.exception("Rendering receipt %s failed", receipt.id)
        raise ReceiptRenderingError(str(e)) from e

    logger.debug("Rendered receipt %s at scale %s", receipt.id, scale)
    return buffer.getvalue()
