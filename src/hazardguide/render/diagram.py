"""Annotated SVG illustration for a single guidance step.

Fixed 1280x832 layout: header with title/subtitle, a building silhouette
tinted by hazard, a hazard overlay (waves for flood, fault zig-zag for
earthquake) and a right-hand panel with up to three key checks and a
hazard badge. The document is built with ElementTree so interpolated text
is always escaped. Output is a base64 ``data:image/svg+xml`` URI.
"""

import base64
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from hazardguide.core.types import Hazard, Province, StructureType

SVG_NS = "http://www.w3.org/2000/svg"
WIDTH, HEIGHT = 1280, 832
FONT = "Inter, Segoe UI, Arial"

# Characters XML 1.0 cannot carry even when escaped, plus lone surrogates
# that cannot be encoded as UTF-8.
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

PLACEHOLDER_CHECKS = (
    "Verify detailed layout before execution.",
    "Confirm supervision and QA sign-off.",
    "Close the step only after field verification.",
)


@dataclass(frozen=True)
class Palette:
    sky_top: str
    sky_bottom: str
    ground: str
    building_light: str
    building_dark: str
    accent: str
    accent_soft: str
    text: str
    hazard_stroke: str


PALETTES = {
    Hazard.FLOOD: Palette(
        sky_top="#b6dcff", sky_bottom="#e9f6ff", ground="#8f9aa4",
        building_light="#d9e0e6", building_dark="#b1bcc8",
        accent="#1669ad", accent_soft="#78b4e5", text="#0c2c49", hazard_stroke="#1a73b5",
    ),
    Hazard.EARTHQUAKE: Palette(
        sky_top="#ffd7c7", sky_bottom="#fff0e8", ground="#a08f88",
        building_light="#e2d8d3", building_dark="#c7b8b1",
        accent="#ad4b1f", accent_soft="#db8f6f", text="#4a1e0f", hazard_stroke="#bc5b2f",
    ),
}

HAZARD_OVERLAYS = {
    Hazard.FLOOD: ("M70 510 Q130 490 190 510 T310 510 T430 510 T550 510", "8", "0.65"),
    Hazard.EARTHQUAKE: ("M86 520 L148 474 L220 534 L294 478 L366 538 L450 492 L530 548", "7", "0.7"),
}


def _el(parent: ET.Element, tag: str, text: str | None = None, **attrs) -> ET.Element:
    # Attribute names use underscores in Python; SVG uses hyphens.
    node = ET.SubElement(parent, tag, {k.replace("_", "-"): str(v) for k, v in attrs.items()})
    if text is not None:
        node.text = text
    return node


def _text(parent: ET.Element, x: int, y: int, value: str, size: int, fill: str, bold: bool = False) -> None:
    attrs = {"x": x, "y": y, "font_family": FONT, "font_size": size, "fill": fill}
    if bold:
        attrs["font_weight"] = "700"
    _el(parent, "text", _INVALID_XML_CHARS.sub("", value), **attrs)


def _gradient(defs: ET.Element, gid: str, x2: str, y2: str, start: str, stop: str) -> None:
    grad = _el(defs, "linearGradient", id=gid, x1="0", y1="0", x2=x2, y2=y2)
    _el(grad, "stop", offset="0%", stop_color=start)
    _el(grad, "stop", offset="100%", stop_color=stop)


def _check_lines(key_checks) -> list[str]:
    checks = [str(c) for c in key_checks][:3] if isinstance(key_checks, (list, tuple)) else []
    return checks + list(PLACEHOLDER_CHECKS[len(checks):])


def build_step_svg(
    province: Province,
    city: str,
    hazard: Hazard,
    structure_type: StructureType,
    step_title: str,
    key_checks,
    step_index: int,
) -> str:
    """Return the SVG document for one step as a string."""
    palette = PALETTES[hazard]
    title = f"{step_index + 1}. {step_title}"
    subtitle = f"{structure_type.value} · {city}, {province.value}"

    svg = ET.Element("svg", {
        "xmlns": SVG_NS, "width": str(WIDTH), "height": str(HEIGHT), "viewBox": f"0 0 {WIDTH} {HEIGHT}",
        "role": "img", "aria-label": _INVALID_XML_CHARS.sub("", title),
    })

    defs = _el(svg, "defs")
    _gradient(defs, "sky", "0", "1", palette.sky_top, palette.sky_bottom)
    _gradient(defs, "facade", "1", "1", palette.building_light, palette.building_dark)

    # Backdrop
    _el(svg, "rect", x=0, y=0, width=WIDTH, height=HEIGHT, fill="url(#sky)")
    _el(svg, "rect", x=0, y=588, width=WIDTH, height=244, fill=palette.ground, opacity="0.32")

    # Header
    _el(svg, "rect", x=46, y=36, width=1188, height=112, rx=16, fill="#ffffff", opacity="0.9")
    _text(svg, 78, 88, title, 38, palette.text, bold=True)
    _text(svg, 78, 124, subtitle, 24, palette.accent)

    # Panels
    _el(svg, "rect", x=58, y=184, width=768, height=592, rx=18, fill="#ffffff", opacity="0.9")
    _el(svg, "rect", x=858, y=184, width=364, height=592, rx=18, fill="#ffffff", opacity="0.9")

    # Building silhouette
    _el(svg, "polygon", points="144,560 316,444 488,560 488,698 144,698", fill="url(#facade)")
    _el(svg, "polygon", points="316,444 518,362 692,476 488,560", fill=palette.building_dark, opacity="0.85")
    _el(svg, "polygon", points="488,560 692,476 692,612 488,698", fill=palette.building_light, opacity="0.72")
    for x, y, w, h in ((204, 570, 74, 94), (318, 570, 74, 94), (244, 508, 84, 52)):
        _el(svg, "rect", x=x, y=y, width=w, height=h, fill="#f7fbff", opacity="0.85")

    _el(svg, "rect", x=560, y=630, width=108, height=14, rx=7, fill=palette.accent, opacity="0.85")
    _el(svg, "circle", cx=612, cy=618, r=10, fill=palette.accent_soft)

    path, stroke_width, opacity = HAZARD_OVERLAYS[hazard]
    _el(svg, "path", d=path, fill="none", stroke=palette.hazard_stroke, stroke_width=stroke_width, opacity=opacity)

    # Check list
    _text(svg, 884, 244, "Location-Aware Checks", 25, palette.text, bold=True)
    for i, line in enumerate(_check_lines(key_checks)):
        _el(svg, "circle", cx=892, cy=286 + 52 * i, r=7, fill=palette.accent)
        _text(svg, 912, 294 + 52 * i, line, 18, palette.text)

    # Hazard badge
    _el(svg, "rect", x=884, y=444, width=314, height=208, rx=14, fill=palette.accent, opacity="0.12")
    _text(svg, 906, 490, "Hazard", 19, palette.text)
    _text(svg, 906, 526, hazard.value.upper(), 34, palette.accent, bold=True)
    _text(svg, 906, 566, "Pakistan-trained ML visual", 18, palette.text)
    _text(svg, 906, 592, "for stage-by-stage execution", 18, palette.text)

    return ET.tostring(svg, encoding="unicode")


def to_svg_data_url(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def render(
    province: Province,
    city: str,
    hazard: Hazard,
    structure_type: StructureType,
    step_title: str,
    key_checks,
    step_index: int,
) -> str:
    """Render one step diagram and return it as a data URI."""
    return to_svg_data_url(
        build_step_svg(province, city, hazard, structure_type, step_title, key_checks, step_index)
    )
