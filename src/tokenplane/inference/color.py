"""Color parsing and perceptual distance.

Values are parsed to 8-bit RGB triples. Perceptual distance is CIEDE2000
computed over CIE Lab (sRGB, D65 white point); the cheaper RGB Euclidean
distance is used where thresholds were calibrated against it (drift bands).
"""

from __future__ import annotations

import colorsys
import math
import re
from collections.abc import Iterable

from tokenplane.config.constants import ROOT_FONT_SIZE_PX

RGB = tuple[int, int, int]
Lab = tuple[float, float, float]

_HEX = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$")
_CHANNEL = r"\s*(-?\d*\.?\d+%?)\s*"
_RGB_FUNC = re.compile(rf"^rgba?\({_CHANNEL}[,\s]{_CHANNEL}[,\s]{_CHANNEL}(?:[,/].*)?\)$")
_HSL_FUNC = re.compile(
    r"^hsla?\(\s*(-?\d*\.?\d+)(?:deg)?\s*[,\s]\s*(\d*\.?\d+)%?\s*[,\s]\s*(\d*\.?\d+)%?\s*(?:[,/].*)?\)$"
)
_NUMERIC = re.compile(r"^(-?\d+(?:\.\d+)?)\s*(px|rem|em)?$")
_WHITESPACE = re.compile(r"\s+")
_COMMA = re.compile(r"\s*,\s*")

# D65 reference white
_XN, _YN, _ZN = 0.95047, 1.0, 1.08883
_EPSILON = (6 / 29) ** 3
_KAPPA = 3 * (6 / 29) ** 2
_POW25_7 = 25.0**7


def _clamp(value: float) -> int:
    return max(0, min(255, round(value)))


def _channel(raw: str) -> float:
    if raw.endswith("%"):
        return float(raw[:-1]) * 2.55
    return float(raw)


def parse_color(value: str) -> RGB | None:
    """Parse hex (3/4/6/8 digits), ``rgb()``/``rgba()`` or ``hsl()``/``hsla()``.

    Alpha is ignored. Anything else returns ``None``.
    """
    text = value.strip().lower()

    m = _HEX.match(text)
    if m:
        digits = m.group(1)
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits)
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)

    m = _RGB_FUNC.match(text)
    if m:
        return _clamp(_channel(m.group(1))), _clamp(_channel(m.group(2))), _clamp(_channel(m.group(3)))

    m = _HSL_FUNC.match(text)
    if m:
        hue = (float(m.group(1)) % 360) / 360
        saturation = min(float(m.group(2)), 100.0) / 100
        lightness = min(float(m.group(3)), 100.0) / 100
        r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
        return _clamp(r * 255), _clamp(g * 255), _clamp(b * 255)

    return None


def to_hex(rgb: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def average_rgb(colors: Iterable[RGB]) -> RGB:
    """Channel-wise rounded mean."""
    items = list(colors)
    if not items:
        return (0, 0, 0)
    n = len(items)
    return (
        round(sum(c[0] for c in items) / n),
        round(sum(c[1] for c in items) / n),
        round(sum(c[2] for c in items) / n),
    )


def rgb_distance(a: RGB, b: RGB) -> float:
    """Euclidean distance in RGB space (0..~441)."""
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2)


def brightness(rgb: RGB) -> float:
    """Perceived brightness on a 0..255 scale."""
    return 0.299 * rgb[0] + 0.587 * rgb[1] + 0.114 * rgb[2]


def _linearize(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb: RGB) -> float:
    """WCAG relative luminance (0..1)."""
    r, g, b = (_linearize(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def shade_qualifier(rgb: RGB) -> str:
    """Coarse lightness label: "light", "dark" or "mid"."""
    lum = relative_luminance(rgb)
    if lum >= 0.6:
        return "light"
    if lum <= 0.15:
        return "dark"
    return "mid"


def rgb_to_lab(rgb: RGB) -> Lab:
    r, g, b = (_linearize(c) for c in rgb)
    x = (0.4124564 * r + 0.3575761 * g + 0.1804375 * b) / _XN
    y = (0.2126729 * r + 0.7151522 * g + 0.0721750 * b) / _YN
    z = (0.0193339 * r + 0.1191920 * g + 0.9503041 * b) / _ZN

    def f(t: float) -> float:
        return t ** (1 / 3) if t > _EPSILON else t / _KAPPA + 4 / 29

    fx, fy, fz = f(x), f(y), f(z)
    return 116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz)


def rgb_to_oklch(rgb: RGB) -> tuple[float, float, float]:
    """(lightness 0..1, chroma, hue degrees) via Oklab."""
    r, g, b = (_linearize(c) for c in rgb)
    l_ = (0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b) ** (1 / 3)
    m_ = (0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b) ** (1 / 3)
    s_ = (0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b) ** (1 / 3)
    lightness = 0.2104542553 * l_ + 0.793617785 * m_ - 0.0040720468 * s_
    a = 1.9779984951 * l_ - 2.428592205 * m_ + 0.4505937099 * s_
    b_ = 0.0259040371 * l_ + 0.7827717662 * m_ - 0.808675766 * s_
    return round(lightness, 4), round(math.hypot(a, b_), 4), round(_hue_degrees(b_, a), 1)


def _hue_degrees(b: float, a: float) -> float:
    if a == 0 and b == 0:
        return 0.0
    return math.degrees(math.atan2(b, a)) % 360


def ciede2000(lab1: Lab, lab2: Lab) -> float:
    """CIEDE2000 color difference (kL = kC = kH = 1)."""
    l1, a1, b1 = lab1
    l2, a2, b2 = lab2

    c_bar = (math.hypot(a1, b1) + math.hypot(a2, b2)) / 2
    c_bar7 = c_bar**7
    g = 0.5 * (1 - math.sqrt(c_bar7 / (c_bar7 + _POW25_7)))
    a1p = (1 + g) * a1
    a2p = (1 + g) * a2
    c1p = math.hypot(a1p, b1)
    c2p = math.hypot(a2p, b2)
    h1p = _hue_degrees(b1, a1p)
    h2p = _hue_degrees(b2, a2p)

    delta_lp = l2 - l1
    delta_cp = c2p - c1p
    chroma_product = c1p * c2p
    if chroma_product == 0:
        delta_hp = 0.0
    else:
        delta_hp = h2p - h1p
        if delta_hp > 180:
            delta_hp -= 360
        elif delta_hp < -180:
            delta_hp += 360
    delta_big_hp = 2 * math.sqrt(chroma_product) * math.sin(math.radians(delta_hp / 2))

    l_bar_p = (l1 + l2) / 2
    c_bar_p = (c1p + c2p) / 2
    if chroma_product == 0:
        h_bar_p = h1p + h2p
    elif abs(h1p - h2p) <= 180:
        h_bar_p = (h1p + h2p) / 2
    elif h1p + h2p < 360:
        h_bar_p = (h1p + h2p + 360) / 2
    else:
        h_bar_p = (h1p + h2p - 360) / 2

    t = (
        1
        - 0.17 * math.cos(math.radians(h_bar_p - 30))
        + 0.24 * math.cos(math.radians(2 * h_bar_p))
        + 0.32 * math.cos(math.radians(3 * h_bar_p + 6))
        - 0.20 * math.cos(math.radians(4 * h_bar_p - 63))
    )
    delta_theta = 30 * math.exp(-(((h_bar_p - 275) / 25) ** 2))
    c_bar_p7 = c_bar_p**7
    r_c = 2 * math.sqrt(c_bar_p7 / (c_bar_p7 + _POW25_7))
    s_l = 1 + (0.015 * (l_bar_p - 50) ** 2) / math.sqrt(20 + (l_bar_p - 50) ** 2)
    s_c = 1 + 0.045 * c_bar_p
    s_h = 1 + 0.015 * c_bar_p * t
    r_t = -math.sin(math.radians(2 * delta_theta)) * r_c

    dl = delta_lp / s_l
    dc = delta_cp / s_c
    dh = delta_big_hp / s_h
    return math.sqrt(dl * dl + dc * dc + dh * dh + r_t * dc * dh)


def delta_e(a: RGB, b: RGB) -> float:
    """CIEDE2000 distance between two RGB colors."""
    return ciede2000(rgb_to_lab(a), rgb_to_lab(b))


def color_delta_e(a: str, b: str) -> float | None:
    """CIEDE2000 distance between two color strings; ``None`` if either is unparseable."""
    rgb_a = parse_color(a)
    rgb_b = parse_color(b)
    if rgb_a is None or rgb_b is None:
        return None
    return delta_e(rgb_a, rgb_b)


def normalize_value(value: str) -> str:
    """Canonical form for exact-match comparison.

    Lowercased, whitespace collapsed, and short hex colors expanded so
    ``#FFF`` and ``#ffffff`` compare equal.
    """
    text = _COMMA.sub(",", _WHITESPACE.sub(" ", value.strip().lower()))
    m = _HEX.match(text)
    if m and len(m.group(1)) in (3, 6):
        rgb = parse_color(text)
        if rgb is not None:
            return to_hex(rgb)
    return text


def extract_numeric_value(value: str) -> float | None:
    """Pixel magnitude of a plain number or px/rem/em length (rem/em at 16px)."""
    m = _NUMERIC.match(value.strip().lower())
    if not m:
        return None
    number = float(m.group(1))
    if m.group(2) in ("rem", "em"):
        return number * ROOT_FONT_SIZE_PX
    return number
