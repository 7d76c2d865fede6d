"""Minimalist light theme + viridis colormap.

Used by the heatmap composer for the chrome (background, borders,
gridlines, labels) and for cell fills. The colormap maps a normalized
intensity in [0, 1] to a hex color.
"""

from __future__ import annotations

# Light-mode defaults: white canvas, black plot border, faint gridlines.
THEME = {
    "background": "#ffffff",       # canvas fill
    "foreground": "#111827",       # axis titles and labels
    "border": "#000000",           # plot rectangle
    "grid": "#d1d5db",             # bucket boundaries
    "muted": "#6b7280",            # status line
    "font_family": "system-ui, -apple-system, sans-serif",
    "font_size": 14,
    "small_font_size": 12,
}

BORDER_WIDTH = 2
GRID_WIDTH = 0.5

# Viridis colormap (matplotlib): key RGB samples for interpolation.
_VIRIDIS_RGB = [
    [0.267004, 0.004874, 0.329415],  # 0
    [0.278791, 0.062145, 0.386592],  # 32
    [0.282884, 0.135920, 0.453427],  # 64
    [0.260571, 0.246922, 0.522828],  # 96
    [0.188923, 0.410910, 0.556326],  # 128
    [0.119738, 0.603785, 0.541400],  # 160
    [0.404001, 0.800275, 0.362552],  # 192
    [0.751884, 0.874951, 0.143228],  # 224
    [0.993248, 0.906157, 0.143936],  # 255
]


def viridis(t: float) -> str:
    """Map t in [0, 1] to viridis hex color."""
    t = max(0.0, min(1.0, t))
    n = len(_VIRIDIS_RGB) - 1
    i = t * n
    lo = int(i)
    hi = min(lo + 1, n)
    frac = i - lo
    r = _VIRIDIS_RGB[lo][0] * (1 - frac) + _VIRIDIS_RGB[hi][0] * frac
    g = _VIRIDIS_RGB[lo][1] * (1 - frac) + _VIRIDIS_RGB[hi][1] * frac
    b = _VIRIDIS_RGB[lo][2] * (1 - frac) + _VIRIDIS_RGB[hi][2] * frac
    return f"#{int(r*255):02x}{int(g*255):02x}{int(b*255):02x}"
