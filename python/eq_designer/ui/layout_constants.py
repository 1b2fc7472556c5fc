"""
Shared spacing, colors and typography for the EQ editor UI.
"""


# Spacing
SPACING_TIGHT = 4      # Label + value
SPACING_NORMAL = 8     # Controls in a group
SPACING_SECTION = 16   # Between header, graph and inspector
MARGIN_PANEL = 12      # Panel content margins


# Graph palette
COLOR_GRAPH_BACKGROUND = "#020617"
COLOR_GRID = "#1e293b"
COLOR_GRID_ZERO = "#334155"
COLOR_GRID_LABEL = "#64748b"
COLOR_CURVE = "#60a5fa"
COLOR_CURVE_FILL = (59, 130, 246, 60)   # RGBA
COLOR_SPECTRUM = (148, 163, 184, 70)    # RGBA
COLOR_BYPASS = (239, 68, 68, 60)        # RGBA
COLOR_DISABLED_BAND = "#334155"
COLOR_SOLO = "#eab308"


# Typography
PRIMARY_LABEL_STYLE = "font-size: 16pt;"
BAND_TITLE_STYLE = "font-size: 12pt; font-weight: bold;"
VALUE_LABEL_STYLE = "font-size: 9pt; color: #94a3b8;"
INFO_LABEL_STYLE = "font-size: 9pt; color: gray;"
