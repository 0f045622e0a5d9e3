"""QR Icon Studio — sanitize text, size it, and render logo-stamped QR codes."""

__version__ = "1.0.0"

# Shared constants
PREVIEW_SIZE = 400  # On-screen preview, in pixels
DEFAULT_EXPORT_SIZES = (400, 800, 1200)

QUIET_ZONE_RATIO = 0.1  # Blank margin on every side, fraction of final size
ICON_RATIO = 0.2  # Icon diameter, fraction of final size
HALO_FACTOR = 1.2  # Light disc behind the icon, relative to icon diameter
OVERHEAD_FACTOR = 1.8  # Worst-case encoded/raw byte ratio

DARK_COLOR = "#000000"
LIGHT_COLOR = "#ffffff"
