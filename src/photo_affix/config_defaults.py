"""Shared default values for user-facing configuration settings."""
from photo_affix.type_defs import OutputFormat

# Layout
DEFAULT_STACK_HORIZONTALLY = True
DEFAULT_SCALE_PRIORITY = False
DEFAULT_SPACING_VERTICAL = 0
DEFAULT_SPACING_HORIZONTAL = 0
DEFAULT_BG_FILL_COLOR = 0

# Display
DEFAULT_DENSITY = 1.0

# Output
DEFAULT_FORMAT: OutputFormat = "PNG"
DEFAULT_QUALITY = 100
DEFAULT_OUTPUT_PATH = "affixed.png"
DEFAULT_SELECTED_SCALE = 1.0
