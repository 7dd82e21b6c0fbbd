"""
Constants used internally by the photo stitcher.

These are implementation-level values that should not be overridden
via config files or CLI arguments.
"""

# ARGB value that means "no background fill"
COLOR_TRANSPARENT = 0
ARGB_MAX = 0xFFFFFFFF

# Pillow color modes
COLOR_MODE_RGBA = "RGBA"
COLOR_MODE_RGB = "RGB"
COLOR_BLACK = (0, 0, 0)

# Encoder quality bounds (passed through to Pillow)
QUALITY_MIN = 0
QUALITY_MAX = 100

# Pillow metadata keys carrying device density
DENSITY_INFO_KEYS = ("dpi", "jfif_density", "jfif_unit")

# Smallest downsample factor a source can be asked to decode at
MIN_SAMPLE_SIZE = 1
