"""Global constants for the EasyEDA to KiCad converter."""

# Library naming
LIBRARY_NAME = "e2k"
"""Nickname used for the generated symbol, footprint and 3D libraries."""

GENERATOR = "e2k"
"""Value written into the ``(generator ...)`` field of generated files."""

# Units
EE_UNIT_MM = 0.254
"""One EasyEDA geometry unit (10 mil) expressed in millimetres."""

MM_PER_MIL = 0.0254
"""Millimetres per mil, used by the legacy symbol dialect."""

# File format versions
SYMBOL_LIB_VERSION = "20211014"
FOOTPRINT_VERSION = "20211014"

# Polygon pad fallback
POLYGON_PAD_PLACEHOLDER_SIZE = 0.005
"""Copper size (mm) forced on polygon pads; the real outline is the primitive."""

POLYGON_PAD_OUTLINE_WIDTH = 0.1
"""Stroke width (mm) of the custom-pad polygon primitive."""

# Symbol text defaults (mm)
SYMBOL_TEXT_SIZE = 1.27
PIN_TEXT_SIZE = 1.0
PROPERTY_OFFSET = 2.54

# Footprint text defaults (mm)
FOOTPRINT_TEXT_SIZE = 1.0
FOOTPRINT_TEXT_THICKNESS = 0.15
FOOTPRINT_TEXT_OFFSET = 4.0
DEFAULT_LINE_WIDTH = 0.15

# Pin length above which a pin is reported as unusual (mm)
PIN_LENGTH_WARNING = 25.4
