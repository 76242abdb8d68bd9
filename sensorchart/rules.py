"""
Fixed rules for reading a sensor log export.

The column layout is configuration (see models.ColumnMap); everything here is
the part of the format that never changes between runs.
"""

SOURCE_ENCODING = "cp1252"  # HWiNFO writes its CSV export as Windows-1252
TARGET_ENCODING = "utf-8"   # no BOM

# Value found in the time column of a header record.
HEADER_TOKEN = "Time"

# hours:minutes:seconds.milliseconds, the fraction may be absent
TIME_FORMAT = "%H:%M:%S.%f"
TIME_FORMAT_NO_FRACTION = "%H:%M:%S"

DEFAULT_INPUT_PATH = "table.csv"
DEFAULT_OUTPUT_PATH = "table.png"
