from enum import Enum


class Dialect(str, Enum):
    """The two flavors of the format. They share the file layout but not the
    lane codes, nothing in a file reliably tells them apart so the dialect
    always has to be given explicitly"""

    DTX = "dtx"
    GDA = "gda"
