from typing import Dict

from . import dtx
from .enum import Dialect
from .typing import Loader

LOADERS: Dict[Dialect, Loader] = {
    Dialect.DTX: dtx.load_dtx,
    Dialect.GDA: dtx.load_gda,
}
