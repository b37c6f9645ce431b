from pathlib import Path
from typing import Any, Dict, Protocol

from dtxtools.chart import ChartDocument


class Loader(Protocol):
    """A Loader deserializes a file to a ChartDocument and possibly takes in
    some options via the kwargs"""

    def __call__(self, path: Path, **kwargs: Any) -> ChartDocument:
        ...


class Dumper(Protocol):
    """A Dumper is a callable that takes in a ChartDocument, a Path hint and
    potential options, then gives back a dict that maps file name suggestions
    to the binary content of the file"""

    def __call__(
        self, document: ChartDocument, path: Path, **kwargs: Any
    ) -> Dict[Path, bytes]:
        ...
