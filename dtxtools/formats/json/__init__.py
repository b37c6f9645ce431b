"""
JSON chart data

A lossless dump of a decoded ChartDocument : chart info, note counts and the
raw lane strings of every measure. Useful to feed the chart to other tools
without having to deal with the DTX dialects
"""

from .dump import dump_document, dump_json
from .load import load_document, load_json
