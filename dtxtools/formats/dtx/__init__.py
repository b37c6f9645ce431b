"""
DTX and GDA files

Line-based text formats written by DTXCreator and GDA Creator. Both dialects
share the same "#KEY: value" layout, measures are described by
"#<measure><lane>: <chips>" lines, but each dialect uses its own lane codes.
"""

from .load import DecodeError, EmptyChartError, decode, load_dtx, load_gda
