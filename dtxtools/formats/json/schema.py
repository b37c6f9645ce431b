from fractions import Fraction
from typing import Any, Mapping, Optional

from marshmallow import RAISE, Schema, ValidationError, fields, validate

from dtxtools.chart import Instrument

INSTRUMENT_NAMES = [i.value for i in Instrument]


class StrictSchema(Schema):
    class Meta:
        ordered = True
        unknown = RAISE


class LineField(fields.Field):
    """Positions inside a measure are exact fractions of a line, they are
    written as "numerator/denominator" strings (or just the integer)"""

    def _serialize(
        self, value: Optional[Fraction], attr: Optional[str], obj: Any, **kwargs: Any
    ) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def _deserialize(
        self,
        value: Any,
        attr: Optional[str],
        data: Optional[Mapping[str, Any]],
        **kwargs: Any,
    ) -> Fraction:
        try:
            fraction = Fraction(value)
        except (TypeError, ValueError, ZeroDivisionError) as e:
            raise ValidationError(f"Invalid line position : {value!r}") from e
        if fraction < 0:
            raise ValidationError(f"Line positions cannot be negative : {value!r}")
        return fraction


class ChartInfo(StrictSchema):
    title = fields.String(required=True)
    artist = fields.String(required=True)
    bpm = fields.Decimal(required=True, validate=validate.Range(min=0))
    levels = fields.Dict(
        keys=fields.String(validate=validate.OneOf(INSTRUMENT_NAMES)),
        values=fields.Decimal(validate=validate.Range(min=0)),
        required=True,
    )
    preview = fields.String(allow_none=True, load_default=None)
    preimage = fields.String(allow_none=True, load_default=None)


class BPMMarker(StrictSchema):
    line = LineField(required=True)
    bpm = fields.Decimal(
        required=True, validate=validate.Range(min=0, min_inclusive=False)
    )


class ShowHideMarker(StrictSchema):
    line = LineField(required=True)
    show = fields.Boolean(required=True)


class BGMMarker(StrictSchema):
    line = LineField(required=True)


class BarGroup(StrictSchema):
    lines = fields.Integer(required=True, validate=validate.Range(min=1))
    notes = fields.Dict(keys=fields.String(), values=fields.String(), required=True)
    bpm_markers = fields.Nested(
        BPMMarker, many=True, data_key="bpm markers", load_default=list
    )
    show_hide_markers = fields.Nested(
        ShowHideMarker, many=True, data_key="show hide markers", load_default=list
    )
    bgm_markers = fields.Nested(
        BGMMarker, many=True, data_key="bgm markers", load_default=list
    )


class ChartData(StrictSchema):
    version = fields.String(required=True, validate=validate.OneOf(["1.0.0"]))
    chart_info = fields.Nested(ChartInfo, required=True, data_key="chart info")
    metadata = fields.Dict(
        keys=fields.String(validate=validate.OneOf(INSTRUMENT_NAMES)),
        values=fields.Dict(
            keys=fields.String(), values=fields.Integer(validate=validate.Range(min=0))
        ),
        required=True,
    )
    bar_groups = fields.Nested(
        BarGroup, many=True, required=True, data_key="bar groups"
    )
