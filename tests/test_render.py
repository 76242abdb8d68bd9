import io
import struct

import pytest

from sensorchart.align import align_series
from sensorchart.errors import RenderError
from sensorchart.models import DEFAULT_STYLE, AlignedSeries, ChartStyle, Row
from sensorchart.render import _draw, create_chart, tick_positions

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def _png_size(data):
    return struct.unpack(">II", data[16:24])


def _series(n):
    rows = [
        Row(time=f"12:00:{i:02d}.000", ram=40.0 + i, cpu=120.0 if i == 3 else 10.0, gpu=-5.0)
        for i in range(n)
    ]
    return align_series(rows)


def test_writes_png_of_fixed_size(tmp_path):
    out = tmp_path / "table.png"
    create_chart(_series(30), out)

    data = out.read_bytes()
    assert data.startswith(PNG_MAGIC)
    assert _png_size(data) == (1200, 900)


def test_empty_series_renders_blank_chart(tmp_path):
    out = tmp_path / "empty.png"
    create_chart(AlignedSeries(), out)
    assert out.read_bytes().startswith(PNG_MAGIC)


def test_single_point(tmp_path):
    out = tmp_path / "one.png"
    create_chart(_series(1), out)
    assert out.read_bytes().startswith(PNG_MAGIC)


def test_renders_to_buffer_with_custom_style():
    style = ChartStyle(width=640, height=480, font_size=12, background_color="#202020",
                       foreground_color="#eeeeee")
    buf = io.BytesIO()
    create_chart(_series(5), buf, style)
    assert _png_size(buf.getvalue()) == (640, 480)


def test_tick_positions_stay_in_range():
    assert tick_positions(0, 10) == []
    assert tick_positions(1, 10) == [0]
    assert tick_positions(5, 10) == [0, 1, 2, 3, 4]
    ticks = tick_positions(1000, 10)
    assert len(ticks) == 10
    assert ticks[0] == 0 and ticks[-1] < 1000


def test_unwritable_output_raises(tmp_path):
    with pytest.raises(RenderError):
        create_chart(_series(3), tmp_path / "no" / "such" / "dir" / "out.png")


def test_legend_lists_each_metric():
    fig = _draw(_series(4), DEFAULT_STYLE)
    legend = fig.axes[0].get_legend()
    assert [t.get_text() for t in legend.get_texts()] == ["RAM", "CPU", "GPU"]
    assert fig.axes[0].get_ylim() == (0.0, 100.0)
