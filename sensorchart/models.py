from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ColumnMap(BaseModel):
    """Zero-based positions of the fields we read from each CSV record."""

    model_config = ConfigDict(frozen=True)

    time: int = Field(ge=0)
    ram: int = Field(ge=0)
    cpu: int = Field(ge=0)
    gpu: int = Field(ge=0)


# HWiNFO64 v7.40 sensor log: Date,Time,...,Physical Memory Load [%] (7),
# Total CPU Usage [%] (42), GPU Core Load [%] (213)
HWINFO_COLUMNS = ColumnMap(time=1, ram=7, cpu=42, gpu=213)
SEQUENTIAL_COLUMNS = ColumnMap(time=0, ram=1, cpu=2, gpu=3)

COLUMN_PRESETS = {
    "hwinfo": HWINFO_COLUMNS,
    "sequential": SEQUENTIAL_COLUMNS,
}


class Row(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: str
    ram: float
    cpu: float
    gpu: float


class AlignedSeries(BaseModel):
    """Per-metric series sharing one positional x axis."""

    model_config = ConfigDict(frozen=True)

    x_index: List[int] = Field(default_factory=list)
    x_label: List[str] = Field(default_factory=list)
    ram: List[float] = Field(default_factory=list)
    cpu: List[float] = Field(default_factory=list)
    gpu: List[float] = Field(default_factory=list)

    @model_validator(mode="after")
    def _same_length(self) -> "AlignedSeries":
        lengths = {
            len(self.x_index),
            len(self.x_label),
            len(self.ram),
            len(self.cpu),
            len(self.gpu),
        }
        if len(lengths) > 1:
            raise ValueError(f"series lengths differ: {sorted(lengths)}")
        return self

    def __len__(self) -> int:
        return len(self.x_index)


class ChartStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    font_family: str = "DejaVu Sans Mono"
    font_size: int = Field(default=24, gt=0)
    background_color: str = "#ffffff"
    foreground_color: str = "#000000"
    ram_color: str = "#0000ff"
    cpu_color: str = "#ff0000"
    gpu_color: str = "#00ff00"

    # pixels
    width: int = Field(default=1200, gt=0)
    height: int = Field(default=900, gt=0)
    dpi: int = Field(default=100, gt=0)
    margin: int = Field(default=24, ge=0)
    x_label_area: int = Field(default=50, ge=0)
    y_label_area: int = Field(default=50, ge=0)
    legend_area: int = Field(default=140, ge=0)

    y_range: Tuple[float, float] = (0.0, 100.0)
    y_label_count: int = Field(default=10, gt=0)
    x_label_count: int = Field(default=10, gt=0)

    title: str = "System Usage"
    x_caption: str = "Time"
    y_caption: str = "Usage (%)"

    @property
    def title_font_size(self) -> float:
        return self.font_size * 5 / 4


DEFAULT_STYLE = ChartStyle()


class EncodingReport(BaseModel):
    source: str
    output: str
    bytes_in: int
    bytes_out: int
    non_ascii: bool
    detected: Optional[str] = None
    sha256: str


class NormalizedCsv(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str


class NormalizeResponse(BaseModel):
    normalized_csv: NormalizedCsv
    report: EncodingReport


class PipelineResult(BaseModel):
    input_path: str
    output_path: str
    rows: int
    first_label: Optional[str] = None
    last_label: Optional[str] = None
    encoding: Optional[EncodingReport] = None


class HealthResponse(BaseModel):
    ok: bool = True
