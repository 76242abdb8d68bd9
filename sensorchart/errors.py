"""Errors raised by the chart pipeline.

Everything that aborts a run derives from PipelineError, so callers only
need to catch one type.
"""


class PipelineError(Exception):
    """A stage of the pipeline could not complete."""


class NormalizationError(PipelineError):
    """The input file could not be read or rewritten."""


class MalformedRecordError(PipelineError):
    """A CSV record is too short or holds a non-numeric value."""


class TimeFormatError(PipelineError):
    """A time field does not match rules.TIME_FORMAT."""


class RenderError(PipelineError):
    """The chart could not be drawn or saved."""
