from .request_recorder import RequestRecorder
from .retention_sweeper import RetentionSweeper, parse_retention_period, sweep
from .report_assembler import ReportAssembler

__all__ = [
    "RequestRecorder",
    "RetentionSweeper",
    "ReportAssembler",
    "parse_retention_period",
    "sweep",
]
