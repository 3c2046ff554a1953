"""Utils package initialization."""
from launchscope.utils.logger import get_logger, StageLogger, set_trace_id, get_trace_id
from launchscope.utils.text import clean_text

__all__ = ["get_logger", "StageLogger", "set_trace_id", "get_trace_id", "clean_text"]
