"""Assert what a piece of code sends over UDP."""
from .assertions import (
    MatchResult,
    get,
    should_not_receive,
    should_not_receive_any,
    should_not_receive_only,
    should_receive,
    should_receive_all,
    should_receive_all_and_not_receive_any,
    should_receive_only,
)
from .feedback import Recorder
from .session import CaptureSession
from .udp import SetupError, capture, capture_async

__version__ = '0.1.0'
