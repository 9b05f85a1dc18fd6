"""Streaming response decoding.

raw chunk -> FrameDecoder -> Frame -> TokenStreamReducer -> tokens + text
"""

from chainmind.streaming.decoder import DATA_PREFIX, Frame, FrameDecoder, iter_frames
from chainmind.streaming.reducer import (
    DONE_SENTINEL,
    PayloadShape,
    TokenStreamReducer,
    reduce_stream,
)
from chainmind.streaming.session import AnswerStream, SessionState

__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "AnswerStream",
    "Frame",
    "FrameDecoder",
    "PayloadShape",
    "SessionState",
    "TokenStreamReducer",
    "iter_frames",
    "reduce_stream",
]
