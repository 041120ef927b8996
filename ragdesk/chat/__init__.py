"""Streaming chat: transcript ownership and frame decoding.

Responsibilities:
    - Single in-flight exchange per transcript
    - Folding ``data:`` frames into the pending assistant turn
    - Finalizing turns on completion, failure or cancellation
"""

from ragdesk.chat.frames import decode_frame, is_done
from ragdesk.chat.reconciler import (
    FAILURE_MESSAGE,
    WELCOME_TURN_ID,
    MessageStreamReconciler,
)

__all__ = [
    "FAILURE_MESSAGE",
    "WELCOME_TURN_ID",
    "MessageStreamReconciler",
    "decode_frame",
    "is_done",
]
