"""
Frames Module - Cancellable recurring frame task

A FrameLoop runs its callback once per display refresh until cancelled.
The scheduler it drives only needs ``request_frame(callback) -> handle``
and ``cancel_frame(handle)``; the callback receives the refresh timestamp
in milliseconds.
"""

import logging

logger = logging.getLogger(__name__)


class FrameLoop:
    def __init__(self, scheduler, callback):
        self.scheduler = scheduler
        self.callback = callback
        self._handle = None
        self._cancelled = True

    @property
    def running(self):
        return not self._cancelled

    @property
    def pending(self):
        return self._handle is not None

    def start(self):
        if self.running:
            return
        self._cancelled = False
        self._handle = self.scheduler.request_frame(self._tick)

    def cancel(self):
        self._cancelled = True
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None

    def _tick(self, timestamp):
        self._handle = None
        if self._cancelled:
            return
        self.callback(timestamp)
        # The callback may have cancelled the loop (teardown from a frame).
        if not self._cancelled:
            self._handle = self.scheduler.request_frame(self._tick)


__all__ = ['FrameLoop']
