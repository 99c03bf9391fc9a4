"""
Progress reporting and cooperative cancellation.

Aligners poll a listener at row boundaries during the fill pass. A listener
that returns True asks for the current operation to stop.
"""

from typing import Callable, Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class ProgressListener(Protocol):
    def report(self, fraction: float) -> bool:
        """
        Args:
            fraction: A number between 0 and 1 inclusive; 0 when unknown.

        Returns:
            True if the caller has requested cancellation.
        """
        ...


class CallbackProgressListener:
    """Adapts a plain ``fraction -> bool`` callable."""
    __slots__ = ('_callback',)

    def __init__(self, callback: Callable[[float], Optional[bool]]):
        self._callback = callback

    def report(self, fraction: float) -> bool:
        return bool(self._callback(fraction))


def as_progress_listener(progress: Union[ProgressListener, Callable, None]) -> Optional[ProgressListener]:
    if progress is None:
        return None
    if hasattr(progress, 'report'):
        return progress
    if callable(progress):
        return CallbackProgressListener(progress)
    raise TypeError(f"Not a progress listener: {progress!r}")


class CompoundProgressListener:
    """
    Folds the progress of many sub-operations into one overall fraction.

    The work is split into ``total_sections`` sections. Each sub-operation
    covers ``section_size`` sections starting at ``sections_completed`` and
    reports through ``minor``; once cancellation is requested it stays set.

    Examples:
        >>> compound = CompoundProgressListener(listener, total_sections=10)
        >>> aligner.align(a, b, scores, gaps, progress=compound.minor)
        >>> compound.increment_sections_completed(1)
    """

    def __init__(self, progress: Optional[ProgressListener], total_sections: float):
        self._progress = as_progress_listener(progress)
        self.total_sections = max(float(total_sections), 1.0)
        self.sections_completed = 0.0
        self.section_size = 1.0
        self.cancelled = False
        self.minor = CallbackProgressListener(self._report_minor)

    def set_section_size(self, size: float):
        self.section_size = size

    def increment_sections_completed(self, count: float = 1) -> bool:
        self.sections_completed += count
        return self._report_minor(0.0)

    def is_cancelled(self) -> bool:
        return self.cancelled

    def _report_minor(self, fraction: float) -> bool:
        total = (self.sections_completed + fraction * self.section_size) / self.total_sections
        if self._progress is not None and self._progress.report(min(total, 1.0)):
            self.cancelled = True
        return self.cancelled
