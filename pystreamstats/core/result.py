"""
Result envelope shared by statistic summaries.

A statistic summary bundles its numeric payload with the mode and
significance level it was evaluated at, the time each evaluation stage
took, and any non-fatal numerical warnings raised along the way.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable envelope around a summary payload.

    Attributes:
        params: Payload (statistic value, p-value, critical value, ...)
        info: Evaluation context: mode, alpha, distribution kind
        timing: Seconds per evaluation stage plus 'total_seconds', or None
        backend_name: Code path that produced the payload
        warnings: Messages of warnings raised while evaluating
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        return any(substring in w for w in self.warnings)

    @property
    def total_seconds(self) -> float | None:
        if self.timing is None:
            return None
        return self.timing.get('total_seconds')
