"""
Generic result container for all pyreplication computations.

The Result class provides a standardized envelope that all domain-specific
results use. This enables shared tooling for timing, diagnostics, reproducibility,
and persistence while allowing domains to define their own parameter structures.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, seeds, block layout)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for statistical computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (test statistics, indicator arrays)
        info: Structured metadata (method, block layout, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=HTestParams(...),
        ...     info={'test_type': 'trimmed_t'},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_hypothesis'
        ... )

        >>> Result(
        ...     params=SimulationParams(...),
        ...     info={'n_blocks': 10, 'n_jobs': 4},
        ...     timing={'total_seconds': 12.5, 'population_targets': 0.2},
        ...     backend_name='cpu_simulation'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
