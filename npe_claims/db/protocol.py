"""
Protocol definition for dataset writer interface.

Defines the contract that DatasetWriter (PostgreSQL) and in-memory test
writers satisfy.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from npe_claims.core.dataset import SeedDataset


@runtime_checkable
class DatasetWriterProtocol(Protocol):
    """
    Protocol for dataset writer implementations.

    A writer replaces the full contents of the six tables with a dataset,
    atomically: afterwards either the whole dataset is visible or the
    previous contents are untouched.
    """

    def load(self, dataset: "SeedDataset") -> dict[str, int]:
        """Replace all tables with the dataset; return rows written per table."""
        ...

    def get_all_counts(self) -> dict[str, int]:
        """Get rows written per table by the last successful load."""
        ...
