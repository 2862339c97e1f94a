"""
Mutation results.

Every mutation reports one of three outcomes instead of raising:

- applied: the layer was updated and its cached bitmap invalidated
- skipped: the target was missing or not applicable; nothing changed
- failed: the step could not complete; nothing changed

The pipeline collects results into a MutationReport. Only caller-input
errors (such as a malformed color) are raised.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class MutationStatus(str, Enum):
    """Outcome of a single mutation step."""
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class MutationResult:
    """Outcome of one mutation against one named layer."""

    layer_name: Optional[str]
    status: MutationStatus
    reason: Optional[str] = None
    field_name: Optional[str] = None

    @classmethod
    def applied(cls, layer_name: Optional[str]) -> 'MutationResult':
        return cls(layer_name, MutationStatus.APPLIED)

    @classmethod
    def skipped(cls, layer_name: Optional[str], reason: str) -> 'MutationResult':
        return cls(layer_name, MutationStatus.SKIPPED, reason)

    @classmethod
    def failed(cls, layer_name: Optional[str], reason: str) -> 'MutationResult':
        return cls(layer_name, MutationStatus.FAILED, reason)

    @property
    def ok(self) -> bool:
        return self.status == MutationStatus.APPLIED

    def for_field(self, field_name: str) -> 'MutationResult':
        """Copy of this result tagged with the request field it served."""
        return MutationResult(self.layer_name, self.status, self.reason, field_name)


@dataclass
class MutationReport:
    """Results of one pipeline run, in application order."""

    results: list[MutationResult] = field(default_factory=list)

    def add(self, result: MutationResult) -> None:
        self.results.append(result)

    def _with_status(self, status: MutationStatus) -> list[MutationResult]:
        return [r for r in self.results if r.status == status]

    @property
    def applied(self) -> list[MutationResult]:
        return self._with_status(MutationStatus.APPLIED)

    @property
    def skipped(self) -> list[MutationResult]:
        return self._with_status(MutationStatus.SKIPPED)

    @property
    def failed(self) -> list[MutationResult]:
        return self._with_status(MutationStatus.FAILED)

    @property
    def fields(self) -> list[str]:
        """Request fields that were evaluated, in order."""
        return [r.field_name for r in self.results if r.field_name]
