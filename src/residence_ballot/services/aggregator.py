"""Vote tallying for voting projects.

The aggregator turns the live vote rows of a project into a result
snapshot. It is a pure read: nothing is written, nothing is cached, and
two calls with no intervening writes return identical snapshots.

Ranking is by weighted votes, highest first. Equal tallies are ordered by
candidate creation order (earliest registered candidate first).
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from residence_ballot.core.errors import ConfigurationError, ProjectNotFoundError
from residence_ballot.core.settings import settings
from residence_ballot.models import VotingMethod
from residence_ballot.repositories import ProjectConfig, VoteRow

logger = logging.getLogger(__name__)


class ProjectSource(Protocol):
    def get_config(self, project_id: str) -> ProjectConfig | None: ...


class VoteSource(Protocol):
    def tallies_for(self, project_id: str) -> list[VoteRow]: ...


@dataclass(frozen=True)
class CandidateResult:
    """Tally of a single candidate."""

    id: str
    name: str
    raw_votes: int
    weighted_votes: float
    percentage: float


@dataclass(frozen=True)
class ResultSnapshot:
    """Point-in-time tally of a project; never persisted as authoritative state."""

    project_id: str
    voting_method: VotingMethod
    candidates: tuple[CandidateResult, ...]
    winner_id: str | None
    total_votes: int
    total_weighted_votes: float
    # Denominator used for percentages: declared total area or the weighted total.
    percentage_base: float

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        data = asdict(self)
        data["voting_method"] = str(self.voting_method)
        data["candidates"] = [asdict(c) for c in self.candidates]
        return data


def percentage_of(value: float, base: float, precision: int) -> float:
    """Return ``value`` as a percentage of ``base``; 0.0 when ``base`` is 0."""
    if base <= 0:
        return 0.0
    return round(value / base * 100, precision)


class VoteAggregator:
    """Computes result snapshots from a project store and a vote store."""

    def __init__(
        self,
        projects: ProjectSource,
        votes: VoteSource,
        *,
        precision: int | None = None,
    ) -> None:
        self.projects = projects
        self.votes = votes
        self.precision = settings.percentage_precision if precision is None else precision

    def compute_results(self, project_id: str) -> ResultSnapshot:
        """Tally the live votes of a project.

        Args:
            project_id: Identifier of the voting project.

        Returns:
            The ranked result snapshot.

        Raises:
            ProjectNotFoundError: If the project does not exist.
            ConfigurationError: If the voting method is invalid, a manual-weight
                project has no positive total area, or a vote references a
                candidate outside the project.
            StorageError: If the stores cannot be read.
        """
        config = self.projects.get_config(project_id)
        if config is None:
            raise ProjectNotFoundError(project_id)

        if config.voting_method is VotingMethod.WEIGHTED_BY_SIZE_MANUAL:
            if config.total_area is None or config.total_area <= 0:
                raise ConfigurationError(
                    "Total area is required for the manual size-weighted voting method"
                )

        rows = self.votes.tallies_for(project_id)

        known = {candidate.id for candidate in config.candidates}
        counts: dict[str, int] = defaultdict(int)
        weights: dict[str, list[float]] = defaultdict(list)
        for row in rows:
            if row.candidate_id not in known:
                raise ConfigurationError(
                    f"Vote references candidate {row.candidate_id} outside project {project_id}"
                )
            counts[row.candidate_id] += 1
            weights[row.candidate_id].append(row.weight)

        # fsum is exact, so the sums do not depend on row order.
        weighted = {cid: math.fsum(weights[cid]) for cid in known}
        total_weighted = math.fsum(weighted.values())

        if config.voting_method is VotingMethod.WEIGHTED_BY_SIZE_MANUAL:
            # Abstentions count against the declared area.
            base = float(config.total_area)  # type: ignore[arg-type]
        else:
            base = total_weighted

        ranked = sorted(
            config.candidates,
            key=lambda c: (-weighted[c.id], c.order_index),
        )
        results = tuple(
            CandidateResult(
                id=candidate.id,
                name=candidate.name,
                raw_votes=counts[candidate.id],
                weighted_votes=weighted[candidate.id],
                percentage=percentage_of(weighted[candidate.id], base, self.precision),
            )
            for candidate in ranked
        )

        winner_id = results[0].id if results and total_weighted > 0 else None

        logger.debug(
            "Computed results for project %s: %d votes, %.4f weighted, winner=%s",
            project_id,
            len(rows),
            total_weighted,
            winner_id,
        )
        return ResultSnapshot(
            project_id=config.project_id,
            voting_method=config.voting_method,
            candidates=results,
            winner_id=winner_id,
            total_votes=len(rows),
            total_weighted_votes=total_weighted,
            percentage_base=base,
        )
