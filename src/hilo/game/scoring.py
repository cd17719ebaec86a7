"""Hi-Lo scoring engine.

Rounds 1-2 run in the HIGH direction (guess the most popular answer), rounds
3-4 in the LOW direction (guess the least popular answer).

| Round | Direction | Formula           | Max |
|-------|-----------|-------------------|-----|
| 1     | high      | (201 - rank) * 1  | 200 |
| 2     | high      | (201 - rank) * 2  | 400 |
| 3     | low       | rank * 3          | 600 |
| 4     | low       | rank * 4          | 800 |

A miss (no rank) scores 0 in every round. Stored ranks can run past 200
(seeded lists go to 400, judged answers to 500): see stored_rank_score.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from hilo.game.domain.entities import RoundDirection
from hilo.game.domain.errors import InvalidArgumentError

ROUND_COUNT = 4
MIN_RANK = 1
MAX_RANK = 200

ROUND_MULTIPLIERS = {
    1: 1,
    2: 2,
    3: 3,
    4: 4,
}


class ScoredRound(Protocol):
    round_score: int


def _check_round(round_number: int) -> None:
    if (
        isinstance(round_number, bool)
        or not isinstance(round_number, int)
        or round_number not in ROUND_MULTIPLIERS
    ):
        raise InvalidArgumentError(
            f"Invalid round number: {round_number}. Must be 1-{ROUND_COUNT}."
        )


def round_direction(round_number: int) -> RoundDirection:
    _check_round(round_number)
    return RoundDirection.HIGH if round_number <= 2 else RoundDirection.LOW


def round_score(round_number: int, rank: Optional[int]) -> int:
    _check_round(round_number)

    if rank is None:
        return 0

    if isinstance(rank, bool) or not isinstance(rank, int) or not MIN_RANK <= rank <= MAX_RANK:
        raise InvalidArgumentError(
            f"Invalid rank: {rank}. Must be an integer {MIN_RANK}-{MAX_RANK}."
        )

    multiplier = ROUND_MULTIPLIERS[round_number]
    if round_direction(round_number) == RoundDirection.HIGH:
        return (MAX_RANK + 1 - rank) * multiplier
    return rank * multiplier


def total_score(rounds: Iterable[ScoredRound]) -> int:
    return sum(r.round_score for r in rounds)


def round_max_score(round_number: int) -> int:
    if round_direction(round_number) == RoundDirection.HIGH:
        return round_score(round_number, MIN_RANK)
    return round_score(round_number, MAX_RANK)


def max_total_score() -> int:
    return sum(round_max_score(r) for r in ROUND_MULTIPLIERS)


def scoring_rank(rank: int, ceiling: int = MAX_RANK) -> int:
    """Bound a stored rank (seeded or AI-judged) into the scoring domain."""
    return max(MIN_RANK, min(rank, ceiling, MAX_RANK))


def stored_rank_score(round_number: int, rank: Optional[int], ceiling: int = MAX_RANK) -> int:
    """Score a stored rank, which may lie past the end of the scored list.

    Past the ceiling a HIGH round scores 0 and a LOW round scores as the ceiling.
    """
    if (
        rank is not None
        and rank > min(ceiling, MAX_RANK)
        and round_direction(round_number) == RoundDirection.HIGH
    ):
        return 0
    return round_score(round_number, None if rank is None else scoring_rank(rank, ceiling))
