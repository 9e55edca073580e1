from __future__ import annotations

import itertools
from collections import Counter
from typing import NamedTuple, Optional, Sequence, Tuple

from .cards import Card

HAND_NAMES = (
    "high_card",
    "pair",
    "two_pair",
    "three_of_a_kind",
    "straight",
    "flush",
    "full_house",
    "four_of_a_kind",
    "straight_flush",
)


class HandRank(NamedTuple):
    category: int
    values: Tuple[int, ...]

    @property
    def name(self) -> str:
        return HAND_NAMES[self.category]


def describe_rank(rank: HandRank) -> str:
    return HAND_NAMES[rank.category]


def evaluate_best(cards: Sequence[Card]) -> HandRank:
    """Return the best 5-card rank among 5 to 7 cards. Higher is better."""
    if not 5 <= len(cards) <= 7:
        raise ValueError(f"Expected 5 to 7 cards, got {len(cards)}")
    best: Optional[HandRank] = None
    for combo in itertools.combinations(cards, 5):
        rank = _evaluate_five(combo)
        if best is None or rank > best:
            best = rank
    assert best is not None
    return best


def compare(hand_a: Sequence[Card], hand_b: Sequence[Card], board: Sequence[Card]) -> int:
    """1 if ``hand_a`` wins over ``board``, -1 if ``hand_b`` does, 0 on a tie."""
    rank_a = evaluate_best(list(hand_a) + list(board))
    rank_b = evaluate_best(list(hand_b) + list(board))
    if rank_a > rank_b:
        return 1
    if rank_a < rank_b:
        return -1
    return 0


def _evaluate_five(cards: Sequence[Card]) -> HandRank:
    ranks = sorted((card.value for card in cards), reverse=True)
    is_flush = len({card.suit for card in cards}) == 1
    straight_high = _straight_high(ranks)

    counts = Counter(ranks)
    # Most copies first, higher rank breaks the tie.
    grouped = sorted(counts.items(), key=lambda item: (item[1], item[0]), reverse=True)
    shape = [count for _, count in grouped]
    by_group = [rank for rank, _ in grouped]

    if straight_high and is_flush:
        return HandRank(8, (straight_high,))
    if shape[0] == 4:
        return HandRank(7, (by_group[0], by_group[1]))
    if shape[0] == 3 and shape[1] == 2:
        return HandRank(6, (by_group[0], by_group[1]))
    if is_flush:
        return HandRank(5, tuple(ranks))
    if straight_high:
        return HandRank(4, (straight_high,))
    if shape[0] == 3:
        return HandRank(3, (by_group[0], by_group[1], by_group[2]))
    if shape[0] == 2 and shape[1] == 2:
        return HandRank(2, (by_group[0], by_group[1], by_group[2]))
    if shape[0] == 2:
        return HandRank(1, tuple(by_group[:4]))
    return HandRank(0, tuple(ranks))


def _straight_high(ranks: Sequence[int]) -> Optional[int]:
    unique = sorted(set(ranks), reverse=True)
    if len(unique) != 5:
        return None
    if unique[0] - unique[4] == 4:
        return unique[0]
    if unique == [14, 5, 4, 3, 2]:  # wheel
        return 5
    return None
