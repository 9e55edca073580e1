from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .errors import DeckExhausted

RANKS = "23456789TJQKA"
SUITS = "shdc"
RANK_VALUE = {rank: idx for idx, rank in enumerate(RANKS, start=2)}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    def __str__(self) -> str:
        return self.label


class Deck:
    """Cards are dealt from the front; a hand never sees the same card twice."""

    def __init__(self, cards: Iterable[Card]) -> None:
        self.cards: List[Card] = list(cards)

    def __len__(self) -> int:
        return len(self.cards)

    def deal(self) -> Card:
        if not self.cards:
            raise DeckExhausted("Not enough cards left in deck")
        return self.cards.pop(0)

    def deal_many(self, count: int) -> List[Card]:
        if len(self.cards) < count:
            raise DeckExhausted("Not enough cards left in deck")
        cards = self.cards[:count]
        del self.cards[:count]
        return cards

    def burn(self) -> None:
        self.deal()


def full_deck() -> List[Card]:
    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


def new_shuffled_deck(rng: Optional[random.Random] = None) -> Deck:
    rng = rng or random.Random()
    cards = full_deck()
    rng.shuffle(cards)
    return Deck(cards)


def remaining_after_excluding(known: Iterable[Card]) -> List[Card]:
    # Built from a fresh deck so simulations never touch the live one.
    excluded = set(known)
    return [card for card in full_deck() if card not in excluded]


def cards_to_labels(cards: Iterable[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    return Card(label[0].upper(), label[1].lower())


def parse_cards(labels: Iterable[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
