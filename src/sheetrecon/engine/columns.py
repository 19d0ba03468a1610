"""Column alignment between two tables' header rows."""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np
from scipy.optimize import linear_sum_assignment

from ..config import SIM_THRESHOLD
from ..models import Cell, ColumnMapping
from .similarity import similarity

logger = logging.getLogger(__name__)


def _header_text(header: Cell) -> str:
    return "" if header is None else str(header).strip()


class MatchingStrategy(ABC):
    """Assigns A headers to B headers given their similarity scores."""

    name: str = ""

    @abstractmethod
    def assign(
        self,
        headers_a: list[tuple[int, str]],
        headers_b: list[tuple[int, str]],
        threshold: float,
    ) -> ColumnMapping:
        """
        Build a one-to-one mapping.

        Args:
            headers_a: (index, trimmed header) pairs of non-empty A headers
            headers_b: (index, trimmed header) pairs of non-empty B headers
            threshold: scores must be strictly above this to be accepted
        """


class GreedyStrategy(MatchingStrategy):
    """
    Local-best assignment in A order.

    Each A header takes the highest-scoring B header that is still free.
    A later A header never gets a B header claimed earlier, even when it
    would have been a better fit. Equal scores go to the first B header seen.
    """

    name = "greedy"

    def assign(self, headers_a, headers_b, threshold):
        mapping: ColumnMapping = {}
        used: set[int] = set()

        for index_a, text_a in headers_a:
            best_index = -1
            best_score = 0.0

            for index_b, text_b in headers_b:
                if index_b in used:
                    continue
                score = similarity(text_a, text_b)
                if score > best_score and score > threshold:
                    best_score = score
                    best_index = index_b

            if best_index != -1:
                mapping[index_a] = best_index
                used.add(best_index)

        return mapping


class OptimalStrategy(MatchingStrategy):
    """
    Maximum total similarity assignment (Hungarian algorithm).

    Pairs at or below the threshold score zero and are dropped from the
    result, so a column can stay unmapped even when a partner is free.
    """

    name = "optimal"

    def assign(self, headers_a, headers_b, threshold):
        if not headers_a or not headers_b:
            return {}

        scores = np.zeros((len(headers_a), len(headers_b)))
        for i, (_, text_a) in enumerate(headers_a):
            for j, (_, text_b) in enumerate(headers_b):
                score = similarity(text_a, text_b)
                if score > threshold:
                    scores[i, j] = score

        row_ind, col_ind = linear_sum_assignment(scores, maximize=True)

        mapping: ColumnMapping = {}
        for i, j in zip(row_ind, col_ind):
            if scores[i, j] > 0:
                mapping[headers_a[i][0]] = headers_b[j][0]
        return mapping


STRATEGIES: dict[str, type[MatchingStrategy]] = {
    GreedyStrategy.name: GreedyStrategy,
    OptimalStrategy.name: OptimalStrategy,
}


def get_strategy(name: str) -> MatchingStrategy:
    """Look up a matching strategy by name."""
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown matching strategy '{name}' (expected one of: {', '.join(STRATEGIES)})"
        ) from None


class ColumnMatcher:
    """Derives a column mapping from two header rows."""

    def __init__(
        self,
        threshold: float = SIM_THRESHOLD,
        strategy: Optional[MatchingStrategy] = None,
    ):
        self.threshold = threshold
        self.strategy = strategy or GreedyStrategy()

    def match(self, headers_a: Sequence[Cell], headers_b: Sequence[Cell]) -> ColumnMapping:
        """Map each A column index to at most one B column index."""
        candidates_a = [
            (index, text)
            for index, text in ((i, _header_text(h)) for i, h in enumerate(headers_a))
            if text
        ]
        candidates_b = [
            (index, text)
            for index, text in ((i, _header_text(h)) for i, h in enumerate(headers_b))
            if text
        ]

        mapping = self.strategy.assign(candidates_a, candidates_b, self.threshold)
        logger.debug(
            f"Matched {len(mapping)} of {len(candidates_a)} columns "
            f"using {self.strategy.name} strategy"
        )
        return mapping

    def score(self, header_a: Cell, header_b: Cell) -> float:
        """Similarity of a single header pair."""
        return similarity(_header_text(header_a), _header_text(header_b))
