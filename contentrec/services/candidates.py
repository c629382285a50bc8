from typing import Iterable, List, Set

from ..models.content import ContentItem


class CandidatePool:
    """Ordered result list that refuses excluded ids and duplicates.

    Every source in a fallback chain feeds the same pool, so later, cruder
    sources can only fill the slots the earlier ones left open.
    """

    def __init__(self, limit: int, exclude: Iterable[str] = ()):
        self.limit = limit
        self.excluded: Set[str] = set(exclude)
        self._seen: Set[str] = set(self.excluded)
        self.items: List[ContentItem] = []

    @property
    def remaining(self) -> int:
        return max(self.limit - len(self.items), 0)

    @property
    def is_full(self) -> bool:
        return self.remaining == 0

    def taken_ids(self) -> Set[str]:
        """Ids a further source must skip: the exclusion set plus everything selected."""
        return set(self._seen)

    def extend(self, candidates: Iterable[ContentItem]) -> int:
        added = 0
        for item in candidates:
            if self.is_full:
                break
            if item.id in self._seen:
                continue
            self._seen.add(item.id)
            self.items.append(item)
            added += 1
        return added
