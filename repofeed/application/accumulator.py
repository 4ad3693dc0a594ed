from __future__ import annotations
from collections.abc import Iterable, Sequence
from repofeed.domain.entities import PAGE_SIZE, RepoRecord, ResultPage


def merge(existing: Sequence[RepoRecord], page: ResultPage) -> list[RepoRecord]:
    """
    Append page.items to existing, skipping any id already present.
    First occurrence wins, so arrival order is preserved.
    """
    seen = {r.id for r in existing}
    merged = list(existing)
    for record in page.items:
        if record.id in seen:
            continue
        seen.add(record.id)
        merged.append(record)
    return merged


class ResultAccumulator:
    """
    Incremental version of merge() for a live result list.

    Keeps a set of seen ids next to the ordered list so each membership
    check is O(1) no matter how far the user has scrolled.

    A page shorter than page_size is taken to mean there is nothing after
    it. This is a guess: a backend that filters a page after paginating
    can return a short page mid-stream and we would stop early.
    """

    def __init__(self, page_size: int = PAGE_SIZE) -> None:
        self._page_size = page_size
        self._results:  list[RepoRecord] = []
        self._seen:     set[int] = set()
        self.next_page  = 1

    @property
    def results(self) -> list[RepoRecord]:
        return self._results

    def __len__(self) -> int:
        return len(self._results)

    def merge(self, page: ResultPage) -> list[RepoRecord]:
        """Add a page and return only the records that were new."""
        return self.extend(page.items)

    def extend(self, records: Iterable[RepoRecord]) -> list[RepoRecord]:
        fresh = []
        for record in records:
            if record.id in self._seen:
                continue
            self._seen.add(record.id)
            fresh.append(record)
        self._results.extend(fresh)
        return fresh

    def is_last_page(self, page: ResultPage) -> bool:
        return len(page.items) < self._page_size

    def advance(self) -> int:
        self.next_page += 1
        return self.next_page

    def reset(self) -> None:
        # Mutate in place: a SearchSession may hold the same list object
        self._results.clear()
        self._seen.clear()
        self.next_page = 1
