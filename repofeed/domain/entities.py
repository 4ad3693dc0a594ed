from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum


PAGE_SIZE = 10


class SortKey(str, Enum):
    STARS   = "stars"
    FORKS   = "forks"
    UPDATED = "updated"


class SortOrder(str, Enum):
    ASC  = "asc"
    DESC = "desc"


class SearchStatus(str, Enum):
    IDLE      = "idle"
    LOADING   = "loading"
    EXHAUSTED = "exhausted"
    ERRORED   = "errored"


class DocumentStatus(str, Enum):
    IDLE    = "idle"
    LOADING = "loading"
    SHOWN   = "shown"
    ERRORED = "errored"


@dataclass(frozen=True)
class FilterSet:
    """
    Immutable snapshot of the filters driving one search.

    Two instances compare by value. A commit of a FilterSet that is not
    equal to the current one starts a new search epoch.

    license and min_stars travel with every request but the backend may
    ignore them.
    """
    text:      str = "c"
    language:  str | None = None
    sort_key:  SortKey = SortKey.STARS
    order:     SortOrder = SortOrder.DESC
    keywords:  str = ""
    topics:    str = ""
    license:   str | None = None
    min_stars: int | None = None

    def with_field(self, name: str, value) -> FilterSet:
        return replace(self, **{name: value})

    def to_params(self, page: int, per_page: int = PAGE_SIZE) -> dict[str, str | int]:
        """
        Translate into the query parameters the search endpoint expects.
        Empty optional fields are left out rather than sent blank.
        """
        params: dict[str, str | int] = {
            "query":    self.text,
            "page":     page,
            "per_page": per_page,
            "sort":     self.sort_key.value,
            "order":    self.order.value,
        }
        optional = {
            "language": self.language,
            "license":  self.license,
            "minStars": self.min_stars,
            "keywords": self.keywords,
            "topics":   self.topics,
        }
        for key, value in optional.items():
            if value is None or value == "":
                continue
            params[key] = value
        return params


@dataclass(frozen=True)
class RepoRecord:
    """
    One repository as shown in the feed.

    Field names are ours; the HTTP client maps the backend's
    full_name / owner.login / html_url onto them.
    """
    id:          int
    full_name:   str
    description: str | None
    owner_login: str
    name:        str
    url:         str


@dataclass(frozen=True)
class ResultPage:
    """One page of search results, tagged with the request that produced it."""
    items:             tuple[RepoRecord, ...]
    requested_page:    int
    requested_filters: FilterSet
    generation:        int = 0


@dataclass(frozen=True)
class Failure:
    """Value returned instead of a ResultPage when the request failed."""
    cause: Exception

    @property
    def message(self) -> str:
        return str(self.cause) or type(self.cause).__name__


@dataclass
class SearchSession:
    """
    Mutable state of the current search, owned by the orchestrator.

    Replaced wholesale on every commit. generation increases with each
    replacement so that a page requested by an earlier session is
    recognised even when its FilterSet happens to be equal.
    """
    filters:    FilterSet
    generation: int = 0
    next_page:  int = 1
    results:    list[RepoRecord] = field(default_factory=list)
    status:     SearchStatus = SearchStatus.IDLE
    error:      Exception | None = None

    def owns(self, page: ResultPage) -> bool:
        return (
            page.generation == self.generation
            and page.requested_filters == self.filters
        )


@dataclass(frozen=True)
class DocumentRequest:
    owner: str
    repo:  str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class DocumentState:
    key:             DocumentRequest | None = None
    rendered_markup: str | None = None
    status:          DocumentStatus = DocumentStatus.IDLE
    error:           Exception | None = None
    request_id:      int = 0
