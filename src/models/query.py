# src/models/query.py

"""Search intent captured from the user's inputs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchQuery:
    """The latest search intent: free-text term and category filter.

    ``None`` or blank on either axis means "no constraint", not
    "match the empty string".
    """

    term: str | None = None
    category: str | None = None

    def to_params(self) -> dict[str, str]:
        """Query-string parameters, omitting empty fields."""
        params: dict[str, str] = {}
        if self.term and self.term.strip():
            params["name"] = self.term.strip()
        if self.category and self.category.strip():
            params["category"] = self.category.strip()
        return params

    @property
    def is_unfiltered(self) -> bool:
        """True when neither axis constrains the result."""
        return not self.to_params()
