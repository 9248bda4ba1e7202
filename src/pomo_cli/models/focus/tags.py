"""Tag learning and autocomplete for task input."""

from collections.abc import Iterable
from datetime import date, timedelta

from pydantic import BaseModel, ConfigDict, Field

TAG_MAX_AGE_DAYS = 30


class TagInfo(BaseModel):
    """A learned tag with usage metadata."""

    model_config = ConfigDict(extra="ignore")

    name: str
    last_used: date
    count: int = Field(default=1, ge=1)


class TagStore(BaseModel):
    """Learned tags, kept sorted by usage count (most used first).

    Identity is case-insensitive; the first spelling seen is the one shown.
    """

    model_config = ConfigDict(extra="ignore")

    tags: list[TagInfo] = Field(default_factory=list)

    def _find(self, name: str) -> TagInfo | None:
        key = name.lower()
        for tag in self.tags:
            if tag.name.lower() == key:
                return tag
        return None

    def record_usage(self, names: Iterable[str], today: date) -> None:
        """Learn new tags and bump existing ones, then re-sort the store."""
        for name in names:
            if not name:
                continue
            tag = self._find(name)
            if tag is not None:
                tag.count += 1
                tag.last_used = today
            else:
                self.tags.append(TagInfo(name=name, last_used=today))

        # Ties go to the most recently used tag; sort is stable after that.
        self.tags.sort(key=lambda t: (t.count, t.last_used), reverse=True)

    def suggest(self, partial: str) -> str | None:
        """Return the single best completion for *partial*, if any.

        A prefix match on the most used tag wins; failing that, the most used
        tag containing *partial* anywhere.
        """
        if not partial:
            return None

        needle = partial.lower()
        for tag in self.tags:
            if tag.name.lower().startswith(needle):
                return tag.name
        for tag in self.tags:
            if needle in tag.name.lower():
                return tag.name
        return None

    def recent(self, n: int) -> list[str]:
        """Names of the top *n* tags."""
        return [tag.name for tag in self.tags[: max(n, 0)]]

    def cleanup(self, today: date, max_age_days: int = TAG_MAX_AGE_DAYS) -> int:
        """Drop tags unused for more than *max_age_days*. Returns how many."""
        cutoff = today - timedelta(days=max_age_days)
        before = len(self.tags)
        self.tags = [tag for tag in self.tags if tag.last_used >= cutoff]
        return before - len(self.tags)
