from __future__ import annotations

from dataclasses import asdict, dataclass
import re

_OFFSET_RE = re.compile(r"^[+-]?\d+(?:\.\d+)?$", re.ASCII)

# LRC keys recognized by the parser, in lookup order
TAG_KEYS: tuple[str, ...] = ("ti", "ar", "al", "offset", "by")


@dataclass(frozen=True, slots=True)
class TagSet:
    ti: str = ""  # title
    ar: str = ""  # artist
    al: str = ""  # album
    offset: str = ""  # ms, e.g. "+1000"
    by: str = ""  # lyric editor

    @property
    def title(self) -> str:
        return self.ti

    @property
    def artist(self) -> str:
        return self.ar

    @property
    def album(self) -> str:
        return self.al

    @property
    def editor(self) -> str:
        return self.by

    @property
    def offset_ms(self) -> int:
        """ASCII decimal offset rounded to whole ms; anything else counts as 0."""
        raw = self.offset.strip()
        if _OFFSET_RE.match(raw):
            return round(float(raw))
        return 0

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class LyricLine:
    time: int
    text: str


@dataclass(frozen=True, slots=True)
class LrcDocument:
    tags: TagSet
    lines: tuple[LyricLine, ...]


@dataclass(frozen=True, slots=True)
class LrcParseStats:
    lines_total: int
    lines_with_timestamps: int
    lines_ignored: int
    lines_kept: int
