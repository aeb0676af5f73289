from __future__ import annotations

import logging
import re

from .model import TAG_KEYS, LrcDocument, LrcParseStats, LyricLine, TagSet

logger = logging.getLogger(__name__)

_TS_RE = re.compile(r"\[(\d{2,}):(\d{2})(?:\.(\d{2,3}))?\]", re.ASCII)  # [mm:ss] / [mm:ss.xx] / [mm:ss.xxx]
_TAG_RES = {key: re.compile(r"\[" + key + r":([^\]]*)\]", re.IGNORECASE) for key in TAG_KEYS}


def _parse_ts_to_ms(m: str, s: str, frac: str | None) -> int:
    # fraction digits are scaled by 10 as-is: ".50" -> 500ms, ".500" -> 5000ms
    ms = int(frac) * 10 if frac else 0
    return int(m) * 60_000 + int(s) * 1000 + ms


def parse_tags(text: str) -> TagSet:
    """
    Each tag is looked up independently over the whole text, so a tag placed
    after the lyrics or next to a time marker is still found. First match wins.
    """
    found: dict[str, str] = {}
    for key, tag_re in _TAG_RES.items():
        m = tag_re.search(text)
        if m:
            found[key] = m.group(1)
    return TagSet(**found)


def parse_lrc_with_stats(text: str) -> tuple[LrcDocument, LrcParseStats]:
    """
    Supported:
    - [mm:ss], [mm:ss.xx], [mm:ss.xxx] (first marker on a line sets its time)
    - [offset:+/-ms], applied to every line
    - tags: [ti:], [ar:], [al:], [offset:], [by:]

    Never raises: lines without a marker or without text are skipped.
    Result lines are sorted by time (stable, ties keep file order).
    """
    tags = parse_tags(text)
    offset_ms = tags.offset_ms

    lines: list[LyricLine] = []
    total = 0
    lines_with_ts = 0
    ignored = 0

    for raw in text.split("\n"):
        total += 1
        ts = _TS_RE.search(raw)
        if not ts:
            ignored += 1
            continue

        lines_with_ts += 1
        payload = _TS_RE.sub("", raw).strip().strip("\ufeff").strip()
        if not payload:
            ignored += 1
            logger.debug("Skipping timestamped line without text: %r", raw)
            continue

        t_ms = _parse_ts_to_ms(ts.group(1), ts.group(2), ts.group(3)) + offset_ms
        lines.append(LyricLine(time=t_ms, text=payload))

    lines.sort(key=lambda line: line.time)

    doc = LrcDocument(tags=tags, lines=tuple(lines))
    stats = LrcParseStats(
        lines_total=total,
        lines_with_timestamps=lines_with_ts,
        lines_ignored=ignored,
        lines_kept=len(doc.lines),
    )
    return doc, stats


def parse_lrc(text: str) -> LrcDocument:
    doc, _stats = parse_lrc_with_stats(text)
    return doc
