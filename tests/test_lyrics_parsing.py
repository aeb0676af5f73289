from __future__ import annotations

import pytest

from lrc_engine.lrc.model import LyricLine, TagSet
from lrc_engine.lrc.parse import parse_lrc, parse_lrc_with_stats, parse_tags


def test_parse_basic_example():
    doc = parse_lrc("[ar:Test]\n[00:01.50]Hello\n[00:00.20]World")
    assert doc.tags.ar == "Test"
    assert doc.tags.artist == "Test"
    assert doc.lines == (LyricLine(200, "World"), LyricLine(1500, "Hello"))


@pytest.mark.parametrize(
    "marker, expected_ms",
    [
        ("[00:00]", 0),
        ("[01:02]", 62_000),
        ("[00:01.50]", 1_500),
        ("[00:01.05]", 1_050),
        # fraction digits are scaled by 10 verbatim
        ("[00:01.500]", 6_000),
        ("[100:00.00]", 6_000_000),
    ],
)
def test_parse_timestamp_forms(marker, expected_ms):
    doc = parse_lrc(f"{marker}x")
    assert [ln.time for ln in doc.lines] == [expected_ms]


@pytest.mark.parametrize("marker", ["[1:02]x", "[00:1]x", "[00:01.5]x", "[00:01.5000]x", "[aa:bb]x"])
def test_malformed_markers_are_dropped(marker):
    assert parse_lrc(marker).lines == ()


def test_only_first_marker_sets_time_but_all_are_removed():
    doc = parse_lrc("[00:05.00][00:01.00]chorus [00:09.00]again")
    assert doc.lines == (LyricLine(5000, "chorus again"),)


def test_lines_without_text_or_marker_are_dropped():
    doc = parse_lrc("[ti:Song]\nplain words\n[00:01.00]   \n[00:02.00]kept\r\n\n")
    assert doc.lines == (LyricLine(2000, "kept"),)


def test_lines_sorted_and_ties_keep_file_order():
    doc = parse_lrc("[00:03.00]c\n[00:01.00]a\n[00:01.00]b\n[00:02.00]x")
    assert [ln.text for ln in doc.lines] == ["a", "b", "x", "c"]
    times = [ln.time for ln in doc.lines]
    assert times == sorted(times)


def test_parse_is_idempotent():
    text = "[ti:T]\n[ar:A]\n[offset:250]\n[00:02.00]two\n[00:01.00]one\n"
    assert parse_lrc(text) == parse_lrc(text)


def test_tags_default_to_empty():
    doc = parse_lrc("[00:01.00]x")
    assert doc.tags == TagSet()
    assert doc.tags.artist == ""
    assert doc.tags.offset_ms == 0


def test_tags_case_insensitive_first_match_anywhere():
    text = "[00:01.00]first\n[TI:Song]\n[ar:A]\n[ar:B]\n[00:02.00][by:Me]credits\n[al: Spaced ]"
    tags = parse_tags(text)
    assert tags.title == "Song"
    assert tags.artist == "A"
    assert tags.editor == "Me"
    # kept verbatim
    assert tags.album == " Spaced "


def test_offset_shifts_every_line():
    body = "[00:01.00]a\n[00:02.50]b\n"
    base = parse_lrc(body)
    shifted = parse_lrc("[offset:+1000]\n" + body)
    assert shifted.tags.offset == "+1000"
    assert shifted.tags.offset_ms == 1000
    assert [ln.time for ln in shifted.lines] == [ln.time + 1000 for ln in base.lines]


def test_negative_offset_is_not_clamped():
    doc = parse_lrc("[offset:-1500]\n[00:01.00]x\n")
    assert doc.lines[0].time == -500


@pytest.mark.parametrize("value", ["abc", "", "10ms", "1.", "\uff11\uff10\uff10\uff10"])
def test_non_numeric_offset_counts_as_zero(value):
    doc = parse_lrc(f"[offset:{value}]\n[00:01.00]x\n")
    assert doc.tags.offset == value
    assert doc.lines[0].time == 1000


def test_no_markers_gives_no_lines():
    assert parse_lrc("just some\nplain text").lines == ()
    assert parse_lrc("").lines == ()


def test_parse_with_stats_counts():
    doc, stats = parse_lrc_with_stats("[ti:x]\n[00:01.00]a\n[00:02.00]\nplain")
    assert stats.lines_total == 4
    assert stats.lines_with_timestamps == 2
    assert stats.lines_ignored == 3
    assert stats.lines_kept == len(doc.lines) == 1


def test_tagset_as_dict():
    tags = TagSet(ti="T", offset="5")
    assert tags.as_dict() == {"ti": "T", "ar": "", "al": "", "offset": "5", "by": ""}


@pytest.mark.parametrize(
    "value, expected_ms",
    [
        ("+250.6", 251),
        ("-100.4", -100),
        (" 42 ", 42),
    ],
)
def test_decimal_offset_is_rounded(value, expected_ms):
    doc = parse_lrc(f"[offset:{value}]\n[00:01.00]x\n")
    assert doc.tags.offset_ms == expected_ms
    assert doc.lines[0].time == 1000 + expected_ms


def test_fullwidth_digits_do_not_form_markers():
    assert parse_lrc("[００:０１.５０]歌词").lines == ()


def test_fullwidth_marker_stays_in_text():
    doc = parse_lrc("[00:01.00]歌词[１２:３４]")
    assert doc.lines == (LyricLine(1000, "歌词[１２:３４]"),)


def test_fullwidth_offset_is_ignored():
    doc = parse_lrc("[offset:１０００]\n[00:01.00]x\n")
    assert doc.lines[0].time == 1000


def test_byte_order_mark_is_trimmed():
    doc = parse_lrc("\ufeff[00:01.00]Hello\n[00:02.00]World\ufeff")
    assert [ln.text for ln in doc.lines] == ["Hello", "World"]
