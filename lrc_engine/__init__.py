from lrc_engine.lrc.model import LrcDocument, LyricLine, TagSet
from lrc_engine.lrc.parse import parse_lrc
from lrc_engine.sync.engine import LrcEngine, PlaybackState

__all__ = ["LrcDocument", "LrcEngine", "LyricLine", "PlaybackState", "TagSet", "parse_lrc"]
