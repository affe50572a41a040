""".g 문법 파일 로더: 파일 → GrammarFile → Earley Grammar"""

from __future__ import annotations
from pathlib    import Path
from typing     import Tuple

from .model     import GrammarFile
from .reader    import read_grammar
from ..earley.symbols import Grammar, Matcher, match_kind


def load_grammar_text(path: str) -> str:
    """파일을 읽고 개행을 \\n 으로 통일"""
    text = Path(path).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def load_grammar(path: str, matcher: Matcher = match_kind) -> Tuple[GrammarFile, Grammar]:
    """
    .g 파일 하나를 인식기에 넣을 수 있는 형태까지 한 번에 적재합니다.
    반환: (GrammarFile, Earley Grammar). 문법 오류는 SyntaxError.
    """
    gf = read_grammar(load_grammar_text(path))
    return gf, gf.to_grammar(matcher)
