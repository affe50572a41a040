# ersa/lex/__init__.py
"""ersa 토크나이저 — GrammarFile 선언으로 동작하는 줄 단위 렉서.

산출 토큰의 `type`은 Earley 단말 이름과 같다(`match_kind`로 매칭).
  - 리터럴: 철자 그대로 (예: "+", "(", "if")
  - %token: 토큰 이름 (예: "NUMBER")

한 위치에서의 선택 규칙
  1) %ignore 패턴을 더 이상 진행이 없을 때까지 건너뜀
  2) 가장 긴 리터럴 하나 (식별자 문자로 된 리터럴은 앞뒤 단어경계 필요)
  3) %token 정규식 중 가장 긴 매치 (동률이면 먼저 선언된 것)
  4) 리터럴보다 **더 긴** 정규식 매치만 리터럴을 이긴다 ("if" vs IDENT "iffy")
  5) 아무것도 없으면 SyntaxError
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Pattern, Sequence, Tuple

import regex as re


_WORD_CHAR = re.compile(r"\p{XID_Continue}")


@dataclass(frozen=True)
class LexTok:
    type: str   # 단말 이름
    text: str   # 원문 lexeme
    line: int   # 1-based
    col: int    # 1-based


def _is_word(ch: str) -> bool:
    return _WORD_CHAR.fullmatch(ch) is not None


class Lexer:
    """리터럴 + (이름, 정규식) 목록 + 무시 패턴으로 만든 렉서. 상태가 없어 재사용 가능."""

    def __init__(self,
                 literals: Iterable[str],
                 tokens: Sequence[Tuple[str, Pattern[str]]] = (),
                 ignores: Sequence[Pattern[str]] = ()):
        # 길이 내림차순, 같은 길이는 등장 순서(정렬 안정성)
        self.literals: List[str] = sorted(dict.fromkeys(literals), key=len, reverse=True)
        self.tokens = list(tokens)
        self.ignores = list(ignores)

    @classmethod
    def from_grammar_file(cls, gf) -> "Lexer":
        return cls(gf.literals, [(t.name, t.regex) for t in gf.tokens], gf.ignores)

    def tokenize(self, text: str, *, line: int = 1) -> List[LexTok]:
        """text 전체를 토큰 리스트로. 렉싱 실패는 SyntaxError."""
        return list(self.iter_tokens(text, line=line))

    def iter_tokens(self, text: str, *, line: int = 1) -> Iterator[LexTok]:
        row, bol = line, 0      # bol: 현재 줄이 시작하는 오프셋
        pos = 0
        while True:
            nxt = self._skip(text, pos)
            row, bol = _move(text, pos, nxt, row, bol)
            pos = nxt
            if pos >= len(text):
                return
            kind, end = self._longest(text, pos)
            if kind is None:
                raise SyntaxError(
                    f"Lexing error: unexpected character {text[pos]!r} at {row}:{pos - bol + 1}")
            yield LexTok(kind, text[pos:end], row, pos - bol + 1)
            row, bol = _move(text, pos, end, row, bol)
            pos = end

    def _skip(self, text: str, pos: int) -> int:
        moved = True
        while moved and pos < len(text):
            moved = False
            for rx in self.ignores:
                m = rx.match(text, pos)
                if m and m.end() > pos:
                    pos, moved = m.end(), True
                    break
        return pos

    def _longest(self, text: str, pos: int) -> Tuple[Optional[str], int]:
        kind, end = None, pos
        for lit in self.literals:
            if text.startswith(lit, pos) and self._bounded(text, pos, pos + len(lit), lit):
                kind, end = lit, pos + len(lit)
                break
        for name, rx in self.tokens:
            m = rx.match(text, pos)
            if m and m.end() > end:
                kind, end = name, m.end()
        return kind, end

    @staticmethod
    def _bounded(text: str, start: int, stop: int, lit: str) -> bool:
        if not any(_is_word(c) for c in lit):
            return True
        if start > 0 and _is_word(text[start - 1]):
            return False
        return not (stop < len(text) and _is_word(text[stop]))


def _move(text: str, pos: int, end: int, row: int, bol: int) -> Tuple[int, int]:
    """text[pos:end]를 소비한 뒤의 (줄 번호, 줄 시작 오프셋)."""
    nl = text.count("\n", pos, end)
    if nl:
        return row + nl, text.rfind("\n", pos, end) + 1
    return row, bol
