# ersa/grammar/model.py
""".g 파일을 읽은 결과물(GrammarFile)과 Earley Grammar로의 변환."""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import List, Optional, Pattern, Set

from ..earley.symbols import Grammar, GrammarRule, Matcher, Nonterminal, Terminal, match_kind


@dataclass(frozen=True)
class TokenDecl:
    """%token NAME /regex/flags ;  (정규식은 선언 시점에 컴파일 완료)"""
    name: str
    regex: Pattern[str]
    line: int = 0


@dataclass
class GrammarFile:
    """
    문법 파일 1개.
    - tokens   : %token 선언 (선언 순서)
    - ignores  : %ignore 정규식
    - literals : 키워드 선언 + 규칙에 쓰인 리터럴 (첫 등장 순서, 중복 없음)
    - rules    : EBNF를 풀어낸 평평한 규칙 목록 (보조 규칙 __opt/__rep/__grp 포함)
    - start    : 시작기호 (%start 또는 첫 규칙, 규칙이 없으면 None)
    """
    tokens: List[TokenDecl] = field(default_factory=list)
    ignores: List[Pattern[str]] = field(default_factory=list)
    literals: List[str] = field(default_factory=list)
    rules: List[GrammarRule] = field(default_factory=list)
    start: Optional[str] = None

    def to_grammar(self, matcher: Matcher = match_kind) -> Grammar:
        """시작기호 규칙을 맨 앞에 두고(나머지는 순서 유지) Earley Grammar를 만든다."""
        head = [r for r in self.rules if r.name == self.start]
        rest = [r for r in self.rules if r.name != self.start]
        return Grammar(tuple(head + rest), matcher)

    def defined(self) -> Set[str]:
        return {r.name for r in self.rules}

    def terminals(self) -> List[str]:
        names = {t.name for t in self.tokens}
        for r in self.rules:
            names.update(s.pattern for s in r.components if isinstance(s, Terminal))
        return sorted(names)

    def nonterminals(self) -> List[str]:
        names = self.defined()
        for r in self.rules:
            names.update(s.name for s in r.components if isinstance(s, Nonterminal))
        return sorted(names)

    def undefined(self) -> List[str]:
        """참조만 되고 규칙이 하나도 없는 비단말."""
        defined = self.defined()
        return [n for n in self.nonterminals() if n not in defined]
