"""Earley 인식기용 문법 모델: 심볼, 규칙, 규칙 아레나(Grammar)."""
from __future__     import annotations
from dataclasses    import dataclass, field
from functools      import lru_cache
from typing         import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

import regex


@dataclass(frozen=True)
class Terminal:
    """입력 토큰 하나와 매칭되는 단말. 매칭 의미는 Grammar의 matcher가 정한다."""
    pattern: str

    def __repr__(self) -> str:
        return repr(self.pattern)


@dataclass(frozen=True)
class Nonterminal:
    """같은 이름을 가진 모든 규칙을 가리키는 비단말."""
    name: str

    def __repr__(self) -> str:
        return self.name


Symbol = Union[Terminal, Nonterminal]


@dataclass(frozen=True)
class GrammarRule:
    """
    규칙 1개: name -> components
    - components가 빈 튜플이면 ε-규칙
    - 동등성은 구조적(name, components)
    """
    name: str
    components: Tuple[Symbol, ...] = ()

    def __str__(self) -> str:
        rhs = " ".join(repr(s) for s in self.components) if self.components else "ε"
        return f"{self.name} -> {rhs}"


# ------------------------------
# 단말 매칭 술어(matcher)
# ------------------------------

Matcher = Callable[[Terminal, Any], bool]

def match_literal(terminal: Terminal, token: Any) -> bool:
    """리터럴 동등 비교(기본값)."""
    return token == terminal.pattern

def match_kind(terminal: Terminal, token: Any) -> bool:
    """렉서 토큰(LexTok)은 `type`으로, 일반 문자열은 동등 비교로 매칭."""
    kind = getattr(token, "type", None)
    if kind is not None:
        return kind == terminal.pattern
    return token == terminal.pattern

@lru_cache(maxsize=256)
def _compiled(pattern: str):
    return regex.compile(pattern)

def match_pattern(terminal: Terminal, token: Any) -> bool:
    """단말 pattern을 정규식으로 보고 토큰 텍스트 전체가 일치하면 True."""
    text = getattr(token, "text", token)
    if not isinstance(text, str):
        return False
    return _compiled(terminal.pattern).fullmatch(text) is not None


@dataclass(frozen=True)
class Grammar:
    """
    Grammar
    =======
    규칙들의 **순서 있는 아레나**입니다. Earley 아이템은 규칙을 복사하지 않고
    이 아레나의 인덱스로 참조합니다.

    - rules   : 규칙 튜플(순서 유지). 시작기호는 rules[0].name
    - matcher : 단말/토큰 매칭 술어 (기본: 리터럴 동등 비교)

    빈 문법도 만들 수는 있지만(start=None) 인식기는 즉시 reject 합니다.
    """
    rules: Tuple[GrammarRule, ...] = ()
    matcher: Matcher = match_literal
    _by_name: Dict[str, Tuple[int, ...]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple(self.rules))
        by_name: Dict[str, List[int]] = {}
        for idx, r in enumerate(self.rules):
            by_name.setdefault(r.name, []).append(idx)
        object.__setattr__(self, "_by_name", {k: tuple(v) for k, v in by_name.items()})

    @property
    def start(self) -> Optional[str]:
        return self.rules[0].name if self.rules else None

    def rules_named(self, name: str) -> Tuple[int, ...]:
        """해당 이름의 규칙 인덱스들. 정의되지 않은 이름이면 빈 튜플."""
        return self._by_name.get(name, ())

    def matches(self, terminal: Terminal, token: Any) -> bool:
        return self.matcher(terminal, token)

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def __getitem__(self, idx: int) -> GrammarRule:
        return self.rules[idx]

    @classmethod
    def from_pairs(cls,
                   pairs: Iterable[Tuple[str, Iterable[str]]],
                   matcher: Matcher = match_literal) -> "Grammar":
        """
        (이름, [심볼...]) 쌍 목록으로 문법을 만든다.
        어떤 규칙의 이름과 같은 문자열은 Nonterminal, 나머지는 Terminal.

            Grammar.from_pairs([("S", ["(", "S", ")"]), ("S", [])])
        """
        pairs = [(name, list(rhs)) for name, rhs in pairs]
        names = {name for name, _ in pairs}
        rules = [rule(name, *rhs, nonterms=names) for name, rhs in pairs]
        return cls(tuple(rules), matcher)


def rule(name: str, *components: Union[str, Symbol], nonterms: Iterable[str] = ()) -> GrammarRule:
    """규칙 생성 헬퍼. 문자열 심볼은 `nonterms`에 있으면 비단말, 아니면 단말."""
    nt = set(nonterms)
    syms: List[Symbol] = []
    for c in components:
        if isinstance(c, (Terminal, Nonterminal)):
            syms.append(c)
        elif c in nt:
            syms.append(Nonterminal(c))
        else:
            syms.append(Terminal(c))
    return GrammarRule(name, tuple(syms))
