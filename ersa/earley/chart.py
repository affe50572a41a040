"""Earley 차트: 위치별 아이템 집합(StateSet)의 목록."""
from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import Any, Iterator, List, Optional, Set

from .symbols import Grammar, Symbol


class _EndOfInput:
    """입력 끝 표지. 어떤 토큰 값(None 포함)과도 구별된다."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "<end>"


END = _EndOfInput()


@dataclass(frozen=True)
class Item:
    """
    Earley 아이템 (rule, start, cursor)
    - rule  : Grammar 아레나 안의 규칙 인덱스
    - start : 이 규칙의 유도가 시작된 차트 위치
    - cursor: rule.components 중 지금까지 매칭된 심볼 수
    """
    rule: int
    start: int
    cursor: int = 0

    def next_symbol(self, grammar: Grammar) -> Optional[Symbol]:
        """다음에 매칭해야 할 심볼. 규칙이 모두 매칭됐으면 None."""
        comps = grammar.rules[self.rule].components
        return comps[self.cursor] if self.cursor < len(comps) else None

    def is_complete(self, grammar: Grammar) -> bool:
        return self.cursor == len(grammar.rules[self.rule].components)

    def advanced(self) -> "Item":
        return Item(self.rule, self.start, self.cursor + 1)

    def pretty(self, grammar: Grammar) -> str:
        r = grammar.rules[self.rule]
        syms = [repr(s) for s in r.components]
        syms.insert(self.cursor, "•")
        return f"{r.name} -> {' '.join(syms)}  ({self.start})"


class StateSet:
    """
    한 차트 위치의 아이템 집합.
    - 삽입 순서를 유지하는 리스트 + 중복 판정용 해시 집합
    - 중복은 **삽입 시점에** 거부된다(add가 False 반환)
    - 인덱스 기반 순회 중에 추가된 아이템도 같은 패스에서 처리된다
    """

    def __init__(self) -> None:
        self._items: List[Item] = []
        self._seen: Set[Item] = set()

    def add(self, item: Item) -> bool:
        if item in self._seen:
            return False
        self._seen.add(item)
        self._items.append(item)
        return True

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, idx: int) -> Item:
        return self._items[idx]

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._seen

    def __repr__(self) -> str:
        return f"StateSet({self._items!r})"


@dataclass
class ChartEntry:
    """차트 위치 1개. token은 이 위치를 떠나려면 스캔해야 하는 토큰(END=입력 끝)."""
    token: Any
    items: StateSet = field(default_factory=StateSet)

    @property
    def at_end(self) -> bool:
        return self.token is END


class Chart(list):
    """위치 0..n 의 ChartEntry 목록. 인식 호출마다 새로 만들고 버린다."""

    def accepted(self, grammar: Grammar) -> bool:
        """
        마지막 StateSet에 시작기호 규칙이 위치 0에서 시작해 끝까지 매칭된
        아이템이 있으면 accept. 빈 차트는 reject.
        """
        if not self or not grammar.rules:
            return False
        start = grammar.start
        for it in self[-1].items:
            if (it.start == 0
                    and grammar.rules[it.rule].name == start
                    and it.is_complete(grammar)):
                return True
        return False

    def pretty(self, grammar: Grammar) -> str:
        lines: List[str] = []
        for i, entry in enumerate(self):
            tok = "<end>" if entry.at_end else repr(getattr(entry.token, "text", entry.token))
            lines.append(f"[{i}] next={tok} items={len(entry.items)}")
            for it in entry.items:
                lines.append("    " + it.pretty(grammar))
        return "\n".join(lines)
