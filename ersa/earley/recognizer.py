"""Earley 인식기(recognizer).

- `build_chart(tokens, grammar)` : 위치별 StateSet을 고정점까지 채운 차트를 만든다.
- `recognize(tokens, grammar)`   : 차트의 마지막 위치에서 accept/reject를 판정한다.

순수 함수입니다. 입출력도 예외도 없고, 같은 (tokens, grammar)에는 항상 같은 결과.
좌재귀/순환 문법은 재귀 호출 없이 반복 + 중복 제거만으로 종료됩니다.
"""
from __future__ import annotations
from typing import Any, Iterable

from .chart     import END, Chart, ChartEntry, Item
from .nullable  import compute_nullable
from .steps     import complete, predict, scan
from .symbols   import Grammar, Nonterminal, Terminal


def build_chart(tokens: Iterable[Any], grammar: Grammar) -> Chart:
    """
    토큰 스트림을 한 개씩 소비하며 Earley 차트를 만든다.

    1) 위치 0에 시작기호 규칙마다 아이템 (rule, 0, 0)을 넣는다.
       토큰이 하나도 없거나 문법이 비어 있으면 빈 차트를 돌려준다.
    2) 위치 i마다
       - 토큰이 있으면 위치 i+1(토큰=그 다음 토큰, 소진되면 END)을 추가
       - StateSet을 인덱스로 순회하며(길이를 매번 다시 읽음) Scan/Predict/Complete
    3) 위치 인덱스가 차트 길이에 도달하면 종료
    """
    source = iter(tokens)
    chart = Chart()
    first = next(source, END)
    if first is END or not grammar.rules:
        return chart

    nullable = compute_nullable(grammar)

    seed = ChartEntry(first)
    for r in grammar.rules_named(grammar.start):
        seed.items.add(Item(r, 0, 0))
    chart.append(seed)

    i = 0
    while i < len(chart):
        entry = chart[i]
        if not entry.at_end:
            chart.append(ChartEntry(next(source, END)))

        j = 0
        while j < len(entry.items):
            item = entry.items[j]
            sym = item.next_symbol(grammar)
            if isinstance(sym, Terminal):
                scan(chart, grammar, i, item, sym)
            elif isinstance(sym, Nonterminal):
                predict(chart, grammar, i, item, sym, nullable)
            else:
                complete(chart, grammar, i, item)
            j += 1
        i += 1

    return chart


def recognize(tokens: Iterable[Any], grammar: Grammar) -> bool:
    """tokens가 grammar의 시작기호로부터 유도 가능하면 True."""
    return build_chart(tokens, grammar).accepted(grammar)
