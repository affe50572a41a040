"""Earley 단계 연산: Scan / Predict / Complete.

세 연산 모두 차트 위치 i의 아이템 하나를 받아 새 아이템을 **중복 없이** 추가만 한다.
아이템을 지우거나 기존 StateSet을 교체하지 않는다.
"""
from __future__ import annotations
from typing import AbstractSet

from .chart     import Chart, Item
from .symbols   import Grammar, Nonterminal, Terminal


def scan(chart: Chart, grammar: Grammar, i: int, item: Item, terminal: Terminal) -> None:
    """위치 i의 토큰이 terminal과 매칭되면 한 칸 전진한 아이템을 위치 i+1에 넣는다."""
    entry = chart[i]
    if entry.at_end:
        return
    if grammar.matches(terminal, entry.token):
        chart[i + 1].items.add(item.advanced())


def predict(chart: Chart, grammar: Grammar, i: int, item: Item, nonterm: Nonterminal,
            nullable: AbstractSet[str] = frozenset()) -> None:
    """
    nonterm 이름의 모든 규칙에 대해 새 아이템 (rule, i, 0)을 위치 i에 넣는다.

    nonterm이 nullable이면 item 자체도 nonterm을 건너뛴 상태로 위치 i에 넣는다.
    같은 위치에서 ε-완료가 먼저 처리된 뒤 뒤늦게 nonterm을 기다리는 아이템이
    추가되는 경우, Complete만으로는 그 아이템이 전진하지 못하기 때문이다.
    """
    items = chart[i].items
    for r in grammar.rules_named(nonterm.name):
        items.add(Item(r, i, 0))
    if nonterm.name in nullable:
        items.add(item.advanced())


def complete(chart: Chart, grammar: Grammar, i: int, item: Item) -> None:
    """
    완료된 item(규칙 이름 name, 시작 위치 start)에 대해, 위치 start에서
    Nonterminal(name)을 기다리던 아이템들을 한 칸 전진시켜 위치 i에 넣는다.

    start == i 이면 조회 대상과 삽입 대상이 같은 StateSet이다.
    길이를 매 반복 다시 읽는 인덱스 순회로 처리하므로(interleaved), 이번에
    추가된 아이템도 같은 패스에서 조회되며 아무것도 버려지지 않는다.
    """
    name = grammar.rules[item.rule].name
    waiting = Nonterminal(name)
    preds = chart[item.start].items
    target = chart[i].items
    k = 0
    while k < len(preds):
        pred = preds[k]
        if pred.next_symbol(grammar) == waiting:
            target.add(pred.advanced())
        k += 1
