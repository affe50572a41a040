from __future__ import annotations
from typing import FrozenSet, Set

from .symbols import Grammar, Nonterminal


def compute_nullable(grammar: Grammar) -> FrozenSet[str]:
    """
    compute_nullable
    ================
    ε(빈 입력)을 유도할 수 있는 비단말 이름의 집합을 계산합니다.

    - ε-규칙(A -> ε)이 있으면 A는 nullable
    - A -> X1 X2 ... Xn 에서 모든 Xi가 nullable 비단말이면 A도 nullable
    - 더 이상 변화가 없을 때까지 반복(고정점)

    Predict 단계가 nullable 비단말을 즉시 건너뛸 때 사용합니다.
    단말은 항상 토큰 1개를 소비하므로 nullable이 될 수 없습니다.
    """
    nullable: Set[str] = set()

    changed = True
    while changed:
        changed = False
        for r in grammar.rules:
            if r.name in nullable:
                continue
            all_null = True
            for X in r.components:
                if not isinstance(X, Nonterminal) or X.name not in nullable:
                    all_null = False
                    break
            if all_null:
                nullable.add(r.name)
                changed = True

    return frozenset(nullable)
