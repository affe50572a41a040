# ersa/earley/__init__.py
"""Earley chart recognizer for ersa.

This package provides:
- the grammar model (symbols, rules, the rule arena with its matcher)
- the chart (items, state sets) and the Scan/Predict/Complete steps
- `recognize(tokens, grammar) -> bool`

It does not depend on the `.g` front end; grammars can be built directly.
"""

from .symbols import (
    Terminal, Nonterminal, Symbol, GrammarRule, Grammar, rule,
    match_literal, match_kind, match_pattern,
)
from .chart import END, Item, StateSet, ChartEntry, Chart
from .nullable import compute_nullable
from .recognizer import build_chart, recognize
