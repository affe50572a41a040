# ersa/ersac.py
"""ersac – ersa CLI

    $ python -m ersa.ersac check ersa/tests/grammar_test/expr.g -D
    $ python -m ersa.ersac lex ersa/tests/grammar_test/expr.g --text "1 + 2 * (3)"
    $ echo "1 + 2" | python -m ersa.ersac recognize ersa/tests/grammar_test/expr.g

- check     : 문법 파일을 읽어 요약 출력 (-D: 풀어낸 규칙 목록)
- lex       : 문법의 선언으로 텍스트를 토크나이즈
- recognize : 입력을 EOF까지 한 줄씩 토크나이즈 → Earley 인식 → [ACCEPT]/[REJECT]

종료 코드: 0 = 모두 성공, 1 = 거부된 줄 있음, 2 = 문법/입력 파일 오류
"""

from __future__ import annotations
import argparse
import sys
from typing import Optional, TextIO

from .earley import build_chart, compute_nullable
from .grammar.loader import load_grammar
from .lex import Lexer


def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


class _Loaded:
    """문법 파일 하나에서 만든 것들 (GrammarFile, Earley Grammar, Lexer)."""

    def __init__(self, path: str, debug: bool = False):
        self.file, self.grammar = load_grammar(path)
        self.lexer = Lexer.from_grammar_file(self.file)
        if debug:
            _eprint(f"[DEBUG] grammar loaded | rules={len(self.grammar)} "
                    f"tokens={len(self.file.tokens)} literals={len(self.file.literals)} "
                    f"start={self.grammar.start}")


def _load(path: str, debug: bool = False) -> Optional[_Loaded]:
    """실패하면 원인을 stderr에 찍고 None."""
    try:
        return _Loaded(path, debug)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
    return None


def cmd_check(args) -> int:
    ld = _load(args.file, args.debug)
    if ld is None:
        return 2
    gf, grammar = ld.file, ld.grammar

    if args.debug:
        _eprint("\n[RULES]")
        for i, r in enumerate(grammar.rules):
            _eprint(f"  #{i:<3} {r}")

    undefined = gf.undefined()
    if undefined:
        _eprint("[WARN] Nonterminals without rules: " + ", ".join(undefined))

    print(f"[CHECK OK] rules={len(grammar)} terms={len(gf.terminals())} "
          f"nonterms={len(gf.nonterminals())} start={grammar.start} "
          f"nullable={len(compute_nullable(grammar))}")
    return 0


def cmd_lex(args) -> int:
    ld = _load(args.file)
    if ld is None:
        return 2
    try:
        if args.text is not None:
            text = args.text
        else:
            with open(args.input, "r", encoding="utf-8") as f:
                text = f.read()
        toks = ld.lexer.tokenize(text)
    except SyntaxError as e:
        _eprint("[LEX ERROR]", str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2
    for i, tok in enumerate(toks):
        print(f"{i:03d}: {tok.type:<12} {tok.text!r}  @{tok.line}:{tok.col}")
    return 0


def _judge(ld: _Loaded, line: str, lineno: int, debug: bool) -> bool:
    try:
        toks = ld.lexer.tokenize(line, line=lineno)
    except SyntaxError as e:
        _eprint("[LEX ERROR]", str(e))
        return False
    chart = build_chart(toks, ld.grammar)
    if debug:
        _eprint(f"[DEBUG] line {lineno}: tokens={len(toks)} positions={len(chart)}")
        _eprint(chart.pretty(ld.grammar))
    return chart.accepted(ld.grammar)


def _recognize_stream(stream: TextIO, ld: _Loaded, *, debug: bool, quiet: bool) -> int:
    """빈 줄은 건너뛴다. 거부된 줄이 하나라도 있으면 1."""
    tally = {True: 0, False: 0}
    for lineno, raw in enumerate(stream, 1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        ok = _judge(ld, line, lineno, debug)
        tally[ok] += 1
        if not quiet:
            print(f"[{'ACCEPT' if ok else 'REJECT'}] {line}")

    _eprint(f"[SUMMARY] accepted={tally[True]} rejected={tally[False]}")
    return 1 if tally[False] else 0


def cmd_recognize(args) -> int:
    ld = _load(args.file, args.debug)
    if ld is None:
        return 2
    if args.input is None:
        return _recognize_stream(sys.stdin, ld, debug=args.debug, quiet=args.quiet)
    try:
        f = open(args.input, "r", encoding="utf-8")
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2
    with f:
        return _recognize_stream(f, ld, debug=args.debug, quiet=args.quiet)


def main(argv: Optional[list] = None) -> int:
    ap = argparse.ArgumentParser(prog="ersac", description="ersa Earley recognizer CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("check", help="문법 파일을 읽고 요약을 출력합니다")
    p.add_argument("file", help=".g 문법 파일")
    p.add_argument("-D", "--debug", action="store_true", help="풀어낸 규칙 목록을 출력")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("lex", help="문법의 토큰 선언으로 텍스트를 토크나이즈합니다")
    p.add_argument("file", help=".g 문법 파일")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--text", help="직접 입력 텍스트")
    src.add_argument("--input", help="입력 텍스트 파일 경로")
    p.set_defaults(func=cmd_lex)

    p = sub.add_parser("recognize", help="입력을 한 줄씩 읽어 문법에 속하는지 판정합니다")
    p.add_argument("file", help=".g 문법 파일")
    p.add_argument("--input", help="입력 파일 경로(미지정시 표준입력)")
    p.add_argument("-q", "--quiet", action="store_true", help="줄별 결과 대신 요약만 출력")
    p.add_argument("-D", "--debug", action="store_true", help="줄별 Earley 차트를 출력")
    p.set_defaults(func=cmd_recognize)

    args = ap.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
