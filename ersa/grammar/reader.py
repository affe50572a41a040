# ersa/grammar/reader.py
"""ersa 문법(.g) 리더

지원 문법
---------
    %token NAME /regex/flags ;      토큰 선언 (flags: i m s x A)
    %ignore /regex/flags ;          입력에서 건너뛸 패턴
    %start Name ;                   시작기호 (생략하면 첫 규칙)
    "lit" : "lit" ;                 키워드 선언
    Name : alt | alt | ... ;        규칙 (빈 대안 = ε)

    원자: Name | "lit" | 'lit' | ( alt | ... )   뒤에 ? * + 하나
    주석: // 줄 끝까지, /* 블록 */

읽는 즉시 EBNF를 평평한 규칙으로 풀어낸다.
    X?      →  __optN : ε | X
    X*      →  __repN : ε | __repN X       (좌재귀)
    X+      →  __repN : X | __repN X
    ( … )   →  __grpN : 각 대안

이름 참조는 파일을 다 읽은 뒤 해석한다: %token으로 선언된 이름은 단말,
나머지는 비단말. 리터럴은 언제나 단말이므로 철자가 같은 규칙 이름과 섞이지 않는다.
오류는 모두 `SyntaxError("<메시지> at L:C\\n<줄>\\n<캐럿>")`.
"""

from __future__     import annotations
import ast as _pyast
from dataclasses    import dataclass
from typing         import Callable, Dict, List, Optional, Pattern, Tuple, Union

import regex as re

from .model import GrammarFile, TokenDecl
from ..earley.symbols import GrammarRule, Nonterminal, Terminal


_PIECE_RE = re.compile(r"""
      (?P<skip>      \s+ | //[^\n]* | /\*.*?\*/ )
    | (?P<directive> %[A-Za-z_][A-Za-z0-9_]* )
    | (?P<regex>     /(?:\\.|[^/\\\n])+/[imsxA]* )
    | (?P<string>    "(?:\\.|[^"\\\n])*" | '(?:\\.|[^'\\\n])*' )
    | (?P<name>      [A-Za-z_][A-Za-z0-9_]* )
    | (?P<punct>     [:;|()?*+] )
""", re.VERBOSE | re.DOTALL)

_FLAG_BITS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "A": re.ASCII,
}


@dataclass(frozen=True)
class _Piece:
    kind: str       # directive | regex | string | name | punct | eof
    text: str
    pos: int        # 소스 내 절대 오프셋

    @property
    def end(self) -> int:
        return self.pos + len(self.text)


@dataclass(frozen=True)
class _Ref:
    """단말/비단말이 아직 정해지지 않은 이름 참조."""
    name: str


_Sym = Union[Terminal, Nonterminal, _Ref]


def _located(src: str, pos: int, msg: str) -> SyntaxError:
    bol = src.rfind("\n", 0, pos) + 1
    eol = src.find("\n", pos)
    if eol == -1:
        eol = len(src)
    line = src.count("\n", 0, pos) + 1
    col = pos - bol + 1
    return SyntaxError(f"{msg} at {line}:{col}\n{src[bol:eol]}\n{' ' * (col - 1)}^")


def _pieces(src: str) -> List[_Piece]:
    out: List[_Piece] = []
    pos = 0
    while pos < len(src):
        m = _PIECE_RE.match(src, pos)
        if m is None:
            raise _located(src, pos, f"Unexpected char {src[pos]!r}")
        if m.lastgroup != "skip":
            out.append(_Piece(m.lastgroup, m.group(), pos))
        pos = m.end()
    out.append(_Piece("eof", "", len(src)))
    return out


class _Reader:

    def __init__(self, src: str):
        self.src = src
        self.pieces = _pieces(src)
        self.k = 0
        self.out = GrammarFile()
        self.prods: List[Tuple[str, List[_Sym]]] = []
        self.heads: Dict[str, _Piece] = {}     # 규칙 이름 → 처음 정의된 위치
        self.start_at: Optional[_Piece] = None
        self.helpers = 0

    # ---- 조각 스트림 ----
    def peek(self) -> _Piece:
        return self.pieces[self.k]

    def take(self) -> _Piece:
        p = self.pieces[self.k]
        self.k += 1
        return p

    def accept(self, punct: str) -> bool:
        p = self.peek()
        if p.kind == "punct" and p.text == punct:
            self.k += 1
            return True
        return False

    def expect(self, what: str, kind: str, text: Optional[str] = None) -> _Piece:
        p = self.peek()
        if p.kind != kind or (text is not None and p.text != text):
            got = "end of file" if p.kind == "eof" else repr(p.text)
            raise self.error(p.pos, f"Expected {what}, got {got}")
        return self.take()

    def error(self, pos: int, msg: str) -> SyntaxError:
        return _located(self.src, pos, msg)

    def end_statement(self, context: str) -> None:
        """';' 필수. 없으면 직전 조각 바로 뒤에 캐럿."""
        if not self.accept(";"):
            raise self.error(self.pieces[self.k - 1].end, f"Missing ';' after {context}")

    # ---- 최상위 ----
    def read(self) -> GrammarFile:
        while True:
            p = self.peek()
            if p.kind == "eof":
                return self.finish()
            if p.kind == "directive":
                self.directive()
            elif p.kind == "string":
                self.keyword()
            elif p.kind == "name":
                self.rule()
            else:
                raise self.error(p.pos, f"Unexpected {p.text!r} at statement start")

    def directive(self) -> None:
        p = self.take()
        if p.text == "%token":
            ident = self.expect("token name", "name")
            if any(t.name == ident.text for t in self.out.tokens):
                raise self.error(ident.pos, f"Duplicate %token {ident.text}")
            rx = self.regex(f"/regex/ after %token {ident.text}")
            self.out.tokens.append(TokenDecl(ident.text, rx))
            self.end_statement("%token declaration")
        elif p.text == "%ignore":
            self.out.ignores.append(self.regex("/regex/ after %ignore"))
            self.end_statement("%ignore declaration")
        elif p.text == "%start":
            self.start_at = self.expect("start symbol name", "name")
            self.out.start = self.start_at.text
            self.end_statement("%start declaration")
        else:
            raise self.error(p.pos, f"Unknown directive {p.text}")

    def regex(self, what: str) -> Pattern[str]:
        p = self.expect(what, "regex")
        cut = p.text.rindex("/")
        bits = 0
        for flag in p.text[cut + 1:]:
            bits |= _FLAG_BITS[flag]
        try:
            return re.compile(p.text[1:cut], bits)
        except re.error as e:
            raise self.error(p.pos, f"Invalid regex {p.text} ({e})")

    def literal(self, p: _Piece) -> str:
        text = _pyast.literal_eval(p.text)
        if not text:
            raise self.error(p.pos, "Empty literal (use an empty alternative for ε)")
        if text not in self.out.literals:
            self.out.literals.append(text)
        return text

    def keyword(self) -> None:
        left = self.take()
        self.expect("':'", "punct", ":")
        right = self.expect("string literal", "string")
        a, b = self.literal(left), self.literal(right)
        if a != b:
            raise self.error(left.pos, f"Keyword mapping must be identical on both sides: {a!r} : {b!r}")
        self.end_statement(f"keyword {a!r}")

    # ---- 규칙 본문 ----
    def rule(self) -> None:
        head = self.take()
        self.expect("':'", "punct", ":")
        alts = self.alternatives()
        self.end_statement(f"rule {head.text!r}")
        self.heads.setdefault(head.text, head)
        for body in alts:
            self.prods.append((head.text, body))

    def alternatives(self) -> List[List[_Sym]]:
        alts = [self.sequence()]
        while self.accept("|"):
            alts.append(self.sequence())
        return alts

    def sequence(self) -> List[_Sym]:
        seq: List[_Sym] = []
        while True:
            p = self.peek()
            if p.kind == "name":
                sym: _Sym = _Ref(self.take().text)
            elif p.kind == "string":
                sym = Terminal(self.literal(self.take()))
            elif self.accept("("):
                alts = self.alternatives()
                self.expect("')'", "punct", ")")
                sym = self.helper("grp", lambda nt: alts)
            else:
                return seq
            seq.append(self.suffixed(sym))

    def suffixed(self, sym: _Sym) -> _Sym:
        if self.accept("?"):
            return self.helper("opt", lambda nt: [[], [sym]])
        if self.accept("*"):
            return self.helper("rep", lambda nt: [[], [nt, sym]])
        if self.accept("+"):
            return self.helper("rep", lambda nt: [[sym], [nt, sym]])
        return sym

    def helper(self, kind: str, bodies: Callable[[Nonterminal], List[List[_Sym]]]) -> Nonterminal:
        self.helpers += 1
        nt = Nonterminal(f"__{kind}{self.helpers}")
        for body in bodies(nt):
            self.prods.append((nt.name, body))
        return nt

    # ---- 마무리: 이름 해석 + 시작기호 검사 ----
    def finish(self) -> GrammarFile:
        out = self.out
        tokens = {t.name for t in out.tokens}
        for name, head in self.heads.items():
            if name in tokens:
                raise self.error(head.pos, f"Rule {name!r} clashes with %token {name}")

        def resolve(s: _Sym):
            if isinstance(s, _Ref):
                return Terminal(s.name) if s.name in tokens else Nonterminal(s.name)
            return s

        out.rules = [GrammarRule(lhs, tuple(resolve(s) for s in body)) for lhs, body in self.prods]

        if out.start is None:
            out.start = next(iter(self.heads), None)
        elif out.start not in self.heads:
            raise self.error(self.start_at.pos, f"%start {out.start} has no rules")
        return out


def read_grammar(src: str) -> GrammarFile:
    """.g 소스 텍스트 → GrammarFile. 문법 오류는 SyntaxError."""
    return _Reader(src).read()
