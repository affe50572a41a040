from pathlib import Path
from unittest import main, TestCase

from ersa.earley import GrammarRule, Nonterminal, Terminal, recognize
from ersa.grammar.loader import load_grammar, load_grammar_text
from ersa.grammar.reader import read_grammar
from ersa.lex import Lexer

GRAMMAR_DIR = Path(__file__).resolve().parent / "grammar_test"


def rules_of(src):
    return [(r.name, r.components) for r in read_grammar(src).rules]


def accepts(src, text):
    gf = read_grammar(src)
    return recognize(Lexer.from_grammar_file(gf).tokenize(text), gf.to_grammar())


class TestReadGrammar(TestCase):

    def test_declarations_and_rules(self):
        gf = read_grammar(
            '%token NUMBER /[0-9]+/i ;\n'
            '%ignore /\\s+/ ;\n'
            '"+" : "+" ;\n'
            'E : E "+" NUMBER | NUMBER ;\n'
        )
        assert [t.name for t in gf.tokens] == ["NUMBER"]
        assert gf.tokens[0].regex.pattern == "[0-9]+"
        assert gf.ignores[0].match("  \t")
        assert gf.literals == ["+"]
        assert gf.start == "E"
        assert [(r.name, r.components) for r in gf.rules] == [
            ("E", (Nonterminal("E"), Terminal("+"), Terminal("NUMBER"))),
            ("E", (Terminal("NUMBER"),)),
        ]

    def test_empty_alternative_is_epsilon(self):
        assert rules_of('S : "(" S ")" | ;') == [
            ("S", (Terminal("("), Nonterminal("S"), Terminal(")"))),
            ("S", ()),
        ]

    def test_literals_in_first_appearance_order(self):
        gf = read_grammar('"b" : "b" ;\nS : ("a" | "b")+ "c"? \'a\' ;')
        assert gf.literals == ["b", "a", "c"]

    def test_explicit_start_goes_first(self):
        gf = read_grammar('%start B ;\nA : "a" ;\nB : A A | "b" ;')
        grammar = gf.to_grammar()
        assert grammar.start == "B"
        assert [r.name for r in grammar.rules] == ["B", "B", "A"]
        assert grammar.rules[0].components == (Nonterminal("A"), Nonterminal("A"))

    def test_start_defaults_to_first_rule(self):
        assert read_grammar('Y : X ;\nX : "x" ;').start == "Y"

    def test_no_rules(self):
        gf = read_grammar('%token N /[0-9]+/ ;')
        assert gf.start is None
        assert not recognize(["1"], gf.to_grammar())

    def test_comments_are_skipped(self):
        gf = read_grammar('// line\n/* block\n comment */ S : "a" ; // tail\n')
        assert [r.name for r in gf.rules] == ["S"]

    def test_summary_helpers(self):
        gf = read_grammar('%token ID /[a-z]+/ ;\nS : ID Tail "!" ;\nTail : Missing ;')
        assert gf.terminals() == ["!", "ID"]
        assert gf.nonterminals() == ["Missing", "S", "Tail"]
        assert gf.undefined() == ["Missing"]


class TestEbnfExpansion(TestCase):

    def test_star_is_left_recursive(self):
        rep = Nonterminal("__rep1")
        assert rules_of('L : "a"* ;') == [
            ("__rep1", ()),
            ("__rep1", (rep, Terminal("a"))),
            ("L", (rep,)),
        ]

    def test_plus_and_opt(self):
        rep, opt = Nonterminal("__rep1"), Nonterminal("__opt2")
        assert rules_of('L : "a"+ "b"? ;') == [
            ("__rep1", (Terminal("a"),)),
            ("__rep1", (rep, Terminal("a"))),
            ("__opt2", ()),
            ("__opt2", (Terminal("b"),)),
            ("L", (rep, opt)),
        ]

    def test_group_alternatives(self):
        grp = Nonterminal("__grp1")
        assert rules_of('E : E ("+" | "-") "n" | "n" ;') == [
            ("__grp1", (Terminal("+"),)),
            ("__grp1", (Terminal("-"),)),
            ("E", (Nonterminal("E"), grp, Terminal("n"))),
            ("E", (Terminal("n"),)),
        ]

    def test_repetition_recognizes(self):
        src = '%ignore / +/ ;\nL : "[" ("a" ("," "a")*)? "]" ;'
        for ok in ["[ ]", "[ a ]", "[ a , a , a ]"]:
            assert accepts(src, ok), ok
        for bad in ["[ a , ]", "[ , a ]", "[ a a ]"]:
            assert not accepts(src, bad), bad


class TestNameResolution(TestCase):

    def test_token_names_are_terminals(self):
        gf = read_grammar('S : ID Tail ;\nTail : ;\n%token ID /[a-z]+/ ;')
        assert gf.rules[0].components == (Terminal("ID"), Nonterminal("Tail"))

    def test_literal_does_not_shadow_rule_of_same_spelling(self):
        src = '%ignore / +/ ;\nS : "(" T ")" ;\nT : "T" | "x" ;'
        gf = read_grammar(src)
        assert gf.rules[0] == GrammarRule("S", (Terminal("("), Nonterminal("T"), Terminal(")")))
        assert gf.rules[1].components == (Terminal("T"),)
        assert accepts(src, "( x )")
        assert accepts(src, "( T )")
        assert not accepts(src, "( )")


class TestReadErrors(TestCase):

    def assertSyntaxError(self, src, fragment):
        with self.assertRaises(SyntaxError) as cm:
            read_grammar(src)
        assert fragment in str(cm.exception), str(cm.exception)
        return str(cm.exception)

    def test_missing_semicolon(self):
        self.assertSyntaxError('S : "a"\nT : "b" ;', "Missing ';' after rule 'S'")

    def test_unknown_directive(self):
        self.assertSyntaxError('%left "+" ;', "Unknown directive %left")

    def test_keyword_mapping_mismatch(self):
        self.assertSyntaxError('"+" : "-" ;', "Keyword mapping must be identical")

    def test_invalid_regex(self):
        self.assertSyntaxError('%token BAD /[0-9/ ;', "Invalid regex")

    def test_unexpected_char(self):
        self.assertSyntaxError('S : "a" @ ;', "Unexpected char '@' at 1:9")

    def test_empty_literal(self):
        self.assertSyntaxError('S : "" ;', "Empty literal")

    def test_unclosed_group(self):
        self.assertSyntaxError('S : ("a" ;', "Expected ')', got ';'")

    def test_duplicate_token(self):
        self.assertSyntaxError('%token A /a/ ;\n%token A /b/ ;', "Duplicate %token A at 2:8")

    def test_start_without_rules(self):
        msg = self.assertSyntaxError('%start Foo ;\nA : "a" ;', "%start Foo has no rules at 1:8")
        assert msg.splitlines()[-1] == " " * 7 + "^"

    def test_start_naming_a_token(self):
        self.assertSyntaxError('%token N /n/ ;\n%start N ;\nA : N ;', "%start N has no rules")

    def test_rule_named_like_token(self):
        self.assertSyntaxError('%token T /t/ ;\nS : T ;\nT : "x" ;', "Rule 'T' clashes with %token T at 3:1")

    def test_caret_after_previous_piece(self):
        with self.assertRaises(SyntaxError) as cm:
            read_grammar('S : "a" | ) ;')
        lines = str(cm.exception).splitlines()
        assert lines[0] == "Missing ';' after rule 'S' at 1:10"
        assert lines[-2] == 'S : "a" | ) ;'
        assert lines[-1] == " " * 9 + "^"

    def test_caret_on_right_line(self):
        with self.assertRaises(SyntaxError) as cm:
            read_grammar('A : "a" ;\nB : "b"\n')
        lines = str(cm.exception).splitlines()
        assert lines[0] == "Missing ';' after rule 'B' at 2:8"
        assert lines[-2] == 'B : "b"'


class TestLoadGrammar(TestCase):

    def test_load_text_normalizes_newlines(self):
        assert "\r" not in load_grammar_text(str(GRAMMAR_DIR / "parens.g"))

    def test_parens_file_end_to_end(self):
        gf, grammar = load_grammar(str(GRAMMAR_DIR / "parens.g"))
        lx = Lexer.from_grammar_file(gf)
        assert recognize(lx.tokenize("( ( ) )"), grammar)
        assert recognize(lx.tokenize("()"), grammar)
        assert not recognize(lx.tokenize("(()"), grammar)

    def test_expr_file_end_to_end(self):
        gf, grammar = load_grammar(str(GRAMMAR_DIR / "expr.g"))
        lx = Lexer.from_grammar_file(gf)
        for ok in ["1+2*3+(4*5)", "42", "-x / f(1, 2)", "f()", "((7))"]:
            assert recognize(lx.tokenize(ok), grammar), ok
        for bad in ["1+*2", "(", "1+(2*3", "f(1,)"]:
            assert not recognize(lx.tokenize(bad), grammar), bad

    def test_ambiguous_file(self):
        gf, grammar = load_grammar(str(GRAMMAR_DIR / "ambig.g"))
        lx = Lexer.from_grammar_file(gf)
        assert recognize(lx.tokenize("a a a"), grammar)


if __name__ == '__main__':
    main()
