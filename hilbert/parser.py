"""Parser for the declaration language and for proof files.

Declaration statements (``--`` starts a comment):

  sort_stmt    := modifier* 'sort' IDENT ';'
  term_stmt    := 'term' IDENT binder* ':' arrow_type ';'
  def_stmt     := 'def' IDENT binder* ':' type ('=' MATH)? ';'
  assert_stmt  := ('axiom' | 'theorem') IDENT binder* ':' arrow_type ';'
  binder       := '(' IDENT+ ':' type ')' | '{' IDENT+ ':' type '}'
  type         := IDENT IDENT* | MATH
  arrow_type   := type ('>' type)*
  notation     := ('prefix' | 'infixl' | 'infixr') IDENT ':' MATH 'prec' (NUM | 'max') ';'
  delimiter    := 'delimiter' MATH MATH? ';'

Proof files:

  proof_stmt   := 'proof' IDENT '=' proof_term ';'
  proof_term   := IDENT | '(' IDENT item* ')'
  item         := proof_term | MATH | '_'

Errors are raised as ParseError internally and returned as ``Err`` from
``parse_theory`` / ``parse_proofs``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .config import DEFAULT_MAX_PROOF_DEPTH
from .errors import ParseError
from .formula import parse_math
from .lexer import Token, TokenKind, tokenize
from .proof import ExprArg, Hole, Proof, ProofApp, ProofDecl, ProofItem, ProofRef
from .result import Err, Ok, Result
from .signature import MAX_PREC, Binder, Delimiters, Fixity, Notation, Signature, TermDecl
from .sorts import MODIFIER_KEYWORDS, SortDecl, SortModifier, SortRef
from .terms import Expr
from .theory import Assertion, AssertionKind, Hypothesis, Theory

logger = logging.getLogger(__name__)

_UNSUPPORTED = frozenset({"notation", "coercion", "input", "output"})


@dataclass(frozen=True)
class _TypeSpec:
    """A parsed ``type``: either a sort with dependencies or a math string."""

    sort: SortRef | None
    deps: tuple[str, ...]
    math: Expr | None
    token: Token


class _TokenStream:
    def __init__(self, text: str) -> None:
        self.tokens = tokenize(text)
        self.pos = 0

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != TokenKind.EOF:
            self.pos += 1
        return tok

    def error(self, message: str, tok: Token | None = None) -> ParseError:
        tok = tok or self.peek()
        return ParseError(message, tok.line, tok.column)

    def describe(self, tok: Token) -> str:
        match tok.kind:
            case TokenKind.EOF:
                return "end of input"
            case TokenKind.MATH:
                return "math string"
            case _:
                return f"'{tok.value}'"

    def expect_punct(self, value: str) -> Token:
        tok = self.advance()
        if not tok.is_punct(value):
            raise self.error(f"Expected '{value}', got {self.describe(tok)}", tok)
        return tok

    def expect_ident(self, what: str = "identifier") -> Token:
        tok = self.advance()
        if tok.kind != TokenKind.IDENT:
            raise self.error(f"Expected {what}, got {self.describe(tok)}", tok)
        return tok

    def expect_math(self) -> Token:
        tok = self.advance()
        if tok.kind != TokenKind.MATH:
            raise self.error(f"Expected math string, got {self.describe(tok)}", tok)
        return tok


class TheoryParser:
    """Parses declaration statements, building the signature as it goes.

    Math strings are parsed as soon as they are read, so a notation or
    delimiter must be declared before it is used.
    """

    def __init__(self, text: str) -> None:
        self.ts = _TokenStream(text)
        self.sorts: dict[str, SortDecl] = {}
        self.terms: dict[str, TermDecl] = {}
        self.notations: dict[str, Notation] = {}
        self.left_delims: set[str] = set()
        self.right_delims: set[str] = set()
        self.assertions: list[Assertion] = []

    @property
    def signature(self) -> Signature:
        return Signature(
            sorts=MappingProxyType(dict(self.sorts)),
            terms=MappingProxyType(dict(self.terms)),
            notations=MappingProxyType(dict(self.notations)),
            delimiters=Delimiters(
                frozenset(self.left_delims), frozenset(self.right_delims)
            ),
        )

    def parse(self, name: str) -> Theory:
        while self.ts.peek().kind != TokenKind.EOF:
            self.parse_statement()
        return Theory(name, self.signature, tuple(self.assertions))

    def parse_statement(self) -> None:
        tok = self.ts.peek()
        if tok.kind != TokenKind.IDENT:
            raise self.ts.error(f"Expected a statement, got {self.ts.describe(tok)}")
        word = tok.value
        if word in MODIFIER_KEYWORDS or word == "sort":
            self.parse_sort()
        elif word == "term":
            self.parse_term()
        elif word == "def":
            self.parse_def()
        elif word in ("axiom", "theorem"):
            self.parse_assertion()
        elif word in ("prefix", "infixl", "infixr"):
            self.parse_notation()
        elif word == "delimiter":
            self.parse_delimiter()
        elif word in _UNSUPPORTED:
            raise self.ts.error(f"Unsupported statement '{word}'")
        else:
            raise self.ts.error(f"Unknown statement '{word}'")

    # -- sorts ---------------------------------------------------------------

    def parse_sort(self) -> None:
        modifiers = SortModifier.NONE
        while (tok := self.ts.peek()).kind == TokenKind.IDENT and tok.value in MODIFIER_KEYWORDS:
            self.ts.advance()
            mod = SortModifier.from_keyword(tok.value)
            if mod in modifiers:
                raise self.ts.error(f"Repeated sort modifier '{tok.value}'", tok)
            modifiers |= mod
        kw = self.ts.expect_ident("'sort'")
        if kw.value != "sort":
            raise self.ts.error(f"Expected 'sort', got '{kw.value}'", kw)
        name = self.ts.expect_ident("sort name")
        self.ts.expect_punct(";")
        if name.value in self.sorts:
            raise self.ts.error(f"Sort '{name.value}' is already declared", name)
        self.sorts[name.value] = SortDecl(SortRef(name.value), modifiers)
        logger.debug("Declared sort %s", name.value)

    # -- binders and types ---------------------------------------------------

    def parse_type(self) -> _TypeSpec:
        tok = self.ts.peek()
        if tok.kind == TokenKind.MATH:
            self.ts.advance()
            expr = parse_math(tok.value, self.signature, tok.line, tok.column + 1)
            return _TypeSpec(None, (), expr, tok)
        sort = self.ts.expect_ident("sort name")
        deps: list[str] = []
        while self.ts.peek().kind == TokenKind.IDENT:
            deps.append(self.ts.advance().value)
        return _TypeSpec(SortRef(sort.value), tuple(deps), None, sort)

    def parse_binder_group(self) -> list[tuple[Token, bool, _TypeSpec]]:
        """``(a b: wff)`` or ``{x: set}`` → one entry per name."""
        open_tok = self.ts.advance()
        bound = open_tok.value == "{"
        close = "}" if bound else ")"
        names = [self.ts.expect_ident("binder name")]
        while self.ts.peek().kind == TokenKind.IDENT:
            names.append(self.ts.advance())
        self.ts.expect_punct(":")
        spec = self.parse_type()
        self.ts.expect_punct(close)
        if bound and spec.math is not None:
            raise self.ts.error("A bound variable cannot have a math type", spec.token)
        if bound and spec.deps:
            raise self.ts.error("A bound variable cannot have dependencies", spec.token)
        return [(n, bound, spec) for n in names]

    def parse_binders(self) -> list[tuple[Token, bool, _TypeSpec]]:
        entries: list[tuple[Token, bool, _TypeSpec]] = []
        while (tok := self.ts.peek()).is_punct("(") or tok.is_punct("{"):
            entries.extend(self.parse_binder_group())
        return entries

    def parse_arrow_type(self) -> list[_TypeSpec]:
        types = [self.parse_type()]
        while self.ts.peek().is_punct(">"):
            self.ts.advance()
            types.append(self.parse_type())
        return types

    # -- terms ---------------------------------------------------------------

    def parse_term_binders(self) -> list[Binder]:
        binders: list[Binder] = []
        for tok, bound, spec in self.parse_binders():
            if spec.sort is None:
                raise self.ts.error("A term binder needs a sort, not a math string", spec.token)
            binders.append(Binder(tok.value, spec.sort, bound, spec.deps))
        return binders

    def declare_term(self, decl: TermDecl, name: Token) -> None:
        if decl.name in self.terms:
            raise self.ts.error(f"Term '{decl.name}' is already declared", name)
        self.terms[decl.name] = decl

    def parse_term(self) -> None:
        self.ts.advance()
        name = self.ts.expect_ident("term name")
        binders = self.parse_term_binders()
        self.ts.expect_punct(":")
        arrow = self.parse_arrow_type()
        for spec in arrow:
            if spec.sort is None:
                raise self.ts.error("A term type needs a sort, not a math string", spec.token)
        for i, spec in enumerate(arrow[:-1]):
            assert spec.sort is not None
            binders.append(Binder(f"_{i + 1}", spec.sort, False, spec.deps))
        result = arrow[-1]
        assert result.sort is not None
        self.ts.expect_punct(";")
        self.declare_term(
            TermDecl(name.value, tuple(binders), result.sort, result.deps), name
        )
        logger.debug("Declared term %s/%d", name.value, len(binders))

    def parse_def(self) -> None:
        """``def an (a b: wff): wff = $ ~(a -> ~b) $;``; the body is optional.

        The body is read before the definition is added, so it can only use
        earlier terms.
        """
        self.ts.advance()
        name = self.ts.expect_ident("definition name")
        binders = self.parse_term_binders()
        self.ts.expect_punct(":")
        result = self.parse_type()
        if result.sort is None:
            raise self.ts.error("A definition type needs a sort, not a math string", result.token)
        body: Expr | None = None
        if self.ts.peek().is_punct("="):
            self.ts.advance()
            math = self.ts.expect_math()
            body = parse_math(math.value, self.signature, math.line, math.column + 1)
        self.ts.expect_punct(";")
        self.declare_term(
            TermDecl(name.value, tuple(binders), result.sort, result.deps, True, body),
            name,
        )
        logger.debug("Declared def %s/%d", name.value, len(binders))

    # -- assertions ----------------------------------------------------------

    def parse_assertion(self) -> None:
        kind = AssertionKind(self.ts.advance().value)
        label = self.ts.expect_ident("assertion label")
        binders: list[Binder] = []
        hyps: list[Hypothesis] = []
        for tok, bound, spec in self.parse_binders():
            if spec.math is not None:
                hyps.append(Hypothesis(tok.value, spec.math))
            else:
                assert spec.sort is not None
                binders.append(Binder(tok.value, spec.sort, bound, spec.deps))
        self.ts.expect_punct(":")
        arrow = self.parse_arrow_type()
        for spec in arrow:
            if spec.math is None:
                raise self.ts.error(
                    f"{kind.value.capitalize()} '{label.value}' needs math strings "
                    f"after ':', got sort '{spec.sort}'",
                    spec.token,
                )
        hyps.extend(Hypothesis(None, spec.math) for spec in arrow[:-1] if spec.math is not None)
        conclusion = arrow[-1].math
        assert conclusion is not None
        self.ts.expect_punct(";")
        self.assertions.append(
            Assertion(kind, label.value, tuple(binders), tuple(hyps), conclusion)
        )
        logger.debug("Declared %s %s", kind.value, label.value)

    # -- notations and delimiters -------------------------------------------

    def parse_notation(self) -> None:
        fixity = Fixity(self.ts.advance().value)
        term = self.ts.expect_ident("term name")
        self.ts.expect_punct(":")
        math = self.ts.expect_math()
        token = math.value.strip()
        if not token or any(c.isspace() for c in token):
            raise self.ts.error("A notation token must be a single non-empty word", math)
        kw = self.ts.expect_ident("'prec'")
        if kw.value != "prec":
            raise self.ts.error(f"Expected 'prec', got '{kw.value}'", kw)
        prec_tok = self.ts.advance()
        if prec_tok.kind == TokenKind.NUM:
            prec = int(prec_tok.value)
        elif prec_tok.is_keyword("max"):
            prec = MAX_PREC
        else:
            raise self.ts.error(
                f"Expected a precedence, got {self.ts.describe(prec_tok)}", prec_tok
            )
        self.ts.expect_punct(";")
        if token in self.notations:
            raise self.ts.error(f"Notation '{token}' is already declared", math)
        if prec_tok.kind == TokenKind.NUM and prec >= MAX_PREC:
            raise self.ts.error(f"Precedence {prec} is out of range", prec_tok)
        self.notations[token] = Notation(term.value, token, fixity, prec)

    def parse_delimiter(self) -> None:
        self.ts.advance()
        first = self.ts.expect_math()
        second = self.ts.expect_math() if self.ts.peek().kind == TokenKind.MATH else None
        self.ts.expect_punct(";")
        first_chars = {c for c in first.value if not c.isspace()}
        if second is None:
            self.left_delims |= first_chars
            self.right_delims |= first_chars
        else:
            self.left_delims |= first_chars
            self.right_delims |= {c for c in second.value if not c.isspace()}


def parse_theory(text: str, name: str = "theory") -> Result[Theory, ParseError]:
    """Parse declaration text into a Theory."""
    try:
        return Ok(TheoryParser(text).parse(name))
    except ParseError as e:
        return Err(e)


# ---------------------------------------------------------------------------
# Proof files
# ---------------------------------------------------------------------------


class ProofParser:
    """Parses ``proof`` statements; nesting deeper than ``max_depth`` is an error."""

    def __init__(
        self, text: str, theory: Theory, max_depth: int = DEFAULT_MAX_PROOF_DEPTH
    ) -> None:
        self.ts = _TokenStream(text)
        self.sig = theory.signature
        self.max_depth = max_depth

    def parse(self) -> Mapping[str, ProofDecl]:
        proofs: dict[str, ProofDecl] = {}
        while self.ts.peek().kind != TokenKind.EOF:
            kw = self.ts.expect_ident("'proof'")
            if kw.value != "proof":
                raise self.ts.error(f"Expected 'proof', got '{kw.value}'", kw)
            label = self.ts.expect_ident("theorem label")
            self.ts.expect_punct("=")
            body = self.parse_proof()
            self.ts.expect_punct(";")
            if label.value in proofs:
                raise self.ts.error(f"Duplicate proof of '{label.value}'", label)
            proofs[label.value] = ProofDecl(label.value, body, label.line)
        return MappingProxyType(proofs)

    def parse_proof(self, depth: int = 0) -> Proof:
        tok = self.ts.peek()
        if depth > self.max_depth:
            raise self.ts.error(f"Proof nesting exceeds the limit of {self.max_depth}", tok)
        if tok.kind == TokenKind.IDENT:
            self.ts.advance()
            if tok.value == "_":
                raise self.ts.error("'_' can only stand for an expression argument", tok)
            return ProofRef(tok.value, tok.line, tok.column)
        self.ts.expect_punct("(")
        ref = self.ts.expect_ident("assertion label")
        items: list[ProofItem] = []
        while not self.ts.peek().is_punct(")"):
            items.append(self.parse_item(depth + 1))
        self.ts.expect_punct(")")
        return ProofApp(ref.value, tuple(items), tok.line, tok.column)

    def parse_item(self, depth: int) -> ProofItem:
        tok = self.ts.peek()
        if tok.kind == TokenKind.MATH:
            self.ts.advance()
            return ExprArg(parse_math(tok.value, self.sig, tok.line, tok.column + 1))
        if tok.is_keyword("_"):
            self.ts.advance()
            return Hole()
        if tok.kind == TokenKind.EOF:
            raise self.ts.error("Unclosed '(' in proof", tok)
        return self.parse_proof(depth)


def parse_proofs(
    text: str, theory: Theory, max_depth: int = DEFAULT_MAX_PROOF_DEPTH
) -> Result[Mapping[str, ProofDecl], ParseError]:
    """Parse a proof file; math strings use ``theory``'s notations."""
    try:
        parser = ProofParser(text, theory, max_depth)
    except ParseError as e:
        return Err(e)
    try:
        return Ok(parser.parse())
    except ParseError as e:
        return Err(e)
    except RecursionError:
        return Err(parser.ts.error("Proof is too deeply nested"))
