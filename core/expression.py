# core/expression.py
"""
Formula parsing for the grapher.

User text goes through three stages:

    tokenize -> normalize_tokens -> Parser

The lexer never raises: characters it does not know become ERROR tokens and
are rejected by the parser. normalize_tokens turns ``^`` into ``**`` and makes
implicit multiplication explicit (2x, )x, x(x+1), )( ...), so the parser only
sees the plain operator set. The tree is evaluated by walking it with the
variable bound; user text is never executed.
"""
import math
import operator
import re
from collections import namedtuple
from functools import lru_cache
from typing import List, Optional

Token = namedtuple("Token", "kind value")

# name -> (callable, arity, python spelling)
FUNCTIONS = {
    "sin": (math.sin, 1, "math.sin"),
    "cos": (math.cos, 1, "math.cos"),
    "tan": (math.tan, 1, "math.tan"),
    "log": (math.log, 1, "math.log"),
    "sqrt": (math.sqrt, 1, "math.sqrt"),
    "abs": (math.fabs, 1, "math.fabs"),
    "pow": (math.pow, 2, "math.pow"),
    "exp": (math.exp, 1, "math.exp"),
}

# name -> (value, python spelling)
CONSTANTS = {
    "PI": (math.pi, "math.pi"),
    "pi": (math.pi, "math.pi"),
    "E": (math.e, "math.e"),
    "e": (math.e, "math.e"),
}

# math-module spellings that differ from the user-facing name
_PYTHON_NAMES = {"fabs": "abs"}

MAX_DEPTH = 100

TOKEN_RE = re.compile(
    r"\s*(?:"
    # no exponent suffix: a digit followed by a letter is always a product (2e3 -> 2*e3)
    r"(\d+\.?\d*|\.\d+)"
    r"|((?:[Mm]ath\.)?[A-Za-z_][A-Za-z_0-9]*)"
    r"|(\*\*|[-+*/^(),])"
    r"|(\S))"
)

_PUNCTUATION = {"(": "LPAREN", ")": "RPAREN", ",": "COMMA"}

# implicit multiplication happens between these
_ENDS_OPERAND = {"NUMBER", "NAME", "CONST", "RPAREN"}
_STARTS_OPERAND = {"NAME", "CONST", "FUNC", "LPAREN"}


class FormulaError(ValueError):
    """Formula text that cannot be compiled."""


class FormulaSyntaxError(FormulaError):
    pass


class UnknownIdentifierError(FormulaError):
    def __init__(self, name: str):
        super().__init__(f"Unknown name '{name}'")
        self.name = name


# ---------------------------
# Lexer & normalizer
# ---------------------------
def _name_token(raw: str) -> Token:
    name = raw
    if "." in raw:
        # Math.sin / math.fabs: drop the qualifier, never double it
        name = raw.split(".", 1)[1]
        name = _PYTHON_NAMES.get(name, name)
    if name in FUNCTIONS:
        return Token("FUNC", name)
    if name in CONSTANTS:
        return Token("CONST", name)
    return Token("NAME", raw)


def tokenize(text: str) -> List[Token]:
    text = "" if text is None else str(text)
    tokens = []
    pos = 0
    end = len(text.rstrip())
    while pos < end:
        m = TOKEN_RE.match(text, pos)
        number, name, op, other = m.groups()
        pos = m.end()
        if number:
            tokens.append(Token("NUMBER", number))
        elif name:
            tokens.append(_name_token(name))
        elif op:
            tokens.append(Token(_PUNCTUATION.get(op, "OP"), op))
        else:
            tokens.append(Token("ERROR", other))
    return tokens


def normalize_tokens(tokens: List[Token]) -> List[Token]:
    out = []
    for tok in tokens:
        if out:
            prev = out[-1].kind
            if prev in _ENDS_OPERAND and (
                tok.kind in _STARTS_OPERAND or (tok.kind == "NUMBER" and prev == "RPAREN")
            ):
                out.append(Token("OP", "*"))
        if tok == Token("OP", "^"):
            tok = Token("OP", "**")
        out.append(tok)
    return out


def _render(tok: Token) -> str:
    if tok.kind == "FUNC":
        return FUNCTIONS[tok.value][2]
    if tok.kind == "CONST":
        return CONSTANTS[tok.value][1]
    return tok.value


def normalize_expression(text: str) -> str:
    """
    Rewrite user notation into plain Python arithmetic:
    "2x^2 + sin(x)" -> "2*x**2+math.sin(x)".
    Purely token based; malformed input comes back malformed, never raises.
    """
    return "".join(_render(t) for t in normalize_tokens(tokenize(text)))


# ---------------------------
# Expression tree
# ---------------------------
Number = namedtuple("Number", "value")
Constant = namedtuple("Constant", "name value")
Variable = namedtuple("Variable", "name")
UnaryOp = namedtuple("UnaryOp", "op operand")
BinaryOp = namedtuple("BinaryOp", "op left right")
Call = namedtuple("Call", "name args")


def _describe(tok: Token) -> str:
    if tok.kind == "EOF":
        return "end of formula"
    if tok.kind == "ERROR":
        return f"character '{tok.value}'"
    if tok.kind == "NUMBER":
        return f"number {tok.value}"
    return f"'{tok.value}'"


class Parser:
    """
    Recursive-descent parser over normalized tokens.

        expression := term (('+' | '-') term)*
        term       := unary (('*' | '/') unary)*
        unary      := ('+' | '-') unary | power
        power      := primary ('**' unary)?
        primary    := NUMBER | CONST | NAME | FUNC '(' args ')' | '(' expression ')'
    """

    def __init__(self, tokens: List[Token], variable: str = "x"):
        self.tokens = tokens
        self.variable = variable
        self.pos = 0
        self.depth = 0

    def peek(self) -> Token:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else Token("EOF", None)

    def consume(self) -> Token:
        tok = self.peek()
        self.pos += 1
        return tok

    def expect(self, kind: str, what: str) -> Token:
        tok = self.consume()
        if tok.kind != kind:
            raise FormulaSyntaxError(f"Expected {what} but found {_describe(tok)}")
        return tok

    def parse(self):
        if not self.tokens:
            raise FormulaSyntaxError("Formula is empty")
        node = self.expression()
        tok = self.peek()
        if tok.kind != "EOF":
            raise FormulaSyntaxError(f"Unexpected {_describe(tok)}")
        return node

    def _is_op(self, *ops) -> bool:
        tok = self.peek()
        return tok.kind == "OP" and tok.value in ops

    def expression(self):
        node = self.term()
        while self._is_op("+", "-"):
            op = self.consume().value
            node = BinaryOp(op, node, self.term())
        return node

    def term(self):
        node = self.unary()
        while self._is_op("*", "/"):
            op = self.consume().value
            node = BinaryOp(op, node, self.unary())
        return node

    def unary(self):
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise FormulaSyntaxError("Formula is nested too deeply")
        if self._is_op("+", "-"):
            op = self.consume().value
            node = UnaryOp(op, self.unary())
        else:
            node = self.power()
        self.depth -= 1
        return node

    def power(self):
        node = self.primary()
        if self._is_op("**"):
            self.consume()
            # right-associative; the exponent may carry a sign (2^-1)
            node = BinaryOp("**", node, self.unary())
        return node

    def primary(self):
        tok = self.consume()
        if tok.kind == "NUMBER":
            return Number(float(tok.value))
        if tok.kind == "CONST":
            return Constant(tok.value, CONSTANTS[tok.value][0])
        if tok.kind == "NAME":
            if tok.value != self.variable:
                raise UnknownIdentifierError(tok.value)
            return Variable(tok.value)
        if tok.kind == "FUNC":
            return self.call(tok.value)
        if tok.kind == "LPAREN":
            node = self.expression()
            self.expect("RPAREN", "')'")
            return node
        raise FormulaSyntaxError(f"Unexpected {_describe(tok)}")

    def call(self, name: str):
        self.expect("LPAREN", f"'(' after {name}")
        args = [self.expression()]
        while self.peek().kind == "COMMA":
            self.consume()
            args.append(self.expression())
        self.expect("RPAREN", "')'")
        arity = FUNCTIONS[name][1]
        if len(args) != arity:
            plural = "" if arity == 1 else "s"
            raise FormulaSyntaxError(f"{name}() takes {arity} argument{plural}, got {len(args)}")
        return Call(name, tuple(args))


# ---------------------------
# Evaluation
# ---------------------------
_BINARY = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "**": math.pow,
}


def evaluate_tree(node, x: float) -> float:
    """Walk the tree with the variable bound to x. Arithmetic errors propagate."""
    if isinstance(node, Number):
        return node.value
    if isinstance(node, Variable):
        return x
    if isinstance(node, Constant):
        return node.value
    if isinstance(node, UnaryOp):
        value = evaluate_tree(node.operand, x)
        return -value if node.op == "-" else value
    if isinstance(node, BinaryOp):
        # + - * / chains are left-deep; fold them in a loop so long sums don't recurse
        rights = []
        while isinstance(node, BinaryOp) and node.op != "**":
            rights.append((node.op, node.right))
            node = node.left
        if not rights:
            return math.pow(evaluate_tree(node.left, x), evaluate_tree(node.right, x))
        value = evaluate_tree(node, x)
        for op, right in reversed(rights):
            value = _BINARY[op](value, evaluate_tree(right, x))
        return value
    if isinstance(node, Call):
        fn = FUNCTIONS[node.name][0]
        return fn(*[evaluate_tree(arg, x) for arg in node.args])
    raise TypeError(f"Unknown node type: {node!r}")


class Formula:
    """A compiled single-variable formula."""

    def __init__(self, text: str, tree, normalized: str, variable: str = "x"):
        self.text = text
        self.tree = tree
        self.normalized = normalized
        self.variable = variable

    def __call__(self, x: float) -> float:
        return evaluate_tree(self.tree, float(x))

    def evaluate(self, x: float) -> Optional[float]:
        """Value at x, or None where the formula is undefined (1/0, sqrt(-1), overflow)."""
        try:
            value = self(x)
        except Exception:
            return None
        if not math.isfinite(value):
            return None
        return value

    def __repr__(self):
        return f"Formula({self.text!r})"


@lru_cache(maxsize=256)
def compile_formula(text: str, variable: str = "x") -> Formula:
    """Parse formula text. Raises FormulaError when it is malformed."""
    tokens = normalize_tokens(tokenize(text))
    try:
        tree = Parser(tokens, variable).parse()
    except RecursionError:
        raise FormulaSyntaxError("Formula is nested too deeply") from None
    normalized = "".join(_render(t) for t in tokens)
    return Formula(text, tree, normalized, variable)
