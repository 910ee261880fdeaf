"""
Expression Evaluator for Calcpad
Tokenizes and evaluates infix arithmetic without eval()
"""
import logging
import math
import re
from collections import namedtuple
from decimal import Decimal

logger = logging.getLogger("calcpad.evaluator")

# Display glyph -> canonical operator
OPERATOR_ALIASES = {
    "+": "+",
    "-": "-",
    "−": "-",
    "×": "×",
    "*": "×",
    "÷": "÷",
    "/": "÷",
}

_NUMBER_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")

Token = namedtuple("Token", ["kind", "text", "position"])


class EvaluationError(Exception):
    """Base class for every evaluation failure"""
    kind = "EvaluationError"


class EmptyExpression(EvaluationError):
    kind = "EmptyExpression"


class ExpressionSyntaxError(EvaluationError):
    kind = "SyntaxError"


class UnbalancedParentheses(EvaluationError):
    kind = "UnbalancedParentheses"


class DivisionByZero(EvaluationError):
    kind = "DivisionByZero"


def tokenize(expression):
    """Split an expression into number, operator and parenthesis tokens"""
    tokens = []
    i = 0
    n = len(expression)
    while i < n:
        ch = expression[i]
        if ch.isspace():
            i += 1
        elif ch.isdigit() or ch == ".":
            start = i
            while i < n and (expression[i].isdigit() or expression[i] == "."):
                i += 1
            text = expression[start:i]
            if text.count(".") > 1 or text == ".":
                raise ExpressionSyntaxError(f"Malformed number '{text}' at {start}")
            tokens.append(Token("number", text, start))
        elif ch in OPERATOR_ALIASES:
            tokens.append(Token("operator", OPERATOR_ALIASES[ch], i))
            i += 1
        elif ch == "(":
            tokens.append(Token("lparen", ch, i))
            i += 1
        elif ch == ")":
            tokens.append(Token("rparen", ch, i))
            i += 1
        else:
            raise ExpressionSyntaxError(f"Unexpected character '{ch}' at {i}")
    return tokens


def check_parentheses(tokens):
    """Raise UnbalancedParentheses unless every '(' has a matching ')'"""
    depth = 0
    for token in tokens:
        if token.kind == "lparen":
            depth += 1
        elif token.kind == "rparen":
            depth -= 1
            if depth < 0:
                raise UnbalancedParentheses(f"Unmatched ')' at {token.position}")
    if depth:
        raise UnbalancedParentheses(f"{depth} unclosed '('")


class _Parser:
    """Recursive-descent evaluator over a token list"""

    def __init__(self, tokens):
        self.tokens = tokens
        self.position = 0

    def _peek(self):
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _advance(self):
        token = self._peek()
        self.position += 1
        return token

    def parse(self):
        value = self._expression()
        token = self._peek()
        if token is not None:
            raise ExpressionSyntaxError(f"Unexpected '{token.text}' at {token.position}")
        return value

    def _expression(self):
        """expression := term (('+' | '-') term)*"""
        left = self._term()
        while True:
            token = self._peek()
            if token is None or token.kind != "operator" or token.text not in "+-":
                return left
            self._advance()
            right = self._term()
            left = left + right if token.text == "+" else left - right

    def _term(self):
        """term := unary (('×' | '÷') unary)*, with implicit × before '('"""
        left = self._unary()
        while True:
            token = self._peek()
            if token is None:
                return left
            if token.kind == "operator" and token.text in "×÷":
                self._advance()
                right = self._unary()
                if token.text == "×":
                    left = left * right
                else:
                    if right == 0:
                        raise DivisionByZero(f"Division by zero at {token.position}")
                    left = left / right
            elif token.kind == "lparen" or (
                token.kind == "number" and self.tokens[self.position - 1].kind == "rparen"
            ):
                left = left * self._unary()
            else:
                return left

    def _unary(self):
        token = self._peek()
        if token is not None and token.kind == "operator" and token.text == "-":
            self._advance()
            return -self._unary()
        return self._primary()

    def _primary(self):
        token = self._advance()
        if token is None:
            raise ExpressionSyntaxError("Expression ends with an operator")
        if token.kind == "number":
            return float(token.text)
        if token.kind == "lparen":
            if self._peek() is not None and self._peek().kind == "rparen":
                raise ExpressionSyntaxError(f"Empty parentheses at {token.position}")
            value = self._expression()
            closing = self._advance()
            if closing is None or closing.kind != "rparen":
                raise ExpressionSyntaxError(f"Expected ')' to close '(' at {token.position}")
            return value
        raise ExpressionSyntaxError(f"Unexpected '{token.text}' at {token.position}")


def evaluate(expression):
    """
    Evaluate an infix arithmetic expression to a float.

    Raises EmptyExpression, UnbalancedParentheses, DivisionByZero or
    ExpressionSyntaxError.
    """
    if expression is None or not expression.strip():
        raise EmptyExpression("Expression is empty")
    tokens = tokenize(expression)
    check_parentheses(tokens)
    try:
        value = _Parser(tokens).parse()
    except EvaluationError as e:
        logger.debug("Evaluation of %r failed: %s (%s)", expression, e, e.kind)
        raise
    return float(value)


def parse_number(text):
    """Parse text that must be a single bare number such as '7', '-0.5'"""
    if text is None or not _NUMBER_RE.fullmatch(text):
        raise ExpressionSyntaxError(f"Not a number: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ExpressionSyntaxError(f"Number out of range: {text!r}")
    return value


def format_number(value):
    """Canonical operand text: '10', '-7', '0.00001'; never exponent notation"""
    if not math.isfinite(value):
        return format_result(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def format_result(value):
    """Format a result the way the keypad display shows it ('7.0', '1.0E7')"""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    magnitude = abs(value)
    if value == 0 or 1e-3 <= magnitude < 1e7:
        text = format(Decimal(repr(value)), "f")
        if "." not in text:
            text += ".0"
        return text

    # Scientific form with the shortest round-tripping mantissa
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digits)
    power = exponent + len(digits) - 1
    mantissa = digits[0] + "." + (digits[1:] or "0")
    return f"{'-' if sign else ''}{mantissa}E{power}"
