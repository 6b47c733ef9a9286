"""Boolean free-text search over transaction records.

Supports boolean operators: AND, OR, NOT
Supports grouping with parentheses: (term1 OR term2) AND term3
Quoted phrases match as a single term. Matching is case-insensitive and
covers description, merchant name and resolved category.
"""

import logging
from enum import Enum
from typing import Any, Callable

from spendscope.domain.models import NormalizedTransaction
from spendscope.services.normalizer import UNCATEGORIZED, _field, resolve_category

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Token types for query parsing."""
    TERM = "TERM"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"


class Token:
    """A token in the search query."""

    def __init__(self, type: TokenType, value: str):
        self.type = type
        self.value = value

    def __repr__(self):
        return f"Token({self.type}, {self.value!r})"


OPERATORS = {"AND": TokenType.AND, "OR": TokenType.OR, "NOT": TokenType.NOT}

# Higher binds tighter
PRECEDENCE = {
    TokenType.NOT: 3,
    TokenType.AND: 2,
    TokenType.OR: 1,
}


class QueryMatcher:
    """Compiled boolean query.

    Example:
        >>> matcher = QueryMatcher.compile('(coffee OR "bus fare") AND NOT refund')
        >>> matcher({"description": "Bus fare to town", "category": "Transport"})
        True
    """

    def __init__(self, rpn: list[Token], uncategorized_label: str = UNCATEGORIZED):
        self._rpn = rpn
        self._uncategorized_label = uncategorized_label

    @classmethod
    def compile(cls, query: str, uncategorized_label: str = UNCATEGORIZED) -> "QueryMatcher":
        rpn = to_rpn(with_implicit_and(tokenize(query)))
        validate_rpn(rpn)
        return cls(rpn, uncategorized_label)

    def __call__(self, raw: Any) -> bool:
        if not self._rpn:
            return True

        text = self.searchable_text(raw).lower()
        stack: list[bool] = []

        for token in self._rpn:
            if token.type == TokenType.TERM:
                stack.append(token.value.lower() in text)

            elif token.type == TokenType.NOT:
                stack.append(not stack.pop())

            else:
                right = stack.pop()
                left = stack.pop()
                if token.type == TokenType.AND:
                    stack.append(left and right)
                else:
                    stack.append(left or right)

        return stack[0]

    def searchable_text(self, raw: Any) -> str:
        """Combine the searchable fields of a record (space-separated)."""
        if isinstance(raw, NormalizedTransaction):
            category = raw.category
        else:
            category = resolve_category(raw, self._uncategorized_label)

        parts = [
            _field(raw, "description"),
            _field(raw, "merchant_name"),
            category,
        ]
        return " ".join(str(p) for p in parts if p)


def tokenize(query: str) -> list[Token]:
    """Split a query string into tokens.

    Example:
        >>> tokenize("coffee AND (fuel OR car)")
        [Token(TokenType.TERM, 'coffee'), Token(TokenType.AND, 'AND'), ...]
    """
    tokens = []
    i = 0
    query = query.strip()

    while i < len(query):
        char = query[i]

        if char.isspace():
            i += 1
            continue

        if char == "(":
            tokens.append(Token(TokenType.LPAREN, "("))
            i += 1
            continue

        if char == ")":
            tokens.append(Token(TokenType.RPAREN, ")"))
            i += 1
            continue

        if char == '"':
            end = query.find('"', i + 1)
            if end == -1:
                end = len(query)
            phrase = query[i + 1:end]
            if phrase:
                tokens.append(Token(TokenType.TERM, phrase))
            i = end + 1
            continue

        start = i
        while i < len(query) and not query[i].isspace() and query[i] not in '()"':
            i += 1
        word = query[start:i]

        operator = OPERATORS.get(word.upper())
        if operator is not None:
            tokens.append(Token(operator, word.upper()))
        else:
            tokens.append(Token(TokenType.TERM, word))

    return tokens


def with_implicit_and(tokens: list[Token]) -> list[Token]:
    """Insert AND between adjacent operands, so ``coffee shop`` means both."""
    result: list[Token] = []
    for token in tokens:
        if (result
                and result[-1].type in (TokenType.TERM, TokenType.RPAREN)
                and token.type in (TokenType.TERM, TokenType.LPAREN, TokenType.NOT)):
            result.append(Token(TokenType.AND, "AND"))
        result.append(token)
    return result


def to_rpn(tokens: list[Token]) -> list[Token]:
    """Convert infix tokens to Reverse Polish Notation (shunting-yard).

    Unbalanced parentheses are tolerated: a stray ``)`` is dropped and an
    unclosed ``(`` is discarded at the end.
    """
    output = []
    operators: list[Token] = []

    for token in tokens:
        if token.type == TokenType.TERM:
            output.append(token)

        elif token.type in PRECEDENCE:
            # NOT is a prefix operator, so it never pops its predecessors
            if token.type != TokenType.NOT:
                while (operators
                       and operators[-1].type != TokenType.LPAREN
                       and PRECEDENCE[operators[-1].type] >= PRECEDENCE[token.type]):
                    output.append(operators.pop())
            operators.append(token)

        elif token.type == TokenType.LPAREN:
            operators.append(token)

        elif token.type == TokenType.RPAREN:
            while operators and operators[-1].type != TokenType.LPAREN:
                output.append(operators.pop())
            if operators:
                operators.pop()

    while operators:
        token = operators.pop()
        if token.type != TokenType.LPAREN:
            output.append(token)

    return output


def validate_rpn(rpn: list[Token]) -> None:
    """Check that an RPN sequence reduces to exactly one operand.

    Raises:
        ValueError: If an operator lacks operands or terms are left over
    """
    depth = 0
    for token in rpn:
        if token.type == TokenType.TERM:
            depth += 1
        elif token.type == TokenType.NOT:
            if depth < 1:
                raise ValueError("NOT without operand")
        else:
            if depth < 2:
                raise ValueError(f"{token.value} needs two operands")
            depth -= 1

    if depth != 1:
        raise ValueError("Query does not reduce to a single condition")


def build_matcher(query: str, uncategorized_label: str = UNCATEGORIZED) -> Callable[[Any], bool]:
    """Compile a query into a record predicate.

    An empty or unparseable query matches every record.
    """
    if not query or not query.strip():
        return lambda raw: True

    try:
        return QueryMatcher.compile(query, uncategorized_label)
    except (ValueError, IndexError) as e:
        logger.warning(f"Ignoring unparseable search query {query!r}: {e}")
        return lambda raw: True
