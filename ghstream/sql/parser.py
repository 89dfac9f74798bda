"""
SQL Parser - Hand-written recursive descent parser

Parses SQL subset:
- SELECT column1, column2 FROM table
- WHERE column = value (with AND)
- ORDER BY column1 ASC, column2 DESC
- LIMIT n

Design: table functions only need simple predicates and orderings,
so there are no joins, aggregates or expressions.
"""

import re
from typing import List, Optional

from ghstream.errors import GHStreamError
from ghstream.sql.ast_nodes import (
    Condition,
    OrderByColumn,
    SelectStatement,
    WhereClause,
)

# Quoted strings first so operators inside literals are not split out
TOKEN_RE = re.compile(
    r"""'(?:[^']|'')*'|"[^"]*"|>=|<=|!=|<>|[=<>,*;]|[^\s,=<>!;'"]+"""
)

CLAUSE_KEYWORDS = ("WHERE", "ORDER", "LIMIT")


class ParseError(GHStreamError):
    """Raised when SQL parsing fails"""

    pass


class SQLParser:
    """
    Simple recursive descent parser for SQL

    Grammar (simplified):
        SELECT_STMT := SELECT columns FROM table [WHERE conditions]
                       [ORDER BY order_terms] [LIMIT n] [;]
        columns     := * | column_name [, column_name]*
        conditions  := condition [AND condition]*
        condition   := column_name operator value
        operator    := = | > | < | >= | <= | != | <>
        order_terms := column_name [ASC|DESC] [, column_name [ASC|DESC]]*
    """

    def __init__(self, sql: str):
        self.sql = sql.strip()
        self.tokens = self._tokenize(self.sql)
        self.pos = 0

    def _tokenize(self, sql: str) -> List[str]:
        """
        Split SQL into tokens, keeping quoted literals intact

        Raises:
            ParseError: On characters that cannot start a token (e.g. an
                unterminated quote)
        """
        tokens = []
        pos = 0

        for match in TOKEN_RE.finditer(sql):
            gap = sql[pos : match.start()]
            if gap.strip():
                raise ParseError(f"Unexpected character {gap.strip()[0]!r} at offset {pos}")
            tokens.append(match.group())
            pos = match.end()

        if sql[pos:].strip():
            raise ParseError(f"Unexpected character {sql[pos:].strip()[0]!r} at offset {pos}")

        # Trailing semicolon is allowed and ignored
        if tokens and tokens[-1] == ";":
            tokens.pop()

        return tokens

    def current(self) -> Optional[str]:
        """Get current token without advancing"""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _at_keyword(self, *keywords: str) -> bool:
        token = self.current()
        return token is not None and token.upper() in keywords

    def consume(self, expected: Optional[str] = None) -> str:
        """
        Consume and return current token, optionally checking it matches expected

        Raises:
            ParseError: If expected token doesn't match or no more tokens
        """
        if self.pos >= len(self.tokens):
            raise ParseError(f"Unexpected end of query. Expected: {expected}")

        token = self.tokens[self.pos]

        if expected and token.upper() != expected.upper():
            raise ParseError(
                f"Expected '{expected}' but got '{token}' at position {self.pos}"
            )

        self.pos += 1
        return token

    def parse(self) -> SelectStatement:
        """Parse SQL query into AST"""
        statement = self._parse_select()

        if self.current() is not None:
            raise ParseError(f"Unexpected token '{self.current()}' at position {self.pos}")

        return statement

    def _parse_select(self) -> SelectStatement:
        """Parse SELECT statement"""
        self.consume("SELECT")
        columns = self._parse_columns()

        self.consume("FROM")
        source = self._parse_identifier(self.consume())

        # Skip optional table alias (FROM t AS x, FROM t x)
        if self._at_keyword("AS"):
            self.consume("AS")
            self.consume()
        elif self.current() is not None and not self._at_keyword(*CLAUSE_KEYWORDS):
            self.consume()

        where = self._parse_where() if self._at_keyword("WHERE") else None
        order_by = self._parse_order_by() if self._at_keyword("ORDER") else None
        limit = self._parse_limit() if self._at_keyword("LIMIT") else None

        return SelectStatement(
            columns=columns,
            source=source,
            where=where,
            order_by=order_by,
            limit=limit,
        )

    def _parse_columns(self) -> List[str]:
        """
        Parse column list

        Examples:
            *
            name, stargazer_count
        """
        if self.current() == "*":
            self.consume()
            return ["*"]

        columns = []
        while True:
            columns.append(self._parse_identifier(self.consume()))

            if self.current() == ",":
                self.consume(",")
            else:
                break

        return columns

    def _parse_identifier(self, token: str) -> str:
        """
        Normalise an identifier token

        Strips double quotes and a table qualifier (t.column -> column).
        Table and column names are case-insensitive, so the result is
        lower-cased; quoting only lets a keyword be used as a name.
        """
        if token.startswith('"') and token.endswith('"'):
            return token[1:-1].lower()
        if token.startswith("'"):
            raise ParseError(f"Expected identifier but got string literal {token}")
        if "." in token:
            token = token.rsplit(".", 1)[1]
        return token.lower()

    def _parse_where(self) -> WhereClause:
        """
        Parse WHERE clause

        Example: WHERE login = 'octocat' AND stargazer_count > 100
        """
        self.consume("WHERE")

        conditions = [self._parse_condition()]

        while self._at_keyword("AND"):
            self.consume("AND")
            conditions.append(self._parse_condition())

        if self._at_keyword("OR"):
            raise ParseError("OR conditions are not supported")

        return WhereClause(conditions=conditions)

    def _parse_condition(self) -> Condition:
        """
        Parse a single condition: column operator value

        Examples:
            login = 'octocat'
            stargazer_count >= 1000
        """
        column = self._parse_identifier(self.consume())
        operator = self.consume()

        valid_operators = {"=", ">", "<", ">=", "<=", "!=", "<>"}
        if operator not in valid_operators:
            raise ParseError(f"Invalid operator: {operator}")

        value = self._parse_value(self.consume())

        # Normalize <> to !=
        if operator == "<>":
            operator = "!="

        return Condition(column=column, operator=operator, value=value)

    def _parse_value(self, token: str):
        """
        Parse a value token into appropriate Python type

        Examples:
            '123' -> 123 (int)
            '3.14' -> 3.14 (float)
            "'octocat'" -> 'octocat' (string, quotes removed)
            octocat -> 'octocat' (bare word)
            "'it''s'" -> "it's"
        """
        if token.startswith("'") and token.endswith("'") and len(token) >= 2:
            return token[1:-1].replace("''", "'")

        try:
            if "." not in token:
                return int(token)
            return float(token)
        except ValueError:
            # Bare word, e.g. WHERE login = octocat
            return token

    def _parse_order_by(self) -> List[OrderByColumn]:
        """
        Parse ORDER BY clause

        Examples:
            ORDER BY starred_at
            ORDER BY starred_at DESC
            ORDER BY stargazer_count DESC, name ASC
        """
        self.consume("ORDER")
        self.consume("BY")

        order_columns = []

        while True:
            column = self._parse_identifier(self.consume())

            direction = "ASC"
            if self._at_keyword("ASC", "DESC"):
                direction = self.consume().upper()

            order_columns.append(OrderByColumn(column=column, direction=direction))

            if self.current() == ",":
                self.consume(",")
            else:
                break

        return order_columns

    def _parse_limit(self) -> int:
        """Parse LIMIT clause"""
        self.consume("LIMIT")
        limit_str = self.consume()

        try:
            limit = int(limit_str)
        except ValueError:
            raise ParseError(f"LIMIT must be an integer, got '{limit_str}'")

        if limit < 0:
            raise ParseError(f"LIMIT must be non-negative, got {limit}")
        return limit


def parse(sql: str) -> SelectStatement:
    """
    Convenience function to parse SQL query

    Args:
        sql: SQL query string

    Returns:
        Parsed SelectStatement AST

    Raises:
        ParseError: If query is invalid

    Examples:
        >>> ast = parse("SELECT * FROM github_starred_repos WHERE login = 'octocat'")
        >>> ast.where.conditions[0].value
        'octocat'
    """
    parser = SQLParser(sql)
    return parser.parse()
