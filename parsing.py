"""
UIRE Reader
Parses bracketed UIRE source text into a concrete syntax tree with source spans
"""

from typing import List, Tuple, Optional
from dataclasses import dataclass

from pyparsing import (
    Forward, Group, Literal, ParseException, ParserElement, Regex,
    StringEnd, Suppress, ZeroOrMore, col, lineno
)

from error_handling import UIREParseError

# Enable packrat parsing for performance
ParserElement.enable_packrat()


BRACKETS = {'{': '}', '(': ')', '[': ']'}


@dataclass(frozen=True)
class SourceSpan:
    """Source location of the first character of a form"""
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class CSTNode:
    """Concrete Syntax Tree node

    type is one of NUMBER, SYMBOL or LIST; a LIST's value is its opening
    bracket.
    """
    type: str
    value: object
    children: Tuple['CSTNode', ...] = ()
    span: Optional[SourceSpan] = None

    def __str__(self) -> str:
        if self.type == "LIST":
            inner = " ".join(str(child) for child in self.children)
            return f"{self.value}{inner}{BRACKETS[self.value]}"
        return str(self.value)


class UIREGrammar:
    """UIRE grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.filename = "<input>"
        self._setup_grammar()

    def _span(self, text: str, loc: int) -> SourceSpan:
        return SourceSpan(self.filename, lineno(loc, text), col(loc, text))

    def _setup_grammar(self):
        """Setup the UIRE grammar: integers, symbols and bracketed lists"""

        expression = Forward()

        delimiters = r"\s(){}\[\];"
        number = Regex(rf"-?[0-9]+(?=[{delimiters}]|$)")
        number.set_parse_action(
            lambda s, loc, t: CSTNode("NUMBER", int(t[0]), span=self._span(s, loc))
        )
        number.set_name("integer")

        symbol = Regex(rf"[^{delimiters}]+")
        symbol.set_parse_action(
            lambda s, loc, t: CSTNode("SYMBOL", t[0], span=self._span(s, loc))
        )
        symbol.set_name("symbol")

        def bracketed(opener: str, closer: str):
            form = Literal(opener) + Group(ZeroOrMore(expression)) + Suppress(Literal(closer))
            form.set_parse_action(
                lambda s, loc, t: CSTNode("LIST", t[0], tuple(t[1]), self._span(s, loc))
            )
            return form.set_name(f"'{opener}' form")

        list_form = bracketed('{', '}') | bracketed('(', ')') | bracketed('[', ']')

        expression <<= number | symbol | list_form
        expression.set_name("expression")

        comment = Regex(r";[^\n]*")

        self.expression = expression
        self.program = ZeroOrMore(expression) + StringEnd()
        self.single_expression = expression + StringEnd()
        self.program.ignore(comment)
        self.single_expression.ignore(comment)

    def _parse(self, element, text: str, filename: str) -> List[CSTNode]:
        self.filename = filename
        try:
            result = element.parse_string(text, parse_all=True)
        except ParseException as e:
            raise UIREParseError.from_parse_exception(e, text, filename) from e
        nodes = list(result)
        if self.debug:
            print(f"Parsed {len(nodes)} form(s) from {filename}")
        return nodes

    def parse_program(self, text: str, filename: str = "<input>") -> List[CSTNode]:
        return self._parse(self.program, text, filename)

    def parse_expression(self, text: str, filename: str = "<input>") -> CSTNode:
        return self._parse(self.single_expression, text, filename)[0]


class UIREParser:
    """Main UIRE parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = UIREGrammar(debug)

    def parse_file(self, filepath: str) -> List[CSTNode]:
        """Parse a UIRE source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise UIREParseError(f"File not found: {filepath}", filename=filepath)
        except UnicodeDecodeError as e:
            raise UIREParseError(f"Cannot decode file {filepath}: {e}", filename=filepath)
        return self.grammar.parse_program(content, filepath)

    def parse_string(self, text: str, filename: str = "<input>") -> List[CSTNode]:
        """Parse UIRE source code from string"""
        return self.grammar.parse_program(text, filename)

    def parse_expression(self, text: str, filename: str = "<input>") -> CSTNode:
        """Parse exactly one UIRE expression"""
        return self.grammar.parse_expression(text, filename)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> UIREParser:
    """Create a UIRE parser"""
    return UIREParser(debug=debug)


def create_debug_parser() -> UIREParser:
    """Create a UIRE parser with debug enabled"""
    return UIREParser(debug=True)


# Utility functions for working with CST
def find_nodes_by_type(cst: CSTNode, node_type: str) -> List[CSTNode]:
    """Find all nodes of a specific type in CST"""
    result = []

    def search(node: CSTNode):
        if node.type == node_type:
            result.append(node)
        for child in node.children:
            search(child)

    search(cst)
    return result


def pretty_print_cst(cst: CSTNode, indent: int = 0) -> str:
    """Pretty print a CST node for debugging"""
    result = "  " * indent + f"{cst.type}"
    if cst.value is not None:
        result += f"({repr(cst.value)})"
    result += "\n"

    for child in cst.children:
        result += pretty_print_cst(child, indent + 1)

    return result
