"""
Chiffre Programming Language Parser
pyparsing grammar for the expression language, producing CST tuples
that semantics.py lowers to the expression tree
"""

from typing import Any, Tuple

from pyparsing import (
    Forward, Keyword, Literal, MatchFirst, OneOrMore, OpAssoc, Optional as PyParsingOptional,
    ParseBaseException, ParserElement, QuotedString, Regex, StringEnd, Suppress,
    infix_notation, one_of
)

from error_handling import ChiffreParseError

# Enable packrat parsing for performance
ParserElement.enable_packrat()


KEYWORDS = ("let", "rec", "in", "if", "then", "else", "true", "false")


# ============================================================================
# PARSE ACTIONS
# ============================================================================

def make_application(tokens) -> Tuple:
    """f a b -> ("APPLICATION", [f, a, b]); a lone atom passes through"""
    if len(tokens) == 1:
        return tokens[0]
    return ("APPLICATION", list(tokens))


def make_operation(tokens) -> Tuple:
    """Fold a [a, op, b, op, c] group to the left"""
    items = tokens[0]
    result = items[0]
    for i in range(1, len(items), 2):
        result = ("OPERATION", {"left": result, "op": items[i], "right": items[i + 1]})
    return result


def make_type(tokens) -> Tuple:
    if len(tokens) == 2:
        return ("TYPE_ARROW", {"arg": tokens[0], "result": tokens[1]})
    return tokens[0]


def make_lambda(tokens) -> Tuple:
    return ("LAMBDA", {
        "binder": tokens[0],
        "type_annotation": tokens[1] if len(tokens) == 3 else None,
        "body": tokens[-1]
    })


def make_let(tokens) -> Tuple:
    recursive = len(tokens) == 4
    offset = 1 if recursive else 0
    return ("LET", {
        "recursive": recursive,
        "binder": tokens[offset],
        "expr": tokens[offset + 1],
        "body": tokens[offset + 2]
    })


def make_if(tokens) -> Tuple:
    return ("IF", {
        "condition": tokens[0],
        "then_branch": tokens[1],
        "else_branch": tokens[2]
    })


# ============================================================================
# GRAMMAR
# ============================================================================

class ChiffreGrammar:
    """Chiffre grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        # Forward declarations for recursive structures
        expression = Forward()
        type_expr = Forward()

        # Keywords
        let_kw = Keyword("let")
        rec_kw = Keyword("rec")
        in_kw = Keyword("in")
        if_kw = Keyword("if")
        then_kw = Keyword("then")
        else_kw = Keyword("else")
        lambda_kw = Literal("\\") | Literal("λ")
        any_keyword = MatchFirst([Keyword(k) for k in KEYWORDS])

        # Identifiers exclude keywords
        identifier_base = Regex(r"[A-Za-z_][A-Za-z0-9_']*")
        binding_identifier = ~any_keyword + identifier_base.copy()
        value_identifier = (~any_keyword + identifier_base.copy()).set_parse_action(
            lambda t: ("IDENTIFIER", t[0]))

        # Literals
        number = Regex(r"\d+").set_parse_action(lambda t: ("INT", int(t[0])))
        boolean = (Keyword("true") | Keyword("false")).set_parse_action(
            lambda t: ("BOOL", t[0] == "true"))
        string_literal = QuotedString('"', esc_char='\\').set_parse_action(
            lambda t: ("STRING", t[0]))

        # Type annotations: Int, Int -> Bool, (Int -> Int) -> Int
        type_name = identifier_base.copy().set_parse_action(lambda t: ("TYPE_NAME", t[0]))
        type_atom = type_name | (Suppress("(") + type_expr + Suppress(")"))
        type_expr <<= (type_atom + PyParsingOptional(Suppress("->") + type_expr)).set_parse_action(make_type)

        # Atoms and application by juxtaposition
        parenthesized = (Suppress("(") + expression + Suppress(")")).set_parse_action(
            lambda t: ("PARENTHESIZED", t[0]))
        atom = number | boolean | string_literal | value_identifier | parenthesized
        application = OneOrMore(atom).set_parse_action(make_application)

        # Binary operators, tightest binding first, all left associative
        binary = infix_notation(application, [
            (one_of("* / %"), 2, OpAssoc.LEFT, make_operation),
            (one_of("+ -"), 2, OpAssoc.LEFT, make_operation),
            (Literal("#"), 2, OpAssoc.LEFT, make_operation),
            (one_of("< >"), 2, OpAssoc.LEFT, make_operation),
            (Literal("=="), 2, OpAssoc.LEFT, make_operation),
        ])

        # Prefix forms extend as far to the right as possible
        lambda_expr = (
            Suppress(lambda_kw) + binding_identifier +
            PyParsingOptional(Suppress(":") + type_expr) +
            Suppress("=>") + expression
        ).set_parse_action(make_lambda)

        let_expr = (
            Suppress(let_kw) + PyParsingOptional(rec_kw) + binding_identifier +
            Suppress("=") + expression + Suppress(in_kw) + expression
        ).set_parse_action(make_let)

        if_expr = (
            Suppress(if_kw) + expression +
            Suppress(then_kw) + expression +
            Suppress(else_kw) + expression
        ).set_parse_action(make_if)

        expression <<= lambda_expr | let_expr | if_expr | binary

        program = expression + StringEnd()
        program.ignore(Regex(r"--[^\n]*"))

        self.expression = expression
        self.type_expr = type_expr
        self.program = program

    def parse_expression(self, text: str) -> Tuple:
        """Parse a complete program text into one CST tuple"""
        try:
            return self.program.parse_string(text, parse_all=True)[0]
        except ParseBaseException as e:
            raise ChiffreParseError.from_parse_exception(e, text) from e


class ChiffreParser:
    """Main Chiffre parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = ChiffreGrammar(debug)

    def parse_file(self, filepath: str) -> Tuple:
        """Parse a Chiffre source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ChiffreParseError(f"File not found: {filepath}")
        except UnicodeDecodeError as e:
            raise ChiffreParseError(f"Cannot decode file {filepath}: {e}")
        return self.parse_string(content, filepath)

    def parse_string(self, text: str, filename: str = "<input>") -> Tuple:
        """Parse Chiffre source code from string"""
        if self.debug:
            print(f"Parsing {filename} ({len(text)} characters)")
        cst = self.grammar.parse_expression(text)
        if self.debug:
            print(pretty_print_cst(cst))
        return cst

    # A program is a single expression
    parse_expression = parse_string


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> ChiffreParser:
    """Create a Chiffre parser"""
    return ChiffreParser(debug=debug)


# ============================================================================
# CST UTILITIES
# ============================================================================

def _cst_children(value: Any):
    if isinstance(value, tuple):
        yield value
    elif isinstance(value, list):
        for item in value:
            yield from _cst_children(item)
    elif isinstance(value, dict):
        for item in value.values():
            yield from _cst_children(item)


def pretty_print_cst(cst: Tuple, indent: int = 0) -> str:
    """Pretty print a CST tuple for debugging"""
    node_type, value = cst
    children = list(_cst_children(value))
    result = "  " * indent + node_type
    if not children:
        result += f"({value!r})"
    elif isinstance(value, dict):
        scalars = {k: v for k, v in value.items()
                   if not isinstance(v, (tuple, list, dict)) and v is not None}
        if scalars:
            result += f"({', '.join(f'{k}={v!r}' for k, v in scalars.items())})"
    result += "\n"

    for child in children:
        result += pretty_print_cst(child, indent + 1)

    return result
