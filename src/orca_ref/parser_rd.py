"""
Recursive Descent Parser for Orca

Structure:
- Token stream: pulled one token at a time from `lexer.TokenStream`
- Statements: plain recursive descent with one token of lookahead
- Expressions: precedence climbing over the binary operators

Disambiguation needing the token after the current one:
- IDENT "="  -> assignment, otherwise the identifier starts an expression
- IDENT "("  -> function call, otherwise a variable reference

`func`, `return`, `if` and `else` are ordinary identifiers to the lexer and
are recognized here by position.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .lexer import TokenStream
from .token_types import TT, Tok
from .tree import (
    Assignment,
    BinaryExpression,
    BinaryOp,
    CallArgument,
    Expression,
    FunctionCall,
    FunctionDefinition,
    IfStatement,
    NumberLiteral,
    Program,
    ReturnStatement,
    Statement,
    UnaryExpression,
    VariableReference,
)

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )

# Binding power inside the climbing loop; anything missing here is 0 and
# therefore never continues an expression.
PRECEDENCE: Dict[TT, int] = {
    TT.CARET: 5,
    TT.STAR: 3,
    TT.SLASH: 3,
    TT.PLUS: 2,
    TT.MINUS: 2,
}

# Floor for the operand of prefix '-': looser than '^', tighter than the rest.
UNARY_PRECEDENCE = 4

ARITHMETIC_OPS: Dict[TT, BinaryOp] = {
    TT.PLUS: BinaryOp.ADD,
    TT.MINUS: BinaryOp.SUB,
    TT.STAR: BinaryOp.MUL,
    TT.SLASH: BinaryOp.DIV,
    TT.CARET: BinaryOp.POW,
}

COMPARE_OPS: Dict[TT, BinaryOp] = {
    TT.EQ: BinaryOp.EQ,
    TT.GT: BinaryOp.GT,
    TT.LT: BinaryOp.LT,
    TT.GTE: BinaryOp.GTE,
    TT.LTE: BinaryOp.LTE,
}

KW_FUNC = 'func'
KW_RETURN = 'return'
KW_IF = 'if'
KW_ELSE = 'else'


class Parser:
    """
    Recursive descent parser for Orca.

    Expression precedence (lowest to highest):
    1. add (+, -)            left-assoc
    2. mul (*, /)            left-assoc
    3. unary (-)             operand parsed with floor 4
    4. pow (^)               right-assoc
    5. primary (numbers, identifiers, calls, parens, return)

    Comparisons sit outside this table: only an `if` condition accepts one,
    joining two full expressions.
    """

    def __init__(self, stream: TokenStream):
        self.stream = stream
        self.current = stream.next_token()

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look past the current token without consuming"""
        return self.stream.peek(offset)

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        if prev.type is not TT.EOF:
            self.current = self.stream.next_token()
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def check_keyword(self, word: str) -> bool:
        return self.current.type is TT.IDENT and self.current.value == word

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {self.current.type.name}"
            raise ParseError(msg, self.current)
        return self.advance()

    def skip_newlines(self) -> None:
        while self.match(TT.NEWLINE):
            pass

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Program:
        """Parse entire program"""
        start = self.current
        statements = self.parse_statement_list()

        if not self.check(TT.EOF):
            raise ParseError(f"Unexpected {self.current.type.name} at top level", self.current)

        return Program(tuple(statements), line=start.line, column=start.column)

    def parse_statement_list(self) -> List[Statement]:
        """
        Parse statements up to EOF or a closing brace.

        Statements are separated by NEWLINE; the last one before '}' or EOF
        needs no separator.
        """
        statements: List[Statement] = []
        self.skip_newlines()

        while not self.check(TT.EOF, TT.RBRACE):
            statements.append(self.parse_statement())

            if self.check(TT.EOF, TT.RBRACE):
                break

            self.expect(TT.NEWLINE, f"Expected end of statement, got {self.current.type.name}")
            self.skip_newlines()

        return statements

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Statement:
        """
        Parse a single statement:
        - Assignment (IDENT followed by '=')
        - Function definition (func)
        - If statement (if)
        - Expression
        """
        if self.check(TT.IDENT) and self.peek().type is TT.ASSIGN:
            return self.parse_assignment()
        if self.check_keyword(KW_FUNC):
            return self.parse_function_definition()
        if self.check_keyword(KW_IF):
            return self.parse_if_stmt()

        return self.parse_expr()

    def parse_assignment(self) -> Assignment:
        """Parse assignment: IDENT = expr"""
        name = self.expect(TT.IDENT)
        self.expect(TT.ASSIGN)
        value = self.parse_expr()
        return Assignment(name.value, value, line=name.line, column=name.column)

    def parse_function_definition(self) -> FunctionDefinition:
        """Parse function definition: func name(params) { NEWLINE stmts }"""
        func_tok = self.advance()
        name = self.expect(TT.IDENT, f"Expected function name, got {self.current.type.name}")

        self.expect(TT.LPAR)
        params = self.parse_param_list()
        self.expect(TT.RPAR)

        body = self.parse_block()
        return FunctionDefinition(
            name.value, params, body, line=func_tok.line, column=func_tok.column
        )

    def parse_if_stmt(self) -> IfStatement:
        """
        Parse if statement:
        if cond { NEWLINE stmts } [else { NEWLINE stmts }]
        """
        if_tok = self.advance()
        condition = self.parse_condition()
        consequence = self.parse_block()

        alternative = None
        if self.check_keyword(KW_ELSE):
            self.advance()
            alternative = self.parse_block()

        return IfStatement(
            condition, consequence, alternative, line=if_tok.line, column=if_tok.column
        )

    def parse_block(self) -> Tuple[Statement, ...]:
        """Parse brace block; the opening brace must end its line"""
        self.expect(TT.LBRACE)
        self.expect(TT.NEWLINE, f"Expected NEWLINE after '{{', got {self.current.type.name}")
        statements = self.parse_statement_list()
        self.expect(TT.RBRACE, f"Expected '}}' to close block, got {self.current.type.name}")
        return tuple(statements)

    def parse_condition(self) -> Expression:
        """Parse if condition: expr [compareop expr]"""
        left = self.parse_expr()

        if self.current.type in COMPARE_OPS:
            op_tok = self.advance()
            right = self.parse_expr()
            return BinaryExpression(
                left, COMPARE_OPS[op_tok.type], right, line=op_tok.line, column=op_tok.column
            )

        return left

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self, precedence: int = 0) -> Expression:
        """
        Precedence climbing: keep folding infix operators while they bind
        tighter than `precedence`.
        """
        left = self.parse_prefix()

        while precedence < PRECEDENCE.get(self.current.type, 0):
            left = self.parse_infix(left)

        return left

    def parse_infix(self, left: Expression) -> Expression:
        op_tok = self.advance()
        op_prec = PRECEDENCE[op_tok.type]

        # '^' recurses one level lower so a following '^' binds to the right.
        floor = op_prec - 1 if op_tok.type is TT.CARET else op_prec
        right = self.parse_expr(floor)

        return BinaryExpression(
            left, ARITHMETIC_OPS[op_tok.type], right, line=op_tok.line, column=op_tok.column
        )

    def parse_prefix(self) -> Expression:
        """
        Parse prefix position:
        ( expr ) | - expr | return expr | IDENT ( args ) | IDENT | NUMBER
        """
        tok = self.current

        if self.match(TT.LPAR):
            expr = self.parse_expr()
            self.expect(TT.RPAR, f"Expected ')' to close group, got {self.current.type.name}")
            return expr

        if self.match(TT.MINUS):
            operand = self.parse_expr(UNARY_PRECEDENCE)
            return UnaryExpression(operand, line=tok.line, column=tok.column)

        if self.check(TT.IDENT):
            if tok.value == KW_RETURN:
                self.advance()
                return ReturnStatement(self.parse_expr(), line=tok.line, column=tok.column)

            if self.peek().type is TT.LPAR:
                return self.parse_call()

            self.advance()
            return VariableReference(tok.value, line=tok.line, column=tok.column)

        if self.check(TT.NUMBER):
            return self.parse_number()

        if self.check(TT.EOF):
            raise ParseError("Unexpected end of input in expression", tok)

        raise ParseError(f"Unexpected token in expression: {tok.type.name}", tok)

    def parse_number(self) -> NumberLiteral:
        tok = self.expect(TT.NUMBER)
        return NumberLiteral(float(tok.value), line=tok.line, column=tok.column)

    def parse_call(self) -> FunctionCall:
        """Parse function call: IDENT ( args )"""
        name = self.expect(TT.IDENT)
        self.expect(TT.LPAR)
        args = self.parse_arg_list()
        self.expect(TT.RPAR, f"Expected ')' to close argument list, got {self.current.type.name}")
        return FunctionCall(name.value, args, line=name.line, column=name.column)

    # ========================================================================
    # Helper Parsers
    # ========================================================================

    def parse_param_list(self) -> Tuple[str, ...]:
        """Parse function parameter list: (IDENT (, IDENT)*)?"""
        params: List[str] = []

        if self.check(TT.RPAR):
            return ()

        while True:
            param = self.expect(TT.IDENT, f"Expected parameter name, got {self.current.type.name}")
            params.append(param.value)

            if not self.match(TT.COMMA):
                break

        return tuple(params)

    def parse_arg_list(self) -> Tuple[CallArgument, ...]:
        """
        Parse call arguments. Only literals and bare names are accepted;
        names are resolved by the evaluator at call time.
        """
        args: List[CallArgument] = []

        if self.check(TT.RPAR):
            return ()

        while True:
            tok = self.current

            if self.check(TT.IDENT):
                self.advance()
                args.append(VariableReference(tok.value, line=tok.line, column=tok.column))
            elif self.check(TT.NUMBER):
                args.append(self.parse_number())
            else:
                raise ParseError(
                    f"Expected identifier or number as argument, got {tok.type.name}", tok
                )

            if not self.match(TT.COMMA):
                break

        return tuple(args)


def parse(tokens: Iterable[Tok]) -> Program:
    """Parse an already tokenized program"""
    stream = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)
    return Parser(stream).parse()


def parse_source(source: str) -> Program:
    """Tokenize and parse Orca source code"""
    return Parser(TokenStream.from_source(source)).parse()
