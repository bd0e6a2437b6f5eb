import pytest

from monkey.ast import (
    BlockStatement, BooleanLiteral, CallExpression, ExpressionStatement,
    FunctionLiteral, Identifier, IfExpression, InfixExpression,
    IntegerLiteral, LetStatement, PrefixExpression, ReturnStatement,
)
from monkey.lexer import Lexer
from monkey.parser import ParseError, Parser, parse_program


def single_expression(source):
    program = parse_program(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def test_let_and_return_statements():
    program = parse_program("""
let x = 5;
let y = 10;
let foobar = 838383;
return 123;
return xyz;
""")
    assert len(program.statements) == 5
    for stmt, name in zip(program.statements[:3], ['x', 'y', 'foobar']):
        assert isinstance(stmt, LetStatement)
        assert stmt.name == Identifier(name)
    assert program.statements[0].value == IntegerLiteral(5)
    assert program.statements[3] == ReturnStatement(IntegerLiteral(123))
    assert program.statements[4] == ReturnStatement(Identifier('xyz'))


def test_bare_return():
    program = parse_program('return; return')
    assert program.statements == (ReturnStatement(None), ReturnStatement(None))


def test_malformed_let_statements_report_every_error():
    parser = Parser(Lexer("""
            let x 5;
            let = 10;
            let 123;
            """))
    with pytest.raises(ParseError) as excinfo:
        parser.parse()
    errors = excinfo.value.errors
    assert len(errors) == 3
    assert parser.errors == errors
    assert errors[0].startswith('expected next token to be ASSIGN, got INT instead')
    assert errors[1].startswith('expected next token to be IDENT, got ASSIGN instead')
    assert errors[2].startswith('expected next token to be IDENT, got INT instead')


def test_error_messages_carry_positions():
    with pytest.raises(ParseError) as excinfo:
        parse_program('let x 5;')
    assert excinfo.value.errors == ['expected next token to be ASSIGN, got INT instead at 1:7']


def test_parser_resumes_after_a_bad_statement():
    with pytest.raises(ParseError) as excinfo:
        parse_program('let a = 1; let = 2; let b 3; a + ;')
    assert len(excinfo.value.errors) == 3
    assert 'no prefix parse function for SEMICOLON found' in excinfo.value.errors[2]


def test_missing_prefix_rule_is_reported():
    with pytest.raises(ParseError) as excinfo:
        parse_program('* 5')
    assert len(excinfo.value.errors) == 1
    assert excinfo.value.errors[0].startswith('no prefix parse function for ASTERISK found')


def test_illegal_token_is_a_syntax_error():
    with pytest.raises(ParseError) as excinfo:
        parse_program('let a = 5 @ 3;')
    assert any('ILLEGAL' in e for e in excinfo.value.errors)


def test_integer_literal_out_of_range():
    with pytest.raises(ParseError) as excinfo:
        parse_program('let big = 9223372036854775808;')
    assert excinfo.value.errors[0].startswith('could not parse 9223372036854775808 as integer')
    program = parse_program('9223372036854775807')
    assert program.statements[0].expression == IntegerLiteral(2 ** 63 - 1)


def test_errors_inside_blocks_do_not_swallow_the_block():
    with pytest.raises(ParseError) as excinfo:
        parse_program('if (true) { let = 1; 2 } let y = ;')
    assert len(excinfo.value.errors) == 2


def test_identifier_and_literals():
    assert single_expression('foobar;') == Identifier('foobar')
    assert single_expression('5;') == IntegerLiteral(5)
    assert single_expression('true') == BooleanLiteral(True)
    assert single_expression('false;') == BooleanLiteral(False)


@pytest.mark.parametrize('source, operator, operand', [
    ('!5;', '!', IntegerLiteral(5)),
    ('-15;', '-', IntegerLiteral(15)),
    ('!true;', '!', BooleanLiteral(True)),
    ('-a', '-', Identifier('a')),
])
def test_prefix_expressions(source, operator, operand):
    assert single_expression(source) == PrefixExpression(operator, operand)


@pytest.mark.parametrize('operator', ['+', '-', '*', '/', '>', '<', '==', '!='])
def test_infix_expressions(operator):
    expr = single_expression(f'5 {operator} 6;')
    assert expr == InfixExpression(IntegerLiteral(5), operator, IntegerLiteral(6))


@pytest.mark.parametrize('source, expected', [
    ('-a * b', '((-a) * b)'),
    ('!-a', '(!(-a))'),
    ('a + b + c', '((a + b) + c)'),
    ('a + b - c', '((a + b) - c)'),
    ('a * b * c', '((a * b) * c)'),
    ('a * b / c', '((a * b) / c)'),
    ('a + b / c', '(a + (b / c))'),
    ('a + b * c + d / e - f', '(((a + (b * c)) + (d / e)) - f)'),
    ('3 + 4; -5 * 5', '(3 + 4)((-5) * 5)'),
    ('5 > 4 == 3 < 4', '((5 > 4) == (3 < 4))'),
    ('5 < 4 != 3 > 4', '((5 < 4) != (3 > 4))'),
    ('3 + 4 * 5 == 3 * 1 + 4 * 5', '((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))'),
    ('true', 'true'),
    ('3 > 5 == false', '((3 > 5) == false)'),
    ('3 < 5 == true', '((3 < 5) == true)'),
    ('1 + (2 + 3) + 4', '((1 + (2 + 3)) + 4)'),
    ('(5 + 5) * 2', '((5 + 5) * 2)'),
    ('2 / (5 + 5)', '(2 / (5 + 5))'),
    ('-(5 + 5)', '(-(5 + 5))'),
    ('!(true == true)', '(!(true == true))'),
    ('a + add(b * c) + d', '((a + add((b * c))) + d)'),
    ('add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))', 'add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))'),
    ('add(a + b + c * d / f + g)', 'add((((a + b) + ((c * d) / f)) + g))'),
    ('-a(b)', '(-a(b))'),
    ('a -b', '(a - b)'),
])
def test_operator_precedence_display(source, expected):
    assert str(parse_program(source)) == expected


def test_unclosed_group_fails():
    with pytest.raises(ParseError) as excinfo:
        parse_program('(1 + 2')
    assert excinfo.value.errors[0].startswith('expected next token to be RPAREN, got EOF instead')


def test_if_expression():
    expr = single_expression('if (x < y) { x }')
    assert isinstance(expr, IfExpression)
    assert expr.condition == InfixExpression(Identifier('x'), '<', Identifier('y'))
    assert expr.consequence == BlockStatement((ExpressionStatement(Identifier('x')),))
    assert expr.alternative is None
    assert str(expr) == 'if (x < y) x'


def test_if_else_expression():
    expr = single_expression('if (x < y) { x } else { y; }')
    assert expr.alternative == BlockStatement((ExpressionStatement(Identifier('y')),))
    assert str(expr) == 'if (x < y) x else y'


def test_if_requires_parenthesized_condition():
    with pytest.raises(ParseError) as excinfo:
        parse_program('if x { 1 }')
    assert excinfo.value.errors[0].startswith('expected next token to be LPAREN, got IDENT instead')


def test_block_may_run_to_end_of_input():
    expr = single_expression('if (true) { 1; 2')
    assert len(expr.consequence.statements) == 2


def test_nested_blocks_with_return():
    expr = single_expression('if (10 > 1) { if (10 > 1) { return 10; } return 1; }')
    inner, ret = expr.consequence.statements
    assert isinstance(inner.expression, IfExpression)
    assert ret == ReturnStatement(IntegerLiteral(1))


def test_function_literal():
    expr = single_expression('fn(x, y) { x + y; }')
    assert isinstance(expr, FunctionLiteral)
    assert expr.parameters == (Identifier('x'), Identifier('y'))
    assert expr.body.statements == (
        ExpressionStatement(InfixExpression(Identifier('x'), '+', Identifier('y'))),
    )
    assert str(expr) == 'fn(x, y) (x + y)'


@pytest.mark.parametrize('source, params', [
    ('fn() {};', ()),
    ('fn(x) {};', ('x',)),
    ('fn(x, y, z) {};', ('x', 'y', 'z')),
])
def test_function_parameters(source, params):
    expr = single_expression(source)
    assert tuple(p.value for p in expr.parameters) == params


def test_function_parameters_must_be_identifiers():
    with pytest.raises(ParseError) as excinfo:
        parse_program('fn(1) {}')
    assert excinfo.value.errors[0].startswith('expected next token to be IDENT, got INT instead')


def test_call_expression():
    expr = single_expression('add(1, 2 * 3, 4 + 5);')
    assert isinstance(expr, CallExpression)
    assert expr.function == Identifier('add')
    assert [str(a) for a in expr.arguments] == ['1', '(2 * 3)', '(4 + 5)']


def test_call_on_function_literal():
    expr = single_expression('fn(x) { x }(5)')
    assert isinstance(expr, CallExpression)
    assert isinstance(expr.function, FunctionLiteral)
    assert expr.arguments == (IntegerLiteral(5),)


def test_let_and_return_display():
    program = parse_program('let myVar = anotherVar; return 1 + 2;')
    assert str(program) == 'let myVar = anotherVar;return (1 + 2);'


def test_nodes_are_immutable():
    expr = single_expression('1 + 2')
    with pytest.raises(AttributeError):
        expr.operator = '-'
