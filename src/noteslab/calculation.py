# SPDX-License-Identifier: GPL-3.0-or-later

import ast
import math
import operator

ALLOWED_CHARS = set('0123456789.+-*/() ')
INCOMPLETE_ENDINGS = '+-*/.'
MAX_RESULT_CHARS = 15

PENDING = '...'
INVALID = '?'

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def _eval_node(node):
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        return _BINARY_OPS[type(node.op)](_eval_node(node.left), _eval_node(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise ValueError(f'Unsupported expression: {ast.dump(node)}')


def format_number(value) -> str:
    text = f'{value:,.4f}'.rstrip('0').rstrip('.')
    if text == '-0':
        text = '0'
    return text[:MAX_RESULT_CHARS]


def evaluate(expression) -> str:
    """Evaluate a calculation block's arithmetic expression for display.

    Returns '...' while the expression is empty or still being typed and
    '?' when it cannot be evaluated.
    """
    expression = expression.strip()
    if not expression:
        return PENDING

    if not set(expression) <= ALLOWED_CHARS:
        return INVALID

    if expression[-1] in INCOMPLETE_ENDINGS:
        return PENDING

    try:
        tree = ast.parse(expression, mode='eval')
        value = float(_eval_node(tree))
    except (SyntaxError, ValueError, ZeroDivisionError, OverflowError):
        return INVALID

    if not math.isfinite(value):
        return INVALID
    return format_number(value)
