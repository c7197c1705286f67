"""cellgrid.calc - Formula parsing, dependency tracking and evaluation."""

from cellgrid.calc._evaluator import INVALID_MARKER, GridEvaluator
from cellgrid.calc._functions import PRODUCT, SUM, NumericFold, as_number
from cellgrid.calc._graph import DependencyGraph, evaluation_order, has_dependency_cycle
from cellgrid.calc._parser import (
    FormulaParser,
    dependencies,
    parse_cell_contents,
    parse_number,
    parse_ref,
)
from cellgrid.calc._protocol import CellEngine, EditResult
from cellgrid.calc._terms import (
    CONST,
    INVALID,
    Const,
    ConstArg,
    FormulaTerm,
    Invalid,
    Product,
    Ref,
    RefArg,
    Sum,
)

__all__ = [
    "CONST",
    "CellEngine",
    "Const",
    "ConstArg",
    "DependencyGraph",
    "EditResult",
    "FormulaParser",
    "FormulaTerm",
    "GridEvaluator",
    "INVALID",
    "INVALID_MARKER",
    "Invalid",
    "NumericFold",
    "PRODUCT",
    "Product",
    "Ref",
    "RefArg",
    "SUM",
    "Sum",
    "as_number",
    "dependencies",
    "evaluation_order",
    "has_dependency_cycle",
    "parse_cell_contents",
    "parse_number",
    "parse_ref",
]
