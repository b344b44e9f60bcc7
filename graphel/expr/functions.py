from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Callable

import numpy as np


@dataclass(frozen=True)
class FunctionDef:
    name: str
    arity: int
    impl: Callable[..., np.ndarray | float]


FUNCTIONS: dict[str, FunctionDef] = {
    fn.name: fn
    for fn in (
        FunctionDef("sin", 1, np.sin),
        FunctionDef("cos", 1, np.cos),
        FunctionDef("tan", 1, np.tan),
        FunctionDef("asin", 1, np.arcsin),
        FunctionDef("acos", 1, np.arccos),
        FunctionDef("atan", 1, np.arctan),
        FunctionDef("sinh", 1, np.sinh),
        FunctionDef("cosh", 1, np.cosh),
        FunctionDef("tanh", 1, np.tanh),
        FunctionDef("sqrt", 1, np.sqrt),
        FunctionDef("cbrt", 1, np.cbrt),
        FunctionDef("abs", 1, np.abs),
        FunctionDef("exp", 1, np.exp),
        FunctionDef("ln", 1, np.log),
        FunctionDef("log", 1, np.log10),
        FunctionDef("log2", 1, np.log2),
        FunctionDef("log10", 1, np.log10),
        FunctionDef("floor", 1, np.floor),
        FunctionDef("ceil", 1, np.ceil),
        FunctionDef("round", 1, np.round),
        FunctionDef("sign", 1, np.sign),
        FunctionDef("min", 2, np.minimum),
        FunctionDef("max", 2, np.maximum),
        FunctionDef("pow", 2, np.power),
        FunctionDef("atan2", 2, np.arctan2),
    )
}

CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
    "tau": math.tau,
}
