#!/usr/bin/env python3
"""
Keypad Calculator: engine

- Immediate-execution keypad: digits, decimal point, + − × ÷ ^ mod %, '='
- Chained operations (5 + 3 + 2 = 10), operator replacement (+ then − keeps one)
- Scientific: sin/cos/tan (deg or rad), ln, log, sqrt, square, cube, factorial, pi, e
- Tokenized history trail ("2 + 3 = 5") and a session tape of finished trails
- One keyboard dispatch table shared by every front end

Math never raises
- x ÷ 0 gives 0
- Domain errors (ln(-1), sqrt(-4), (-1)!, 2.5!) give nan / inf, shown as text
- Parentheses are text only; they are never grouped or evaluated

Known limitations
- The display grows without bound; no digit limit
- factorial(n) is O(n) for very large n
"""

from __future__ import annotations

import logging
import math
import os
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple

log = logging.getLogger(__name__)

# ============================= Core Engine ==================================

EQUALS = "="
DIGITS = frozenset("0123456789")

KEY_OPERATORS: Dict[str, str] = {
    "+": "+", "-": "-", "*": "×", "/": "÷", "^": "^", "%": "%",
    "Enter": EQUALS, "=": EQUALS,
}
CLEAR_KEYS = frozenset({"Escape", "c", "C"})
PAREN_KEYS = frozenset({"(", ")"})

class CalculationError(ValueError): pass

def is_int_like(x: float, tol: float = 0.0) -> bool:
    if not math.isfinite(x): return False
    n = round(x); return abs(x - n) <= tol

_NUMBER_PREFIX = re.compile(
    r"\s*[+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.IGNORECASE)

def parse_number(text: str) -> float:
    """Leading numeric prefix of ``text`` as a float; nan when there is none."""
    m = _NUMBER_PREFIX.match(text)
    return float(m.group()) if m else math.nan

def unclosed_parens(s: str) -> int:
    opens = 0
    for ch in s:
        if ch == "(": opens += 1
        elif ch == ")" and opens > 0: opens -= 1
    return opens

# ---- Binary operators

def _is_odd_integer(x: float) -> bool:
    return is_int_like(x) and x % 2 == 1

def _divide(a: float, b: float) -> float:
    if b == 0: return 0.0
    return a / b

def _power(a: float, b: float) -> float:
    if a == 0 and b < 0:
        return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
    if math.isnan(b): return math.nan
    if abs(a) == 1 and math.isinf(b): return math.nan
    try:
        return math.pow(a, b)
    except OverflowError:
        return -math.inf if a < 0 and _is_odd_integer(b) else math.inf
    except ValueError:
        return math.nan

def _remainder(a: float, b: float) -> float:
    if b == 0: return math.nan
    # sign follows the divisor, except a finite a against an infinite b stays a
    if math.isinf(b) and math.isfinite(a): return a
    return a % b

_BINARY_OPS: Dict[str, Callable[[float, float], float]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "×": lambda a, b: a * b,
    "÷": _divide,
    "^": _power,
    "mod": _remainder,
    "%": lambda a, b: (a * b) / 100,
}

def calculate(a: float, b: float, op: str) -> float:
    """Apply binary operator ``op``; an unknown operator returns ``b``."""
    fn = _BINARY_OPS.get(op)
    if fn is None: return b
    return fn(a, b)

def factorial(n: float) -> float:
    if n < 0 or not is_int_like(n): return math.nan
    result = 1.0
    for k in range(2, int(n) + 1):
        result *= k
        if math.isinf(result): break
    return result

# ---- Settings

@dataclass
class Settings:
    angle_mode: str = "deg"            # "deg" or "rad"
    precision: Optional[int] = None    # None: shortest round-trip repr
    def validate(self) -> None:
        if self.angle_mode not in {"deg", "rad"}:
            raise ValueError("angle_mode must be 'deg' or 'rad'")
        if self.precision is not None and not (1 <= int(self.precision) <= 17):
            raise ValueError("precision must be 1..17")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from CALC_ANGLE_MODE / CALC_PRECISION."""
        env = os.environ if environ is None else environ
        s = cls(angle_mode=env.get("CALC_ANGLE_MODE", "deg").strip().lower())
        raw = env.get("CALC_PRECISION", "").strip()
        if raw:
            try: s.precision = int(raw)
            except ValueError: raise ValueError(f"CALC_PRECISION must be an integer, got {raw!r}") from None
        s.validate(); return s

@dataclass
class ViewSettings:
    """Presentation flags; the engine never reads these."""
    theme: str = "light"               # "light" or "dark"
    scientific_panel: bool = False
    def toggle_theme(self) -> str:
        self.theme = "dark" if self.theme == "light" else "light"; return self.theme
    def toggle_scientific(self) -> bool:
        self.scientific_panel = not self.scientific_panel; return self.scientific_panel

# ---- History trail

OPERAND, OPERATOR, EQUALS_SIGN, RESULT, CALL = "operand", "operator", "equals", "result", "call"

class Token(NamedTuple):
    kind: str
    text: str

@dataclass
class History:
    tokens: List[Token] = field(default_factory=list)

    def render(self) -> str: return " ".join(t.text for t in self.tokens)
    def clear(self) -> None: self.tokens = []
    def start(self, operand: str) -> None: self.tokens = [Token(OPERAND, operand)]
    def running(self, result: str) -> None: self.tokens = [Token(RESULT, result)]

    def push_operator(self, op: str) -> None:
        # consecutive operator presses overwrite the pending one
        self.drop_trailing_operator()
        self.tokens.append(Token(OPERATOR, op))

    def drop_trailing_operator(self) -> None:
        if self.tokens and self.tokens[-1].kind == OPERATOR: self.tokens.pop()

    def complete(self, left: str, op: str, operand: str, result: str) -> None:
        # rebuilt from the values actually combined; a function trail may sit in between
        self.tokens = [Token(OPERAND, left), Token(OPERATOR, op), Token(OPERAND, operand),
                       Token(EQUALS_SIGN, EQUALS), Token(RESULT, result)]

    def call(self, name: str, arg: str, result: str) -> None:
        self.tokens = [Token(CALL, f"{name}({arg})"), Token(EQUALS_SIGN, EQUALS), Token(RESULT, result)]

# ---- Engine

@dataclass
class EngineState:
    display: str = "0"
    previous_value: Optional[float] = None
    pending_operator: Optional[str] = None
    awaiting_new_operand: bool = False
    history: History = field(default_factory=History)
    tape: List[str] = field(default_factory=list)

class CalculatorEngine:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings(); self.settings.validate()
        self.state = EngineState()

    # Read accessors
    @property
    def display(self) -> str: return self.state.display
    @property
    def history_text(self) -> str: return self.state.history.render()
    @property
    def previous_value(self) -> Optional[float]: return self.state.previous_value
    @property
    def pending_operator(self) -> Optional[str]: return self.state.pending_operator
    @property
    def has_pending_operator(self) -> bool: return self.state.pending_operator is not None
    @property
    def awaiting_new_operand(self) -> bool: return self.state.awaiting_new_operand
    @property
    def tape(self) -> Tuple[str, ...]: return tuple(self.state.tape)

    def format_number(self, x: float) -> str:
        xf = float(x)
        if math.isnan(xf):  return "nan"
        if math.isinf(xf):  return "inf" if xf > 0 else "-inf"
        if is_int_like(xf) and abs(xf) < 1e16: return str(int(xf))
        n = self.settings.precision
        return repr(xf) if n is None else f"{xf:.{int(n)}g}"

    def build_functions(self) -> Dict[str, Callable[[float], float]]:
        deg = self.settings.angle_mode == "deg"

        def _to_rad(x: float) -> float: return x * math.pi / 180 if deg else x

        def _trig(fn: Callable[[float], float]) -> Callable[[float], float]:
            def apply(x: float) -> float:
                if not math.isfinite(x): return math.nan
                return fn(_to_rad(x))
            return apply

        def _log(fn: Callable[[float], float]) -> Callable[[float], float]:
            def apply(x: float) -> float:
                if x == 0: return -math.inf
                if not x > 0: return math.nan
                return fn(x)
            return apply

        def sqrt(x: float) -> float:
            if x < 0: return math.nan
            return math.sqrt(x)

        def square(x: float) -> float: return x * x
        def cube(x: float) -> float: return x * x * x

        return {
            "sin": _trig(math.sin), "cos": _trig(math.cos), "tan": _trig(math.tan),
            "ln": _log(math.log), "log": _log(math.log10),
            "sqrt": sqrt, "square": square, "cube": cube, "factorial": factorial,
            "pi": lambda _x: math.pi, "e": lambda _x: math.e,
        }

    def _note_sentinel(self, label: str, value: float) -> None:
        if not math.isfinite(value):
            log.warning("%s produced %s", label, self.format_number(value))

    # ----------------------------- Entry -----------------------------------
    def enter_digit(self, digit: str) -> str:
        if digit not in DIGITS: raise CalculationError(f"Not a digit: {digit!r}.")
        s = self.state
        if s.awaiting_new_operand:
            s.display = digit; s.awaiting_new_operand = False
        else:
            s.display = digit if s.display == "0" else s.display + digit
        log.debug("digit %s -> display %s", digit, s.display)
        return s.display

    def enter_decimal_point(self) -> str:
        s = self.state
        if s.awaiting_new_operand:
            s.display = "0."; s.awaiting_new_operand = False
        elif "." not in s.display:
            s.display += "."
        return s.display

    def enter_parenthesis(self) -> str:
        """Append '(' or ')' as plain text; no grouping is ever evaluated."""
        s = self.state
        if s.awaiting_new_operand or s.display == "0":
            s.display = "("; s.awaiting_new_operand = False
        elif unclosed_parens(s.display) > 0 and not s.display.endswith("("):
            s.display += ")"
        else:
            s.display += "("
        return s.display

    def clear(self) -> str:
        self.state = EngineState()
        log.debug("cleared")
        return self.state.display

    # ----------------------------- Operations ------------------------------
    def apply_operator(self, next_operator: str) -> str:
        s = self.state
        input_value = parse_number(s.display)
        operand = self.format_number(input_value)

        if s.previous_value is None:
            s.previous_value = input_value
            s.history.start(operand)
        elif s.pending_operator is not None and not s.awaiting_new_operand:
            left = self.format_number(s.previous_value)
            result = calculate(s.previous_value, input_value, s.pending_operator)
            self._note_sentinel(f"{left} {s.pending_operator} {operand}", result)
            s.display = self.format_number(result)
            s.previous_value = result
            if next_operator == EQUALS:
                s.history.complete(left, s.pending_operator, operand, s.display)
                s.tape.append(s.history.render())
                log.info("computed %s", s.history.render())
            else:
                s.history.running(s.display)

        if next_operator != EQUALS:
            s.pending_operator = next_operator
            s.awaiting_new_operand = True
            s.history.push_operator(next_operator)
        else:
            s.history.drop_trailing_operator()
            s.pending_operator = None
            s.previous_value = None
            s.awaiting_new_operand = True
        log.debug("operator %s -> display %s, trail %r", next_operator, s.display, s.history.render())
        return s.display

    def apply_scientific_function(self, name: str) -> str:
        func = self.build_functions().get(name)
        if func is None: raise CalculationError(f"Unknown function: {name}.")
        s = self.state
        value = parse_number(s.display)
        result = func(value)
        self._note_sentinel(f"{name}({self.format_number(value)})", result)
        s.display = self.format_number(result)
        s.history.call(name, self.format_number(value), s.display)
        s.tape.append(s.history.render())
        s.awaiting_new_operand = True
        log.info("computed %s", s.history.render())
        return s.display

    def handle_key_input(self, key: str) -> Optional[str]:
        """Route a key name to its operation; None when the key is not bound."""
        if key in DIGITS:         return self.enter_digit(key)
        if key == ".":            return self.enter_decimal_point()
        if key in KEY_OPERATORS:  return self.apply_operator(KEY_OPERATORS[key])
        if key in CLEAR_KEYS:     return self.clear()
        if key in PAREN_KEYS:     return self.enter_parenthesis()
        log.debug("unbound key %r", key)
        return None

# ============================= Logging ======================================

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the 'calculator' logger once; level from CALC_LOG_LEVEL by default."""
    level_name = (level or os.getenv("CALC_LOG_LEVEL", "INFO")).upper()
    lvl = getattr(logging, level_name, logging.INFO)
    if not isinstance(lvl, int): lvl = logging.INFO

    logger = logging.getLogger("calculator")
    logger.setLevel(lvl)
    if logger.handlers: return logger

    sh = logging.StreamHandler()
    sh.setLevel(lvl); sh.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(sh)
    return logger
