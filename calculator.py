"""
Calculator Engine for Calcpad
Accumulates keypad input into an expression and evaluates it
"""
import enum
import logging

import config
import evaluator
from evaluator import EvaluationError, ExpressionSyntaxError

logger = logging.getLogger("calcpad.calculator")

DIGITS = "0123456789."
BRACKETS = "()"


class CalculatorState(enum.Enum):
    """
    Input state of the accumulator.

    ==================  ==========================================
    IDLE                empty buffer (start, after AC)
    EDITING             last input was an operand, bracket or edit
    AWAITING_OPERAND    last input was a binary operator
    RESULT_DISPLAYED    a successful evaluation is on the display
    ==================  ==========================================

    Transitions:

    ==================  =========  ================  =========  =========================
    from                digit      operator          bracket    evaluate (ok / error)
    ==================  =========  ================  =========  =========================
    IDLE                EDITING    (ignored)         EDITING    - / IDLE
    EDITING             EDITING    AWAITING_OPERAND  EDITING    RESULT_DISPLAYED / EDITING
    AWAITING_OPERAND    EDITING    (ignored)         EDITING    RESULT_DISPLAYED / (stays)
    RESULT_DISPLAYED    EDITING*   AWAITING_OPERAND  EDITING*   RESULT_DISPLAYED / EDITING
    ==================  =========  ================  =========  =========================

    ``*`` the buffer is cleared first. An operator after a result starts from
    the result. ``C`` never changes the state, ``AC`` always returns to IDLE.
    """
    IDLE = "idle"
    EDITING = "editing"
    AWAITING_OPERAND = "awaiting_operand"
    RESULT_DISPLAYED = "result_displayed"


class Calculator:
    def __init__(self, display=None):
        self.display = display
        self.current_expression = ""
        self.state = CalculatorState.IDLE
        self.last_result = None
        self.last_error = None
        self.result_text = config.ZERO_DISPLAY
        self.memory = 0.0

    @property
    def last_input_is_operator(self):
        return self.state is CalculatorState.AWAITING_OPERAND

    @property
    def last_result_displayed(self):
        return self.state is CalculatorState.RESULT_DISPLAYED

    # ── Token input ─────────────────────────────────────────────────────

    def add_digit(self, digit):
        """Add a digit or decimal point to current expression"""
        digit = str(digit)
        if len(digit) != 1 or digit not in DIGITS:
            raise ValueError(f"Not a digit or decimal point: {digit!r}")
        self._start_new_expression_after_result()
        self.current_expression += digit
        self._set_state(CalculatorState.EDITING)
        return self._expression_changed()

    def add_operator(self, operator):
        """Add an operator, ignoring it on an empty buffer or right after another operator"""
        if operator not in evaluator.OPERATOR_ALIASES:
            raise ValueError(f"Not an operator: {operator!r}")
        if not self.current_expression or self.last_input_is_operator:
            logger.debug("Operator %r ignored in state %s", operator, self.state.name)
            return self.current_expression

        if self.last_result_displayed:
            # Continue the computation from the displayed result
            self.current_expression = evaluator.format_number(self.last_result)
        self.current_expression += evaluator.OPERATOR_ALIASES[operator]
        self._set_state(CalculatorState.AWAITING_OPERAND)
        return self._expression_changed()

    def add_bracket(self, bracket):
        """Add an opening or closing parenthesis"""
        if bracket not in BRACKETS or len(bracket) != 1:
            raise ValueError(f"Not a parenthesis: {bracket!r}")
        self._start_new_expression_after_result()
        self.current_expression += bracket
        self._set_state(CalculatorState.EDITING)
        return self._expression_changed()

    # ── Whole-number edits ──────────────────────────────────────────────

    def toggle_sign(self):
        """Negate the current number"""
        return self._rewrite_number(lambda value: -value)

    def apply_percentage(self):
        """Turn the current number into a percentage (divide by 100)"""
        return self._rewrite_number(lambda value: value / 100)

    def _rewrite_number(self, transform):
        if not self.current_expression or self.last_input_is_operator:
            return self.current_expression

        if self.last_result_displayed:
            value = self.last_result
        else:
            try:
                value = evaluator.parse_number(self.current_expression)
            except ExpressionSyntaxError as e:
                self._show_error(e)
                return self.current_expression

        self.current_expression = evaluator.format_number(transform(value))
        self._set_state(CalculatorState.EDITING)
        return self._expression_changed()

    # ── Evaluation ──────────────────────────────────────────────────────

    def evaluate(self):
        """Evaluate the current expression and return the text to display"""
        try:
            result = evaluator.evaluate(self.current_expression)
        except EvaluationError as e:
            if self.last_result_displayed:
                self._set_state(CalculatorState.EDITING)
            self._show_error(e)
            return self.result_text

        self.last_result = result
        self.last_error = None
        self._set_state(CalculatorState.RESULT_DISPLAYED)
        logger.debug("%s = %r", self.current_expression, result)
        return self._result_changed(evaluator.format_result(result))

    # ── Clearing ────────────────────────────────────────────────────────

    def clear(self):
        """Clear current expression (AC)"""
        self.current_expression = ""
        self.last_error = None
        self._set_state(CalculatorState.IDLE)
        self._expression_changed()
        return self._result_changed(config.ZERO_DISPLAY)

    def clear_entry(self):
        """Clear last character (backspace)"""
        if self.current_expression:
            self.current_expression = self.current_expression[:-1]
            self._expression_changed()
        return self.current_expression

    # ── Memory register ─────────────────────────────────────────────────

    def add_to_memory(self):
        """Add the displayed result, or the current number, to memory (M+)"""
        value = self._memory_operand()
        if value is not None:
            self.memory += value
        return self.memory

    def subtract_from_memory(self):
        """Subtract the displayed result, or the current number, from memory (M-)"""
        value = self._memory_operand()
        if value is not None:
            self.memory -= value
        return self.memory

    def recall_memory(self):
        """Insert the memory value where a new operand may start (MR)"""
        fresh_operand = (
            self.state is not CalculatorState.EDITING
            or not self.current_expression
            or self.current_expression.endswith("(")
        )
        if not fresh_operand:
            return self.current_expression
        self._start_new_expression_after_result()
        self.current_expression += evaluator.format_number(self.memory)
        self._set_state(CalculatorState.EDITING)
        return self._expression_changed()

    def clear_memory(self):
        """Clear memory (MC)"""
        self.memory = 0.0

    def _memory_operand(self):
        if self.last_result_displayed:
            return self.last_result
        try:
            return evaluator.parse_number(self.current_expression)
        except ExpressionSyntaxError:
            logger.debug("Memory ignored non-numeric buffer %r", self.current_expression)
            return None

    # ── Keypad dispatch ─────────────────────────────────────────────────

    def press(self, key):
        """Route a keypad label to the matching operation"""
        if key in ("C", "AC", "MC", "MR", "M+", "M-", "=", "±", "%"):
            return {
                "C": self.clear_entry,
                "AC": self.clear,
                "MC": self.clear_memory,
                "MR": self.recall_memory,
                "M+": self.add_to_memory,
                "M-": self.subtract_from_memory,
                "=": self.evaluate,
                "±": self.toggle_sign,
                "%": self.apply_percentage,
            }[key]()
        if key in evaluator.OPERATOR_ALIASES:
            return self.add_operator(key)
        if key in ("(", ")"):
            return self.add_bracket(key)
        if len(key) == 1 and key in DIGITS:
            return self.add_digit(key)
        raise ValueError(f"Unknown key: {key!r}")

    def get_expression(self):
        """Get current expression"""
        return self.current_expression if self.current_expression else config.ZERO_DISPLAY

    def get_result(self):
        """Get the text on the result display"""
        return self.result_text

    # ── Internals ───────────────────────────────────────────────────────

    def _start_new_expression_after_result(self):
        if self.last_result_displayed:
            self.current_expression = ""

    def _set_state(self, state):
        if state is not self.state:
            logger.debug("State %s -> %s", self.state.name, state.name)
            self.state = state

    def _show_error(self, error):
        self.last_error = error
        logger.debug("%s: %s", error.kind, error)
        self._result_changed(config.ERROR_LABEL)

    def _expression_changed(self):
        if self.display is not None:
            self.display.on_expression_changed(self.current_expression)
        return self.current_expression

    def _result_changed(self, text):
        self.result_text = text
        if self.display is not None:
            self.display.on_result_changed(text)
        return text
