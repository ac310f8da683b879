"""
Defaults for sampling, display and rendering.

The x-range and grid size are presentation choices; callers may override
every value here through SamplingOptions or the command line.
"""

import math


# Curve sampling
DEFAULT_NUM_POINTS = 300
MIN_NUM_POINTS = 2
DEFAULT_X_RANGE = (-math.pi, math.pi)
WIDE_X_RANGE = (-1.5 * math.pi, 1.5 * math.pi)

# Display formatting
DISPLAY_DECIMALS = 6
AXIS_LABEL_DECIMALS = 3

# Free variable of every expression the service returns
VARIABLE_NAME = "x"

# Named functions accepted by the parser, with their display markup.
# "factorial" is printed as a postfix "!" rather than a prefix command.
FUNCTION_MARKUP = {
    "sin": r"\sin",
    "cos": r"\cos",
    "tan": r"\tan",
    "sqrt": r"\sqrt",
    "exp": r"\exp",
    "log": r"\ln",
    "factorial": "!",
}

# Named constants, with their display markup. "e" is known to the
# evaluator and printed as a plain identifier; "E" is how sympy writes it.
CONSTANT_MARKUP = {
    "pi": r"\pi",
    "E": "e",
}
