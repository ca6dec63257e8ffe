"""
simulation/format_utils.py

Provides utility functions for parsing and formatting numbers with SI unit prefixes.
"""
import math
import re

# Dictionary of SI prefixes and their multipliers
# Includes common variations like 'u' for 'µ' and 'MEG' for 'M'
SI_PREFIX_MULTIPLIERS = {
    'f': 1e-15,  # Femto
    'p': 1e-12,  # Pico
    'n': 1e-9,   # Nano
    'u': 1e-6,   # Micro
    'µ': 1e-6,   # Micro
    'm': 1e-3,   # Milli
    'k': 1e3,    # Kilo
    'M': 1e6,    # Mega
    'MEG': 1e6,  # Mega (SPICE variant)
    'G': 1e9,    # Giga
    'T': 1e12,   # Tera
}

# For formatting, we iterate to find the best fit
# We sort by value to handle this correctly.
# Using a list of tuples: (multiplier, prefix)
FORMATTING_PREFIXES = sorted(
    [(1e12, 'T'), (1e9, 'G'), (1e6, 'M'), (1e3, 'k'),
     (1, ''), (1e-3, 'm'), (1e-6, 'µ'), (1e-9, 'n'), (1e-12, 'p'), (1e-15, 'f')],
    key=lambda x: x[0], reverse=True
)

# Prefixes used by part property values and by the multimeter screen
POWER_PREFIXES = [
    (1e-12, 'p'), (1e-9, 'n'), (1e-6, 'µ'), (1e-3, 'm'),
    (1, ''), (1e3, 'k'), (1e6, 'M'), (1e9, 'G'), (1e12, 'T'),
]

# Everything except digits, the decimal point and the prefix letters
_NOT_NUMERIC_OR_PREFIX = re.compile(r'[^pnuµmkMGT\d.]')


def parse_value(s: str) -> float:
    """
    Parses a string with an optional SI prefix into a float.
    Examples: "10k" -> 10000.0, "25m" -> 0.025, "10u" -> 1e-5
    """
    if not isinstance(s, str):
        return float(s)

    s = s.strip()

    # Check for SPICE 'MEG' variant first
    if s.upper().endswith('MEG'):
        num_part = s[:-3]
        multiplier = SI_PREFIX_MULTIPLIERS['MEG']
        try:
            return float(num_part) * multiplier
        except ValueError:
            raise ValueError(f"Invalid number format: {s}")

    # Use regex to separate the number from the potential prefix/unit
    match = re.match(r'^([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Zµ]*)', s)
    if not match:
        raise ValueError(f"Invalid number format: {s}")

    num_str, unit_str = match.groups()

    if not unit_str:
        return float(num_str)

    # Find the first character that is a known prefix
    for char in unit_str:
        if char in SI_PREFIX_MULTIPLIERS:
            multiplier = SI_PREFIX_MULTIPLIERS[char]
            return float(num_str) * multiplier

    # If no known prefix is found in the unit string, just return the number
    return float(num_str)


def convert_from_power_prefix(value: str, symbol: str = "") -> float:
    """
    Parses a property value such as "250mW" or "16 V" given its unit symbol.

    With an empty symbol every character other than digits, '.' and the
    prefix letters is dropped first, so "4.5V" still reads as 4.5.
    """
    text = value.strip()
    if symbol:
        if text.endswith(symbol):
            text = text[: -len(symbol)]
    else:
        text = _NOT_NUMERIC_OR_PREFIX.sub('', text)
    text = text.replace(' ', '')
    if not text:
        raise ValueError(f"Invalid number format: {value!r}")
    return parse_value(text)


def convert_to_power_prefix(number: float, decimals: int) -> str:
    """
    Formats a number with a fixed number of decimals and an SI prefix.
    Examples: (5000, 3) -> "5.000k", (0.0125, 2) -> "12.50m"
    """
    decimals = max(decimals, 0)
    if number == 0:
        return f"{0.0:.{decimals}f}"

    magnitude = abs(number)
    for mult, prefix in POWER_PREFIXES:
        if magnitude < 1000 * mult:
            return f"{number / mult:.{decimals}f}{prefix}"

    mult, prefix = POWER_PREFIXES[-1]
    return f"{number / mult:.{decimals}f}{prefix}"


def format_value(value: float, unit: str = "") -> str:
    """
    Formats a float into a string with the most appropriate SI prefix.
    Examples: 0.015 -> "15.00m", 15000 -> "15.00k"
    """
    if value == 0:
        return f"0.00 {unit}"
    if not math.isfinite(value):
        return f"{value} {unit}"

    abs_val = abs(value)

    for mult, prefix in FORMATTING_PREFIXES:
        if abs_val >= mult:
            scaled_val = value / mult
            # Format to 2 decimal places, but avoid trailing ".00" for integers
            if scaled_val == int(scaled_val):
                 return f"{int(scaled_val)} {prefix}{unit}"
            else:
                 return f"{scaled_val:.2f} {prefix}{unit}"

    # If value is smaller than the smallest prefix, use scientific notation
    return f"{value:.2e} {unit}"
