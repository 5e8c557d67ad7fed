import math


def clip(value: float, minimum: float, maximum: float) -> float:
    """Clip a value to the range [minimum, maximum]."""
    return max(minimum, min(value, maximum))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf (0.5 -> 1)."""
    return int(math.floor(value + 0.5))


def format_percentage(value: float, maximum: float, significant_figures: int = 2) -> str:
    """
    Format value/maximum as a percentage with the given significant figures.

    Examples:
        - format_percentage(100, 1023) -> '9.8%'
        - format_percentage(1023, 1023) -> '100%'
    """
    if maximum == 0 or value == 0:
        return "0%"
    percent = 100.0 * value / maximum
    magnitude = int(math.floor(math.log10(abs(percent))))
    decimals = max(significant_figures - magnitude - 1, 0)
    return f"{round(percent, decimals):.{decimals}f}%"
