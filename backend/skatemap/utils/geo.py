"""
SkateMap Backend: Coordinate Formatting
=========================================

What:  Plain decimal text for a latitude or longitude.
Note:  str(float) switches to exponent form below 1e-4 ("-5e-05"), which
       Overpass QL rejects and which reads badly in the web list.
"""


def format_coordinate(value: float) -> str:
    """
    Shortest plain-decimal rendering of a coordinate.

    Examples:
        42.0      → "42"
        -85.6681  → "-85.6681"
        -0.00005  → "-0.00005"
    """
    text = repr(float(value))
    if "e" in text:
        # 1e-10 degrees is well under a millimetre
        text = f"{value:.10f}".rstrip("0").rstrip(".")
        return "0" if text in ("", "-0") else text
    if text.endswith(".0"):
        return text[:-2]
    return text
