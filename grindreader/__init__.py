"""
grindreader: Random-access decoding of preprocessed call-graph profiles.

grindreader reads the indexed binary files written by the profile
preprocessor, enabling you to:
- Look up any function's self and inclusive cost by number
- Walk the callers and callees of a function
- Report costs as percentages, milliseconds, or microseconds

Usage:
    from grindreader.core import Reader

    with Reader("profile.dat", "percent") as reader:
        info = reader.get_function_info(0)
        print(info.function_name, info.summed_self_cost)
"""

__version__ = "0.1.0"
