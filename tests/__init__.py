"""
Olympic Games Evolution Test Suite

Unit tests for the layout toolkit (scales, pies, force layout, legend
filter, sketchy scenes), the dataset loader, and the section builders.

Run tests with:
    pytest tests/
    pytest tests/test_force_layout.py -v
    pytest tests/test_scales.py::TestBandScale -v
"""

__version__ = "0.1.0"
