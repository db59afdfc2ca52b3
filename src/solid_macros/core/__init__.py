"""
Core Package.

Contains the backend expansion logic:
- JavaScript front-end (parser, scopes, patcher)
- Macro rules and the marker scanner
- Import handling
- The expansion engine and its tracer
"""
