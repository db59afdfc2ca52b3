"""
Utilities Package.

Shared helpers that are not specific to macro expansion, such as console output.
"""
