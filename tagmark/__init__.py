"""
TagMark: highlighting for TODO, FIXME and other tagged comments.

The engine lives in `tagmark.core` and does not depend on Qt:
- TagRegistry builds tag records from configuration
- GrammarResolver maps languages to comment grammars and matchers
- Scanner and TagScanContext find tag ranges in buffer text
"""

__version__ = "1.0.0"
