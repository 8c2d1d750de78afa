"""
Formula format conversion modules.
"""

from .json_codec import FormulaJSONConverter, NodePayload

__all__ = ["FormulaJSONConverter", "NodePayload"]
