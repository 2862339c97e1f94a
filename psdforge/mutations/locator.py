"""
Name-based layer lookup.

The traversal lives with the layer models; mutations look layers up
through this module.
"""

from psdforge.layers.document import find_all_layers, find_layer, iter_layers

__all__ = ['find_all_layers', 'find_layer', 'iter_layers']
