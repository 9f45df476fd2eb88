"""
Presentation math for dependency graphs: layout, viewport, text fitting,
render commands and input handling.
"""
