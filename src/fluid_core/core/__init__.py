"""
Core Package.

Contains the template evaluation machinery:
- Syntax tree nodes and the view helper invocation node
- Rendering context and template variable container
- Object factory / view helper registry
- Argument value conversion
"""
