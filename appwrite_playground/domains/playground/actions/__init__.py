"""
Playground actions, one module per UI section.

Each module exposes SECTION and register(registry, ctx); catalog.build_registry
wires them in display order.
"""
