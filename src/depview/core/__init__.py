"""
Core data structures and graph construction.

- types: GraphNode, geometry primitives, asset metadata
- index: corpus-wide reverse dependency index
- graph / builder: bounded bidirectional dependency graph
- session: composition used by hosts and the CLI
"""
