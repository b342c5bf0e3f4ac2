from .connectivity import is_connected_edges, connected_components_edges

__all__ = [
    "is_connected_edges",
    "connected_components_edges",
]
