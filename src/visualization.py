"""
Conflict graph visualization.

Draws the clause conflict graph with nodes coloured by community. Heavier
conflicts get thicker edges on weighted graphs.

Usage from the driver: community-maxsat <cnf_file> --plot communities.png
"""

from typing import Optional, Sequence

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np

from community_detection import community_sizes
from conflict_graph import edge_weight, is_weighted


def plot_communities(graph: nx.Graph, labels: Sequence[int], output: Optional[str] = None,
                     title: Optional[str] = None, seed: int = 42):
    """
    Plot a conflict graph coloured by community.

    Args:
        graph: Conflict graph with vertices 1..N
        labels: Community label per vertex, in ascending vertex order
        output: File to save the figure to; shows it interactively if None
        title: Figure title
        seed: Seed for the spring layout

    Returns:
        The matplotlib Figure
    """
    vertices = sorted(graph.nodes())
    num_communities = max(1, len(community_sizes(labels)))

    fig, ax = plt.subplots(figsize=(10, 8))
    pos = nx.spring_layout(graph, seed=seed)

    colors = plt.cm.tab20(np.linspace(0, 1, num_communities))
    node_colors = [colors[(label - 1) % len(colors)] for label in labels]

    if is_weighted(graph) and graph.number_of_edges() > 0:
        weights = np.array([edge_weight(graph, u, v) for u, v in graph.edges()])
        widths = 0.5 + 2.5 * weights / weights.max()
    else:
        widths = 1.0

    nx.draw_networkx_edges(graph, pos, ax=ax, width=widths, alpha=0.4)
    nx.draw_networkx_nodes(graph, pos, nodelist=vertices, node_color=node_colors,
                           node_size=120, ax=ax)
    if len(vertices) <= 50:
        nx.draw_networkx_labels(graph, pos, ax=ax, font_size=7)

    ax.set_title(title or f"Clause conflict graph: {len(vertices)} clauses, "
                          f"{num_communities} communities")
    ax.axis('off')
    fig.tight_layout()

    if output:
        fig.savefig(output, dpi=150)
        plt.close(fig)
    else:
        plt.show()

    return fig
