"""Layered (Sugiyama-style) layout of relationship graphs.

Phases:
  1. Cycle breaking (reverse DFS back-edges)
  2. Rank assignment (longest path, then tightened towards successors)
  3. Dummy nodes for edges spanning more than one rank
  4. Crossing reduction (barycenter sweeps)
  5. Coordinate assignment (nodes centred over their neighbours)

followed by relationship-aware post-processing: partners are pulled onto
the same rank and set side by side.
"""

import logging
from dataclasses import dataclass

import networkx as nx

from graph import build_layout_graph
from models import LayoutResult, Person, Position, Relationship


logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    node_width: float = 220
    node_height: float = 100
    node_sep: float = 100  # spacing between nodes of the same rank
    edge_sep: float = 10  # spacing between dummy nodes of long edges
    rank_sep: float = 140  # spacing between ranks
    margin_x: float = 50
    margin_y: float = 50
    order_sweeps: int = 24
    coordinate_passes: int = 4
    partner_min_gap: float = 40  # cross-axis gap below which partners are recentred
    partner_gap: float = 30  # extra half-gap used when recentring partners


DEFAULT_CONFIG = LayoutConfig()


# ============================================================================
# 1) Cycle breaking
# ============================================================================


def break_cycles(H: nx.DiGraph) -> nx.DiGraph:
    """
    Return an acyclic copy of `H` with DFS back-edges reversed.

    In a depth-first traversal every tree, forward and cross edge u -> v has
    post[u] > post[v]; back-edges are exactly the ones where that fails.
    """
    post = {node: i for i, node in enumerate(nx.dfs_postorder_nodes(H))}

    dag = nx.DiGraph()
    dag.add_nodes_from(H.nodes)
    for u, v in H.edges():
        if u == v:
            continue
        if post[u] > post[v]:
            dag.add_edge(u, v)
        else:
            logger.debug("Reversing back-edge %s -> %s", u, v)
            dag.add_edge(v, u)
    return dag


# ============================================================================
# 2) Rank assignment
# ============================================================================


def assign_ranks(dag: nx.DiGraph) -> dict:
    """
    Assign each node a rank so that every edge points to a higher rank.

    Longest-path ranking puts every source on rank 0; nodes that have
    successors are then pulled down next to their closest successor so
    that, e.g., a parent who married into a family sits one rank above the
    child instead of at the top of the drawing.
    """
    order = list(nx.topological_sort(dag))

    rank: dict = {}
    for node in order:
        preds = list(dag.predecessors(node))
        rank[node] = max(rank[p] + 1 for p in preds) if preds else 0

    for node in reversed(order):
        succs = list(dag.successors(node))
        if succs:
            rank[node] = max(rank[node], min(rank[s] for s in succs) - 1)

    if rank:
        lowest = min(rank.values())
        rank = {node: r - lowest for node, r in rank.items()}
    return rank


# ============================================================================
# 3) Dummy nodes
# ============================================================================


def insert_dummy_nodes(dag: nx.DiGraph, rank: dict) -> tuple[nx.DiGraph, dict]:
    """
    Split edges spanning several ranks into chains of dummy nodes.

    Dummy nodes are keyed by tuples ("dummy", edge_index, step), which can
    never collide with person ids (always strings).
    """
    aug = nx.DiGraph()
    aug.add_nodes_from(dag.nodes)
    ranks = dict(rank)

    for index, (u, v) in enumerate(dag.edges()):
        span = ranks[v] - ranks[u]
        prev = u
        for step in range(1, span):
            dummy = ("dummy", index, step)
            aug.add_node(dummy, dummy=True)
            ranks[dummy] = ranks[u] + step
            aug.add_edge(prev, dummy)
            prev = dummy
        aug.add_edge(prev, v)

    return aug, ranks


def is_dummy(node) -> bool:
    return isinstance(node, tuple)


# ============================================================================
# 4) Crossing reduction
# ============================================================================


def initial_ordering(aug: nx.DiGraph, ranks: dict) -> list[list]:
    """Group nodes by rank in depth-first discovery order."""
    layer_count = max(ranks.values()) + 1
    layers: list[list] = [[] for _ in range(layer_count)]
    for node in nx.dfs_preorder_nodes(aug):
        layers[ranks[node]].append(node)
    return layers


def count_crossings(layers: list[list], aug: nx.DiGraph) -> int:
    """Count edge crossings between consecutive ranks."""
    total = 0
    for upper, lower in zip(layers, layers[1:]):
        lower_pos = {node: i for i, node in enumerate(lower)}
        edges = [
            (i, lower_pos[succ])
            for i, node in enumerate(upper)
            for succ in aug.successors(node)
            if succ in lower_pos
        ]
        for a in range(len(edges)):
            for b in range(a + 1, len(edges)):
                (u1, v1), (u2, v2) = edges[a], edges[b]
                if (u1 - u2) * (v1 - v2) < 0:
                    total += 1
    return total


def _reorder(layer: list, neighbors_of, neighbor_pos: dict) -> list:
    """
    Sort a rank by the barycenter of each node's neighbours.

    Nodes with no neighbours in the adjacent rank keep their slot.
    """
    sortable = []
    fixed: dict[int, object] = {}
    for i, node in enumerate(layer):
        positions = [neighbor_pos[n] for n in neighbors_of(node) if n in neighbor_pos]
        if positions:
            sortable.append((sum(positions) / len(positions), i, node))
        else:
            fixed[i] = node

    sortable.sort(key=lambda item: (item[0], item[1]))
    moving = iter(node for _, _, node in sortable)
    return [fixed[i] if i in fixed else next(moving) for i in range(len(layer))]


def minimise_crossings(aug: nx.DiGraph, layers: list[list], sweeps: int) -> list[list]:
    """Alternate top-down and bottom-up barycenter sweeps, keeping the best ordering."""
    best = [list(layer) for layer in layers]
    best_crossings = count_crossings(best, aug)
    current = [list(layer) for layer in layers]

    for sweep in range(sweeps):
        if best_crossings == 0:
            break
        if sweep % 2 == 0:
            for i in range(1, len(current)):
                pos = {node: j for j, node in enumerate(current[i - 1])}
                current[i] = _reorder(current[i], aug.predecessors, pos)
        else:
            for i in range(len(current) - 2, -1, -1):
                pos = {node: j for j, node in enumerate(current[i + 1])}
                current[i] = _reorder(current[i], aug.successors, pos)

        crossings = count_crossings(current, aug)
        if crossings < best_crossings:
            best = [list(layer) for layer in current]
            best_crossings = crossings

    return best


# ============================================================================
# 5) Coordinate assignment
# ============================================================================


def _isotonic_pack(desired: list[float], gaps: list[float]) -> list[float]:
    """
    Closest positions (least squares) to `desired` that keep rank order and
    minimum gaps, via pool-adjacent-violators on gap-adjusted targets.
    """
    offsets = []
    acc = 0.0
    for gap in gaps:
        acc += gap
        offsets.append(acc)

    blocks: list[list[float]] = []  # [sum, count]
    for d, c in zip(desired, offsets):
        blocks.append([d - c, 1])
        while len(blocks) > 1 and blocks[-2][0] / blocks[-2][1] > blocks[-1][0] / blocks[-1][1]:
            total, count = blocks.pop()
            blocks[-1][0] += total
            blocks[-1][1] += count

    z: list[float] = []
    for total, count in blocks:
        z.extend([total / count] * int(count))
    return [zi + c for zi, c in zip(z, offsets)]


def assign_cross_coordinates(
    aug: nx.DiGraph, layers: list[list], cross_extent: float, config: LayoutConfig
) -> dict:
    """Assign cross-axis centre coordinates, rank by rank."""

    def extent(node) -> float:
        return 0.0 if is_dummy(node) else cross_extent

    def separation(a, b) -> float:
        if is_dummy(a) and is_dummy(b):
            sep = config.edge_sep
        elif is_dummy(a) or is_dummy(b):
            sep = (config.node_sep + config.edge_sep) / 2
        else:
            sep = config.node_sep
        return extent(a) / 2 + sep + extent(b) / 2

    gaps = [[0.0] + [separation(a, b) for a, b in zip(layer, layer[1:])] for layer in layers]

    coord: dict = {}
    for layer, layer_gaps in zip(layers, gaps):
        coord.update(zip(layer, _isotonic_pack([0.0] * len(layer), layer_gaps)))

    def relax(indices, neighbors_of):
        for i in indices:
            desired = []
            for node in layers[i]:
                xs = [coord[n] for n in neighbors_of(node)]
                desired.append(sum(xs) / len(xs) if xs else coord[node])
            coord.update(zip(layers[i], _isotonic_pack(desired, gaps[i])))

    for _ in range(config.coordinate_passes):
        relax(range(1, len(layers)), aug.predecessors)
        relax(range(len(layers) - 2, -1, -1), aug.successors)

    return coord


# ============================================================================
# Public entry point
# ============================================================================


def compute_layout(
    persons: list[Person],
    relationships: list[Relationship],
    orientation: str = "vertical",
    project_type: str = "familyTree",
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """
    Compute top-left node positions for every person.

    Args:
        persons: People to place; each gets exactly one position
        relationships: Relationships; edges with unknown endpoints are ignored
        orientation: "vertical" (ancestors above) or "horizontal" (ancestors left)
        project_type: "familyTree" ranks on parent-child edges and co-locates
            partners; "friendCluster" ranks on every edge, always left-to-right
        config: Node size and spacing; defaults to DEFAULT_CONFIG

    Returns:
        A LayoutResult mapping person id -> Position (top-left corner)
    """
    config = config or DEFAULT_CONFIG
    if not persons:
        return LayoutResult()

    left_to_right = project_type == "friendCluster" or orientation == "horizontal"
    if left_to_right:
        rank_extent, cross_extent = config.node_width, config.node_height
        rank_margin, cross_margin = config.margin_x, config.margin_y
    else:
        rank_extent, cross_extent = config.node_height, config.node_width
        rank_margin, cross_margin = config.margin_y, config.margin_x

    H = build_layout_graph(persons, relationships, project_type)
    dag = break_cycles(H)
    rank = assign_ranks(dag)
    aug, ranks = insert_dummy_nodes(dag, rank)
    layers = minimise_crossings(aug, initial_ordering(aug, ranks), config.order_sweeps)
    cross = assign_cross_coordinates(aug, layers, cross_extent, config)

    real_nodes = [n for n in aug.nodes if not is_dummy(n)]
    shift = cross_margin + cross_extent / 2 - min(cross[n] for n in real_nodes)

    positions: dict[str, Position] = {}
    for p in persons:
        if p.id in positions:
            continue
        rank_center = rank_margin + rank[p.id] * (rank_extent + config.rank_sep) + rank_extent / 2
        cross_center = cross[p.id] + shift
        if left_to_right:
            cx, cy = rank_center, cross_center
        else:
            cx, cy = cross_center, rank_center
        positions[p.id] = Position(
            x=cx - config.node_width / 2,
            y=cy - config.node_height / 2,
        )

    if project_type == "familyTree":
        align_partners(positions, relationships, left_to_right, config)

    logger.debug(
        "Laid out %d persons on %d ranks (%d ranking edges)",
        len(positions),
        len(layers),
        H.number_of_edges(),
    )
    return LayoutResult(node_positions=positions)


def align_partners(
    positions: dict[str, Position],
    relationships: list[Relationship],
    left_to_right: bool,
    config: LayoutConfig,
) -> None:
    """
    Put both partners of each partner relationship on the same rank, side by side.

    Runs once per partner relationship in input order; a person in several
    partnerships is moved by each of them in turn, so chains of partners can
    still overlap.
    """
    rank_axis, cross_axis = ("x", "y") if left_to_right else ("y", "x")
    min_separation = config.node_width + config.partner_min_gap
    half_offset = config.node_width / 2 + config.partner_gap

    for rel in relationships:
        if rel.type != "partner":
            continue
        a = positions.get(rel.from_id)
        b = positions.get(rel.to_id)
        if a is None or b is None:
            continue

        shared = min(getattr(a, rank_axis), getattr(b, rank_axis))
        setattr(a, rank_axis, shared)
        setattr(b, rank_axis, shared)

        a_cross, b_cross = getattr(a, cross_axis), getattr(b, cross_axis)
        if abs(a_cross - b_cross) < min_separation:
            mid = (a_cross + b_cross) / 2
            setattr(a, cross_axis, mid - half_offset)
            setattr(b, cross_axis, mid + half_offset)
