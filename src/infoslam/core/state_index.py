# Copyright (c) 2025.
# This file is part of infoslam, released under the MIT License.
"""
Lazy NodeId -> state-coordinate allocation.

The state index maps every node a session has seen to a disjoint block of
``k`` contiguous coordinates in the information store. Blocks are handed
out in first-seen order:

    anchor   -> [0, k)
    2nd node -> [k, 2k)
    ...

Allocating a block for a previously unseen node grows the paired
`InformationStore` by ``k`` so that the store dimension always equals the
sum of all registered block sizes.

Connectivity
------------
The index also tracks which nodes are linked, directly or through other
nodes, to the anchor. Ω is invertible exactly when every node is: each
component without the anchor contributes a constant null vector per
coordinate. `unanchored_nodes` reports the ones that are not.

Lifecycle
---------
The index is *Uninitialized* until `register_anchor` succeeds, and
*Ready* afterwards. `register_anchor` may only run once; `resolve` may only
run once Ready.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional

import jax.numpy as jnp

from .errors import DoubleInitializationError, NotInitializedError
from .information import InformationStore
from .types import IndexBlock, NodeId

logger = logging.getLogger(__name__)


class StateIndex:
    """Injective mapping from node ids to coordinate blocks of one store."""

    def __init__(self, dimension: int, store: InformationStore) -> None:
        self.dimension = dimension
        self.store = store
        self._blocks: Dict[NodeId, IndexBlock] = {}
        self._order: List[NodeId] = []
        # Union-find forest over node ids.
        self._parent: Dict[NodeId, NodeId] = {}
        self._anchor: Optional[NodeId] = None

    @property
    def is_initialized(self) -> bool:
        return bool(self._blocks)

    @property
    def node_ids(self) -> List[NodeId]:
        return list(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, node_id) -> bool:
        return node_id in self._blocks

    def items(self):
        return ((nid, self._blocks[nid]) for nid in self._order)

    def block(self, node_id: NodeId) -> IndexBlock:
        """Return the block of a known node; ``KeyError`` if never seen."""
        return self._blocks[node_id]

    def register_anchor(self, node_id: NodeId, value: jnp.ndarray) -> IndexBlock:
        """
        Bind the first block ``[0, k)`` to ``node_id`` and seed the store
        with the anchor prior (Ω = I, ξ = value).
        """
        if self.is_initialized:
            raise DoubleInitializationError(
                "state already anchored; the reference frame cannot be re-fixed"
            )

        blk = IndexBlock(start=0, dim=self.dimension)
        self.store.seed(value)
        self._bind(node_id, blk)
        self._anchor = node_id
        logger.debug("anchored node %s at block %s", node_id, blk)
        return blk

    def resolve(self, node_id: NodeId) -> IndexBlock:
        """
        Return the block of ``node_id``, allocating ``[n, n+k)`` and growing
        the store if the node has not been seen before.
        """
        if not self.is_initialized:
            raise NotInitializedError(
                "no anchor registered; there is no reference frame to extend"
            )

        blk = self._blocks.get(node_id)
        if blk is not None:
            return blk

        blk = IndexBlock(start=self.store.size, dim=self.dimension)
        self.store.expand(self.dimension)
        self._bind(node_id, blk)
        logger.debug("allocated node %s at block %s", node_id, blk)
        return blk

    def link(self, id1: NodeId, id2: NodeId) -> None:
        """Record that a constraint relates two registered nodes."""
        r1 = self._find(id1)
        r2 = self._find(id2)
        if r1 != r2:
            self._parent[r2] = r1

    def unanchored_nodes(self) -> List[NodeId]:
        """Registered nodes with no chain of constraints back to the anchor."""
        if self._anchor is None:
            return []
        root = self._find(self._anchor)
        return [nid for nid in self._order if self._find(nid) != root]

    def _find(self, node_id: NodeId) -> NodeId:
        root = node_id
        while self._parent[root] != root:
            root = self._parent[root]
        # Path compression
        while self._parent[node_id] != root:
            nxt = self._parent[node_id]
            self._parent[node_id] = root
            node_id = nxt
        return root

    def _bind(self, node_id: NodeId, blk: IndexBlock) -> None:
        self._blocks[node_id] = blk
        self._order.append(node_id)
        self._parent[node_id] = node_id
