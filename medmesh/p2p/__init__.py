"""
MedMesh P2P (Peer-to-Peer) Layer

Neighbor bookkeeping and dispatch for nodes of a mobile care network.

Components:
- Neighbors: Per-round neighbor table with mark-and-sweep expiry
- Selection: Trust-tiered choice of a delegate neighbor
- Attending: Pending attending calls keyed by peer address
- Discovery: Periodic discovery round driver
- Node: Composition of the above for one node
"""
