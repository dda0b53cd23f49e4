# pool_sim/domain/errors.py


class UnknownNodeError(KeyError):
    """A graph, fleet or demand operation referenced a node id that does not exist."""

    def __init__(self, node_id):
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"unknown node {self.node_id!r}"


class DuplicateNodeError(ValueError):
    def __init__(self, node_id):
        super().__init__(f"node {node_id!r} already exists")
        self.node_id = node_id
