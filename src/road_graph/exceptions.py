class NodeNotFoundError(KeyError):
    def __init__(self, node_ref: object):
        super().__init__(node_ref)

        self.node_ref = node_ref

    def __str__(self) -> str:
        return f"Node {self.node_ref} not found in the road graph."


class FrozenRoadGraphError(RuntimeError):
    def __init__(self) -> None:
        super().__init__("Road graph is frozen and can't be modified.")


class EdgeNotFoundError(KeyError):
    def __init__(self, source: object, target: object):
        super().__init__(source, target)

        self.source = source
        self.target = target

    def __str__(self) -> str:
        return f"Edge {self.source} -> {self.target} not found in the road graph."
