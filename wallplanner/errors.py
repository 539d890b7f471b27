"""
Exceptions raised by the wall planner core
"""


class WallPlannerError(Exception):
    """Base class for wall planner failures"""
    pass


class WallEditError(WallPlannerError, IndexError):
    """Vertex index outside the current outline"""
    pass


class ShapeNotFoundError(WallPlannerError, KeyError):
    """No shape with the requested id in the scene"""

    def __init__(self, kind: str, shape_id: str):
        super().__init__(f"{kind} '{shape_id}' not found")
        self.kind = kind
        self.shape_id = shape_id

    def __str__(self) -> str:
        return self.args[0]


class ProductModeError(WallPlannerError, ValueError):
    """Product's counting mode does not fit the shape drawn with it"""

    def __init__(self, product_id: str, counting_mode: str, shape: str):
        super().__init__(
            f"Product '{product_id}' is counted by {counting_mode} and cannot be used for a {shape}"
        )
        self.product_id = product_id
        self.counting_mode = counting_mode
