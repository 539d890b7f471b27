"""
Geometry kernel

Pure functions over points, polygons and axis-aligned rectangles used by the
occlusion resolver, the quantity aggregator and the drawing preview logic.
Coordinates are canvas pixels; conversion to meters happens at the callers.

Overlap and containment tests use strict inequalities, so rectangles that
only share an edge do not overlap. Degenerate input (fewer than three
vertices, zero-size rectangles) yields zero results and never raises.
"""

import math
from typing import List, Optional, Sequence, Callable

from .models import Point, Rect


def polygon_area(points: Sequence[Point]) -> float:
    """Shoelace area, always non-negative"""
    n = len(points)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y
    return abs(area / 2)


def polygon_perimeter(points: Sequence[Point]) -> float:
    """Sum of edge lengths, the sequence is treated as cyclic"""
    n = len(points)
    total = 0.0
    for i in range(n):
        j = (i + 1) % n
        total += math.hypot(points[j].x - points[i].x, points[j].y - points[i].y)
    return total


def polygon_bounds(points: Sequence[Point]) -> Rect:
    """Axis-aligned bounding box; zero rect for fewer than 2 points"""
    if len(points) < 2:
        return Rect(x=0.0, y=0.0, width=0.0, height=0.0)
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    min_x, min_y = min(xs), min(ys)
    return Rect(x=min_x, y=min_y, width=max(xs) - min_x, height=max(ys) - min_y)


def segment_length(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)


def rect_perimeter(rect: Rect) -> float:
    r = rect.normalized()
    return 2 * (r.width + r.height)


def rect_from_corners(x1: float, y1: float, x2: float, y2: float) -> Rect:
    """Rectangle spanned by a drag from (x1, y1) to (x2, y2)"""
    return Rect(x=x1, y=y1, width=x2 - x1, height=y2 - y1).normalized()


# ============================================================================
# RECTANGLE BOOLEANS
# ============================================================================

def rect_intersection(a: Rect, b: Rect) -> Optional[Rect]:
    """Overlap of two rectangles, None when they only touch or are disjoint"""
    a = a.normalized()
    b = b.normalized()
    x = max(a.x, b.x)
    y = max(a.y, b.y)
    w = min(a.right, b.right) - x
    h = min(a.bottom, b.bottom) - y
    if w <= 0 or h <= 0:
        return None
    return Rect(x=x, y=y, width=w, height=h)


def subtract_rect(subject: Rect, clip: Rect) -> List[Rect]:
    """
    Split ``subject`` minus ``clip`` into non-overlapping rectangles

    Pieces are emitted in the order top, bottom, left, right. Top and bottom
    strips span the full subject width; left and right strips are clamped to
    the rows of the intersection. Chained subtraction relies on this exact
    decomposition.

    Returns: [subject] when the two do not overlap, [] when clip covers it
    """
    subject = subject.normalized()
    inter = rect_intersection(subject, clip)
    if inter is None:
        return [subject]

    pieces: List[Rect] = []

    if inter.y > subject.y:
        pieces.append(Rect(
            x=subject.x, y=subject.y,
            width=subject.width, height=inter.y - subject.y,
        ))
    if inter.bottom < subject.bottom:
        pieces.append(Rect(
            x=subject.x, y=inter.bottom,
            width=subject.width, height=subject.bottom - inter.bottom,
        ))
    if inter.x > subject.x:
        pieces.append(Rect(
            x=subject.x, y=inter.y,
            width=inter.x - subject.x, height=inter.height,
        ))
    if inter.right < subject.right:
        pieces.append(Rect(
            x=inter.right, y=inter.y,
            width=subject.right - inter.right, height=inter.height,
        ))

    return pieces


def subtract_many(rects: Sequence[Rect], clip: Rect) -> List[Rect]:
    """Subtract ``clip`` from every rect, flattening the pieces"""
    out: List[Rect] = []
    for r in rects:
        out.extend(subtract_rect(r, clip))
    return out


def total_area(rects: Sequence[Rect]) -> float:
    return sum(r.width * r.height for r in rects)


# ============================================================================
# POLYGON CLIPPING
# ============================================================================

def _clip_pass(
    points: List[Point],
    inside: Callable[[Point], bool],
    cross: Callable[[Point, Point], Point],
) -> List[Point]:
    """One Sutherland-Hodgman pass against a single half-plane"""
    out: List[Point] = []
    prev = points[-1]
    prev_in = inside(prev)
    for cur in points:
        cur_in = inside(cur)
        if cur_in:
            if not prev_in:
                out.append(cross(prev, cur))
            out.append(cur)
        elif prev_in:
            out.append(cross(prev, cur))
        prev, prev_in = cur, cur_in
    return out


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def _cross_vertical(edge_x: float, lo: float, hi: float) -> Callable[[Point, Point], Point]:
    def cross(p: Point, q: Point) -> Point:
        t = (edge_x - p.x) / (q.x - p.x)
        # keep the interpolated point on the rect edge despite rounding
        return Point(x=edge_x, y=_clamp(p.y + (q.y - p.y) * t, lo, hi))
    return cross


def _cross_horizontal(edge_y: float, lo: float, hi: float) -> Callable[[Point, Point], Point]:
    def cross(p: Point, q: Point) -> Point:
        t = (edge_y - p.y) / (q.y - p.y)
        return Point(x=_clamp(p.x + (q.x - p.x) * t, lo, hi), y=edge_y)
    return cross


def clip_polygon_to_rect(polygon: Sequence[Point], rect: Rect) -> List[Point]:
    """
    Sutherland-Hodgman clip of a polygon against an axis-aligned rectangle

    Clips against the left, right, top and bottom half-planes in that order.
    Returns an empty list as soon as fewer than 3 vertices survive a pass.
    """
    r = rect.normalized()
    left, right, top, bottom = r.x, r.right, r.y, r.bottom

    # Horizontal edges run after the vertical ones, so x is already inside
    # [left, right] there and clamping only absorbs rounding.
    inf = math.inf
    passes = [
        (lambda p: p.x >= left, _cross_vertical(left, -inf, inf)),
        (lambda p: p.x <= right, _cross_vertical(right, -inf, inf)),
        (lambda p: p.y >= top, _cross_horizontal(top, left, right)),
        (lambda p: p.y <= bottom, _cross_horizontal(bottom, left, right)),
    ]

    points = list(polygon)
    if len(points) < 3:
        return []
    for inside, cross in passes:
        points = _clip_pass(points, inside, cross)
        if len(points) < 3:
            return []
    return points


def polygon_rect_intersection_area(polygon: Sequence[Point], rect: Rect) -> float:
    """Area of the part of ``polygon`` lying inside ``rect``"""
    clipped = clip_polygon_to_rect(polygon, rect.normalized())
    if len(clipped) < 3:
        return 0.0
    return polygon_area(clipped)


# ============================================================================
# CONTAINMENT
# ============================================================================

def is_point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """Ray casting test; points exactly on an edge may go either way"""
    n = len(polygon)
    if n < 3:
        return False
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        if (yi > point.y) != (yj > point.y):
            x_cross = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < x_cross:
                inside = not inside
        j = i
    return inside


def is_rect_in_polygon(rect: Rect, polygon: Sequence[Point]) -> bool:
    """
    True when all four corners test inside the polygon

    Not a full coverage test for concave outlines: an edge of the polygon may
    still cut through the rectangle between two inside corners.
    """
    return all(is_point_in_polygon(c, polygon) for c in rect.normalized().corners())
