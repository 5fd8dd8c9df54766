"""Geometry for the dashboard's SVG donut charts.

Each segment is drawn as a stroked circle: the dash length is the segment's
share of the circumference and the offset rotates it past the segments
drawn before it.
"""
import math

DEFAULT_RADIUS = 60


def pie_segments(counts, radius=DEFAULT_RADIUS):
    """
    Turn an ordered mapping of label -> count into drawable segments.

    Returns a list of dicts with label, count, percentage, dasharray and
    dashoffset. Percentages are 0 for every segment when the total is 0.
    """
    circumference = 2 * math.pi * radius
    total = sum(counts.values())

    segments = []
    cumulative = 0.0
    for label, count in counts.items():
        percentage = (count / total) * 100 if total > 0 else 0.0
        length = (percentage / 100) * circumference
        segments.append({
            'label': label,
            'count': count,
            'percentage': round(percentage, 2),
            'dasharray': f"{length} {circumference}",
            'dashoffset': -((cumulative / 100) * circumference),
        })
        cumulative += percentage
    return segments
