import pytest

from cdash.models import ComplaintRecord


def make_complaint(idx, priority="Low", status="Pending", location="Zone A", category="Roads", lat=None, lng=None, title=None):
    return ComplaintRecord(
        id=str(idx),
        title=title or f"Complaint {idx}",
        location=location,
        category=category,
        priority=priority,
        status=status,
        latitude=lat,
        longitude=lng,
    )


@pytest.fixture
def three_complaints():
    """Zone A has two High complaints (one resolved), Zone B one Low pending."""
    return [
        make_complaint(1, priority="High", status="Pending", location="Zone A", category="Roads", lat=19.07, lng=72.87),
        make_complaint(2, priority="High", status="Resolved", location="Zone A", category="Water"),
        make_complaint(3, priority="Low", status="Pending", location="Zone B", category="Roads", lat=19.10, lng=72.90),
    ]


@pytest.fixture
def mixed_complaints():
    """Snapshot with an unknown status and an unknown priority from upstream."""
    return [
        make_complaint(1, priority="High", status="Pending", category="Roads"),
        make_complaint(2, priority="Medium", status="In Progress", category="Garbage"),
        make_complaint(3, priority="Low", status="Resolved", category="Roads"),
        make_complaint(4, priority="Urgent", status="Resolved", category="Water"),
        make_complaint(5, priority="Low", status="Closed", category="Garbage"),
    ]
