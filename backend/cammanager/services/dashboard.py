"""
CamManager - Dashboard Summary
Counts shown on the overview page, computed over the caller's visible devices
"""
from collections import Counter
from typing import Dict, List, Optional

from cammanager.models.camera import Camera, Recorder
from cammanager.models.taxonomy import DEFAULT_STATUSES


def summarize(cameras: List[Camera], recorders: List[Recorder], active_status: Optional[str] = None) -> Dict:
    by_status = Counter(c.status or "Unknown" for c in cameras)
    by_location = Counter(c.location or "Unknown" for c in cameras)
    # The leading status is the healthy one; everything else needs attention
    active = by_status.get(active_status or DEFAULT_STATUSES[0], 0)

    return {
        "total_cameras": len(cameras),
        "total_recorders": len(recorders),
        "active_cameras": active,
        "issue_cameras": len(cameras) - active,
        "by_status": [{"name": name, "value": count} for name, count in by_status.items()],
        "by_location": [{"name": name, "count": count} for name, count in by_location.items()],
    }
