"""
CamManager - CSV Export
Spreadsheet-friendly dumps of the camera and recorder lists
"""
import csv
import io
from datetime import date
from typing import Callable, Iterable, Optional

from cammanager.models.camera import Camera, Recorder

# Excel needs the byte-order mark to read UTF-8 correctly
BOM = "\ufeff"

CAMERA_COLUMNS = ["ID", "Name", "IP", "Type", "Recorder", "Location", "Install Date", "Status", "Note"]
RECORDER_COLUMNS = ["ID", "Name", "IP", "Port", "HDD", "Location", "Note"]


def export_filename(entity: str, today: Optional[date] = None) -> str:
    """cammanager_<entity>_<YYYY-MM-DD>.csv"""
    return f"cammanager_{entity}_{(today or date.today()).isoformat()}.csv"


def cameras_to_csv(cameras: Iterable[Camera], recorder_name: Callable[[str], str]) -> str:
    buffer = io.StringIO()
    buffer.write(BOM)
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CAMERA_COLUMNS)
    for c in cameras:
        writer.writerow([
            c.id,
            c.name,
            c.ip,
            c.type,
            recorder_name(c.recorder_id),
            c.location,
            c.install_date,
            c.status,
            c.note or "",
        ])
    return buffer.getvalue()


def recorders_to_csv(recorders: Iterable[Recorder]) -> str:
    buffer = io.StringIO()
    buffer.write(BOM)
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(RECORDER_COLUMNS)
    for r in recorders:
        writer.writerow([
            r.id,
            r.name,
            r.ip,
            r.port,
            r.hdd_capacity or "N/A",
            r.location,
            r.note or "",
        ])
    return buffer.getvalue()
