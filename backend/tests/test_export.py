from __future__ import annotations

import csv
import io
from datetime import date

from cammanager.services.export import BOM, cameras_to_csv, export_filename, recorders_to_csv

from conftest import make_camera, make_recorder


def _rows(content: str):
    assert content.startswith(BOM)
    return list(csv.reader(io.StringIO(content[len(BOM):])))


def test_filename() -> None:
    assert export_filename("cameras", date(2025, 3, 9)) == "cammanager_cameras_2025-03-09.csv"


def test_cameras_csv(inventory) -> None:
    rec = make_recorder(inventory, "NVR 1", "10.0.0.100")
    make_camera(inventory, "Door, front", "10.0.0.1", recorder_id=rec.id, install_date="2024-02-01", note="Near the lift")
    make_camera(inventory, "Roof", "10.0.0.2")

    rows = _rows(cameras_to_csv(inventory.devices.cameras(), inventory.devices.recorder_name))

    assert rows[0] == ["ID", "Name", "IP", "Type", "Recorder", "Location", "Install Date", "Status", "Note"]
    assert rows[1][1:] == ["Door, front", "10.0.0.1", "Dome", "NVR 1", "HQ", "2024-02-01", "Active", "Near the lift"]
    assert rows[2][4] == "Unknown"
    assert rows[2][8] == ""


def test_recorders_csv(inventory) -> None:
    make_recorder(inventory, "NVR 1", "10.0.0.100", port=8000, hdd_capacity="4TB")
    make_recorder(inventory, "NVR 2", "10.0.0.101")

    rows = _rows(recorders_to_csv(inventory.devices.recorders()))

    assert rows[0] == ["ID", "Name", "IP", "Port", "HDD", "Location", "Note"]
    assert rows[1][1:] == ["NVR 1", "10.0.0.100", "8000", "4TB", "HQ", ""]
    assert rows[2][4] == "N/A"
