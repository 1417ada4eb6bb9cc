"""
CamManager - Demo Inventory
Recorders and cameras loaded on startup when seed_demo_data is enabled
"""
import logging

from cammanager.models.taxonomy import TaxonomyKind
from cammanager.schemas.camera import CameraSave, RecorderSave
from cammanager.services.inventory import Inventory

logger = logging.getLogger(__name__)

DEMO_RECORDERS = [
    {"id": "rec_1", "name": "Yard", "ip": "192.168.11.236", "port": 236, "location": "Yard", "hdd_capacity": "8TB"},
    {"id": "rec_2", "name": "Gate", "ip": "192.168.11.237", "port": 237, "location": "Gate", "hdd_capacity": "4TB"},
    {"id": "rec_3", "name": "Building", "ip": "192.168.44.150", "port": 80, "location": "Main Building", "hdd_capacity": "10TB"},
    {"id": "rec_4", "name": "Technical Warehouse", "ip": "192.168.11.248", "port": 248, "location": "Technical Warehouse", "hdd_capacity": "6TB"},
    {"id": "rec_5", "name": "Floor 6 - SMD", "ip": "192.168.116.10", "port": 266, "location": "Floor 6", "hdd_capacity": "2TB"},
]

DEMO_CAMERAS = [
    # Gate lanes
    {"id": "cam_1", "name": "Entry Lane 1", "recorder_id": "rec_2", "ip": "192.168.11.237:1", "location": "Entry Lane 1", "install_date": "2023-05-10", "status": "Active", "type": "Bullet"},
    {"id": "cam_2", "name": "Entry Lane 2", "recorder_id": "rec_2", "ip": "192.168.11.237:2", "location": "Entry Lane 2", "install_date": "2023-05-10", "status": "Active", "type": "Bullet"},
    {"id": "cam_3", "name": "Gate Cabin", "recorder_id": "rec_2", "ip": "192.168.11.237:3", "location": "Cabin", "install_date": "2023-06-15", "status": "Active", "type": "Dome"},
    {"id": "cam_4", "name": "Roof View", "recorder_id": "rec_2", "ip": "192.168.11.237:4", "location": "Entry Lane", "install_date": "2023-02-20", "status": "Active", "type": "Bullet"},
    {"id": "cam_5", "name": "Side View", "recorder_id": "rec_2", "ip": "192.168.11.237:5", "location": "Entry Lane", "install_date": "2023-02-20", "status": "Active", "type": "Bullet"},
    {"id": "cam_6", "name": "Exit Lane 1", "recorder_id": "rec_2", "ip": "192.168.11.237:6", "location": "Exit Lane 1", "install_date": "2023-05-12", "status": "Active", "type": "Bullet"},
    {"id": "cam_7", "name": "Exit Lane 2", "recorder_id": "rec_2", "ip": "192.168.11.237:7", "location": "Exit Lane 2", "install_date": "2023-05-12", "status": "Active", "type": "Bullet"},

    # Main building
    {"id": "cam_8", "name": "Ground Floor Lobby", "recorder_id": "rec_3", "ip": "192.168.44.150:1", "location": "Main Building", "install_date": "2024-01-10", "status": "Active", "type": "Dome"},
    {"id": "cam_9", "name": "Elevator", "recorder_id": "rec_3", "ip": "192.168.44.150:2", "location": "Main Building", "install_date": "2024-01-10", "status": "Signal Lost", "type": "Dome", "note": "Cable cut"},

    # Technical warehouse
    {"id": "cam_10", "name": "Warehouse Door", "recorder_id": "rec_4", "ip": "192.168.11.248:1", "location": "Technical Warehouse", "install_date": "2025-07-16", "status": "Active", "type": "Bullet", "note": "New technical camera"},
    {"id": "cam_11", "name": "Workshop", "recorder_id": "rec_4", "ip": "192.168.11.248:2", "location": "Technical Warehouse", "install_date": "2025-07-16", "status": "Maintenance", "type": "Bullet"},

    # Yard
    {"id": "cam_12", "name": "Downstream", "recorder_id": "rec_1", "ip": "192.168.11.236:1", "location": "Yard", "install_date": "2022-11-01", "status": "Active", "type": "PTZ"},
    {"id": "cam_13", "name": "Upstream", "recorder_id": "rec_1", "ip": "192.168.11.236:2", "location": "Yard", "install_date": "2022-11-01", "status": "Active", "type": "PTZ"},
]


def seed_demo_inventory(inventory: Inventory) -> None:
    """Load the demo recorders and cameras; locations come from the records themselves."""
    locations = sorted({r["location"] for r in DEMO_RECORDERS} | {c["location"] for c in DEMO_CAMERAS})
    for location in locations:
        inventory.taxonomy.ensure(TaxonomyKind.LOCATION, location)

    for recorder in DEMO_RECORDERS:
        inventory.devices.save_recorder(RecorderSave(**recorder), actor=None)

    for camera in DEMO_CAMERAS:
        inventory.devices.save_camera(CameraSave(**camera), actor=None)

    logger.info(f"📷 Demo inventory loaded: {len(DEMO_RECORDERS)} recorders, {len(DEMO_CAMERAS)} cameras")
