# data.py - demo activities (used when a dashboard is empty and the user asks for a demo)
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Any, List

DEMO_ACTIVITIES: List[Dict[str, Any]] = [
    {"activityName": "Foundation pour", "discipline": "Civil", "responsible": "Ana", "priority": "High",
     "plannedStartDate": "2024-01-08", "plannedEndDate": "2024-02-02", "actualStartDate": "2024-01-10", "actualEndDate": "2024-02-06",
     "plannedStatus": "Completed", "actualStatus": "Completed", "plannedValue": 120000, "actualValue": 131500, "actualCost": 128900,
     "completionPercent": 100, "associatedRisk": "Medium", "requiredResources": ["Concrete crew", "Pump truck"]},
    {"activityName": "Steel structure", "discipline": "Civil", "responsible": "Bruno", "priority": "High",
     "plannedStartDate": "2024-02-05", "plannedEndDate": "2024-04-12", "actualStartDate": "2024-02-12",
     "plannedStatus": "Completed", "actualStatus": "Delayed", "plannedValue": 340000, "actualValue": 298000, "actualCost": 301200,
     "completionPercent": 70, "associatedRisk": "High", "dependencies": ["Foundation pour"]},
    {"activityName": "Cable trays", "discipline": "Electrical", "responsible": "Carla", "priority": "Medium",
     "plannedStartDate": "2024-03-04", "plannedEndDate": "2024-05-31", "actualStartDate": "2024-03-11",
     "plannedStatus": "In Progress", "actualStatus": "In Progress", "plannedValue": 85000, "actualValue": 40000, "actualCost": 42750,
     "completionPercent": 45, "associatedRisk": "Low"},
    {"activityName": "Switchgear install", "discipline": "Electrical", "responsible": "Ana", "priority": "High",
     "plannedStartDate": "2024-06-03", "plannedEndDate": "2024-07-19",
     "plannedStatus": "Not Started", "actualStatus": "Not Started", "plannedValue": 210000, "actualValue": 0, "actualCost": 0,
     "completionPercent": 0, "associatedRisk": "Medium", "dependencies": ["Cable trays"]},
    {"activityName": "HVAC ducting", "discipline": "Mechanical", "responsible": "Bruno", "priority": "Low",
     "plannedStartDate": "2024-04-15", "plannedEndDate": "2024-06-28",
     "plannedStatus": "Not Started", "actualStatus": "Not Started", "plannedValue": 150000,
     "completionPercent": 0, "associatedRisk": "Low"},
]


def load_activities_json(path: str | Path = "activities.json") -> List[Dict[str, Any]]:
    """
    Load raw activity records from a JSON file (a list of objects, or
    {"activities": [...]}). Falls back to DEMO_ACTIVITIES when the file is
    missing or invalid.
    """
    p = Path(path)
    if p.exists():
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                data = data.get("activities")
            if isinstance(data, list) and all(isinstance(x, dict) for x in data):
                return data
        except (OSError, ValueError):
            pass
    return [dict(a) for a in DEMO_ACTIVITIES]
