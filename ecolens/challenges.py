# ecolens/challenges.py — fixed catalog served by GET /api/challenges
from .schemas import Challenge

CHALLENGES = tuple(Challenge(**c) for c in (
    {"id": 1, "title": "Public Transport Tuesday",
     "description": "Use public transport or carpool twice this week",
     "co2Saved": 18, "difficulty": "easy", "category": "transport", "duration": "weekly", "points": 15},
    {"id": 2, "title": "Meatless Monday",
     "description": "Go vegetarian for one day each week",
     "co2Saved": 12, "difficulty": "easy", "category": "food", "duration": "weekly", "points": 10},
    {"id": 3, "title": "Energy Saver",
     "description": "Reduce electricity usage by 20% this month",
     "co2Saved": 25, "difficulty": "medium", "category": "electricity", "duration": "monthly", "points": 25},
    {"id": 4, "title": "Zero Waste Weekend",
     "description": "Avoid single-use plastics for 2 days",
     "co2Saved": 8, "difficulty": "medium", "category": "lifestyle", "duration": "weekly", "points": 20},
    {"id": 5, "title": "Eco Shopper",
     "description": "Buy only second-hand or sustainable products this month",
     "co2Saved": 30, "difficulty": "hard", "category": "lifestyle", "duration": "monthly", "points": 40},
    {"id": 6, "title": "Bike Week",
     "description": "Cycle or walk for all short trips (under 5km)",
     "co2Saved": 22, "difficulty": "medium", "category": "transport", "duration": "weekly", "points": 20},
    {"id": 7, "title": "Reusable Revolution",
     "description": "Use reusable bags, bottles, and containers all week",
     "co2Saved": 15, "difficulty": "easy", "category": "lifestyle", "duration": "weekly", "points": 12},
    {"id": 8, "title": "Digital Detox",
     "description": "Reduce screen time by 2 hours daily to save energy",
     "co2Saved": 10, "difficulty": "medium", "category": "electricity", "duration": "weekly", "points": 18},
))


def challenge_payload() -> list:
    return [c.model_dump(by_alias=True) for c in CHALLENGES]
