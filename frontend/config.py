import os
from dotenv import load_dotenv

load_dotenv()

# Backend API configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

# Streamlit configuration
PAGE_TITLE = "Travel Planner"
PAGE_ICON = "✈️"
LAYOUT = "wide"

# Budget categories shown in the trip editor, in display order
BUDGET_CATEGORIES = ["transport", "accommodation", "activities", "meals", "others"]

ACTIVITY_TYPES = ["sightseeing", "adventure", "food", "culture", "relaxation", "shopping", "nightlife"]
