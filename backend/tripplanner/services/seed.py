import logging
from typing import Dict
from sqlalchemy.orm import Session
from tripplanner.models import Activity, City

logger = logging.getLogger(__name__)

SAMPLE_CITIES = [
    {
        "name": "Paris",
        "country": "France",
        "description": "The City of Light, known for art, fashion, and culture",
        "image_url": "https://images.unsplash.com/photo-1502602898657-3e91760cbb34",
        "latitude": 48.8566,
        "longitude": 2.3522,
        "cost_index": 4,
        "popularity": 100,
        "tags": ["romantic", "historic", "culture", "food"],
        "best_time_to_visit": "April to June, September to October",
        "currency": "EUR",
        "timezone": "CET"
    },
    {
        "name": "Tokyo",
        "country": "Japan",
        "description": "A vibrant metropolis blending tradition and modernity",
        "image_url": "https://images.unsplash.com/photo-1540959733332-eab4deabeeaf",
        "latitude": 35.6762,
        "longitude": 139.6503,
        "cost_index": 4,
        "popularity": 95,
        "tags": ["modern", "culture", "food", "technology"],
        "best_time_to_visit": "March to May, September to November",
        "currency": "JPY",
        "timezone": "JST"
    },
    {
        "name": "Bali",
        "country": "Indonesia",
        "description": "Tropical paradise with beaches, temples, and rice terraces",
        "image_url": "https://images.unsplash.com/photo-1537996194471-e657df975ab4",
        "latitude": -8.3405,
        "longitude": 115.0920,
        "cost_index": 2,
        "popularity": 90,
        "tags": ["beach", "relaxation", "culture", "nature"],
        "best_time_to_visit": "April to October",
        "currency": "IDR",
        "timezone": "WITA"
    },
    {
        "name": "New York",
        "country": "USA",
        "description": "The city that never sleeps, iconic skyline and culture",
        "image_url": "https://images.unsplash.com/photo-1496442226666-8d4d0e62e6e9",
        "latitude": 40.7128,
        "longitude": -74.0060,
        "cost_index": 5,
        "popularity": 98,
        "tags": ["urban", "culture", "shopping", "nightlife"],
        "best_time_to_visit": "April to June, September to November",
        "currency": "USD",
        "timezone": "EST"
    },
    {
        "name": "Dubai",
        "country": "UAE",
        "description": "Luxury shopping, ultramodern architecture, and desert safaris",
        "image_url": "https://images.unsplash.com/photo-1512453979798-5ea266f8880c",
        "latitude": 25.2048,
        "longitude": 55.2708,
        "cost_index": 4,
        "popularity": 85,
        "tags": ["luxury", "modern", "shopping", "adventure"],
        "best_time_to_visit": "November to March",
        "currency": "AED",
        "timezone": "GST"
    },
    {
        "name": "Rome",
        "country": "Italy",
        "description": "Ancient history, stunning architecture, and delicious cuisine",
        "image_url": "https://images.unsplash.com/photo-1552832230-c0197dd311b5",
        "latitude": 41.9028,
        "longitude": 12.4964,
        "cost_index": 3,
        "popularity": 92,
        "tags": ["historic", "culture", "food", "art"],
        "best_time_to_visit": "April to June, September to October",
        "currency": "EUR",
        "timezone": "CET"
    }
]

# Keyed by city name
SAMPLE_ACTIVITIES = {
    "Paris": [
        {
            "name": "Eiffel Tower Visit",
            "description": "Visit the iconic iron lattice tower",
            "type": "sightseeing",
            "duration": 3,
            "estimated_cost": 25,
            "image_url": "https://images.unsplash.com/photo-1511739001486-6bfe10ce785f",
            "location": "Champ de Mars",
            "rating": 5,
            "tags": ["iconic", "landmark", "views"]
        },
        {
            "name": "Louvre Museum",
            "description": "World's largest art museum",
            "type": "culture",
            "duration": 4,
            "estimated_cost": 20,
            "image_url": "https://images.unsplash.com/photo-1499856871958-5b9627545d1a",
            "location": "Rue de Rivoli",
            "rating": 5,
            "tags": ["art", "museum", "culture"]
        },
        {
            "name": "Seine River Cruise",
            "description": "Romantic boat tour along the Seine",
            "type": "relaxation",
            "duration": 2,
            "estimated_cost": 15,
            "location": "Seine River",
            "rating": 4,
            "tags": ["romantic", "cruise", "sightseeing"]
        }
    ],
    "Tokyo": [
        {
            "name": "Shibuya Crossing Experience",
            "description": "World's busiest pedestrian crossing",
            "type": "sightseeing",
            "duration": 1,
            "estimated_cost": 0,
            "location": "Shibuya",
            "rating": 4,
            "tags": ["urban", "iconic", "free"]
        },
        {
            "name": "Sushi Making Class",
            "description": "Learn to make authentic sushi",
            "type": "food",
            "duration": 3,
            "estimated_cost": 80,
            "location": "Central Tokyo",
            "rating": 5,
            "tags": ["food", "experience", "culture"]
        },
        {
            "name": "Mount Fuji Day Trip",
            "description": "Visit Japan's iconic mountain",
            "type": "adventure",
            "duration": 10,
            "estimated_cost": 100,
            "location": "Mount Fuji",
            "rating": 5,
            "tags": ["nature", "adventure", "iconic"]
        }
    ]
}


def reseed_reference_data(db: Session) -> Dict[str, int]:
    """Replace all cities and activities with the sample set."""
    try:
        db.query(Activity).delete(synchronize_session=False)
        db.query(City).delete(synchronize_session=False)
        
        cities = {}
        for data in SAMPLE_CITIES:
            city = City(**data)
            db.add(city)
            cities[city.name] = city
        db.flush()
        
        activity_count = 0
        for city_name, activities in SAMPLE_ACTIVITIES.items():
            for data in activities:
                db.add(Activity(city_id=cities[city_name].id, **data))
                activity_count += 1
        
        db.commit()
    except Exception:
        db.rollback()
        raise
    
    logger.info("Reference data reseeded: %d cities, %d activities", len(cities), activity_count)
    return {"cities": len(cities), "activities": activity_count}
