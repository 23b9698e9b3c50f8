from typing import Iterable, List, Optional
from sqlalchemy import or_
from tripplanner.models import Activity, City


def build_city_filters(
    country: Optional[str] = None,
    cost_index: Optional[int] = None,
    search: Optional[str] = None,
) -> list:
    """Conjunction of the city predicates that were actually requested."""
    criteria = []
    
    if country:
        criteria.append(City.country == country)
    if cost_index is not None:
        criteria.append(City.cost_index == cost_index)
    if search:
        criteria.append(or_(
            City.name.icontains(search, autoescape=True),
            City.country.icontains(search, autoescape=True)
        ))
    
    return criteria


def build_activity_filters(
    city_id: Optional[int] = None,
    activity_type: Optional[str] = None,
    min_cost: Optional[float] = None,
    max_cost: Optional[float] = None,
    search: Optional[str] = None,
) -> list:
    criteria = []
    
    if city_id is not None:
        criteria.append(Activity.city_id == city_id)
    if activity_type:
        criteria.append(Activity.type == activity_type)
    if min_cost is not None:
        criteria.append(Activity.estimated_cost >= min_cost)
    if max_cost is not None:
        criteria.append(Activity.estimated_cost <= max_cost)
    if search:
        criteria.append(Activity.name.icontains(search, autoescape=True))
    
    return criteria


def parse_tags(tags: Optional[str]) -> List[str]:
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def filter_by_tags(cities: Iterable[City], tags: List[str]) -> List[City]:
    """Keep cities carrying at least one of ``tags``; no tags keeps everything."""
    if not tags:
        return list(cities)
    wanted = set(tags)
    return [city for city in cities if wanted.intersection(city.tags or [])]
