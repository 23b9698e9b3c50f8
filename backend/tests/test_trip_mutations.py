import datetime
from decimal import Decimal

import pytest
from sqlalchemy import update

from tripplanner.core.errors import ConcurrentUpdateError, NotFoundError
from tripplanner.models import Activity, City, Trip, TripActivity, TripCity, User
from tripplanner.services import trip_mutations


@pytest.fixture
def owner(db_session):
    user = User(name="Alice", email="alice@example.com", hashed_password="x")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def paris(db_session):
    city = City(name="Paris", country="France", cost_index=4, popularity=100, tags=["food"])
    db_session.add(city)
    db_session.flush()
    db_session.add_all([
        Activity(city_id=city.id, name="Eiffel Tower Visit", type="sightseeing", duration=2, estimated_cost=25, rating=5),
        Activity(city_id=city.id, name="Louvre Museum", type="culture", duration=3, estimated_cost=20, rating=5),
    ])
    db_session.commit()
    return city


@pytest.fixture
def trip(db_session, owner):
    trip = Trip(
        user_id=owner.id,
        trip_name="Europe",
        start_date=datetime.date(2025, 6, 1),
        end_date=datetime.date(2025, 6, 14)
    )
    db_session.add(trip)
    db_session.commit()
    return trip


def activity_ids(db_session):
    return {a.name: a.id for a in db_session.query(Activity).all()}


def test_get_owned_trip_filters_by_owner(db_session, trip, owner):
    assert trip_mutations.get_owned_trip(db_session, trip.id, owner.id).id == trip.id

    with pytest.raises(NotFoundError) as exc:
        trip_mutations.get_owned_trip(db_session, trip.id, owner.id + 1)
    assert exc.value.message == "Trip not found"


def test_add_activity_recomputes_total(db_session, trip, paris):
    trip.budget_transport = 100
    trip_mutations.add_activity(trip, TripActivity(activity_id=activity_ids(db_session)["Louvre Museum"], cost=20))
    assert trip.budget_activities == 20
    assert trip.budget_total == 120


def test_add_activity_without_cost(db_session, trip, paris):
    entry = trip_mutations.add_activity(trip, TripActivity(activity_id=activity_ids(db_session)["Louvre Museum"]))
    assert entry.cost == 0
    assert trip.budget_total == 0


def test_remove_activity_removes_first_match_only(db_session, trip, paris):
    louvre = activity_ids(db_session)["Louvre Museum"]
    trip_mutations.add_activity(trip, TripActivity(activity_id=louvre, cost=20))
    trip_mutations.add_activity(trip, TripActivity(activity_id=louvre, cost=5))

    assert trip_mutations.remove_activity(trip, louvre) is True
    assert [a.cost for a in trip.activities] == [5]
    assert trip.budget_activities == 5
    assert trip.budget_total == 5


def test_remove_missing_activity_changes_nothing(trip):
    trip.budget_meals = 40
    trip_mutations.recompute_budget_total(trip)

    assert trip_mutations.remove_activity(trip, 12345) is False
    assert trip.budget == {
        "transport": 0, "accommodation": 0, "activities": 0, "meals": 40, "others": 0, "total": 40
    }


def test_replace_budget_defaults_missing_categories(trip):
    trip.budget_transport = 500
    budget = trip_mutations.replace_budget(trip, {"meals": 10, "others": None})
    assert budget == {
        "transport": 0, "accommodation": 0, "activities": 0, "meals": 10, "others": 0, "total": 10
    }


def test_remove_city_drops_every_stop(db_session, trip, paris):
    trip_mutations.add_city(trip, TripCity(city_id=paris.id, order=0))
    trip_mutations.add_city(trip, TripCity(city_id=paris.id, order=1))
    assert trip_mutations.remove_city(trip, paris.id) == 2
    assert trip.cities == []


def test_share_token_is_stable(trip):
    first = trip_mutations.ensure_share_token(trip, nbytes=16)
    assert len(first) == 32
    assert trip.is_public is True

    trip.is_public = False
    assert trip_mutations.ensure_share_token(trip) == first
    assert trip.is_public is True


# ---------- CONCURRENCY ----------

def bump_version_behind_session(db_session, trip_id):
    """Simulate another writer committing a newer version of the trip."""
    db_session.execute(
        update(Trip)
        .where(Trip.id == trip_id)
        .values(version=Trip.version + 1)
        .execution_options(synchronize_session=False)
    )


def test_stale_write_is_retried_and_applied_once(db_session, trip, paris):
    louvre = activity_ids(db_session)["Louvre Museum"]
    calls = []

    def mutate(t):
        calls.append(t.version)
        if len(calls) == 1:
            bump_version_behind_session(db_session, t.id)
        trip_mutations.add_activity(t, TripActivity(activity_id=louvre, cost=20))

    updated, _ = trip_mutations.apply_trip_mutation(db_session, trip.id, trip.user_id, mutate, attempts=3)

    assert len(calls) == 2
    assert len(updated.activities) == 1
    assert updated.budget_activities == 20
    assert updated.budget_total == 20


def test_exhausted_retries_raise_conflict(db_session, trip, paris):
    louvre = activity_ids(db_session)["Louvre Museum"]

    def mutate(t):
        bump_version_behind_session(db_session, t.id)
        trip_mutations.add_activity(t, TripActivity(activity_id=louvre, cost=20))

    with pytest.raises(ConcurrentUpdateError) as exc:
        trip_mutations.apply_trip_mutation(db_session, trip.id, trip.user_id, mutate, attempts=2)
    assert exc.value.status_code == 409

    db_session.expire_all()
    reloaded = db_session.get(Trip, trip.id)
    assert reloaded.activities == []
    assert reloaded.budget_total == 0


def test_version_increments_on_commit(db_session, trip):
    start = trip.version
    trip_mutations.apply_trip_mutation(
        db_session, trip.id, trip.user_id, lambda t: trip_mutations.replace_budget(t, {"transport": 10})
    )
    assert trip.version == start + 1


def test_total_matches_categories_after_every_step(db_session, trip, paris):
    ids = activity_ids(db_session)
    trip_mutations.replace_budget(trip, {"transport": 100, "accommodation": 50})
    steps = [
        ("add", ids["Louvre Museum"], 20),
        ("add", ids["Eiffel Tower Visit"], 25),
        ("add", ids["Louvre Museum"], None),
        ("remove", ids["Eiffel Tower Visit"], None),
        ("remove", 12345, None),
        ("remove", ids["Louvre Museum"], None),
    ]
    for action, activity, cost in steps:
        if action == "add":
            trip_mutations.add_activity(trip, TripActivity(activity_id=activity, cost=cost))
        else:
            trip_mutations.remove_activity(trip, activity)
        budget = trip.budget
        assert budget["total"] == sum(v for k, v in budget.items() if k != "total")

    assert trip.budget["activities"] == 0
    assert trip.budget["total"] == 150


def test_fractional_costs_leave_no_residue(db_session, trip, paris):
    louvre = activity_ids(db_session)["Louvre Museum"]
    trip_mutations.replace_budget(trip, {"transport": 100})
    costs = [0.1, 0.2, 0.7, 1.1, 3.3]

    for cost in costs:
        trip_mutations.add_activity(trip, TripActivity(activity_id=louvre, cost=cost))
        budget = trip.budget
        assert budget["total"] == sum(v for k, v in budget.items() if k != "total")
    assert trip.budget_activities == Decimal("5.40")
    assert trip.budget_total == Decimal("105.40")

    while trip.activities:
        assert trip_mutations.remove_activity(trip, louvre) is True
        budget = trip.budget
        assert budget["total"] == sum(v for k, v in budget.items() if k != "total")

    assert trip.budget_activities == 0
    assert trip.budget_total == Decimal("100.00")


def test_fractional_costs_survive_a_commit(db_session, trip, paris):
    louvre = activity_ids(db_session)["Louvre Museum"]
    for cost in (0.1, 0.2):
        trip_mutations.apply_trip_mutation(
            db_session, trip.id, trip.user_id,
            lambda t, cost=cost: trip_mutations.add_activity(t, TripActivity(activity_id=louvre, cost=cost))
        )

    db_session.expire_all()
    reloaded = db_session.get(Trip, trip.id)
    assert reloaded.budget_activities == Decimal("0.30")
    assert reloaded.budget_total == Decimal("0.30")


def test_to_money_rounds_to_the_cent():
    assert trip_mutations.to_money(None) == Decimal("0.00")
    assert trip_mutations.to_money(0.1) == Decimal("0.10")
    assert trip_mutations.to_money(7) == Decimal("7.00")
    assert trip_mutations.to_money(Decimal("2.345")) == Decimal("2.34")


def test_remove_booking_by_id(db_session, trip, paris):
    louvre = activity_ids(db_session)["Louvre Museum"]
    trip_mutations.add_activity(trip, TripActivity(activity_id=louvre, cost=20))
    trip_mutations.add_activity(trip, TripActivity(activity_id=louvre, cost=5))
    db_session.commit()
    second = trip.activities[1]

    assert trip_mutations.remove_booking(trip, second.id) is True
    assert [a.cost for a in trip.activities] == [20]
    assert trip.budget_total == 20

    assert trip_mutations.remove_booking(trip, 98765) is False
    assert trip.budget_total == 20


def test_remove_booking_without_activity(db_session, trip, paris):
    trip_mutations.add_activity(trip, TripActivity(activity_id=None, cost=12.5))
    db_session.commit()

    assert trip_mutations.remove_booking(trip, trip.activities[0].id) is True
    assert trip.activities == []
    assert trip.budget_total == 0
