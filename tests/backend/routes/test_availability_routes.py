from datetime import date, datetime, timedelta, timezone

import pytest

from backend.core.errors import NotFoundError
from backend.models.appointment import Appointment
from backend.routes.availability_routes import list_available_slots, list_day_schedule

DAY = date(2024, 3, 1)
NOW = datetime(2024, 3, 1, 10, 30)


def _add_appointment(db, user, provider, slot: datetime, canceled_at: datetime | None = None) -> Appointment:
    appointment = Appointment(user_id=user.id, provider_id=provider.id, date=slot, canceled_at=canceled_at)
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


def _future_day(days: int = 2) -> date:
    return (datetime.now(timezone.utc) + timedelta(days=days)).date()


def test_available_slots_skip_past_and_taken_hours(db, client_user, provider_user) -> None:
    _add_appointment(db, client_user, provider_user, datetime(2024, 3, 1, 14, 0))
    _add_appointment(db, client_user, provider_user, datetime(2024, 3, 1, 15, 0), canceled_at=NOW)

    slots = list_available_slots(provider_user.id, DAY, NOW, db)

    assert [slot.time for slot in slots] == [f'{hour:02d}:00' for hour in range(8, 20)]
    available = {slot.time: slot.available for slot in slots}
    assert available['08:00'] is False
    assert available['10:00'] is False
    assert available['11:00'] is True
    assert available['14:00'] is False
    assert available['15:00'] is True
    assert slots[0].value == datetime(2024, 3, 1, 8, 0)


def test_available_slots_ignore_other_providers(db, client_user, provider_user, make_user) -> None:
    other_provider = make_user('Carla Cabeleireira', 'carla@example.com', provider=True)
    _add_appointment(db, client_user, other_provider, datetime(2024, 3, 1, 14, 0))

    slots = list_available_slots(provider_user.id, DAY, NOW, db)

    assert all(slot.available for slot in slots if slot.value >= NOW)


def test_available_slots_require_a_provider(db, client_user) -> None:
    with pytest.raises(NotFoundError) as exception_info:
        list_available_slots(client_user.id, DAY, NOW, db)

    assert exception_info.value.message == 'Provider not found.'


def test_day_schedule_lists_active_appointments_in_order(db, client_user, provider_user, make_user) -> None:
    other_client = make_user('Davi', 'davi@example.com')
    late = _add_appointment(db, other_client, provider_user, datetime(2024, 3, 1, 16, 0))
    early = _add_appointment(db, client_user, provider_user, datetime(2024, 3, 1, 9, 0))
    _add_appointment(db, client_user, provider_user, datetime(2024, 3, 1, 11, 0), canceled_at=NOW)
    _add_appointment(db, client_user, provider_user, datetime(2024, 3, 2, 9, 0))

    schedule = list_day_schedule(provider_user.id, DAY, db)

    assert [appointment.id for appointment in schedule] == [early.id, late.id]
    assert schedule[1].user.name == 'Davi'


def test_availability_requires_authentication(api_client, provider_user) -> None:
    response = api_client.get(f'/providers/{provider_user.id}/available', params={'date': '2024-03-01'})

    assert response.status_code == 401
    assert response.json() == {'error': 'Token not provided'}


def test_availability_endpoint_marks_booked_slot(api_client, auth_headers, db, client_user, provider_user) -> None:
    day = _future_day()
    _add_appointment(db, client_user, provider_user, datetime.combine(day, datetime.min.time()).replace(hour=14))

    response = api_client.get(
        f'/providers/{provider_user.id}/available',
        params={'date': day.isoformat()},
        headers=auth_headers(client_user),
    )

    assert response.status_code == 200
    available = {slot['time']: slot['available'] for slot in response.json()}
    assert len(available) == 12
    assert available['14:00'] is False
    assert available['13:00'] is True


def test_availability_for_unknown_provider(api_client, auth_headers, client_user) -> None:
    response = api_client.get(
        '/providers/999/available',
        params={'date': '2024-03-01'},
        headers=auth_headers(client_user),
    )

    assert response.status_code == 404
    assert response.json() == {'error': 'Provider not found.'}


def test_availability_requires_date(api_client, auth_headers, client_user, provider_user) -> None:
    response = api_client.get(f'/providers/{provider_user.id}/available', headers=auth_headers(client_user))

    assert response.status_code == 400


def test_schedule_lists_provider_day(api_client, auth_headers, db, client_user, provider_user) -> None:
    appointment = _add_appointment(db, client_user, provider_user, datetime(2024, 3, 1, 9, 0))

    response = api_client.get('/schedules', params={'date': '2024-03-01'}, headers=auth_headers(provider_user))

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    assert body[0]['id'] == appointment.id
    assert body[0]['past'] is True
    assert body[0]['user'] == {'id': client_user.id, 'name': 'Ana Cliente'}


def test_schedule_rejects_non_providers(api_client, auth_headers, client_user) -> None:
    response = api_client.get('/schedules', params={'date': '2024-03-01'}, headers=auth_headers(client_user))

    assert response.status_code == 401
    assert response.json() == {'error': 'User is not a provider.'}
