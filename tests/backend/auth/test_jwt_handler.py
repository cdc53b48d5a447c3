from datetime import datetime, timedelta, timezone

import jwt
import pytest

from backend.auth import jwt_handler
from backend.core import config


def _sign(claims: dict) -> str:
    return jwt.encode(claims, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def _expires_later() -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=5)


def test_token_carries_user_id_as_subject() -> None:
    token = jwt_handler.create_access_token(42)

    assert jwt_handler.decode_access_token(token)['sub'] == '42'
    assert jwt_handler.user_id_from_token(token) == 42


def test_expired_token_is_rejected() -> None:
    issued_at = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt_handler.create_access_token(42, expires_minutes=1, now=issued_at)

    with pytest.raises(jwt.ExpiredSignatureError):
        jwt_handler.user_id_from_token(token)


def test_token_without_expiry_is_rejected() -> None:
    with pytest.raises(jwt.MissingRequiredClaimError):
        jwt_handler.user_id_from_token(_sign({'sub': '42'}))


def test_non_numeric_subject_is_rejected() -> None:
    token = _sign({'sub': 'ana@example.com', 'exp': _expires_later()})

    with pytest.raises(jwt_handler.InvalidSubjectError):
        jwt_handler.user_id_from_token(token)


def test_route_reports_invalid_subject(api_client) -> None:
    token = _sign({'sub': 'ana@example.com', 'exp': _expires_later()})

    response = api_client.get('/appointments', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401
    assert response.json() == {'error': 'Invalid token subject'}


def test_route_reports_unknown_user(api_client) -> None:
    response = api_client.get(
        '/appointments',
        headers={'Authorization': f'Bearer {jwt_handler.create_access_token(999)}'},
    )

    assert response.status_code == 401
    assert response.json() == {'error': 'User not found'}
