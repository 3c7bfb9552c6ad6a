"""Google OAuth 2.0 authorization-code exchange."""

import logging
from typing import Any, Dict
from urllib.parse import urlencode

import requests
from itsdangerous import BadSignature, URLSafeTimedSerializer

from core.errors import AuthenticationFailure

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
STATE_MAX_AGE_SECONDS = 600


class GoogleOAuth:
    """Builds the consent redirect and turns a callback code into a profile."""

    def __init__(self, client_id: str, client_secret: str, state_secret: str, timeout: float = 15.0):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self._state = URLSafeTimedSerializer(state_secret, salt="google-oauth-state")

    def authorization_url(self, redirect_uri: str, kind: str) -> str:
        params = {
            'client_id': self.client_id,
            'redirect_uri': redirect_uri,
            'response_type': 'code',
            'scope': 'openid email profile',
            'state': self._state.dumps({'kind': kind}),
            'prompt': 'select_account',
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    def check_state(self, state: str, kind: str) -> None:
        try:
            data = self._state.loads(state or "", max_age=STATE_MAX_AGE_SECONDS)
        except BadSignature:
            raise AuthenticationFailure("Invalid OAuth state")
        if data.get('kind') != kind:
            raise AuthenticationFailure("Invalid OAuth state")

    def fetch_profile(self, code: str, redirect_uri: str) -> Dict[str, Any]:
        """Exchange the authorization code and return ``{id, email, name}``."""
        if not code:
            raise AuthenticationFailure("Missing authorization code")
        try:
            token_response = requests.post(TOKEN_URL, data={
                'code': code,
                'client_id': self.client_id,
                'client_secret': self.client_secret,
                'redirect_uri': redirect_uri,
                'grant_type': 'authorization_code',
            }, timeout=self.timeout)
            token_response.raise_for_status()
            access_token = token_response.json().get('access_token')

            info_response = requests.get(
                USERINFO_URL,
                headers={'Authorization': f"Bearer {access_token}"},
                timeout=self.timeout,
            )
            info_response.raise_for_status()
            info = info_response.json()
        except requests.RequestException as e:
            logger.error(f"Google OAuth exchange failed: {e}")
            raise AuthenticationFailure("Google authentication failed")

        return {'id': info.get('sub'), 'email': info.get('email'), 'name': info.get('name')}
