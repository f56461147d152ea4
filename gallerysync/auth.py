import requests
from oauthlib.oauth2 import BackendApplicationClient, OAuth2Error
from requests_oauthlib import OAuth2Session

from gallerysync.config import SCOPES, TOKEN_URL, SyncConfig
from gallerysync.errors import AuthError


class AuthManager:
    """
    Acquires a Microsoft Graph bearer token with the client-credentials grant.
    The token is fetched fresh on every run and never written to disk.
    """

    def __init__(self, config: SyncConfig):
        self.config = config
        self.token_url = TOKEN_URL.format(tenant_id=config.tenant_id)
        self.token = None

    def authenticate(self) -> str:
        """
        Exchange client id/secret for an access token.
        Raises AuthError if the endpoint rejects us or returns no token.
        """
        client = BackendApplicationClient(client_id=self.config.client_id)
        session = OAuth2Session(client=client)
        try:
            token = session.fetch_token(
                token_url=self.token_url,
                client_id=self.config.client_id,
                client_secret=self.config.client_secret,
                scope=SCOPES,
                include_client_id=True,
            )
        except OAuth2Error as e:
            raise AuthError(f"Token error from {self.token_url}: {e.description or e.error}") from e
        except requests.exceptions.RequestException as e:
            raise AuthError(f"Token request to {self.token_url} failed: {e}") from e
        finally:
            session.close()

        access_token = (token or {}).get("access_token")
        if not access_token:
            raise AuthError(f"Token response from {self.token_url} has no access_token")

        self.token = access_token
        return access_token
