import os
import json
from urllib.parse import urlparse, parse_qs
from google_auth_oauthlib.flow import InstalledAppFlow
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from tubebatch.config import T, E, SCOPES

DEFAULT_REDIRECT_URI = "http://localhost"

def extract_auth_code(pasted):
    """Accepts either the bare code or the whole URL the browser was redirected to."""
    pasted = pasted.strip()
    if "code=" in pasted:
        codes = parse_qs(urlparse(pasted).query).get("code")
        if codes:
            return codes[0]
    return pasted


class Authorizer:
    """Supplies valid OAuth credentials, possibly after a one-time human step."""

    def obtain_credentials(self):
        raise NotImplementedError


class TokenFileAuthorizer(Authorizer):
    """
    Reuses a cached token file, refreshing it when expired. Without a usable token
    it runs the installed-app flow, either through a local redirect server or by
    printing an authorization URL and reading the pasted code, and caches the result.
    """

    def __init__(self, client_secrets_file, token_file, translator, flow="local_server", scopes=None):
        self.client_secrets_file = client_secrets_file
        self.token_file = token_file
        self.translator = translator
        self.flow = flow
        self.scopes = scopes or SCOPES

    def has_credentials(self):
        return os.path.exists(self.token_file) or os.path.exists(self.client_secrets_file)

    def obtain_credentials(self):
        creds = None
        if os.path.exists(self.token_file):
            creds = Credentials.from_authorized_user_file(self.token_file, self.scopes)
            if creds.valid:
                print(self.translator.get('auth.token_reused', T_OK=T.OK, E_SUCCESS=E.SUCCESS, token_file=self.token_file))
                return creds

        if creds and creds.expired and creds.refresh_token:
            print(self.translator.get('auth.token_expired', T_INFO=T.INFO, E_INFO=E.INFO))
            try:
                creds.refresh(Request())
            except Exception as e:
                print(self.translator.get('auth.token_refresh_failed', T_WARN=T.WARN, E_WARN=E.WARN, e=e))
                os.remove(self.token_file)
                creds = None
        else:
            creds = None

        if not creds:
            if not os.path.exists(self.client_secrets_file):
                raise FileNotFoundError(self.translator.get('auth.client_secrets_missing', client_secrets_file=self.client_secrets_file))
            print(self.translator.get('auth.no_valid_token', T_WARN=T.WARN, E_KEY=E.KEY))
            creds = self._run_flow()

        self._save(creds)
        return creds

    def _run_flow(self):
        if self.flow == "console":
            return self._run_console_flow()
        flow = InstalledAppFlow.from_client_secrets_file(self.client_secrets_file, self.scopes)
        return flow.run_local_server(port=0)

    def _redirect_uri(self):
        """First redirect URI registered in the client secrets, as the console flow sends it."""
        with open(self.client_secrets_file, 'r', encoding='utf-8') as f:
            secrets = json.load(f)
        client = secrets.get("installed") or secrets.get("web") or {}
        redirect_uris = client.get("redirect_uris") or [DEFAULT_REDIRECT_URI]
        return redirect_uris[0]

    def _run_console_flow(self):
        flow = InstalledAppFlow.from_client_secrets_file(self.client_secrets_file, self.scopes, redirect_uri=self._redirect_uri())
        auth_url, _ = flow.authorization_url(access_type='offline', prompt='consent')
        print(self.translator.get('auth.visit_url', T_INFO=T.INFO, E_KEY=E.KEY, auth_url=auth_url))
        code = extract_auth_code(input(self.translator.get('auth.enter_code')))
        flow.fetch_token(code=code)
        return flow.credentials

    def _save(self, creds):
        with open(self.token_file, 'w') as token:
            token.write(creds.to_json())
        print(self.translator.get('auth.token_saved', T_OK=T.OK, E_SUCCESS=E.SUCCESS, token_file=self.token_file))
