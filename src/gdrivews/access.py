from collections.abc import Iterable
from pathlib import Path
import json
import copy
import logging

import google.auth
import google.auth.exceptions
from google.auth.transport.requests import Request, AuthorizedSession
from google.oauth2.credentials import Credentials
from google.oauth2 import service_account
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build, Resource
import googleapiclient.discovery_cache as gws_discovery_cache

logger = logging.getLogger(__name__)

_TOKEN_URI = "https://oauth2.googleapis.com/token"

class GoogleDriveAccess():
    """
    Class encapsulating authenticated access to Google Drive and Sheets.
    See https://developers.google.com/workspace/guides/create-credentials#choose_the_access_credential_that_is_right_for_you
    for an overview of what you'll need.  Once you've obtained a secrets file you can refer the object to it
    for authentication.  For OAuth it will trigger the confirmation screens.  Sessions will be preserved
    and refreshed so confirmation does not need to happen repeatedly.

    An instance is handed to a GoogleDriveSession, which is what actually makes the calls.
    Nothing here is global, tests and applications with several accounts just make several.
    """

    __SCOPES = {
        "sheets": "https://www.googleapis.com/auth/spreadsheets",
        "sheets-ro": "https://www.googleapis.com/auth/spreadsheets.readonly",
        "drive-file": "https://www.googleapis.com/auth/drive.file",
        "drive": "https://www.googleapis.com/auth/drive",
        "drive-ro": "https://www.googleapis.com/auth/drive.readonly",
        "openid": "openid",
        "email": "email",
        "profile": "profile",
        "userinfo-email": "https://www.googleapis.com/auth/userinfo.email",
        "userinfo-profile": "https://www.googleapis.com/auth/userinfo.profile"
    }
    __SCOPE_URL_PREFIX = "https://www.googleapis.com/"

    DEFAULT_SCOPES = ["drive", "sheets"]

    __DEFAULT_AUTH_PROMPT_MSG = "Please visit this URL to authorize this application: {url}"
    __DEFAULT_AUTH_FLOW_SUCCESS_MSG = "The authentication flow has completed. You may close this window."
    __DEFAULT_SECRETS = Path.home() / "gdrivews_client_secrets.json"
    __DEFAULT_CACHE = Path.home() / "gdrivews_tokens.json"

    def __init__(self, config: dict|None = None, credentials=None) -> None:
        """
        config is the same dict the config property takes.
        credentials, if given, are used as is and no flow is ever run.
        """
        self.reset()
        if config:
            self.config = config
        if credentials is not None:
            self.__creds = credentials
            self.__fixed_creds = True

    def __bool__(self) -> bool:
        """True if we are connected and authenticated"""
        return self.connected

    def __str__(self) -> str:
        if self.connected:
            return f"Connected:{str(self.session_scopes)}"
        return f"Disconnected:{str(self.__scopes)}"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @classmethod
    def get_scope(cls, scope: str) -> str:
        """
        Get a scope based on simplified label.
        A raw URL will also be expected.
        """
        s = str(scope)
        sc = cls.__SCOPES.get(s, "")
        if not sc and s.startswith(cls.__SCOPE_URL_PREFIX):
            sc = s
        return sc

    @classmethod
    def _scope_list(cls, value: None|list[str]|str) -> list[str]:
        slist = []
        if value is not None:
            if isinstance(value,str):
                # config files store scopes space separated
                value = value.split()
            elif not isinstance(value,Iterable):
                value = [value]
            for v in value:
                s = cls.get_scope(str(v))
                if s and s not in slist:
                    slist.append(s)
        return slist

    @classmethod
    def from_credentials(cls, credentials):
        """Wrap already obtained google.auth credentials"""
        return cls(credentials=credentials)

    @classmethod
    def from_service_account_key(cls, path: Path|str, scopes: list[str]|None = None):
        """Authenticate with a service account JSON key file"""
        access = cls()
        access.scopes = scopes or cls.DEFAULT_SCOPES
        creds = service_account.Credentials.from_service_account_file(str(path), scopes=access.scopes)
        access.__creds = creds
        access.__fixed_creds = True
        return access

    @classmethod
    def from_config_file(cls, path: Path|str, scopes: list[str]|None = None):
        """
        Load from a JSON config file holding client_id, client_secret, scope,
        refresh_token and type.  If type is 'service_account' the file is treated as a
        service account key.  If there is no refresh token yet, the installed app flow
        runs and the refresh token is written back to the file for next time.
        """
        p = Path(path)
        conf = {}
        if p.exists():
            with open(p, 'r', encoding='utf-8') as f:
                conf = json.load(f)
        if conf.get('type') == 'service_account':
            return cls.from_service_account_key(p, scopes or conf.get('scope'))

        access = cls()
        access.scopes = scopes or conf.get('scope') or cls.DEFAULT_SCOPES
        client_id = conf.get('client_id')
        client_secret = conf.get('client_secret')
        if not client_id or not client_secret:
            raise ValueError(f"{p}: client_id and client_secret are required")
        refresh_token = conf.get('refresh_token')
        creds = None
        if refresh_token:
            creds = Credentials(None, refresh_token=refresh_token, token_uri=_TOKEN_URI,
                                client_id=client_id, client_secret=client_secret,
                                scopes=access.scopes)
            try:
                creds.refresh(Request())
            except google.auth.exceptions.RefreshError as e:
                logger.warning("refresh token in %s rejected (%s), re-authorizing", p, e)
                creds = None
        if creds is None:
            client_config = {"installed": {"client_id": client_id, "client_secret": client_secret,
                                           "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                                           "token_uri": _TOKEN_URI}}
            flow = InstalledAppFlow.from_client_config(client_config, access.scopes)
            creds = flow.run_local_server(access.auth_server, access.auth_port,
                                          authorization_prompt_message=access.auth_prompt_msg,
                                          success_message=access.auth_flow_success_msg)
            conf.update({'client_id': client_id, 'client_secret': client_secret,
                         'scope': access.scopes, 'refresh_token': creds.refresh_token})
            with open(p, 'w', encoding='utf-8') as f:
                json.dump(conf, f, ensure_ascii=False, indent=2)
            p.chmod(0o600)
        access.__creds = creds
        access.__fixed_creds = True
        return access

    @property
    def client_secrets(self) -> Path:
        """
        Path to client secrets file as provided by Google when generating access credentials.
        """
        return self.__secrets

    @client_secrets.setter
    def client_secrets(self, value: Path|str) -> None:
        """
        Set path to client secrets.
        If this changes we need to reconnect as we have new credentials.
        """
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self.__secrets:
            self.__secrets = val
            if self.connected and not self.__fixed_creds:
                self.connect()

    @property
    def cred_cache(self) -> Path:
        """
        Path to local credential cache to not have to do full authentication each time.
        """
        return self.__cache

    @cred_cache.setter
    def cred_cache(self, value: Path|str):
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self.__cache:
            self.__cache = val
            if self.connected and not self.__fixed_creds:
                self.connect()

    @property
    def connected(self) -> bool:
        """
        Are we authenticated with Google?
        """
        return bool(self.__creds) and bool(self.__creds.valid)

    @property
    def session_scopes(self) -> list[str]:
        """
        Scopes authenticated by Google for this session.
        This differs to self.scopes as that is what is requested or to be requested.
        """
        if self.connected:
            return list(self.__creds.scopes or [])
        return []

    @property
    def scopes(self) -> list[str]:
        """
        The scopes requested or to be requested on next authentication sequence.
        """
        return self.__scopes

    @scopes.setter
    def scopes(self, value: None|list[str]|str) -> None:
        """
        Override a new list of session scopes.
        Dropping the current creds unless they were handed to us.
        """
        self.__scopes = self._scope_list(value)
        self.__services = {}
        if not self.__fixed_creds:
            self.__creds = None

    @property
    def creds(self):
        """
        Current active access credentials or None
        """
        return self.__creds

    @property
    def config(self) -> dict:
        """
        Get all configuration state as a dict.
        Convenience for getting it all at once for pushing into a json, toml, ini, etc, file.
        """
        config = {
            'secrets': str(self.__secrets),
            'cache': str(self.__cache),
            'scopes': self.__scopes,
            'server': self.auth_server,
            'port': self.auth_port
        }
        return config

    @config.setter
    def config(self, config: dict) -> None:
        """
        Set configuration state from a dict.
        Convenience method for inserting state pulled from a config file or equivalent.
        """
        reconnect = False
        v = config.get('port', None)
        if v is not None:
            self.auth_port = int(v)
        v = config.get('server', None)
        if v is not None:
            self.auth_server = str(v)
        v = config.get('scopes', [])
        if v:
            self.__scopes = self._scope_list(v)
            reconnect = True
        v = config.get('cache', None)
        if v is not None:
            self.__cache = Path(v)
            reconnect = True
        v = config.get('secrets', None)
        if v is not None:
            self.__secrets = Path(v)
            reconnect = True
        v = config.get('auth_prompt_msg', None)
        if v is not None:
            self.auth_prompt_msg = str(v)
        v = config.get('flow_success_msg', None)
        if v is not None:
            self.auth_flow_success_msg = str(v)
        if reconnect and self.connected and not self.__fixed_creds:
            self.connect()

    def reset(self) -> None:
        """
        Reset all connection state to defaults.
        """
        self.__secrets = self.__DEFAULT_SECRETS
        self.__cache = self.__DEFAULT_CACHE
        self.__discovery_cache = gws_discovery_cache.autodetect()
        self.__creds = None
        self.__fixed_creds = False
        self.__scopes = self._scope_list(self.DEFAULT_SCOPES)
        self.__services = {}
        self.auth_server = 'localhost'
        self.auth_port = 0
        self.auth_prompt_msg = self.__DEFAULT_AUTH_PROMPT_MSG
        self.auth_flow_success_msg = self.__DEFAULT_AUTH_FLOW_SUCCESS_MSG

    def connect(self) -> bool:
        """
        Establish a new authentication session.
        If successful will save the credentials in the cache file to reuse
        on subsequent invocations.
        """
        self.__services = {}
        if self.__fixed_creds:
            # handed to us, all we can do is refresh them
            if not self.connected and getattr(self.__creds, 'refresh', None):
                self.__creds.refresh(Request())
            return self.connected
        self.__creds = None
        if not self.__scopes:
            return False
        requested_scopes = copy.copy(self.__scopes)
        if (self.__cache.exists() and self.__cache.is_file()):
            # need to check what scopes are associated with this cache,
            # refreshing doesn't resolve that
            cf = self.__cache.resolve()
            with open(cf, 'r', encoding='utf-8') as f:
                j = json.load(f)
            scopes = j.get('scopes',[])
            if not all(s in scopes for s in requested_scopes):
                logger.info("credential cache %s lacks requested scopes, discarding", cf)
                self.__cache.unlink()
            else:
                self.__creds = Credentials.from_authorized_user_file(str(cf), requested_scopes)
        if not self.connected:
            if self.__creds and self.__creds.refresh_token:
                try:
                    self.__creds.refresh(Request())
                except google.auth.exceptions.RefreshError as e:
                    logger.warning("failed to refresh stored creds: %s...deleting cred cache and re-authorizing", e)
                finally:
                    if not self.connected:
                        self.__cache.unlink(missing_ok=True)

            if not self.connected:
                if self.__secrets.exists() and self.__secrets.is_file():
                    flow = InstalledAppFlow.from_client_secrets_file(str(self.__secrets), requested_scopes)
                    self.__creds = flow.run_local_server(self.auth_server, self.auth_port,
                                                         authorization_prompt_message=self.auth_prompt_msg,
                                                         success_message=self.auth_flow_success_msg)
                else:
                    # final hail mary
                    try:
                        # this will look at the GOOGLE_APPLICATION_CREDENTIALS envvar and
                        # other cloud default locations
                        self.__creds, _ = google.auth.default(requested_scopes)
                        if not self.connected:
                            self.__creds.refresh(Request())
                    except google.auth.exceptions.DefaultCredentialsError:
                        logger.warning("no client secrets at %s and no default credentials", self.__secrets)

            if self.connected and getattr(self.__creds, 'refresh_token', None):
                # scopes is just to see what the scopes were on the next load
                user_info = {'refresh_token': self.__creds.refresh_token, 'client_id': self.__creds.client_id,
                             'client_secret': self.__creds.client_secret, 'scopes': requested_scopes}
                with open(self.__cache.resolve(), 'w', encoding='utf-8') as f:
                    json.dump(user_info, f, ensure_ascii=False, indent=2)
        return self.connected

    def get_service(self, name: str, version: str) -> Resource|None:
        """
        Build the requested service if not already available, connecting if required.
        Can return None if no connection present.
        """
        if not self.connected:
            self.connect()
        if not self.connected:
            return None
        id = f'{name}:{version}'
        s = self.__services.get(id, None)
        if s is None:
            s = build(name, version, credentials=self.__creds, cache=self.__discovery_cache)
            if s:
                self.__services[id] = s
        return s

    def authorized_session(self) -> AuthorizedSession|None:
        """
        A requests session that signs with our credentials, for the few
        URLs that aren't reachable through a discovery service.
        """
        if not self.connected:
            self.connect()
        if not self.connected:
            return None
        return AuthorizedSession(self.__creds)
