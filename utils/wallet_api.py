"""
Client for the external Wallet API.

Every response arrives in the envelope
``{statusCode, success, messages, result_code, data}`` and is decoded into
pydantic models here, at the boundary. A response that does not fit raises
WalletResponseError instead of being patched up with defaults.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from utils.errors import WalletAPIError, WalletResponseError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


def utc_now() -> datetime:
    """Current UTC time, naive to match the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class WalletModel(BaseModel):
    model_config = ConfigDict(extra='ignore')


class WalletEnvelope(WalletModel):
    statusCode: Optional[int] = None
    success: bool = False
    messages: Optional[str] = None
    result_code: Optional[str] = None
    data: Any = None


class WalletTokens(WalletModel):
    access_token: str
    access_token_expires_in: int
    refresh_token: Optional[str] = None
    refresh_token_expires_in: Optional[int] = None

    def access_expires_at(self, now: Optional[datetime] = None) -> datetime:
        return (now or utc_now()) + timedelta(seconds=self.access_token_expires_in)

    def refresh_expires_at(self, now: Optional[datetime] = None) -> Optional[datetime]:
        if self.refresh_token_expires_in is None:
            return None
        return (now or utc_now()) + timedelta(seconds=self.refresh_token_expires_in)


class WalletBalance(WalletModel):
    available_balance: float
    ledger_balance: float
    currency: str = 'ZAR'


class WalletTransaction(WalletModel):
    id: str
    amount: float
    type: str
    description: str = ''
    date: str
    category: Optional[str] = None
    status: str


class Voucher(WalletModel):
    id: str
    title: str
    points: int = 0
    description: str = ''
    expiry_date: Optional[str] = None
    status: str


class CustomerProfile(WalletModel):
    id: str
    name: str
    email: Optional[str] = None
    phone_number: str
    avatar_url: Optional[str] = None


class WalletRegistration(WalletModel):
    id_number: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    middle_name: str = ''
    privacy: bool
    gtc: bool
    registration_step: str = '1'
    registration_type: str = 'customer'
    referrer_id: Optional[str] = None


class DocumentUpload(WalletModel):
    customer_id: str = Field(min_length=1)
    image_type: str = 'NATIONAL_IDENTITY'
    identity_type: Optional[str] = None
    side: str = 'FRONT'
    image: str = Field(min_length=1)  # base64


class VoucherItem(WalletModel):
    id: str
    amount: float
    quantity: int = Field(gt=0)


def _decode(model, payload, what: str):
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        logger.error(f"Wallet API returned a malformed {what}: {e.error_count()} error(s)")
        raise WalletResponseError(
            f"Unexpected {what} response from Wallet API",
            {'errors': e.errors(include_url=False, include_context=False, include_input=False)}
        )


def _decode_list(model, payload, key: str, what: str) -> list:
    items = (payload or {}).get(key) if isinstance(payload, dict) else None
    if items is None:
        return []
    if not isinstance(items, list):
        raise WalletResponseError(f"Unexpected {what} response from Wallet API")
    return [_decode(model, item, what) for item in items]


class WalletAPIClient:
    """
    Typed client for the Wallet API.

    Args:
        base_url: API root, e.g. https://api.wallet.example.com/
        client_key: Value of the client-key header
        client_pass: Value of the client-pass header
        access_token: Bearer token from an earlier login, if any
        timeout: Per request timeout in seconds
        session: requests.Session to reuse (tests inject a mock)
    """

    def __init__(
        self,
        base_url: str,
        client_key: str,
        client_pass: str,
        access_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url if base_url.endswith('/') else base_url + '/'
        self.client_key = client_key
        self.client_pass = client_pass
        self.access_token = access_token
        self.refresh_token = None
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config, access_token: Optional[str] = None) -> 'WalletAPIClient':
        return cls(
            base_url=config['WALLET_API_URL'],
            client_key=config.get('WALLET_CLIENT_KEY', ''),
            client_pass=config.get('WALLET_CLIENT_PASS', ''),
            access_token=access_token,
            timeout=config.get('WALLET_API_TIMEOUT', DEFAULT_TIMEOUT),
        )

    def _headers(self, include_auth: bool = True) -> Dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'client-key': self.client_key,
            'client-pass': self.client_pass,
        }
        if include_auth and self.access_token:
            headers['authorization'] = f"Bearer {self.access_token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        auth: bool = True,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
        empty_means_bad_credentials: bool = False,
    ) -> WalletEnvelope:
        url = f"{self.base_url}{path}"

        try:
            resp = self.session.request(
                method,
                url,
                headers=self._headers(auth),
                json=json,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Wallet API {method} {path} failed: {str(e)}")
            raise WalletAPIError("Wallet service is unreachable", 502, result_code='NETWORK_ERROR')

        body = resp.text or ''
        if not body.strip():
            logger.warning(f"Wallet API {method} {path} returned an empty body ({resp.status_code})")
            # Login answers bad credentials with an empty body
            if empty_means_bad_credentials:
                raise WalletAPIError(
                    "Invalid credentials or account not found",
                    401,
                    result_code='EMPTY_RESPONSE'
                )
            if resp.status_code == 401:
                raise WalletAPIError("Unauthorized", 401, result_code='EMPTY_RESPONSE')
            raise WalletAPIError(
                f"Empty response from Wallet API ({resp.status_code})",
                resp.status_code if resp.status_code >= 400 else 502,
                result_code='EMPTY_RESPONSE'
            )

        try:
            payload = resp.json()
        except ValueError:
            logger.error(f"Wallet API {method} {path} returned non-JSON ({resp.status_code})")
            if resp.status_code == 401:
                raise WalletAPIError("Unauthorized", 401, result_code='UNAUTHORIZED')
            raise WalletResponseError("Invalid JSON response from Wallet API")

        if not isinstance(payload, dict):
            raise WalletResponseError("Invalid JSON response from Wallet API")

        envelope = _decode(WalletEnvelope, payload, 'envelope')

        if resp.status_code >= 400 or not envelope.success:
            status_code = resp.status_code if resp.status_code >= 400 else (envelope.statusCode or 400)
            message = envelope.messages or f"Wallet API request failed ({status_code})"
            logger.warning(f"Wallet API {method} {path} rejected: {status_code} {envelope.result_code}")
            raise WalletAPIError(message, status_code, result_code=envelope.result_code)

        return envelope

    def login(self, phone_number: str, pin: str) -> WalletTokens:
        """Log in with phone number and PIN and keep the issued tokens"""
        envelope = self._request(
            'POST',
            'customer/login',
            auth=False,
            json={'phone_number': phone_number, 'pin': pin},
            empty_means_bad_credentials=True,
        )
        if envelope.data is None:
            raise WalletResponseError("Wallet API login response has no tokens")

        tokens = _decode(WalletTokens, envelope.data, 'login')
        self.access_token = tokens.access_token
        self.refresh_token = tokens.refresh_token
        logger.info("Wallet API login succeeded")
        return tokens

    def logout(self) -> None:
        self.access_token = None
        self.refresh_token = None

    def get_balance(self) -> WalletBalance:
        envelope = self._request('GET', 'customer/balance')
        return _decode(WalletBalance, envelope.data, 'balance')

    def get_transactions(self, limit: int = 50, offset: int = 0) -> List[WalletTransaction]:
        envelope = self._request('GET', 'transactions', params={'limit': limit, 'offset': offset})
        return _decode_list(WalletTransaction, envelope.data, 'transactions', 'transactions')

    def get_vouchers(self) -> List[Voucher]:
        envelope = self._request('GET', 'customer/vouchers')
        return _decode_list(Voucher, envelope.data, 'vouchers', 'vouchers')

    def get_profile(self) -> CustomerProfile:
        envelope = self._request('GET', 'customer/profile')
        return _decode(CustomerProfile, envelope.data, 'profile')

    def verify_token(self) -> bool:
        """True if the held access token is still accepted"""
        if not self.access_token:
            return False
        try:
            self._request('POST', 'customer/verify_token')
            return True
        except WalletAPIError as e:
            logger.info(f"Wallet token verification failed: {e.message}")
            return False

    def register(self, registration: WalletRegistration) -> WalletEnvelope:
        return self._request(
            'POST',
            'customer/register',
            auth=False,
            json=registration.model_dump(exclude_none=True),
        )

    def upload_document(self, document: DocumentUpload) -> WalletEnvelope:
        return self._request(
            'POST',
            'customer/upload_document',
            json=document.model_dump(exclude_none=True),
        )

    def create_voucher_payment_intent(
        self,
        items: List[VoucherItem],
        merchant: str,
        amount: str,
        mode: str = 'strict',
    ) -> WalletEnvelope:
        """Buy vouchers; an 'Insufficient Funds' message comes back as WalletAPIError"""
        return self._request(
            'POST',
            'vouchers/payment_intent',
            json={
                'items': [item.model_dump() for item in items],
                'merchant': merchant,
                'amount': amount,
                'mode': mode,
            },
        )
