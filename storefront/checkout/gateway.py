"""
storefront/checkout/gateway.py
------------------------------
Payment provider client.

The checkout flow needs a single capability from the provider:

    create_preference(preference: dict) -> PaymentPreference

A *preference* describes a cart; the provider answers with an id and the
URL of its hosted checkout page. Anything else the provider does (payment
confirmation, webhooks) is out of scope here.

The gateway instance lives in ``app.extensions['payment_gateway']`` so tests
can replace it with a fake.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from storefront.errors import PaymentProviderError

logger = logging.getLogger(__name__)


@dataclass
class PaymentPreference:
    id: Optional[str]
    redirect_url: Optional[str]
    sandbox_redirect_url: Optional[str] = None

    def url_for(self, sandbox: bool) -> Optional[str]:
        if sandbox and self.sandbox_redirect_url:
            return self.sandbox_redirect_url
        return self.redirect_url or self.sandbox_redirect_url


class MercadoPagoGateway:
    """Creates checkout preferences through the Mercado Pago REST API."""

    def __init__(self, access_token: str, base_url: str = 'https://api.mercadopago.com',
                 timeout: float = 10.0, session: requests.Session = None):
        self.access_token = access_token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = session or requests.Session()

    def create_preference(self, preference: dict) -> PaymentPreference:
        """
        POST the preference and return its id and redirect URLs.

        Raises:
            PaymentProviderError: network failure, non-2xx answer or a body
            that is not a JSON object. No retry is attempted.
        """
        if not self.access_token:
            raise PaymentProviderError('Pagamento não configurado.')

        url = f'{self.base_url}/checkout/preferences'
        try:
            resp = self.http.post(
                url,
                json=preference,
                headers={'Authorization': f'Bearer {self.access_token}'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Payment provider unreachable (%s): %r", url, e)
            raise PaymentProviderError() from e

        if resp.status_code >= 400:
            logger.error("Payment provider rejected preference: %s %s", resp.status_code, resp.text[:500])
            raise PaymentProviderError()

        try:
            body = resp.json()
        except ValueError as e:
            logger.error("Payment provider returned invalid JSON: %s", resp.text[:500])
            raise PaymentProviderError() from e
        if not isinstance(body, dict):
            logger.error("Payment provider returned unexpected body: %r", body)
            raise PaymentProviderError()

        pref_id = body.get('id')
        return PaymentPreference(
            id=str(pref_id) if pref_id else None,
            redirect_url=body.get('init_point'),
            sandbox_redirect_url=body.get('sandbox_init_point'),
        )
