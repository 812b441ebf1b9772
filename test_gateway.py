"""
test_gateway.py: Mercado Pago preference client (HTTP layer mocked).
Run: pytest test_gateway.py -v
"""
from unittest import mock

import pytest
import requests

from storefront.checkout.gateway import MercadoPagoGateway, PaymentPreference
from storefront.errors import PaymentProviderError


def make_response(status=201, body=None, text=''):
    resp = mock.Mock()
    resp.status_code = status
    resp.text = text
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def make_gateway(response=None, error=None):
    session = mock.Mock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    gw = MercadoPagoGateway('APP_USR-123', base_url='https://api.example/', timeout=3, session=session)
    return gw, session


def test_posts_preference_with_bearer_token():
    body = {'id': '99-abc', 'init_point': 'https://live', 'sandbox_init_point': 'https://sandbox'}
    gw, session = make_gateway(make_response(body=body))

    result = gw.create_preference({'items': []})

    session.post.assert_called_once_with(
        'https://api.example/checkout/preferences',
        json={'items': []},
        headers={'Authorization': 'Bearer APP_USR-123'},
        timeout=3,
    )
    assert result == PaymentPreference(id='99-abc', redirect_url='https://live',
                                       sandbox_redirect_url='https://sandbox')
    assert result.url_for(sandbox=True) == 'https://sandbox'
    assert result.url_for(sandbox=False) == 'https://live'


def test_sandbox_falls_back_to_live_url():
    pref = PaymentPreference(id='1', redirect_url='https://live')
    assert pref.url_for(sandbox=True) == 'https://live'


def test_network_error_raises_provider_error():
    gw, _ = make_gateway(error=requests.ConnectionError('down'))
    with pytest.raises(PaymentProviderError):
        gw.create_preference({})


def test_http_error_raises_provider_error():
    gw, _ = make_gateway(make_response(status=401, text='invalid token'))
    with pytest.raises(PaymentProviderError):
        gw.create_preference({})


def test_invalid_json_raises_provider_error():
    gw, _ = make_gateway(make_response(body=ValueError('no json'), text='<html>'))
    with pytest.raises(PaymentProviderError):
        gw.create_preference({})


def test_missing_access_token_fails_without_calling_provider():
    session = mock.Mock()
    gw = MercadoPagoGateway('', session=session)
    with pytest.raises(PaymentProviderError):
        gw.create_preference({})
    session.post.assert_not_called()
