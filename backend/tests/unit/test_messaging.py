"""
Unit tests for message composition and chat deep links.
"""

from datetime import date, time
from urllib.parse import parse_qs, unquote, urlparse

import pytest

from eventscale.models import Event
from eventscale.services.messaging import (
    build_chat_deep_link,
    build_confirmation_url,
    compose_assignment_text,
    compose_invite_text,
    compose_scale_message,
    compose_share_text,
    first_name,
    is_guest_role,
    normalize_phone,
)


@pytest.fixture
def event():
    return Event(
        title='Sunday Service',
        date=date(2024, 5, 12),
        time=time(19, 0),
        location='Main Temple',
    )


class TestNormalizePhone:
    """Tests for phone normalization."""

    def test_adds_country_code(self):
        assert normalize_phone('91993837093') == '5591993837093'

    def test_keeps_existing_country_code(self):
        assert normalize_phone('5591993837093') == '5591993837093'

    def test_strips_formatting(self):
        assert normalize_phone('+55 (91) 99383-7093') == '5591993837093'
        assert normalize_phone('(91) 99383-7093') == '5591993837093'

    def test_empty_input(self):
        assert normalize_phone('') == ''
        assert normalize_phone(None) == ''
        assert normalize_phone('n/a') == ''


class TestDeepLink:
    """Tests for the chat deep link."""

    def test_link_shape(self):
        link = build_chat_deep_link('91993837093', 'Hi Ana & co?')
        parsed = urlparse(link)

        assert parsed.scheme == 'https'
        assert parsed.netloc == 'wa.me'
        assert parsed.path == '/5591993837093'
        assert parse_qs(parsed.query)['text'] == ['Hi Ana & co?']

    def test_text_is_fully_encoded(self):
        link = build_chat_deep_link('5591993837093', 'line one\nline two /x')
        query = link.split('?text=', 1)[1]

        assert ' ' not in query
        assert '\n' not in query
        assert '/' not in query
        assert unquote(query) == 'line one\nline two /x'


class TestComposeText:
    """Tests for invitation / assignment texts."""

    def test_invite_text(self, event):
        text = compose_invite_text(event, 'Ana', 'https://x/confirmar/abc')

        assert 'Hi Ana' in text
        assert 'Sunday Service' in text
        assert '12/05/2024' in text
        assert '19:00' in text
        assert 'Main Temple' in text
        assert text.endswith('https://x/confirmar/abc')

    def test_assignment_text_mentions_role(self, event):
        text = compose_assignment_text(event, 'Sound', 'Ana', 'https://x/confirmar/abc')

        assert 'Your role: *Sound*' in text
        assert 'https://x/confirmar/abc' in text

    def test_guest_role_selects_invite(self, event):
        text = compose_scale_message(event, 'Guest', 'Bruno Lima', 'https://x/c/1')
        assert text == compose_invite_text(event, 'Bruno', 'https://x/c/1')

    def test_guest_role_is_case_insensitive(self):
        assert is_guest_role('guest')
        assert is_guest_role(' GUEST ')
        assert not is_guest_role('Sound')

    def test_other_role_selects_assignment(self, event):
        text = compose_scale_message(event, 'Sound', 'Ana Souza', 'https://x/c/1')
        assert text == compose_assignment_text(event, 'Sound', 'Ana', 'https://x/c/1')

    def test_location_is_optional(self, event):
        event.location = None
        assert 'Location' not in compose_invite_text(event, 'Ana', 'u')

    def test_share_text(self, event):
        assert compose_share_text(event) == 'Sunday Service — 12/05/2024 at 19:00 | Main Temple'


class TestHelpers:
    def test_first_name(self):
        assert first_name('Ana Maria Souza') == 'Ana'
        assert first_name('  ') == ''
        assert first_name(None) == ''

    def test_confirmation_url(self):
        assert build_confirmation_url('tok123', base_url='https://igreja.app') == 'https://igreja.app/confirmar/tok123'
