"""
TutorMatch Backend: Session Dependency Tests
==============================================

What:  Login gate and lazy-registration cleanup, called directly with a
       stand-in request that only carries a session dict.
"""

from types import SimpleNamespace

import pytest

from tutormatch.exceptions import AuthenticationRequiredError
from tutormatch.session import (
    LAZY_REGISTRATION_KEY,
    clear_lazy_registration,
    get_session_user_id,
    require_user_id,
)


def _request(session):
    return SimpleNamespace(session=session)


class TestSessionUser:

    def test_user_id_from_session(self):
        assert get_session_user_id(_request({"user_id": 7})) == 7

    def test_string_user_id_is_converted(self):
        assert get_session_user_id(_request({"user_id": "7"})) == 7

    def test_anonymous_session(self):
        assert get_session_user_id(_request({})) is None

    def test_malformed_user_id_treated_as_anonymous(self):
        assert get_session_user_id(_request({"user_id": "seven"})) is None

    def test_require_user_id_passes_through(self):
        assert require_user_id(7) == 7

    def test_require_user_id_redirects_anonymous(self):
        with pytest.raises(AuthenticationRequiredError) as exc_info:
            require_user_id(None)
        assert exc_info.value.login_url == "/login"


class TestLazyRegistration:

    def test_marker_removed(self):
        session = {"user_id": 3, LAZY_REGISTRATION_KEY: {"step": 2}}

        clear_lazy_registration(_request(session))

        assert session == {"user_id": 3}

    def test_no_marker_is_fine(self):
        session = {}

        clear_lazy_registration(_request(session))

        assert session == {}
