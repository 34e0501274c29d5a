import time

import pytest

from schemakit.security import jwt_utils
from schemakit.utils.exceptions import ExpiredTokenError, InvalidTokenError, TokenError

SECRET = "test-secret"


class TestEncodeDecode:
    def test_roundtrip(self):
        token = jwt_utils.encode({"sub": "user-1", "type": jwt_utils.TYPE_AUTH}, SECRET)
        payload = jwt_utils.decode(token, SECRET)
        assert payload["sub"] == "user-1"
        assert jwt_utils.has_payload_type(jwt_utils.TYPE_AUTH, payload)

    def test_key_id_lands_in_header(self):
        from jose import jwt

        token = jwt_utils.encode({"sub": "u"}, SECRET, key_id="k1")
        assert jwt.get_unverified_header(token)["kid"] == "k1"

    def test_expired_token(self):
        token = jwt_utils.encode({"sub": "u", "exp": int(time.time()) - 60}, SECRET)
        with pytest.raises(ExpiredTokenError):
            jwt_utils.decode(token, SECRET)

    def test_wrong_key_is_invalid(self):
        token = jwt_utils.encode({"sub": "u"}, SECRET)
        with pytest.raises(InvalidTokenError):
            jwt_utils.decode(token, "other-secret")

    def test_disallowed_algorithm_is_invalid(self):
        token = jwt_utils.encode({"sub": "u"}, SECRET, alg="HS512")
        with pytest.raises(TokenError):
            jwt_utils.decode(token, SECRET, algorithms=["HS256"])

    def test_garbage_is_invalid(self):
        with pytest.raises(InvalidTokenError):
            jwt_utils.decode("not-a-token", SECRET)


class TestInspection:
    def test_is_jwt(self):
        token = jwt_utils.encode({"sub": "u"}, SECRET)
        assert jwt_utils.is_jwt(token)
        assert not jwt_utils.is_jwt("a.b")
        assert not jwt_utils.is_jwt("a.b.c")
        assert not jwt_utils.is_jwt(None)
        assert not jwt_utils.is_jwt(12345)

    def test_get_payload_is_unverified(self):
        token = jwt_utils.encode({"sub": "u", "email": "u@example.com"}, SECRET)
        assert jwt_utils.get_payload(token)["email"] == "u@example.com"
        assert jwt_utils.get_payload("only.two") is None
        assert jwt_utils.get_payload(object()) is None

    def test_has_payload_type(self):
        assert not jwt_utils.has_payload_type("auth", {"type": "invitation"})
        assert not jwt_utils.has_payload_type("auth", None)

    def test_has_expired(self):
        past = jwt_utils.encode({"exp": int(time.time()) - 10}, SECRET)
        future = jwt_utils.encode({"exp": int(time.time()) + 3600}, SECRET)
        no_exp = jwt_utils.encode({"sub": "u"}, SECRET)

        assert jwt_utils.has_expired(past) is True
        assert jwt_utils.has_expired(future) is False
        assert jwt_utils.has_expired(no_exp) is None

    @pytest.mark.parametrize("exp", ["soon", None, [1], True])
    def test_has_expired_with_non_numeric_exp(self, exp):
        """A malformed exp claim is treated as carrying no expiry."""
        token = jwt_utils.encode({"sub": "u", "exp": exp}, SECRET)
        assert jwt_utils.has_expired(token) is None
