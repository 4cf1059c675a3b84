import pytest

from taskboard.core.modules.user.validators import normalize_email, validate_password
from taskboard.errors import ValidationError


class TestValidatePassword:
    def test_valid(self):
        validate_password("s3cret")

    @pytest.mark.parametrize("password", ["", "a"])
    def test_too_short(self, password):
        with pytest.raises(ValidationError, match="at least 2 characters"):
            validate_password(password)

    def test_whitespace(self):
        with pytest.raises(ValidationError, match="whitespace"):
            validate_password("my secret")


class TestNormalizeEmail:
    def test_lowercases_and_strips(self):
        assert normalize_email("  Ada@Example.COM ") == "ada@example.com"

    @pytest.mark.parametrize("email", ["", "ada", "ada@", "a da@example.com"])
    def test_invalid(self, email):
        with pytest.raises(ValidationError):
            normalize_email(email)
