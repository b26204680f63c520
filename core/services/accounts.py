from __future__ import annotations

import logging
from typing import Any

from rest_framework.authtoken.models import Token

from ..forms import RegisterForm, SignInForm

logger = logging.getLogger(__name__)


class AccountService:
    """Create accounts and issue or revoke API tokens."""

    def sign_up(self, data) -> tuple[bool, RegisterForm, Any]:
        form = RegisterForm(data)
        if not form.is_valid():
            return False, form, None
        user = form.save()
        logger.info("Created account %s", user.pk)
        return True, form, user

    def sign_in(self, request, data) -> tuple[bool, SignInForm, Token | None]:
        form = SignInForm(data, request=request)
        if not form.is_valid():
            logger.info("Rejected sign-in for %s", data.get("email", ""))
            return False, form, None
        token, _ = Token.objects.get_or_create(user=form.get_user())
        logger.info("User %s signed in", token.user_id)
        return True, form, token

    def sign_out(self, user) -> None:
        Token.objects.filter(user=user).delete()
        logger.info("User %s signed out", user.pk)
