"""Login flow: drives one attempt from redirect to canonical user.

Each attempt moves forward through :class:`AttemptStage` and ends either
``MAPPED`` or ``FAILED``. Nothing here is retried; a failed attempt must be
restarted from :meth:`SsoLoginFlow.start` with a fresh state, nonce and PKCE pair.

Per-attempt secrets (PKCE verifier, issued state) live in the host's session,
reached only through the injected :class:`SessionAccessor`.
"""

from __future__ import annotations

import logging
import secrets
from enum import Enum

from .authorize import generate_pkce_pair, generate_state, read_nonce
from .config import SsoProviderConfigModel
from .contracts import (
    AuthorizationRequest,
    CanonicalUser,
    SsoError,
    SsoFlowError,
    SsoProfileShapeError,
    SsoProviderAdapter,
    SsoStateMismatchError,
    TokenGrant,
)
from .provider import SsoProvider
from .session import CODE_VERIFIER_KEY, STATE_KEY, SessionAccessor

logger = logging.getLogger(__name__)


class AttemptStage(str, Enum):
    UNSTARTED = "unstarted"
    AUTHORIZATION_REQUESTED = "authorization_requested"
    CALLBACK_RECEIVED = "callback_received"
    TOKEN_EXCHANGED = "token_exchanged"
    PROFILE_FETCHED = "profile_fetched"
    MAPPED = "mapped"
    FAILED = "failed"


_SEQUENCE = [
    AttemptStage.UNSTARTED,
    AttemptStage.AUTHORIZATION_REQUESTED,
    AttemptStage.CALLBACK_RECEIVED,
    AttemptStage.TOKEN_EXCHANGED,
    AttemptStage.PROFILE_FETCHED,
    AttemptStage.MAPPED,
]


class LoginAttempt:
    """Forward-only record of a single login attempt."""

    def __init__(self, stage: AttemptStage = AttemptStage.UNSTARTED):
        self.stage = stage
        self.grant: TokenGrant | None = None
        self.user: CanonicalUser | None = None
        self.failure: SsoError | None = None

    @classmethod
    def resumed(cls) -> LoginAttempt:
        """An attempt whose redirect was issued by an earlier request."""
        return cls(AttemptStage.AUTHORIZATION_REQUESTED)

    @property
    def is_terminal(self) -> bool:
        return self.stage in (AttemptStage.MAPPED, AttemptStage.FAILED)

    def advance(self, stage: AttemptStage) -> None:
        if self.is_terminal:
            raise SsoFlowError(f"Login attempt already {self.stage.value}; start a new attempt")
        if stage is not AttemptStage.FAILED:
            expected = _SEQUENCE[_SEQUENCE.index(self.stage) + 1]
            if stage is not expected:
                raise SsoFlowError(
                    f"Invalid login attempt transition {self.stage.value} -> {stage.value}"
                )
        self.stage = stage

    def fail(self, error: SsoError) -> None:
        self.advance(AttemptStage.FAILED)
        self.failure = error

    def __repr__(self) -> str:
        return f"LoginAttempt(stage={self.stage.value!r})"


class SsoLoginFlow:
    """Coordinates the builder, token exchange, profile fetch and mapping."""

    def __init__(
        self,
        config: SsoProviderConfigModel,
        provider: SsoProviderAdapter | None = None,
    ):
        self.config = config
        self.provider = provider or SsoProvider(config)

    def start(
        self,
        session: SessionAccessor,
        state: str | None = None,
        attempt: LoginAttempt | None = None,
    ) -> AuthorizationRequest:
        """Build the authorization redirect for a new attempt.

        Stores the issued state and, when PKCE is enabled, the code verifier in
        the session so the callback can be verified and completed.
        """
        attempt = attempt or LoginAttempt()
        try:
            nonce = read_nonce(session, self.config)
        except SsoError as exc:
            self._log_failure(exc)
            attempt.fail(exc)
            raise

        if self.config.use_state:
            state = state or generate_state()
            session.put(STATE_KEY, state)
        else:
            state = None

        pkce = None
        if self.config.pkce:
            pkce = generate_pkce_pair()
            session.put(CODE_VERIFIER_KEY, pkce.verifier)

        try:
            url = self.provider.build_authorization_url(nonce=nonce, state=state, pkce=pkce)
        except SsoError as exc:
            self._log_failure(exc)
            attempt.fail(exc)
            raise
        attempt.advance(AttemptStage.AUTHORIZATION_REQUESTED)
        logger.info(
            "SSO authorization request issued",
            extra={"provider": "sso", "pkce": pkce is not None, "scopes": self.config.scopes},
        )
        return AuthorizationRequest(
            url=url,
            state=state,
            nonce=nonce,
            scopes=list(self.config.scopes),
            pkce=pkce,
        )

    async def complete(
        self,
        session: SessionAccessor,
        code: str,
        state: str | None = None,
        attempt: LoginAttempt | None = None,
    ) -> CanonicalUser:
        """Handle the callback: exchange the code, fetch and map the profile.

        Raises the first :class:`SsoError` encountered; the attempt is then
        ``FAILED`` and no user record exists.
        """
        attempt = attempt or LoginAttempt.resumed()
        attempt.advance(AttemptStage.CALLBACK_RECEIVED)

        try:
            self._verify_state(session, state)

            code_verifier = None
            if self.config.pkce and session.has(CODE_VERIFIER_KEY):
                code_verifier = session.get(CODE_VERIFIER_KEY)

            grant = await self.provider.exchange_token(code=code, code_verifier=code_verifier)
            attempt.grant = grant
            attempt.advance(AttemptStage.TOKEN_EXCHANGED)

            raw_profile = await self.provider.fetch_profile(access_token=grant.access_token)
            attempt.advance(AttemptStage.PROFILE_FETCHED)

            user = self.provider.map_profile(raw_profile)
        except SsoFlowError:
            raise
        except SsoError as exc:
            self._log_failure(exc)
            attempt.fail(exc)
            raise

        attempt.user = user
        attempt.advance(AttemptStage.MAPPED)
        logger.info("SSO login mapped user", extra={"provider": "sso", "user_id": user.id})
        return user

    def _verify_state(self, session: SessionAccessor, state: str | None) -> None:
        if not self.config.use_state:
            return
        expected = session.get(STATE_KEY) if session.has(STATE_KEY) else None
        if not expected or not secrets.compare_digest(
            str(expected).encode("utf-8"), (state or "").encode("utf-8")
        ):
            raise SsoStateMismatchError("Callback state does not match the issued state")

    def _log_failure(self, exc: SsoError) -> None:
        if isinstance(exc, SsoProfileShapeError):
            # Shape mismatches mean the deployment is misconfigured for this identity service.
            logger.error(
                "SSO profile does not match configuration: %s", exc, extra=exc.to_log_extra()
            )
        else:
            logger.warning("SSO login attempt failed: %s", exc, extra=exc.to_log_extra())
