"""Drive one external conferencing session through its lifecycle."""
from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from ..core.config import settings
from ..core.errors import SessionError
from ..schemas.jaas import IssuedToken, TokenRequest, UserRole
from .jaas_token_client import consultation_token_request
from .meeting_options import build_meeting_options
from .script_loader import ScriptLoader, loader as default_script_loader

logger = logging.getLogger(__name__)

SCRIPT_LOAD_FAILED = "Failed to load video calling service"
MEETING_INIT_FAILED = "Failed to initialize video meeting. Please try again."


class MeetingState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    SCRIPT_LOADING = "script_loading"
    TOKEN_FETCHING = "token_fetching"
    SESSION_CREATING = "session_creating"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ENDED = "ended"
    ERRORED = "errored"


class MeetingEvent(str, enum.Enum):
    CONFERENCE_JOINED = "videoConferenceJoined"
    CONFERENCE_LEFT = "videoConferenceLeft"
    PARTICIPANT_JOINED = "participantJoined"
    PARTICIPANT_LEFT = "participantLeft"
    READY_TO_CLOSE = "readyToClose"
    ERROR_OCCURRED = "errorOccurred"
    HANGUP = "hangup"


class ConferenceSession(Protocol):
    """The handle returned by the vendor's external API constructor."""

    def add_listener(self, event: str, callback: Callable[..., None]) -> None: ...

    def execute_command(self, name: str, *args: Any) -> None: ...

    def dispose(self) -> None: ...


SessionFactory = Callable[[str, dict[str, Any]], ConferenceSession]


class TokenProvider(Protocol):
    async def get_token(self, request: TokenRequest, use_cache: bool = True) -> IssuedToken: ...


@dataclass(slots=True)
class MeetingConfig:
    """Consultation participants and the role of the local user."""

    doctor_id: str
    doctor_name: str
    patient_id: str
    patient_name: str
    user_role: UserRole
    doctor_email: str | None = None
    patient_email: str | None = None
    appointment_id: str | None = None

    @property
    def display_name(self) -> str:
        return self.doctor_name if self.user_role is UserRole.DOCTOR else self.patient_name

    def token_request(self) -> TokenRequest:
        return consultation_token_request(
            patient_id=self.patient_id,
            patient_name=self.patient_name,
            patient_email=self.patient_email,
            doctor_id=self.doctor_id,
            doctor_name=self.doctor_name,
            doctor_email=self.doctor_email,
            user_role=self.user_role,
            appointment_id=self.appointment_id,
        )


@dataclass(slots=True)
class MeetingCallbacks:
    """Hooks the hosting page registers for lifecycle changes."""

    on_start: Callable[[], None] | None = None
    on_end: Callable[[], None] | None = None
    on_error: Callable[[str], None] | None = None
    on_participant_count: Callable[[int], None] | None = None
    on_state_change: Callable[[MeetingState], None] | None = None


class MeetingSessionAdapter:
    """Own at most one conferencing session and expose a small event surface.

    Ordering is script load, then token fetch, then session creation. Disposal is the
    only cancellation mechanism: it bumps a generation counter so any attempt still
    suspended on an earlier step is dropped when it resumes.
    """

    def __init__(
        self,
        config: MeetingConfig,
        *,
        token_client: TokenProvider,
        session_factory: SessionFactory,
        script_loader: ScriptLoader | None = None,
        callbacks: MeetingCallbacks | None = None,
        app_id: str | None = None,
        domain: str | None = None,
        connect_timeout: float | None = None,
        parent_node: Any = None,
    ) -> None:
        self._config = config
        self._token_client = token_client
        self._session_factory = session_factory
        self._script_loader = script_loader or default_script_loader
        self._callbacks = callbacks or MeetingCallbacks()
        self._app_id = settings.jaas_app_id if app_id is None else app_id
        self._domain = domain or settings.jaas_domain
        # Upper bound on waiting for the vendor's join signal before treating the session as live.
        self._connect_timeout = settings.jaas_connect_timeout if connect_timeout is None else connect_timeout
        self._parent_node = parent_node

        self._state = MeetingState.UNINITIALIZED
        self._session: ConferenceSession | None = None
        self._connect_timer: asyncio.TimerHandle | None = None
        self._generation = 0
        self._participant_count = 0
        self._error_message: str | None = None

    @property
    def state(self) -> MeetingState:
        return self._state

    @property
    def participant_count(self) -> int:
        return self._participant_count

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def session(self) -> ConferenceSession | None:
        return self._session

    async def start(self) -> None:
        """Run the session from script load up to ``Connecting``."""

        if self._state is not MeetingState.UNINITIALIZED:
            logger.warning("Meeting start ignored; adapter is already %s", self._state.value)
            return

        generation = self._generation
        self._set_state(MeetingState.SCRIPT_LOADING)
        try:
            await self._script_loader.ensure_loaded(self._app_id)
        except Exception as exc:  # noqa: BLE001 - every loader fault ends this attempt
            self._fail(generation, SCRIPT_LOAD_FAILED, exc)
            return
        if generation != self._generation:
            return

        self._set_state(MeetingState.TOKEN_FETCHING)
        try:
            token = await self._token_client.get_token(self._config.token_request())
        except Exception as exc:  # noqa: BLE001
            self._fail(generation, MEETING_INIT_FAILED, exc)
            return
        if generation != self._generation:
            return

        self._set_state(MeetingState.SESSION_CREATING)
        try:
            options = build_meeting_options(
                token,
                display_name=self._config.display_name,
                parent_node=self._parent_node,
            )
            session = self._session_factory(self._domain, options)
            self._session = session
            self._register_listeners(session)
            self._connect_timer = asyncio.get_running_loop().call_later(
                self._connect_timeout, self._on_connect_timeout, session
            )
        except Exception as exc:  # noqa: BLE001
            self._fail(generation, MEETING_INIT_FAILED, exc)
            return

        self._set_state(MeetingState.CONNECTING)
        logger.info("Conferencing session created for room=%s", token.room_name)

    async def retry(self) -> None:
        """Tear down whatever exists and start again from scratch."""

        self.dispose()
        await self.start()

    def hang_up(self) -> None:
        """Leave the call and end the session."""

        session = self._session
        if session is None:
            return
        session.execute_command("hangup")
        self._end(session)

    def dispose(self) -> None:
        """Release the session and silence every pending callback."""

        self._generation += 1
        self._cancel_connect_timer()
        session, self._session = self._session, None
        if session is not None:
            try:
                session.dispose()
            except Exception:  # noqa: BLE001 - teardown must not raise into the host
                logger.exception("Disposing conferencing session failed")
        self._participant_count = 0
        self._error_message = None
        self._state = MeetingState.UNINITIALIZED

    def _register_listeners(self, session: ConferenceSession) -> None:
        handlers: dict[MeetingEvent, Callable[..., None]] = {
            MeetingEvent.CONFERENCE_JOINED: lambda *_: self._on_joined(),
            MeetingEvent.PARTICIPANT_JOINED: lambda *_: self._adjust_participants(1),
            MeetingEvent.PARTICIPANT_LEFT: lambda *_: self._adjust_participants(-1),
            MeetingEvent.CONFERENCE_LEFT: lambda *_: self._end(session),
            MeetingEvent.READY_TO_CLOSE: lambda *_: self._end(session),
            MeetingEvent.HANGUP: lambda *_: self._end(session),
            MeetingEvent.ERROR_OCCURRED: self._on_session_error,
        }
        for event, handler in handlers.items():
            session.add_listener(event.value, self._guard(session, handler))

    def _guard(self, session: ConferenceSession, handler: Callable[..., None]) -> Callable[..., None]:
        def _listener(*args: Any) -> None:
            if session is not self._session:
                return
            handler(*args)

        return _listener

    def _on_joined(self) -> None:
        self._cancel_connect_timer()
        if self._state is not MeetingState.CONNECTING:
            return
        self._set_state(MeetingState.CONNECTED)
        if self._callbacks.on_start:
            self._callbacks.on_start()

    def _on_connect_timeout(self, session: ConferenceSession) -> None:
        self._connect_timer = None
        if session is not self._session or self._state is not MeetingState.CONNECTING:
            return
        logger.warning("No join signal after %.1fs; treating session as connected", self._connect_timeout)
        self._set_state(MeetingState.CONNECTED)

    def _adjust_participants(self, delta: int) -> None:
        self._participant_count = max(0, self._participant_count + delta)
        if self._callbacks.on_participant_count:
            self._callbacks.on_participant_count(self._participant_count)

    def _end(self, session: ConferenceSession) -> None:
        if session is not self._session or self._state in (MeetingState.ENDED, MeetingState.ERRORED):
            return
        self._cancel_connect_timer()
        self._set_state(MeetingState.ENDED)
        if self._callbacks.on_end:
            self._callbacks.on_end()

    def _on_session_error(self, *args: Any) -> None:
        if self._state not in (MeetingState.CONNECTING, MeetingState.CONNECTED):
            return
        detail = args[0] if args else None
        self._fail(self._generation, SessionError.public_message, SessionError(f"Session reported error: {detail!r}"))

    def _fail(self, generation: int, message: str, exc: BaseException) -> None:
        if generation != self._generation:
            return
        logger.error("Meeting failed in state %s: %s", self._state.value, exc, exc_info=exc)
        self._cancel_connect_timer()
        self._error_message = message
        self._set_state(MeetingState.ERRORED)
        if self._callbacks.on_error:
            self._callbacks.on_error(message)

    def _cancel_connect_timer(self) -> None:
        if self._connect_timer is not None:
            self._connect_timer.cancel()
            self._connect_timer = None

    def _set_state(self, state: MeetingState) -> None:
        if state is self._state:
            return
        logger.debug("Meeting state %s -> %s", self._state.value, state.value)
        self._state = state
        if self._callbacks.on_state_change:
            self._callbacks.on_state_change(state)
