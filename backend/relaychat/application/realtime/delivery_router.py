"""
Delivery Router - presence tracking and live fan-out.

One router instance serves one inbound event (REQUEST scope); the session
object carries per-connection state between events and the injected
PresenceRegistry carries process-wide state.

Flows:
- connect: accept -> verify token (close 4401 on failure) -> register
  presence -> close superseded connection -> mark user online ->
  broadcast userStatus online
- disconnect: unregister (only if still current) -> mark offline ->
  broadcast userStatus offline
- the stored is_online flag and the userStatus broadcast are both derived
  from the registry under a per-user lock, so a reconnect racing a
  disconnect ends online
- send_message: persist through SendMessageHandler -> push newMessage to the
  recipient if online -> echo to sender; failures go back to the sender as
  messageError
- publish_message: the same fan-out for messages stored over HTTP
- typing: push userTyping to the other participant if online, else drop

Pushes never raise: transport errors and timeouts are logged and counted.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from relaychat.application.commands.messages import (
    SendMessageCommand,
    SendMessageHandler,
    SendMessageResult,
)
from relaychat.application.realtime import events
from relaychat.application.realtime.connection import (
    ConnectionState,
    LiveConnection,
    LiveSession,
)
from relaychat.application.realtime.presence import PresenceRegistry
from relaychat.domain.exceptions import UnauthorizedError
from relaychat.domain.ports import TokenService
from relaychat.domain.ports.repositories import (
    ConversationRepository,
    UserRepository,
)
from relaychat.domain.value_objects.conversation_id import ConversationId
from relaychat.domain.value_objects.user_id import UserId
from relaychat.observability import (
    DeliveryFailureReason,
    MessageChannel,
    increment_delivery_failure,
    increment_live_event,
    increment_message_sent,
    set_active_connections,
)

logger = logging.getLogger(__name__)


class DeliveryRouter:
    def __init__(
        self,
        presence: PresenceRegistry,
        token_service: TokenService,
        user_repo: UserRepository,
        conv_repo: ConversationRepository,
        send_message_handler: SendMessageHandler,
        send_timeout: float = 5.0,
    ):
        self._presence = presence
        self._token_service = token_service
        self._user_repo = user_repo
        self._conv_repo = conv_repo
        self._send_message_handler = send_message_handler
        self._send_timeout = send_timeout

    # ==================== CONNECTION LIFECYCLE ====================

    async def connect(
        self, connection: LiveConnection, token: Optional[str]
    ) -> LiveSession:
        """
        Authenticate and register a new live connection.

        Returns the session; its state is DISCONNECTED when the token was
        rejected (the connection is already closed in that case).
        """
        session = LiveSession(connection=connection)
        await connection.accept()
        try:
            user_id = self._token_service.verify(token)
            user = await self._user_repo.get_by_id(user_id)
            if not user:
                raise UnauthorizedError("Unknown user")
        except UnauthorizedError as e:
            logger.info(f"[Live] Rejected connection {connection.connection_id}: {e}")
            session.state = ConnectionState.DISCONNECTED
            await connection.close(events.CLOSE_UNAUTHORIZED, str(e))
            return session

        lease = await self._presence.register(user_id, connection)
        session.user_id = user_id
        session.generation = lease.generation
        session.state = ConnectionState.AUTHENTICATED

        if lease.superseded is not None and lease.superseded is not connection:
            await self._retire(lease.superseded)

        await self._refresh_connection_gauge()
        logger.info(
            f"[Live] User {user_id.value} connected "
            f"({connection.connection_id}, generation {lease.generation})"
        )
        await self._sync_presence(user_id)
        return session

    async def disconnect(self, session: LiveSession) -> None:
        if session.state is ConnectionState.DISCONNECTED or session.user_id is None:
            session.state = ConnectionState.DISCONNECTED
            return

        user_id = session.user_id
        session.state = ConnectionState.DISCONNECTED
        removed = await self._presence.unregister(user_id, session.connection)
        if not removed:
            # Replaced by a newer connection; the user is still online
            logger.debug(
                f"[Live] Stale connection {session.connection.connection_id} "
                f"of {user_id.value} closed"
            )
            return

        await self._refresh_connection_gauge()
        logger.info(f"[Live] User {user_id.value} disconnected")
        await self._sync_presence(user_id)

    async def _sync_presence(self, user_id: UserId) -> None:
        """
        Mirror the registry into the stored online flag and announce it.

        Runs under the user's sync lock and reads the registry inside it, so
        a slow offline write or broadcast from a dropped connection cannot
        land after the online ones of a reconnect.
        """
        async with self._presence.sync_lock(user_id):
            is_online = await self._presence.is_online(user_id)
            last_seen = datetime.now(timezone.utc)
            await self._user_repo.update_presence(
                user_id, is_online=is_online, last_seen=last_seen
            )
            status = events.STATUS_ONLINE if is_online else events.STATUS_OFFLINE
            await self._broadcast(
                events.USER_STATUS,
                events.user_status_payload(user_id, status, last_seen),
                exclude=user_id,
            )

    async def _retire(self, connection: LiveConnection) -> None:
        """Tell a superseded connection it was replaced, then close it."""
        await self._push(
            connection,
            events.SESSION_REPLACED,
            {"reason": "Signed in from another connection"},
        )
        try:
            await connection.close(events.CLOSE_SESSION_REPLACED, "Session replaced")
        except Exception as e:
            logger.warning(
                f"[Live] Failed to close superseded {connection.connection_id}: {e}"
            )

    # ==================== INBOUND EVENTS ====================

    async def send_message(
        self, session: LiveSession, conversation_id: Optional[str], content: Optional[str]
    ) -> None:
        increment_live_event(events.SEND_MESSAGE)
        if not session.is_authenticated:
            return

        sender_id = session.user_id
        try:
            command = SendMessageCommand(
                conversation_id=ConversationId(conversation_id or ""),
                sender_id=sender_id,
                content=content or "",
            )
            result = await self._send_message_handler.execute(command)
        except Exception as e:
            code = events.error_code_for(e)
            if code == "internal_error":
                logger.exception(f"[Live] sendMessage failed for {sender_id.value}")
                error = "Message could not be sent"
            else:
                logger.info(f"[Live] sendMessage rejected for {sender_id.value}: {e}")
                error = str(e)
            increment_delivery_failure(DeliveryFailureReason.REJECTED)
            await self.send_error(session, conversation_id, error, code)
            return

        increment_message_sent(MessageChannel.LIVE)
        await self.publish_message(result, origin=session.connection)

    async def publish_message(
        self, result: SendMessageResult, origin: Optional[LiveConnection] = None
    ) -> None:
        """
        Push a stored message as newMessage to the recipient (if online) and
        echo it to the sender: to `origin` when given, else to the sender's
        registered connection (HTTP sends).
        """
        payload = events.new_message_payload(result)
        sender_id = result.sender.id
        recipient = result.conversation.other_participant(sender_id)
        recipient_connection = await self._presence.get(recipient.id)
        echo_connection = origin or await self._presence.get(sender_id)

        pushes = []
        if echo_connection is not None:
            pushes.append(self._push(echo_connection, events.NEW_MESSAGE, payload))
        if recipient_connection is not None:
            pushes.append(
                self._push(recipient_connection, events.NEW_MESSAGE, payload)
            )
        else:
            logger.debug(
                f"[Live] Recipient {recipient.id.value} offline, "
                f"message {result.message.id.value} stored only"
            )
        if pushes:
            await asyncio.gather(*pushes)

    async def typing(self, session: LiveSession, conversation_id: Optional[str]) -> None:
        increment_live_event(events.TYPING)
        if not session.is_authenticated:
            return

        try:
            conv_id = ConversationId(conversation_id or "")
        except ValueError:
            return
        conversation = await self._conv_repo.get_by_id(conv_id)
        if not conversation or not conversation.has_participant(session.user_id):
            return

        other = conversation.other_participant(session.user_id)
        connection = await self._presence.get(other.id)
        if connection is not None:
            await self._push(
                connection,
                events.USER_TYPING,
                events.user_typing_payload(session.user_id, conv_id),
            )

    async def send_error(
        self,
        session: LiveSession,
        conversation_id: Optional[str],
        error: str,
        code: str,
    ) -> None:
        await self._push(
            session.connection,
            events.MESSAGE_ERROR,
            events.message_error_payload(conversation_id, error, code),
        )

    # ==================== FAN-OUT ====================

    async def _push(
        self, connection: LiveConnection, event: str, data: dict[str, Any]
    ) -> bool:
        try:
            await asyncio.wait_for(connection.send(event, data), self._send_timeout)
            return True
        except asyncio.TimeoutError:
            increment_delivery_failure(DeliveryFailureReason.TIMEOUT)
            logger.warning(
                f"[Live] Push of {event} to {connection.connection_id} timed out"
            )
        except Exception as e:
            increment_delivery_failure(DeliveryFailureReason.TRANSPORT_ERROR)
            logger.warning(
                f"[Live] Push of {event} to {connection.connection_id} failed: {e}"
            )
        return False

    async def _broadcast(
        self, event: str, data: dict[str, Any], exclude: Optional[UserId] = None
    ) -> None:
        targets = [
            connection
            for user_id, connection in await self._presence.snapshot()
            if user_id != exclude
        ]
        if targets:
            await asyncio.gather(
                *(self._push(connection, event, data) for connection in targets)
            )

    async def _refresh_connection_gauge(self) -> None:
        set_active_connections(len(await self._presence.snapshot()))
