from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from ..forms import MessageForm
from ..models import Chat, Message

logger = logging.getLogger(__name__)


class ChatService:
    """One-to-one conversations between matched users."""

    def __init__(self, user):
        self.user = user

    def _ensure_participant(self, chat: Chat) -> None:
        if not chat.has_participant(self.user):
            raise PermissionError("You are not a participant in this chat.")

    # Query helpers ----------------------------------------------------
    def chats(self) -> list[Chat]:
        queryset = (
            Chat.objects.filter(Q(user1=self.user) | Q(user2=self.user))
            .select_related("user1", "user2")
            .annotate(
                unread_count=Count(
                    "messages",
                    filter=Q(messages__is_read=False) & ~Q(messages__sender=self.user),
                )
            )
            .order_by("-updated_at", "-id")
        )
        chats = list(queryset)
        for chat in chats:
            chat.other_user = chat.other_participant(self.user)
        return chats

    def messages(self, chat: Chat):
        self._ensure_participant(chat)
        return chat.messages.select_related("sender").order_by("created_at", "id")

    def unread_count(self) -> int:
        return (
            Message.objects.filter(Q(chat__user1=self.user) | Q(chat__user2=self.user), is_read=False)
            .exclude(sender=self.user)
            .count()
        )

    # Update handlers --------------------------------------------------
    def get_or_create_chat(self, other) -> tuple[Chat, bool]:
        if other.pk == self.user.pk:
            raise ValueError("You cannot start a chat with yourself.")
        existing = (
            Chat.objects.filter(
                Q(user1=self.user, user2=other) | Q(user1=other, user2=self.user)
            )
            .order_by("created_at", "id")
            .first()
        )
        if existing is not None:
            return existing, False
        chat = Chat.objects.create(user1=self.user, user2=other)
        logger.info("Chat %s started between users %s and %s", chat.pk, self.user.pk, other.pk)
        return chat, True

    def send_message(self, chat: Chat, data, files=None) -> tuple[bool, MessageForm, Any]:
        self._ensure_participant(chat)
        form = MessageForm(data, files)
        if not form.is_valid():
            return False, form, None

        content = (form.cleaned_data.get("content") or "").strip()
        image = form.cleaned_data.get("image")
        now = timezone.now()
        with transaction.atomic():
            message = Message.objects.create(
                chat=chat,
                sender=self.user,
                content=content,
                message_type="image" if image else "text",
                image=image,
                is_delivered=True,
                created_at=now,
            )
            chat.last_message = message.preview
            chat.last_message_at = now
            chat.updated_at = now
            chat.save(update_fields=["last_message", "last_message_at", "updated_at"])
        logger.debug("User %s sent message %s in chat %s", self.user.pk, message.pk, chat.pk)
        return True, form, message

    def mark_read(self, chat: Chat) -> int:
        self._ensure_participant(chat)
        return chat.messages.filter(is_read=False).exclude(sender=self.user).update(is_read=True)

    def delete_chat(self, chat: Chat) -> None:
        self._ensure_participant(chat)
        chat_id = chat.pk
        with transaction.atomic():
            for message in chat.messages.filter(message_type="image"):
                if message.image:
                    message.image.delete(save=False)
            chat.messages.all().delete()
            chat.delete()
        logger.info("User %s deleted chat %s", self.user.pk, chat_id)
