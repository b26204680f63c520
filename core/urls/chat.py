"""Chat endpoints."""

from django.urls import path

from ..views import chat

urlpatterns = [
    path("api/chats/", chat.ChatListView.as_view(), name="chats"),
    path("api/chats/unread-count/", chat.UnreadCountView.as_view(), name="chat_unread_count"),
    path("api/chats/<int:chat_id>/", chat.ChatDetailView.as_view(), name="chat_detail"),
    path("api/chats/<int:chat_id>/messages/", chat.ChatMessagesView.as_view(), name="chat_messages"),
    path("api/chats/<int:chat_id>/read/", chat.ChatReadView.as_view(), name="chat_read"),
]
