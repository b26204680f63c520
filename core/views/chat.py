from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from ..api.responses import form_error_response
from ..api.serializers import ChatSerializer, MessageSerializer
from ..models import Chat, User
from ..services.chat import ChatService

__all__ = ["ChatListView", "ChatDetailView", "ChatMessagesView", "ChatReadView", "UnreadCountView"]


class ChatListView(APIView):
    service_class = ChatService

    def get(self, request):
        chats = self.service_class(request.user).chats()
        return Response({"success": True, "chats": ChatSerializer(chats, many=True, context={"request": request}).data})

    def post(self, request):
        other_id = request.data.get("user_id")
        if not other_id:
            return Response({"success": False, "error": "user_id is required"}, status=status.HTTP_400_BAD_REQUEST)
        other = get_object_or_404(User, pk=other_id)
        chat, created = self.service_class(request.user).get_or_create_chat(other)
        return Response(
            {"success": True, "created": created, "chat": ChatSerializer(chat, context={"request": request}).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class ChatDetailView(APIView):
    service_class = ChatService

    def delete(self, request, chat_id):
        chat = get_object_or_404(Chat, pk=chat_id)
        self.service_class(request.user).delete_chat(chat)
        return Response({"success": True})


class ChatMessagesView(APIView):
    service_class = ChatService

    def get(self, request, chat_id):
        chat = get_object_or_404(Chat, pk=chat_id)
        messages = self.service_class(request.user).messages(chat)
        return Response(
            {"success": True, "messages": MessageSerializer(messages, many=True, context={"request": request}).data}
        )

    def post(self, request, chat_id):
        chat = get_object_or_404(Chat, pk=chat_id)
        success, form, message = self.service_class(request.user).send_message(chat, request.data, request.FILES)
        if not success:
            return form_error_response(form)
        return Response(
            {"success": True, "message": MessageSerializer(message, context={"request": request}).data},
            status=status.HTTP_201_CREATED,
        )


class ChatReadView(APIView):
    service_class = ChatService

    def post(self, request, chat_id):
        chat = get_object_or_404(Chat, pk=chat_id)
        updated = self.service_class(request.user).mark_read(chat)
        return Response({"success": True, "marked_read": updated})


class UnreadCountView(APIView):
    service_class = ChatService

    def get(self, request):
        return Response({"success": True, "unread_count": self.service_class(request.user).unread_count()})
