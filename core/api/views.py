from rest_framework.generics import RetrieveAPIView
from rest_framework.permissions import IsAuthenticated

from .serializers import FullProfileSerializer


class CurrentUserView(RetrieveAPIView):
    """Return the authenticated user's profile information."""

    serializer_class = FullProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user
