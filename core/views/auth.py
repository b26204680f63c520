from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from ..api.responses import form_error_response
from ..api.serializers import UserSerializer
from ..services.accounts import AccountService

__all__ = ["SignUpView", "SignInView", "SignOutView"]


class SignUpView(APIView):
    permission_classes = [AllowAny]
    service_class = AccountService

    def post(self, request):
        success, form, user = self.service_class().sign_up(request.data)
        if not success:
            return form_error_response(form)
        return Response(
            {"success": True, "user": UserSerializer(user, context={"request": request}).data},
            status=status.HTTP_201_CREATED,
        )


class SignInView(APIView):
    permission_classes = [AllowAny]
    service_class = AccountService

    def post(self, request):
        success, form, token = self.service_class().sign_in(request, request.data)
        if not success:
            return form_error_response(form, status_code=status.HTTP_401_UNAUTHORIZED)
        return Response(
            {
                "success": True,
                "token": token.key,
                "user": UserSerializer(token.user, context={"request": request}).data,
            }
        )


class SignOutView(APIView):
    service_class = AccountService

    def post(self, request):
        self.service_class().sign_out(request.user)
        return Response({"success": True})
