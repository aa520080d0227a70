from django.http import JsonResponse
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from .responses import success_response


class HealthView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(summary="Health check", responses={200: dict})
    def get(self, request):
        return success_response({'status': 'OK'}, message='Server is running')


def route_not_found(request, exception=None):
    return JsonResponse({'success': False, 'message': 'Route not found'}, status=404)


def server_error(request):
    return JsonResponse({'success': False, 'message': 'Something went wrong!'}, status=500)
