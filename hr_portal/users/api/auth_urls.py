from django.urls import path

from .auth_views import JWTCreateView
from .auth_views import JWTRefreshView
from .auth_views import JWTVerifyView
from .views import AreaAccessView
from .views import SignupView
from .views import ValidateRoleView

urlpatterns = [
    path("signup/", SignupView.as_view(), name="signup"),
    path("validate-role/", ValidateRoleView.as_view(), name="validate-role"),
    path("access/", AreaAccessView.as_view(), name="access"),
    path("jwt/create/", JWTCreateView.as_view(), name="jwt-create"),
    path("jwt/refresh/", JWTRefreshView.as_view(), name="jwt-refresh"),
    path("jwt/verify/", JWTVerifyView.as_view(), name="jwt-verify"),
]
