from django.urls import path
from .views import (
    AddressDetailView,
    AddressListView,
    UsernameAvailabilityView,
    RegisterView,
    LoginView,
    StaffLoginView,
    RefreshView,
    MeView,
    LogoutView,
)

urlpatterns = [
    path(
        "validate-username/",
        UsernameAvailabilityView.as_view(),
        name="auth-validate-username",
    ),
    path("register/", RegisterView.as_view(), name="auth-register"),
    path("login/", LoginView.as_view(), name="auth-login"),
    path("login/staff/", StaffLoginView.as_view(), name="auth-staff-login"),
    path("refresh/", RefreshView.as_view(), name="auth-refresh"),
    path("me/", MeView.as_view(), name="auth-me"),
    path("me/addresses/", AddressListView.as_view(), name="auth-addresses"),
    path(
        "me/addresses/<int:address_id>/",
        AddressDetailView.as_view(),
        name="auth-address-detail",
    ),
    path("logout/", LogoutView.as_view(), name="auth-logout"),
]
