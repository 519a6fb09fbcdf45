from rest_framework.permissions import SAFE_METHODS, BasePermission


def is_staff_user(user) -> bool:
    return bool(
        user
        and getattr(user, "is_authenticated", False)
        and (getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))
    )


class IsStaff(BasePermission):
    message = "Staff or admin access required."

    def has_permission(self, request, view):
        return is_staff_user(getattr(request, "user", None))


class IsStaffOrReadOnly(BasePermission):
    message = "Staff or admin access required."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return is_staff_user(getattr(request, "user", None))
