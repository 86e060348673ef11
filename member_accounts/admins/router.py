"""
Administrator routes. Creating admins, changing admin roles and removing
admins or member accounts require a SuperAdmin.
"""
from fastapi import APIRouter, Depends, status

from ..accounts.router import success
from ..dependencies import get_admin_service, get_current_admin, require_super_admin
from .models import Admin
from .schemas import AdminCreate, AdminLogin, AdminProfileUpdate, AdminRoleUpdate
from .service import AdminService

router = APIRouter(prefix="/api/v1/admins", tags=["Admins"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_admin(
    payload: AdminCreate,
    current_admin: Admin = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    data = service.create(
        full_name=payload.full_name,
        email=payload.email,
        role=payload.role,
        password=payload.password,
        created_by=current_admin.id,
    )
    return success("Admin created successfully", data)


@router.post("/login")
def login_admin(payload: AdminLogin, service: AdminService = Depends(get_admin_service)):
    return success("Login successful", service.login(payload.email, payload.password))


@router.get("")
def list_admins(
    current_admin: Admin = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return success("Admins fetched successfully", service.list_all())


@router.get("/profile")
def get_admin_profile(
    current_admin: Admin = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return success("Admin profile fetched successfully", service.get_profile(current_admin.id))


@router.patch("/profile")
def update_admin_profile(
    payload: AdminProfileUpdate,
    current_admin: Admin = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    admin = service.update_profile(current_admin.id, payload.model_dump(exclude_unset=True))
    return success("Admin profile updated successfully", admin)


@router.patch("/{admin_id}/role")
def update_admin_role(
    admin_id: int,
    payload: AdminRoleUpdate,
    current_admin: Admin = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    admin = service.update_role(admin_id, payload.role, changed_by=current_admin.id)
    return success("Admin role updated successfully", admin)


@router.delete("/accounts/{account_id}")
def remove_account(
    account_id: int,
    current_admin: Admin = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    return success("Account deleted successfully", service.remove_account(account_id, removed_by=current_admin.id))


@router.delete("/{admin_id}")
def remove_admin(
    admin_id: int,
    current_admin: Admin = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    return success("Admin deleted successfully", service.remove(admin_id, removed_by=current_admin.id))
