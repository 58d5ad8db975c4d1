"""
UGP — API v1: User group permissions
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from app.core.security import CurrentUser, require_permission_manager
from app.database import get_db
from app.services.group_permissions import GroupPermissionsService

router = APIRouter(prefix="/ugp", tags=["user group permissions"])


class ApplyRequest(BaseModel):
    user_id: int


class UserTypePermissionsIn(BaseModel):
    user_type_id: int
    permissions: List[str] = Field(default_factory=list)

    @field_validator("permissions")
    @classmethod
    def single_letters(cls, v: List[str]) -> List[str]:
        for letter in v:
            if len(letter) != 1:
                raise ValueError(f"Permission {letter!r} must be a single letter")
        return v


class SetPermissionsRequest(BaseModel):
    node_id: int
    user_type_permissions: List[UserTypePermissionsIn] = Field(default_factory=list)
    replace_permissions_on_users: bool = False


class OperationResponse(BaseModel):
    success: bool
    reason: Optional[str] = None
    error_code: Optional[str] = None
    detail: Dict[str, Any] = Field(default_factory=dict)


class ActionPermissionOut(BaseModel):
    letter: str
    label: str
    has_permission: bool


class UserTypePermissionsOut(BaseModel):
    user_type_id: int
    label: str
    permissions: List[ActionPermissionOut]


class GroupPermissionsResponse(BaseModel):
    user_type_permissions: List[UserTypePermissionsOut]


@router.post("/apply-all-group-permissions", response_model=OperationResponse)
def apply_all_group_permissions(
    req: ApplyRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission_manager),
):
    result = GroupPermissionsService(db).apply_all_group_permissions(req.user_id)
    return OperationResponse(**result.to_dict())


@router.post("/set-group-permissions", response_model=OperationResponse)
def set_group_permissions(
    req: SetPermissionsRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission_manager),
):
    # A repeated user type id keeps its last entry
    permissions_by_type_id = {
        utp.user_type_id: utp.permissions for utp in req.user_type_permissions
    }
    result = GroupPermissionsService(db).set_group_permissions(
        req.node_id,
        permissions_by_type_id,
        replace_permissions_on_users=req.replace_permissions_on_users,
    )
    return OperationResponse(**result.to_dict())


@router.get("/group-permissions", response_model=GroupPermissionsResponse)
def get_group_permissions(
    response: Response,
    node_id: int = Query(...),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_permission_manager),
):
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    matrix = GroupPermissionsService(db).get_group_permissions(
        node_id, current_user.user_id
    )
    return GroupPermissionsResponse(
        user_type_permissions=[
            UserTypePermissionsOut(
                user_type_id=row.user_type_id,
                label=row.label,
                permissions=[
                    ActionPermissionOut(
                        letter=p.letter, label=p.label, has_permission=p.has_permission
                    )
                    for p in row.permissions
                ],
            )
            for row in matrix
        ]
    )
