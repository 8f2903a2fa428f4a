from fastapi import APIRouter, Depends, HTTPException

from shopdesk.api.v1.schemas import (
    AuthResponseSchema,
    AvailabilitySchema,
    ChangePasswordRequestSchema,
    CheckUserRequestSchema,
    LoginRequestSchema,
    PasswordRulesRequestSchema,
    PasswordRulesSchema,
    RegisterRequestSchema,
    UserSchema,
)
from shopdesk.application.ports.auth import AuthResult
from shopdesk.application.use_cases.auth import AuthUseCase
from shopdesk.application.utils.validation import password_rules
from shopdesk.wiring.dependencies import get_auth_use_case

router = APIRouter()


def _to_response(result: AuthResult) -> AuthResponseSchema:
    return AuthResponseSchema(
        success=result.success,
        message=result.message,
        user=UserSchema.from_entity(result.user) if result.user else None,
    )


@router.post("/check", response_model=AvailabilitySchema)
def check_user(req: CheckUserRequestSchema, uc: AuthUseCase = Depends(get_auth_use_case)):
    try:
        availability = uc.check_availability(req.phone)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AvailabilitySchema(
        is_available=availability.is_available,
        message=availability.message,
        error=availability.error,
    )


@router.post("/register", response_model=AuthResponseSchema)
def register(req: RegisterRequestSchema, uc: AuthUseCase = Depends(get_auth_use_case)):
    try:
        result = uc.register(req.phone, req.password, req.confirm_password, req.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_response(result)


@router.post("/login", response_model=AuthResponseSchema)
def login(req: LoginRequestSchema, uc: AuthUseCase = Depends(get_auth_use_case)):
    try:
        result = uc.login(req.phone, req.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_response(result)


@router.post("/password", response_model=AuthResponseSchema)
def change_password(req: ChangePasswordRequestSchema, uc: AuthUseCase = Depends(get_auth_use_case)):
    try:
        result = uc.change_password(req.old_password, req.new_password, req.confirm_password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_response(result)


@router.post("/logout", response_model=AuthResponseSchema)
def logout(uc: AuthUseCase = Depends(get_auth_use_case)):
    uc.logout()
    return AuthResponseSchema(success=True)


@router.get("/me", response_model=UserSchema)
def me(uc: AuthUseCase = Depends(get_auth_use_case)):
    user = uc.salon_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return UserSchema.from_entity(user)


@router.post("/password-rules", response_model=PasswordRulesSchema)
def check_password_rules(req: PasswordRulesRequestSchema):
    rules = password_rules(req.password)
    return PasswordRulesSchema(**rules, valid=all(rules.values()))
