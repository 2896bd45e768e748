"""Auth use cases."""

from elonara.application.usecase.auth.register_user import (
    RegisterUserRequest,
    RegisterUserResponse,
    RegisterUserUseCase,
)

__all__ = ["RegisterUserRequest", "RegisterUserResponse", "RegisterUserUseCase"]
