from typing import List, Optional
from src.services.users_service.repository import UserRepository
from src.infra.database import store_operation
from src.infra.identity_provider import IdentityProvider
from src.shared.exceptions import ClientInputError, UserNotFoundError
from src.shared.models.user_dto import (
    AuthInfo,
    DriverDTO,
    LoginRequest,
    LoginResponse,
    RegisterUserRequest,
    UserDTO,
)
from src.shared.models.enums import UserType
from src.common.logger import log_info, log_error

class UserService:
    def __init__(self, repository: UserRepository, identity: IdentityProvider):
        self.repository = repository
        self.identity = identity

    async def register_passenger(self, request: RegisterUserRequest) -> UserDTO:
        """Создаёт аккаунт у провайдера и запись пассажира."""
        self._validate_registration(request, UserType.PASSENGER)

        account = await self.identity.create_account(request.email, request.password)
        try:
            async with store_operation("регистрация пассажира"):
                user = await self.repository.create_passenger(account.id, request.name)
        except Exception:
            await self._log_dangling_account(account.id, request.email)
            raise

        await log_info(f"Зарегистрирован пассажир {user.id}")
        return user

    async def register_driver(self, request: RegisterUserRequest) -> DriverDTO:
        """
        Создаёт аккаунт у провайдера, затем пользователя и профиль водителя.

        Обе записи в БД — одна транзакция; аккаунт провайдера при сбое не удаляется.
        """
        self._validate_registration(request, UserType.DRIVER)

        account = await self.identity.create_account(request.email, request.password)
        try:
            async with store_operation("регистрация водителя"):
                driver = await self.repository.create_driver(account.id, request.name, request.ride_type)
        except Exception:
            await self._log_dangling_account(account.id, request.email)
            raise

        await log_info(f"Зарегистрирован водитель {driver.id} ({driver.ride_type})")
        return driver

    async def login(self, request: LoginRequest) -> LoginResponse:
        """Вход по паролю: сессия провайдера + локальный профиль."""
        if not request.email or not request.password:
            raise ClientInputError("Missing required fields")

        session = await self.identity.sign_in_with_password(request.email, request.password)

        async with store_operation("вход"):
            user = await self.repository.get_user_by_auth_id(session.account.id)
            if user is None:
                raise UserNotFoundError("User not found in database")

            driver: Optional[DriverDTO] = None
            if user.type == UserType.DRIVER:
                driver = await self.repository.get_driver_by_auth_id(session.account.id)

        await log_info(f"Вход пользователя {user.id} ({user.type})")
        return LoginResponse(
            message="Login successful",
            auth=AuthInfo(
                name=user.name,
                ride_type=driver.ride_type if driver else None,
                id=user.id,
                auth_id=session.account.id,
                email=session.account.email,
                access_token=session.access_token,
                refresh_token=session.refresh_token,
            ),
            userType=user.type,
            driverInfo=driver.to_wire() if driver else None,
        )

    async def get_available_drivers(self, ride_type: str) -> List[DriverDTO]:
        async with store_operation("свободные водители"):
            return await self.repository.get_available_drivers(ride_type)

    @staticmethod
    def _validate_registration(request: RegisterUserRequest, expected: UserType) -> None:
        if request.type != expected.value:
            raise ClientInputError("Invalid user type")
        if not request.email or not request.password:
            raise ClientInputError("Missing required fields")

    @staticmethod
    async def _log_dangling_account(auth_id: str, email: Optional[str]) -> None:
        # TODO: удалять аккаунт провайдера (admin API DELETE /admin/users/{id}), когда решим политику компенсации
        await log_error(f"Аккаунт провайдера {auth_id} ({email}) создан, но запись в БД не сохранена")
