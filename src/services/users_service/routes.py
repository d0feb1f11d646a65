from fastapi import APIRouter, Depends, status
from src.services.users_service.service import UserService
from src.services.users_service.dependencies import get_user_service
from src.shared.models.user_dto import DriverListResponse, LoginRequest, LoginResponse, MessageResponse, RegisterUserRequest

router = APIRouter(tags=["users"])

@router.post("/register/passenger", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register_passenger(
    request: RegisterUserRequest,
    service: UserService = Depends(get_user_service)
):
    await service.register_passenger(request)
    return MessageResponse(message="Passenger registered successfully")

@router.post("/register/driver", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register_driver(
    request: RegisterUserRequest,
    service: UserService = Depends(get_user_service)
):
    await service.register_driver(request)
    return MessageResponse(message="Driver registered successfully")

@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    service: UserService = Depends(get_user_service)
):
    return await service.login(request)

@router.get("/available-drivers/{ride_type}", response_model=DriverListResponse)
async def get_available_drivers(
    ride_type: str,
    service: UserService = Depends(get_user_service)
):
    drivers = await service.get_available_drivers(ride_type)
    return DriverListResponse(
        message=f"Found {len(drivers)} available drivers",
        drivers=[driver.to_wire() for driver in drivers],
    )
