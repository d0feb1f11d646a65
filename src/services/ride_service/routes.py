from typing import Optional
from fastapi import APIRouter, Depends, status
from src.services.ride_service.service import RideService
from src.services.ride_service.dependencies import get_ride_service
from src.shared.models.ride_dto import (
    AcceptRideRequest,
    CancelRideRequest,
    RequestRideRequest,
    RideListResponse,
    RideResponse,
    UpdateRideRequest,
)

router = APIRouter(tags=["Rides"])

@router.post("/request-ride", status_code=status.HTTP_201_CREATED)
async def request_ride(
    request: RequestRideRequest,
    service: RideService = Depends(get_ride_service)
):
    ride = await service.request_ride(request)
    return {
        "message": "Ride requested successfully",
        "ride": ride.to_wire(),
        "requestId": ride.id,
    }

@router.post("/accept-ride/{ride_id}", response_model=RideResponse)
async def accept_ride(
    ride_id: int,
    request: Optional[AcceptRideRequest] = None,
    service: RideService = Depends(get_ride_service)
):
    driver_id = request.driver_id if request else None
    ride = await service.accept_ride(ride_id, driver_id)
    return RideResponse(message="Ride accepted successfully", ride=ride.to_wire())

@router.post("/start-ride/{ride_id}", response_model=RideResponse)
async def start_ride(
    ride_id: int,
    service: RideService = Depends(get_ride_service)
):
    ride = await service.start_ride(ride_id)
    return RideResponse(message="Ride started successfully", ride=ride.to_wire())

@router.post("/complete-ride/{ride_id}", response_model=RideResponse)
async def complete_ride(
    ride_id: int,
    service: RideService = Depends(get_ride_service)
):
    ride = await service.complete_ride(ride_id)
    return RideResponse(message="Ride completed successfully", ride=ride.to_wire())

@router.post("/cancel-ride/{ride_id}", response_model=RideResponse)
async def cancel_ride(
    ride_id: int,
    request: Optional[CancelRideRequest] = None,
    service: RideService = Depends(get_ride_service)
):
    cancelled_by = request.cancelled_by if request else None
    ride = await service.cancel_ride(ride_id, cancelled_by)
    return RideResponse(message="Ride cancelled successfully", ride=ride.to_wire())

@router.put("/update-ride/{ride_id}", response_model=RideResponse)
async def update_ride(
    ride_id: int,
    request: UpdateRideRequest,
    service: RideService = Depends(get_ride_service)
):
    ride = await service.update_ride(ride_id, request)
    return RideResponse(message="Ride updated successfully", ride=ride.to_wire())

@router.get("/rides/passenger/{passenger_id}", response_model=RideListResponse)
async def get_passenger_rides(
    passenger_id: int,
    service: RideService = Depends(get_ride_service)
):
    rides = await service.get_passenger_rides(passenger_id)
    return RideListResponse(
        message=f"Found {len(rides)} rides",
        rides=[ride.to_wire() for ride in rides],
    )

@router.get("/rides/driver/{driver_id}", response_model=RideListResponse)
async def get_driver_rides(
    driver_id: int,
    service: RideService = Depends(get_ride_service)
):
    rides = await service.get_driver_rides(driver_id)
    return RideListResponse(
        message=f"Found {len(rides)} rides",
        rides=[ride.to_wire() for ride in rides],
    )
