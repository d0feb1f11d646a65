from src.shared.models.enums import RideStatus

class RideStateMachine:
    """
    Номинальный граф статусов поездки.

    Requested -> Accepted -> In Progress -> Completed,
    Cancelled: из Requested или Accepted.
    """
    ALLOWED_TRANSITIONS = {
        RideStatus.REQUESTED: [RideStatus.ACCEPTED, RideStatus.CANCELLED],
        RideStatus.ACCEPTED: [RideStatus.IN_PROGRESS, RideStatus.CANCELLED],
        RideStatus.IN_PROGRESS: [RideStatus.COMPLETED],
        RideStatus.COMPLETED: [],
        RideStatus.CANCELLED: []
    }

    @staticmethod
    def allowed_sources(new_status: RideStatus) -> list[RideStatus]:
        """Статусы, из которых граф разрешает перейти в new_status."""
        return [
            status
            for status, targets in RideStateMachine.ALLOWED_TRANSITIONS.items()
            if new_status in targets
        ]
