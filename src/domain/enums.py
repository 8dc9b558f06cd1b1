"""Domain enumerations and the fixed service-duration table."""

import enum


class Role(str, enum.Enum):
    USER = "USER"
    BARBER = "BARBER"


class ServiceType(str, enum.Enum):
    HAIRCUT = "haircut"
    BEARD = "beard"
    HAIRCUT_AND_BEARD = "haircut+beard"


# Minutes a barber spends per service.  Unknown / missing types fall back
# to DEFAULT_SERVICE_MINUTES.
SERVICE_MINUTES: dict[str, int] = {
    ServiceType.HAIRCUT.value: 20,
    ServiceType.BEARD.value: 5,
    ServiceType.HAIRCUT_AND_BEARD.value: 25,
}

DEFAULT_SERVICE_MINUTES = 20
