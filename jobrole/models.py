from __future__ import annotations
from enum import Enum


class Role(str, Enum):
    HOST = "HOST"
    WAIT = "WAIT"
    BRUN = "BRUN"
    KRUN = "KRUN"
    BART = "BART"
    MGR = "MGR"


ROLE_LABELS: dict[Role, str] = {
    Role.HOST: "Host / Cashier",
    Role.WAIT: "Waiter",
    Role.BRUN: "Bar Runner",
    Role.KRUN: "Kitchen Runner",
    Role.BART: "Bartender",
    Role.MGR: "Manager",
}


class DayType(str, Enum):
    weekday = "weekday"
    weekend = "weekend"


def role_label(role: Role | str) -> str:
    return ROLE_LABELS.get(Role(role), str(role))
