from domain.steps.base import Step, StepStatus
from domain.steps.http import (
    LinkSpec,
    RemoteRequestSpec,
    RemoteStep,
    ResponseFormat,
    ResponseSpec,
)

__all__ = [
    "Step",
    "StepStatus",
    "LinkSpec",
    "RemoteRequestSpec",
    "RemoteStep",
    "ResponseFormat",
    "ResponseSpec",
]
