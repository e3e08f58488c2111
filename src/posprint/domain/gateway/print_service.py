"""Abstract gateway to the external print service.

Expected failures (backend down, slow, rejecting, talking nonsense) come
back as ``ServiceError`` values.  Implementations raise only for
programmer errors, such as being handed a document that did not go
through the validator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from posprint.domain.model.documents import (
    PrintInvoiceRequest,
    PrintInvoiceResponse,
    PrintOrderRequest,
    PrintOrderResponse,
)
from posprint.domain.service.contract_validator import ValidatedDocument


class ServiceErrorKind(Enum):
    UNREACHABLE = "UNREACHABLE"
    TIMEOUT = "TIMEOUT"
    REJECTED_BY_BACKEND = "REJECTED_BY_BACKEND"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


@dataclass(frozen=True)
class ServiceError:
    kind: ServiceErrorKind
    message: str
    code: str | None = None  # backend-supplied, REJECTED_BY_BACKEND only

    @staticmethod
    def unreachable(message: str) -> ServiceError:
        return ServiceError(ServiceErrorKind.UNREACHABLE, message)

    @staticmethod
    def timeout(message: str) -> ServiceError:
        return ServiceError(ServiceErrorKind.TIMEOUT, message)

    @staticmethod
    def rejected(code: str, message: str) -> ServiceError:
        return ServiceError(ServiceErrorKind.REJECTED_BY_BACKEND, message, code)

    @staticmethod
    def malformed(message: str) -> ServiceError:
        return ServiceError(ServiceErrorKind.MALFORMED_RESPONSE, message)

    def __str__(self) -> str:
        if self.code:
            return f"{self.kind.value} [{self.code}]: {self.message}"
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class ServiceConfig:
    base_url: str
    timeout: float

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


class PrintServiceGateway(ABC):

    @abstractmethod
    async def check_availability(self) -> bool | ServiceError:
        """Probe the health endpoint once."""

    @abstractmethod
    async def send_order(
        self, validated: ValidatedDocument[PrintOrderRequest]
    ) -> PrintOrderResponse | ServiceError:
        """Submit a validated kitchen ticket."""

    @abstractmethod
    async def send_invoice(
        self, validated: ValidatedDocument[PrintInvoiceRequest]
    ) -> PrintInvoiceResponse | ServiceError:
        """Submit a validated invoice."""

    @abstractmethod
    def config(self) -> ServiceConfig:
        """Return the endpoint settings in use."""
