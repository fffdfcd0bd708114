"""Transaction execution against a StatelessVM endpoint with retries and a mock fallback."""

from __future__ import annotations

import asyncio
import json
import logging
import random
import time
import urllib.error
import urllib.request
from dataclasses import asdict, dataclass, field
from enum import Enum, auto
from typing import Any, Protocol

log = logging.getLogger(__name__)

_MOCK_WITNESS_TIME_MS = 250
_MOCK_SUBMISSION_TIME_MS = 150
_MOCK_VERIFICATION_TIME_MS = 120
_MOCK_RESULT = "0x" + "0" * 63 + "1"
_UNAVAILABLE_MARKERS = ("404 Not Found", "connection", "timed out")


class ExecutionStatus(Enum):
    """Stage reached by the most recent execution."""

    PENDING = auto()
    GENERATING_WITNESSES = auto()
    WITNESS_GENERATION_FAILED = auto()
    SUBMITTING_TRANSACTION = auto()
    SUBMISSION_FAILED = auto()
    CONFIRMED = auto()
    FAILED = auto()


@dataclass
class PerformanceMetrics:
    """Timings and outcome of the most recent execution."""

    witness_generation_time_ms: int = 0
    transaction_submission_time_ms: int = 0
    confirmation_time_ms: int = 0
    gas_used: int = 0
    gas_price_gwei: float = 0.0
    success: bool = False
    error_message: str | None = None

    @property
    def total_time_ms(self) -> int:
        return self.witness_generation_time_ms + self.transaction_submission_time_ms


class ExecutionError(Exception):
    """A transaction could not be executed."""


@dataclass
class SecurityVerificationRequest:
    """Which security checks the VM should run before executing."""

    enabled: bool = True
    max_risk_score: int = 50
    address: str = ""
    verify_reentrancy: bool = True
    verify_integer_underflow: bool = True
    verify_integer_overflow: bool = True
    verify_unchecked_calls: bool = True
    verify_upgradability: bool = True
    verify_mev_vulnerability: bool = True
    verify_cross_contract_reentrancy: bool = True
    verify_precision_loss: bool = True
    verify_gas_griefing: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SecurityWarning:
    """One finding reported by security verification."""

    description: str
    severity: Any

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SecurityWarning:
        return cls(description=str(data.get("description", "")), severity=data.get("severity"))


@dataclass
class SecurityVerificationResult:
    """Outcome of security verification for one transaction."""

    passed: bool
    risk_score: int
    warnings: list[SecurityWarning] | None = None
    execution_time_ms: int | None = None
    vulnerability_count: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SecurityVerificationResult:
        warnings = data.get("warnings")
        return cls(
            passed=bool(data.get("passed", False)),
            risk_score=int(data.get("risk_score", 0)),
            warnings=None if warnings is None else [SecurityWarning.from_dict(w) for w in warnings],
            execution_time_ms=data.get("execution_time_ms"),
            vulnerability_count=data.get("vulnerability_count"),
        )


@dataclass
class StatelessTxRequest:
    """A transaction to submit to the VM."""

    from_address: str
    to: str
    value: str
    data: str
    gas_limit: str
    gas_price: str
    security_verification: SecurityVerificationRequest = field(
        default_factory=SecurityVerificationRequest
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_address,
            "to": self.to,
            "value": self.value,
            "data": self.data,
            "gas_limit": self.gas_limit,
            "gas_price": self.gas_price,
            "security_verification": self.security_verification.to_dict(),
        }


@dataclass
class StatelessTxResponse:
    """The VM's answer to a submitted transaction."""

    tx_hash: str
    status: str
    result: str | None = None
    error: str | None = None
    security_verification: SecurityVerificationResult | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatelessTxResponse:
        verification = data.get("security_verification")
        return cls(
            tx_hash=str(data.get("tx_hash", "")),
            status=str(data.get("status", "")),
            result=data.get("result"),
            error=data.get("error"),
            security_verification=(
                None if verification is None else SecurityVerificationResult.from_dict(verification)
            ),
        )


class TransactionClient(Protocol):
    async def execute_transaction(self, tx_request: StatelessTxRequest) -> StatelessTxResponse:
        ...


class _HttpClient:
    """Posts transactions as JSON to ``<url>/execute``."""

    def __init__(self, base_url: str) -> None:
        self._url = f"{base_url}/execute"

    def _post(self, payload: bytes) -> dict[str, Any]:
        request = urllib.request.Request(
            self._url,
            data=payload,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(request) as response:
                return json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            raise ConnectionError(f"HTTP {exc.code} {exc.reason}") from exc
        except urllib.error.URLError as exc:
            raise ConnectionError(f"connection error: {exc.reason}") from exc

    async def execute_transaction(self, tx_request: StatelessTxRequest) -> StatelessTxResponse:
        payload = json.dumps(tx_request.to_dict()).encode("utf-8")
        data = await asyncio.to_thread(self._post, payload)
        return StatelessTxResponse.from_dict(data)


def _indicates_unavailable(message: str) -> bool:
    return any(marker in message for marker in _UNAVAILABLE_MARKERS)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class StatelessVmExecutor:
    """Executes transactions with timeout, exponential-backoff retries and a mock fallback."""

    def __init__(
        self,
        stateless_vm_url: str,
        verification_timeout_ms: int,
        max_retry_attempts: int,
        retry_backoff_ms: int,
        client: TransactionClient | None = None,
    ) -> None:
        self.stateless_vm_url = stateless_vm_url
        self.verification_timeout_ms = verification_timeout_ms
        self.max_retry_attempts = max_retry_attempts
        self.retry_backoff_ms = retry_backoff_ms
        self._client: TransactionClient = client if client is not None else _HttpClient(stateless_vm_url)
        self._metrics = PerformanceMetrics()
        self._status = ExecutionStatus.PENDING
        self._use_mock = "local-mock" in stateless_vm_url or "localhost" in stateless_vm_url
        log.info("Initializing StatelessVM executor with URL: %s", stateless_vm_url)
        if self._use_mock:
            log.info("StatelessVM initialized in mock mode")

    @property
    def metrics(self) -> PerformanceMetrics:
        return self._metrics

    @property
    def status(self) -> ExecutionStatus:
        return self._status

    @property
    def use_mock(self) -> bool:
        return self._use_mock

    def enable_mock_mode(self) -> None:
        """Switch to local simulated execution."""
        if not self._use_mock:
            log.warning("Enabling mock mode due to connection issues with StatelessVM endpoint")
            self._use_mock = True

    async def execute_transaction(self, tx_request: StatelessTxRequest) -> StatelessTxResponse:
        """Execute a transaction, retrying on failure; raise ExecutionError when it cannot."""
        if self._use_mock:
            return self._execute_mock(tx_request)

        self._metrics = PerformanceMetrics()
        self._status = ExecutionStatus.GENERATING_WITNESSES
        witness_start = time.monotonic()
        last_error: ExecutionError | None = None

        for attempt in range(1, self.max_retry_attempts + 1):
            try:
                response = await self._execute_with_verification(tx_request)
            except ExecutionError as exc:
                last_error = ExecutionError(str(exc))
                backoff_ms = self.retry_backoff_ms * 2 ** (attempt - 1)
                if _indicates_unavailable(str(exc)):
                    log.warning(
                        "StatelessVM endpoint unavailable (%s). Will fall back to mock mode "
                        "after retry attempts",
                        exc,
                    )
                log.warning(
                    "Execution failed, retrying in %dms (attempt %d/%d): %s",
                    backoff_ms, attempt, self.max_retry_attempts, exc,
                )
                await asyncio.sleep(backoff_ms / 1000)
            else:
                self._metrics.witness_generation_time_ms = _elapsed_ms(witness_start)
                self._metrics.success = True
                self._status = ExecutionStatus.CONFIRMED
                return response

        log.error(
            "Transaction execution failed after %d retries: %s", self.max_retry_attempts, last_error
        )
        self._status = ExecutionStatus.FAILED
        self._metrics.error_message = None if last_error is None else str(last_error)

        if last_error is not None and _indicates_unavailable(str(last_error)):
            log.info("Automatically falling back to mock mode after endpoint connection failures")
            self.enable_mock_mode()
            return self._execute_mock(tx_request)

        if last_error is not None:
            raise last_error
        raise ExecutionError("Transaction execution failed with unknown error")

    async def _execute_with_verification(
        self, tx_request: StatelessTxRequest
    ) -> StatelessTxResponse:
        self._status = ExecutionStatus.SUBMITTING_TRANSACTION
        submission_start = time.monotonic()

        if self._use_mock:
            await asyncio.sleep(0.5)
            return self._execute_mock(tx_request)

        try:
            response = await asyncio.wait_for(
                self._client.execute_transaction(tx_request),
                timeout=self.verification_timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            self._status = ExecutionStatus.WITNESS_GENERATION_FAILED
            message = f"Witness generation timed out after {self.verification_timeout_ms}ms"
            log.error(message)
            raise ExecutionError(message) from None
        except Exception as exc:
            log.error("Transaction submission error: %s", exc)
            self._status = ExecutionStatus.SUBMISSION_FAILED
            raise ExecutionError(f"Transaction submission error: {exc}") from exc

        self._metrics.transaction_submission_time_ms = _elapsed_ms(submission_start)

        verification = response.security_verification
        if verification is not None:
            if not verification.passed:
                warnings = verification.warnings or []
                log.error("Security verification failed with %d warnings", len(warnings))
                for warning in warnings:
                    log.error(
                        "Security warning: %s (severity: %s)", warning.description, warning.severity
                    )
                raise ExecutionError(
                    f"Security verification failed with {len(warnings)} warnings"
                )
            log.debug("Security verification passed successfully")

        if response.status != "success":
            raise ExecutionError(f"Transaction failed with status: {response.status}")
        return response

    def _execute_mock(self, tx_request: StatelessTxRequest) -> StatelessTxResponse:
        log.debug("Using mock StatelessVM implementation")
        self._metrics.witness_generation_time_ms = _MOCK_WITNESS_TIME_MS
        self._metrics.transaction_submission_time_ms = _MOCK_SUBMISSION_TIME_MS

        tx_hash = "0x" + "".join(f"{random.getrandbits(64):x}" for _ in range(4))
        verification = (
            SecurityVerificationResult(
                passed=True,
                risk_score=0,
                warnings=None,
                execution_time_ms=_MOCK_VERIFICATION_TIME_MS,
                vulnerability_count=0,
            )
            if tx_request.security_verification.enabled
            else None
        )
        return StatelessTxResponse(
            tx_hash=tx_hash,
            status="success",
            result=_MOCK_RESULT,
            error=None,
            security_verification=verification,
        )