"""pyexposure - Async exposure-notification status tracker."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyexposure")
except PackageNotFoundError:
    __version__ = "0+local"
from pyexposure._crypto import open_sealed
from pyexposure.backend import BackendInterface, BackendService, MockBackend, create_backend
from pyexposure.backfill import BackfillCursor, FetchRequest
from pyexposure.bridge import (
    ArchiveUnpackingBridge,
    ExposureNotificationBridge,
    LoggingNotificationPresenter,
    NotificationPresenter,
    default_translate,
)
from pyexposure.config import ExposureConfig
from pyexposure.evaluator import ExposureEvaluator
from pyexposure.exceptions import (
    ExposureApiError,
    ExposureAuthenticationError,
    ExposureBridgeError,
    ExposureConfigError,
    ExposureCryptoError,
    ExposureError,
    ExposureTransportError,
    NoSubmissionKeysError,
)
from pyexposure.models import (
    DiagnosedStatus,
    ExposedStatus,
    ExposureConfiguration,
    ExposureInformation,
    ExposureStatus,
    ExposureSummary,
    MonitoringStatus,
    SubmissionKeySet,
    SystemStatus,
    TemporaryExposureKey,
    parse_exposure_status,
)
from pyexposure.observable import MutableObservable, Observable
from pyexposure.scheduler import BackgroundScheduler
from pyexposure.service import ExposureNotificationService
from pyexposure.storage import (
    JsonFileStorage,
    MemorySecureStorage,
    MemoryStorage,
    PersistencyProvider,
    SecurePersistencyProvider,
    SecureStorageOptions,
)
from pyexposure.submission import SubmissionCycleManager

__all__ = [
    "__version__",
    "ArchiveUnpackingBridge",
    "BackendInterface",
    "BackendService",
    "BackfillCursor",
    "BackgroundScheduler",
    "DiagnosedStatus",
    "ExposedStatus",
    "ExposureApiError",
    "ExposureAuthenticationError",
    "ExposureBridgeError",
    "ExposureConfig",
    "ExposureConfigError",
    "ExposureConfiguration",
    "ExposureCryptoError",
    "ExposureError",
    "ExposureEvaluator",
    "ExposureInformation",
    "ExposureNotificationBridge",
    "ExposureNotificationService",
    "ExposureStatus",
    "ExposureSummary",
    "ExposureTransportError",
    "FetchRequest",
    "JsonFileStorage",
    "LoggingNotificationPresenter",
    "MemorySecureStorage",
    "MemoryStorage",
    "MockBackend",
    "MonitoringStatus",
    "MutableObservable",
    "NoSubmissionKeysError",
    "NotificationPresenter",
    "Observable",
    "PersistencyProvider",
    "SecurePersistencyProvider",
    "SecureStorageOptions",
    "SubmissionCycleManager",
    "SubmissionKeySet",
    "SystemStatus",
    "TemporaryExposureKey",
    "create_backend",
    "default_translate",
    "open_sealed",
    "parse_exposure_status",
]
