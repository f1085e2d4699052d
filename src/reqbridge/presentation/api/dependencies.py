from __future__ import annotations

from functools import lru_cache

from reqbridge.application.ports.event_recorder_port import EventRecorderPort
from reqbridge.application.ports.footprint_port import FootprintProviderPort
from reqbridge.application.use_cases.emit_client_code import CodeEmitter
from reqbridge.application.use_cases.execute_request import RequestExecutor
from reqbridge.config import Settings, settings
from reqbridge.infrastructure.adapters.footprint.request_footprint import RequestFootprintProvider
from reqbridge.infrastructure.adapters.http.factory import build_transport
from reqbridge.infrastructure.adapters.recorder.memory_recorder import InMemoryEventRecorder
from reqbridge.infrastructure.adapters.recorder.sqlite_recorder import SQLiteEventRecorder


def get_settings() -> Settings:
    return settings


def get_executor() -> RequestExecutor:
    return RequestExecutor(build_transport(settings.engine, settings.http_timeout))


def get_emitter() -> CodeEmitter:
    return CodeEmitter()


@lru_cache(maxsize=1)
def get_recorder() -> EventRecorderPort:
    if settings.recorder_db_path:
        return SQLiteEventRecorder(db_path=settings.recorder_db_path)
    return InMemoryEventRecorder()


def get_footprint_provider() -> FootprintProviderPort:
    return RequestFootprintProvider()
