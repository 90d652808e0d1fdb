"""
Tests unitaires Logging - Structured Logger

Règles testées:
    - Une entrée = une ligne JSON
    - Timestamp ISO 8601 UTC avec millisecondes
    - Valeurs None omises
    - Secrets masqués
    - Écritures concurrentes jamais entrelacées
"""

import io
import json
import re
import threading

import pytest

from ssh_admin.logging import (
    IStructuredLogger,
    LogConfig,
    LogLevel,
    MissingRequiredFieldError,
    StructuredLogger,
    file_handler,
    stream_handler,
)


class TestJsonFormat:
    """Tests format JSON."""

    def test_implements_interface(self) -> None:
        assert isinstance(StructuredLogger("test"), IStructuredLogger)

    def test_output_is_single_json_line(self) -> None:
        lines = []
        logger = StructuredLogger("ssh_admin.access", output_handler=lines.append)

        logger.info("ssh_admin.login", username="admin", successful=True)

        assert len(lines) == 1
        assert "\n" not in lines[0]
        parsed = json.loads(lines[0])
        assert parsed["message"] == "ssh_admin.login"
        assert parsed["logger"] == "ssh_admin.access"
        assert parsed["level"] == "INFO"
        assert parsed["extra"] == {"username": "admin", "successful": True}

    def test_correlation_id_in_json(self) -> None:
        logger = StructuredLogger("test")
        entry = logger.info("event", correlation_id="session-1")

        assert entry.correlation_id == "session-1"
        assert json.loads(entry.to_json())["correlation_id"] == "session-1"

    def test_empty_extra_not_in_json(self) -> None:
        entry = StructuredLogger("test").info("event")
        assert "extra" not in json.loads(entry.to_json())

    def test_non_serializable_value_stringified(self) -> None:
        entry = StructuredLogger("test").info("event", path=object())
        assert isinstance(json.loads(entry.to_json())["extra"]["path"], str)

    def test_unicode_preserved(self) -> None:
        entry = StructuredLogger("test").info("Connexion refusée")
        assert json.loads(entry.to_json())["message"] == "Connexion refusée"

    def test_empty_message_rejected(self) -> None:
        with pytest.raises(MissingRequiredFieldError):
            StructuredLogger("test").info("")

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            StructuredLogger("  ")


class TestTimestampFormat:
    """Tests horodatage."""

    ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")

    def test_iso_8601_utc_milliseconds(self) -> None:
        entry = StructuredLogger("test").info("event")
        assert self.ISO_PATTERN.match(entry.timestamp)


class TestFieldFiltering:
    """Tests omission et masquage."""

    def test_none_values_omitted(self) -> None:
        entry = StructuredLogger("test").info("event", username=None, successful=False)
        assert entry.extra == {"successful": False}

    def test_none_values_kept_when_configured(self) -> None:
        logger = StructuredLogger("test", config=LogConfig(omit_none_values=False))
        entry = logger.info("event", reason=None)
        assert entry.extra == {"reason": None}

    def test_sensitive_values_masked(self) -> None:
        entry = StructuredLogger("test").warn("event", password="hunter2", username="admin")

        assert entry.extra["password"] == "***MASKED***"
        assert entry.extra["username"] == "admin"
        assert "hunter2" not in entry.to_json()

    def test_masking_can_be_disabled(self) -> None:
        logger = StructuredLogger("test", config=LogConfig(mask_sensitive=False))
        entry = logger.info("event", token="abc")
        assert entry.extra["token"] == "abc"

    def test_extra_excluded_when_configured(self) -> None:
        logger = StructuredLogger("test", config=LogConfig(include_extra=False))
        assert logger.info("event", username="admin").extra == {}


class TestLogLevels:
    """Tests niveaux."""

    @pytest.mark.parametrize(
        "method,level",
        [
            ("debug", LogLevel.DEBUG),
            ("info", LogLevel.INFO),
            ("warn", LogLevel.WARN),
            ("error", LogLevel.ERROR),
            ("critical", LogLevel.CRITICAL),
        ],
    )
    def test_level_methods(self, method, level) -> None:
        logger = StructuredLogger("test", config=LogConfig(min_level=LogLevel.DEBUG))
        entry = getattr(logger, method)("event")
        assert entry.level == level

    def test_level_filtering(self) -> None:
        logger = StructuredLogger("test", config=LogConfig(min_level=LogLevel.WARN))

        assert logger.info("ignored") is None
        assert logger.warn("kept") is not None
        assert [e.message for e in logger.get_entries()] == ["kept"]

    def test_level_priority_order(self) -> None:
        priorities = [LogLevel.get_priority(l) for l in (LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR, LogLevel.CRITICAL)]
        assert priorities == sorted(priorities)


class TestCapture:
    """Tests capture en mémoire."""

    def test_capture_bounded(self) -> None:
        logger = StructuredLogger("test", config=LogConfig(max_captured_entries=3))
        for i in range(5):
            logger.info(f"event-{i}")

        assert [e.message for e in logger.get_entries()] == ["event-2", "event-3", "event-4"]

    def test_clear_entries(self) -> None:
        logger = StructuredLogger("test")
        logger.info("event")
        logger.clear_entries()
        assert logger.get_entries() == []

    def test_filter_by_message(self) -> None:
        logger = StructuredLogger("test")
        logger.info("ssh_admin.connect")
        logger.info("ssh_admin.login")

        assert len(logger.get_entries_by_message("ssh_admin.login")) == 1


class TestHandlers:
    """Tests sinks."""

    def test_stream_handler(self) -> None:
        buffer = io.StringIO()
        logger = StructuredLogger("test", output_handler=stream_handler(buffer))

        logger.info("one")
        logger.info("two")

        lines = buffer.getvalue().splitlines()
        assert [json.loads(l)["message"] for l in lines] == ["one", "two"]

    def test_file_handler_appends(self, tmp_path) -> None:
        path = tmp_path / "access.log"
        path.write_text('{"message": "previous"}\n', encoding="utf-8")
        logger = StructuredLogger("test", output_handler=file_handler(str(path)))

        logger.info("next")

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["message"] == "next"

    def test_concurrent_writes_not_interleaved(self) -> None:
        """Chaque ligne écrite reste un JSON complet."""
        buffer = io.StringIO()
        logger = StructuredLogger("test", output_handler=stream_handler(buffer))

        def worker(n: int) -> None:
            for i in range(50):
                logger.info("ssh_admin.login", username=f"user-{n}", attempt=i)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = buffer.getvalue().splitlines()
        assert len(lines) == 400
        for line in lines:
            assert json.loads(line)["message"] == "ssh_admin.login"
