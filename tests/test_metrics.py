import logging
import logging.handlers
import re

from fastapi.testclient import TestClient

from server.app import create_app
from utils.metrics import format_metrics_line, get_metrics_logger


def test_metrics_line_format():
    line = format_metrics_line(12, "POST", 201, "/join", "standup", "oculus")
    assert line == (
        "12,POST,201,oculus-user,Oculus-NA,oculus/join,oculus/join,oculus/join/standup,"
        "oculus,0.0.0.0,NA,NA,NA"
    )


def test_metrics_line_without_title():
    line = format_metrics_line(3, "GET", 200, "/", None, "oculus")
    assert line.split(",")[7] == "oculus//NA"
    assert len(line.split(",")) == 13


def test_metrics_logger_rotates_daily_with_retention(tmp_path):
    metrics_logger = logging.getLogger("session_router.metrics")
    saved_handlers = list(metrics_logger.handlers)
    metrics_logger.handlers.clear()
    try:
        metrics_logger = get_metrics_logger(str(tmp_path / "logs"), "oculus", 14)
        (handler,) = metrics_logger.handlers
        assert isinstance(handler, logging.handlers.TimedRotatingFileHandler)
        assert handler.when == "MIDNIGHT"
        assert handler.backupCount == 14
        assert metrics_logger.propagate is False

        metrics_logger.info("5,GET,200")
        handler.flush()
        assert (tmp_path / "logs" / "oculus.log").read_text(encoding="utf-8") == "5,GET,200\n"
        handler.close()
    finally:
        metrics_logger.handlers[:] = saved_handlers


def test_each_app_writes_metrics_to_its_own_log(test_settings, conferencing_client, tmp_path):
    TestClient(create_app(settings=test_settings, client=conferencing_client)).get("/")

    other = test_settings.model_copy(update={"log_dir": str(tmp_path / "other"), "metrics_label": "zeta"})
    TestClient(create_app(settings=other, client=conferencing_client)).post(
        "/join", params={"title": "standup", "name": "alice", "region": "us-east-1"}
    )

    lines = (tmp_path / "other" / "zeta.log").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert re.fullmatch(
        r"\d+,POST,201,zeta-user,Zeta-NA,zeta/join,zeta/join,zeta/join/standup,zeta,0\.0\.0\.0,NA,NA,NA",
        lines[0],
    )
    first_lines = (tmp_path / "logs" / "oculus.log").read_text(encoding="utf-8").splitlines()
    assert len(first_lines) == 1
    assert first_lines[0].split(",")[1:3] == ["GET", "200"]
