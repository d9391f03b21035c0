"""
Error pages and request logging.
"""
from flask import Flask

from app import access_logger, configure_logging


def test_500_page(client):
    response = client.get("/500")

    assert response.status_code == 500
    assert b"Some error occurred!" in response.data


def test_unknown_route_renders_404(client):
    response = client.get("/no-such-page")

    assert response.status_code == 404
    assert b"Page Not Found!" in response.data


def test_requests_are_written_to_access_log(client, tmp_path):
    log_file = tmp_path / "access.log"
    dummy = Flask("access-log-test")
    dummy.config.update(LOG_LEVEL="INFO", ACCESS_LOG_FILE=str(log_file))
    configure_logging(dummy)

    try:
        client.get("/products", headers={"User-Agent": "pytest-agent"})
    finally:
        for handler in list(access_logger.handlers):
            if getattr(handler, "baseFilename", None) == str(log_file):
                access_logger.removeHandler(handler)
                handler.close()

    line = log_file.read_text(encoding="utf-8").strip()
    assert '"GET /products HTTP/1.1" 200' in line
    assert line.endswith('"-" "pytest-agent"')
