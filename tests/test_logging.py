import logging

from app.core.logging import request_id_ctx, setup_logging, user_id_ctx


def test_log_records_carry_request_and_user_context(caplog):
    setup_logging()
    rid = request_id_ctx.set("req-42")
    uid = user_id_ctx.set("nurse-1")
    try:
        with caplog.at_level(logging.INFO, logger="app.test"):
            logging.getLogger("app.test").info("resident updated")
    finally:
        request_id_ctx.reset(rid)
        user_id_ctx.reset(uid)

    record = caplog.records[-1]
    assert record.request_id == "req-42"
    assert record.user_id == "nurse-1"


def test_defaults_outside_a_request(caplog):
    setup_logging()
    with caplog.at_level(logging.INFO, logger="app.test"):
        logging.getLogger("app.test").info("startup")
    assert caplog.records[-1].request_id == "-"
    assert caplog.records[-1].user_id == "-"
