import json

from agentic_invest.agents.advisor import (
    GENERIC_VALIDATION_ERROR,
    UNEXPECTED_FORMAT_ERROR,
    TradesAccepted,
    TradesRejected,
    validate_trade_payload,
)

from conftest import make_trade, trades_payload

TICKERS = ("PLTR", "SOFI", "RBLX", "HOOD", "AFRM")


def test_five_valid_trades_are_accepted():
    result = validate_trade_payload(trades_payload())

    assert isinstance(result, TradesAccepted)
    assert [t.model_dump(by_alias=True) for t in result.trades] == [
        make_trade(t) for t in TICKERS
    ]


def test_unknown_trade_keys_are_dropped():
    trades = [dict(make_trade(t), delta=0.3) for t in TICKERS]

    result = validate_trade_payload({"trades": trades})

    assert isinstance(result, TradesAccepted)
    assert "delta" not in result.trades[0].model_dump(by_alias=True)
    assert result.trades[0].model_dump(by_alias=True) == make_trade("PLTR")


def test_error_message_is_returned_verbatim():
    message = "Fewer than 5 trades meet criteria"

    result = validate_trade_payload(json.dumps({"error": message}))

    assert result == TradesRejected(message, "business_rule")


def test_wrong_trade_count_is_a_schema_error():
    payload = json.dumps({"trades": [make_trade(t) for t in TICKERS[:4]]})

    assert validate_trade_payload(payload) == TradesRejected(GENERIC_VALIDATION_ERROR, "schema")


def test_pop_must_be_numeric():
    for bad in ("0.7", True, None):
        trades = [make_trade(t) for t in TICKERS]
        trades[2]["pop"] = bad

        result = validate_trade_payload(json.dumps({"trades": trades}))

        assert result == TradesRejected(GENERIC_VALIDATION_ERROR, "schema")


def test_missing_field_is_a_schema_error():
    trades = [make_trade(t) for t in TICKERS]
    del trades[0]["legs"]

    result = validate_trade_payload(json.dumps({"trades": trades}))

    assert isinstance(result, TradesRejected)
    assert result.reason == "schema"


def test_non_object_trade_is_a_schema_error():
    trades = [make_trade(t) for t in TICKERS[:4]] + ["PLTR"]

    result = validate_trade_payload(json.dumps({"trades": trades}))

    assert result.reason == "schema"


def test_unparseable_payloads_are_format_errors():
    for raw in ("not json", "[1, 2]", json.dumps({}), json.dumps({"trades": "none"}), None):
        assert validate_trade_payload(raw) == TradesRejected(UNEXPECTED_FORMAT_ERROR, "format")


def test_code_fenced_payload_is_accepted():
    raw = "```json\n" + trades_payload() + "\n```"

    assert isinstance(validate_trade_payload(raw), TradesAccepted)


def test_camel_case_probability_alias():
    trades = [make_trade(t) for t in TICKERS]
    for trade in trades:
        trade["probabilityOfProfit"] = trade.pop("pop")

    result = validate_trade_payload({"trades": trades})

    assert isinstance(result, TradesAccepted)
    assert result.trades[0].model_dump(by_alias=True)["pop"] == 0.72


def test_custom_trade_count():
    payload = json.dumps({"trades": [make_trade(t) for t in TICKERS[:3]]})

    assert isinstance(validate_trade_payload(payload, trade_count=3), TradesAccepted)
