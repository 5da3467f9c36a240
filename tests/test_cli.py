from agentic_invest.__main__ import ProgressPrinter, build_parser, format_trade_table
from agentic_invest.pipeline.models import StageOutput, TradeRecommendation
from agentic_invest.pipeline.stages import Stage
from agentic_invest.pipeline.state import SessionStore

from conftest import make_trade


def test_run_accepts_strategy_options():
    parser = build_parser()

    args = parser.parse_args(["run", "--strategy", "Income focus"])
    assert args.strategy == "Income focus"
    assert args.strategy_file is None

    args = parser.parse_args(["collect", "PLTR", "SOFI", "--out", "/tmp/x"])
    assert args.tickers == ["PLTR", "SOFI"]
    assert args.out == "/tmp/x"

    args = parser.parse_args(["serve", "--port", "9000"])
    assert args.port == 9000
    assert args.host == "127.0.0.1"


def test_trade_table_lists_every_trade():
    trades = [TradeRecommendation.model_validate(make_trade(t)) for t in ("PLTR", "SOFI")]

    table = format_trade_table(trades)

    lines = table.splitlines()
    assert len(lines) == 4
    assert lines[2].startswith("PLTR")
    assert "72%" in lines[2]


def test_progress_printer_reports_each_stage_once(capsys):
    store = SessionStore()
    store.subscribe(ProgressPrinter())

    store.begin_run("s")
    store.enter_stage(Stage.TREND_DETECTION)
    store.record_output(Stage.TREND_DETECTION, StageOutput(text="Identified PLTR"))
    store.enter_stage(Stage.FINANCIAL_SUMMARY)

    out = capsys.readouterr().out
    assert out.count("Enhanced Twitter Agent") == 1
    assert out.count("Identified PLTR") == 1
    assert "[2/5] Finance Data Agent" in out
