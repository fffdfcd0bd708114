import pytest

from arbsim.arbitrage import (
    DEFAULT_PAIRS,
    ArbitrageOpportunity,
    DexPair,
    TradingStats,
    detect_arbitrage_opportunities,
    main,
    run_demo,
    simulate_execute_arbitrage,
    simulate_fetch_dex_pair,
)

ADDR = "0x9Ad6C38BE94206cA50bb0d90783181662f0Cfa10"


def _opportunity(net_profit=50.0, confidence=0.8, gas=35.0):
    return ArbitrageOpportunity(
        source_dex="pangolin",
        target_dex="traderjoe",
        token_pair="USDC/WAVAX",
        source_price=1.0,
        target_price=1.05,
        price_difference_percent=5.0,
        flash_loan_amount_usd=1000.0,
        estimated_profit_usd=net_profit + gas,
        estimated_gas_cost_usd=gas,
        flash_loan_fee_usd=0.0,
        net_profit_usd=net_profit,
        confidence=confidence,
    )


def test_fetch_token_mapping_by_leading_char():
    assert simulate_fetch_dex_pair("traderjoe", ADDR).key == "USDC/WAVAX"
    weth = simulate_fetch_dex_pair("traderjoe", "1" + ADDR[1:])
    assert (weth.token0, weth.token1) == ("WETH", "WAVAX")
    usdt = simulate_fetch_dex_pair("traderjoe", "2" + ADDR[1:])
    assert usdt.token0 == "USDT"
    other = simulate_fetch_dex_pair("traderjoe", "z" + ADDR[1:])
    assert (other.token0, other.token1) == ("TOKEN0", "TOKEN1")


def test_fetch_dex_factor_ratios():
    joe = simulate_fetch_dex_pair("traderjoe", ADDR)
    pangolin = simulate_fetch_dex_pair("pangolin", ADDR)
    sushi = simulate_fetch_dex_pair("sushiswap", ADDR)
    unknown = simulate_fetch_dex_pair("elsewhere", ADDR)
    assert pangolin.price / joe.price == pytest.approx(0.98)
    assert sushi.price / joe.price == pytest.approx(1.02)
    assert unknown.price == pytest.approx(joe.price)


def test_fetch_base_price_ratio_and_liquidity():
    usdc = simulate_fetch_dex_pair("traderjoe", ADDR)
    weth = simulate_fetch_dex_pair("traderjoe", "1" + ADDR[1:])
    assert weth.price / usdc.price == pytest.approx(1800.0)
    assert usdc.reserves1 == pytest.approx(usdc.reserves0 * usdc.price)
    assert usdc.liquidity_usd == usdc.reserves1


def test_fetch_empty_address_defaults_to_first_mapping():
    pair = simulate_fetch_dex_pair("traderjoe", "")
    assert isinstance(pair, DexPair)
    assert pair.key == "USDC/WAVAX"


def test_execute_depends_on_confidence():
    assert simulate_execute_arbitrage(_opportunity(confidence=0.8)) is True
    assert simulate_execute_arbitrage(_opportunity(confidence=0.1)) is False
    assert simulate_execute_arbitrage(_opportunity(confidence=0.2)) is False


def test_detect_needs_two_quotes():
    assert detect_arbitrage_opportunities([("traderjoe", ADDR)]) == []


def test_detect_identical_quotes_give_nothing():
    assert detect_arbitrage_opportunities([("traderjoe", ADDR), ("traderjoe", ADDR)]) == []


def test_detect_different_pairs_not_compared():
    pairs = [("traderjoe", ADDR), ("pangolin", "1" + ADDR[1:])]
    assert detect_arbitrage_opportunities(pairs) == []


def test_detect_buys_cheaper_sells_dearer(capsys):
    opps = detect_arbitrage_opportunities([("traderjoe", ADDR), ("pangolin", ADDR)])
    assert len(opps) == 1
    opp = opps[0]
    assert opp.source_dex == "pangolin"
    assert opp.target_dex == "traderjoe"
    assert opp.source_price < opp.target_price
    assert opp.token_pair == "USDC/WAVAX"
    assert "Found arbitrage opportunity: pangolin -> traderjoe" in capsys.readouterr().out


def test_detect_default_pairs_invariants():
    opps = detect_arbitrage_opportunities(DEFAULT_PAIRS)
    assert opps
    for opp in opps:
        assert opp.estimated_gas_cost_usd == 35.0
        assert opp.price_difference_percent > 1.0
        assert opp.net_profit_usd > 20.0
        assert opp.net_profit_usd == pytest.approx(
            opp.estimated_profit_usd - opp.flash_loan_fee_usd - opp.estimated_gas_cost_usd
        )
        assert opp.flash_loan_fee_usd == pytest.approx(opp.flash_loan_amount_usd * 0.0009)
        assert 0.5 <= opp.confidence <= 1.0
        assert opp.source_price < opp.target_price


def test_stats_record_success_and_failure():
    stats = TradingStats()
    stats.record_success(_opportunity(net_profit=50.0))
    stats.record_success(_opportunity(net_profit=30.0))
    stats.record_failure()
    assert stats.opportunities_executed == 2
    assert stats.failed_trades == 1
    assert stats.total_profit_usd == pytest.approx(80.0)
    assert stats.max_profit_usd == pytest.approx(50.0)
    assert stats.total_gas_spent_usd == pytest.approx(70.0)
    assert stats.net_profit_after_gas_usd == pytest.approx(10.0)


def test_stats_report_lines():
    stats = TradingStats()
    stats.record_success(_opportunity(net_profit=50.0))
    report = stats.report()
    assert report.splitlines()[0] == "Trading Statistics:"
    assert "- Trades executed: 1" in report
    assert "- Total profit: $50.00" in report
    assert "- Total gas spent: $35.00" in report


def test_run_demo_trades_every_cycle_without_interval():
    per_cycle = len(detect_arbitrage_opportunities(DEFAULT_PAIRS))
    stats = run_demo(DEFAULT_PAIRS, 3, 0, 0)
    assert stats.opportunities_detected == 3 * per_cycle
    assert stats.opportunities_executed + stats.failed_trades == 3


def test_run_demo_respects_trade_interval():
    stats = run_demo(DEFAULT_PAIRS, 3, 0, 60)
    assert stats.opportunities_executed + stats.failed_trades == 1


def test_run_demo_without_opportunities():
    stats = run_demo([("traderjoe", ADDR)], 2, 0, 0)
    assert stats.opportunities_detected == 0
    assert stats.opportunities_executed == 0


def test_main_prints_summary(capsys):
    assert main(["--cycles", "1", "--interval", "0"]) == 0
    out = capsys.readouterr().out
    assert "Starting AI Trading Agent - Real-Time Arbitrage Demo" in out
    assert "Trading Statistics:" in out
    assert "======= Cycle 1 =======" in out