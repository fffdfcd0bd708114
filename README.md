# arbsim

`arbsim` simulates hunting for arbitrage between decentralised exchanges. It
also contains an executor that submits transactions to a StatelessVM service,
with retries, a timeout and a mock fallback, and a health check for that
service.

The package has three modules:

- `arbsim.arbitrage` generates simulated DEX pair data. It finds price gaps
  between exchanges that quote the same token pair and sizes a flash loan for
  each gap. Each opportunity is priced net of the flash-loan fee and gas. The
  module can run a monitoring loop that keeps trading statistics.
- `arbsim.executor` provides `StatelessVmExecutor`. It submits a
  `StatelessTxRequest`, checks the security-verification result, and retries
  failures with exponential backoff. When the endpoint cannot be reached, it
  switches to mock mode.
- `arbsim.health` checks a StatelessVM service through its `/health` endpoint.

The package depends only on the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The arbitrage demo

```
arbsim-demo
```

The demo watches a fixed set of USDC/WAVAX, WETH/WAVAX and USDT/WAVAX pairs on
TraderJoe, Pangolin and SushiSwap. In every cycle it does two things:

- It prints each opportunity it finds.
- It executes the one with the highest net profit, provided the minimum
  interval since the last trade has passed.

At the end it prints a summary with these figures:

- opportunities detected
- trades executed
- failed trades
- total profit and the largest single profit
- gas spent
- net profit after gas

Options:

- `--cycles N`: the number of monitoring cycles. The default is 5.
- `--interval SECONDS`: the pause between cycles. The default is 5.
- `--min-trade-interval SECONDS`: the minimum time between trades. The default
  is 60.

The trading rules are fixed:

- The price gap must be greater than 1%.
- The flash loan is 30% of the smaller pool's liquidity.
- The loan fee is 0.09% of the loan.
- Gas costs a flat $35.
- Net profit must be greater than $20.

A simulated execution succeeds when the opportunity's confidence is above 0.2.

### From Python

```python
from arbsim.arbitrage import detect_arbitrage_opportunities, run_demo

pairs = [
    ("traderjoe", "0x9Ad6C38BE94206cA50bb0d90783181662f0Cfa10"),
    ("pangolin", "0xf4003F4efBE8691B60249E6afbD307aBE7758adb"),
]
for opportunity in detect_arbitrage_opportunities(pairs):
    print(opportunity.source_dex, "->", opportunity.target_dex, opportunity.net_profit_usd)

stats = run_demo(pairs, cycles=2, poll_interval=0, min_trade_interval=0)
print(stats.report())
```

- `simulate_fetch_dex_pair(dex, pair_address)` returns a `DexPair`. The price
  depends only on the exchange name, the first character of the address and the
  length of the address, so the same input always gives the same result.
- `detect_arbitrage_opportunities(pairs)` returns a list of
  `ArbitrageOpportunity` and prints each opportunity it finds.
- `run_demo(pairs, cycles, poll_interval, min_trade_interval)` returns a
  `TradingStats`. `report()` formats it as text.

## Checking a StatelessVM service

```
arbsim-health [URL] [--timeout SECONDS]
```

The command sends a GET request to `<URL>/health`. If no URL is given, it uses
the `STATELESSVM_URL` environment variable, and if that is unset it uses
`http://localhost:7548`. It logs the response body and exits with status 0 when
the service answers with a 2xx status, or 1 when it does not.

In Python, `check_health(url, timeout)` returns a `HealthReport` with the
endpoint `url`, the `status` and the `body`. On an error status or a connection
failure it raises `HealthCheckError`. The exception's `status` and `body` hold
the response when there is one.

## Executing transactions

```python
import asyncio
from arbsim.executor import StatelessVmExecutor, StatelessTxRequest

executor = StatelessVmExecutor("https://vm.example.com", 30000, 3, 1000)
request = StatelessTxRequest(
    from_address="0x0000000000000000000000000000000000000001",
    to="0x0000000000000000000000000000000000000002",
    value="0",
    data="0x",
    gas_limit="200000",
    gas_price="5000000000",
)
response = asyncio.run(executor.execute_transaction(request))
print(response.tx_hash, executor.status, executor.metrics.total_time_ms)
```

`StatelessVmExecutor` takes the following arguments:

- the service URL
- the witness-generation timeout, in milliseconds
- the maximum number of attempts
- the base backoff, in milliseconds
- an optional `client`: any object with an async
  `execute_transaction(tx_request)` method

Without a client, the executor POSTs the request as JSON to `<url>/execute`.

`execute_transaction` is a coroutine. It returns a `StatelessTxResponse`. An
attempt fails in any of these cases:

- the client raises an error
- the call times out
- security verification does not pass
- the status is not `"success"`

A failed attempt is retried after `backoff * 2**(attempt - 1)` milliseconds.
When every attempt has failed, the executor looks at the last error. If it
mentions `404 Not Found`, `connection` or `timed out`, the executor enables
mock mode and returns a simulated response. Otherwise it raises
`ExecutionError`.

A URL that contains `localhost` or `local-mock` starts in mock mode. You can
also switch to mock mode with `enable_mock_mode()`. In mock mode the response
has these contents:

- status `"success"`
- a random transaction hash
- a passed security verification, when the request asked for one

`status` gives the current `ExecutionStatus`, `metrics` gives the
`PerformanceMetrics` of the last run, and `use_mock` tells whether mock mode is
on.

## What this package does not do

The package reads no real market data and sends no real trades. The arbitrage
figures are simulated, and the demo never talks to an exchange or a chain. The
executor submits single transactions only. It does not sign transactions, manage
wallets, or submit bundles or atomic sequences.