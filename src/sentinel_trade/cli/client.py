"""CLI client for the SentinelTrade HTTP API.

Usage:
  poetry run sentinel-cli health
  poetry run sentinel-cli alerts set 42 polkadot 5.0 --direction above
  poetry run sentinel-cli alerts list 42
  poetry run sentinel-cli webhooks test https://example.com/hook
  poetry run sentinel-cli prices get polkadot
"""
import argparse
import json
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def _show(r: httpx.Response) -> int:
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.get("/"))


def cmd_alerts_set(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {"symbol": args.symbol, "target_price": args.price, "direction": args.direction}
    return _show(client.put(f"/alerts/{args.user_id}", json=body))


def cmd_alerts_list(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/alerts/{args.user_id}")
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} alerts for user {args.user_id}")
    print_json(data)
    return 0


def cmd_alerts_remove(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(
        client.delete(
            f"/alerts/{args.user_id}/{args.symbol}", params={"direction": args.direction}
        )
    )


def cmd_alerts_clear(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.delete(f"/alerts/{args.user_id}"))


def cmd_portfolio_get(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.get(f"/portfolio/{args.user_id}"))


def cmd_portfolio_set(client: httpx.Client, args: argparse.Namespace) -> int:
    holdings: dict[str, float] = {}
    for item in args.holdings:
        symbol, _, amount = item.partition("=")
        holdings[symbol] = float(amount)
    return _show(client.put(f"/portfolio/{args.user_id}", json={"holdings": holdings}))


def cmd_webhooks_set(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.put(f"/webhooks/{args.user_id}", json={"url": args.url}))


def cmd_webhooks_get(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.get(f"/webhooks/{args.user_id}"))


def cmd_webhooks_remove(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.delete(f"/webhooks/{args.user_id}"))


def cmd_webhooks_test(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.post("/webhooks/test", json={"url": args.url}))


def cmd_prices_get(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.get(f"/prices/{args.symbol}"))


def cmd_prices_history(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/prices/{args.symbol}/history", params={"days": args.days})
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} history points for {args.symbol}")
    print_json(data[: args.head] if args.head else data)
    return 0


def cmd_prices_gainers(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.get("/prices/top/gainers", params={"limit": args.limit}))


def cmd_prices_monitor(client: httpx.Client, args: argparse.Namespace) -> int:
    return _show(client.post("/prices/monitor", json={"symbols": args.symbols}))


def cmd_prices_poll(client: httpx.Client, _: argparse.Namespace) -> int:
    return _show(client.post("/prices/poll"))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Call the SentinelTrade API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8001",
        help="API base URL (default: http://localhost:8001)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # health
    subparsers.add_parser("health", help="GET / health check")

    # alerts
    alerts = subparsers.add_parser("alerts", help="Price alerts (/alerts)")
    alerts_sub = alerts.add_subparsers(dest="alerts_cmd", required=True)
    p = alerts_sub.add_parser("set", help="PUT /alerts/{user_id}")
    p.add_argument("user_id", type=int)
    p.add_argument("symbol", help="CoinGecko ID (e.g. polkadot)")
    p.add_argument("price", type=float, help="Target price")
    p.add_argument("--direction", choices=["above", "below"], default="above")
    p = alerts_sub.add_parser("list", help="GET /alerts/{user_id}")
    p.add_argument("user_id", type=int)
    p = alerts_sub.add_parser("remove", help="DELETE /alerts/{user_id}/{symbol}")
    p.add_argument("user_id", type=int)
    p.add_argument("symbol")
    p.add_argument("--direction", choices=["above", "below"], default="above")
    p = alerts_sub.add_parser("clear", help="DELETE /alerts/{user_id}")
    p.add_argument("user_id", type=int)

    # portfolio
    portfolio = subparsers.add_parser("portfolio", help="Holdings (/portfolio)")
    portfolio_sub = portfolio.add_subparsers(dest="portfolio_cmd", required=True)
    p = portfolio_sub.add_parser("get", help="GET /portfolio/{user_id}")
    p.add_argument("user_id", type=int)
    p = portfolio_sub.add_parser("set", help="PUT /portfolio/{user_id}")
    p.add_argument("user_id", type=int)
    p.add_argument("holdings", nargs="+", metavar="SYMBOL=AMOUNT")

    # webhooks
    webhooks = subparsers.add_parser("webhooks", help="Webhooks (/webhooks)")
    webhooks_sub = webhooks.add_subparsers(dest="webhooks_cmd", required=True)
    p = webhooks_sub.add_parser("set", help="PUT /webhooks/{user_id}")
    p.add_argument("user_id", type=int)
    p.add_argument("url")
    p = webhooks_sub.add_parser("get", help="GET /webhooks/{user_id}")
    p.add_argument("user_id", type=int)
    p = webhooks_sub.add_parser("remove", help="DELETE /webhooks/{user_id}")
    p.add_argument("user_id", type=int)
    p = webhooks_sub.add_parser("test", help="POST /webhooks/test")
    p.add_argument("url")

    # prices
    prices = subparsers.add_parser("prices", help="Prices (/prices)")
    prices_sub = prices.add_subparsers(dest="prices_cmd", required=True)
    p = prices_sub.add_parser("get", help="GET /prices/{symbol}")
    p.add_argument("symbol", help="CoinGecko ID")
    p = prices_sub.add_parser("history", help="GET /prices/{symbol}/history")
    p.add_argument("symbol", help="CoinGecko ID")
    p.add_argument("--days", type=int, default=30, help="Days of history (default: 30)")
    p.add_argument("--head", type=int, default=0, help="Show only first N points (0 = all)")
    p = prices_sub.add_parser("gainers", help="GET /prices/top/gainers")
    p.add_argument("--limit", type=int, default=10, help="Max results (default: 10)")
    p = prices_sub.add_parser("monitor", help="POST /prices/monitor")
    p.add_argument("symbols", nargs="+")
    prices_sub.add_parser("poll", help="POST /prices/poll")
    return parser


HANDLERS = {
    "alerts": {
        "set": cmd_alerts_set,
        "list": cmd_alerts_list,
        "remove": cmd_alerts_remove,
        "clear": cmd_alerts_clear,
    },
    "portfolio": {"get": cmd_portfolio_get, "set": cmd_portfolio_set},
    "webhooks": {
        "set": cmd_webhooks_set,
        "get": cmd_webhooks_get,
        "remove": cmd_webhooks_remove,
        "test": cmd_webhooks_test,
    },
    "prices": {
        "get": cmd_prices_get,
        "history": cmd_prices_history,
        "gainers": cmd_prices_gainers,
        "monitor": cmd_prices_monitor,
        "poll": cmd_prices_poll,
    },
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    base_url = args.base_url.rstrip("/")

    cmd = args.command
    if cmd == "health":
        handler = cmd_health
    else:
        handler = HANDLERS[cmd][getattr(args, f"{cmd}_cmd")]

    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
