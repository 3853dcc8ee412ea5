#!/usr/bin/env python3
"""
Run a quotation -> collection request round trip and print each stage to the terminal.
Shows the inbound payload, the (masked) envelope sent, and the result of each call.

Uses the mock SSW client unless --real is given (then SSW_* env vars / config apply).

Usage (from repo root):
  python scripts/run_quote_demo.py [--payload quote.json] [--real]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv

load_dotenv()

from src.integrations.clients.mocks.ssw import MockSswClient
from src.integrations.clients.real_http.ssw import SswSoapClient
from src.integrations.freight.classifier import mask_fields
from src.integrations.freight.engine import FreightEngine
from src.integrations.freight.errors import TransportError
from src.utils.config_loader import load_ssw_config

DEMO_PAYLOAD = {
    "domain": "DEMO",
    "login": "demo",
    "password": "demo-password",
    "payerPassword": "1234",
    "payerDocument": "123.456.789-09",
    "originPostalCode": "01310-100",
    "destinationPostalCode": "30140-071",
    "merchandiseValue": "1.500,00",
    "weight": "23",
    "height": "0,5",
    "width": "0,4",
    "length": "1",
    "quantity": 2,
    "ciffob": "cif",
}


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


async def main() -> int:
    parser = argparse.ArgumentParser(description="SSW quotation demo")
    parser.add_argument("--payload", type=Path, default=None, help="JSON file with a quotation payload")
    parser.add_argument("--real", action="store_true", help="Call the real SSW endpoint")
    args = parser.parse_args()

    setup_logging()
    config = load_ssw_config()
    if args.real:
        transport = SswSoapClient(endpoint=config.endpoint, timeout_seconds=config.timeout_seconds)
    else:
        transport = MockSswClient()
    engine = FreightEngine(transport, config)

    payload = json.loads(args.payload.read_text(encoding="utf-8")) if args.payload else DEMO_PAYLOAD
    print_stage("1. Quotation payload", {k: ("***" if "password" in k.lower() else v) for k, v in payload.items()})

    try:
        quote = await engine.quote(payload)
    except TransportError as e:
        print_stage("Transport failure", e.to_dict())
        return 1

    if isinstance(transport, MockSswClient) and transport.calls:
        print_stage("2. cotarSite envelope (masked)", mask_fields(transport.calls[-1][0]))
    print_stage("3. Quotation result", quote.to_dict())
    if not quote.ok:
        return 1

    collection_payload = {
        "domain": payload.get("domain"),
        "login": payload.get("login"),
        "password": payload.get("password"),
        "quotationNumber": quote.quotation_number,
        "token": quote.token,
        "requester": "Demo requester",
        "date": (date.today() + timedelta(days=1)).isoformat(),
        "time": "padrão",
    }
    try:
        collection = await engine.request_collection(collection_payload)
    except TransportError as e:
        print_stage("Transport failure", e.to_dict())
        return 1

    print_stage("4. Collection result", collection.to_dict())
    return 0 if collection.ok else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
