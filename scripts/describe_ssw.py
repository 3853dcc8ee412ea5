#!/usr/bin/env python3
"""
Print the operations published by the SSW sswCotacaoColeta WSDL and the
parts (argument names, in order) each operation expects.

Usage:
    python scripts/describe_ssw.py [--wsdl URL]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List

sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx
from bs4 import BeautifulSoup

from src.utils.config_loader import load_ssw_config

logger = logging.getLogger(__name__)


def _local(name: str) -> str:
    return (name or "").rsplit(":", 1)[-1]


def describe(wsdl_text: str) -> Dict[str, List[str]]:
    """Map each portType operation to the ordered part names of its input message."""
    soup = BeautifulSoup(wsdl_text, "html.parser")

    messages: Dict[str, List[str]] = {}
    for message in soup.find_all(lambda t: _local(t.name) == "message"):
        parts = message.find_all(lambda t: _local(t.name) == "part")
        messages[message.get("name", "")] = [p.get("name", "") for p in parts]

    operations: Dict[str, List[str]] = {}
    for port_type in soup.find_all(lambda t: _local(t.name) == "porttype"):
        for operation in port_type.find_all(lambda t: _local(t.name) == "operation"):
            input_tag = operation.find(lambda t: _local(t.name) == "input")
            message_name = _local(input_tag.get("message", "")) if input_tag else ""
            operations[operation.get("name", "")] = messages.get(message_name, [])
    return operations


def main() -> int:
    parser = argparse.ArgumentParser(description="Describe the SSW SOAP service")
    parser.add_argument("--wsdl", default=None, help="WSDL URL (default: configured endpoint + ?wsdl)")
    parser.add_argument("--timeout", type=float, default=20.0)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    wsdl_url = args.wsdl or f"{load_ssw_config().endpoint}?wsdl"
    try:
        response = httpx.get(wsdl_url, timeout=args.timeout)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("Could not fetch WSDL from %s: %s", wsdl_url, e)
        return 1

    operations = describe(response.text)
    if not operations:
        print(f"No operations found in {wsdl_url}")
        return 1

    for name, parts in operations.items():
        print(f"{name}({', '.join(parts)})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
