#!/usr/bin/env python3
"""
tools/routectl.py: command-line client for the route mapper service.

Usage:
    python routectl.py list myapp
    python routectl.py map myapp --org acme --space prod
    python routectl.py map myapp --route acme-prod --route acme-stage
    python routectl.py unmap myapp acme-stage --delete
    python routectl.py --service http://localhost:8002 --token-file token.json list myapp

Endpoint and token are optional when the service was deployed with
defaults (MAPPER_CF_ENDPOINT / MAPPER_CF_TOKEN).

Exit status is 1 when the request is rejected or any route failed.
"""

import argparse
import json
import sys
from pathlib import Path

import requests

SERVICE_DEFAULT = "http://localhost:8002"


# ---------------------------------------------------------------------------
# API helpers
# ---------------------------------------------------------------------------

def call(base_url: str, operation: str, payload: dict) -> dict:
    """POST /routes/<operation> and return the JSON body. Raises on HTTP errors."""
    resp = requests.post(f"{base_url}/routes/{operation}", json=payload, timeout=120)
    if resp.status_code >= 400:
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        raise RuntimeError(f"{operation} rejected ({resp.status_code}): {detail}")
    return resp.json()


def parse_route(value: str) -> dict:
    """'acme-prod' → {"org": "acme", "space": "prod"} (split on the first '-')."""
    org, sep, space = value.partition("-")
    if not sep:
        raise argparse.ArgumentTypeError(f"route must look like ORG-SPACE: {value!r}")
    return {"org": org, "space": space}


def build_payload(args: argparse.Namespace) -> dict:
    payload: dict = {"appname": args.appname}
    if args.endpoint:
        payload["endpoint"] = args.endpoint
    if args.token_file:
        payload["token"] = json.loads(Path(args.token_file).read_text())

    if args.command == "map":
        if args.org:
            payload["org"] = args.org
        if args.space:
            payload["space"] = args.space
        if args.route:
            payload["routes"] = args.route
    elif args.command == "unmap":
        payload["routes"] = args.routes
        payload["deleteAfterUnmap"] = args.delete
    return payload


def print_status(status: list[dict]) -> int:
    """Print one line per route; return the number of failures."""
    failures = 0
    for entry in status:
        print(f"  {'✔' if entry['ok'] else '✖'} {entry['route']}")
        failures += not entry["ok"]
    return failures


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Route mapper client")
    parser.add_argument("--service", default=SERVICE_DEFAULT,
                        help=f"Route mapper base URL (default: {SERVICE_DEFAULT})")
    parser.add_argument("--endpoint", help="Cloud Foundry API endpoint")
    parser.add_argument("--token-file", help="JSON file holding the CF token object")

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="list routes mapped to an app")
    p_list.add_argument("appname")

    p_map = sub.add_parser("map", help="map org/space routes onto an app")
    p_map.add_argument("appname")
    p_map.add_argument("--org")
    p_map.add_argument("--space")
    p_map.add_argument("--route", action="append", type=parse_route,
                       help="ORG-SPACE route to map (repeatable)")

    p_unmap = sub.add_parser("unmap", help="unmap routes from an app")
    p_unmap.add_argument("appname")
    p_unmap.add_argument("routes", nargs="+")
    p_unmap.add_argument("--delete", action="store_true",
                         help="delete the route records, not just the mapping")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    base_url = args.service.rstrip("/")

    try:
        body = call(base_url, args.command, build_payload(args))
    except (RuntimeError, requests.RequestException) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.command == "list":
        print(f"{args.appname}: {len(body['routes'])} route(s)")
        for host in body["routes"]:
            print(f"  {host}")
        return 0

    failures = print_status(body["status"])
    print(f"OK={len(body['status']) - failures}  FAILED={failures}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
