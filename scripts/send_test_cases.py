#!/usr/bin/env python3
"""
Send cases from examples/cases to the Case API.

Usage:
    # Send all case files once
    python scripts/send_test_cases.py

    # Send files one by one with intervals
    python scripts/send_test_cases.py --interval 30

    # Also assign a confirm link to every case that was sent
    python scripts/send_test_cases.py --link-base https://confirm.example.org/cases
"""

import argparse
import json
import os
import time
from pathlib import Path

import requests


def get_api_url():
    """Get API URL from environment variables."""
    host = os.environ.get("API_HOST", "localhost")
    port = os.environ.get("API_PORT", 8000)
    return os.environ.get("CASE_API_URL", f"http://{host}:{port}")


def get_headers():
    token = os.environ.get("CASES_TOKEN")
    return {"x-cases-token": token} if token else {}


def send_cases(cases, api_url: str) -> bool:
    """Post one case or a list of cases to the bulk insert route."""
    try:
        response = requests.post(
            f"{api_url}/api/cases",
            json=cases,
            headers=get_headers(),
            timeout=30
        )

        if response.status_code == 200:
            print(f"Cases accepted: {response.json()['count']}")
            return True
        else:
            print(f"Failed: {response.status_code} - {response.text[:200]}")
            return False

    except requests.exceptions.RequestException as e:
        print(f"Request failed: {e}")
        return False


def assign_link(case_id, link: str, api_url: str) -> bool:
    try:
        response = requests.post(
            f"{api_url}/api/caselink",
            json={"caseId": case_id, "link": link},
            timeout=30
        )
        if response.status_code == 200:
            print(f"Link assigned to case {case_id}: {link}")
            return True
        print(f"Link for case {case_id} failed: {response.status_code} - {response.text[:200]}")
        return False
    except requests.exceptions.RequestException as e:
        print(f"Request failed: {e}")
        return False


def health_check(api_url: str) -> bool:
    """Check if the Case API is available."""
    try:
        response = requests.get(f"{api_url}/health", timeout=5)
        if response.status_code == 200:
            print(f"Case API healthy at {api_url} (store: {response.json().get('store_backend')})")
            return True
        else:
            print(f"Case API unhealthy: {response.status_code}")
            return False
    except requests.exceptions.RequestException as e:
        print(f"Cannot reach Case API at {api_url}: {e}")
        return False


def main():
    parser = argparse.ArgumentParser(
        description="Send cases from examples/cases to the Case API"
    )

    parser.add_argument(
        "--interval",
        type=int,
        default=0,
        help="Interval in seconds between files (default: 0 - send all at once)"
    )

    parser.add_argument(
        "--link-base",
        type=str,
        default=None,
        help="Assign <link-base>/<id> as confirm link to each sent case"
    )

    args = parser.parse_args()

    script_dir = Path(__file__).parent
    project_root = script_dir.parent
    examples_dir = project_root / "examples" / "cases"

    api_url = get_api_url()

    print(f"Examples directory: {examples_dir}")
    print(f"API URL: {api_url}\n")

    if not health_check(api_url):
        print("\nAPI not available. Start it with:")
        print("   case-api")
        return

    case_files = sorted(examples_dir.glob("*.json"))

    if not case_files:
        print(f"No JSON files found in {examples_dir}")
        return

    print(f"Found {len(case_files)} file(s)\n")

    success_count = 0
    for i, case_file in enumerate(case_files):
        print(f"Sending: {case_file.name}")

        try:
            with open(case_file, 'r', encoding='utf-8') as f:
                cases = json.load(f)
        except (OSError, ValueError) as e:
            print(f"Error loading {case_file.name}: {e}")
            continue

        if send_cases(cases, api_url):
            success_count += 1
            if args.link_base:
                for case in cases if isinstance(cases, list) else [cases]:
                    assign_link(case["id"], f"{args.link_base.rstrip('/')}/{case['id']}", api_url)

        if args.interval > 0 and i < len(case_files) - 1:
            time.sleep(args.interval)

    print(f"\nSent {success_count}/{len(case_files)} files successfully")


if __name__ == "__main__":
    main()
