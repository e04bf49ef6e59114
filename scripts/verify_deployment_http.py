#!/usr/bin/env python3
"""
Black Box Verification Script for a running deployment.

This script exercises every endpoint of a live deployment over HTTP:
health check, analyze, fetch-by-id, list, and the 404 path for an
unknown analysis.

Usage:
    python scripts/verify_deployment_http.py <BASE_URL>

Example:
    python scripts/verify_deployment_http.py http://localhost:3001
"""
import sys
from datetime import datetime
from uuid import uuid4

import httpx

SAMPLE_TRANSCRIPT = (
    "Sarah: I'll finish the API doc by Monday.\n"
    "Tom: Great. We also agreed to use Postgres for the new service.\n"
    "Sarah: We still need to decide on the hosting provider, let's revisit next week."
)


def log(message: str):
    """Log with timestamp."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] {message}")


def check(passed: bool, message: str) -> bool:
    symbol = "✅" if passed else "❌"
    log(f"{symbol} {message}")
    return passed


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/verify_deployment_http.py <BASE_URL>")
        sys.exit(1)

    base_url = sys.argv[1].rstrip("/")
    results = []

    log("=" * 60)
    log("BLACK BOX VERIFICATION")
    log("=" * 60)
    log(f"Target URL: {base_url}")

    with httpx.Client(base_url=base_url, timeout=120.0) as client:
        log("\n--- Step 1: Health ---")
        response = client.get("/health")
        results.append(check(
            response.status_code == 200 and response.json().get("status") == "ok",
            f"GET /health -> {response.status_code}"
        ))

        log("\n--- Step 2: Analyze ---")
        response = client.post("/api/transcripts/analyze", json={"transcript": SAMPLE_TRANSCRIPT})
        analyzed = response.status_code == 200
        results.append(check(analyzed, f"POST /api/transcripts/analyze -> {response.status_code}"))
        if not analyzed:
            log(f"Response body: {response.text}")
            sys.exit(1)

        analysis = response.json()
        analysis_id = analysis["id"]
        log(f"Analysis ID: {analysis_id}")
        log(f"Sentiment: {analysis['sentiment']}")
        log(f"Action items: {len(analysis['actionItems'])}, decisions: {len(analysis['decisions'])}")

        log("\n--- Step 3: Fetch by ID ---")
        response = client.get(f"/api/analyses/{analysis_id}")
        results.append(check(
            response.status_code == 200 and response.json() == analysis,
            f"GET /api/analyses/{analysis_id} -> {response.status_code}"
        ))

        log("\n--- Step 4: List ---")
        response = client.get("/api/analyses")
        listed = response.status_code == 200 and any(
            entry["id"] == analysis_id for entry in response.json()["analyses"]
        )
        results.append(check(listed, f"GET /api/analyses -> {response.status_code}, contains new analysis"))

        log("\n--- Step 5: Unknown ID ---")
        response = client.get(f"/api/analyses/{uuid4()}")
        results.append(check(response.status_code == 404, f"GET unknown analysis -> {response.status_code}"))

        log("\n--- Step 6: Validation ---")
        response = client.post("/api/transcripts/analyze", json={"transcript": "too short"})
        results.append(check(response.status_code == 400, f"POST short transcript -> {response.status_code}"))

    log("=" * 60)
    if all(results):
        log("ALL CHECKS PASSED")
    else:
        log(f"{results.count(False)} CHECK(S) FAILED")
        sys.exit(1)


if __name__ == "__main__":
    main()
