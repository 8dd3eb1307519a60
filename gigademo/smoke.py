"""Smoke checks against a running gateway.

Runs the four checks of the demo's test page in order: configuration,
connection, chat, and empty-conversation rejection.

Usage:
    gigademo-smoke --base-url http://localhost:8000
"""

import argparse
import asyncio
import sys
from dataclasses import dataclass

import httpx

DEFAULT_BASE_URL = "http://localhost:8000"
TEST_MESSAGE = "Hello! This is a test message."


@dataclass
class SmokeResult:
    name: str
    status: str  # "success" | "error"
    message: str

    @property
    def ok(self) -> bool:
        return self.status == "success"


async def check_configuration(client: httpx.AsyncClient) -> tuple[bool, str]:
    data = (await client.get("/api/config")).json()
    if data.get("success") and data.get("config"):
        return True, "Configuration loaded successfully"
    return False, "Failed to load configuration"


async def check_connection(client: httpx.AsyncClient) -> tuple[bool, str]:
    data = (await client.post("/api/config")).json()
    if data.get("connected"):
        return True, "Successfully connected to GigaChat API"
    return False, f"Connection failed: {data.get('error') or 'Unknown error'}"


async def check_chat(client: httpx.AsyncClient) -> tuple[bool, str]:
    resp = await client.post(
        "/api/chat",
        json={"messages": [{"role": "user", "content": TEST_MESSAGE}]},
    )
    if not resp.is_success:
        return False, f"HTTP {resp.status_code}: {resp.reason_phrase}"
    if resp.json().get("choices"):
        return True, "Chat endpoint working correctly"
    return False, "Invalid response from chat endpoint"


async def check_error_handling(client: httpx.AsyncClient) -> tuple[bool, str]:
    resp = await client.post("/api/chat", json={"messages": []})
    if resp.status_code == 400:
        return True, "Error handling works correctly (400 Bad Request)"
    return False, f"Expected 400, got {resp.status_code}"


CHECKS = (
    ("API Configuration", check_configuration),
    ("API Connection", check_connection),
    ("Chat Endpoint", check_chat),
    ("Error Handling", check_error_handling),
)


async def run_smoke(client: httpx.AsyncClient) -> list[SmokeResult]:
    """Run every check in order; a check that blows up is reported, not raised."""
    results = []
    for name, check in CHECKS:
        try:
            ok, message = await check(client)
        except (httpx.HTTPError, ValueError) as e:
            ok, message = False, f"Error: {e}"
        results.append(SmokeResult(name, "success" if ok else "error", message))
    return results


async def _main(base_url: str, timeout: float) -> int:
    async with httpx.AsyncClient(base_url=base_url, timeout=timeout) as client:
        results = await run_smoke(client)

    for r in results:
        marker = "PASS" if r.ok else "FAIL"
        print(f"[{marker}] {r.name}: {r.message}")
    return 0 if all(r.ok for r in results) else 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Smoke-test a running GigaChat demo gateway")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Gateway root URL")
    parser.add_argument("--timeout", type=float, default=60.0, help="Per-request timeout in seconds")
    args = parser.parse_args(argv)
    return asyncio.run(_main(args.base_url, args.timeout))


if __name__ == "__main__":
    sys.exit(main())
